import re
from typing import List, Optional

from ..models import Link


def matches_text(query: str, title: Optional[str], description: Optional[str], tags: List[str]) -> bool:
    """Case-insensitive substring match against title, description or any tag"""
    query_lower = query.lower()
    if title and query_lower in title.lower():
        return True
    if description and query_lower in description.lower():
        return True
    return any(query_lower in tag.lower() for tag in tags)


def calculate_relevance(query: str, title: str, description: str, tags: List[str]) -> int:
    """
    Score an entry against a query.

    +10 if the title contains the query (+5 more if it starts with it),
    +5 if the description contains it, +3 per matching tag.
    """
    query_lower = query.lower()
    score = 0

    if title and query_lower in title.lower():
        score += 10
        if title.lower().startswith(query_lower):
            score += 5

    if description and query_lower in description.lower():
        score += 5

    for tag in tags:
        if query_lower in tag.lower():
            score += 3

    return score


def highlight_text(text: str, query: str) -> List[str]:
    """Literal occurrences of the query in the text, original casing kept"""
    if not text or not query:
        return []
    return re.findall(re.escape(query), text, flags=re.IGNORECASE)


def search_links(
    links: List[Link],
    query: Optional[str] = None,
    tag: Optional[str] = None,
    source: Optional[str] = None,
) -> List[dict]:
    """
    Filter and rank links.

    Without a query every surviving entry scores 1. The sort is stable,
    so equal scores keep scan order.
    """
    results = []

    for link in links:
        meta = link.metadata
        title = meta.title or ""
        description = meta.description or ""
        tags = meta.tags

        if source and link.source != source:
            continue
        if tag and tag not in tags:
            continue

        score = calculate_relevance(query, title, description, tags) if query else 1
        if query and score == 0:
            continue

        highlights = {
            "title": highlight_text(title, query) if query else [],
            "description": highlight_text(description, query) if query else [],
            "tags": [t for t in tags if query.lower() in t.lower()] if query else [],
        }

        results.append({
            "slug": link.slug,
            "target": link.target,
            "title": title or None,
            "description": description or None,
            "tags": tags,
            "source": link.source,
            "score": score,
            "highlights": highlights,
        })

    results.sort(key=lambda r: r["score"], reverse=True)
    return results
