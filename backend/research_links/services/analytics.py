from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from ..core.slugs import SOURCES
from ..models import Link
from ..utils.dates import format_iso, parse_iso


def get_period_start(period: str, now: Optional[datetime] = None) -> datetime:
    """Get start datetime for given period"""
    now = now or datetime.now(timezone.utc)
    if period == "week":
        return now - timedelta(days=7)
    elif period == "month":
        return now - timedelta(days=30)
    elif period == "year":
        return now - timedelta(days=365)
    return datetime(2000, 1, 1, tzinfo=timezone.utc)  # all


def count_sources(links: List[Link]) -> Dict[str, int]:
    """Links per source"""
    counts = {source: 0 for source in SOURCES}
    for link in links:
        counts[link.source] += 1
    return counts


def count_tags(links: List[Link]) -> Counter:
    """Links per tag"""
    counts = Counter()
    for link in links:
        for tag in link.metadata.tags:
            if tag.strip():
                counts[tag.strip()] += 1
    return counts


def top_tags(counts: Counter, limit: int = 20) -> List[Tuple[str, int]]:
    # Stable on ties: first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:limit]


def get_overview(links: List[Link], period: str = "all", now: Optional[datetime] = None) -> dict:
    """Get aggregate statistics over all links"""
    now = now or datetime.now(timezone.utc)
    period_start = get_period_start(period, now)

    total_links = len(links)
    total_clicks = sum(link.clicks for link in links)
    tags = count_tags(links)

    recent = []
    for link in links:
        created_at = parse_iso(link.metadata.created_at)
        if created_at and created_at >= period_start:
            recent.append((created_at, link))
    recent.sort(key=lambda item: item[0], reverse=True)

    top = sorted(links, key=lambda link: link.clicks, reverse=True)[:10]

    return {
        "totalLinks": total_links,
        "totalClicks": total_clicks,
        "sources": count_sources(links),
        "tags": dict(tags),
        "recentActivity": [
            {"slug": link.slug, "clicks": link.clicks, "lastAccessed": format_iso(created_at)}
            for created_at, link in recent[:10]
        ],
        "topPerformers": [
            {"slug": link.slug, "clicks": link.clicks, "title": link.metadata.title}
            for link in top
        ],
        "period": period,
        "avgClicksPerLink": round(total_clicks / total_links, 2) if total_links > 0 else 0,
        "uniqueTags": len(tags),
        "periodStart": format_iso(period_start),
        "generatedAt": format_iso(now),
    }


def get_tag_stats(links: List[Link]) -> dict:
    """Get tag usage statistics"""
    tags = count_tags(links)
    return {
        "totalLinks": len(links),
        "totalClicks": sum(link.clicks for link in links),
        "sources": count_sources(links),
        "topTags": top_tags(tags),
        "uniqueTags": len(tags),
    }


def suggest_tags(links: List[Link], prefix: str = "", limit: int = 10) -> List[str]:
    """Sorted tags starting with the prefix (case-insensitive)"""
    prefix_lower = prefix.lower()
    found = set()
    for link in links:
        for tag in link.metadata.tags:
            tag = tag.strip()
            if tag and tag.lower().startswith(prefix_lower):
                found.add(tag)
    return sorted(found)[:limit]
