from functools import cmp_to_key
from typing import List, Optional

from ..models import Link
from ..utils.dates import parse_iso

SORT_OPTIONS = ("clicks", "alphabetical-asc", "alphabetical-desc", "newest", "oldest")


def _name(link: Link) -> str:
    return link.metadata.title or link.slug


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def sort_links(links: List[Link], sort_by: Optional[str] = None) -> List[Link]:
    """
    Order links for the public directory.

    Date orderings fall back to name ordering when either side
    lacks a creation date.
    """
    if not sort_by or sort_by == "clicks":
        return sorted(links, key=lambda link: link.clicks, reverse=True)

    if sort_by == "alphabetical-asc":
        return sorted(links, key=lambda link: _name(link).lower())

    if sort_by == "alphabetical-desc":
        return sorted(links, key=lambda link: _name(link).lower(), reverse=True)

    newest = sort_by == "newest"

    def compare(a: Link, b: Link) -> int:
        created_a = parse_iso(a.metadata.created_at)
        created_b = parse_iso(b.metadata.created_at)
        if created_a and created_b:
            return _cmp(created_b, created_a) if newest else _cmp(created_a, created_b)
        if newest:
            return _cmp(_name(b).lower(), _name(a).lower())
        return _cmp(_name(a).lower(), _name(b).lower())

    return sorted(links, key=cmp_to_key(compare))
