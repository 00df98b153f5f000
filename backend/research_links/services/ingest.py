"""
Shared pieces of the ORCID and OpenReview importers.

Both sources are turned into ImportedWork records, deduplicated by
normalized title, and cached as link + metadata under a source-prefixed
slug. Metadata already stored for a slug wins over the fetched values,
so admin edits survive a re-import.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import redis

from ..models import Link, LinkMetadata
from ..utils.dates import utc_now_iso
from . import links as link_store

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_SPACES = re.compile(r"\s+")


@dataclass
class ImportedWork:
    """A publication fetched from an external source"""
    slug: str
    target: str
    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    # Comparable recency: (year, month, day) or a millisecond timestamp
    published: Tuple = ()
    proceedings: bool = False


def extract_value(field_value: Any) -> str:
    """Unwrap {"value": "..."} wrappers; plain strings pass through"""
    if isinstance(field_value, str):
        return field_value
    if isinstance(field_value, dict) and isinstance(field_value.get("value"), str):
        return field_value["value"]
    return ""


def extract_array_value(field_value: Any) -> List[str]:
    if isinstance(field_value, list):
        return field_value
    if isinstance(field_value, dict) and isinstance(field_value.get("value"), list):
        return field_value["value"]
    return []


def normalize_title(title: str) -> str:
    """Lowercase, keep letters/digits/spaces, collapse whitespace"""
    if not title:
        return ""
    return _SPACES.sub(" ", _NON_ALNUM.sub(" ", title.lower())).strip()


def dedupe_works(works: List[ImportedWork]) -> List[ImportedWork]:
    """
    Collapse works with the same normalized title.

    A proceedings variant beats any other; otherwise the most recent
    wins. Survivors keep the position of the first work in their group.
    Works without a usable title are never merged.
    """
    best: Dict[str, ImportedWork] = {}

    for i, work in enumerate(works):
        key = normalize_title(work.title) or f"\0{i}"
        current = best.get(key)
        if current is None or (work.proceedings, work.published) > (current.proceedings, current.published):
            best[key] = work

    dropped = len(works) - len(best)
    if dropped:
        logger.info("Dropped %d duplicate works", dropped)

    return list(best.values())


def cache_works(store: redis.Redis, works: List[ImportedWork]) -> List[dict]:
    """
    Store fetched works as links, keeping already stored metadata.

    Returns directory entries for every work.
    """
    entries = []

    for work in works:
        existing = link_store.get_metadata(store, work.slug)

        if existing is not None:
            link = link_store.get_link(store, work.slug) or Link(
                slug=work.slug,
                target=work.target,
                clicks=link_store.get_clicks(store, work.slug),
                metadata=existing,
            )
            meta = link.metadata
            meta.title = meta.title or work.title or None
            meta.description = meta.description or work.description or None
            meta.tags = meta.tags or list(work.tags)
            entries.append(link.as_directory_entry())
            continue

        metadata = LinkMetadata(
            title=work.title or None,
            description=work.description or None,
            tags=list(work.tags),
            permanent=False,
            created_at=utc_now_iso(),
        )
        link_store.save_link(store, work.slug, work.target, metadata)
        entries.append(Link(slug=work.slug, target=work.target, metadata=metadata).as_directory_entry())

    logger.info("Cached %d imported works", len(entries))
    return entries
