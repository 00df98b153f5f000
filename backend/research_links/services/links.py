import logging
from datetime import datetime, timezone
from typing import List, Optional

import redis

from ..models import Link, LinkMetadata
from ..store import link_key, meta_key, count_key
from ..utils.dates import parse_iso

logger = logging.getLogger(__name__)

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def _to_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def list_slugs(store: redis.Redis) -> List[str]:
    """All slugs that have a link:<slug> key"""
    prefix = len(link_key(""))
    return [key[prefix:] for key in store.scan_iter(match=link_key("*"))]


def get_link(store: redis.Redis, slug: str) -> Optional[Link]:
    """Load one link with its click count and metadata"""
    pipe = store.pipeline(transaction=False)
    pipe.get(link_key(slug))
    pipe.get(count_key(slug))
    pipe.hgetall(meta_key(slug))
    target, clicks, meta = pipe.execute()

    if target is None:
        return None

    return Link(
        slug=slug,
        target=target,
        clicks=_to_int(clicks),
        metadata=LinkMetadata.from_hash(meta or {}),
    )


def get_clicks(store: redis.Redis, slug: str) -> int:
    return _to_int(store.get(count_key(slug)))


def get_all_links(store: redis.Redis) -> List[Link]:
    """
    Load every link in one pipelined round trip.

    Keys that disappear between the scan and the fetch are skipped.
    """
    slugs = list_slugs(store)
    if not slugs:
        return []

    pipe = store.pipeline(transaction=False)
    for slug in slugs:
        pipe.get(link_key(slug))
        pipe.get(count_key(slug))
        pipe.hgetall(meta_key(slug))
    replies = pipe.execute()

    links = []
    for i, slug in enumerate(slugs):
        target, clicks, meta = replies[i * 3:i * 3 + 3]
        if target is None:
            continue
        links.append(Link(
            slug=slug,
            target=target,
            clicks=_to_int(clicks),
            metadata=LinkMetadata.from_hash(meta or {}),
        ))

    return links


def get_metadata(store: redis.Redis, slug: str) -> Optional[LinkMetadata]:
    data = store.hgetall(meta_key(slug))
    if not data:
        return None
    return LinkMetadata.from_hash(data)


def link_exists(store: redis.Redis, slug: str) -> bool:
    return store.exists(link_key(slug)) > 0


def save_link(store: redis.Redis, slug: str, target: str, metadata: LinkMetadata) -> None:
    """Write the target and replace the metadata hash atomically"""
    pipe = store.pipeline(transaction=True)
    pipe.set(link_key(slug), target)
    pipe.delete(meta_key(slug))
    pipe.hset(meta_key(slug), mapping=metadata.to_hash())
    pipe.execute()


def save_metadata(store: redis.Redis, slug: str, metadata: LinkMetadata) -> None:
    pipe = store.pipeline(transaction=True)
    pipe.delete(meta_key(slug))
    pipe.hset(meta_key(slug), mapping=metadata.to_hash())
    pipe.execute()


def save_tags(store: redis.Redis, slug: str, tags: List[str]) -> None:
    store.hset(meta_key(slug), "tags", ",".join(tags))


def delete_link(store: redis.Redis, slug: str) -> dict:
    """Delete the link, its counter and its metadata"""
    pipe = store.pipeline(transaction=True)
    pipe.exists(link_key(slug))
    pipe.delete(link_key(slug))
    pipe.delete(count_key(slug))
    pipe.delete(meta_key(slug))
    existed, deleted_link, deleted_count, deleted_meta = pipe.execute()

    logger.info(
        "Deleted %s: link=%d count=%d meta=%d", slug, deleted_link, deleted_count, deleted_meta
    )

    return {
        "existed": existed > 0,
        "keysDeleted": {
            "link": deleted_link,
            "count": deleted_count,
            "meta": deleted_meta,
        },
    }


def increment_clicks(store: redis.Redis, slug: str) -> Optional[int]:
    """Count a click. Failures are logged and never raised."""
    try:
        return store.incr(count_key(slug))
    except redis.exceptions.RedisError as e:
        logger.warning("Failed to count click for %s: %s", slug, e)
        return None


def created_sort_key(link: Link) -> datetime:
    return parse_iso(link.metadata.created_at) or _EPOCH


def sort_newest_first(links: List[Link]) -> List[Link]:
    return sorted(links, key=created_sort_key, reverse=True)
