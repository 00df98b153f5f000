import logging
from typing import Dict, List, Optional

import redis

from ..models import Collection, Link
from ..store import collection_key
from ..utils.dates import utc_now_iso
from ..utils.validators import join_tags

logger = logging.getLogger(__name__)


def list_collections(store: redis.Redis) -> List[Collection]:
    prefix = len(collection_key(""))
    keys = list(store.scan_iter(match=collection_key("*")))
    if not keys:
        return []

    pipe = store.pipeline(transaction=False)
    for key in keys:
        pipe.hgetall(key)
    replies = pipe.execute()

    return [
        Collection.from_hash(key[prefix:], data)
        for key, data in zip(keys, replies)
        if data
    ]


def collection_exists(store: redis.Redis, collection_id: str) -> bool:
    return store.exists(collection_key(collection_id)) > 0


def create_collection(
    store: redis.Redis,
    collection_id: str,
    name: str,
    description: Optional[str] = None,
    projects=None,
    tags=None,
) -> None:
    now = utc_now_iso()
    store.hset(collection_key(collection_id), mapping={
        "name": name,
        "description": description or "",
        "projects": join_tags(projects),
        "tags": join_tags(tags),
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info("Collection created: %s", collection_id)


def update_collection(store: redis.Redis, collection_id: str, fields: Dict) -> None:
    """Apply a partial update; updatedAt is always refreshed"""
    updates = {}
    if "name" in fields:
        updates["name"] = fields["name"] or ""
    if "description" in fields:
        updates["description"] = fields["description"] or ""
    if "projects" in fields:
        updates["projects"] = join_tags(fields["projects"])
    if "tags" in fields:
        updates["tags"] = join_tags(fields["tags"])
    updates["updatedAt"] = utc_now_iso()

    store.hset(collection_key(collection_id), mapping=updates)
    logger.info("Collection updated: %s", collection_id)


def delete_collection(store: redis.Redis, collection_id: str) -> bool:
    deleted = store.delete(collection_key(collection_id))
    logger.info("Collection deleted: %s (existed=%s)", collection_id, bool(deleted))
    return bool(deleted)


def resolve_collections(collections: List[Collection], links: List[Link]) -> List[dict]:
    """
    Attach directory entries to each collection.

    Slugs with no matching link are dropped, and collections left
    with no projects are omitted.
    """
    by_slug = {link.slug: link for link in links}
    resolved = []

    for collection in collections:
        projects = [
            by_slug[slug].as_directory_entry()
            for slug in collection.projects
            if slug in by_slug
        ]
        if not projects:
            continue

        entry = collection.as_dict()
        entry["projects"] = projects
        resolved.append(entry)

    return resolved
