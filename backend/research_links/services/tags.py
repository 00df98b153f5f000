import logging
from typing import Iterable, List

import redis

from ..core.slugs import normalize_slug
from ..utils.validators import merge_tags
from . import links as link_store

logger = logging.getLogger(__name__)


def add_tags(store: redis.Redis, slugs: Iterable[str], tags: List[str]) -> int:
    """
    Add tags to the given links.

    Returns the number of links whose tag set grew.
    """
    tags = [t.strip() for t in tags if t and t.strip()]
    updated = 0

    for slug in slugs:
        key = normalize_slug(slug)
        link = link_store.get_link(store, key)
        if link is None:
            continue

        existing = link.metadata.tags
        merged = merge_tags(existing, tags)
        if len(merged) != len(existing):
            link_store.save_tags(store, key, merged)
            updated += 1

    logger.info("Added tags %s to %d links", tags, updated)
    return updated


def remove_tags(store: redis.Redis, slugs: Iterable[str], tags: List[str]) -> int:
    """Remove tags from the given links"""
    removed = {t.strip() for t in tags}
    updated = 0

    for slug in slugs:
        key = normalize_slug(slug)
        link = link_store.get_link(store, key)
        if link is None or not link.metadata.tags:
            continue

        existing = link.metadata.tags
        kept = [t for t in existing if t not in removed]
        if len(kept) != len(existing):
            link_store.save_tags(store, key, kept)
            updated += 1

    logger.info("Removed tags %s from %d links", tags, updated)
    return updated


def rename_tag(store: redis.Redis, old_tag: str, new_tag: str) -> int:
    """Rename a tag on every link that carries it"""
    old_tag = old_tag.strip()
    new_tag = new_tag.strip()
    updated = 0

    for link in link_store.get_all_links(store):
        existing = link.metadata.tags
        if old_tag not in existing:
            continue

        renamed = merge_tags([], [new_tag if t == old_tag else t for t in existing])
        if renamed != existing:
            link_store.save_tags(store, link.slug, renamed)
            updated += 1

    logger.info("Renamed tag %r to %r in %d links", old_tag, new_tag, updated)
    return updated


def delete_tag(store: redis.Redis, tag: str) -> int:
    """Remove a tag from every link"""
    tag = tag.strip()
    updated = 0

    for link in link_store.get_all_links(store):
        existing = link.metadata.tags
        kept = [t for t in existing if t != tag]
        if len(kept) != len(existing):
            link_store.save_tags(store, link.slug, kept)
            updated += 1

    logger.info("Deleted tag %r from %d links", tag, updated)
    return updated
