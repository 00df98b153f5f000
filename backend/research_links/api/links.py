import logging
from typing import List, Optional

import redis
from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..core.security import require_admin
from ..core.slugs import normalize_slug, validate_slug
from ..models import LinkMetadata
from ..schemas.link import LinkBulkCreate, LinkBulkUpdate, LinkCreate, LinkUpdate
from ..services import links as link_store
from ..services.search import matches_text
from ..store import get_store
from ..utils.dates import utc_now_iso
from ..utils.validators import is_valid_target, split_csv, join_tags

logger = logging.getLogger(__name__)

router = APIRouter()

TARGET_ERROR = "target must start with http(s)://"


def _summary(results: List[dict]) -> dict:
    failed = sum(1 for r in results if "error" in r)
    return {"succeeded": len(results) - failed, "failed": failed}


def _check_link(item: LinkCreate) -> Optional[str]:
    """Return an error message for an invalid link payload, None if valid"""
    if not normalize_slug(item.slug) or not item.target:
        return "slug and target required"

    is_valid, _ = validate_slug(item.slug)
    if not is_valid:
        return "invalid slug"

    is_valid, _ = is_valid_target(item.target)
    if not is_valid:
        return TARGET_ERROR

    return None


def _upsert_link(store: redis.Redis, item: LinkCreate) -> dict:
    key = normalize_slug(item.slug)
    existing = link_store.get_metadata(store, key)
    now = utc_now_iso()

    metadata = LinkMetadata(
        title=item.title or None,
        description=item.description or None,
        tags=split_csv(join_tags(item.tags)),
        permanent=bool(item.permanent),
        created_at=existing.created_at if existing and existing.created_at else now,
        updated_at=now,
        start_date=item.start_date or None,
        end_date=item.end_date or None,
        github_repo=item.github_repo or None,
    )
    link_store.save_link(store, key, item.target, metadata)

    return {
        "slug": key,
        "short": f"{settings.BASE_URL}/{key}",
        "target": item.target,
        "title": metadata.title,
        "description": metadata.description,
        "tags": ",".join(metadata.tags) or None,
        "startDate": metadata.start_date,
        "endDate": metadata.end_date,
        "githubRepo": metadata.github_repo,
    }


@router.post("/links")
async def create_links(
    payload: LinkBulkCreate,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Create links in bulk.

    Every item is validated on its own and reports its own result.
    """
    if not isinstance(payload.links, list):
        raise HTTPException(status_code=400, detail="links array required")

    results = []
    for raw in payload.links:
        if not isinstance(raw, dict):
            results.append({"slug": None, "error": "slug and target required"})
            continue

        item = LinkCreate.model_validate(raw)
        error_msg = _check_link(item)
        if error_msg:
            results.append({"slug": raw.get("slug"), "error": error_msg})
            continue
        results.append(_upsert_link(store, item))

    logger.info("Bulk create: %d items", len(results))

    return {"results": results, "summary": _summary(results)}


@router.put("/links")
async def put_link(
    item: LinkCreate,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Create or replace a single link.

    The original createdAt is kept when the link already exists.
    """
    error_msg = _check_link(item)
    if error_msg:
        raise HTTPException(status_code=400, detail=error_msg)

    return _upsert_link(store, item)


@router.get("/links")
async def get_links(
    slug: Optional[str] = None,
    tag: Optional[str] = None,
    source: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Get one link by slug, or list links with filtering and pagination.

    Listing is sorted by creation date, newest first.
    """
    if slug:
        key = normalize_slug(slug)
        link = link_store.get_link(store, key)
        return {
            "slug": key,
            "target": link.target if link else None,
            "clicks": link.clicks if link else link_store.get_clicks(store, key),
            "metadata": link.metadata.as_dict() if link else None,
        }

    limit = min(limit, 200)
    results = []
    for link in link_store.get_all_links(store):
        meta = link.metadata

        if tag and tag not in meta.tags:
            continue
        if source and link.source != source:
            continue
        if search and not matches_text(search, meta.title, meta.description, meta.tags):
            continue

        results.append(link)

    results = link_store.sort_newest_first(results)
    total = len(results)

    return {
        "links": [link.as_admin_entry() for link in results[offset:offset + limit]],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
    }


@router.patch("/links")
async def update_links(
    payload: LinkBulkUpdate,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Apply one metadata update to several links.

    Only the fields present in `updates` are changed.
    """
    if (
        not isinstance(payload.slugs, list)
        or not all(isinstance(s, str) for s in payload.slugs)
        or not isinstance(payload.updates, dict)
    ):
        raise HTTPException(status_code=400, detail="slugs array and updates object required")

    updates = LinkUpdate.model_validate(payload.updates).model_dump(exclude_unset=True)

    if updates.get("target"):
        is_valid, _ = is_valid_target(updates["target"])
        if not is_valid:
            raise HTTPException(status_code=400, detail=TARGET_ERROR)

    results = []
    for slug in payload.slugs:
        key = normalize_slug(slug)
        link = link_store.get_link(store, key)

        if link is None:
            results.append({"slug": key, "error": "not found"})
            continue

        meta = link.metadata
        if "title" in updates:
            meta.title = updates["title"] or None
        if "description" in updates:
            meta.description = updates["description"] or None
        if "tags" in updates:
            meta.tags = split_csv(join_tags(updates["tags"]))
        if updates.get("permanent") is not None:
            meta.permanent = bool(updates["permanent"])
        if "start_date" in updates:
            meta.start_date = updates["start_date"] or None
        if "end_date" in updates:
            meta.end_date = updates["end_date"] or None
        if "github_repo" in updates:
            meta.github_repo = updates["github_repo"] or None
        meta.updated_at = utc_now_iso()

        if updates.get("target"):
            link_store.save_link(store, key, updates["target"], meta)
        else:
            link_store.save_metadata(store, key, meta)

        results.append({"slug": key, "updated": True, "metadata": meta.as_dict()})

    return {"results": results, "summary": _summary(results)}


@router.delete("/links")
async def delete_links(
    slug: Optional[str] = None,
    slugs: Optional[str] = None,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Delete one link (?slug=) or several (?slugs=a,b).

    Removes the link, its click counter and its metadata.
    """
    if slug:
        key = normalize_slug(slug)
        result = link_store.delete_link(store, key)
        return {"deleted": [key], **result}

    if slugs:
        deleted = []
        results = []
        for s in slugs.split(","):
            key = normalize_slug(s)
            if not key:
                continue
            result = link_store.delete_link(store, key)
            deleted.append(key)
            results.append({"key": key, **result})

        existed = sum(1 for r in results if r["existed"])
        return {
            "deleted": deleted,
            "results": results,
            "summary": {"succeeded": existed, "failed": len(results) - existed},
        }

    raise HTTPException(status_code=400, detail="slug or slugs parameter required")
