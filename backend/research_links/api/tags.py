from typing import Optional

import redis
from fastapi import APIRouter, Body, Depends, HTTPException

from ..core.security import require_admin
from ..schemas.analytics import TagStats
from ..schemas.tag import TagAssign, TagDelete, TagRename
from ..services import analytics
from ..services import links as link_store
from ..services import tags as tag_service
from ..store import get_store

router = APIRouter()


def _check_assign(payload: TagAssign) -> None:
    if not _is_str_list(payload.slugs) or not _is_str_list(payload.tags):
        raise HTTPException(status_code=400, detail="slugs (array) and tags (array) required")


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


@router.get("/tags")
async def get_tags(
    action: Optional[str] = None,
    prefix: str = "",
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Tag statistics (?action=stats) or prefix suggestions
    (?action=suggest&prefix=...).
    """
    if action == "stats":
        links = link_store.get_all_links(store)
        return TagStats(**analytics.get_tag_stats(links)).model_dump(by_alias=True)

    if action == "suggest":
        links = link_store.get_all_links(store)
        return {"suggestions": analytics.suggest_tags(links, prefix)}

    raise HTTPException(
        status_code=400,
        detail="Invalid action. Use ?action=stats or ?action=suggest&prefix=..."
    )


@router.post("/tags")
async def add_tags(
    payload: TagAssign,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Add tags to several links"""
    _check_assign(payload)

    updated = tag_service.add_tags(store, payload.slugs, payload.tags)
    return {
        "message": f"Added tags {', '.join(payload.tags)} to {updated} entries",
        "updated": updated,
    }


@router.patch("/tags")
async def remove_tags(
    payload: TagAssign,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Remove tags from several links"""
    _check_assign(payload)

    updated = tag_service.remove_tags(store, payload.slugs, payload.tags)
    return {
        "message": f"Removed tags {', '.join(payload.tags)} from {updated} entries",
        "updated": updated,
    }


@router.put("/tags")
async def rename_tag(
    payload: TagRename,
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Rename a tag on every link"""
    if not payload.old_tag or not payload.new_tag:
        raise HTTPException(status_code=400, detail="oldTag and newTag required")

    updated = tag_service.rename_tag(store, payload.old_tag, payload.new_tag)
    return {
        "message": f'Renamed tag "{payload.old_tag}" to "{payload.new_tag}" in {updated} entries',
        "updated": updated,
    }


@router.delete("/tags")
async def delete_tag(
    payload: TagDelete = Body(...),
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Remove a tag from every link"""
    if not payload.tag:
        raise HTTPException(status_code=400, detail="tag required")

    updated = tag_service.delete_tag(store, payload.tag)
    return {
        "message": f'Removed tag "{payload.tag}" from {updated} entries',
        "updated": updated,
    }
