from typing import Optional

import redis
from fastapi import APIRouter, Depends, HTTPException

from ..services import collections as collection_store
from ..services import links as link_store
from ..services.directory import SORT_OPTIONS, sort_links
from ..store import get_store

router = APIRouter()


@router.get("/directory")
async def get_directory(
    sort: Optional[str] = None,
    store: redis.Redis = Depends(get_store)
):
    """
    Public listing of all links.

    Sorted by clicks unless another order is requested.
    """
    if sort and sort not in SORT_OPTIONS:
        raise HTTPException(
            status_code=400,
            detail=f"sort must be one of: {', '.join(SORT_OPTIONS)}"
        )

    links = sort_links(link_store.get_all_links(store), sort)
    return {
        "links": [link.as_directory_entry() for link in links],
        "total": len(links),
    }


@router.get("/directory/collections")
async def get_directory_collections(store: redis.Redis = Depends(get_store)):
    """Public listing of collections with their links resolved"""
    collections = collection_store.list_collections(store)
    links = link_store.get_all_links(store)
    resolved = collection_store.resolve_collections(collections, links)
    return {"collections": resolved, "total": len(resolved)}
