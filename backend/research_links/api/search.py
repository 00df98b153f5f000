from typing import Optional

import redis
from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.security import require_admin
from ..services import links as link_store
from ..services.search import search_links
from ..store import get_store

router = APIRouter()


@router.get("/search")
async def search(
    q: Optional[str] = None,
    tag: Optional[str] = None,
    source: Optional[str] = None,
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Search links by text, tag and source.

    Results are ranked by relevance score, highest first.
    """
    if not q and not tag and not source:
        raise HTTPException(
            status_code=400,
            detail="At least one search parameter required: q (query), tag, or source"
        )

    limit = min(limit, 100)
    results = search_links(link_store.get_all_links(store), query=q, tag=tag, source=source)
    total = len(results)

    return {
        "query": q or None,
        "filters": {"tag": tag, "source": source},
        "results": results[offset:offset + limit],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "hasMore": offset + limit < total,
        },
    }
