from typing import Literal

import redis
from fastapi import APIRouter, Depends, Query

from ..core.security import require_admin
from ..schemas.analytics import StatsOverview
from ..services import links as link_store
from ..services.analytics import get_overview
from ..store import get_store

router = APIRouter()


@router.get("/stats", response_model=StatsOverview)
async def get_stats(
    period: Literal["week", "month", "year", "all"] = Query("all"),
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Get overview statistics.

    Query params:
    - period: "week" | "month" | "year" | "all" (default: "all")
    """
    return get_overview(link_store.get_all_links(store), period)
