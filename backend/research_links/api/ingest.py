import redis
from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..core.security import require_admin
from ..services.openreview import get_openreview_submissions
from ..services.orcid import get_orcid_works
from ..store import get_store

router = APIRouter(prefix="/ingest")


@router.post("/orcid")
async def ingest_orcid(
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """
    Import works from the configured ORCID record.

    Already stored metadata is kept.
    """
    if not settings.ORCID_ID:
        raise HTTPException(status_code=400, detail="ORCID_ID is not configured")

    works = get_orcid_works(store, settings.ORCID_ID)
    return {"source": "orcid", "total": len(works), "works": works}


@router.post("/openreview")
async def ingest_openreview(
    store: redis.Redis = Depends(get_store),
    admin_key: str = Depends(require_admin)
):
    """Import submissions from the configured OpenReview profile"""
    if not settings.OPENREVIEW_ID:
        raise HTTPException(status_code=400, detail="OPENREVIEW_ID is not configured")

    works = get_openreview_submissions(store, settings.OPENREVIEW_ID)
    return {"source": "openreview", "total": len(works), "works": works}
