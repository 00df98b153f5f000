import logging

import redis
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from ..core.slugs import normalize_slug, validate_slug
from ..services import links as link_store
from ..store import get_store, link_key

logger = logging.getLogger(__name__)

router = APIRouter()

NOINDEX = {"X-Robots-Tag": "noindex"}


@router.get("/", response_class=PlainTextResponse)
async def root():
    return PlainTextResponse("OK")


async def redirect_to_target(
    slug: str,
    store: redis.Redis = Depends(get_store)
):
    """
    Redirect to the target of a slug.

    Case-insensitive lookup. The click is counted best-effort and
    never blocks the redirect.
    """
    key = normalize_slug(slug)
    if not key:
        return PlainTextResponse("OK")

    is_valid, _ = validate_slug(key)
    target = store.get(link_key(key)) if is_valid else None

    if not target:
        return PlainTextResponse("Not found", status_code=404, headers=NOINDEX)

    link_store.increment_clicks(store, key)

    # 301: slugs are permanent
    return RedirectResponse(url=target, status_code=301, headers=NOINDEX)
