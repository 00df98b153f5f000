from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import settings
from ..core.security import admin_key_header, is_valid_admin_key

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.get("/auth")
@limiter.limit(f"{settings.AUTH_RATE_LIMIT_PER_MINUTE}/minute")
async def check_auth(request: Request, key: Optional[str] = Depends(admin_key_header)):
    """
    Verify the admin key.

    Rate limited per client address; rejected keys count too.
    """
    if not is_valid_admin_key(key):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")

    return {"authenticated": True}
