import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from ..config import settings

# Admin key header
admin_key_header = APIKeyHeader(name="x-admin-key", auto_error=False)


def is_valid_admin_key(key: Optional[str]) -> bool:
    """
    Check a presented admin key against the configured one.

    An unset ADMIN_KEY rejects every key.
    """
    if not settings.ADMIN_KEY or not key:
        return False
    return secrets.compare_digest(key.encode("utf-8"), settings.ADMIN_KEY.encode("utf-8"))


async def require_admin(key: Optional[str] = Depends(admin_key_header)) -> str:
    """
    Require a valid x-admin-key header.

    Raises:
        HTTPException: 401 if the key is missing or wrong
    """
    if not is_valid_admin_key(key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized",
        )

    return key
