# app/core/auth.py
import re
import secrets

from fastapi import Depends, Header, HTTPException, status

from app.core.config import Settings, get_settings

# Client ids name a directory on disk, so keep them to a safe alphabet.
CLIENT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{8,64}$")


def require_admin(
    x_admin_key: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Enforce the shared admin key on catalog management routes.

    Route is accessible only if:
      - ADMIN_API_KEY is configured
      - the X-Admin-Key header matches it

    Raises:
        HTTPException(503): if no admin key is configured.
        HTTPException(401): if the header is missing or wrong.
    """
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured",
        )
    if x_admin_key is None or not secrets.compare_digest(
        x_admin_key, settings.ADMIN_API_KEY
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin access required",
        )


def require_client_id(x_client_id: str | None = Header(default=None)) -> str:
    """
    Resolve the anonymous client id that owns a cart/wishlist/compare list.

    The storefront generates this once per browser and sends it on every
    request; it is an ownership key, not a credential.

    Raises:
        HTTPException(400): if the header is missing or malformed.
    """
    if x_client_id is None or not CLIENT_ID_PATTERN.match(x_client_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing or invalid X-Client-Id header",
        )
    return x_client_id
