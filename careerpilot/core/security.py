from __future__ import annotations

from fastapi import Header, HTTPException, status

from careerpilot.core.config import settings

_MAX_USER_ID_LEN = 128


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please provide a valid API key.",
        )


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    check_api_key(x_api_key)


def current_user_id(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str:
    """Caller identity as forwarded by the auth layer in front of this service."""
    check_api_key(x_api_key)
    user_id = (x_user_id or "").strip()
    if not user_id or len(user_id) > _MAX_USER_ID_LEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid X-User-Id header.",
        )
    return user_id
