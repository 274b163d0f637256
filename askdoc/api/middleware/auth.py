"""
Admin API key guard.

Dependencies: fastapi
System role: Authentication for /api/admin routes
"""

import hmac
import logging

from fastapi import Depends, HTTPException, Request, status

from askdoc.api.deps.dependencies import get_settings_dependency
from askdoc.configs import Settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def _presented_key(request: Request) -> str:
    """Key from X-API-Key, else from an Authorization bearer token."""
    key = request.headers.get("X-API-Key", "")
    if key:
        return key
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip()
    return ""


async def require_api_key(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> None:
    """
    Reject admin requests without the configured API key.

    No configured key leaves the admin API open.

    Raises:
        HTTPException(401): Key missing or wrong
    """
    expected = settings.admin.api_key
    if not expected:
        return

    presented = _presented_key(request)
    if not presented or not hmac.compare_digest(presented, expected):
        logger.warning(
            "Admin request rejected",
            extra={"path": request.url.path, "key_present": bool(presented)},
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
