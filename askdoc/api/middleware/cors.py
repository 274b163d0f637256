"""
CORS middleware.

Answers preflight requests directly and decorates every other response
with the allow-origin headers the embeddable widget needs.

Dependencies: starlette
System role: Cross-origin access for widget and admin clients
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-API-Key"
MAX_AGE = "86400"


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Origin allow-list CORS handling.

    A listed origin is echoed back; with '*' in the list any origin is
    echoed, and a request without an Origin header gets '*'. Every OPTIONS
    request is answered 204 before routing and auth.
    """

    def __init__(self, app: ASGIApp, allow_origins: list[str]) -> None:
        super().__init__(app)
        self.allow_origins = list(allow_origins)
        self.allow_all = "*" in self.allow_origins

    def _allowed_origin(self, origin: str) -> str | None:
        if not origin:
            return "*" if self.allow_all else None
        if self.allow_all or origin in self.allow_origins:
            return origin
        return None

    def _apply_headers(self, response: Response, origin: str) -> None:
        allowed = self._allowed_origin(origin)
        if allowed is None:
            return
        response.headers["Access-Control-Allow-Origin"] = allowed
        response.headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
        response.headers["Access-Control-Max-Age"] = MAX_AGE
        if allowed != "*":
            response.headers["Vary"] = "Origin"

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)

        self._apply_headers(response, origin)
        return response
