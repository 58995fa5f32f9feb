"""Origin Guard — rejects browser requests from origins outside the allow-list.

Invariants:
    - No Origin header (server-to-server, curl, mobile) → request passes
    - Origin in the allow-list → request passes (CORS headers added downstream)
    - Any other Origin → 403 {success: false, error}, route never runs
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class OriginAllowListMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, *, allowed_origins: list[str]):
        super().__init__(app)
        self._allowed = frozenset(allowed_origins)

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if origin is None or origin in self._allowed:
            return await call_next(request)
        logger.warning(
            f"Blocked origin: {origin}",
            extra={"origin": origin, "path": request.url.path},
        )
        return JSONResponse(
            status_code=403,
            content={
                "success": False,
                "error": "Origin not allowed",
                "code": "ORIGIN_NOT_ALLOWED",
            },
        )
