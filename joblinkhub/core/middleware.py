"""Origin allow-list enforcement.

CORSMiddleware only withholds CORS headers from unknown origins; this
middleware refuses such requests outright so the handler never runs.
Requests without an ``Origin`` header (same-origin, curl, server-to-server)
are let through.
"""

from typing import Iterable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from joblinkhub.core.exceptions import Forbidden, error_response

logger = structlog.get_logger(__name__)


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(o.rstrip("/") for o in allowed_origins)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")
        if origin and origin.rstrip("/") not in self.allowed_origins:
            logger.warning("Rejected request from disallowed origin", origin=origin, path=request.url.path)
            return error_response(Forbidden("Not allowed by CORS"))
        return await call_next(request)
