"""
Origin allow-list gate.

Starlette's CORSMiddleware only decides which response headers to send; a
simple cross-origin POST from a foreign origin would still reach the upload
handler. This middleware refuses such requests before any body processing.

Requests without an Origin header (curl, mobile apps, server-to-server) are
always let through.
"""
import logging
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from photo_relay.utils.logging import log_cors_blocked
from photo_relay.utils.metrics import cors_blocked_total

logger = logging.getLogger(__name__)


class OriginGateMiddleware(BaseHTTPMiddleware):
    """Reject any request whose Origin is not in the allow-list."""

    def __init__(self, app, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)

    def is_allowed(self, origin: str) -> bool:
        return origin in self.allowed_origins

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if not origin or self.is_allowed(origin):
            return await call_next(request)

        log_cors_blocked(logger, origin=origin, path=request.url.path, method=request.method)
        cors_blocked_total.inc()
        return PlainTextResponse("Not allowed by CORS", status_code=403)
