"""
RequestContext Middleware - request tracing for every call.

Sets on request.state:
- request_id: UUID for tracing this request (also echoed as X-Request-ID)
- ip_address: client IP, honoring X-Forwarded-For only from trusted proxies
- user_agent: client user agent string

The request id is bound into structlog's context so every log line
emitted while handling the request carries it.
"""

import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from castingfy.config import settings
from castingfy.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.ip_address = self._client_ip(request)
        request.state.user_agent = request.headers.get("user-agent")

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.debug(
            "Request started",
            method=request.method,
            path=request.url.path,
            ip_address=request.state.ip_address,
        )

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    def _client_ip(self, request: Request) -> str | None:
        """
        Client address; X-Forwarded-For is used only when the direct peer is
        a configured trusted proxy.
        """
        direct = request.client.host if request.client else None
        if not settings.TRUST_X_FORWARDED_FOR or direct not in settings.TRUSTED_PROXY_IPS:
            return direct

        forwarded_for = request.headers.get("x-forwarded-for")
        if not forwarded_for:
            return direct
        return forwarded_for.split(",")[0].strip()
