"""
Security Headers Middleware - hardening headers on every API response.

The API only serves JSON, so the content policy blocks everything a
browser could load from it. HSTS is added only when HTTPS is enforced
(production behind TLS).
"""

from starlette.middleware.base import BaseHTTPMiddleware

from castingfy.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

API_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'; base-uri 'none'",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=()",
}
HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, enforce_https: bool = False):
        """
        Args:
            app: FastAPI application
            enforce_https: Whether to add the HSTS header
        """
        super().__init__(app)
        self.enforce_https = enforce_https
        logger.info("Security headers middleware initialized", enforce_https=enforce_https)

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        for name, value in API_HEADERS.items():
            response.headers.setdefault(name, value)
        if self.enforce_https:
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        return response
