"""
Middleware components for request processing.

- Request context (request ID, IP address, user agent)
- Security (CORS, security headers)
"""

from castingfy.middleware.cors import CORSMiddleware
from castingfy.middleware.request_context import RequestContextMiddleware
from castingfy.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestContextMiddleware",
    "SecurityHeadersMiddleware",
    "CORSMiddleware",
]
