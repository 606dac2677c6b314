"""
CORS Middleware - which browser origins may call the API.

The web app's origins (CORS_ALLOWED_ORIGINS) get full credentialed
access. Read-only public endpoints (landing page widgets, the casting
board) are embeddable from any origin without credentials.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from castingfy.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_METHODS = ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
DEFAULT_HEADERS = ["Accept", "Content-Type", "Authorization", "X-Request-ID"]


class CORSMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        allowed_origins: list[str] | None = None,
        public_prefixes: tuple[str, ...] = ("/public/", "/instagram/"),
        max_age: int = 600,
    ):
        """
        Args:
            app: FastAPI application
            allowed_origins: Origins of the web app (credentialed access)
            public_prefixes: Path prefixes readable from any origin with GET
            max_age: How long (seconds) browsers may cache preflight responses
        """
        super().__init__(app)
        self.allowed_origins = allowed_origins or []
        self.public_prefixes = public_prefixes
        self.max_age = max_age
        logger.info("CORS middleware initialized", allowed_origins=self.allowed_origins)

    def _is_public(self, request) -> bool:
        return request.method in ("GET", "OPTIONS") and request.url.path.startswith(self.public_prefixes)

    async def dispatch(self, request, call_next):
        origin = request.headers.get("origin")
        trusted = origin in self.allowed_origins if origin else False
        public = self._is_public(request)

        if request.method == "OPTIONS" and origin:
            if trusted:
                return self._preflight(origin, credentials=True, methods=DEFAULT_METHODS)
            if public:
                return self._preflight("*", credentials=False, methods=["GET"])
            logger.warning("CORS preflight rejected", origin=origin, path=request.url.path)
            return Response(status_code=403, content="Origin not allowed")

        response = await call_next(request)

        if trusted:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"
        elif public:
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = "GET"
        elif origin:
            logger.warning("CORS request from disallowed origin", origin=origin, path=request.url.path)

        return response

    def _preflight(self, origin: str, credentials: bool, methods: list[str]) -> Response:
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ", ".join(methods),
            "Access-Control-Allow-Headers": ", ".join(DEFAULT_HEADERS),
            "Access-Control-Max-Age": str(self.max_age),
            "X-Content-Type-Options": "nosniff",
        }
        if credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        return Response(status_code=204, headers=headers)
