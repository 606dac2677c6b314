# castingfy/main.py
"""
FastAPI application: lifecycle, middleware, error mapping and routers.

Every error response has the shape {"error": "<message>"}.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from castingfy.config import settings
from castingfy.db.helpers import DatabaseError
from castingfy.db.pool import db_pool
from castingfy.infrastructure.observability.logging import get_logger, log_request, setup_logging
from castingfy.middleware import CORSMiddleware, RequestContextMiddleware, SecurityHeadersMiddleware
from castingfy.routes import (
    chat,
    connections,
    favorites,
    gallery,
    health,
    projects,
    public,
    reviews,
    social,
    users,
)
from castingfy.services.cache_client import cache
from castingfy.services.errors import CastingfyError

setup_logging(
    log_level="DEBUG" if settings.debug else settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool and the optional cache; close them in reverse order."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    startup_tasks = []
    try:
        await db_pool.initialize()
        startup_tasks.append("database_pool")

        if cache.enabled:
            await cache.initialize()
            startup_tasks.append("redis")

        logger.info("All services initialized successfully", services=startup_tasks)

    except Exception as e:
        logger.error("Failed to initialize services", error=str(e), completed_tasks=startup_tasks)
        if "redis" in startup_tasks:
            await cache.close()
        if "database_pool" in startup_tasks:
            await db_pool.close()
        raise

    yield

    logger.info("Application shutting down")
    await cache.close()
    await db_pool.close()
    logger.info("All services closed")


app = FastAPI(
    title="Castingfy API",
    description="Casting marketplace for talent and producers",
    version="0.1.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    log_request(
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.time() - start_time) * 1000, 2),
    )
    return response


# Added last runs first: request id, then CORS, then security headers.
app.add_middleware(SecurityHeadersMiddleware, enforce_https=settings.ENFORCE_HTTPS)
app.add_middleware(CORSMiddleware, allowed_origins=settings.CORS_ALLOWED_ORIGINS)
app.add_middleware(RequestContextMiddleware)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(projects.router)
app.include_router(public.router)
app.include_router(connections.router)
app.include_router(favorites.router)
app.include_router(chat.router)
app.include_router(gallery.router)
app.include_router(reviews.router)
app.include_router(social.router)


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


@app.exception_handler(CastingfyError)
async def castingfy_error_handler(request: Request, exc: CastingfyError):
    if exc.status_code >= 500:
        logger.error(
            "Request failed", path=request.url.path, user_id=exc.user_id, error=exc.message
        )
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _error(400, "Invalid request")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return _error(400, f"{field}: {message}" if field else message)


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error(
        "Unhandled database error",
        path=request.url.path,
        operation=exc.operation,
        sqlstate=exc.sqlstate,
        error=str(exc),
    )
    return _error(500, "Internal server error")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled error", path=request.url.path, error_type=type(exc).__name__, error=str(exc)
    )
    return _error(500, "Internal server error")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
