# castingfy/routes/health.py
"""
Liveness and readiness endpoints.
"""

import time

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from castingfy.db.pool import db_health_check
from castingfy.services.cache_client import cache

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz():
    """Always 200 while the process is serving."""
    return {"status": "ok", "service": "castingfy"}


@router.get("/readyz")
async def readyz():
    """
    Readiness: the database must answer; Redis only counts when configured.
    """
    checks = {}
    overall_ok = True

    t0 = time.time()
    db_health = await db_health_check()
    checks["database"] = {
        "ok": bool(db_health.get("healthy")),
        "latency_ms": round((time.time() - t0) * 1000, 1),
    }
    if not checks["database"]["ok"]:
        checks["database"]["error"] = db_health.get("error", "Database unhealthy")
    overall_ok = overall_ok and checks["database"]["ok"]

    if cache.enabled:
        t0 = time.time()
        redis_ok = await cache.ping()
        checks["redis"] = {"ok": redis_ok, "latency_ms": round((time.time() - t0) * 1000, 1)}
        overall_ok = overall_ok and redis_ok

    body = {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
    return JSONResponse(body, status_code=200 if overall_ok else 503)


@router.get("/health/database")
async def database_health():
    """Detailed database pool health information."""
    return await db_health_check()
