"""
Health check endpoint that probes DB and Redis connectivity.

Returns a JSON response indicating overall system status and the status
of each dependency (database and the Redis event channel). Returns HTTP
200 when all components are healthy, or HTTP 503 when any is degraded.
Redis being down does not block transitions (events are best-effort),
but it is still reported as degraded.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from device_ledger.api.deps import DbSession
from device_ledger.events import get_redis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


async def _check_db(db: DbSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Health check: DB probe failed", exc_info=True)
        return "error"
    return "ok"


async def _check_redis() -> str:
    try:
        client = await get_redis()
        try:
            await client.ping()
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Health check: Redis probe failed", exc_info=True)
        return "error"
    return "ok"


@router.get("/health")
async def health_check(db: DbSession) -> JSONResponse:
    """Probe the database and Redis.

    Returns:
        JSONResponse: ``status``, ``db`` and ``redis`` fields; HTTP 200 when
            every component is ok, HTTP 503 otherwise.
    """
    db_status = await _check_db(db)
    redis_status = await _check_redis()

    all_ok = db_status == "ok" and redis_status == "ok"
    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ok" if all_ok else "degraded",
            "db": db_status,
            "redis": redis_status,
        },
    )
