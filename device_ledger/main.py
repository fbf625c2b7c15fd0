"""
FastAPI application entry point for the device ledger API.

Registers the registry, readings and health routers, installs JSON
logging at startup, and translates ledger errors into HTTP responses.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from device_ledger.api.deps import init_bearer_auth
from device_ledger.api.devices import router as devices_router
from device_ledger.api.health import router as health_router
from device_ledger.api.readings import router as readings_router
from device_ledger.auth.origin import BadOrigin
from device_ledger.config import get_settings
from device_ledger.db.session import dispose_engine
from device_ledger.logging_config import setup_logging
from device_ledger.services.errors import (
    ArithmeticOverflow,
    DeviceAlreadyExists,
    DeviceDoesNotExist,
    LedgerError,
    UnauthorizedDevice,
)

logger = logging.getLogger(__name__)

# HTTP status for each domain error; unlisted LedgerErrors map to 400.
ERROR_STATUS = {
    DeviceAlreadyExists: 409,
    DeviceDoesNotExist: 404,
    ArithmeticOverflow: 422,
    UnauthorizedDevice: 403,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and validate auth at startup."""
    setup_logging(get_settings().LOG_LEVEL)
    init_bearer_auth()
    logger.info("Origin tokens validated at startup")
    yield
    await dispose_engine()


app = FastAPI(
    title="Device Ledger API",
    description="Device registry and per-device energy telemetry ledger.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(devices_router)
app.include_router(readings_router)
app.include_router(health_router)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Translate a rejected operation into ``{"error", "detail"}`` JSON."""
    return JSONResponse(
        status_code=ERROR_STATUS.get(type(exc), 400),
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(BadOrigin)
async def bad_origin_handler(request: Request, exc: BadOrigin) -> JSONResponse:
    """Reject a call made from the wrong origin class with 403."""
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=403,
        content={"error": "BadOrigin", "detail": str(exc)},
    )


@app.get("/")
async def root() -> dict:
    """Liveness endpoint.

    Returns:
        dict: JSON object with application status.
    """
    return {"status": "ok"}
