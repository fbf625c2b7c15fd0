"""
Device registry API endpoints.

Administrator-only onboarding (POST /v1/devices) and removal
(DELETE /v1/devices/{identity}), plus the public read-only registry and
ledger queries keyed by device identity.

Domain errors raised by the services are translated into JSON responses
by the exception handlers registered in ``device_ledger.main``.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from fastapi import APIRouter, HTTPException, Path, Query, Response

from device_ledger.api.deps import AppSettings, CallOrigin, DbSession, Events
from device_ledger.api.schemas import (
    DeviceCountResponse,
    DeviceResponse,
    OnboardRequest,
    ReadingListResponse,
    ReadingResponse,
    SequenceResponse,
    StatusResponse,
)
from device_ledger.config import BIGINT_MAX
from device_ledger.services import ledger, registry
from device_ledger.services.registry import DeviceStatus

router = APIRouter(prefix="/v1/devices", tags=["devices"])


def check_payload_size(name: str, payload: bytes, limit: int) -> None:
    """Reject a payload larger than *limit* bytes with HTTP 422."""
    if len(payload) > limit:
        raise HTTPException(
            status_code=422,
            detail=f"{name} is {len(payload)} bytes; the limit is {limit}.",
        )


@router.post("", response_model=DeviceResponse, status_code=201)
async def onboard(
    request: OnboardRequest,
    origin: CallOrigin,
    db: DbSession,
    sink: Events,
    settings: AppSettings,
) -> DeviceResponse:
    """Onboard a device (administrator only).

    Returns:
        DeviceResponse: The registered device.

    Raises:
        HTTPException: 422 if the descriptor exceeds MAX_PAYLOAD_BYTES.
    """
    check_payload_size("descriptor", request.descriptor, settings.MAX_PAYLOAD_BYTES)
    device = await registry.onboard_device(
        db,
        origin,
        request.identity,
        request.descriptor,
        sink=sink,
        max_device_count=settings.MAX_DEVICE_COUNT,
    )
    return DeviceResponse.from_device(device, DeviceStatus.UP.value)


@router.delete("/{identity}", status_code=204)
async def remove(
    identity: str,
    origin: CallOrigin,
    db: DbSession,
    sink: Events,
    settings: AppSettings,
) -> Response:
    """Remove a device (administrator only). Its ledger history is kept."""
    await registry.remove_device(
        db, origin, identity, sink=sink, max_device_count=settings.MAX_DEVICE_COUNT,
    )
    return Response(status_code=204)


# Declared before /{identity} so "count" is not captured as an identity.
@router.get("/count", response_model=DeviceCountResponse)
async def device_count(db: DbSession) -> DeviceCountResponse:
    """Return the number of currently registered devices."""
    return DeviceCountResponse(device_count=await registry.get_device_count(db))


@router.get("/{identity}", response_model=DeviceResponse)
async def get_device(identity: str, db: DbSession) -> DeviceResponse:
    """Return a registered device.

    Raises:
        HTTPException: 404 if the identity is not registered.
    """
    device = await registry.get_device(db, identity)
    if device is None:
        raise HTTPException(
            status_code=404, detail=f"Device '{identity}' is not registered.",
        )
    return DeviceResponse.from_device(device, DeviceStatus.UP.value)


@router.get("/{identity}/status", response_model=StatusResponse)
async def get_status(identity: str, db: DbSession) -> StatusResponse:
    """Return the identity's device status; unknown identities are not an error."""
    status = await registry.get_device_status(db, identity)
    return StatusResponse(identity=identity, status=status.value)


@router.get("/{identity}/sequence", response_model=SequenceResponse)
async def get_sequence(identity: str, db: DbSession) -> SequenceResponse:
    """Return the last sequence number assigned to the identity (0 if none)."""
    return SequenceResponse(
        identity=identity, sequence=await ledger.get_sequence(db, identity),
    )


@router.get("/{identity}/readings", response_model=ReadingListResponse)
async def list_readings(
    identity: str,
    db: DbSession,
    start: int = Query(
        1, ge=1, le=BIGINT_MAX, description="First sequence number to include",
    ),
    limit: int = Query(100, ge=1, le=ledger.MAX_PAGE_SIZE),
) -> ReadingListResponse:
    """Return a page of the identity's readings in ascending sequence order."""
    readings = await ledger.list_readings(db, identity, start=start, limit=limit)
    return ReadingListResponse(
        identity=identity,
        readings=[ReadingResponse.from_reading(r) for r in readings],
    )


@router.get("/{identity}/readings/{sequence}", response_model=ReadingResponse)
async def get_reading(
    identity: str,
    db: DbSession,
    sequence: int = Path(ge=1, le=BIGINT_MAX),
) -> ReadingResponse:
    """Return the reading stored at (identity, sequence).

    Raises:
        HTTPException: 404 if no reading exists at that index.
    """
    reading = await ledger.get_reading(db, identity, sequence)
    if reading is None:
        raise HTTPException(
            status_code=404,
            detail=f"No reading {sequence} for device '{identity}'.",
        )
    return ReadingResponse.from_reading(reading)
