"""
Reading submission endpoint.

POST /v1/readings appends a reading to the ledger of the authenticated
caller. The request body carries no identity: the acting device is always
the one the Bearer token resolves to.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from fastapi import APIRouter

from device_ledger.api.deps import AppSettings, CallOrigin, DbSession, Events
from device_ledger.api.devices import check_payload_size
from device_ledger.api.schemas import ReadingResponse, RecordRequest
from device_ledger.services import ledger

router = APIRouter(prefix="/v1", tags=["readings"])


@router.post("/readings", response_model=ReadingResponse, status_code=201)
async def record(
    request: RecordRequest,
    origin: CallOrigin,
    db: DbSession,
    sink: Events,
    settings: AppSettings,
) -> ReadingResponse:
    """Record a reading for the calling device.

    Returns:
        ReadingResponse: The stored reading with its assigned sequence.

    Raises:
        HTTPException: 422 if any payload exceeds MAX_PAYLOAD_BYTES.
    """
    for name, payload in request.payloads().items():
        check_payload_size(name, payload, settings.MAX_PAYLOAD_BYTES)

    reading = await ledger.record_reading(
        db,
        origin,
        request.voltage,
        request.current,
        request.energy,
        request.energy_accumulated,
        sink=sink,
        max_sequence=settings.MAX_SEQUENCE,
    )
    return ReadingResponse.from_reading(reading)
