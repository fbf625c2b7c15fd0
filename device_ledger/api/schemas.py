"""
Pydantic request and response schemas for the ledger API.

Byte payloads travel as hex strings. Requests accept an optional ``0x``
prefix and either letter case; responses always use lowercase hex
without a prefix.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from device_ledger.db.models import Device, EnergyReading


def _decode_hex(value: object) -> bytes:
    if isinstance(value, bytes):
        return value
    if not isinstance(value, str):
        raise ValueError("payload must be a hex string")
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    try:
        return bytes.fromhex(digits)
    except ValueError:
        raise ValueError("payload is not valid hex") from None


HexBytes = Annotated[bytes, BeforeValidator(_decode_hex)]

# Identities the single-segment /v1/devices/{identity} routes cannot address.
RESERVED_IDENTITIES = frozenset({"count", ".", ".."})


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class OnboardRequest(BaseModel):
    """Schema for onboarding a device.

    Attributes:
        identity: Identity of the device to register. Must be a single URL
            path segment: no slashes, and not one of RESERVED_IDENTITIES.
        descriptor: Hex-encoded opaque descriptor stored with the device.
    """

    identity: str = Field(min_length=1, pattern=r"^[^/]+$")
    descriptor: HexBytes

    @field_validator("identity")
    @classmethod
    def identity_must_be_addressable(cls, v: str) -> str:
        """Reject identities that collide with fixed route segments."""
        if v in RESERVED_IDENTITIES:
            raise ValueError(f"identity {v!r} is reserved")
        return v


class RecordRequest(BaseModel):
    """Schema for recording a reading. The acting device is the caller."""

    voltage: HexBytes
    current: HexBytes
    energy: HexBytes
    energy_accumulated: HexBytes

    def payloads(self) -> dict[str, bytes]:
        """Return the byte payloads keyed by field name."""
        return {
            "voltage": self.voltage,
            "current": self.current,
            "energy": self.energy,
            "energy_accumulated": self.energy_accumulated,
        }


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class DeviceResponse(BaseModel):
    """Schema for a registered device.

    Attributes:
        identity: Device identity.
        descriptor: Hex-encoded descriptor.
        registered_at: Block marker at onboarding.
        status: Reported device status.
    """

    identity: str
    descriptor: str
    registered_at: int
    status: str

    @classmethod
    def from_device(cls, device: Device, status: str) -> "DeviceResponse":
        return cls(
            identity=device.identity,
            descriptor=device.descriptor.hex(),
            registered_at=device.registered_at,
            status=status,
        )


class DeviceCountResponse(BaseModel):
    device_count: int


class SequenceResponse(BaseModel):
    """Schema for a device's sequence counter (last assigned sequence)."""

    identity: str
    sequence: int


class ReadingResponse(BaseModel):
    """Schema for a stored energy reading with hex-encoded payloads."""

    identity: str
    sequence: int
    voltage: str
    current: str
    energy: str
    energy_accumulated: str
    recorded_at: int

    @classmethod
    def from_reading(cls, reading: EnergyReading) -> "ReadingResponse":
        return cls(
            identity=reading.identity,
            sequence=reading.sequence,
            voltage=reading.voltage.hex(),
            current=reading.current.hex(),
            energy=reading.energy.hex(),
            energy_accumulated=reading.energy_accumulated.hex(),
            recorded_at=reading.recorded_at,
        )


class ReadingListResponse(BaseModel):
    identity: str
    readings: list[ReadingResponse]


class StatusResponse(BaseModel):
    identity: str
    status: str
