"""
Registry and ledger state transitions.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from device_ledger.services.errors import (
    ArithmeticOverflow,
    DeviceAlreadyExists,
    DeviceDoesNotExist,
    LedgerError,
    UnauthorizedDevice,
)
from device_ledger.services.ledger import (
    get_reading,
    get_sequence,
    list_readings,
    record_reading,
)
from device_ledger.services.registry import (
    DeviceStatus,
    get_device,
    get_device_count,
    get_device_status,
    onboard_device,
    remove_device,
)

__all__ = [
    "ArithmeticOverflow",
    "DeviceAlreadyExists",
    "DeviceDoesNotExist",
    "DeviceStatus",
    "LedgerError",
    "UnauthorizedDevice",
    "get_device",
    "get_device_count",
    "get_device_status",
    "get_reading",
    "get_sequence",
    "list_readings",
    "onboard_device",
    "record_reading",
    "remove_device",
]
