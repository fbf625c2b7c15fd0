"""
Device registry service: onboarding, removal and registry queries.

Owns the ``devices`` table and the device count. Both mutating operations
require the administrator origin, validate before writing, and apply the
device row and the count change in one transaction. The registry never
touches ledger state: removing a device leaves its sequence counter and
readings in place.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import enum
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from device_ledger.auth.origin import Origin, ensure_root
from device_ledger.config import DEFAULT_MAX_DEVICE_COUNT
from device_ledger.db.models import SINGLETON_ID, Device, RegistryState
from device_ledger.events import DeviceRemoved, EventSink, NewDeviceAdded
from device_ledger.services.clock import transition
from device_ledger.services.counters import checked_add, checked_sub
from device_ledger.services.errors import DeviceAlreadyExists, DeviceDoesNotExist

logger = logging.getLogger(__name__)


class DeviceStatus(enum.StrEnum):
    """Externally reported state of a device identity.

    ``DOWN`` is reserved for liveness tracking and is never reported.
    """

    UP = "up"
    DOWN = "down"
    DOES_NOT_EXIST = "does_not_exist"


async def _registry_state(session: AsyncSession) -> RegistryState:
    state = await session.get(RegistryState, SINGLETON_ID, populate_existing=True)
    if state is None:
        state = RegistryState(id=SINGLETON_ID, device_count=0)
        session.add(state)
        await session.flush()
    return state


async def onboard_device(
    session: AsyncSession,
    origin: Origin,
    identity: str,
    descriptor: bytes,
    *,
    sink: EventSink,
    max_device_count: int = DEFAULT_MAX_DEVICE_COUNT,
) -> Device:
    """Register *identity* as a device.

    Args:
        session: Async SQLAlchemy session.
        origin: Resolved call origin; must be the administrator.
        identity: Identity of the device to register.
        descriptor: Opaque payload stored verbatim with the device.
        sink: Receives ``NewDeviceAdded`` after the commit.
        max_device_count: Largest representable device count.

    Returns:
        Device: The stored device record.

    Raises:
        BadOrigin: If *origin* is not the administrator.
        DeviceAlreadyExists: If *identity* is already registered.
        ArithmeticOverflow: If the device count is already at its maximum.
    """
    ensure_root(origin)
    try:
        async with transition(session) as block:
            if await session.get(Device, identity, populate_existing=True) is not None:
                raise DeviceAlreadyExists(identity)

            state = await _registry_state(session)
            count = checked_add(
                state.device_count, 1, counter="device_count", limit=max_device_count,
            )

            device = Device(
                identity=identity, descriptor=bytes(descriptor), registered_at=block,
            )
            session.add(device)
            state.device_count = count
    except IntegrityError:
        # A concurrent onboarding of the same identity won the insert.
        logger.warning("Onboarding rejected: device %s inserted concurrently", identity)
        raise DeviceAlreadyExists(identity) from None
    except DeviceAlreadyExists:
        logger.warning("Onboarding rejected: device %s already exists", identity)
        raise

    logger.info("Device %s onboarded at block %d", identity, device.registered_at)
    await sink.emit(NewDeviceAdded(identity))
    return device


async def remove_device(
    session: AsyncSession,
    origin: Origin,
    identity: str,
    *,
    sink: EventSink,
    max_device_count: int = DEFAULT_MAX_DEVICE_COUNT,
) -> None:
    """Remove *identity* from the registry.

    The device's sequence counter and readings are retained.

    Raises:
        BadOrigin: If *origin* is not the administrator.
        DeviceDoesNotExist: If *identity* is not registered.
        ArithmeticOverflow: If the device count would drop below zero.
    """
    ensure_root(origin)
    try:
        async with transition(session):
            device = await session.get(Device, identity, populate_existing=True)
            if device is None:
                raise DeviceDoesNotExist(identity)

            state = await _registry_state(session)
            count = checked_sub(
                state.device_count, 1, counter="device_count", limit=max_device_count,
            )

            await session.delete(device)
            state.device_count = count
    except DeviceDoesNotExist:
        logger.warning("Removal rejected: device %s does not exist", identity)
        raise

    logger.info("Device %s removed", identity)
    await sink.emit(DeviceRemoved(identity))


async def get_device_count(session: AsyncSession) -> int:
    """Return the number of currently registered devices."""
    state = await session.get(RegistryState, SINGLETON_ID, populate_existing=True)
    return state.device_count if state is not None else 0


async def get_device(session: AsyncSession, identity: str) -> Device | None:
    """Return the device registered under *identity*, or None."""
    return await session.get(Device, identity, populate_existing=True)


async def is_registered(session: AsyncSession, identity: str) -> bool:
    """Return True if *identity* is currently registered."""
    return await get_device(session, identity) is not None


async def get_device_status(session: AsyncSession, identity: str) -> DeviceStatus:
    """Return ``UP`` for registered identities and ``DOES_NOT_EXIST`` otherwise."""
    if await is_registered(session, identity):
        return DeviceStatus.UP
    return DeviceStatus.DOES_NOT_EXIST
