"""
Energy ledger service: recording readings and ledger queries.

Each identity owns an append-only log of readings indexed by a sequence
number. The log and its counter are keyed by identity only, so they outlive
the device's registration: removal keeps the history, and a re-onboarded
device continues its sequence where it left off.

An identity that has never recorded has no counter row; its counter is
read as 0 and the row is created by the first reading.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from device_ledger.auth.origin import Origin, ensure_signed
from device_ledger.config import DEFAULT_MAX_SEQUENCE
from device_ledger.db.models import EnergyReading, SequenceCounter
from device_ledger.events import EventSink, NewRecord
from device_ledger.services.clock import transition
from device_ledger.services.counters import checked_add
from device_ledger.services.errors import DeviceDoesNotExist
from device_ledger.services.registry import is_registered

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 1000


async def record_reading(
    session: AsyncSession,
    origin: Origin,
    voltage: bytes,
    current: bytes,
    energy: bytes,
    energy_accumulated: bytes,
    *,
    sink: EventSink,
    max_sequence: int = DEFAULT_MAX_SEQUENCE,
) -> EnergyReading:
    """Append a reading to the calling device's ledger.

    The acting device is always the caller's own identity; there is no way
    to record on behalf of another identity.

    Args:
        session: Async SQLAlchemy session.
        origin: Resolved call origin; must be an identified caller.
        voltage: Encoded voltage, stored verbatim.
        current: Encoded current, stored verbatim.
        energy: Encoded energy, stored verbatim.
        energy_accumulated: Encoded accumulated energy, stored verbatim.
        sink: Receives ``NewRecord`` after the commit.
        max_sequence: Largest representable sequence number.

    Returns:
        EnergyReading: The stored reading, carrying its assigned sequence.

    Raises:
        BadOrigin: If *origin* is not an identified caller.
        DeviceDoesNotExist: If the caller is not a registered device.
        ArithmeticOverflow: If the caller's sequence is at its maximum.
    """
    identity = ensure_signed(origin)
    try:
        async with transition(session) as block:
            if not await is_registered(session, identity):
                raise DeviceDoesNotExist(identity)

            counter = await session.get(SequenceCounter, identity, populate_existing=True)
            previous = counter.value if counter is not None else 0
            sequence = checked_add(
                previous, 1, counter="sequence", limit=max_sequence,
            )

            reading = EnergyReading(
                identity=identity,
                sequence=sequence,
                voltage=bytes(voltage),
                current=bytes(current),
                energy=bytes(energy),
                energy_accumulated=bytes(energy_accumulated),
                recorded_at=block,
            )
            session.add(reading)
            if counter is None:
                session.add(SequenceCounter(identity=identity, value=sequence))
            else:
                counter.value = sequence
    except DeviceDoesNotExist:
        logger.warning("Reading rejected: device %s does not exist", identity)
        raise

    logger.info("Device %s recorded sequence %d at block %d", identity, sequence, block)
    await sink.emit(NewRecord(identity))
    return reading


async def get_sequence(session: AsyncSession, identity: str) -> int:
    """Return the last sequence number assigned to *identity* (0 if none)."""
    counter = await session.get(SequenceCounter, identity, populate_existing=True)
    return counter.value if counter is not None else 0


async def get_reading(
    session: AsyncSession, identity: str, sequence: int,
) -> EnergyReading | None:
    """Return the reading stored at ``(identity, sequence)``, or None."""
    return await session.get(EnergyReading, (identity, sequence))


async def list_readings(
    session: AsyncSession,
    identity: str,
    start: int = 1,
    limit: int = 100,
) -> list[EnergyReading]:
    """Return up to *limit* readings of *identity* from sequence *start* on.

    Args:
        session: Async SQLAlchemy session.
        identity: Identity whose ledger to read.
        start: First sequence number to include.
        limit: Maximum number of readings, capped at ``MAX_PAGE_SIZE``.

    Returns:
        list[EnergyReading]: Readings in ascending sequence order.
    """
    limit = max(0, min(limit, MAX_PAGE_SIZE))
    stmt = (
        select(EnergyReading)
        .where(EnergyReading.identity == identity, EnergyReading.sequence >= start)
        .order_by(EnergyReading.sequence.asc())
        .limit(limit)
    )
    return list((await session.execute(stmt)).scalars().all())
