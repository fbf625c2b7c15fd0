"""
Chain clock: the block marker source for state transitions.

The ``chain_clock`` row holds the current block number. Each mutating
operation calls :func:`begin_transition` first, which locks the row for the
rest of the transaction (serializing transitions the way a ledger applies
blocks one after another) and returns the block number the transition
stamps on the records it creates. The increment is part of the
transaction, so a rejected operation does not advance the clock.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from device_ledger.db.models import SINGLETON_ID, ChainClock


async def _lock_clock(session: AsyncSession) -> ChainClock:
    stmt = select(ChainClock).where(ChainClock.id == SINGLETON_ID).with_for_update()
    stmt = stmt.execution_options(populate_existing=True)
    clock = (await session.execute(stmt)).scalar_one_or_none()
    if clock is None:
        clock = ChainClock(id=SINGLETON_ID, block_number=0)
        session.add(clock)
        await session.flush()
    return clock


async def current_block(session: AsyncSession) -> int:
    """Return the block number of the last committed transition (0 initially)."""
    stmt = select(ChainClock.block_number).where(ChainClock.id == SINGLETON_ID)
    value = (await session.execute(stmt)).scalar_one_or_none()
    return value or 0


async def begin_transition(session: AsyncSession) -> int:
    """Lock the clock and advance it for the transition in progress.

    Args:
        session: Session whose transaction the transition runs in.

    Returns:
        int: Block number assigned to this transition.
    """
    clock = await _lock_clock(session)
    clock.block_number += 1
    return clock.block_number


@asynccontextmanager
async def transition(session: AsyncSession) -> AsyncGenerator[int, None]:
    """Run a state transition as a single all-or-nothing transaction.

    Advances the clock on entry and commits on a clean exit. Any exception
    raised inside the block rolls back every change (including the clock
    advance) and propagates.

    Usage::

        async with transition(session) as block:
            session.add(Device(identity=..., registered_at=block, ...))

    Args:
        session: Session to run the transition in.

    Yields:
        int: Block number assigned to the transition.
    """
    try:
        yield await begin_transition(session)
        await session.commit()
    except Exception:
        await session.rollback()
        raise
