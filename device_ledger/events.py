"""
Ledger notification events and the sinks that deliver them.

Events are emitted only after the transition that produced them has been
committed. Delivery is fire-and-forget: the Redis sink publishes on a
pub/sub channel and logs (never raises) on failure, so a broken event
channel cannot reject or roll back a state transition.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import redis.asyncio as redis

from device_ledger.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewDeviceAdded:
    """A device was onboarded."""

    identity: str


@dataclass(frozen=True)
class DeviceRemoved:
    """A device was removed from the registry."""

    identity: str


@dataclass(frozen=True)
class NewRecord:
    """A device appended a reading to its ledger."""

    identity: str


LedgerEvent = NewDeviceAdded | DeviceRemoved | NewRecord


def event_payload(event: LedgerEvent) -> str:
    """Serialize *event* to the JSON message published on the channel.

    Args:
        event: The event to serialize.

    Returns:
        str: JSON object with ``event`` (class name) and ``identity``.
    """
    return json.dumps({"event": type(event).__name__, "identity": event.identity})


class EventSink(Protocol):
    """Destination for ledger events."""

    async def emit(self, event: LedgerEvent) -> None:
        """Deliver *event*. Must not raise."""
        ...


async def get_redis() -> redis.Redis:
    """Create and return an async Redis client from application settings.

    Connect and socket operations are bounded by REDIS_TIMEOUT_S so an
    unreachable server delays a request by at most that long.

    Returns:
        redis.Redis: Async Redis client.
    """
    settings = get_settings()
    return redis.from_url(
        settings.REDIS_URL,
        socket_connect_timeout=settings.REDIS_TIMEOUT_S,
        socket_timeout=settings.REDIS_TIMEOUT_S,
    )


class RedisEventSink:
    """Publish events as JSON messages on a Redis pub/sub channel.

    Args:
        channel: Channel name. Defaults to EVENTS_CHANNEL from settings.
    """

    def __init__(self, channel: str | None = None) -> None:
        self.channel = channel or get_settings().EVENTS_CHANNEL

    async def emit(self, event: LedgerEvent) -> None:
        """Publish *event*, logging and suppressing any Redis failure."""
        try:
            client = await get_redis()
            try:
                await client.publish(self.channel, event_payload(event))
            finally:
                await client.aclose()
        except Exception:
            logger.warning(
                "Failed to publish %s for device %s",
                type(event).__name__, event.identity, exc_info=True,
            )
