"""
Database package for SQLAlchemy models and session management.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from device_ledger.db.models import (
    Base,
    ChainClock,
    Device,
    EnergyReading,
    RegistryState,
    SequenceCounter,
)
from device_ledger.db.session import (
    create_engine,
    create_session_factory,
    dispose_engine,
    get_async_session,
    init_engine,
)

__all__ = [
    "Base",
    "ChainClock",
    "Device",
    "EnergyReading",
    "RegistryState",
    "SequenceCounter",
    "create_engine",
    "create_session_factory",
    "dispose_engine",
    "get_async_session",
    "init_engine",
]
