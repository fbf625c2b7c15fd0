"""
Shared test fixtures for ledger tests.

Every test gets its own SQLite database file under ``tmp_path``. The schema
is created through a synchronous engine; services and the API talk to the
same file through the ``sqlite+aiosqlite`` driver with ``NullPool`` so no
connection outlives the event loop that opened it.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from collections.abc import AsyncGenerator, Iterator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import create_engine as create_sync_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from device_ledger.api import deps
from device_ledger.api.deps import get_event_sink
from device_ledger.auth.origin import Administrator, IdentifiedCaller
from device_ledger.db.models import Base
from device_ledger.db.session import get_async_session
from device_ledger.events import LedgerEvent
from device_ledger.main import app

ADMIN_TOKEN = "admin-secret"
DEVICE_A_TOKEN = "token-a"
DEVICE_B_TOKEN = "token-b"

ADMIN = Administrator()
DEVICE_A = IdentifiedCaller("deviceA")
DEVICE_B = IdentifiedCaller("deviceB")


class MemoryEventSink:
    """Event sink that collects events in a list, in emission order."""

    def __init__(self) -> None:
        self.events: list[LedgerEvent] = []

    async def emit(self, event: LedgerEvent) -> None:
        self.events.append(event)


@pytest.fixture()
def db_file(tmp_path: Path) -> Path:
    """Path of the per-test SQLite database file."""
    return tmp_path / "ledger.db"


@pytest.fixture(autouse=True)
def _set_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, db_file: Path,
) -> Iterator[None]:
    """Set required env vars, isolate from .env files, reset cached auth."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("ADMIN_TOKENS", ADMIN_TOKEN)
    monkeypatch.setenv(
        "DEVICE_TOKENS",
        f"{DEVICE_A_TOKEN}:{DEVICE_A.identity},{DEVICE_B_TOKEN}:{DEVICE_B.identity}",
    )
    deps.reset_bearer_auth()
    yield
    deps.reset_bearer_auth()


@pytest.fixture()
def session_factory(db_file: Path) -> async_sessionmaker[AsyncSession]:
    """Create the schema and return a session factory bound to it."""
    sync_engine = create_sync_engine(f"sqlite:///{db_file}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session on the per-test database."""
    async with session_factory() as s:
        yield s


@pytest.fixture()
def sink() -> MemoryEventSink:
    """Event sink that records emitted events in order."""
    return MemoryEventSink()


@pytest.fixture()
def client(
    session_factory: async_sessionmaker[AsyncSession], sink: MemoryEventSink,
) -> Iterator[TestClient]:
    """TestClient backed by the per-test database and the in-memory sink.

    Authentication is real: requests carry ADMIN_TOKEN or a device token.
    """
    async def override_get_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_async_session] = override_get_session
    app.dependency_overrides[get_event_sink] = lambda: sink

    yield TestClient(app)

    app.dependency_overrides.clear()


def bearer(token: str) -> dict[str, str]:
    """Return an Authorization header for *token*."""
    return {"Authorization": f"Bearer {token}"}
