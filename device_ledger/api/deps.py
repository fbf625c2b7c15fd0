"""
FastAPI dependency injection providers.

Provides database sessions, the call origin resolved from the Bearer
token, the event sink, and application settings for use with FastAPI's
Depends() mechanism.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from typing import Annotated

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from device_ledger.auth.bearer import BearerAuth, parse_admin_tokens, parse_device_tokens
from device_ledger.auth.origin import Origin
from device_ledger.config import Settings, get_settings
from device_ledger.db.session import get_async_session
from device_ledger.events import EventSink, RedisEventSink

# Type alias for injecting an async DB session via FastAPI Depends().
DbSession = Annotated[AsyncSession, Depends(get_async_session)]

AppSettings = Annotated[Settings, Depends(get_settings)]


# ---------------------------------------------------------------------------
# Origin resolution
# ---------------------------------------------------------------------------

_bearer_auth: BearerAuth | None = None

# Module-level HTTPBearer scheme so FastAPI registers it in OpenAPI
# securitySchemes. auto_error=False lets BearerAuth answer 401 itself.
_bearer_scheme = HTTPBearer(auto_error=False)


def init_bearer_auth() -> BearerAuth:
    """Build BearerAuth from ADMIN_TOKENS and DEVICE_TOKENS.

    Called at startup so that token configuration is validated eagerly,
    and lazily on first request as a fallback. Cached after first call.

    Returns:
        BearerAuth: Configured origin resolver.
    """
    global _bearer_auth  # noqa: PLW0603
    if _bearer_auth is None:
        settings = get_settings()
        _bearer_auth = BearerAuth(
            parse_admin_tokens(settings.ADMIN_TOKENS),
            parse_device_tokens(settings.DEVICE_TOKENS),
        )
    return _bearer_auth


def reset_bearer_auth() -> None:
    """Drop the cached BearerAuth so the next request reloads token settings."""
    global _bearer_auth  # noqa: PLW0603
    _bearer_auth = None


async def get_origin(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer_scheme),
) -> Origin:
    """FastAPI dependency: resolve the Bearer token to a call origin.

    Raises:
        HTTPException: 401 if credentials are missing or the token is unknown.
    """
    return await init_bearer_auth().verify(credentials)


CallOrigin = Annotated[Origin, Depends(get_origin)]


# ---------------------------------------------------------------------------
# Event sink
# ---------------------------------------------------------------------------


def get_event_sink() -> EventSink:
    """Return the sink receiving ledger events (Redis pub/sub)."""
    return RedisEventSink()


Events = Annotated[EventSink, Depends(get_event_sink)]
