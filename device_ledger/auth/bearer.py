"""
Bearer token origin resolution.

Tokens come from two environment variables: ADMIN_TOKENS (a comma-separated
list, each resolving to the administrator origin) and DEVICE_TOKENS
(comma-separated ``token:identity`` pairs, each resolving to an identified
caller). Comparisons use ``secrets.compare_digest`` so lookup time does not
depend on how much of a token matches.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

import logging
import secrets

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from device_ledger.auth.origin import Administrator, IdentifiedCaller, Origin

logger = logging.getLogger(__name__)


def parse_admin_tokens(raw: str) -> list[str]:
    """Parse a comma-separated list of administrator tokens.

    Args:
        raw: Value of ADMIN_TOKENS.

    Returns:
        list[str]: Non-empty, whitespace-stripped tokens.
    """
    return [token.strip() for token in raw.split(",") if token.strip()]


def parse_device_tokens(raw: str) -> dict[str, str]:
    """Parse ``token:identity`` pairs into a token -> identity map.

    Entries without a colon, or with an empty token or identity, are skipped
    with a warning. The identity is everything after the first colon, so
    identities may themselves contain colons.

    Args:
        raw: Value of DEVICE_TOKENS.

    Returns:
        dict[str, str]: Mapping of token to device identity.
    """
    token_map: dict[str, str] = {}
    for entry in raw.split(","):
        if not entry.strip():
            continue
        token, sep, identity = entry.partition(":")
        token, identity = token.strip(), identity.strip()
        if not sep or not token or not identity:
            logger.warning("Skipping malformed DEVICE_TOKENS entry")
            continue
        token_map[token] = identity
    return token_map


def verify_bearer_token(
    token: str,
    admin_tokens: list[str],
    device_tokens: dict[str, str],
) -> Origin | None:
    """Resolve a Bearer token to an origin.

    Every configured token is compared, so the time taken does not reveal
    which table (if any) the token belongs to.

    Args:
        token: Raw token from the Authorization header.
        admin_tokens: Tokens resolving to the administrator origin.
        device_tokens: Mapping of token to device identity.

    Returns:
        Origin | None: The resolved origin, or None for an unknown token.
    """
    if not token:
        return None
    encoded = token.encode()
    origin: Origin | None = None
    for candidate in admin_tokens:
        if secrets.compare_digest(encoded, candidate.encode()):
            origin = Administrator()
    for candidate, identity in device_tokens.items():
        if secrets.compare_digest(encoded, candidate.encode()) and origin is None:
            origin = IdentifiedCaller(identity)
    return origin


class BearerAuth:
    """Resolve Bearer credentials to call origins.

    Args:
        admin_tokens: Tokens resolving to the administrator origin.
        device_tokens: Mapping of token to device identity.
    """

    def __init__(self, admin_tokens: list[str], device_tokens: dict[str, str]) -> None:
        self.admin_tokens = admin_tokens
        self.device_tokens = device_tokens

    async def verify(
        self,
        credentials: HTTPAuthorizationCredentials | None,
    ) -> Origin:
        """Validate Bearer credentials and return their origin.

        Args:
            credentials: Parsed Authorization header, or None when absent.

        Raises:
            HTTPException: 401 if credentials are missing or the token is unknown.
        """
        if credentials is None:
            raise HTTPException(
                status_code=401,
                detail="Missing authorization credentials.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        origin = verify_bearer_token(
            credentials.credentials, self.admin_tokens, self.device_tokens,
        )
        if origin is None:
            raise HTTPException(
                status_code=401,
                detail="Invalid or expired token.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return origin
