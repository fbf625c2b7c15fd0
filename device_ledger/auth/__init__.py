"""
Authentication and origin classification.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from device_ledger.auth.bearer import (
    BearerAuth,
    parse_admin_tokens,
    parse_device_tokens,
    verify_bearer_token,
)
from device_ledger.auth.origin import (
    Administrator,
    BadOrigin,
    IdentifiedCaller,
    Origin,
    ensure_root,
    ensure_signed,
)

__all__ = [
    "Administrator",
    "BadOrigin",
    "BearerAuth",
    "IdentifiedCaller",
    "Origin",
    "ensure_root",
    "ensure_signed",
    "parse_admin_tokens",
    "parse_device_tokens",
    "verify_bearer_token",
]
