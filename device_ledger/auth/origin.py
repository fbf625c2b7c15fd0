"""
Call origins and the gate checks applied at the entry of every operation.

An origin is resolved once at the boundary into one of two variants:
``Administrator`` (onboarding, removal) or ``IdentifiedCaller`` (recording,
acting as its own identity). Operations check for the variant they require
and reject every other one with ``BadOrigin``.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Administrator:
    """Privileged origin authorized to onboard and remove devices."""


@dataclass(frozen=True)
class IdentifiedCaller:
    """Authenticated non-privileged origin acting as its own identity.

    Attributes:
        identity: The caller's authenticated identity.
    """

    identity: str


Origin = Administrator | IdentifiedCaller


class BadOrigin(Exception):
    """Raised when an operation is invoked from the wrong origin class."""

    def __init__(self, required: str, origin: Origin) -> None:
        self.required = required
        self.origin = origin
        super().__init__(
            f"Operation requires {required} origin, got {type(origin).__name__}"
        )


def ensure_root(origin: Origin) -> None:
    """Require the administrator origin.

    Args:
        origin: Resolved origin of the call.

    Raises:
        BadOrigin: If *origin* is not an ``Administrator``.
    """
    if not isinstance(origin, Administrator):
        raise BadOrigin("administrator", origin)


def ensure_signed(origin: Origin) -> str:
    """Require an identified caller and return the identity it acts as.

    Args:
        origin: Resolved origin of the call.

    Returns:
        str: The caller's own identity.

    Raises:
        BadOrigin: If *origin* is not an ``IdentifiedCaller``.
    """
    if not isinstance(origin, IdentifiedCaller):
        raise BadOrigin("identified caller", origin)
    return origin.identity
