"""
Domain errors raised by the registry and ledger services.

Every ``LedgerError`` is a validation failure detected before any state is
mutated; the surrounding transaction is rolled back and the operation is
rejected without side effects.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""


class LedgerError(Exception):
    """Base class for rejected registry/ledger operations."""


class DeviceAlreadyExists(LedgerError):
    """Raised when onboarding an identity that is already registered."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Device {identity!r} already exists")


class DeviceDoesNotExist(LedgerError):
    """Raised when removing or recording for an identity that is not registered."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"Device {identity!r} does not exist")


class ArithmeticOverflow(LedgerError):
    """Raised when a counter would leave its representable range."""

    def __init__(self, counter: str, value: int, limit: int) -> None:
        self.counter = counter
        self.value = value
        self.limit = limit
        super().__init__(
            f"{counter} out of range: {value} not in [0, {limit}]"
        )


class UnauthorizedDevice(LedgerError):
    """Raised when a caller acts for an identity other than its own.

    Reserved: recording always resolves the acting device from the caller's
    own identity, so no current operation raises it.
    """

    def __init__(self, caller: str, target: str) -> None:
        self.caller = caller
        self.target = target
        super().__init__(f"Caller {caller!r} may not act for device {target!r}")

