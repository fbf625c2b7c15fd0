"""
Ledger service configuration from environment variables using Pydantic BaseSettings.

All configuration values are loaded from environment variables at startup.
No hardcoded URLs or credentials. Counter bounds are configurable so that
deployments (and tests) can pin the overflow boundaries explicitly.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Widest value a SQL BIGINT column can hold; sequence numbers are stored there.
BIGINT_MAX = 2**63 - 1

DEFAULT_MAX_DEVICE_COUNT = 2**32 - 1
DEFAULT_MAX_SEQUENCE = BIGINT_MAX
DEFAULT_MAX_PAYLOAD_BYTES = 512
DEFAULT_REDIS_TIMEOUT_S = 0.5


class Settings(BaseSettings):
    """Ledger application settings loaded from environment variables.

    Attributes:
        DATABASE_URL: SQLAlchemy async connection string (asyncpg).
        REDIS_URL: Redis connection string for the event channel.
        ADMIN_TOKENS: Comma-separated Bearer tokens granting the
            administrator origin.
        DEVICE_TOKENS: Comma-separated token:identity pairs resolving to
            identified callers.
        EVENTS_CHANNEL: Redis pub/sub channel receiving ledger events.
        REDIS_TIMEOUT_S: Connect and socket timeout, in seconds, for Redis
            calls made while serving a request.
        MAX_DEVICE_COUNT: Largest representable device count.
        MAX_SEQUENCE: Largest representable per-device sequence number.
        MAX_PAYLOAD_BYTES: Upper bound for each byte payload accepted over HTTP.
        LOG_LEVEL: Root log level name.
    """

    DATABASE_URL: str
    REDIS_URL: str
    ADMIN_TOKENS: str
    DEVICE_TOKENS: str = ""
    EVENTS_CHANNEL: str = "ledger:events"
    REDIS_TIMEOUT_S: float = DEFAULT_REDIS_TIMEOUT_S
    MAX_DEVICE_COUNT: int = DEFAULT_MAX_DEVICE_COUNT
    MAX_SEQUENCE: int = DEFAULT_MAX_SEQUENCE
    MAX_PAYLOAD_BYTES: int = DEFAULT_MAX_PAYLOAD_BYTES
    LOG_LEVEL: str = "INFO"

    @field_validator("MAX_DEVICE_COUNT", "MAX_PAYLOAD_BYTES")
    @classmethod
    def limit_must_be_positive(cls, v: int) -> int:
        """Validate that a limit is at least 1."""
        if v < 1:
            raise ValueError("limit must be >= 1")
        return v

    @field_validator("REDIS_TIMEOUT_S")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        """Validate that the Redis timeout is greater than zero."""
        if v <= 0:
            raise ValueError("REDIS_TIMEOUT_S must be > 0")
        return v

    @field_validator("MAX_SEQUENCE")
    @classmethod
    def max_sequence_must_fit_bigint(cls, v: int) -> int:
        """Validate that sequence numbers fit the BIGINT storage column."""
        if v < 1 or v > BIGINT_MAX:
            raise ValueError(f"MAX_SEQUENCE must be >= 1 and <= {BIGINT_MAX}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v!r}")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Returns:
        Settings: Validated configuration from environment variables.
    """
    return Settings()
