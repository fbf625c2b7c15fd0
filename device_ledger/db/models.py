"""
SQLAlchemy ORM models for the ledger database.

Defines the registry (devices and the device count), the per-device energy
ledger (sequence counters and readings) and the chain clock that supplies
block markers to every state transition.

Measurement and descriptor payloads are opaque bytes stored verbatim.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from sqlalchemy import BigInteger, CheckConstraint, LargeBinary, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Primary key of the single-row bookkeeping tables.
SINGLETON_ID = 1


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ledger ORM models."""

    pass


class ChainClock(Base):
    """Monotonic block marker advanced once per committed transition.

    The single row is also the serialization point: every mutating
    operation locks it before touching registry or ledger state.
    """

    __tablename__ = "chain_clock"

    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False, default=SINGLETON_ID,
    )
    block_number: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class RegistryState(Base):
    """Registry-wide scalars. Holds the number of registered devices."""

    __tablename__ = "registry_state"
    __table_args__ = (
        CheckConstraint("device_count >= 0", name="ck_registry_state_device_count"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False, default=SINGLETON_ID,
    )
    device_count: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class Device(Base):
    """A registered metering unit.

    A row exists if and only if the device is currently onboarded.

    Attributes:
        identity: Opaque caller identity, unique across the registry.
        descriptor: Opaque payload supplied at onboarding (e.g. a metadata hash).
        registered_at: Block marker at the time of onboarding.
    """

    __tablename__ = "devices"

    identity: Mapped[str] = mapped_column(Text, primary_key=True, nullable=False)
    descriptor: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    registered_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        """Return string representation of the Device."""
        return (
            f"Device(identity={self.identity!r}, "
            f"registered_at={self.registered_at!r})"
        )


class SequenceCounter(Base):
    """Last sequence number assigned to an identity's readings.

    Keyed by identity independently of the ``devices`` table: removing a
    device leaves its counter in place.
    """

    __tablename__ = "sequence_counters"

    identity: Mapped[str] = mapped_column(Text, primary_key=True, nullable=False)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class EnergyReading(Base):
    """One telemetry sample in a device's append-only ledger.

    Immutable once written. The composite primary key
    (identity, sequence) is the reading's index.

    Attributes:
        identity: Identity of the device that recorded the reading.
        sequence: Position in the device's ledger, starting at 1.
        voltage: Encoded voltage measurement.
        current: Encoded current measurement.
        energy: Encoded energy measurement.
        energy_accumulated: Encoded accumulated energy measurement.
        recorded_at: Block marker at the time of recording.
    """

    __tablename__ = "energy_readings"

    identity: Mapped[str] = mapped_column(Text, primary_key=True, nullable=False)
    sequence: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False, nullable=False,
    )
    voltage: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    current: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    energy: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    energy_accumulated: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    recorded_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        """Return string representation of the EnergyReading."""
        return (
            f"EnergyReading(identity={self.identity!r}, "
            f"sequence={self.sequence!r}, recorded_at={self.recorded_at!r})"
        )
