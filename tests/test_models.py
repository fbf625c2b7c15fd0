"""
Tests for the ledger ORM models.

Validates table names, primary keys, column types and nullability.

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from sqlalchemy import BigInteger, LargeBinary, Text

from device_ledger.db.models import (
    ChainClock,
    Device,
    EnergyReading,
    RegistryState,
    SequenceCounter,
)


def _pk(model) -> list[str]:
    return [col.name for col in model.__table__.primary_key.columns]


class TestKeys:
    """Primary keys define the ledger's indexes."""

    def test_device_keyed_by_identity(self) -> None:
        assert _pk(Device) == ["identity"]

    def test_reading_keyed_by_identity_and_sequence(self) -> None:
        assert _pk(EnergyReading) == ["identity", "sequence"]

    def test_counter_keyed_by_identity(self) -> None:
        assert _pk(SequenceCounter) == ["identity"]

    def test_singleton_tables(self) -> None:
        assert _pk(ChainClock) == ["id"]
        assert _pk(RegistryState) == ["id"]


class TestColumnTypes:
    """Payloads are binary, counters and blocks are BIGINT."""

    def test_reading_payloads_are_binary(self) -> None:
        for name in ("voltage", "current", "energy", "energy_accumulated"):
            col = EnergyReading.__table__.columns[name]
            assert isinstance(col.type, LargeBinary)
            assert col.nullable is False

    def test_descriptor_is_binary(self) -> None:
        assert isinstance(Device.__table__.columns["descriptor"].type, LargeBinary)

    def test_identity_is_text(self) -> None:
        for model in (Device, SequenceCounter, EnergyReading):
            assert isinstance(model.__table__.columns["identity"].type, Text)

    def test_counters_are_bigint(self) -> None:
        assert isinstance(RegistryState.__table__.columns["device_count"].type, BigInteger)
        assert isinstance(SequenceCounter.__table__.columns["value"].type, BigInteger)
        assert isinstance(EnergyReading.__table__.columns["sequence"].type, BigInteger)
        assert isinstance(ChainClock.__table__.columns["block_number"].type, BigInteger)

    def test_device_count_check_constraint(self) -> None:
        names = {c.name for c in RegistryState.__table__.constraints}
        assert "ck_registry_state_device_count" in names


class TestRepr:
    def test_device_repr(self) -> None:
        device = Device(identity="deviceA", descriptor=b"", registered_at=3)
        assert repr(device) == "Device(identity='deviceA', registered_at=3)"
