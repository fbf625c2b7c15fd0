"""
Initial schema: registry, energy ledger and chain clock tables.

Creates the single-row bookkeeping tables (chain_clock, registry_state)
seeded with their zero rows, the devices table, the per-identity
sequence_counters table and the energy_readings table keyed by
(identity, sequence).

Revision ID: 001
Revises: None
Create Date: 2026-10-19

CHANGELOG:
- 2026-10-19: Initial creation

TODO:
- None
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# Revision identifiers used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create ledger tables and seed the bookkeeping rows."""
    chain_clock = op.create_table(
        "chain_clock",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("block_number", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    registry_state = op.create_table(
        "registry_state",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("device_count", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("device_count >= 0", name="ck_registry_state_device_count"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "devices",
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("descriptor", sa.LargeBinary(), nullable=False),
        sa.Column("registered_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("identity"),
    )
    op.create_table(
        "sequence_counters",
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("value", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("identity"),
    )
    op.create_table(
        "energy_readings",
        sa.Column("identity", sa.Text(), nullable=False),
        sa.Column("sequence", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("voltage", sa.LargeBinary(), nullable=False),
        sa.Column("current", sa.LargeBinary(), nullable=False),
        sa.Column("energy", sa.LargeBinary(), nullable=False),
        sa.Column("energy_accumulated", sa.LargeBinary(), nullable=False),
        sa.Column("recorded_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("identity", "sequence"),
    )

    op.bulk_insert(chain_clock, [{"id": 1, "block_number": 0}])
    op.bulk_insert(registry_state, [{"id": 1, "device_count": 0}])


def downgrade() -> None:
    """Drop all ledger tables."""
    op.drop_table("energy_readings")
    op.drop_table("sequence_counters")
    op.drop_table("devices")
    op.drop_table("registry_state")
    op.drop_table("chain_clock")
