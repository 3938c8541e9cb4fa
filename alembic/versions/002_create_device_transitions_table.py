"""Create device_transitions table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "device_transitions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("device_id", sa.String(255), nullable=False),
        sa.Column("from_status", sa.String(20), nullable=False),
        sa.Column("to_status", sa.String(20), nullable=False),
        sa.Column("source", sa.String(20), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_device_transitions_device_id", "device_transitions", ["device_id"])
    op.create_index("ix_device_transitions_occurred_at", "device_transitions", ["occurred_at"])


def downgrade() -> None:
    op.drop_index("ix_device_transitions_occurred_at", table_name="device_transitions")
    op.drop_index("ix_device_transitions_device_id", table_name="device_transitions")
    op.drop_table("device_transitions")
