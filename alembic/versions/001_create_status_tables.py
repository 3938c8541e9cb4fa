"""Create status_updates and devices tables

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "status_updates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("device_id", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("uptime_seconds", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("ip_address", sa.String(64), nullable=False, server_default=""),
        sa.Column("rssi", sa.Integer, nullable=False, server_default="0"),
        sa.Column("free_heap", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("is_boot", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("client_timestamp", sa.BigInteger),
        sa.Column("server_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_synthetic", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_status_updates_server_timestamp", "status_updates", ["server_timestamp"])
    op.create_index(
        "ix_status_updates_device_server_ts", "status_updates", ["device_id", "server_timestamp"]
    )

    op.create_table(
        "devices",
        sa.Column("device_id", sa.String(255), primary_key=True),
        sa.Column("last_seen", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="offline"),
        sa.Column("total_uptime", sa.BigInteger, nullable=False, server_default="0"),
    )


def downgrade() -> None:
    op.drop_table("devices")
    op.drop_index("ix_status_updates_device_server_ts", table_name="status_updates")
    op.drop_index("ix_status_updates_server_timestamp", table_name="status_updates")
    op.drop_table("status_updates")
