from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class StatusReport(Base):
    """One ingested report. Append-only."""

    __tablename__ = "status_updates"
    __table_args__ = (
        Index("ix_status_updates_device_server_ts", "device_id", "server_timestamp"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    uptime_seconds: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    ip_address: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    rssi: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    free_heap: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    is_boot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    client_timestamp: Mapped[int | None] = mapped_column(BigInteger)
    server_timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    is_synthetic: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class DeviceState(Base):
    """Latest known state, one row per device."""

    __tablename__ = "devices"

    device_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    last_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="offline")
    total_uptime: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class DeviceTransition(Base):
    __tablename__ = "device_transitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    device_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    from_status: Mapped[str] = mapped_column(String(20), nullable=False)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
