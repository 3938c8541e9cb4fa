from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from status_monitor.services.liveness import ensure_utc


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            return int(float(value.strip()))
    except (ValueError, OverflowError):
        return default
    return default


# Column ranges: Integer for rssi, BigInteger for counters and timestamps.
INT32_MAX = 2**31 - 1
INT64_MAX = 2**63 - 1


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return False


def _as_str(value: Any, default: str, max_length: int) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return default
    text = str(value).strip()
    return text[:max_length] if text else default


class ReportIn(BaseModel):
    """Body of POST /api/status.

    Never rejects: anything missing or malformed falls back to its default,
    so an embedded client never loses a report over a schema mismatch.
    """

    device_id: str = "unknown"
    status: str = "online"
    uptime_seconds: int = 0
    ip_address: str = ""
    rssi: int = 0
    free_heap: int = 0
    is_boot: bool = False
    client_timestamp: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> dict:
        if not isinstance(data, dict):
            return {}
        timestamp = _as_int(data.get("client_timestamp", data.get("timestamp")))
        return {
            "device_id": _as_str(data.get("device_id"), "unknown", 255),
            "status": _as_str(data.get("status"), "online", 20),
            "uptime_seconds": _clamp(_as_int(data.get("uptime_seconds")), 0, INT64_MAX),
            "ip_address": _as_str(data.get("ip_address"), "", 64),
            "rssi": _clamp(_as_int(data.get("rssi")), -INT32_MAX - 1, INT32_MAX),
            "free_heap": _clamp(_as_int(data.get("free_heap")), 0, INT64_MAX),
            "is_boot": _as_bool(data.get("is_boot")),
            "client_timestamp": timestamp if 0 < abs(timestamp) <= INT64_MAX else None,
        }


class StatusAck(BaseModel):
    success: bool = True
    message: str = "Status received"


class HistoryEntry(BaseModel):
    """A stored report, or a gap marker synthesized for display."""

    model_config = {"from_attributes": True}

    id: int | str
    device_id: str
    status: str
    uptime_seconds: int | None = None
    ip_address: str | None = None
    rssi: int | None = None
    free_heap: int | None = None
    is_boot: bool | None = None
    client_timestamp: int | None = None
    server_timestamp: datetime
    is_synthetic: bool = False
    is_offline_marker: bool = False

    @field_validator("server_timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class StatusResponse(BaseModel):
    device_id: str
    status: str
    last_seen: datetime
    minutes_since_last_seen: float
    latest_update: HistoryEntry | None = None


class NoDeviceResponse(BaseModel):
    status: str = "offline"
    message: str = "No device data"


class StatsResponse(BaseModel):
    total_updates: int
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    boot_count: int

    @field_validator("first_seen", "last_seen")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None


class DeviceResponse(BaseModel):
    device_id: str
    status: str
    stored_status: str
    last_seen: datetime
    minutes_since_last_seen: float
    total_uptime: int


class TransitionResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    device_id: str
    from_status: str
    to_status: str
    source: str
    occurred_at: datetime

    @field_validator("occurred_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)
