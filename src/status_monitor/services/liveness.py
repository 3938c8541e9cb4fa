"""Liveness evaluation: online/offline from report recency."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

ONLINE = "online"
OFFLINE = "offline"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


@dataclass(frozen=True)
class Liveness:
    status: str
    seconds_since_last_seen: float

    @property
    def minutes_since_last_seen(self) -> float:
        return round(self.seconds_since_last_seen / 60, 1)

    @property
    def is_online(self) -> bool:
        return self.status == ONLINE


def evaluate(now: datetime, last_seen: datetime, threshold_seconds: float) -> Liveness:
    """Classify a device as online iff it was seen strictly less than
    ``threshold_seconds`` before ``now``.

    Pure: the caller supplies ``now``.
    """
    elapsed = (ensure_utc(now) - ensure_utc(last_seen)).total_seconds()
    status = ONLINE if elapsed < threshold_seconds else OFFLINE
    return Liveness(status=status, seconds_since_last_seen=elapsed)
