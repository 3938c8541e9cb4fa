"""Transition detection: online/offline crossings, emitted once per crossing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from status_monitor.db.models import DeviceState
from status_monitor.db.repositories import ReportRepository, TransitionRepository
from status_monitor.observability.metrics import DEVICE_TRANSITIONS_TOTAL, SYNTHETIC_REPORTS_TOTAL
from status_monitor.services.liveness import OFFLINE, ONLINE, Liveness

logger = structlog.get_logger()

SOURCE_REPORT = "report"
SOURCE_READ = "read"
SOURCE_SWEEP = "sweep"


@dataclass(frozen=True)
class Transition:
    device_id: str
    from_status: str
    to_status: str
    source: str
    occurred_at: datetime


def epoch_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


class TransitionDetector:
    """Compares a device's stored status with what was just observed.

    Works inside the caller's session and transaction; it never commits.
    """

    async def on_report(
        self, session: AsyncSession, device: DeviceState, reported_status: str, now: datetime,
    ) -> Transition | None:
        """Called before ``device.status`` is overwritten by a new report."""
        previous = device.status
        if previous == reported_status:
            return None

        transition = Transition(device.device_id, previous, reported_status, SOURCE_REPORT, now)
        if reported_status == ONLINE:
            logger.info("device_came_online", device_id=device.device_id, previous_status=previous)
        elif reported_status == OFFLINE:
            logger.warning("device_went_offline", device_id=device.device_id, source=SOURCE_REPORT)
        else:
            logger.info(
                "device_status_changed",
                device_id=device.device_id,
                previous_status=previous,
                status=reported_status,
            )
        await self._record(session, transition)
        return transition

    async def on_evaluation(
        self,
        session: AsyncSession,
        device: DeviceState,
        liveness: Liveness,
        now: datetime,
        source: str,
    ) -> Transition | None:
        """Offline path shared by status reads and sweep ticks.

        Only a device not already stored as offline can go offline, so
        repeated reads and ticks after the first one are no-ops until a new
        report brings the device back.
        """
        if liveness.is_online or device.status == OFFLINE:
            return None

        transition = Transition(device.device_id, device.status, OFFLINE, source, now)
        logger.warning(
            "device_went_offline",
            device_id=device.device_id,
            source=source,
            minutes_since_last_seen=liveness.minutes_since_last_seen,
        )
        device.status = OFFLINE
        await ReportRepository(session).add(
            device_id=device.device_id,
            status=OFFLINE,
            uptime_seconds=0,
            ip_address="",
            rssi=0,
            free_heap=0,
            is_boot=False,
            client_timestamp=epoch_millis(now),
            server_timestamp=now,
            is_synthetic=True,
        )
        SYNTHETIC_REPORTS_TOTAL.labels(source=source).inc()
        await self._record(session, transition)
        return transition

    async def _record(self, session: AsyncSession, transition: Transition) -> None:
        await TransitionRepository(session).add(
            device_id=transition.device_id,
            from_status=transition.from_status,
            to_status=transition.to_status,
            source=transition.source,
            occurred_at=transition.occurred_at,
        )
        DEVICE_TRANSITIONS_TOTAL.labels(
            to_status=transition.to_status, source=transition.source
        ).inc()
