from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from status_monitor.config import Settings
from status_monitor.db.models import DeviceState, StatusReport
from status_monitor.db.repositories import DeviceRepository, ReportRepository, TransitionRepository
from status_monitor.observability.metrics import REPORTS_RECEIVED_TOTAL
from status_monitor.schemas.report import (
    DeviceResponse,
    HistoryEntry,
    ReportIn,
    StatsResponse,
    StatusResponse,
    TransitionResponse,
)
from status_monitor.services.device_locks import DeviceLocks
from status_monitor.services.gap_synthesizer import synthesize_gaps
from status_monitor.services.liveness import Liveness, ensure_utc, evaluate, utcnow
from status_monitor.services.transitions import (
    SOURCE_READ,
    Transition,
    TransitionDetector,
    epoch_millis,
)

logger = structlog.get_logger()


class StatusService:
    """Report ingest, liveness reads and the per-device check shared with the sweep.

    Every write to a device row happens under that device's lock and inside
    one transaction, so a report and the device state it produces become
    visible together.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
        detector: TransitionDetector | None = None,
        locks: DeviceLocks | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.settings = settings
        self.clock = clock
        self.detector = detector or TransitionDetector()
        self.locks = locks or DeviceLocks()

    @property
    def threshold_seconds(self) -> float:
        return self.settings.offline_threshold_seconds

    def evaluate(self, device: DeviceState, now: datetime) -> Liveness:
        return evaluate(now, device.last_seen, self.threshold_seconds)

    async def ingest(self, report: ReportIn) -> StatusReport:
        async with self.locks.hold(report.device_id):
            now = self.clock()
            async with self.session_factory.begin() as session:
                row = await ReportRepository(session).add(
                    device_id=report.device_id,
                    status=report.status,
                    uptime_seconds=report.uptime_seconds,
                    ip_address=report.ip_address,
                    rssi=report.rssi,
                    free_heap=report.free_heap,
                    is_boot=report.is_boot,
                    client_timestamp=report.client_timestamp or epoch_millis(now),
                    server_timestamp=now,
                )
                devices = DeviceRepository(session)
                device = await devices.get(report.device_id, for_update=True)
                if device is None:
                    await devices.create(
                        device_id=report.device_id, last_seen=now, status=report.status, total_uptime=0,
                    )
                    logger.info("device_registered", device_id=report.device_id)
                else:
                    await self.detector.on_report(session, device, report.status, now)
                    device.status = report.status
                    # Receipt time only moves forward; late reports are kept
                    # in the log but never rewind last_seen.
                    device.last_seen = max(ensure_utc(device.last_seen), now)

        REPORTS_RECEIVED_TOTAL.inc()
        logger.info(
            "report_received",
            device_id=report.device_id,
            status=report.status,
            uptime_seconds=report.uptime_seconds,
            is_boot=report.is_boot,
        )
        return row

    async def check_device(self, device_id: str, source: str) -> Transition | None:
        """Evaluate one device now and run the offline path if it went stale."""
        async with self.locks.hold(device_id):
            now = self.clock()
            async with self.session_factory.begin() as session:
                device = await DeviceRepository(session).get(device_id, for_update=True)
                if device is None:
                    return None
                return await self.detector.on_evaluation(
                    session, device, self.evaluate(device, now), now, source
                )

    async def current_status(self, device_id: str | None = None) -> StatusResponse | None:
        async with self.session_factory() as session:
            devices = DeviceRepository(session)
            device = await devices.get(device_id) if device_id else await devices.most_recent()
        if device is None:
            return None

        target = device.device_id
        async with self.locks.hold(target):
            now = self.clock()
            async with self.session_factory.begin() as session:
                device = await DeviceRepository(session).get(target, for_update=True)
                liveness = self.evaluate(device, now)
                await self.detector.on_evaluation(session, device, liveness, now, SOURCE_READ)
                latest = await ReportRepository(session).latest_for_device(target, real_only=True)
                return StatusResponse(
                    device_id=target,
                    status=liveness.status,
                    last_seen=ensure_utc(device.last_seen),
                    minutes_since_last_seen=liveness.minutes_since_last_seen,
                    latest_update=HistoryEntry.model_validate(latest) if latest else None,
                )

    async def history(self, limit: int, device_id: str | None = None) -> list[HistoryEntry]:
        async with self.session_factory() as session:
            rows = await ReportRepository(session).list_recent(limit, device_id=device_id)
        entries = [HistoryEntry.model_validate(row) for row in rows]
        return synthesize_gaps(entries, self.threshold_seconds)

    async def stats(self) -> StatsResponse:
        async with self.session_factory() as session:
            return StatsResponse(**await ReportRepository(session).stats())

    async def list_device_states(self) -> list[DeviceState]:
        async with self.session_factory() as session:
            return await DeviceRepository(session).list_all()

    async def list_devices(self) -> list[DeviceResponse]:
        now = self.clock()
        return [self._device_view(device, now) for device in await self.list_device_states()]

    async def get_device(self, device_id: str) -> DeviceResponse | None:
        async with self.session_factory() as session:
            device = await DeviceRepository(session).get(device_id)
        if device is None:
            return None
        return self._device_view(device, self.clock())

    async def transitions(self, limit: int, device_id: str | None = None) -> list[TransitionResponse]:
        async with self.session_factory() as session:
            rows = await TransitionRepository(session).list_recent(limit, device_id=device_id)
        return [TransitionResponse.model_validate(row) for row in rows]

    async def ping(self) -> None:
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))

    def _device_view(self, device: DeviceState, now: datetime) -> DeviceResponse:
        liveness = self.evaluate(device, now)
        return DeviceResponse(
            device_id=device.device_id,
            status=liveness.status,
            stored_status=device.status,
            last_seen=ensure_utc(device.last_seen),
            minutes_since_last_seen=liveness.minutes_since_last_seen,
            total_uptime=device.total_uptime,
        )
