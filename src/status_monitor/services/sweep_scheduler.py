import asyncio
import time
from datetime import datetime

import structlog

from status_monitor.observability.metrics import DEVICES_BY_STATUS, SWEEP_DURATION, SWEEP_TICKS_TOTAL
from status_monitor.services.liveness import OFFLINE, ONLINE
from status_monitor.services.status_service import StatusService
from status_monitor.services.transitions import SOURCE_SWEEP, Transition

logger = structlog.get_logger()


class SweepScheduler:
    """Periodic liveness pass over every known device.

    Marks stale devices offline even when nobody polls GET /api/status.
    Goes through the same StatusService (and device locks) as the HTTP
    handlers.
    """

    def __init__(self, service: StatusService, interval_seconds: float) -> None:
        self.service = service
        self.interval_seconds = interval_seconds
        self.last_tick_at: datetime | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="sweep")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Only the sweep task's own cancellation is expected here.
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
        logger.info("sweep_stopped")

    async def _run(self) -> None:
        logger.info(
            "sweep_started",
            interval=self.interval_seconds,
            threshold=self.service.threshold_seconds,
        )
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception:
                logger.exception("sweep_tick_error")

    async def run_once(self) -> list[Transition]:
        start = time.perf_counter()
        now = self.service.clock()
        try:
            devices = await self.service.list_device_states()
        except Exception:
            logger.exception("sweep_tick_failed")
            SWEEP_TICKS_TOTAL.labels(outcome="failed").inc()
            return []

        transitions: list[Transition] = []
        counts = {ONLINE: 0, OFFLINE: 0}
        for device in devices:
            liveness = self.service.evaluate(device, now)
            counts[liveness.status] += 1
            if liveness.is_online or device.status == OFFLINE:
                continue
            # Re-checked under the device lock; a report that landed since the
            # listing wins and check_device returns None.
            try:
                transition = await self.service.check_device(device.device_id, SOURCE_SWEEP)
            except Exception:
                logger.exception("sweep_device_failed", device_id=device.device_id)
                continue
            if transition is not None:
                transitions.append(transition)

        for status, count in counts.items():
            DEVICES_BY_STATUS.labels(status=status).set(count)
        self.last_tick_at = now
        SWEEP_TICKS_TOTAL.labels(outcome="ok").inc()
        SWEEP_DURATION.observe(time.perf_counter() - start)
        logger.debug("sweep_tick", devices=len(devices), transitions=len(transitions))
        return transitions
