import time

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from status_monitor.api.dependencies import get_status_service, get_sweep_scheduler
from status_monitor.services.status_service import StatusService
from status_monitor.services.sweep_scheduler import SweepScheduler

logger = structlog.get_logger()

router = APIRouter()


async def _check_db(service: StatusService) -> dict:
    start = time.perf_counter()
    try:
        await service.ping()
        return {"status": "ok", "latency_ms": round((time.perf_counter() - start) * 1000, 1)}
    except Exception as exc:
        logger.warning("health_db_check_failed", error=str(exc))
        return {"status": "error", "error": str(exc)}


def _check_sweep(service: StatusService, sweeper: SweepScheduler) -> dict:
    if not service.settings.sweep_enabled:
        return {"status": "disabled"}
    if not sweeper.running:
        return {"status": "error", "error": "sweep is not running"}
    return {
        "status": "ok",
        "interval_seconds": sweeper.interval_seconds,
        "last_tick_at": sweeper.last_tick_at.isoformat() if sweeper.last_tick_at else None,
    }


@router.get("/health")
async def health(
    service: StatusService = Depends(get_status_service),
    sweeper: SweepScheduler = Depends(get_sweep_scheduler),
):
    db = await _check_db(service)
    sweep = _check_sweep(service, sweeper)

    overall = "ok" if db["status"] == "ok" and sweep["status"] != "error" else "degraded"
    status_code = 200 if overall == "ok" else 503

    return JSONResponse(
        status_code=status_code,
        content={
            "status": overall,
            "dependencies": {
                "database": db,
                "sweep": sweep,
            },
        },
    )
