import re

from fastapi import APIRouter, Depends

from status_monitor.api.dependencies import get_status_service
from status_monitor.schemas.report import HistoryEntry
from status_monitor.services.status_service import StatusService

router = APIRouter(prefix="/api", tags=["history"])

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_limit(raw: str | None, default: int, maximum: int) -> int:
    """Take the leading integer of ``raw``; junk, zero and negatives mean ``default``."""
    match = _LEADING_INT_RE.match(raw) if raw else None
    value = int(match.group(1)) if match else 0
    if value <= 0:
        return default
    return min(value, maximum)


@router.get("/history", response_model=list[HistoryEntry], response_model_exclude_none=True)
async def get_history(
    limit: str | None = None,
    device_id: str | None = None,
    service: StatusService = Depends(get_status_service),
):
    cfg = service.settings
    return await service.history(
        parse_limit(limit, cfg.history_default_limit, cfg.history_max_limit),
        device_id=device_id,
    )
