import structlog
from fastapi import APIRouter, Depends, Request

from status_monitor.api.dependencies import get_status_service
from status_monitor.schemas.report import NoDeviceResponse, ReportIn, StatusAck, StatusResponse
from status_monitor.services.status_service import StatusService

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["status"])


@router.post("/status", response_model=StatusAck)
async def receive_status(request: Request, service: StatusService = Depends(get_status_service)):
    # Parsed by hand: a body FastAPI would reject with 422 still becomes a
    # report with defaults.
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("report_body_unparsable", content_length=request.headers.get("content-length"))
        payload = {}
    await service.ingest(ReportIn.model_validate(payload))
    return StatusAck()


@router.get("/status", response_model=StatusResponse | NoDeviceResponse)
async def get_status(
    device_id: str | None = None,
    service: StatusService = Depends(get_status_service),
):
    current = await service.current_status(device_id)
    if current is None:
        return NoDeviceResponse()
    return current
