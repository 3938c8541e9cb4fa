from fastapi import APIRouter, Depends

from status_monitor.api.dependencies import get_status_service
from status_monitor.schemas.report import StatsResponse
from status_monitor.services.status_service import StatusService

router = APIRouter(prefix="/api", tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: StatusService = Depends(get_status_service)):
    return await service.stats()
