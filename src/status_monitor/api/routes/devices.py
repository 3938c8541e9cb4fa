from fastapi import APIRouter, Depends, HTTPException

from status_monitor.api.dependencies import get_status_service
from status_monitor.api.routes.history import parse_limit
from status_monitor.schemas.report import DeviceResponse, TransitionResponse
from status_monitor.services.status_service import StatusService

router = APIRouter(prefix="/api", tags=["devices"])


@router.get("/devices", response_model=list[DeviceResponse])
async def list_devices(service: StatusService = Depends(get_status_service)):
    return await service.list_devices()


@router.get("/devices/{device_id}", response_model=DeviceResponse)
async def get_device(device_id: str, service: StatusService = Depends(get_status_service)):
    device = await service.get_device(device_id)
    if not device:
        raise HTTPException(status_code=404, detail="Device not found")
    return device


@router.get("/transitions", response_model=list[TransitionResponse])
async def list_transitions(
    limit: str | None = None,
    device_id: str | None = None,
    service: StatusService = Depends(get_status_service),
):
    cfg = service.settings
    return await service.transitions(
        parse_limit(limit, cfg.history_default_limit, cfg.history_max_limit),
        device_id=device_id,
    )
