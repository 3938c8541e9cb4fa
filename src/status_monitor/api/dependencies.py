from fastapi import Request

from status_monitor.services.status_service import StatusService
from status_monitor.services.sweep_scheduler import SweepScheduler


def get_status_service(request: Request) -> StatusService:
    return request.app.state.status_service


def get_sweep_scheduler(request: Request) -> SweepScheduler:
    return request.app.state.sweep_scheduler
