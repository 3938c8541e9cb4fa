from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics():
    """Scrape endpoint for the sm_* request, report, transition and sweep series."""
    return Response(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)
