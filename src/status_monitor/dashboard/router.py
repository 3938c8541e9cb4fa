from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

STATIC_DIR = Path(__file__).parent / "static"

router = APIRouter(tags=["dashboard"])


def get_static_files_app() -> StaticFiles:
    return StaticFiles(directory=str(STATIC_DIR))


@router.get("/", include_in_schema=False)
async def dashboard_index():
    return FileResponse(STATIC_DIR / "index.html")
