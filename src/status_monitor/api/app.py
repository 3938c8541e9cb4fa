from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from status_monitor.api.middleware import RequestLoggingMiddleware
from status_monitor.api.routes import devices, health, history, metrics, stats, status
from status_monitor.config import Settings, settings as default_settings
from status_monitor.dashboard.router import get_static_files_app, router as dashboard_router
from status_monitor.db.engine import create_engine, create_session_factory, create_tables
from status_monitor.services.status_service import StatusService
from status_monitor.services.sweep_scheduler import SweepScheduler

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("FastAPI starting up")
    cfg: Settings = app.state.settings
    engine = app.state.engine
    if engine is not None and cfg.create_tables:
        await create_tables(engine)
    if cfg.sweep_enabled:
        app.state.sweep_scheduler.start()
    yield
    await app.state.sweep_scheduler.stop()
    if engine is not None:
        await engine.dispose()
    logger.info("FastAPI shut down")


async def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("storage_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(settings: Settings | None = None, service: StatusService | None = None) -> FastAPI:
    """Build the app.

    Without ``service`` the app owns its engine (created lazily, disposed on
    shutdown). Tests pass a ``StatusService`` bound to their own database.
    """
    cfg = settings or (service.settings if service else default_settings)

    app = FastAPI(
        title="Device Status Monitor",
        version="0.1.0",
        description="Heartbeat ingest and online/offline inference for remote devices",
        lifespan=lifespan,
    )

    engine = None
    if service is None:
        engine = create_engine(cfg)
        service = StatusService(create_session_factory(engine), cfg)
    app.state.settings = cfg
    app.state.engine = engine
    app.state.status_service = service
    app.state.sweep_scheduler = SweepScheduler(service, cfg.sweep_interval_seconds)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.add_exception_handler(SQLAlchemyError, _storage_error_handler)

    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(status.router)
    app.include_router(history.router)
    app.include_router(stats.router)
    app.include_router(devices.router)
    app.include_router(dashboard_router)
    app.mount("/static", get_static_files_app(), name="static")

    return app
