import asyncio
import logging
import signal

import structlog
import uvicorn

from status_monitor.config import Settings, settings


def configure_logging(cfg: Settings) -> None:
    level = getattr(logging, cfg.log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if cfg.log_format == "console"
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


configure_logging(settings)

logger = structlog.get_logger()


async def main(cfg: Settings = settings) -> None:
    logger.info(
        "status_monitor_starting",
        api_port=cfg.api_port,
        offline_threshold_seconds=cfg.offline_threshold_seconds,
        sweep_interval_seconds=cfg.sweep_interval_seconds,
    )

    from status_monitor.api.app import create_app

    app = create_app(cfg)
    uvicorn_config = uvicorn.Config(
        app,
        host=cfg.api_host,
        port=cfg.api_port,
        log_level=cfg.log_level.lower(),
    )
    uvicorn_server = uvicorn.Server(uvicorn_config)

    shutdown_event = asyncio.Event()

    def _signal_handler():
        logger.info("shutdown_signal_received")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    serve_task = asyncio.create_task(uvicorn_server.serve(), name="uvicorn")
    shutdown_task = asyncio.create_task(shutdown_event.wait(), name="shutdown")

    await asyncio.wait([serve_task, shutdown_task], return_when=asyncio.FIRST_COMPLETED)

    # Graceful shutdown: uvicorn runs the lifespan exit, which stops the sweep
    logger.info("shutting_down")
    uvicorn_server.should_exit = True
    await serve_task
    shutdown_task.cancel()
    try:
        await shutdown_task
    except asyncio.CancelledError:
        pass

    logger.info("shutdown_complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
