"""
Translation Proxy - Main Entry Point

Serves the translation API and, when enabled, the scheduled DeepL quota check.
"""

import asyncio
import logging

import structlog

from transproxy.config import Settings, get_settings
from transproxy.core import get_scheduler, shutdown_scheduler
from transproxy.core.scheduler import USAGE_MONITOR_JOB_ID


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    # Set log level
    log_level = getattr(logging, settings.log_level)

    # Configure structlog
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route standard logging through the structlog renderer
    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    logging.basicConfig(level=log_level, handlers=[handler], force=True)

    # Set third-party loggers to WARNING
    for logger_name in ["aiohttp", "apscheduler", "httpx", "openai", "deepl"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def schedule_usage_monitor(settings: Settings) -> bool:
    """Register the periodic DeepL quota check if configured."""
    logger = logging.getLogger(__name__)

    if not settings.monitor_enabled:
        return False
    if not settings.deepl_api_key:
        logger.warning("MONITOR_ENABLED is set but DEEPL_API_KEY is missing")
        return False
    if not settings.mail_enabled:
        logger.warning("EMAIL_FROM or EMAIL_TO is missing, usage alerts will only be logged")

    from transproxy.services.usage_monitor import get_usage_monitor

    scheduler = get_scheduler()
    scheduler.add_job(
        get_usage_monitor().run_scheduled,
        job_id=USAGE_MONITOR_JOB_ID,
        interval_minutes=settings.monitor_interval_minutes,
        run_immediately=True,
    )
    scheduler.start()
    return True


async def main() -> None:
    """Main entry point."""
    settings = get_settings()

    # Setup
    setup_logging(settings)
    logger = logging.getLogger(__name__)

    logger.info("=" * 50)
    logger.info("  Translation Proxy Starting...")
    logger.info("=" * 50)
    logger.info(f"  Providers:   {' -> '.join(settings.translation_providers)}")
    logger.info(f"  Analytics:   {'✓ enabled' if settings.analytics_url else '✗ disabled'}")
    logger.info(f"  Monitor:     {'✓ enabled' if settings.can_monitor() else '✗ disabled'}")
    logger.info(f"  Alert mail:  {'✓ enabled' if settings.mail_enabled else '✗ disabled'}")
    logger.info(f"  Listening:   {settings.api_host}:{settings.api_port}")
    logger.info("=" * 50)

    schedule_usage_monitor(settings)

    from transproxy.api import run_api_server

    try:
        await run_api_server()
    except asyncio.CancelledError:
        logger.info("Server task cancelled")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        raise
    finally:
        shutdown_scheduler(wait=False)
        logger.info("Shutdown complete")


def cli() -> None:
    """CLI entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
