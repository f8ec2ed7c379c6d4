"""
FastAPI application for the translation proxy.

Provides endpoints for:
- Translation with provider fallback
- DeepL quota monitoring
- Health checks
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI

from transproxy import __version__
from transproxy.config import get_settings
from transproxy.services.translation.factory import close_translation_coordinator

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    from transproxy.api.routes import health, monitor, translate

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info("API starting up...")
        yield
        await close_translation_coordinator()
        logger.info("API shutting down...")

    app = FastAPI(
        title="Translation Proxy API",
        description="DeepL translation proxy with Groq and Hugging Face fallback",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.log_level == "DEBUG" else None,
        redoc_url="/redoc" if settings.log_level == "DEBUG" else None,
    )

    # Include routers (/api/translate sets its own CORS headers and answers
    # its own preflights; no CORS middleware in front of it)
    app.include_router(health.router, tags=["Health"])
    app.include_router(translate.router, prefix="/api/translate", tags=["Translation"])
    app.include_router(monitor.router, prefix="/api", tags=["Monitoring"])

    return app


async def run_api_server() -> None:
    """Run the API server."""
    settings = get_settings()
    app = create_app()

    config = uvicorn.Config(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)

    logger.info(f"Starting API server on {settings.api_host}:{settings.api_port}")
    await server.serve()
