from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from backoffice.api.health import router as health_router
from backoffice.api.router import api_router
from backoffice.config import get_settings
from backoffice.db import dispose_engine
from backoffice.exceptions import setup_exception_handlers
from backoffice.middleware import setup_middleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from backoffice.config import Settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager for startup and shutdown."""
    settings = get_settings()
    logger.info("Starting %s v%s [%s]", settings.app_name, settings.app_version, settings.environment)
    yield
    await dispose_engine()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()
    configure_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    setup_middleware(application, settings)
    setup_exception_handlers(application)

    application.include_router(health_router)
    application.include_router(api_router)

    return application


app = create_app()
