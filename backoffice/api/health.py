import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from backoffice.config import get_settings
from backoffice.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded"]
    database: Literal["ok", "unavailable"]
    version: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report service health, including request store connectivity."""
    settings = get_settings()
    database: Literal["ok", "unavailable"] = "ok"

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: request store unreachable")
        database = "unavailable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        database=database,
        version=settings.app_version,
        environment=settings.environment,
    )
