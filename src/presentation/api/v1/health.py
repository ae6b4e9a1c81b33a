"""Health check endpoint for service monitoring."""

from typing import Annotated, Literal

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src import __version__
from src.core.dependencies import get_ai_client
from src.domain.interfaces import GenerativeAIClient
from src.infrastructure.database import get_db_session

logger = structlog.get_logger(__name__)

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded"]
    version: str
    database: Literal["ok", "unavailable"]
    ai_mode: Literal["live", "demo"]


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description=(
        "Reports database reachability and whether Gemini runs live or "
        "from canned demo replies."
    ),
)
async def health_check(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    ai_client: Annotated[GenerativeAIClient, Depends(get_ai_client)],
) -> HealthResponse:
    database = "ok"
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("health_database_unreachable", error=str(e))
        database = "unavailable"

    return HealthResponse(
        status="healthy" if database == "ok" else "degraded",
        version=__version__,
        database=database,
        ai_mode="live" if ai_client.is_configured else "demo",
    )
