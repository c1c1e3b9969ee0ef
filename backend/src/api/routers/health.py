"""Health check endpoint."""
import logging
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from core.redis import get_redis_client
from db.session import get_async_session


logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "degraded"]
    database: Literal["healthy", "unhealthy"]
    redis: Literal["connected", "unavailable"]


async def check_database_health(db: AsyncSession) -> Literal["healthy", "unhealthy"]:
    """Run a trivial query against the database."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        return "unhealthy"
    return "healthy"


async def check_redis_health() -> Literal["connected", "unavailable"]:
    """Ping Redis. The client never raises; a missing client counts as unavailable."""
    redis_client = get_redis_client()
    if redis_client is not None and await redis_client.ping():
        return "connected"
    return "unavailable"


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Report database and Redis status.

    Redis only backs rate limiting (which fails open), so the app reports
    'healthy' without it; only a database failure makes it 'degraded'.
    """
    database = await check_database_health(db)
    return HealthResponse(
        status="healthy" if database == "healthy" else "degraded",
        database=database,
        redis=await check_redis_health(),
    )
