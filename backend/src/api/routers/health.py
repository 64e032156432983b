"""Health check endpoints."""
import logging

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

    status: str
    database: str
    cache: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Check application, database and cache health.

    The cache is optional: when Redis is disabled or down, lookups are served
    straight from the database, so an unavailable cache only reports "degraded".
    """
    db_status = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        db_status = "unhealthy"

    redis_client = get_redis_client()
    if redis_client is None or not redis_client.is_connected:
        cache_status = "unavailable"
    elif await redis_client.ping():
        cache_status = "healthy"
    else:
        cache_status = "unhealthy"

    if db_status != "healthy":
        status = "unhealthy"
    elif cache_status != "healthy":
        status = "degraded"
    else:
        status = "healthy"

    return HealthResponse(status=status, database=db_status, cache=cache_status)
