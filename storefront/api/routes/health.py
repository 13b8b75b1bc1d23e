"""Health check endpoints."""

from typing import Any

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from storefront.core.config import settings
from storefront.core.deps import DBSession
from storefront.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DBSession) -> dict[str, Any]:
    """
    Health check endpoint.

    Checks database connectivity and returns service status.
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "version": settings.version,
        "environment": settings.environment,
        "checks": {},
    }

    try:
        await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "healthy"
    except (SQLAlchemyError, OSError) as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = f"unhealthy: {e}"

    return health_status


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe: the process is up."""
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(db: DBSession) -> dict[str, str]:
    """
    Readiness probe for container orchestration.

    Returns 503 while the database is unreachable.
    """
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable"
        )
    return {"status": "ready"}
