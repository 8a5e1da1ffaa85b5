"""
Health check endpoints.
"""

from datetime import datetime
from typing import Dict

from fastapi import APIRouter

from agrofinance.core.config import settings
from agrofinance.core.database import is_database_healthy
from agrofinance.core.redis import is_redis_healthy

router = APIRouter()


@router.get("")
async def health_check() -> Dict[str, str]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check() -> Dict[str, object]:
    """
    Readiness check endpoint that verifies all backing services are ready.

    Redis is reported as ``disabled`` when it is not configured and does not
    affect readiness then.
    """
    db_healthy = await is_database_healthy()
    redis_healthy = await is_redis_healthy()

    checks = {
        "database": "healthy" if db_healthy else "unhealthy",
        "redis": "disabled" if redis_healthy is None else ("healthy" if redis_healthy else "unhealthy"),
    }
    all_healthy = all(status != "unhealthy" for status in checks.values())

    return {
        "status": "ready" if all_healthy else "not_ready",
        "timestamp": datetime.now().isoformat(),
        "checks": checks,
    }
