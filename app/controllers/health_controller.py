"""
Health checks for the API and its database
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import cache
from app.core.config import settings
from app.core.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/health",
    tags=["Health Check"],
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get(
    "/",
    status_code=status.HTTP_200_OK,
    summary="Health Check",
    description="Reports API status, database connectivity, cache and rate limit settings"
)
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.error(f"Database connectivity check failed: {e}")
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "timestamp": _now(),
        "environment": settings.ENVIRONMENT,
        "database": {
            "status": db_status
        },
        "cache": {
            "status": "enabled" if settings.CACHE_ENABLED else "disabled",
            "size": len(cache),
            "max_size": cache.maxsize,
            "ttl_seconds": settings.CACHE_TTL_SECONDS
        },
        "rate_limiting": {
            "enabled": settings.RATE_LIMIT_ENABLED,
            "auth_limit": settings.AUTH_RATE_LIMIT
        }
    }


@router.get(
    "/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness Check",
    description="Reports whether the API can serve requests"
)
def readiness_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"API is not ready: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "timestamp": _now(), "error": str(e)},
        )
    return {"status": "ready", "timestamp": _now()}


@router.get(
    "/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness Check",
    description="Reports whether the process is running"
)
def liveness_check():
    return {"status": "alive", "timestamp": _now()}
