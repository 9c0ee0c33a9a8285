"""
Health Check Endpoints
Endpoints for health checks and status monitoring.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..dependencies import get_db, get_otp_store
from ..services.otp_store import RedisOTPStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """
    Basic health check.

    Returns:
        Simple health status
    """
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/status", status_code=status.HTTP_200_OK)
async def status_check(
    db: Session = Depends(get_db),
    otp_store: RedisOTPStore = Depends(get_otp_store),
) -> Dict[str, Any]:
    """
    Detailed status check of the database and the Redis OTP store.

    Returns:
        Overall status ("healthy" or "degraded") with per-component detail
    """
    settings = get_settings()
    status_info = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.version,
        "components": {},
    }

    try:
        db.execute(text("SELECT 1"))
        status_info["components"]["database"] = {
            "status": "healthy",
            "url": settings.database_url.split("@")[-1],  # Hide credentials
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        status_info["components"]["database"] = {"status": "unhealthy", "error": str(e)}
        status_info["status"] = "degraded"

    if otp_store.ping():
        status_info["components"]["redis"] = {"status": "healthy"}
    else:
        logger.error("Redis health check failed")
        status_info["components"]["redis"] = {"status": "unhealthy"}
        status_info["status"] = "degraded"

    return status_info
