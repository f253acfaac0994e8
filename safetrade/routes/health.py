"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
Mounted without the API prefix.
"""

from fastapi import APIRouter, HTTPException

from safetrade.config.database import check_connection, get_engine
from safetrade.core.settings import settings
from safetrade.utils.dates import utc_now


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "ok",
        "timestamp": utc_now().isoformat(),
        "service": "SafeTrade Backend API",
        "version": settings.APP_VERSION,
    }


@router.get("/db")
async def database_health():
    """
    Database connectivity check.
    Runs SELECT 1 against the configured database.
    """
    try:
        check_connection()
        return {
            "status": "ok",
            "database": get_engine().dialect.name,
            "connected": True,
            "timestamp": utc_now().isoformat(),
        }
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}"
        )
