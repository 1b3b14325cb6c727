"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from fastapi import APIRouter, HTTPException
from civix.core.settings import settings
from civix.services.store import get_dispatch_store
from datetime import datetime, timezone


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
async def database_health():
    """
    Store connectivity check.
    Runs the store's lightweight health probe (Firestore or in-memory).
    """
    try:
        details = get_dispatch_store().health_check()
        return {
            "status": "healthy",
            "connected": True,
            **details,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}"
        )
