"""Health Check — liveness endpoint for the hosting platform.

Invariants:
    - GET /health always returns 200 if the process is up
    - Never touches the ledger, the pinning provider, or the hive store
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from hivemint.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(settings: Settings = Depends(get_settings)):
    """Basic liveness check."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
    }
