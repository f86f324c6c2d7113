"""
Health check endpoint.
"""

from datetime import datetime
from fastapi import APIRouter, Depends
from typing import Dict, Any

from meeting_bot.api.v1.schemas.meeting import HealthCheckResponse
from meeting_bot.config import settings
from meeting_bot.core.dependencies import get_orchestrator

router = APIRouter()


@router.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check(orchestrator=Depends(get_orchestrator)) -> Dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        Health status with timestamp, version and session counts
    """
    status = orchestrator.get_status()
    return {
        "status": "ok",
        "timestamp": datetime.now(),
        "version": settings.version,
        "active_meetings": len(status["active_sessions"]),
        "scheduled_joins": len(status["scheduled_joins"]),
    }
