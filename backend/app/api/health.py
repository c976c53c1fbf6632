"""Health check endpoint."""

import time
from fastapi import APIRouter

from app.models.responses import HealthResponse
from app.validators import validation_engine

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Service health: the rule chain must be loaded."""
    rules_loaded = len(validation_engine.rules)

    return HealthResponse(
        status="healthy" if rules_loaded > 0 else "unhealthy",
        uptime_seconds=round(time.time() - _start_time, 2),
        rules_loaded=rules_loaded,
    )
