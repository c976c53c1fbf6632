"""Main API router — combines all endpoint routers."""

from fastapi import APIRouter

from app.api.health import router as health_router
from app.api.diagnostic import router as diagnostic_router
from app.api.report import router as report_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Diagnostic coherence validation
api_router.include_router(diagnostic_router, tags=["Diagnostic"])

# Report pre-generation checks
api_router.include_router(report_router, tags=["Report"])
