"""API response models."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal

from app.validators.models import ValidationAlert


class StepGateResponse(BaseModel):
    """Outcome of a step gate check."""

    model_config = ConfigDict(populate_by_name=True)

    step: int
    can_proceed: bool = Field(alias="canProceed")
    alerts: list[ValidationAlert] = []


class HealthResponse(BaseModel):
    """Service health."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str = "1.0.0"
    uptime_seconds: float
    rules_loaded: int
