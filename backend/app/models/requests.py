"""API request models."""

from pydantic import BaseModel, ConfigDict, Field

from app.validators.models import AlertId, DiagnosticSnapshot


class StepGateRequest(BaseModel):
    """Can the user leave this form step?"""

    model_config = ConfigDict(populate_by_name=True)

    snapshot: DiagnosticSnapshot
    step: int = Field(..., ge=0, le=20, description="Diagnostic form step number")
    confirmed_alerts: list[AlertId] = Field(
        default_factory=list,
        alias="confirmedAlerts",
        description="Warning ids the user explicitly confirmed",
    )
