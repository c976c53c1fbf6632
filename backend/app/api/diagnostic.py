"""Diagnostic API — coherence validation of the diagnostic form."""

from fastapi import APIRouter, Depends

import structlog

from app.api.dependencies import enforce_rate_limit
from app.models.requests import StepGateRequest
from app.models.responses import StepGateResponse
from app.validators import (
    CoherenceReport,
    DiagnosticSnapshot,
    alerts_for_step,
    can_leave_step,
    validation_engine,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/diagnostic")


@router.post("/validate", response_model=CoherenceReport)
async def validate_diagnostic(
    snapshot: DiagnosticSnapshot,
    client_ip: str = Depends(enforce_rate_limit),
):
    """Run every coherence rule on the submitted form data.

    `blocking` is True when at least one error alert is present.
    """
    report = validation_engine.build_report(snapshot)

    if report.blocking:
        logger.info("diagnostic_blocked", client_ip=client_ip, summary=report.summary)

    return report


@router.post("/step-gate", response_model=StepGateResponse)
async def step_gate(
    request_body: StepGateRequest,
    client_ip: str = Depends(enforce_rate_limit),
):
    """Tell the form whether the user may leave the given step."""
    alerts = validation_engine.validate(request_body.snapshot)
    confirmed = [a.value for a in request_body.confirmed_alerts]

    return StepGateResponse(
        step=request_body.step,
        can_proceed=can_leave_step(alerts, request_body.step, confirmed),
        alerts=alerts_for_step(alerts, request_body.step),
    )
