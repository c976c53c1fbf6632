"""Coherence Validator — deterministic validation layer for diagnostic submissions.

Usage:
    from app.validators import validation_engine

    alerts = validation_engine.validate(snapshot)
    if has_blocking_alerts(alerts):
        # Send the user back to alerts[0].step
"""

from app.validators.engine import CoherenceEngine, validation_engine, validate_diagnostic_input
from app.validators.models import (
    AlertId,
    CoherenceReport,
    DiagnosticSnapshot,
    PrePDFContext,
    PrePDFValidationResult,
    Severity,
    ValidationAlert,
)
from app.validators.pre_pdf_validator import validate_before_pdf_generation
from app.validators.step_gate import alerts_for_step, can_leave_step, has_blocking_alerts

__all__ = [
    "CoherenceEngine",
    "validation_engine",
    "validate_diagnostic_input",
    "AlertId",
    "CoherenceReport",
    "DiagnosticSnapshot",
    "PrePDFContext",
    "PrePDFValidationResult",
    "Severity",
    "ValidationAlert",
    "validate_before_pdf_generation",
    "alerts_for_step",
    "can_leave_step",
    "has_blocking_alerts",
]
