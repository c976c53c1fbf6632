"""Base rule — abstract class implementing the Strategy Pattern.

Each coherence rule is a standalone, independently testable unit owning exactly
one alert id. New rules are added without modifying the engine.
"""

import math
from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional

from app.validators.models import AlertId, DiagnosticSnapshot, HeadcountBracket, Severity, ValidationAlert
from app.validators.reference_data import ALERT_STEPS, HEADCOUNT_MIDPOINTS

# fr-FR thousands separator (narrow no-break space)
_FR_GROUP_SEPARATOR = "\u202f"
_THOUSANDTH = Decimal("0.001")
# Wide enough to quantize any finite float
_AMOUNT_CONTEXT = Context(prec=400)


def relative_divergence(declared: float, reference: float) -> float:
    """|declared - reference| / |reference|, or 0 when the reference is zero.

    A zero reference can therefore never trigger a divergence alert.
    """
    if reference == 0:
        return 0
    return abs(declared - reference) / abs(reference)


def headcount_to_number(effectif: str) -> int:
    """Approximate headcount for a form bracket; unknown brackets count as 0."""
    try:
        bracket = HeadcountBracket(effectif)
    except ValueError:
        return 0
    return HEADCOUNT_MIDPOINTS[bracket]


def format_amount(value: float) -> str:
    """Format a currency-like amount the fr-FR way: '1 234 567,5'.

    Rounds to three decimals, halves away from zero.
    """
    if not math.isfinite(value):
        return format_number(value)
    rounded = Decimal(str(float(value))).quantize(
        _THOUSANDTH, rounding=ROUND_HALF_UP, context=_AMOUNT_CONTEXT
    )
    if rounded == rounded.to_integral_value():
        text = f"{int(rounded):,}"
    else:
        text = f"{rounded:,f}".rstrip("0")
    return text.replace(",", _FR_GROUP_SEPARATOR).replace(".", ",")


def format_number(value: float) -> str:
    """Plain number for percentages: 150.0 → '150', 12.5 → '12.5'."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class BaseRule(ABC):
    """Abstract base for all coherence rules.

    Contract:
        - evaluate() is deterministic: same snapshot → same result
        - evaluate() returns at most one alert, always with this rule's alert_id
        - Missing data means the rule does not apply, never an exception
        - No network calls, no randomness, no mutation of the snapshot
    """

    alert_id: AlertId
    severity: Severity

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @abstractmethod
    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        """Check the snapshot.

        Args:
            snapshot: Diagnostic form fields plus registry reference figures

        Returns:
            The alert if the rule fires, None otherwise
        """
        ...

    # ── Helper Methods ──

    def _alert(self, message: str, detail: Optional[str] = None) -> ValidationAlert:
        """Convenience method to create this rule's ValidationAlert."""
        return ValidationAlert(
            id=self.alert_id,
            severity=self.severity,
            message=message,
            detail=detail,
            step=ALERT_STEPS.get(self.alert_id),
        )
