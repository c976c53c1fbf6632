"""Profitability Rules — declared EBITDA checked against declared revenue."""

import math
from typing import Optional

from app.validators.base import BaseRule, format_amount, format_number
from app.validators.models import AlertId, DiagnosticSnapshot, Severity, ValidationAlert
from app.validators.reference_data import EXCESSIVE_MARGIN_THRESHOLD


class EbitdaAboveRevenueRule(BaseRule):
    """EBITDA cannot exceed revenue. The only blocking rule."""

    alert_id = AlertId.EBITDA_SUPERIEUR_CA
    severity = Severity.ERROR

    @property
    def name(self) -> str:
        return "EbitdaAboveRevenueRule"

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        ebitda = snapshot.ebitda
        revenue = snapshot.revenue

        if ebitda is None or revenue is None or not revenue > 0:
            return None

        if not ebitda > revenue:
            return None

        return self._alert(
            "L'EBITDA ne peut pas être supérieur au chiffre d'affaires.",
            detail=f"EBITDA : {format_amount(ebitda)} € — CA : {format_amount(revenue)} €",
        )


class ExcessiveMarginRule(BaseRule):
    """EBITDA margin above 80% is almost always a typo.

    Evaluated independently of EbitdaAboveRevenueRule: both fire when EBITDA > revenue.
    """

    alert_id = AlertId.MARGE_EXCESSIVE
    severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "ExcessiveMarginRule"

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        ebitda = snapshot.ebitda
        revenue = snapshot.revenue

        if ebitda is None or revenue is None or not (revenue > 0 and ebitda > 0):
            return None

        margin = ebitda / revenue
        if not margin > EXCESSIVE_MARGIN_THRESHOLD:
            return None

        return self._alert(
            f"Marge EBITDA exceptionnellement élevée ({_rounded_percent(margin * 100)}%).",
            detail="Vérifiez que l'EBITDA saisi est correct.",
        )


def _rounded_percent(value: float) -> str:
    # round() rounds half to even, the form displays .5 rounded up
    if not math.isfinite(value):
        return format_number(value)
    return str(math.floor(value + 0.5))
