"""Registry Divergence Rules — declared figures cross-checked against Pappers filings.

Each rule compares one declared amount with its registry counterpart and fires
when the relative gap, measured against the registry figure, exceeds 50%.
"""

from typing import Optional

from app.validators.base import BaseRule, format_amount, relative_divergence
from app.validators.models import AlertId, DiagnosticSnapshot, Severity, ValidationAlert
from app.validators.reference_data import REGISTRY_DIVERGENCE_THRESHOLD


class RegistryDivergenceRule(BaseRule):
    """Shared logic for declared-vs-registry comparisons."""

    severity = Severity.INFO

    declared_field: str
    reference_field: str
    message: str
    declared_label: str = "Saisi"

    # Revenue is only compared when both figures are strictly positive
    require_positive: bool = False

    @property
    def name(self) -> str:
        return type(self).__name__

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        declared = getattr(snapshot, self.declared_field)
        reference = getattr(snapshot, self.reference_field)

        if declared is None or reference is None:
            return None

        if self.require_positive:
            if not (declared > 0 and reference > 0):
                return None
        elif reference == 0:
            return None

        if not relative_divergence(declared, reference) > REGISTRY_DIVERGENCE_THRESHOLD:
            return None

        return self._alert(
            self.message,
            detail=(
                f"{self.declared_label} : {format_amount(declared)} € — "
                f"Pappers : {format_amount(reference)} €"
            ),
        )


class RevenueRegistryDivergenceRule(RegistryDivergenceRule):
    """Declared revenue vs registry revenue (step 2)."""

    alert_id = AlertId.CA_PAPPERS_DIVERGENCE
    declared_field = "revenue"
    reference_field = "pappers_ca"
    message = "Le CA saisi diverge de plus de 50% du CA Pappers."
    require_positive = True


class EbitdaRegistryDivergenceRule(RegistryDivergenceRule):
    """Declared EBITDA vs registry EBITDA (step 3)."""

    alert_id = AlertId.EBITDA_PAPPERS_DIVERGENCE
    declared_field = "ebitda"
    reference_field = "pappers_ebitda"
    message = "L'EBITDA saisi diverge significativement des données Pappers."


class CashRegistryDivergenceRule(RegistryDivergenceRule):
    """Declared cash vs registry cash (step 12)."""

    alert_id = AlertId.TRESORERIE_PAPPERS_DIVERGENCE
    declared_field = "tresorerie_actuelle"
    reference_field = "pappers_tresorerie"
    message = "La trésorerie saisie diverge significativement des données Pappers."
    declared_label = "Saisie"


class DebtRegistryDivergenceRule(RegistryDivergenceRule):
    """Declared financial debt vs registry debt (step 11)."""

    alert_id = AlertId.DETTES_PAPPERS_DIVERGENCE
    declared_field = "dettes_financieres"
    reference_field = "pappers_dettes"
    message = "Les dettes saisies divergent significativement des données Pappers."
    declared_label = "Saisies"
