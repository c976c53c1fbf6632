"""Activity Rules — recurring revenue, payroll, growth and owner compensation sanity checks."""

from typing import Optional

from app.validators.base import BaseRule, format_amount, format_number, headcount_to_number
from app.validators.models import AlertId, DiagnosticSnapshot, Severity, ValidationAlert
from app.validators.reference_data import (
    EXCEPTIONAL_GROWTH_PCT,
    LOW_PAYROLL_PCT,
    MRR_ANNUALISED_REVENUE_FACTOR,
    OWNER_COMPENSATION_REVENUE_SHARE,
    STAFFED_HEADCOUNT,
)


class MrrVsRevenueRule(BaseRule):
    """Annualised MRR should not dwarf declared revenue."""

    alert_id = AlertId.MRR_VS_CA_INCOHERENT
    severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "MrrVsRevenueRule"

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        mrr = snapshot.mrr_mensuel
        revenue = snapshot.revenue

        if mrr is None or revenue is None or not (mrr > 0 and revenue > 0):
            return None

        arr = mrr * 12
        if not arr > revenue * MRR_ANNUALISED_REVENUE_FACTOR:
            return None

        return self._alert(
            f"Le MRR annualisé ({format_amount(arr)} €) dépasse largement le CA déclaré.",
            detail="Le MRR réel peut être supérieur au CA comptable Pappers, mais vérifiez la cohérence.",
        )


class PayrollVsHeadcountRule(BaseRule):
    """A staffed company with a tiny payroll share usually forgot part of its staff costs.

    Headcount comes from bracket midpoints only, the form never asks for an exact figure.
    """

    alert_id = AlertId.EFFECTIF_VS_MASSE_SALARIALE
    severity = Severity.INFO

    @property
    def name(self) -> str:
        return "PayrollVsHeadcountRule"

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        if not snapshot.masse_salariale < LOW_PAYROLL_PCT:
            return None

        if not headcount_to_number(snapshot.effectif) > STAFFED_HEADCOUNT:
            return None

        return self._alert(
            f"Masse salariale faible ({format_number(snapshot.masse_salariale)}%) "
            f"pour {snapshot.effectif} collaborateurs.",
            detail="Vérifiez si les charges de personnel incluent bien tous les salariés.",
        )


class ExceptionalGrowthRule(BaseRule):
    """Growth above 100% is rare enough to double-check."""

    alert_id = AlertId.CROISSANCE_VS_HISTORIQUE
    severity = Severity.INFO

    @property
    def name(self) -> str:
        return "ExceptionalGrowthRule"

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        if not snapshot.growth > EXCEPTIONAL_GROWTH_PCT:
            return None

        return self._alert(
            f"Croissance déclarée exceptionnellement élevée ({format_number(snapshot.growth)}%).",
            detail="Les croissances > 100% sont rares, assurez-vous que la valeur est correcte.",
        )


class OwnerCompensationRule(BaseRule):
    """Owner compensation above half of revenue."""

    alert_id = AlertId.REMUNERATION_VS_CA
    severity = Severity.WARNING

    @property
    def name(self) -> str:
        return "OwnerCompensationRule"

    def evaluate(self, snapshot: DiagnosticSnapshot) -> Optional[ValidationAlert]:
        compensation = snapshot.remuneration_dirigeant
        revenue = snapshot.revenue

        if compensation is None or revenue is None or not (compensation > 0 and revenue > 0):
            return None

        if not compensation > revenue * OWNER_COMPENSATION_REVENUE_SHARE:
            return None

        return self._alert(
            "La rémunération dirigeant représente plus de 50% du CA.",
            detail=(
                f"Rémunération : {format_amount(compensation)} € — "
                f"CA : {format_amount(revenue)} €"
            ),
        )
