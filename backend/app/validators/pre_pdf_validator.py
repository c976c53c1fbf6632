"""Pre-PDF Validator — last coherence checks before the evaluation report is rendered.

Errors block generation. Warnings are returned as coherence notes for the PDF.
"""

import math
from datetime import date
from typing import Optional

import structlog

from app.validators.base import format_amount
from app.validators.models import PrePDFContext, PrePDFValidationResult
from app.validators.reference_data import (
    ABERRANT_HEADCOUNT,
    QUALITATIVE_KEYS,
    RISK_QUALITATIVE_KEYS,
    STALE_BALANCE_SHEET_MONTHS,
)

logger = structlog.get_logger()


def validate_before_pdf_generation(
    context: PrePDFContext,
    current_year: Optional[int] = None,
) -> PrePDFValidationResult:
    """Validate the evaluation context before PDF generation.

    Args:
        context: Evaluation context gathered during the diagnostic and the chat
        current_year: Reference year for the staleness check, defaults to today

    Returns:
        PrePDFValidationResult, can_generate is False as soon as one error exists
    """
    errors: list[str] = []
    warnings: list[str] = []

    diag = context.diagnostic
    qualitative = context.qualitative or {}

    # ── ERRORS (blocking) ──

    # 1. Raw INSEE code left in the headcount field
    if context.effectif:
        headcount = _parse_number(context.effectif)
        if headcount is not None and headcount > ABERRANT_HEADCOUNT:
            errors.append(
                f"Effectif aberrant ({context.effectif}) — probablement un code INSEE non converti."
            )

    # 2. EBITDA > CA
    if diag and diag.ebitda > 0 and diag.revenue > 0 and diag.ebitda > diag.revenue:
        errors.append(
            f"EBITDA ({format_amount(diag.ebitda)} €) supérieur au CA ({format_amount(diag.revenue)} €)."
        )

    # ── WARNINGS (non-blocking, included as PDF notes) ──

    # 3. Negative EBITDA with no documented risks
    if diag and diag.ebitda < 0:
        if not any(key in qualitative for key in RISK_QUALITATIVE_KEYS):
            warnings.append(
                "EBITDA négatif sans analyse de risques documentée — "
                "la section risques pourrait être incomplète."
            )

    # 4. SaaS archetype without SaaS metrics
    if context.archetype and context.archetype.startswith("saas") and context.saas_metrics is None:
        warnings.append(
            "Archétype SaaS détecté sans métriques SaaS (MRR, churn, NRR) — "
            "l'évaluation repose uniquement sur les données comptables."
        )

    # 5. No EBITDA restatement at all
    retraitements = context.retraitements or {}
    has_retraitements = any(
        v is not None and v is not False and v != 0 for v in retraitements.values()
    )
    if not has_retraitements:
        warnings.append(
            "Aucun retraitement EBITDA effectué — le niveau de confiance de l'évaluation est limité."
        )

    # 6. Stale financials
    if context.dernier_bilan_annee:
        year = current_year if current_year is not None else date.today().year
        age_months = (year - context.dernier_bilan_annee) * 12
        if age_months > STALE_BALANCE_SHEET_MONTHS:
            warnings.append(
                f"Dernier bilan datant de {context.dernier_bilan_annee} (> 24 mois) — "
                "les données financières sont potentiellement obsolètes."
            )

    # 7. Nothing qualitative collected, SWOT will be thin
    if not any(key in qualitative for key in QUALITATIVE_KEYS):
        warnings.append(
            "Aucune donnée qualitative collectée (dépendance dirigeant, litiges, contrats clés) — "
            "l'analyse SWOT sera limitée."
        )

    result = PrePDFValidationResult(
        can_generate=not errors,
        errors=errors,
        warnings=warnings,
    )

    logger.info(
        "pre_pdf_validation_complete",
        can_generate=result.can_generate,
        errors=len(errors),
        warnings=len(warnings),
    )

    return result


def _parse_number(value: str) -> Optional[float]:
    # float() also takes "1_000", "nan" and "inf"
    if "_" in value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None
