"""Validation models — alert ids, severity levels, diagnostic snapshot, and report structure.

All validation is deterministic: same input → same output, no I/O, no LLM calls.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Alert severity levels, declared in display order (errors surface first)."""

    ERROR = "error"      # Figures are incoherent, submission must not go through
    WARNING = "warning"  # Suspicious, the user has to confirm before moving on
    INFO = "info"        # Worth a second look, never blocks


SEVERITY_ORDER: dict[str, int] = {severity.value: index for index, severity in enumerate(Severity)}


class AlertId(str, Enum):
    """Closed set of coherence alerts, in rule evaluation order.

    Naming convention: SUBJECT_ISSUE, French business vocabulary kept as-is
    since the ids travel to the front end unchanged.
    """

    CA_PAPPERS_DIVERGENCE = "CA_PAPPERS_DIVERGENCE"
    EBITDA_SUPERIEUR_CA = "EBITDA_SUPERIEUR_CA"
    MARGE_EXCESSIVE = "MARGE_EXCESSIVE"
    EBITDA_PAPPERS_DIVERGENCE = "EBITDA_PAPPERS_DIVERGENCE"
    TRESORERIE_PAPPERS_DIVERGENCE = "TRESORERIE_PAPPERS_DIVERGENCE"
    DETTES_PAPPERS_DIVERGENCE = "DETTES_PAPPERS_DIVERGENCE"
    MRR_VS_CA_INCOHERENT = "MRR_VS_CA_INCOHERENT"
    EFFECTIF_VS_MASSE_SALARIALE = "EFFECTIF_VS_MASSE_SALARIALE"
    CROISSANCE_VS_HISTORIQUE = "CROISSANCE_VS_HISTORIQUE"
    REMUNERATION_VS_CA = "REMUNERATION_VS_CA"


class HeadcountBracket(str, Enum):
    """Headcount brackets offered by the diagnostic form (step 7)."""

    SOLO = "1"
    MICRO = "2-5"
    SMALL = "6-20"
    MEDIUM = "21-50"
    LARGE = "50+"


class DiagnosticSnapshot(BaseModel):
    """Diagnostic form fields plus the registry figures they are checked against.

    Accepts the camelCase names used by the form as well as snake_case.
    Defaults mirror the form's initial state. Infinite and NaN figures are rejected.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)

    revenue: Optional[float] = None
    ebitda: Optional[float] = None
    growth: float = 15
    recurring: float = 20
    masse_salariale: float = Field(default=35, alias="masseSalariale")
    effectif: str = ""
    remuneration_dirigeant: Optional[float] = Field(default=None, alias="remunerationDirigeant")
    dettes_financieres: Optional[float] = Field(default=None, alias="dettesFinancieres")
    tresorerie_actuelle: Optional[float] = Field(default=None, alias="tresorerieActuelle")
    concentration_client: float = Field(default=15, alias="concentrationClient")
    mrr_mensuel: Optional[float] = Field(default=None, alias="mrrMensuel")

    # Registry reference figures (Pappers)
    pappers_ca: Optional[float] = Field(default=None, alias="pappersCA")
    pappers_ebitda: Optional[float] = Field(default=None, alias="pappersEBITDA")
    pappers_tresorerie: Optional[float] = Field(default=None, alias="pappersTresorerie")
    pappers_dettes: Optional[float] = Field(default=None, alias="pappersDettes")


class ValidationAlert(BaseModel):
    """A single coherence finding."""

    id: AlertId
    severity: Severity
    message: str
    detail: Optional[str] = None  # Declared vs reference values
    step: Optional[int] = None    # Form step holding the offending field

    model_config = ConfigDict(use_enum_values=True)


def sort_alerts(alerts: list[ValidationAlert]) -> list[ValidationAlert]:
    """Stable sort by severity: errors, then warnings, then info."""
    return sorted(alerts, key=lambda a: SEVERITY_ORDER[Severity(a.severity).value])


class CoherenceReport(BaseModel):
    """Aggregate view of one validation run."""

    alerts: list[ValidationAlert] = Field(default_factory=list)
    summary: dict = Field(
        description="Count of alerts by severity",
        default_factory=lambda: {"error": 0, "warning": 0, "info": 0},
    )
    blocking: bool = Field(default=False, description="True if at least one error alert")
    steps: list[int] = Field(default_factory=list, description="Form steps carrying alerts")

    @classmethod
    def build(cls, alerts: list[ValidationAlert]) -> "CoherenceReport":
        """Build a report from the alerts of one run."""
        summary = {"error": 0, "warning": 0, "info": 0}
        for alert in alerts:
            summary[Severity(alert.severity).value] += 1

        steps = sorted({a.step for a in alerts if a.step is not None})

        return cls(
            alerts=sort_alerts(alerts),
            summary=summary,
            blocking=summary["error"] > 0,
            steps=steps,
        )


# ── Pre-PDF gate ──


class DiagnosticFigures(BaseModel):
    """Revenue and EBITDA retained for the evaluation."""

    model_config = ConfigDict(allow_inf_nan=False)

    revenue: float
    ebitda: float


class PrePDFContext(BaseModel):
    """The parts of an evaluation context inspected before generating the report PDF."""

    model_config = ConfigDict(populate_by_name=True)

    diagnostic: Optional[DiagnosticFigures] = None
    effectif: Optional[str] = None  # Raw registry headcount, may be an unconverted INSEE code
    archetype: Optional[str] = None
    saas_metrics: Optional[dict] = Field(default=None, alias="saasMetrics")
    retraitements: Optional[dict] = None
    dernier_bilan_annee: Optional[int] = Field(default=None, alias="dernierBilanAnnee")
    qualitative: Optional[dict] = None


class PrePDFValidationResult(BaseModel):
    """Errors block generation, warnings end up as coherence notes in the PDF."""

    can_generate: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
