"""Reference data — thresholds, form steps, and headcount midpoints.

This is the encoded business knowledge that makes coherence validation deterministic.
All comparisons against these thresholds are strict (`>` / `<`).
"""

from app.validators.models import AlertId, HeadcountBracket

# ──────────────────────────────────────────────────────────────────────
# THRESHOLDS
# ──────────────────────────────────────────────────────────────────────

# Relative gap between a declared figure and its registry counterpart
REGISTRY_DIVERGENCE_THRESHOLD = 0.5

# EBITDA / revenue above which the margin is considered implausible
EXCESSIVE_MARGIN_THRESHOLD = 0.8

# Annualised MRR may exceed declared revenue, but not by this factor
MRR_ANNUALISED_REVENUE_FACTOR = 3

# Payroll share (% of revenue) considered low for a staffed company
LOW_PAYROLL_PCT = 20
STAFFED_HEADCOUNT = 10

# Year-over-year growth (%) considered exceptional
EXCEPTIONAL_GROWTH_PCT = 100

# Owner compensation share of revenue
OWNER_COMPENSATION_REVENUE_SHARE = 0.5


# ──────────────────────────────────────────────────────────────────────
# HEADCOUNT BRACKET MIDPOINTS (approximate, brackets only)
# ──────────────────────────────────────────────────────────────────────

HEADCOUNT_MIDPOINTS: dict[HeadcountBracket, int] = {
    HeadcountBracket.SOLO: 1,
    HeadcountBracket.MICRO: 3,
    HeadcountBracket.SMALL: 13,
    HeadcountBracket.MEDIUM: 35,
    HeadcountBracket.LARGE: 75,
}


# ──────────────────────────────────────────────────────────────────────
# FORM STEPS (where the user fixes the offending field)
# ──────────────────────────────────────────────────────────────────────

ALERT_STEPS: dict[AlertId, int] = {
    AlertId.CA_PAPPERS_DIVERGENCE: 2,
    AlertId.EBITDA_SUPERIEUR_CA: 3,
    AlertId.MARGE_EXCESSIVE: 3,
    AlertId.EBITDA_PAPPERS_DIVERGENCE: 3,
    AlertId.TRESORERIE_PAPPERS_DIVERGENCE: 12,
    AlertId.DETTES_PAPPERS_DIVERGENCE: 11,
    AlertId.MRR_VS_CA_INCOHERENT: 14,
    AlertId.EFFECTIF_VS_MASSE_SALARIALE: 7,
    AlertId.CROISSANCE_VS_HISTORIQUE: 4,
    AlertId.REMUNERATION_VS_CA: 10,
}


# ──────────────────────────────────────────────────────────────────────
# PRE-PDF CHECKS
# ──────────────────────────────────────────────────────────────────────

# Raw INSEE headcount codes leak through as huge numbers
ABERRANT_HEADCOUNT = 10_000

# Last filed balance sheet older than this is flagged as stale
STALE_BALANCE_SHEET_MONTHS = 24

RISK_QUALITATIVE_KEYS = ("litiges", "dependanceDirigeant")
QUALITATIVE_KEYS = ("dependanceDirigeant", "concentrationClients", "litiges", "contratsCles")
