"""Coherence Engine — runs every rule against a diagnostic snapshot, orders the alerts.

This is the main entry point for diagnostic coherence validation.

Usage:
    engine = CoherenceEngine()
    alerts = engine.validate(snapshot)
    if any(a.severity == "error" for a in alerts):
        # Block submission, send the user back to alerts[0].step
"""

import time
from typing import Optional, Union

import structlog

from app.validators.base import BaseRule
from app.validators.models import CoherenceReport, DiagnosticSnapshot, ValidationAlert, sort_alerts

# Import all rules
from app.validators.registry_divergence_rules import (
    RevenueRegistryDivergenceRule,
    EbitdaRegistryDivergenceRule,
    CashRegistryDivergenceRule,
    DebtRegistryDivergenceRule,
)
from app.validators.profitability_rules import EbitdaAboveRevenueRule, ExcessiveMarginRule
from app.validators.activity_rules import (
    MrrVsRevenueRule,
    PayrollVsHeadcountRule,
    ExceptionalGrowthRule,
    OwnerCompensationRule,
)

logger = structlog.get_logger()


class CoherenceEngine:
    """Orchestrates all coherence rules and produces an ordered alert list.

    Design principles:
        - Deterministic: same snapshot → same alerts, in the same order
        - Stateless: safe to share across requests and threads
        - Extensible: add rules without modifying the engine
        - Observable: logs every validation run with timing
    """

    def __init__(self, rules: Optional[list[BaseRule]] = None):
        """Initialize with default rules or custom list.

        Args:
            rules: Optional list of rules. If None, uses all defaults.
        """
        self.rules = rules if rules is not None else self._default_rules()

    @staticmethod
    def _default_rules() -> list[BaseRule]:
        """Create the default rule chain in evaluation order.

        The order breaks ties between alerts of equal severity.
        """
        return [
            RevenueRegistryDivergenceRule(),   # CA vs Pappers
            EbitdaAboveRevenueRule(),          # EBITDA > CA
            ExcessiveMarginRule(),             # Marge EBITDA > 80%
            EbitdaRegistryDivergenceRule(),    # EBITDA vs Pappers
            CashRegistryDivergenceRule(),      # Trésorerie vs Pappers
            DebtRegistryDivergenceRule(),      # Dettes vs Pappers
            MrrVsRevenueRule(),                # MRR * 12 > CA * 3
            PayrollVsHeadcountRule(),          # Effectif > 10, masse salariale < 20%
            ExceptionalGrowthRule(),           # Croissance > 100%
            OwnerCompensationRule(),           # Rémunération > 50% du CA
        ]

    def validate(self, snapshot: Union[DiagnosticSnapshot, dict]) -> list[ValidationAlert]:
        """Run all rules against the snapshot.

        Args:
            snapshot: DiagnosticSnapshot, or a dict of form fields (camelCase or snake_case)

        Returns:
            Alerts sorted by severity (errors first), ties in rule order

        Raises:
            pydantic.ValidationError: a dict holding a non-numeric, infinite or NaN figure
        """
        start_time = time.perf_counter()

        if isinstance(snapshot, dict):
            snapshot = DiagnosticSnapshot.model_validate(snapshot)

        alerts: list[ValidationAlert] = []
        for rule in self.rules:
            alert = rule.evaluate(snapshot)
            if alert is not None:
                alerts.append(alert)

        alerts = sort_alerts(alerts)

        total_duration = (time.perf_counter() - start_time) * 1000

        logger.info(
            "coherence_validation_complete",
            total_alerts=len(alerts),
            alert_ids=[a.id for a in alerts],
            duration_ms=round(total_duration, 3),
        )

        return alerts

    def build_report(self, snapshot: Union[DiagnosticSnapshot, dict]) -> CoherenceReport:
        """Validate and aggregate the alerts into a CoherenceReport."""
        return CoherenceReport.build(self.validate(snapshot))

    def add_rule(self, rule: BaseRule) -> None:
        """Append a custom rule to the chain. Each alert id may be owned by one rule only."""
        if any(r.alert_id == rule.alert_id for r in self.rules):
            raise ValueError(f"A rule already emits {rule.alert_id.value}")
        self.rules.append(rule)

    def remove_rule(self, rule_name: str) -> None:
        """Remove a rule by name."""
        self.rules = [r for r in self.rules if r.name != rule_name]


# Module-level singleton
validation_engine = CoherenceEngine()


def validate_diagnostic_input(snapshot: Union[DiagnosticSnapshot, dict]) -> list[ValidationAlert]:
    """Validate a diagnostic snapshot with the default rule chain."""
    return validation_engine.validate(snapshot)
