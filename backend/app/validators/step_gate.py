"""Step gate — decides whether the diagnostic form may move past a step.

Errors always block. Warnings block until the user confirms them. Info never blocks.
"""

from typing import Iterable

from app.validators.models import Severity, ValidationAlert


def alerts_for_step(alerts: list[ValidationAlert], step: int) -> list[ValidationAlert]:
    """Alerts attached to one form step, in their original order."""
    return [a for a in alerts if a.step == step]


def has_blocking_alerts(alerts: list[ValidationAlert]) -> bool:
    """True if the submission must be blocked (any error alert)."""
    return any(a.severity == Severity.ERROR for a in alerts)


def can_leave_step(
    alerts: list[ValidationAlert],
    step: int,
    confirmed_ids: Iterable[str] = (),
) -> bool:
    """Check the alerts of one step against the warnings the user acknowledged.

    Args:
        alerts: Output of the coherence engine
        step: Form step the user wants to leave
        confirmed_ids: Alert ids the user explicitly confirmed

    Returns:
        False on any error, or on any warning not yet confirmed
    """
    confirmed = {str(getattr(c, "value", c)) for c in confirmed_ids}

    for alert in alerts_for_step(alerts, step):
        if alert.severity == Severity.ERROR:
            return False
        if alert.severity == Severity.WARNING and alert.id not in confirmed:
            return False

    return True
