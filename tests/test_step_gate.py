from app.validators import (
    AlertId,
    alerts_for_step,
    can_leave_step,
    has_blocking_alerts,
    validate_diagnostic_input,
)


def test_alerts_for_step(everything_wrong):
    alerts = validate_diagnostic_input(everything_wrong)
    step_three = alerts_for_step(alerts, 3)
    assert [a.id for a in step_three] == [
        "EBITDA_SUPERIEUR_CA",
        "MARGE_EXCESSIVE",
        "EBITDA_PAPPERS_DIVERGENCE",
    ]
    assert alerts_for_step(alerts, 5) == []


def test_error_blocks_even_when_confirmed():
    alerts = validate_diagnostic_input({"revenue": 1_000_000, "ebitda": 1_200_000})
    assert has_blocking_alerts(alerts)
    assert not can_leave_step(alerts, 3, ["EBITDA_SUPERIEUR_CA", "MARGE_EXCESSIVE"])


def test_warning_blocks_until_confirmed():
    alerts = validate_diagnostic_input({"revenue": 100_000, "remunerationDirigeant": 60_000})
    assert not has_blocking_alerts(alerts)
    assert not can_leave_step(alerts, 10)
    assert can_leave_step(alerts, 10, ["REMUNERATION_VS_CA"])
    assert can_leave_step(alerts, 10, [AlertId.REMUNERATION_VS_CA])


def test_confirming_another_warning_does_not_help():
    alerts = validate_diagnostic_input({"revenue": 100_000, "remunerationDirigeant": 60_000})
    assert not can_leave_step(alerts, 10, ["MARGE_EXCESSIVE"])


def test_info_never_blocks():
    alerts = validate_diagnostic_input({"growth": 300})
    assert can_leave_step(alerts, 4)


def test_other_steps_are_not_affected():
    alerts = validate_diagnostic_input({"revenue": 1_000_000, "ebitda": 1_200_000})
    assert can_leave_step(alerts, 2)
    assert can_leave_step([], 3)
