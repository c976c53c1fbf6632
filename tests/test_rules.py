import pytest

from app.validators.activity_rules import (
    ExceptionalGrowthRule,
    MrrVsRevenueRule,
    OwnerCompensationRule,
    PayrollVsHeadcountRule,
)
from app.validators.base import format_amount, format_number, headcount_to_number, relative_divergence
from app.validators.models import AlertId, DiagnosticSnapshot, Severity
from app.validators.profitability_rules import EbitdaAboveRevenueRule, ExcessiveMarginRule
from app.validators.registry_divergence_rules import (
    CashRegistryDivergenceRule,
    DebtRegistryDivergenceRule,
    EbitdaRegistryDivergenceRule,
    RevenueRegistryDivergenceRule,
)

NNBSP = "\u202f"


# ── Helpers ──


class TestRelativeDivergence:
    def test_measured_against_reference(self):
        assert relative_divergence(100_000, 200_000) == 0.5
        assert relative_divergence(200_000, 100_000) == 1.0

    def test_zero_reference_never_diverges(self):
        assert relative_divergence(5_000, 0) == 0

    def test_negative_reference_uses_absolute_value(self):
        assert relative_divergence(100, -100) == 2.0


@pytest.mark.parametrize(
    "effectif, expected",
    [("1", 1), ("2-5", 3), ("6-20", 13), ("21-50", 35), ("50+", 75), ("", 0), ("100", 0), ("21 - 50", 0)],
)
def test_headcount_to_number(effectif, expected):
    assert headcount_to_number(effectif) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (999, "999"),
        (1000, f"1{NNBSP}000"),
        (1_234_567, f"1{NNBSP}234{NNBSP}567"),
        (1234.5, f"1{NNBSP}234,5"),
        (0.1234, "0,123"),
        (-15_000, f"-15{NNBSP}000"),
        (250_000.0, f"250{NNBSP}000"),
        (0.0005, "0,001"),
        (1.0005, "1,001"),
        (1234.5675, f"1{NNBSP}234,568"),
        (-0.0005, "-0,001"),
        (1e20, f"100{NNBSP}000{NNBSP}000{NNBSP}000{NNBSP}000{NNBSP}000{NNBSP}000"),
        (float("inf"), "inf"),
    ],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


def test_format_number_drops_integral_fraction():
    assert format_number(150.0) == "150"
    assert format_number(12.5) == "12.5"


# ── Registry divergence ──


class TestRevenueRegistryDivergence:
    rule = RevenueRegistryDivergenceRule()

    def test_exactly_half_does_not_fire(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, pappersCA=200_000)) is None

    def test_above_half_fires(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(revenue=100_000, pappersCA=250_000))
        assert alert.id == AlertId.CA_PAPPERS_DIVERGENCE
        assert alert.severity == Severity.INFO
        assert alert.step == 2
        assert alert.detail == f"Saisi : 100{NNBSP}000 € — Pappers : 250{NNBSP}000 €"

    def test_just_above_half_fires(self, make_snapshot):
        # 100 000.4 / 200 000.4 ~ 0.500001
        assert self.rule.evaluate(make_snapshot(revenue=100_000, pappersCA=200_000.4)) is not None

    def test_declared_above_reference(self, make_snapshot):
        # 1.6 against the registry figure
        assert self.rule.evaluate(make_snapshot(revenue=260_000, pappersCA=100_000)) is not None

    @pytest.mark.parametrize(
        "fields",
        [
            {"revenue": 100_000},
            {"pappersCA": 100_000},
            {"revenue": 0, "pappersCA": 100_000},
            {"revenue": 100_000, "pappersCA": 0},
            {"revenue": 100_000, "pappersCA": -300_000},
            {"revenue": -100_000, "pappersCA": 300_000},
        ],
    )
    def test_needs_two_positive_figures(self, make_snapshot, fields):
        assert self.rule.evaluate(make_snapshot(**fields)) is None


class TestEbitdaRegistryDivergence:
    rule = EbitdaRegistryDivergenceRule()

    def test_strict_threshold(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(ebitda=150_000, pappersEBITDA=100_000)) is None
        assert self.rule.evaluate(make_snapshot(ebitda=150_000.01, pappersEBITDA=100_000)) is not None

    def test_negative_reference_is_compared(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(ebitda=100, pappersEBITDA=-100))
        assert alert.id == AlertId.EBITDA_PAPPERS_DIVERGENCE
        assert alert.step == 3

    def test_zero_reference_is_skipped(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(ebitda=100_000, pappersEBITDA=0)) is None

    def test_declared_zero_is_compared(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(ebitda=0, pappersEBITDA=80_000)) is not None


def test_cash_divergence(make_snapshot):
    alert = CashRegistryDivergenceRule().evaluate(
        make_snapshot(tresorerieActuelle=10_000, pappersTresorerie=50_000)
    )
    assert alert.id == AlertId.TRESORERIE_PAPPERS_DIVERGENCE
    assert alert.step == 12
    assert alert.detail.startswith("Saisie : 10")


def test_debt_divergence(make_snapshot):
    alert = DebtRegistryDivergenceRule().evaluate(
        make_snapshot(dettesFinancieres=100_000, pappersDettes=20_000)
    )
    assert alert.id == AlertId.DETTES_PAPPERS_DIVERGENCE
    assert alert.step == 11
    assert alert.detail.startswith("Saisies : 100")


def test_debt_divergence_missing_reference(make_snapshot):
    assert DebtRegistryDivergenceRule().evaluate(make_snapshot(dettesFinancieres=100_000)) is None


# Each case fires in one direction only, so swapping declared and reference breaks it.
@pytest.mark.parametrize(
    "rule, declared_field, reference_field",
    [
        (CashRegistryDivergenceRule(), "tresorerieActuelle", "pappersTresorerie"),
        (DebtRegistryDivergenceRule(), "dettesFinancieres", "pappersDettes"),
    ],
)
class TestDivergenceMeasuredAgainstRegistry:
    def _evaluate(self, make_snapshot, rule, declared_field, reference_field, declared, reference):
        return rule.evaluate(make_snapshot(**{declared_field: declared, reference_field: reference}))

    def test_exactly_half_does_not_fire(self, make_snapshot, rule, declared_field, reference_field):
        # 0.5 against the registry, 0.33 the other way round
        assert self._evaluate(make_snapshot, rule, declared_field, reference_field, 150_000, 100_000) is None

    def test_just_above_half_fires(self, make_snapshot, rule, declared_field, reference_field):
        alert = self._evaluate(make_snapshot, rule, declared_field, reference_field, 150_000.01, 100_000)
        assert alert.id == rule.alert_id

    def test_declared_above_reference(self, make_snapshot, rule, declared_field, reference_field):
        # 0.6 against the registry, 0.375 the other way round
        assert self._evaluate(make_snapshot, rule, declared_field, reference_field, 160_000, 100_000) is not None

    def test_declared_below_reference(self, make_snapshot, rule, declared_field, reference_field):
        # 0.375 against the registry, 0.6 the other way round
        assert self._evaluate(make_snapshot, rule, declared_field, reference_field, 100_000, 160_000) is None


# ── Profitability ──


class TestEbitdaAboveRevenue:
    rule = EbitdaAboveRevenueRule()

    @pytest.mark.parametrize("revenue, ebitda", [(1, 2), (100_000, 100_001), (1_000_000, 5_000_000)])
    def test_fires_as_error(self, make_snapshot, revenue, ebitda):
        alert = self.rule.evaluate(make_snapshot(revenue=revenue, ebitda=ebitda))
        assert alert.id == AlertId.EBITDA_SUPERIEUR_CA
        assert alert.severity == Severity.ERROR
        assert alert.step == 3

    def test_equal_does_not_fire(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, ebitda=100_000)) is None

    def test_non_positive_revenue_is_skipped(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=0, ebitda=10)) is None
        assert self.rule.evaluate(make_snapshot(revenue=-10, ebitda=10)) is None

    def test_detail_shows_both_figures(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(revenue=1_000_000, ebitda=1_200_000))
        assert alert.detail == f"EBITDA : 1{NNBSP}200{NNBSP}000 € — CA : 1{NNBSP}000{NNBSP}000 €"


class TestExcessiveMargin:
    rule = ExcessiveMarginRule()

    def test_fires_above_eighty_percent(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(revenue=100_000, ebitda=85_000))
        assert alert.severity == Severity.WARNING
        assert alert.message == "Marge EBITDA exceptionnellement élevée (85%)."

    def test_exactly_eighty_percent(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, ebitda=80_000)) is None

    def test_margin_rounding(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(revenue=1_000, ebitda=846))
        assert "(85%)" in alert.message

    def test_negative_ebitda(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, ebitda=-90_000)) is None


# ── Activity ──


class TestMrrVsRevenue:
    rule = MrrVsRevenueRule()

    def test_fires(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(revenue=100_000, mrrMensuel=30_000))
        assert alert.id == AlertId.MRR_VS_CA_INCOHERENT
        assert alert.step == 14
        assert alert.message == f"Le MRR annualisé (360{NNBSP}000 €) dépasse largement le CA déclaré."

    def test_exactly_three_times(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, mrrMensuel=25_000)) is None

    def test_without_revenue(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(mrrMensuel=30_000)) is None
        assert self.rule.evaluate(make_snapshot(revenue=0, mrrMensuel=30_000)) is None


class TestPayrollVsHeadcount:
    rule = PayrollVsHeadcountRule()

    def test_fires(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(masseSalariale=15, effectif="21-50"))
        assert alert.id == AlertId.EFFECTIF_VS_MASSE_SALARIALE
        assert alert.step == 7
        assert alert.message == "Masse salariale faible (15%) pour 21-50 collaborateurs."

    def test_small_bracket_midpoint_above_ten(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(masseSalariale=5, effectif="6-20")) is not None

    @pytest.mark.parametrize(
        "masse, effectif",
        [(20, "50+"), (15, "2-5"), (15, "1"), (15, ""), (15, "unknown")],
    )
    def test_does_not_fire(self, make_snapshot, masse, effectif):
        assert self.rule.evaluate(make_snapshot(masseSalariale=masse, effectif=effectif)) is None


class TestExceptionalGrowth:
    rule = ExceptionalGrowthRule()

    def test_fires(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(growth=150))
        assert alert.step == 4
        assert alert.message == "Croissance déclarée exceptionnellement élevée (150%)."

    def test_hundred_percent_does_not_fire(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(growth=100)) is None


class TestOwnerCompensation:
    rule = OwnerCompensationRule()

    def test_fires(self, make_snapshot):
        alert = self.rule.evaluate(make_snapshot(revenue=100_000, remunerationDirigeant=60_000))
        assert alert.severity == Severity.WARNING
        assert alert.step == 10
        assert alert.detail == f"Rémunération : 60{NNBSP}000 € — CA : 100{NNBSP}000 €"

    def test_exactly_half(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, remunerationDirigeant=50_000)) is None

    def test_zero_compensation(self, make_snapshot):
        assert self.rule.evaluate(make_snapshot(revenue=100_000, remunerationDirigeant=0)) is None


# ── Non-finite figures ──
# The snapshot rejects inf and NaN, rules still have to stay silent or
# describe them when handed an unvalidated snapshot.

NAN = float("nan")
INF = float("inf")


def _unchecked(**fields) -> DiagnosticSnapshot:
    return DiagnosticSnapshot.model_construct(**fields)


@pytest.mark.parametrize(
    "rule, fields",
    [
        (EbitdaAboveRevenueRule(), {"revenue": 1_000, "ebitda": NAN}),
        (EbitdaAboveRevenueRule(), {"revenue": NAN, "ebitda": 1_000}),
        (ExcessiveMarginRule(), {"revenue": 1_000, "ebitda": NAN}),
        (ExcessiveMarginRule(), {"revenue": INF, "ebitda": INF}),
        (RevenueRegistryDivergenceRule(), {"revenue": 100_000, "pappers_ca": NAN}),
        (EbitdaRegistryDivergenceRule(), {"ebitda": 100_000, "pappers_ebitda": INF}),
        (CashRegistryDivergenceRule(), {"tresorerie_actuelle": NAN, "pappers_tresorerie": 50_000}),
        (MrrVsRevenueRule(), {"revenue": NAN, "mrr_mensuel": 30_000}),
        (PayrollVsHeadcountRule(), {"masse_salariale": NAN, "effectif": "50+"}),
        (ExceptionalGrowthRule(), {"growth": NAN}),
        (OwnerCompensationRule(), {"revenue": 100_000, "remuneration_dirigeant": NAN}),
    ],
)
def test_nan_never_fires(rule, fields):
    assert rule.evaluate(_unchecked(**fields)) is None


def test_infinite_ebitda_is_reported_without_raising():
    snapshot = _unchecked(revenue=1_000, ebitda=INF)

    error = EbitdaAboveRevenueRule().evaluate(snapshot)
    assert error.detail == f"EBITDA : inf € — CA : 1{NNBSP}000 €"

    warning = ExcessiveMarginRule().evaluate(snapshot)
    assert warning.message == "Marge EBITDA exceptionnellement élevée (inf%)."


def test_infinite_declared_figure_diverges():
    alert = RevenueRegistryDivergenceRule().evaluate(_unchecked(revenue=INF, pappers_ca=100_000))
    assert alert.detail == f"Saisi : inf € — Pappers : 100{NNBSP}000 €"
