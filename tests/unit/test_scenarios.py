"""Unit tests for stress scenarios and breakeven analysis"""

import pytest
from dataclasses import replace
from decimal import Decimal
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.domain.models import LoanInputs, ProgramRules
from acquisition_gateway.domain.scenarios import build_scenarios, classify_viability


@pytest.fixture
def deal(baseline_inputs: LoanInputs) -> LoanInputs:
    """$2M revenue at a 12.5% EBITDA margin"""
    return replace(baseline_inputs, revenue=Decimal("2000000"))


def test_scenario_ebitda_adjustments(deal: LoanInputs, rules: ProgramRules):
    analysis = build_scenarios(deal, rules, top_customer_percent=Decimal("10"))

    assert analysis.base_case.adjusted_ebitda == Decimal("250000")
    # 2.4M revenue at 17.5%
    assert analysis.upside.adjusted_revenue == Decimal("2400000")
    assert analysis.upside.adjusted_ebitda == Decimal("420000")
    # 1.6M revenue at 12.5%
    assert analysis.downside.adjusted_ebitda == Decimal("200000")
    # 1.8M revenue at 7.5%
    assert analysis.worst_case.adjusted_revenue == Decimal("1800000")
    assert analysis.worst_case.adjusted_ebitda == Decimal("135000")


def test_scenario_viability(deal: LoanInputs, rules: ProgramRules):
    analysis = build_scenarios(deal, rules, top_customer_percent=Decimal("10"))

    assert analysis.base_case.viability == "viable"
    assert analysis.upside.viability == "viable"
    assert analysis.downside.viability == "viable"
    assert analysis.worst_case.viability == "unviable"
    assert analysis.worst_case.risk_factors == (
        "Loss of largest customer",
        "Operating margin compression",
        "DSCR falls below SBA minimum",
    )
    assert analysis.worst_case.outputs.eligible is False


def test_breakeven(deal: LoanInputs, rules: ProgramRules):
    analysis = build_scenarios(deal, rules)

    annual = analysis.base_case.outputs.annual_debt_service
    assert analysis.breakeven_ebitda == annual * Decimal("1.25")
    expected_margin = (Decimal("250000") - analysis.breakeven_ebitda) / Decimal("250000") * 100
    assert analysis.margin_of_safety_percent == expected_margin
    assert analysis.margin_of_safety_percent > 0


def test_margin_wiped_out_is_unviable_without_outputs(baseline_inputs: LoanInputs, rules: ProgramRules):
    """5% margin minus a 5pt compression leaves no EBITDA"""
    thin = replace(baseline_inputs, revenue=Decimal("5000000"))
    analysis = build_scenarios(thin, rules)

    assert analysis.worst_case.adjusted_ebitda == 0
    assert analysis.worst_case.outputs is None
    assert analysis.worst_case.viability == "unviable"
    assert "EBITDA eliminated" in analysis.worst_case.risk_factors


def test_revenue_required(baseline_inputs: LoanInputs, rules: ProgramRules):
    with pytest.raises(ValidationError) as exc_info:
        build_scenarios(baseline_inputs, rules)
    assert exc_info.value.field == "revenue"


def test_top_customer_share_range(deal: LoanInputs, rules: ProgramRules):
    with pytest.raises(ValidationError):
        build_scenarios(deal, rules, top_customer_percent=Decimal("120"))


@pytest.mark.parametrize(
    "dscr, viability",
    [(None, "viable"), (Decimal("1.30"), "viable"), (Decimal("1.25"), "viable"), (Decimal("1.20"), "marginal"), (Decimal("1.0"), "unviable")],
)
def test_classify_viability(rules: ProgramRules, dscr, viability: str):
    assert classify_viability(dscr, rules) == viability
