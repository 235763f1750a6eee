"""Unit tests for eligibility & risk evaluation"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from acquisition_gateway.domain.eligibility import (
    evaluate_eligibility,
    fee_waiver_applies,
    is_fee_waiver_industry,
)
from acquisition_gateway.domain.loan_structure import compute_loan_structure
from acquisition_gateway.domain.models import (
    FindingCategory,
    FindingKind,
    LoanInputs,
    ProgramRules,
)


def categories(findings, kind: FindingKind):
    return [f.category for f in findings if f.kind is kind]


def test_clean_deal_has_no_findings(baseline_inputs: LoanInputs, rules: ProgramRules):
    findings = evaluate_eligibility(baseline_inputs, Decimal("900000"), Decimal("10"), Decimal("1.6"), rules)
    assert findings == ()


def test_issue_order_is_fixed(baseline_inputs: LoanInputs, rules: ProgramRules):
    """Ceiling, coverage, citizenship - always in that order"""
    inputs = replace(baseline_inputs, all_investors_are_domestic_citizens=False)
    findings = evaluate_eligibility(inputs, Decimal("6000000"), Decimal("10"), Decimal("0.9"), rules)

    assert categories(findings, FindingKind.ISSUE) == [
        FindingCategory.LOAN_CEILING,
        FindingCategory.DEBT_COVERAGE,
        FindingCategory.CITIZENSHIP,
    ]


def test_issues_precede_warnings(rules: ProgramRules, baseline_inputs: LoanInputs):
    inputs = replace(
        baseline_inputs,
        purchase_price=Decimal("2000000"),
        seller_note_amount=Decimal("100000"),
        seller_note_standby_months=12,
        all_investors_are_domestic_citizens=False,
    )
    findings = evaluate_eligibility(inputs, Decimal("1500000"), Decimal("10"), Decimal("1.20"), rules)

    assert [f.kind for f in findings] == [
        FindingKind.ISSUE,
        FindingKind.WARNING,
        FindingKind.WARNING,
        FindingKind.WARNING,
    ]
    assert categories(findings, FindingKind.WARNING) == [
        FindingCategory.MARGINAL_COVERAGE,
        FindingCategory.EQUITY_CUSHION,
        FindingCategory.SELLER_NOTE_STANDBY,
    ]


@pytest.mark.parametrize(
    "dscr, issue, warning",
    [
        (Decimal("1.14"), True, False),
        (Decimal("1.15"), False, True),
        (Decimal("1.2499"), False, True),
        (Decimal("1.25"), False, False),
    ],
)
def test_coverage_band_boundaries(
    baseline_inputs: LoanInputs, rules: ProgramRules, dscr: Decimal, issue: bool, warning: bool
):
    findings = evaluate_eligibility(baseline_inputs, Decimal("900000"), Decimal("10"), dscr, rules)

    assert (FindingCategory.DEBT_COVERAGE in categories(findings, FindingKind.ISSUE)) is issue
    assert (FindingCategory.MARGINAL_COVERAGE in categories(findings, FindingKind.WARNING)) is warning


def test_threshold_is_configurable(baseline_inputs: LoanInputs):
    strict = ProgramRules(min_dscr=Decimal("1.25"))
    findings = evaluate_eligibility(baseline_inputs, Decimal("900000"), Decimal("10"), Decimal("1.20"), strict)

    assert categories(findings, FindingKind.ISSUE) == [FindingCategory.DEBT_COVERAGE]
    assert "1.25x" in findings[0].message


def test_equity_cushion_only_for_large_deals(baseline_inputs: LoanInputs, rules: ProgramRules):
    small = evaluate_eligibility(baseline_inputs, Decimal("900000"), Decimal("10"), Decimal("2"), rules)
    large_inputs = replace(baseline_inputs, purchase_price=Decimal("1500000"))
    large = evaluate_eligibility(large_inputs, Decimal("1300000"), Decimal("10"), Decimal("2"), rules)
    cushioned = evaluate_eligibility(large_inputs, Decimal("1100000"), Decimal("15"), Decimal("2"), rules)

    assert small == ()
    assert categories(large, FindingKind.WARNING) == [FindingCategory.EQUITY_CUSHION]
    assert cushioned == ()


def test_standby_warning_needs_seller_note(baseline_inputs: LoanInputs, rules: ProgramRules):
    no_note = replace(baseline_inputs, seller_note_standby_months=0)
    assert evaluate_eligibility(no_note, Decimal("900000"), Decimal("10"), Decimal("2"), rules) == ()

    short = replace(baseline_inputs, seller_note_amount=Decimal("50000"), seller_note_standby_months=18)
    findings = evaluate_eligibility(short, Decimal("900000"), Decimal("10"), Decimal("2"), rules)
    assert categories(findings, FindingKind.WARNING) == [FindingCategory.SELLER_NOTE_STANDBY]


def test_no_debt_service_is_not_a_coverage_failure(baseline_inputs: LoanInputs, rules: ProgramRules):
    assert evaluate_eligibility(baseline_inputs, Decimal("0"), Decimal("10"), None, rules) == ()


@pytest.mark.parametrize("ebitda", [Decimal(v) for v in range(20000, 400001, 20000)])
def test_ineligible_whenever_coverage_below_minimum(baseline_inputs: LoanInputs, rules: ProgramRules, ebitda: Decimal):
    outputs = compute_loan_structure(replace(baseline_inputs, ebitda=ebitda), rules)

    if outputs.debt_service_coverage_ratio < rules.min_dscr:
        assert outputs.eligible is False
        assert FindingCategory.DEBT_COVERAGE in categories(outputs.findings, FindingKind.ISSUE)
    else:
        assert outputs.eligible is True


@pytest.mark.parametrize(
    "naics, expected",
    [("311111", True), ("325412", True), ("336111", True), ("423110", False), ("30", False), (None, False), ("", False)],
)
def test_manufacturing_naics_detection(rules: ProgramRules, naics, expected: bool):
    assert is_fee_waiver_industry(naics, rules) is expected


def test_fee_waiver_limits(rules: ProgramRules):
    inside = date(2026, 9, 30)
    assert fee_waiver_applies("332710", Decimal("950000"), inside, rules) is True
    assert fee_waiver_applies("332710", Decimal("950001"), inside, rules) is False
    assert fee_waiver_applies("332710", Decimal("500000"), date(2026, 10, 1), rules) is False
    assert fee_waiver_applies("541611", Decimal("500000"), inside, rules) is False
