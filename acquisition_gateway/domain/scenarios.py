"""Stress scenarios and DSCR breakeven for a proposed loan structure"""

from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from acquisition_gateway.domain.amortization import HUNDRED, ZERO
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.domain.loan_structure import compute_loan_structure
from acquisition_gateway.domain.models import (
    LoanInputs,
    LoanOutputs,
    ProgramRules,
    Scenario,
    ScenarioAnalysis,
)

GROWTH_PERCENT = Decimal("20")
MARGIN_SHIFT_POINTS = Decimal("5")


def classify_viability(dscr: Optional[Decimal], rules: ProgramRules) -> str:
    """viable >= preferred DSCR, marginal >= program minimum, else unviable"""
    if dscr is None or dscr >= rules.preferred_dscr:
        return "viable"
    if dscr >= rules.min_dscr:
        return "marginal"
    return "unviable"


def _coverage_risks(outputs: LoanOutputs, rules: ProgramRules) -> List[str]:
    dscr = outputs.debt_service_coverage_ratio
    if dscr is None:
        return []
    if dscr < rules.min_dscr:
        return ["DSCR falls below SBA minimum"]
    if dscr < rules.preferred_dscr:
        return [f"DSCR below preferred threshold ({rules.preferred_dscr}x)"]
    return []


def _run_case(
    name: str,
    description: str,
    inputs: LoanInputs,
    rules: ProgramRules,
    revenue: Decimal,
    margin_percent: Decimal,
    revenue_change: Decimal,
    margin_change: Decimal,
    extra_risks: List[str],
) -> Scenario:
    ebitda = revenue * max(margin_percent, ZERO) / HUNDRED

    if ebitda <= 0:
        return Scenario(
            name=name,
            description=description,
            revenue_change_percent=revenue_change,
            ebitda_margin_change=margin_change,
            adjusted_revenue=revenue,
            adjusted_ebitda=ebitda,
            viability="unviable",
            outputs=None,
            risk_factors=tuple(extra_risks + ["EBITDA eliminated"]),
        )

    outputs = compute_loan_structure(replace(inputs, ebitda=ebitda, revenue=revenue), rules)
    return Scenario(
        name=name,
        description=description,
        revenue_change_percent=revenue_change,
        ebitda_margin_change=margin_change,
        adjusted_revenue=revenue,
        adjusted_ebitda=ebitda,
        viability=classify_viability(outputs.debt_service_coverage_ratio, rules),
        outputs=outputs,
        risk_factors=tuple(extra_risks + _coverage_risks(outputs, rules)),
    )


def build_scenarios(
    inputs: LoanInputs,
    rules: ProgramRules,
    top_customer_percent: Decimal = ZERO,
) -> ScenarioAnalysis:
    """
    Stress the deal four ways and find breakeven EBITDA.

    - Base: as presented
    - Upside: +20% revenue, +5pt EBITDA margin
    - Downside: -20% revenue, margin holds
    - Worst: lose the top customer's revenue share, -5pt margin

    Breakeven is the EBITDA that keeps the base-case DSCR at the preferred
    threshold (program minimum + marginal buffer).

    Raises:
        ValidationError: revenue is not positive, or top customer share out of range
    """
    if inputs.revenue <= 0:
        raise ValidationError("revenue", "must be a positive number for scenario analysis")
    if not (0 <= top_customer_percent <= 100):
        raise ValidationError("top_customer_percent", "must be between 0 and 100")

    base_revenue = inputs.revenue
    base_margin = inputs.ebitda / base_revenue * HUNDRED

    base_outputs = compute_loan_structure(inputs, rules)
    base_case = Scenario(
        name="Base Case",
        description="As presented in CIM",
        revenue_change_percent=ZERO,
        ebitda_margin_change=ZERO,
        adjusted_revenue=base_revenue,
        adjusted_ebitda=inputs.ebitda,
        viability=classify_viability(base_outputs.debt_service_coverage_ratio, rules),
        outputs=base_outputs,
        risk_factors=tuple(_coverage_risks(base_outputs, rules)),
    )

    upside = _run_case(
        "Upside Case",
        f"+{GROWTH_PERCENT}% revenue growth, +{MARGIN_SHIFT_POINTS}pt margin expansion",
        inputs,
        rules,
        revenue=base_revenue * (HUNDRED + GROWTH_PERCENT) / HUNDRED,
        margin_percent=base_margin + MARGIN_SHIFT_POINTS,
        revenue_change=GROWTH_PERCENT,
        margin_change=MARGIN_SHIFT_POINTS,
        extra_risks=[],
    )

    downside = _run_case(
        "Downside Case",
        f"-{GROWTH_PERCENT}% revenue decline, margins hold",
        inputs,
        rules,
        revenue=base_revenue * (HUNDRED - GROWTH_PERCENT) / HUNDRED,
        margin_percent=base_margin,
        revenue_change=-GROWTH_PERCENT,
        margin_change=ZERO,
        extra_risks=[],
    )

    worst_case = _run_case(
        "Worst Case",
        f"Top customer ({top_customer_percent}%) lost + {MARGIN_SHIFT_POINTS}pt margin compression",
        inputs,
        rules,
        revenue=base_revenue * (HUNDRED - top_customer_percent) / HUNDRED,
        margin_percent=base_margin - MARGIN_SHIFT_POINTS,
        revenue_change=-top_customer_percent,
        margin_change=-MARGIN_SHIFT_POINTS,
        extra_risks=["Loss of largest customer", "Operating margin compression"],
    )

    breakeven_ebitda = base_outputs.annual_debt_service * rules.preferred_dscr
    margin_of_safety = (inputs.ebitda - breakeven_ebitda) / inputs.ebitda * HUNDRED

    return ScenarioAnalysis(
        base_case=base_case,
        upside=upside,
        downside=downside,
        worst_case=worst_case,
        breakeven_ebitda=breakeven_ebitda,
        margin_of_safety_percent=margin_of_safety,
    )
