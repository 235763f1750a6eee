"""Eligibility & risk evaluation - program verdicts for a computed capital stack"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from acquisition_gateway.domain.models import (
    EligibilityFinding,
    FindingCategory,
    FindingKind,
    LoanInputs,
    ProgramRules,
)


def is_fee_waiver_industry(naics_code: Optional[str], rules: ProgramRules) -> bool:
    """Manufacturing detection: NAICS sectors 31-33"""
    if not naics_code:
        return False
    return naics_code.strip().startswith(rules.fee_waiver_naics_prefixes)


def fee_waiver_applies(
    naics_code: Optional[str],
    loan_amount: Decimal,
    as_of: date,
    rules: ProgramRules,
) -> bool:
    """
    Manufacturing guarantee-fee waiver: $0 fee for NAICS 31-33 businesses
    with loans up to the waiver cap, while the waiver window is open.
    """
    return (
        is_fee_waiver_industry(naics_code, rules)
        and loan_amount <= rules.fee_waiver_max_loan
        and as_of <= rules.fee_waiver_expires
    )


def _issue(category: FindingCategory, message: str) -> EligibilityFinding:
    return EligibilityFinding(kind=FindingKind.ISSUE, category=category, message=message)


def _warning(category: FindingCategory, message: str) -> EligibilityFinding:
    return EligibilityFinding(kind=FindingKind.WARNING, category=category, message=message)


def evaluate_eligibility(
    inputs: LoanInputs,
    primary_loan_amount: Decimal,
    equity_injection_percent: Decimal,
    dscr: Optional[Decimal],
    rules: ProgramRules,
) -> Tuple[EligibilityFinding, ...]:
    """
    Classify a capital stack against program rules.

    Issues make the deal ineligible; warnings are advisory only. Both are
    appended in a fixed order so identical inputs give identical output:

    Issues:
    1. Primary loan above the program ceiling
    2. DSCR below the program minimum
    3. Investors not all domestic citizens

    Warnings:
    1. DSCR inside the marginal band above the minimum
    2. Equity injection without cushion above the floor on a large deal
    3. Seller note standby shorter than program guidance
    """
    issues: List[EligibilityFinding] = []
    warnings: List[EligibilityFinding] = []

    if primary_loan_amount > rules.max_loan_amount:
        issues.append(
            _issue(
                FindingCategory.LOAN_CEILING,
                f"SBA 7(a) max loan is ${rules.max_loan_amount:,.0f}. "
                "Consider SBA 504 or conventional financing.",
            )
        )

    if dscr is not None and dscr < rules.min_dscr:
        issues.append(
            _issue(
                FindingCategory.DEBT_COVERAGE,
                f"DSCR below {rules.min_dscr}x - unlikely to qualify for SBA loan.",
            )
        )

    if not inputs.all_investors_are_domestic_citizens:
        issues.append(
            _issue(
                FindingCategory.CITIZENSHIP,
                "SBA 7(a) requires 100% U.S. ownership. Your current investor structure "
                "may not qualify. Consider conventional financing.",
            )
        )

    if dscr is not None and rules.min_dscr <= dscr < rules.preferred_dscr:
        warnings.append(
            _warning(
                FindingCategory.MARGINAL_COVERAGE,
                f"DSCR below {rules.preferred_dscr}x - tight debt service coverage. "
                f"Lenders prefer {rules.preferred_dscr}x+",
            )
        )

    cushioned_percent = rules.equity_injection_floor_percent + rules.equity_cushion_percent
    if equity_injection_percent < cushioned_percent and inputs.purchase_price > rules.large_deal_threshold:
        warnings.append(
            _warning(
                FindingCategory.EQUITY_CUSHION,
                f"For deals >${rules.large_deal_threshold:,.0f}, lenders often prefer "
                f"{cushioned_percent}%+ equity injection.",
            )
        )

    if inputs.seller_note_amount > 0 and inputs.seller_note_standby_months < rules.min_standby_months:
        warnings.append(
            _warning(
                FindingCategory.SELLER_NOTE_STANDBY,
                f"SBA typically requires a {rules.min_standby_months}-month standby period "
                "for seller notes.",
            )
        )

    return tuple(issues + warnings)
