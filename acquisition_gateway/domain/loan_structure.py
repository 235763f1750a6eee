"""Loan structuring engine - capital stack and debt service for an acquisition"""

from datetime import date
from decimal import Decimal
from typing import Optional

from acquisition_gateway.domain.amortization import (
    HUNDRED,
    MONTHS_PER_YEAR,
    ZERO,
    debt_service_schedule,
    guarantee_fee,
    monthly_payment,
)
from acquisition_gateway.domain.eligibility import evaluate_eligibility, fee_waiver_applies
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.domain.models import LoanInputs, LoanOutputs, ProgramRules


def to_decimal(name: str, value) -> Optional[Decimal]:
    """Coerce a caller-supplied number to Decimal, naming the field on failure"""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(name, "must be a number")
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except ArithmeticError as e:
            raise ValidationError(name, "must be a number") from e
    # NaN would raise InvalidOperation on the first comparison
    if not value.is_finite():
        raise ValidationError(name, "must be a finite number")
    return value


def prepare_loan_inputs(
    purchase_price,
    ebitda,
    *,
    rules: ProgramRules,
    today: date,
    working_capital=None,
    closing_costs=None,
    packaging_fee=None,
    interest_rate=None,
    loan_term_years: Optional[int] = None,
    seller_note_amount=None,
    seller_note_rate=None,
    seller_note_term_years: Optional[int] = None,
    seller_note_standby_months: Optional[int] = None,
    earnout_amount=None,
    earnout_trigger: Optional[str] = None,
    revenue=None,
    naics_code: Optional[str] = None,
    all_investors_are_domestic_citizens: Optional[bool] = None,
    equity_injection_percent=None,
) -> LoanInputs:
    """
    Fill program defaults for every omitted optional field and validate.

    This is the only place defaults are applied; the engine receives a
    fully populated immutable LoanInputs. Required fields (purchase_price,
    ebitda) are never defaulted.

    Raises:
        ValidationError: naming the first offending field
    """
    purchase_price = to_decimal("purchase_price", purchase_price)
    ebitda = to_decimal("ebitda", ebitda)
    if purchase_price is None or purchase_price <= 0:
        raise ValidationError("purchase_price", "must be a positive number")
    if ebitda is None or ebitda <= 0:
        raise ValidationError("ebitda", "must be a positive number")

    def pick(name: str, value, default):
        value = to_decimal(name, value)
        return default if value is None else value

    return LoanInputs(
        purchase_price=purchase_price,
        ebitda=ebitda,
        working_capital=pick("working_capital", working_capital, ZERO),
        closing_costs=pick(
            "closing_costs",
            closing_costs,
            purchase_price * rules.default_closing_cost_percent / HUNDRED,
        ),
        packaging_fee=pick("packaging_fee", packaging_fee, rules.default_packaging_fee),
        interest_rate=pick("interest_rate", interest_rate, rules.default_interest_rate),
        loan_term_years=loan_term_years if loan_term_years is not None else rules.default_loan_term_years,
        seller_note_amount=pick("seller_note_amount", seller_note_amount, ZERO),
        seller_note_rate=pick("seller_note_rate", seller_note_rate, rules.default_seller_note_rate),
        seller_note_term_years=(
            seller_note_term_years
            if seller_note_term_years is not None
            else rules.default_seller_note_term_years
        ),
        seller_note_standby_months=(
            seller_note_standby_months
            if seller_note_standby_months is not None
            else rules.default_seller_note_standby_months
        ),
        earnout_amount=pick("earnout_amount", earnout_amount, ZERO),
        earnout_trigger=earnout_trigger or "",
        revenue=pick("revenue", revenue, ZERO),
        as_of=today,
        naics_code=naics_code or None,
        all_investors_are_domestic_citizens=(
            True if all_investors_are_domestic_citizens is None else all_investors_are_domestic_citizens
        ),
        equity_injection_percent=to_decimal("equity_injection_percent", equity_injection_percent),
    )


def compute_loan_structure(inputs: LoanInputs, rules: ProgramRules) -> LoanOutputs:
    """
    Main entry point: build the capital stack, debt service and eligibility.

    Flow:
    1. Total project cost = price + working capital + closing costs + packaging fee
    2. Equity injection = max(planned %, program floor %) of total project cost
    3. Primary loan = total - seller note - equity (earnout is contingent, never deducted)
    4. Guarantee fee on the primary loan, unless the manufacturing waiver applies
    5. Amortized payments; seller note pays only after its standby window
    6. Coverage and return ratios, then eligibility findings

    An over-ceiling loan is still fully computed; the findings mark it
    ineligible. No rounding happens here.
    """
    total_project_cost = (
        inputs.purchase_price + inputs.working_capital + inputs.closing_costs + inputs.packaging_fee
    )

    equity_percent = rules.equity_injection_floor_percent
    if inputs.equity_injection_percent is not None:
        equity_percent = max(inputs.equity_injection_percent, equity_percent)
    equity_injection = total_project_cost * equity_percent / HUNDRED

    primary_loan = max(total_project_cost - inputs.seller_note_amount - equity_injection, ZERO)

    # Guarantee fee, or what the waiver saves
    fee_waiver_savings = None
    normal_fee = guarantee_fee(primary_loan, rules)
    if fee_waiver_applies(inputs.naics_code, primary_loan, inputs.as_of, rules):
        fee_waiver_savings = normal_fee
        guarantee_fee_amount = ZERO
    else:
        guarantee_fee_amount = normal_fee

    financed_loan = primary_loan + guarantee_fee_amount if rules.finance_guarantee_fee else primary_loan

    # Debt service
    primary_payment = monthly_payment(financed_loan, inputs.interest_rate, inputs.loan_term_years)
    seller_payment = monthly_payment(
        inputs.seller_note_amount, inputs.seller_note_rate, inputs.seller_note_term_years
    )
    total_monthly = primary_payment + seller_payment
    annual_debt_service = primary_payment * MONTHS_PER_YEAR + seller_payment * MONTHS_PER_YEAR

    schedule = debt_service_schedule(
        primary_payment,
        inputs.loan_term_years,
        seller_payment,
        inputs.seller_note_standby_months,
        inputs.seller_note_term_years,
    )
    year_one_debt_service = schedule[0] if schedule else ZERO

    # Key metrics
    dscr = inputs.ebitda / annual_debt_service if annual_debt_service > 0 else None
    year_one_cash_flow = inputs.ebitda - year_one_debt_service
    cash_on_cash = year_one_cash_flow / equity_injection * HUNDRED if equity_injection > 0 else ZERO
    payback_years = equity_injection / year_one_cash_flow if year_one_cash_flow > 0 else None

    findings = evaluate_eligibility(inputs, primary_loan, equity_percent, dscr, rules)

    return LoanOutputs(
        total_project_cost=total_project_cost,
        equity_injection_required=equity_injection,
        equity_injection_percent=equity_percent,
        primary_loan_amount=primary_loan,
        guarantee_fee_amount=guarantee_fee_amount,
        financed_loan_amount=financed_loan,
        max_loan_amount=rules.max_loan_amount,
        primary_monthly_payment=primary_payment,
        seller_note_monthly_payment=seller_payment,
        total_monthly_debt_service=total_monthly,
        annual_debt_service=annual_debt_service,
        year_one_debt_service=year_one_debt_service,
        debt_service_schedule=tuple(schedule),
        debt_service_coverage_ratio=dscr,
        cash_on_cash_return=cash_on_cash,
        year_one_cash_flow=year_one_cash_flow,
        payback_period_years=payback_years,
        earnout_amount=inputs.earnout_amount,
        earnout_trigger=inputs.earnout_trigger,
        fee_waiver_savings=fee_waiver_savings,
        findings=findings,
    )
