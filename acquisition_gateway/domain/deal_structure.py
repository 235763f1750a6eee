"""Conventional deal-structure calculator - down payment, one amortizing loan, return metrics"""

from decimal import Decimal
from typing import Optional

from acquisition_gateway.domain.amortization import HUNDRED, MONTHS_PER_YEAR, ZERO, monthly_payment
from acquisition_gateway.domain.loan_structure import to_decimal
from acquisition_gateway.domain.models import DealStructureInputs, DealStructureOutputs

DEFAULT_DOWN_PAYMENT_PERCENT = Decimal("10")
DEFAULT_INTEREST_RATE = Decimal("7.5")
DEFAULT_LOAN_TERM_YEARS = 10


def prepare_deal_inputs(
    purchase_price,
    ebitda,
    *,
    down_payment_percent=None,
    interest_rate=None,
    loan_term_years: Optional[int] = None,
) -> DealStructureInputs:
    """
    Fill defaults (10% down, 7.5% over 10 years) and validate.

    Raises:
        ValidationError: naming the first offending field
    """
    purchase_price = to_decimal("purchase_price", purchase_price)
    ebitda = to_decimal("ebitda", ebitda)
    down_payment_percent = to_decimal("down_payment_percent", down_payment_percent)
    interest_rate = to_decimal("interest_rate", interest_rate)

    return DealStructureInputs(
        purchase_price=purchase_price,
        ebitda=ebitda,
        down_payment_percent=DEFAULT_DOWN_PAYMENT_PERCENT if down_payment_percent is None else down_payment_percent,
        interest_rate=DEFAULT_INTEREST_RATE if interest_rate is None else interest_rate,
        loan_term_years=DEFAULT_LOAN_TERM_YEARS if loan_term_years is None else loan_term_years,
    )


def compute_deal_structure(inputs: DealStructureInputs) -> DealStructureOutputs:
    """
    Equity = price * down payment %; the rest is financed.

    No closing costs, guarantee fee or program eligibility apply here; use
    compute_loan_structure for SBA 7(a) deals.
    """
    equity = inputs.purchase_price * inputs.down_payment_percent / HUNDRED
    loan_amount = inputs.purchase_price - equity

    payment = monthly_payment(loan_amount, inputs.interest_rate, inputs.loan_term_years)
    annual_debt_service = payment * MONTHS_PER_YEAR

    dscr = inputs.ebitda / annual_debt_service if annual_debt_service > 0 else None
    cash_flow = inputs.ebitda - annual_debt_service
    cash_on_cash = cash_flow / equity * HUNDRED if equity > 0 else ZERO
    payback_years = equity / cash_flow if cash_flow > 0 else None

    return DealStructureOutputs(
        loan_amount=loan_amount,
        equity_required=equity,
        monthly_payment=payment,
        annual_debt_service=annual_debt_service,
        debt_service_coverage_ratio=dscr,
        annual_cash_flow=cash_flow,
        cash_on_cash_return=cash_on_cash,
        payback_period_years=payback_years,
    )
