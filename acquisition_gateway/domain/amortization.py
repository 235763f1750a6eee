"""Loan payment math: amortization, guarantee-fee tiers, seller-note standby"""

from decimal import Decimal
from typing import List

from acquisition_gateway.domain.models import ProgramRules

ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = 12


def monthly_payment(principal: Decimal, annual_rate_percent: Decimal, years: int) -> Decimal:
    """
    Fixed-rate, fixed-term monthly payment.

    P = L * r(1+r)^n / ((1+r)^n - 1)
    where r = annual rate / 100 / 12 and n = years * 12.

    Zero rate falls back to straight-line principal; non-positive principal
    or term yields no payment.
    """
    if principal <= 0 or years <= 0:
        return ZERO

    monthly_rate = annual_rate_percent / HUNDRED / MONTHS_PER_YEAR
    num_payments = years * MONTHS_PER_YEAR

    if monthly_rate == 0:
        return principal / num_payments

    growth = (1 + monthly_rate) ** num_payments
    return principal * (monthly_rate * growth) / (growth - 1)


def guarantee_fee(loan_amount: Decimal, rules: ProgramRules) -> Decimal:
    """
    Tiered program guarantee fee on the guaranteed loan amount.

    - up to the exempt limit ($150K): no fee
    - up to the tier limit ($700K): base percent on the whole amount
    - above: base percent on the first $700K, upper percent on the remainder
    """
    if loan_amount <= rules.guarantee_fee_exempt_limit:
        return ZERO
    if loan_amount <= rules.guarantee_fee_tier_limit:
        return loan_amount * rules.guarantee_fee_base_percent / HUNDRED

    first_tier = rules.guarantee_fee_tier_limit * rules.guarantee_fee_base_percent / HUNDRED
    remainder = (loan_amount - rules.guarantee_fee_tier_limit) * rules.guarantee_fee_upper_percent / HUNDRED
    return first_tier + remainder


def seller_note_payment_months(standby_months: int, term_years: int) -> range:
    """1-based month numbers in which a seller note with standby is paid"""
    first = standby_months + 1
    return range(first, first + term_years * MONTHS_PER_YEAR)


def debt_service_schedule(
    primary_payment: Decimal,
    primary_term_years: int,
    seller_payment: Decimal,
    seller_standby_months: int,
    seller_term_years: int,
) -> List[Decimal]:
    """
    Total debt service per loan year.

    The schedule runs until the later of the two loans is paid off. Seller
    note payments start the month after the standby window ends. Each year
    is payment x paying months, so a full year equals 12 x the payment.
    """
    primary_months = range(1, primary_term_years * MONTHS_PER_YEAR + 1)
    seller_months = seller_note_payment_months(seller_standby_months, seller_term_years)
    last_month = primary_months.stop - 1
    if seller_payment > 0:
        last_month = max(last_month, seller_months.stop - 1)

    years = -(-last_month // MONTHS_PER_YEAR)
    schedule = []
    for year in range(years):
        months = range(year * MONTHS_PER_YEAR + 1, (year + 1) * MONTHS_PER_YEAR + 1)
        primary_count = sum(1 for m in months if m in primary_months)
        seller_count = sum(1 for m in months if m in seller_months) if seller_payment > 0 else 0
        schedule.append(primary_payment * primary_count + seller_payment * seller_count)
    return schedule
