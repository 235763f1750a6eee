"""Unit tests for the conventional deal-structure calculator"""

import pytest
from decimal import Decimal
from acquisition_gateway.domain.deal_structure import compute_deal_structure, prepare_deal_inputs
from acquisition_gateway.domain.exceptions import ValidationError


def test_defaults_applied():
    inputs = prepare_deal_inputs(Decimal("1000000"), Decimal("250000"))

    assert inputs.down_payment_percent == Decimal("10")
    assert inputs.interest_rate == Decimal("7.5")
    assert inputs.loan_term_years == 10


def test_default_structure():
    """$1M at 10% down, 7.5% over 10 years"""
    outputs = compute_deal_structure(prepare_deal_inputs(1000000, 250000))

    assert outputs.equity_required == Decimal("100000")
    assert outputs.loan_amount == Decimal("900000")
    assert float(outputs.monthly_payment) == pytest.approx(10683.18, abs=0.5)
    assert outputs.annual_debt_service == outputs.monthly_payment * 12
    assert outputs.debt_service_coverage_ratio == Decimal("250000") / outputs.annual_debt_service
    assert outputs.annual_cash_flow == Decimal("250000") - outputs.annual_debt_service


def test_interest_free_loan():
    """$540K over 120 months is $4,500/month straight-line"""
    outputs = compute_deal_structure(
        prepare_deal_inputs(Decimal("600000"), Decimal("150000"), interest_rate=Decimal("0"))
    )

    assert outputs.monthly_payment == Decimal("4500")
    assert outputs.annual_debt_service == Decimal("54000")
    assert outputs.cash_on_cash_return == Decimal("160")
    assert outputs.payback_period_years == Decimal("0.625")


def test_zero_down_payment_has_no_cash_on_cash():
    outputs = compute_deal_structure(
        prepare_deal_inputs(Decimal("500000"), Decimal("100000"), down_payment_percent=Decimal("0"))
    )
    assert outputs.equity_required == 0
    assert outputs.loan_amount == Decimal("500000")
    assert outputs.cash_on_cash_return == 0


def test_nearly_all_equity_deal():
    outputs = compute_deal_structure(
        prepare_deal_inputs(Decimal("500000"), Decimal("100000"), down_payment_percent=Decimal("99.99"))
    )
    assert outputs.debt_service_coverage_ratio > 100


def test_negative_cash_flow_has_no_payback():
    outputs = compute_deal_structure(prepare_deal_inputs(Decimal("2000000"), Decimal("100000")))

    assert outputs.annual_cash_flow < 0
    assert outputs.cash_on_cash_return < 0
    assert outputs.payback_period_years is None


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"purchase_price": 0}, "purchase_price"),
        ({"ebitda": -1}, "ebitda"),
        ({"ebitda": None}, "ebitda"),
        ({"down_payment_percent": 100}, "down_payment_percent"),
        ({"down_payment_percent": -5}, "down_payment_percent"),
        ({"interest_rate": 51}, "interest_rate"),
        ({"interest_rate": -0.5}, "interest_rate"),
        ({"loan_term_years": 0}, "loan_term_years"),
        ({"loan_term_years": 31}, "loan_term_years"),
        ({"purchase_price": "NaN"}, "purchase_price"),
    ],
)
def test_invalid_inputs_rejected(overrides: dict, field: str):
    args = {"purchase_price": 1000000, "ebitda": 250000, **overrides}
    price = args.pop("purchase_price")
    ebitda = args.pop("ebitda")

    with pytest.raises(ValidationError) as exc_info:
        prepare_deal_inputs(price, ebitda, **args)
    assert exc_info.value.field == field
