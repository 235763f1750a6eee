"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Request
from acquisition_gateway.config import settings
from acquisition_gateway.domain.models import ProgramRules


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_program_rules() -> ProgramRules:
    """Program rules from configuration"""
    return ProgramRules(
        max_loan_amount=settings.max_loan_amount,
        equity_injection_floor_percent=settings.equity_injection_floor_percent,
        equity_cushion_percent=settings.equity_cushion_percent,
        large_deal_threshold=settings.large_deal_threshold,
        min_dscr=settings.min_dscr,
        marginal_dscr_buffer=settings.marginal_dscr_buffer,
        min_standby_months=settings.min_standby_months,
        default_closing_cost_percent=settings.default_closing_cost_percent,
        default_packaging_fee=settings.default_packaging_fee,
        default_interest_rate=settings.default_interest_rate,
        default_loan_term_years=settings.default_loan_term_years,
        default_seller_note_rate=settings.default_seller_note_rate,
        default_seller_note_term_years=settings.default_seller_note_term_years,
        default_seller_note_standby_months=settings.default_seller_note_standby_months,
        guarantee_fee_exempt_limit=settings.guarantee_fee_exempt_limit,
        guarantee_fee_tier_limit=settings.guarantee_fee_tier_limit,
        guarantee_fee_base_percent=settings.guarantee_fee_base_percent,
        guarantee_fee_upper_percent=settings.guarantee_fee_upper_percent,
        finance_guarantee_fee=settings.finance_guarantee_fee,
        fee_waiver_naics_prefixes=tuple(settings.fee_waiver_naics_prefixes),
        fee_waiver_max_loan=settings.fee_waiver_max_loan,
        fee_waiver_expires=settings.fee_waiver_expires,
    )


def get_today() -> date:
    """Valuation date for time-limited program rules"""
    return date.today()
