"""Prometheus metrics for monitoring eligibility rates, coverage ratios, and validation failures"""

from decimal import Decimal
from typing import Optional

from prometheus_client import Counter, Histogram

from acquisition_gateway.domain.models import ProgramRules

# Calculation metrics
calculation_counter = Counter(
    "acquisition_calculation_total",
    "Total loan-structure calculations",
    ["outcome"],  # eligible | ineligible
)

dscr_bucket_counter = Counter(
    "acquisition_dscr_bucket",
    "Debt service coverage ratios by bucket",
    ["bucket"],  # none | below_minimum | marginal | preferred
)

validation_failure_counter = Counter(
    "acquisition_validation_failures_total",
    "Calculator requests rejected for invalid inputs",
    ["operation"],  # loan_structure | working_capital | scenarios | deal_structure
)

working_capital_counter = Counter(
    "acquisition_working_capital_total",
    "Working-capital recommendations by chosen basis",
    ["basis"],  # line_items | benchmark
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def dscr_bucket(dscr: Optional[Decimal], rules: ProgramRules) -> str:
    """Bucket edges follow the configured program minimum and preferred coverage"""
    if dscr is None:
        return "none"
    if dscr < rules.min_dscr:
        return "below_minimum"
    if dscr < rules.preferred_dscr:
        return "marginal"
    return "preferred"


def record_calculation(eligible: bool, dscr: Optional[Decimal], rules: ProgramRules) -> None:
    """Record eligibility outcome and bucket the coverage ratio for distribution analysis"""
    outcome = "eligible" if eligible else "ineligible"
    calculation_counter.labels(outcome=outcome).inc()

    dscr_bucket_counter.labels(bucket=dscr_bucket(dscr, rules)).inc()
