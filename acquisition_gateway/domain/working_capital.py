"""Working-capital estimation from balance-sheet line items or industry benchmarks"""

from decimal import Decimal
from typing import Dict, List, Optional

from acquisition_gateway.domain.amortization import HUNDRED, ZERO
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.domain.models import WorkingCapitalInputs, WorkingCapitalOutputs

# Working capital as % of revenue (rough industry estimates)
INDUSTRY_WC_BENCHMARKS: Dict[str, Decimal] = {
    "manufacturing": Decimal("20"),
    "distribution": Decimal("15"),
    "professional_services": Decimal("10"),
    "healthcare": Decimal("12"),
    "construction": Decimal("18"),
    "retail": Decimal("10"),
    "technology": Decimal("8"),
    "default": Decimal("15"),
}

# Adjustments within +/- this amount are treated as neutral
NEUTRAL_ADJUSTMENT_BAND = Decimal("5000")


def resolve_benchmark_percent(inputs: WorkingCapitalInputs) -> Optional[Decimal]:
    """Explicit benchmark wins; otherwise look the industry up (no implicit default)"""
    if inputs.industry_benchmark_percent is not None:
        return inputs.industry_benchmark_percent
    if inputs.industry:
        return INDUSTRY_WC_BENCHMARKS.get(inputs.industry.strip().lower())
    return None


def line_item_working_capital(inputs: WorkingCapitalInputs) -> Decimal:
    """(AR + inventory + prepaid) - (AP + accrued); missing items count as zero"""
    current_assets = (
        (inputs.accounts_receivable or ZERO)
        + (inputs.inventory or ZERO)
        + (inputs.prepaid_expenses or ZERO)
    )
    current_liabilities = (inputs.accounts_payable or ZERO) + (inputs.accrued_expenses or ZERO)
    return current_assets - current_liabilities


def _validate(inputs: WorkingCapitalInputs) -> None:
    if inputs.annual_revenue is None or inputs.annual_revenue < 0:
        raise ValidationError("annual_revenue", "must be a non-negative number")
    if inputs.industry_benchmark_percent is not None and inputs.industry_benchmark_percent < 0:
        raise ValidationError("industry_benchmark_percent", "must be a non-negative number")
    for name in ("accounts_receivable", "inventory", "prepaid_expenses", "accounts_payable", "accrued_expenses"):
        value = getattr(inputs, name)
        if value is not None and value < 0:
            raise ValidationError(name, "must be a non-negative number")
    if (
        not inputs.has_line_items
        and inputs.industry_benchmark_percent is None
        and not (inputs.industry and inputs.industry.strip())
    ):
        raise ValidationError("industry", "is required when neither line items nor a benchmark percent are given")


def _advisories(
    inputs: WorkingCapitalInputs,
    line_items: Optional[Decimal],
    adjustment: Optional[Decimal],
) -> List[str]:
    revenue = inputs.annual_revenue
    warnings: List[str] = []
    if revenue <= 0:
        return warnings

    if adjustment is not None and abs(adjustment) > revenue * Decimal("0.05"):
        warnings.append(
            f"Estimated WC adjustment of ${abs(adjustment):,.0f} is >5% of revenue. "
            "Negotiate this carefully in LOI."
        )
    if line_items is not None and line_items / revenue * HUNDRED < 5:
        warnings.append("Current working capital is unusually low. Verify AR/AP aging and inventory valuation.")
    if (inputs.accounts_receivable or ZERO) > revenue * Decimal("0.25"):
        warnings.append("Accounts receivable >90 days of revenue. Check AR aging report for collectibility.")
    if (inputs.inventory or ZERO) > revenue * Decimal("0.30"):
        warnings.append(
            "Inventory levels appear high relative to revenue. "
            "Verify inventory turnover and obsolescence risk."
        )
    return warnings


def compute_working_capital(inputs: WorkingCapitalInputs) -> WorkingCapitalOutputs:
    """
    Recommend a working-capital figure for the loan structure.

    - Line-item estimate when any balance-sheet item is supplied
    - Benchmark estimate = annual revenue * benchmark % when a benchmark resolves
    - Recommendation is the greater of the available estimates

    Raises:
        ValidationError: invalid inputs, or neither estimate is available
    """
    _validate(inputs)

    line_items = line_item_working_capital(inputs) if inputs.has_line_items else None
    benchmark_percent = resolve_benchmark_percent(inputs)
    benchmark = inputs.annual_revenue * benchmark_percent / HUNDRED if benchmark_percent is not None else None

    if line_items is None and benchmark is None:
        raise ValidationError(
            "industry",
            "cannot estimate working capital: no line items and no benchmark for this industry",
        )

    if benchmark is None or (line_items is not None and line_items >= benchmark):
        recommended, basis = line_items, "line_items"
    else:
        recommended, basis = benchmark, "benchmark"

    # Normalized-vs-current adjustment (positive = buyer owes seller at close)
    adjustment = None
    direction = None
    if line_items is not None and benchmark is not None:
        adjustment = benchmark - line_items
        if adjustment > NEUTRAL_ADJUSTMENT_BAND:
            direction = "buyer_debit"
        elif adjustment < -NEUTRAL_ADJUSTMENT_BAND:
            direction = "buyer_credit"
        else:
            direction = "neutral"

    current_percent = None
    if line_items is not None and inputs.annual_revenue > 0:
        current_percent = line_items / inputs.annual_revenue * HUNDRED

    recommendations = []
    if benchmark is not None:
        recommendations.append(
            f'Include WC adjustment mechanism in LOI: "Normalized Working Capital = '
            f'${benchmark:,.0f}, subject to true-up at close"'
        )
    recommendations.append("Request detailed AR aging, AP aging, and inventory breakdown during due diligence")
    if adjustment:
        who = "buyer will owe seller" if adjustment > 0 else "seller will owe buyer"
        recommendations.append(f"Estimated adjustment: ${abs(adjustment):,.0f} ({who} at close)")

    return WorkingCapitalOutputs(
        recommended_working_capital=recommended,
        basis=basis,
        line_item_estimate=line_items,
        benchmark_estimate=benchmark,
        benchmark_percent=benchmark_percent,
        current_percent_of_revenue=current_percent,
        estimated_adjustment=adjustment,
        adjustment_direction=direction,
        warnings=tuple(_advisories(inputs, line_items, adjustment)),
        recommendations=tuple(recommendations),
    )
