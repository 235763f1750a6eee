"""Domain models - pure Python dataclasses representing calculator inputs and results"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from acquisition_gateway.domain.exceptions import ValidationError


@dataclass(frozen=True)
class ProgramRules:
    """SBA 7(a) program constants. Percentages are plain decimals (10 means 10%)."""

    max_loan_amount: Decimal = Decimal("5000000")
    equity_injection_floor_percent: Decimal = Decimal("10")
    equity_cushion_percent: Decimal = Decimal("5")
    large_deal_threshold: Decimal = Decimal("1000000")
    min_dscr: Decimal = Decimal("1.15")
    marginal_dscr_buffer: Decimal = Decimal("0.10")
    min_standby_months: int = 24

    # Defaults applied at the entry boundary
    default_closing_cost_percent: Decimal = Decimal("3")
    default_packaging_fee: Decimal = Decimal("3500")
    default_interest_rate: Decimal = Decimal("10.25")
    default_loan_term_years: int = 10
    default_seller_note_rate: Decimal = Decimal("6.0")
    default_seller_note_term_years: int = 5
    default_seller_note_standby_months: int = 24

    # Guarantee fee tiers
    guarantee_fee_exempt_limit: Decimal = Decimal("150000")
    guarantee_fee_tier_limit: Decimal = Decimal("700000")
    guarantee_fee_base_percent: Decimal = Decimal("2.0")
    guarantee_fee_upper_percent: Decimal = Decimal("3.5")
    finance_guarantee_fee: bool = True

    # Manufacturing fee waiver (NAICS 31-33)
    fee_waiver_naics_prefixes: Tuple[str, ...] = ("31", "32", "33")
    fee_waiver_max_loan: Decimal = Decimal("950000")
    fee_waiver_expires: date = date(2026, 9, 30)

    @property
    def preferred_dscr(self) -> Decimal:
        return self.min_dscr + self.marginal_dscr_buffer


def _require_positive(name: str, value) -> None:
    if value is None or value <= 0:
        raise ValidationError(name, "must be a positive number")


def _require_non_negative(name: str, value) -> None:
    if value is None or value < 0:
        raise ValidationError(name, "must be a non-negative number")


@dataclass(frozen=True)
class LoanInputs:
    """
    Fully populated, validated inputs for one loan-structure calculation.

    Build through loan_structure.prepare_loan_inputs so that optional fields
    receive program defaults exactly once.
    """

    purchase_price: Decimal
    ebitda: Decimal
    working_capital: Decimal
    closing_costs: Decimal
    packaging_fee: Decimal
    interest_rate: Decimal
    loan_term_years: int
    seller_note_amount: Decimal
    seller_note_rate: Decimal
    seller_note_term_years: int
    seller_note_standby_months: int
    earnout_amount: Decimal
    earnout_trigger: str
    revenue: Decimal
    as_of: date
    naics_code: Optional[str] = None
    all_investors_are_domestic_citizens: bool = True
    equity_injection_percent: Optional[Decimal] = None

    def __post_init__(self) -> None:
        _require_positive("purchase_price", self.purchase_price)
        _require_positive("ebitda", self.ebitda)
        _require_positive("interest_rate", self.interest_rate)
        for name in (
            "working_capital",
            "closing_costs",
            "packaging_fee",
            "seller_note_amount",
            "seller_note_rate",
            "earnout_amount",
            "revenue",
        ):
            _require_non_negative(name, getattr(self, name))
        _require_positive("loan_term_years", self.loan_term_years)
        _require_positive("seller_note_term_years", self.seller_note_term_years)
        _require_non_negative("seller_note_standby_months", self.seller_note_standby_months)
        if self.equity_injection_percent is not None and not (0 <= self.equity_injection_percent <= 100):
            raise ValidationError("equity_injection_percent", "must be between 0 and 100")


class FindingKind(str, Enum):
    ISSUE = "issue"
    WARNING = "warning"


class FindingCategory(str, Enum):
    LOAN_CEILING = "loan_ceiling"
    DEBT_COVERAGE = "debt_coverage"
    CITIZENSHIP = "citizenship"
    MARGINAL_COVERAGE = "marginal_coverage"
    EQUITY_CUSHION = "equity_cushion"
    SELLER_NOTE_STANDBY = "seller_note_standby"


@dataclass(frozen=True)
class EligibilityFinding:
    """Hard eligibility failure (issue) or soft advisory (warning)"""

    kind: FindingKind
    category: FindingCategory
    message: str


@dataclass(frozen=True)
class LoanOutputs:
    """Capital stack, debt service and eligibility verdict for one deal"""

    total_project_cost: Decimal
    equity_injection_required: Decimal
    equity_injection_percent: Decimal
    primary_loan_amount: Decimal
    guarantee_fee_amount: Decimal
    financed_loan_amount: Decimal
    max_loan_amount: Decimal
    primary_monthly_payment: Decimal
    seller_note_monthly_payment: Decimal
    total_monthly_debt_service: Decimal
    annual_debt_service: Decimal
    year_one_debt_service: Decimal
    debt_service_schedule: Tuple[Decimal, ...]
    debt_service_coverage_ratio: Optional[Decimal]
    cash_on_cash_return: Decimal
    year_one_cash_flow: Decimal
    payback_period_years: Optional[Decimal]
    earnout_amount: Decimal
    earnout_trigger: str
    fee_waiver_savings: Optional[Decimal] = None
    findings: Tuple[EligibilityFinding, ...] = ()

    @property
    def eligible(self) -> bool:
        return not any(f.kind is FindingKind.ISSUE for f in self.findings)

    @property
    def eligibility_issues(self) -> list[str]:
        return [f.message for f in self.findings if f.kind is FindingKind.ISSUE]

    @property
    def eligibility_warnings(self) -> list[str]:
        return [f.message for f in self.findings if f.kind is FindingKind.WARNING]


@dataclass(frozen=True)
class WorkingCapitalInputs:
    """Balance-sheet line items and/or revenue benchmark inputs"""

    annual_revenue: Decimal
    industry: Optional[str] = None
    industry_benchmark_percent: Optional[Decimal] = None
    accounts_receivable: Optional[Decimal] = None
    inventory: Optional[Decimal] = None
    prepaid_expenses: Optional[Decimal] = None
    accounts_payable: Optional[Decimal] = None
    accrued_expenses: Optional[Decimal] = None

    @property
    def has_line_items(self) -> bool:
        return any(
            v is not None
            for v in (
                self.accounts_receivable,
                self.inventory,
                self.prepaid_expenses,
                self.accounts_payable,
                self.accrued_expenses,
            )
        )


@dataclass(frozen=True)
class WorkingCapitalOutputs:
    """Recommended working capital plus the estimates it was chosen from"""

    recommended_working_capital: Decimal
    basis: str  # "line_items" or "benchmark"
    line_item_estimate: Optional[Decimal] = None
    benchmark_estimate: Optional[Decimal] = None
    benchmark_percent: Optional[Decimal] = None
    current_percent_of_revenue: Optional[Decimal] = None
    estimated_adjustment: Optional[Decimal] = None
    adjustment_direction: Optional[str] = None  # "buyer_debit", "buyer_credit", "neutral"
    warnings: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Scenario:
    """One stressed version of a deal"""

    name: str
    description: str
    revenue_change_percent: Decimal
    ebitda_margin_change: Decimal
    adjusted_revenue: Decimal
    adjusted_ebitda: Decimal
    viability: str  # "viable", "marginal", "unviable"
    outputs: Optional[LoanOutputs] = None
    risk_factors: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ScenarioAnalysis:
    """Base/upside/downside/worst cases and DSCR breakeven"""

    base_case: Scenario
    upside: Scenario
    downside: Scenario
    worst_case: Scenario
    breakeven_ebitda: Decimal
    margin_of_safety_percent: Decimal


@dataclass(frozen=True)
class DealStructureInputs:
    """Conventional acquisition financing: one amortizing loan plus a down payment"""

    purchase_price: Decimal
    ebitda: Decimal
    down_payment_percent: Decimal
    interest_rate: Decimal
    loan_term_years: int

    def __post_init__(self) -> None:
        _require_positive("purchase_price", self.purchase_price)
        _require_positive("ebitda", self.ebitda)
        if not (0 <= self.down_payment_percent < 100):
            raise ValidationError("down_payment_percent", "must be at least 0 and below 100")
        if not (0 <= self.interest_rate <= 50):
            raise ValidationError("interest_rate", "must be between 0 and 50")
        if not (1 <= self.loan_term_years <= 30):
            raise ValidationError("loan_term_years", "must be between 1 and 30")


@dataclass(frozen=True)
class DealStructureOutputs:
    loan_amount: Decimal
    equity_required: Decimal
    monthly_payment: Decimal
    annual_debt_service: Decimal
    debt_service_coverage_ratio: Optional[Decimal]
    annual_cash_flow: Decimal
    cash_on_cash_return: Decimal
    payback_period_years: Optional[Decimal]
