"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from pydantic import BaseModel, Field

from acquisition_gateway.domain.models import (
    DealStructureInputs,
    DealStructureOutputs,
    EligibilityFinding,
    LoanInputs,
    LoanOutputs,
    Scenario,
    WorkingCapitalOutputs,
)

CENT = Decimal("0.01")
RATIO_PLACES = Decimal("0.0001")


def money(value: Optional[Decimal]) -> Optional[float]:
    """Round currency to cents at the response boundary"""
    if value is None:
        return None
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def ratio(value: Optional[Decimal]) -> Optional[float]:
    if value is None:
        return None
    return float(value.quantize(RATIO_PLACES, rounding=ROUND_HALF_UP))


class LoanRequest(BaseModel):
    """Request body for POST /v1/sba/calculate; omitted fields get program defaults"""

    purchase_price: Decimal = Field(..., description="Acquisition price")
    ebitda: Decimal = Field(..., description="Trailing EBITDA")
    working_capital: Optional[Decimal] = Field(None, ge=0)
    closing_costs: Optional[Decimal] = Field(None, ge=0, description="Defaults to 3% of purchase price")
    packaging_fee: Optional[Decimal] = Field(None, ge=0)
    interest_rate: Optional[Decimal] = Field(None, gt=0, le=50, description="Annual rate, 10.25 means 10.25%")
    loan_term_years: Optional[int] = Field(None, gt=0, le=30)
    seller_note_amount: Optional[Decimal] = Field(None, ge=0)
    seller_note_rate: Optional[Decimal] = Field(None, ge=0, le=50)
    seller_note_term_years: Optional[int] = Field(None, gt=0, le=30)
    seller_note_standby_months: Optional[int] = Field(None, ge=0)
    earnout_amount: Optional[Decimal] = Field(None, ge=0)
    earnout_trigger: Optional[str] = None
    revenue: Optional[Decimal] = Field(None, ge=0)
    naics_code: Optional[str] = Field(None, max_length=6)
    equity_injection_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    all_investors_are_domestic_citizens: Optional[bool] = Field(
        None, description="Falls back to the workspace compliance setting"
    )


class ResolvedLoanInputs(BaseModel):
    """Inputs after program defaults were applied"""

    purchase_price: float
    ebitda: float
    working_capital: float
    closing_costs: float
    packaging_fee: float
    interest_rate: float
    loan_term_years: int
    seller_note_amount: float
    seller_note_rate: float
    seller_note_term_years: int
    seller_note_standby_months: int
    earnout_amount: float
    earnout_trigger: str
    revenue: float
    naics_code: Optional[str] = None
    equity_injection_percent: Optional[float] = None
    all_investors_are_domestic_citizens: bool
    as_of: date

    @classmethod
    def from_domain(cls, inputs: LoanInputs) -> "ResolvedLoanInputs":
        return cls(
            purchase_price=money(inputs.purchase_price),
            ebitda=money(inputs.ebitda),
            working_capital=money(inputs.working_capital),
            closing_costs=money(inputs.closing_costs),
            packaging_fee=money(inputs.packaging_fee),
            interest_rate=ratio(inputs.interest_rate),
            loan_term_years=inputs.loan_term_years,
            seller_note_amount=money(inputs.seller_note_amount),
            seller_note_rate=ratio(inputs.seller_note_rate),
            seller_note_term_years=inputs.seller_note_term_years,
            seller_note_standby_months=inputs.seller_note_standby_months,
            earnout_amount=money(inputs.earnout_amount),
            earnout_trigger=inputs.earnout_trigger,
            revenue=money(inputs.revenue),
            naics_code=inputs.naics_code,
            equity_injection_percent=ratio(inputs.equity_injection_percent),
            all_investors_are_domestic_citizens=inputs.all_investors_are_domestic_citizens,
            as_of=inputs.as_of,
        )


class FindingSchema(BaseModel):
    """Eligibility issue or warning"""

    kind: str
    category: str
    message: str

    @classmethod
    def from_domain(cls, finding: EligibilityFinding) -> "FindingSchema":
        return cls(kind=finding.kind.value, category=finding.category.value, message=finding.message)


class LoanOutputsSchema(BaseModel):
    """Capital stack, debt service and eligibility verdict"""

    total_project_cost: float
    equity_injection_required: float
    equity_injection_percent: float
    primary_loan_amount: float
    guarantee_fee_amount: float
    financed_loan_amount: float
    max_loan_amount: float
    primary_monthly_payment: float
    seller_note_monthly_payment: float
    total_monthly_debt_service: float
    annual_debt_service: float
    year_one_debt_service: float
    debt_service_schedule: List[float]
    debt_service_coverage_ratio: Optional[float] = None
    cash_on_cash_return: float
    year_one_cash_flow: float
    payback_period_years: Optional[float] = None
    earnout_amount: float
    earnout_trigger: str
    fee_waiver_savings: Optional[float] = None
    eligible: bool
    eligibility_issues: List[str]
    eligibility_warnings: List[str]
    findings: List[FindingSchema]

    @classmethod
    def from_domain(cls, outputs: LoanOutputs) -> "LoanOutputsSchema":
        return cls(
            total_project_cost=money(outputs.total_project_cost),
            equity_injection_required=money(outputs.equity_injection_required),
            equity_injection_percent=ratio(outputs.equity_injection_percent),
            primary_loan_amount=money(outputs.primary_loan_amount),
            guarantee_fee_amount=money(outputs.guarantee_fee_amount),
            financed_loan_amount=money(outputs.financed_loan_amount),
            max_loan_amount=money(outputs.max_loan_amount),
            primary_monthly_payment=money(outputs.primary_monthly_payment),
            seller_note_monthly_payment=money(outputs.seller_note_monthly_payment),
            total_monthly_debt_service=money(outputs.total_monthly_debt_service),
            annual_debt_service=money(outputs.annual_debt_service),
            year_one_debt_service=money(outputs.year_one_debt_service),
            debt_service_schedule=[money(v) for v in outputs.debt_service_schedule],
            debt_service_coverage_ratio=ratio(outputs.debt_service_coverage_ratio),
            cash_on_cash_return=ratio(outputs.cash_on_cash_return),
            year_one_cash_flow=money(outputs.year_one_cash_flow),
            payback_period_years=ratio(outputs.payback_period_years),
            earnout_amount=money(outputs.earnout_amount),
            earnout_trigger=outputs.earnout_trigger,
            fee_waiver_savings=money(outputs.fee_waiver_savings),
            eligible=outputs.eligible,
            eligibility_issues=outputs.eligibility_issues,
            eligibility_warnings=outputs.eligibility_warnings,
            findings=[FindingSchema.from_domain(f) for f in outputs.findings],
        )


class LoanResponse(BaseModel):
    """Response for POST /v1/sba/calculate"""

    inputs: ResolvedLoanInputs
    outputs: LoanOutputsSchema
    calculation_id: Optional[str] = None


class ScenarioRequest(BaseModel):
    """Request body for POST /v1/sba/scenarios"""

    loan: LoanRequest
    top_customer_percent: Decimal = Field(Decimal("0"), ge=0, le=100)


class ScenarioSchema(BaseModel):
    """Single stressed case"""

    name: str
    description: str
    revenue_change_percent: float
    ebitda_margin_change: float
    adjusted_revenue: float
    adjusted_ebitda: float
    viability: str
    debt_service_coverage_ratio: Optional[float] = None
    annual_debt_service: Optional[float] = None
    eligible: Optional[bool] = None
    risk_factors: List[str]

    @classmethod
    def from_domain(cls, scenario: Scenario) -> "ScenarioSchema":
        outputs = scenario.outputs
        return cls(
            name=scenario.name,
            description=scenario.description,
            revenue_change_percent=ratio(scenario.revenue_change_percent),
            ebitda_margin_change=ratio(scenario.ebitda_margin_change),
            adjusted_revenue=money(scenario.adjusted_revenue),
            adjusted_ebitda=money(scenario.adjusted_ebitda),
            viability=scenario.viability,
            debt_service_coverage_ratio=ratio(outputs.debt_service_coverage_ratio) if outputs else None,
            annual_debt_service=money(outputs.annual_debt_service) if outputs else None,
            eligible=outputs.eligible if outputs else None,
            risk_factors=list(scenario.risk_factors),
        )


class ScenarioResponse(BaseModel):
    """Response for POST /v1/sba/scenarios"""

    base_case: ScenarioSchema
    upside: ScenarioSchema
    downside: ScenarioSchema
    worst_case: ScenarioSchema
    breakeven_ebitda: float
    margin_of_safety_percent: float


class DealStructureRequest(BaseModel):
    """Request body for POST /v1/deal-structure; omitted fields get conventional defaults"""

    purchase_price: Decimal = Field(..., description="Acquisition price")
    ebitda: Decimal = Field(..., description="Trailing EBITDA")
    down_payment_percent: Optional[Decimal] = Field(None, ge=0, lt=100, description="Defaults to 10")
    interest_rate: Optional[Decimal] = Field(None, ge=0, le=50, description="Defaults to 7.5")
    loan_term_years: Optional[int] = Field(None, ge=1, le=30)


class DealStructureResponse(BaseModel):
    """Response for POST /v1/deal-structure"""

    purchase_price: float
    ebitda: float
    down_payment_percent: float
    interest_rate: float
    loan_term_years: int
    loan_amount: float
    equity_required: float
    monthly_payment: float
    annual_debt_service: float
    debt_service_coverage_ratio: Optional[float] = None
    annual_cash_flow: float
    cash_on_cash_return: float
    payback_period_years: Optional[float] = None

    @classmethod
    def from_domain(cls, inputs: DealStructureInputs, outputs: DealStructureOutputs) -> "DealStructureResponse":
        return cls(
            purchase_price=money(inputs.purchase_price),
            ebitda=money(inputs.ebitda),
            down_payment_percent=ratio(inputs.down_payment_percent),
            interest_rate=ratio(inputs.interest_rate),
            loan_term_years=inputs.loan_term_years,
            loan_amount=money(outputs.loan_amount),
            equity_required=money(outputs.equity_required),
            monthly_payment=money(outputs.monthly_payment),
            annual_debt_service=money(outputs.annual_debt_service),
            debt_service_coverage_ratio=ratio(outputs.debt_service_coverage_ratio),
            annual_cash_flow=money(outputs.annual_cash_flow),
            cash_on_cash_return=ratio(outputs.cash_on_cash_return),
            payback_period_years=ratio(outputs.payback_period_years),
        )


class WorkingCapitalRequest(BaseModel):
    """Request body for POST /v1/working-capital"""

    annual_revenue: Decimal
    industry: Optional[str] = None
    industry_benchmark_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    accounts_receivable: Optional[Decimal] = Field(None, ge=0)
    inventory: Optional[Decimal] = Field(None, ge=0)
    prepaid_expenses: Optional[Decimal] = Field(None, ge=0)
    accounts_payable: Optional[Decimal] = Field(None, ge=0)
    accrued_expenses: Optional[Decimal] = Field(None, ge=0)


class WorkingCapitalResponse(BaseModel):
    """Response for POST /v1/working-capital"""

    recommended_working_capital: float
    basis: str
    line_item_estimate: Optional[float] = None
    benchmark_estimate: Optional[float] = None
    benchmark_percent: Optional[float] = None
    current_percent_of_revenue: Optional[float] = None
    estimated_adjustment: Optional[float] = None
    adjustment_direction: Optional[str] = None
    warnings: List[str]
    recommendations: List[str]

    @classmethod
    def from_domain(cls, outputs: WorkingCapitalOutputs) -> "WorkingCapitalResponse":
        return cls(
            recommended_working_capital=money(outputs.recommended_working_capital),
            basis=outputs.basis,
            line_item_estimate=money(outputs.line_item_estimate),
            benchmark_estimate=money(outputs.benchmark_estimate),
            benchmark_percent=ratio(outputs.benchmark_percent),
            current_percent_of_revenue=ratio(outputs.current_percent_of_revenue),
            estimated_adjustment=money(outputs.estimated_adjustment),
            adjustment_direction=outputs.adjustment_direction,
            warnings=list(outputs.warnings),
            recommendations=list(outputs.recommendations),
        )


class HistoryItem(BaseModel):
    """Single persisted calculation"""

    calculation_id: str
    purchase_price: float
    primary_loan_amount: float
    debt_service_coverage_ratio: Optional[float] = None
    eligible: bool
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/calculations/history"""

    workspace_id: str
    calculations: List[HistoryItem]


class ComplianceRequest(BaseModel):
    """Request body for PUT /v1/workspaces/{workspace_id}/compliance"""

    all_investors_us_citizens: bool


class ComplianceResponse(BaseModel):
    """Workspace compliance settings"""

    workspace_id: str
    all_investors_us_citizens: bool
