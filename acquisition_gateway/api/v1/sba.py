"""POST /v1/sba/calculate and /v1/sba/scenarios - SBA 7(a) acquisition-loan structuring"""

import time
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from acquisition_gateway.api.v1.schemas import (
    LoanOutputsSchema,
    LoanRequest,
    LoanResponse,
    ResolvedLoanInputs,
    ScenarioRequest,
    ScenarioResponse,
    ScenarioSchema,
    money,
)
from acquisition_gateway.api.dependencies import get_program_rules, get_request_id, get_today
from acquisition_gateway.infrastructure.database.session import get_db
from acquisition_gateway.infrastructure.database.repositories import CalculationRepository, WorkspaceRepository
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.domain.loan_structure import compute_loan_structure, prepare_loan_inputs
from acquisition_gateway.domain.models import LoanInputs, ProgramRules
from acquisition_gateway.domain.scenarios import build_scenarios
from acquisition_gateway.infrastructure.observability.metrics import record_calculation, validation_failure_counter
from acquisition_gateway.infrastructure.observability.logging import log_calculation

router = APIRouter()


def to_loan_inputs(
    body: LoanRequest,
    rules: ProgramRules,
    today: date,
    citizenship: Optional[bool] = None,
) -> LoanInputs:
    """Apply program defaults to a request body"""
    fields = body.model_dump(exclude={"purchase_price", "ebitda", "all_investors_are_domestic_citizens"})
    if citizenship is None:
        citizenship = body.all_investors_are_domestic_citizens
    return prepare_loan_inputs(
        body.purchase_price,
        body.ebitda,
        rules=rules,
        today=today,
        all_investors_are_domestic_citizens=citizenship,
        **fields,
    )


def validation_exception(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": e.field, "message": e.message})


@router.post("/sba/calculate", response_model=LoanResponse)
def calculate_sba_loan(
    body: LoanRequest,
    request: Request,
    workspace_id: Optional[str] = Query(None, min_length=1, description="Workspace to save the calculation under"),
    db: Session = Depends(get_db),
    rules: ProgramRules = Depends(get_program_rules),
    today: date = Depends(get_today),
):
    """
    Structure an SBA 7(a) acquisition loan and check program eligibility.

    Flow:
    1. Resolve citizenship flag (request, then workspace compliance setting, then true)
    2. Apply program defaults to omitted inputs
    3. Compute capital stack, debt service and eligibility
    4. Persist the calculation when a workspace is given
    5. Return resolved inputs + outputs

    Ineligible deals are a normal 200 response with eligible=false.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        workspace_repo = WorkspaceRepository(db)

        # 1. Citizenship compliance
        citizenship = body.all_investors_are_domestic_citizens
        if citizenship is None and workspace_id:
            workspace = workspace_repo.get_workspace(workspace_id)
            if workspace is not None:
                citizenship = workspace.all_investors_us_citizens

        # 2-3. Defaults and calculation
        inputs = to_loan_inputs(body, rules, today, citizenship)
        outputs = compute_loan_structure(inputs, rules)

        resolved = ResolvedLoanInputs.from_domain(inputs)
        outputs_schema = LoanOutputsSchema.from_domain(outputs)

        # 4. Persist
        calculation_id = None
        if workspace_id:
            workspace_repo.get_or_create(workspace_id)
            db_calculation = CalculationRepository(db).create_calculation(
                workspace_id=workspace_id,
                inputs=inputs,
                outputs=outputs,
                inputs_payload=resolved.model_dump(mode="json"),
                outputs_payload=outputs_schema.model_dump(mode="json"),
            )
            calculation_id = str(db_calculation.id)
            db.commit()

        # Record metrics and logs
        duration_ms = (time.time() - start_time) * 1000
        dscr = outputs.debt_service_coverage_ratio
        record_calculation(outputs.eligible, dscr, rules)
        log_calculation(
            request_id,
            workspace_id,
            outputs.eligible,
            float(dscr) if dscr is not None else None,
            money(outputs.primary_loan_amount),
            duration_ms,
        )

        return LoanResponse(inputs=resolved, outputs=outputs_schema, calculation_id=calculation_id)

    except ValidationError as e:
        validation_failure_counter.labels(operation="loan_structure").inc()
        db.rollback()
        logging.warning(f"Invalid loan inputs: {e}", extra={"request_id": request_id})
        raise validation_exception(e)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/sba/scenarios", response_model=ScenarioResponse)
def analyze_scenarios(
    body: ScenarioRequest,
    request: Request,
    rules: ProgramRules = Depends(get_program_rules),
    today: date = Depends(get_today),
):
    """
    Stress-test a loan structure: base, upside, downside and worst cases,
    plus the EBITDA needed to hold the preferred DSCR.
    """
    request_id = get_request_id(request)

    try:
        inputs = to_loan_inputs(body.loan, rules, today)
        analysis = build_scenarios(inputs, rules, body.top_customer_percent)

        return ScenarioResponse(
            base_case=ScenarioSchema.from_domain(analysis.base_case),
            upside=ScenarioSchema.from_domain(analysis.upside),
            downside=ScenarioSchema.from_domain(analysis.downside),
            worst_case=ScenarioSchema.from_domain(analysis.worst_case),
            breakeven_ebitda=money(analysis.breakeven_ebitda),
            margin_of_safety_percent=float(round(analysis.margin_of_safety_percent, 2)),
        )

    except ValidationError as e:
        validation_failure_counter.labels(operation="scenarios").inc()
        logging.warning(f"Invalid scenario inputs: {e}", extra={"request_id": request_id})
        raise validation_exception(e)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
