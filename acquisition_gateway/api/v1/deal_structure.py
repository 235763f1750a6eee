"""POST /v1/deal-structure - Conventional financing calculator"""

import logging
from fastapi import APIRouter, HTTPException, Request

from acquisition_gateway.api.v1.schemas import DealStructureRequest, DealStructureResponse
from acquisition_gateway.api.v1.sba import validation_exception
from acquisition_gateway.api.dependencies import get_request_id
from acquisition_gateway.domain.deal_structure import compute_deal_structure, prepare_deal_inputs
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.infrastructure.observability.metrics import validation_failure_counter

router = APIRouter()


@router.post("/deal-structure", response_model=DealStructureResponse)
def calculate_deal_structure(body: DealStructureRequest, request: Request):
    """
    Down payment, loan amount, payment and return metrics for a deal
    financed outside the SBA program.
    """
    request_id = get_request_id(request)

    try:
        inputs = prepare_deal_inputs(
            body.purchase_price,
            body.ebitda,
            down_payment_percent=body.down_payment_percent,
            interest_rate=body.interest_rate,
            loan_term_years=body.loan_term_years,
        )
        outputs = compute_deal_structure(inputs)

        return DealStructureResponse.from_domain(inputs, outputs)

    except ValidationError as e:
        validation_failure_counter.labels(operation="deal_structure").inc()
        logging.warning(f"Invalid deal structure inputs: {e}", extra={"request_id": request_id})
        raise validation_exception(e)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
