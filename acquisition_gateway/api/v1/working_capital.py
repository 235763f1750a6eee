"""POST /v1/working-capital - Working-capital recommendation"""

import logging
from fastapi import APIRouter, HTTPException, Request

from acquisition_gateway.api.v1.schemas import WorkingCapitalRequest, WorkingCapitalResponse
from acquisition_gateway.api.v1.sba import validation_exception
from acquisition_gateway.api.dependencies import get_request_id
from acquisition_gateway.domain.exceptions import ValidationError
from acquisition_gateway.domain.models import WorkingCapitalInputs
from acquisition_gateway.domain.working_capital import compute_working_capital
from acquisition_gateway.infrastructure.observability.metrics import validation_failure_counter, working_capital_counter

router = APIRouter()


@router.post("/working-capital", response_model=WorkingCapitalResponse)
def estimate_working_capital(body: WorkingCapitalRequest, request: Request):
    """
    Recommend working capital from balance-sheet line items and/or an
    industry benchmark; the greater estimate wins.
    """
    request_id = get_request_id(request)

    try:
        outputs = compute_working_capital(WorkingCapitalInputs(**body.model_dump()))
    except ValidationError as e:
        validation_failure_counter.labels(operation="working_capital").inc()
        logging.warning(f"Invalid working capital inputs: {e}", extra={"request_id": request_id})
        raise validation_exception(e)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    working_capital_counter.labels(basis=outputs.basis).inc()
    return WorkingCapitalResponse.from_domain(outputs)
