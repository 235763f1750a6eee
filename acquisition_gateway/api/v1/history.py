"""GET /v1/calculations/history - Fetch a workspace's saved calculations"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from acquisition_gateway.api.v1.schemas import HistoryResponse, HistoryItem
from acquisition_gateway.infrastructure.database.session import get_db
from acquisition_gateway.infrastructure.database.repositories import CalculationRepository

router = APIRouter()


@router.get("/calculations/history", response_model=HistoryResponse)
def get_calculation_history(
    workspace_id: str = Query(..., min_length=1, description="Workspace identifier"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent loan-structure calculations for a workspace.

    Returns:
        Up to 20 calculations, newest first
    """
    calculations = CalculationRepository(db).get_calculations_by_workspace(workspace_id, limit=20)

    items = [
        HistoryItem(
            calculation_id=str(c.id),
            purchase_price=float(c.purchase_price),
            primary_loan_amount=float(c.primary_loan_amount),
            debt_service_coverage_ratio=c.dscr,
            eligible=c.eligible,
            created_at=c.created_at.isoformat(),
        )
        for c in calculations
    ]

    return HistoryResponse(workspace_id=workspace_id, calculations=items)
