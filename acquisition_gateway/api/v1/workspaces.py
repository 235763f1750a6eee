"""GET/PUT /v1/workspaces/{workspace_id}/compliance - Citizenship compliance setting"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from acquisition_gateway.api.v1.schemas import ComplianceRequest, ComplianceResponse
from acquisition_gateway.infrastructure.database.session import get_db
from acquisition_gateway.infrastructure.database.repositories import WorkspaceRepository

router = APIRouter()


@router.get("/workspaces/{workspace_id}/compliance", response_model=ComplianceResponse)
def get_compliance(workspace_id: str, db: Session = Depends(get_db)):
    workspace = WorkspaceRepository(db).get_workspace(workspace_id)
    if not workspace:
        raise HTTPException(status_code=404, detail="Workspace not found")

    return ComplianceResponse(
        workspace_id=workspace.id,
        all_investors_us_citizens=workspace.all_investors_us_citizens,
    )


@router.put("/workspaces/{workspace_id}/compliance", response_model=ComplianceResponse)
def update_compliance(workspace_id: str, body: ComplianceRequest, db: Session = Depends(get_db)):
    """
    Record whether all investors are U.S. citizens.

    SBA 7(a) calculations for this workspace use the flag whenever the
    request does not state it explicitly.
    """
    workspace = WorkspaceRepository(db).set_citizenship_compliance(workspace_id, body.all_investors_us_citizens)
    db.commit()

    return ComplianceResponse(
        workspace_id=workspace.id,
        all_investors_us_citizens=workspace.all_investors_us_citizens,
    )
