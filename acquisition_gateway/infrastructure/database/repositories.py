"""Data access layer for workspaces and loan calculations"""

from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from acquisition_gateway.infrastructure.database.models import LoanCalculation, Workspace
from acquisition_gateway.domain.models import LoanInputs, LoanOutputs


class WorkspaceRepository:
    """Repository for workspace compliance settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        return self.db.get(Workspace, workspace_id)

    def get_or_create(self, workspace_id: str) -> Workspace:
        """Fetch workspace, creating it with default compliance settings if missing"""
        workspace = self.get_workspace(workspace_id)
        if workspace is None:
            workspace = Workspace(id=workspace_id, all_investors_us_citizens=True)
            self.db.add(workspace)
            self.db.flush()
        return workspace

    def set_citizenship_compliance(self, workspace_id: str, all_investors_us_citizens: bool) -> Workspace:
        """Store whether every investor in the workspace is a U.S. citizen"""
        workspace = self.get_or_create(workspace_id)
        workspace.all_investors_us_citizens = all_investors_us_citizens
        self.db.flush()
        return workspace


class CalculationRepository:
    """Repository for persisted loan-structure calculations"""

    def __init__(self, db: Session):
        self.db = db

    def create_calculation(
        self,
        workspace_id: str,
        inputs: LoanInputs,
        outputs: LoanOutputs,
        inputs_payload: Dict[str, Any],
        outputs_payload: Dict[str, Any],
    ) -> LoanCalculation:
        """Persist a calculation snapshot; JSON payloads are the API representation"""
        dscr = outputs.debt_service_coverage_ratio
        db_calculation = LoanCalculation(
            workspace_id=workspace_id,
            purchase_price=inputs.purchase_price,
            primary_loan_amount=outputs.primary_loan_amount,
            dscr=float(dscr) if dscr is not None else None,
            eligible=outputs.eligible,
            inputs=inputs_payload,
            outputs=outputs_payload,
        )
        self.db.add(db_calculation)
        self.db.flush()  # Get ID without committing
        return db_calculation

    def get_calculations_by_workspace(self, workspace_id: str, limit: int = 10) -> List[LoanCalculation]:
        """Fetch recent calculations for a workspace"""
        return (
            self.db.query(LoanCalculation)
            .filter(LoanCalculation.workspace_id == workspace_id)
            .order_by(LoanCalculation.created_at.desc())
            .limit(limit)
            .all()
        )
