"""SQLAlchemy ORM models for workspaces and persisted calculations"""

import uuid
from sqlalchemy import Column, Boolean, Float, DateTime, ForeignKey, Numeric, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Workspace(Base):
    """Search-fund workspace and its compliance settings"""

    __tablename__ = "workspace"

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=True)
    all_investors_us_citizens = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    calculations = relationship("LoanCalculation", back_populates="workspace", cascade="all, delete-orphan")


class LoanCalculation(Base):
    """Snapshot of one loan-structure calculation"""

    __tablename__ = "loan_calculation"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id = Column(Text, ForeignKey("workspace.id", ondelete="CASCADE"), nullable=False, index=True)
    purchase_price = Column(Numeric(14, 2), nullable=False)
    primary_loan_amount = Column(Numeric(14, 2), nullable=False)
    dscr = Column(Float, nullable=True)
    eligible = Column(Boolean, nullable=False)
    inputs = Column(JSON, nullable=False)
    outputs = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    workspace = relationship("Workspace", back_populates="calculations")
