from sqlalchemy import Column, Integer, Numeric, Date, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from app.core.database import Base
import enum


class LoanStatus(str, enum.Enum):
    """Loan lifecycle; Pending moves one way to Approved or Rejected"""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    COMPLETED = "Completed"


class Loan(Base):
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    borrower_id = Column(Integer, ForeignKey("borrowers.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)  # Principal
    interest_rate = Column(Numeric(5, 2), nullable=False)  # Annual, percent
    tenure = Column(Integer, nullable=False)  # Months
    start_date = Column(Date, nullable=False)
    status = Column(SQLEnum(LoanStatus), default=LoanStatus.PENDING, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Loan(id={self.id}, amount={self.amount}, status={self.status})>"


class LoanApproval(Base):
    """Approval event; at most one per loan, never mutated"""
    __tablename__ = "loan_approvals"

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, unique=True)
    staff_id = Column(Integer, ForeignKey("staff.id"), nullable=False, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    approval_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
