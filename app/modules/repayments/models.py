from sqlalchemy import Column, Integer, Numeric, Date, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from app.core.database import Base
import enum


class RepaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID = "Paid"


class Repayment(Base):
    """
    One scheduled monthly installment of an approved loan.
    Created in bulk at approval; afterwards changed only by payment posting.
    """
    __tablename__ = "repayments"

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, index=True)
    due_date = Column(Date, nullable=False, index=True)
    amount_due = Column(Numeric(12, 2), nullable=False)
    amount_paid = Column(Numeric(12, 2), nullable=False, default=0)  # Never decreases
    penalty = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(SQLEnum(RepaymentStatus), default=RepaymentStatus.PENDING, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Repayment(id={self.id}, loan_id={self.loan_id}, status={self.status})>"
