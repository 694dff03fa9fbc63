from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import Optional

from app.modules.repayments.models import RepaymentStatus


class RepaymentResponse(BaseModel):
    repayment_id: int = Field(validation_alias="id")
    loan_id: int
    due_date: date
    amount_due: float
    amount_paid: float
    penalty: float
    status: RepaymentStatus

    class Config:
        from_attributes = True


class RepaymentListItem(BaseModel):
    repayment_id: int
    loan_id: int
    borrower_name: Optional[str] = None
    due_date: date
    amount_due: float
    amount_paid: float
    penalty: float
    status: RepaymentStatus


class PaymentRequest(BaseModel):
    # Sign is checked by the service so non-positive amounts get the domain message
    amount_paid: Decimal


class PaymentResponse(BaseModel):
    message: str
    repayment_id: int
    amount_paid: float
    status: RepaymentStatus
    penalty: float
