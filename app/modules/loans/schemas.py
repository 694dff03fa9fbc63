from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from typing import Optional, List

from app.modules.loans.models import LoanStatus


# ============ EMI Calculator ============

class EMICalculatorRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., gt=0, description="Annual rate in percent")
    tenure: int = Field(..., gt=0, description="Months")


class EMICalculatorResponse(BaseModel):
    emi: str
    totalPayment: str
    totalInterest: str


# ============ Loan Application ============

class LoanCreate(BaseModel):
    borrower_id: int
    amount: Decimal = Field(..., gt=0)
    interest_rate: Decimal = Field(..., gt=0, lt=100)
    tenure: int = Field(..., gt=0, le=600)


class LoanCreated(BaseModel):
    message: str
    loan_id: int
    status: LoanStatus


class LoanResponse(BaseModel):
    loan_id: int = Field(validation_alias="id")
    borrower_id: int
    amount: float
    interest_rate: float
    tenure: int
    start_date: date
    status: LoanStatus

    class Config:
        from_attributes = True


class LoanListItem(BaseModel):
    loan_id: int
    borrower_id: int
    borrower_name: Optional[str] = None
    amount: float
    interest_rate: float
    tenure: int
    start_date: date
    status: LoanStatus
    staff_name: Optional[str] = None
    branch_location: Optional[str] = None


# ============ Approval / Rejection ============

class LoanApproveRequest(BaseModel):
    staff_id: Optional[int] = None
    branch_id: Optional[int] = None


class LoanApprovedResponse(BaseModel):
    message: str
    loan_id: int
    emi: str


class LoanRejectRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class LoanRejectedResponse(BaseModel):
    message: str
    loan_id: int
    reason: str


# ============ Schedule ============

class ScheduleEntryResponse(BaseModel):
    month: int
    payment: float
    principal_component: float
    interest_component: float
    balance: float

    class Config:
        from_attributes = True


class LoanScheduleResponse(BaseModel):
    loan_id: int
    emi: str
    total_payment: str
    total_interest: str
    schedule: List[ScheduleEntryResponse]


# ============ Guarantors ============

class LoanGuarantorRequest(BaseModel):
    guarantor_id: int


class LoanGuarantorResponse(BaseModel):
    message: str
    loan_id: int
    guarantor_id: int
