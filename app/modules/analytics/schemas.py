from pydantic import BaseModel
from typing import Optional


class PortfolioSummary(BaseModel):
    total_loans: int = 0
    total_portfolio: float = 0
    average_loan_size: float = 0
    active_loans: int = 0
    pending_loans: int = 0


class Defaulter(BaseModel):
    borrower_name: str
    loan_id: int
    days_overdue: int
    due_amount: float


class BorrowerContact(BaseModel):
    name: str
    contact: str


class ApprovedLoanDetail(BaseModel):
    loan_id: int
    borrower_name: str
    branch_location: Optional[str] = None
    approved_by: Optional[str] = None
    amount: float
    status: str


class RegionLoanStats(BaseModel):
    region_name: str
    total_loans: int
    avg_loan_size: float
    total_disbursed: float
    max_loan: float
    min_loan: float


class RegionalBreakdown(BaseModel):
    region_id: int
    region_name: str
    total_borrowers: int = 0
    total_loans: int = 0
    total_approved_amount: float = 0
    avg_loan_amount: float = 0
    pending_loans: int = 0
    approved_loans: int = 0
    rejected_loans: int = 0
