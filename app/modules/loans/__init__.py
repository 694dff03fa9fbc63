# Loans module
from app.modules.loans.models import Loan, LoanApproval, LoanStatus
from app.modules.loans.amortization import compute_emi, generate_schedule, ScheduleEntry

__all__ = [
    "Loan", "LoanApproval", "LoanStatus",
    "compute_emi", "generate_schedule", "ScheduleEntry"
]
