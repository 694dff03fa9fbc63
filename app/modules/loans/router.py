from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_decision_admin
from app.modules.loans.schemas import (
    EMICalculatorRequest, EMICalculatorResponse,
    LoanCreate, LoanCreated, LoanResponse, LoanListItem,
    LoanApproveRequest, LoanApprovedResponse,
    LoanRejectRequest, LoanRejectedResponse,
    LoanScheduleResponse, LoanGuarantorRequest, LoanGuarantorResponse
)
from app.modules.loans.services import LoanService
from app.modules.repayments.schemas import RepaymentResponse
from app.modules.repayments.services import RepaymentService

router = APIRouter(prefix="/api", tags=["loans"])


@router.post("/calculate-emi", response_model=EMICalculatorResponse)
async def calculate_emi(request: EMICalculatorRequest):
    """EMI, total repayment and total interest for the given terms"""
    return LoanService(None).calculate_emi(request)


@router.get("/loans", response_model=List[LoanListItem])
async def list_loans(db: AsyncSession = Depends(get_db)):
    return await LoanService(db).list_loans()


@router.post("/loans", response_model=LoanCreated)
async def apply_loan(data: LoanCreate, db: AsyncSession = Depends(get_db)):
    """Submit a loan application for admin approval"""
    loan = await LoanService(db).apply_loan(data)
    return LoanCreated(
        message="Loan application submitted for admin approval",
        loan_id=loan.id,
        status=loan.status
    )


@router.get("/loans/{loan_id}", response_model=LoanResponse)
async def read_loan(loan_id: int, db: AsyncSession = Depends(get_db)):
    return await LoanService(db).get_loan(loan_id)


@router.get("/loans/{loan_id}/schedule", response_model=LoanScheduleResponse)
async def read_loan_schedule(loan_id: int, db: AsyncSession = Depends(get_db)):
    """Amortization breakdown of the loan's EMI into interest and principal"""
    return await LoanService(db).get_loan_schedule(loan_id)


@router.get("/loans/{loan_id}/repayments", response_model=List[RepaymentResponse])
async def read_loan_repayments(loan_id: int, db: AsyncSession = Depends(get_db)):
    await LoanService(db).get_loan(loan_id)
    return await RepaymentService(db).get_loan_repayments(loan_id)


@router.post("/loans/{loan_id}/guarantors", response_model=LoanGuarantorResponse)
async def attach_guarantor(
    loan_id: int,
    data: LoanGuarantorRequest,
    db: AsyncSession = Depends(get_db)
):
    link = await LoanService(db).attach_guarantor(loan_id, data.guarantor_id)
    return LoanGuarantorResponse(
        message="Guarantor linked to loan successfully",
        loan_id=link.loan_id,
        guarantor_id=link.guarantor_id
    )


@router.put("/loans/{loan_id}/approve", response_model=LoanApprovedResponse)
async def approve_loan(
    loan_id: int,
    data: Optional[LoanApproveRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[Dict[str, Any]] = Depends(get_decision_admin)
):
    """
    Approve a Pending loan.

    - Records the approving staff member and branch
    - Generates one installment per month of tenure
    """
    data = data or LoanApproveRequest()
    result = await LoanService(db).approve_loan(
        loan_id,
        staff_id=settings.DEFAULT_STAFF_ID if data.staff_id is None else data.staff_id,
        branch_id=settings.DEFAULT_BRANCH_ID if data.branch_id is None else data.branch_id
    )
    return LoanApprovedResponse(
        message="Loan approved successfully!",
        loan_id=result.loan_id,
        emi=f"{result.emi:.2f}"
    )


@router.put("/loans/{loan_id}/reject", response_model=LoanRejectedResponse)
async def reject_loan(
    loan_id: int,
    data: Optional[LoanRejectRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[Dict[str, Any]] = Depends(get_decision_admin)
):
    data = data or LoanRejectRequest()
    result = await LoanService(db).reject_loan(loan_id, data.reason)
    return LoanRejectedResponse(
        message="Loan rejected successfully!",
        loan_id=result.loan_id,
        reason=result.reason
    )
