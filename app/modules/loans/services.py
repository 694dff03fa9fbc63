from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy import select, update
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from dateutil.relativedelta import relativedelta
from typing import List, Dict, Any, Optional
import logging

from app.core.exceptions import (
    MicrofinanceError, NotFoundError, ValidationError, ConflictError, store_error_from
)
from app.modules.borrowers.models import Borrower, Guarantor, LoanGuarantor
from app.modules.loans.amortization import compute_emi, generate_schedule, summarize
from app.modules.loans.models import Loan, LoanApproval, LoanStatus
from app.modules.loans.schemas import (
    EMICalculatorRequest, EMICalculatorResponse, LoanCreate, LoanScheduleResponse, ScheduleEntryResponse
)
from app.modules.organization.models import Branch, Staff
from app.modules.repayments.models import Repayment, RepaymentStatus

logger = logging.getLogger(__name__)

NOT_PENDING = "Loan not found or already processed"
DEFAULT_REJECTION_REASON = "Not specified"


@dataclass(frozen=True)
class ApprovalResult:
    loan_id: int
    emi: Decimal


@dataclass(frozen=True)
class RejectionResult:
    loan_id: int
    reason: str


def build_installments(loan_id: int, tenure: int, emi: Decimal, start: date) -> List[Repayment]:
    """One Pending installment per month, the first due a month after ``start``"""
    return [
        Repayment(
            loan_id=loan_id,
            due_date=start + relativedelta(months=i),
            amount_due=emi,
            amount_paid=Decimal("0.00"),
            penalty=Decimal("0.00"),
            status=RepaymentStatus.PENDING
        )
        for i in range(1, tenure + 1)
    ]


class LoanService:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ============ Calculator ============

    def calculate_emi(self, request: EMICalculatorRequest) -> EMICalculatorResponse:
        emi = compute_emi(request.amount, request.interest_rate, request.tenure)
        if emi == 0:
            raise ValidationError("EMI could not be calculated for the given terms")

        total_payment, total_interest = summarize(request.amount, request.tenure, emi)
        return EMICalculatorResponse(
            emi=f"{emi:.2f}",
            totalPayment=f"{total_payment:.2f}",
            totalInterest=f"{total_interest:.2f}"
        )

    # ============ Application & reads ============

    async def apply_loan(self, data: LoanCreate, today: Optional[date] = None) -> Loan:
        """Submit a loan application; it waits in Pending for an admin decision"""
        if await self.db.get(Borrower, data.borrower_id) is None:
            raise NotFoundError("Borrower not found", {"borrower_id": data.borrower_id})

        loan = Loan(
            borrower_id=data.borrower_id,
            amount=data.amount,
            interest_rate=data.interest_rate,
            tenure=data.tenure,
            start_date=today or date.today(),
            status=LoanStatus.PENDING
        )
        self.db.add(loan)
        await self.db.commit()
        await self.db.refresh(loan)
        logger.info(f"Loan {loan.id} submitted by borrower {loan.borrower_id}", extra={"loan_id": loan.id})
        return loan

    async def get_loan(self, loan_id: int) -> Loan:
        loan = await self.db.get(Loan, loan_id)
        if loan is None:
            raise NotFoundError("Loan not found", {"loan_id": loan_id})
        return loan

    async def list_loans(self) -> List[Dict[str, Any]]:
        """Loans with borrower name and, once approved, approver and branch"""
        query = (
            select(
                Loan.id.label("loan_id"),
                Loan.borrower_id,
                Borrower.name.label("borrower_name"),
                Loan.amount,
                Loan.interest_rate,
                Loan.tenure,
                Loan.start_date,
                Loan.status,
                Staff.name.label("staff_name"),
                Branch.location.label("branch_location"),
            )
            .select_from(Loan)
            .join(Borrower, Loan.borrower_id == Borrower.id)
            .outerjoin(LoanApproval, LoanApproval.loan_id == Loan.id)
            .outerjoin(Staff, LoanApproval.staff_id == Staff.id)
            .outerjoin(Branch, LoanApproval.branch_id == Branch.id)
            .order_by(Loan.id.desc())
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def get_loan_schedule(self, loan_id: int) -> LoanScheduleResponse:
        """Amortization preview computed from the loan's stored terms"""
        loan = await self.get_loan(loan_id)
        emi = compute_emi(loan.amount, loan.interest_rate, loan.tenure)
        if emi == 0:
            raise ValidationError("EMI could not be calculated for this loan")

        total_payment, total_interest = summarize(loan.amount, loan.tenure, emi)
        schedule = [
            ScheduleEntryResponse.model_validate(entry)
            for entry in generate_schedule(loan.amount, loan.interest_rate, loan.tenure, emi)
        ]
        return LoanScheduleResponse(
            loan_id=loan.id,
            emi=f"{emi:.2f}",
            total_payment=f"{total_payment:.2f}",
            total_interest=f"{total_interest:.2f}",
            schedule=schedule
        )

    async def attach_guarantor(self, loan_id: int, guarantor_id: int) -> LoanGuarantor:
        await self.get_loan(loan_id)
        if await self.db.get(Guarantor, guarantor_id) is None:
            raise NotFoundError("Guarantor not found", {"guarantor_id": guarantor_id})

        existing = await self.db.execute(
            select(LoanGuarantor).where(
                LoanGuarantor.loan_id == loan_id,
                LoanGuarantor.guarantor_id == guarantor_id
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Guarantor already linked to this loan")

        link = LoanGuarantor(loan_id=loan_id, guarantor_id=guarantor_id)
        self.db.add(link)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Guarantor already linked to this loan")
        await self.db.refresh(link)
        return link

    # ============ Approval workflow ============

    async def _lock_pending_loan(self, loan_id: int) -> Optional[Loan]:
        result = await self.db.execute(
            select(Loan)
            .where(Loan.id == loan_id, Loan.status == LoanStatus.PENDING)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def _require_approver(self, staff_id: int, branch_id: int) -> None:
        if await self.db.get(Staff, staff_id) is None:
            raise NotFoundError("Staff member not found", {"staff_id": staff_id})
        if await self.db.get(Branch, branch_id) is None:
            raise NotFoundError("Branch not found", {"branch_id": branch_id})

    async def approve_loan(
        self,
        loan_id: int,
        staff_id: int,
        branch_id: int,
        today: Optional[date] = None
    ) -> ApprovalResult:
        """
        Approve a Pending loan and materialize its repayment schedule.

        Status change, approval record and every installment are written in
        one transaction; any failure rolls all of them back. The loan row is
        locked and the status change is conditional on the loan still being
        Pending, so of two concurrent approvals only one can win.
        """
        today = today or date.today()

        try:
            loan = await self._lock_pending_loan(loan_id)
            if loan is None:
                raise NotFoundError(NOT_PENDING, {"loan_id": loan_id})

            await self._require_approver(staff_id, branch_id)

            claimed = await self.db.execute(
                update(Loan)
                .where(Loan.id == loan_id, Loan.status == LoanStatus.PENDING)
                .values(status=LoanStatus.APPROVED)
            )
            if claimed.rowcount != 1:
                raise NotFoundError(NOT_PENDING, {"loan_id": loan_id})

            self.db.add(LoanApproval(
                loan_id=loan_id,
                staff_id=staff_id,
                branch_id=branch_id,
                approval_date=today
            ))

            emi = compute_emi(loan.amount, loan.interest_rate, loan.tenure)
            if emi == 0:
                raise ValidationError("EMI could not be calculated for this loan", {"loan_id": loan_id})

            self.db.add_all(build_installments(loan_id, loan.tenure, emi, today))
            await self.db.commit()
        except MicrofinanceError as e:
            await self.db.rollback()
            logger.warning(f"Approval of loan {loan_id} rolled back: {e.message}", extra={"loan_id": loan_id})
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Approval of loan {loan_id} failed: {e}", extra={"loan_id": loan_id})
            raise store_error_from(e) from e

        logger.info(
            f"Loan {loan_id} approved by staff {staff_id} at branch {branch_id}, EMI {emi}",
            extra={"loan_id": loan_id, "staff_id": staff_id, "branch_id": branch_id}
        )
        return ApprovalResult(loan_id=loan_id, emi=emi)

    async def reject_loan(self, loan_id: int, reason: Optional[str] = None) -> RejectionResult:
        """Reject a Pending loan with a single conditional update"""
        try:
            rejected = await self.db.execute(
                update(Loan)
                .where(Loan.id == loan_id, Loan.status == LoanStatus.PENDING)
                .values(status=LoanStatus.REJECTED)
            )
            if rejected.rowcount != 1:
                raise NotFoundError(NOT_PENDING, {"loan_id": loan_id})
            await self.db.commit()
        except MicrofinanceError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Rejection of loan {loan_id} failed: {e}", extra={"loan_id": loan_id})
            raise store_error_from(e) from e

        reason = reason or DEFAULT_REJECTION_REASON
        logger.info(f"Loan {loan_id} rejected: {reason}", extra={"loan_id": loan_id})
        return RejectionResult(loan_id=loan_id, reason=reason)
