from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case, distinct
from datetime import date
from typing import List, Dict, Any, Optional

from app.modules.borrowers.models import Borrower
from app.modules.loans.models import Loan, LoanApproval, LoanStatus
from app.modules.organization.models import Region, Branch, Staff
from app.modules.repayments.models import Repayment

REPORT_LIMIT = 10


def _count_status(status: LoanStatus):
    return func.coalesce(func.sum(case((Loan.status == status, 1), else_=0)), 0)


class AnalyticsService:
    """Portfolio reports; every method is a single read query"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def portfolio_summary(self) -> Dict[str, Any]:
        query = select(
            func.count(Loan.id).label("total_loans"),
            func.coalesce(func.sum(Loan.amount), 0).label("total_portfolio"),
            func.coalesce(func.avg(Loan.amount), 0).label("average_loan_size"),
            _count_status(LoanStatus.APPROVED).label("active_loans"),
            _count_status(LoanStatus.PENDING).label("pending_loans"),
        )
        result = await self.db.execute(query)
        return dict(result.mappings().one())

    async def defaulters(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Most overdue unpaid installments on approved loans"""
        today = today or date.today()
        query = (
            select(
                Borrower.name.label("borrower_name"),
                Loan.id.label("loan_id"),
                Repayment.due_date,
                (Repayment.amount_due - func.coalesce(Repayment.amount_paid, 0)).label("due_amount"),
            )
            .select_from(Borrower)
            .join(Loan, Loan.borrower_id == Borrower.id)
            .join(Repayment, Repayment.loan_id == Loan.id)
            .where(
                Repayment.due_date < today,
                Repayment.amount_paid < Repayment.amount_due,
                Loan.status == LoanStatus.APPROVED,
            )
            .order_by(Repayment.due_date.asc(), Repayment.id.asc())
            .limit(REPORT_LIMIT)
        )
        result = await self.db.execute(query)
        return [
            {
                "borrower_name": row["borrower_name"],
                "loan_id": row["loan_id"],
                "days_overdue": (today - row["due_date"]).days,
                "due_amount": row["due_amount"],
            }
            for row in result.mappings().all()
        ]

    async def borrowers_with_overdue(self, today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Borrowers holding at least one overdue, underpaid installment"""
        today = today or date.today()
        overdue_borrowers = (
            select(Loan.borrower_id)
            .join(Repayment, Repayment.loan_id == Loan.id)
            .where(
                Repayment.amount_paid < Repayment.amount_due,
                Repayment.due_date < today,
                Loan.status == LoanStatus.APPROVED,
            )
        )
        query = (
            select(Borrower.name, Borrower.contact)
            .where(Borrower.id.in_(overdue_borrowers))
            .order_by(Borrower.id)
            .limit(REPORT_LIMIT)
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def approved_loan_details(self) -> List[Dict[str, Any]]:
        query = (
            select(
                Loan.id.label("loan_id"),
                Borrower.name.label("borrower_name"),
                Branch.location.label("branch_location"),
                Staff.name.label("approved_by"),
                Loan.amount,
                Loan.status,
            )
            .select_from(Loan)
            .join(Borrower, Loan.borrower_id == Borrower.id)
            .join(LoanApproval, LoanApproval.loan_id == Loan.id)
            .join(Staff, LoanApproval.staff_id == Staff.id)
            .join(Branch, LoanApproval.branch_id == Branch.id)
            .where(Loan.status == LoanStatus.APPROVED)
            .order_by(Loan.id.desc())
            .limit(REPORT_LIMIT)
        )
        result = await self.db.execute(query)
        return [
            {**dict(row), "status": row["status"].value}
            for row in result.mappings().all()
        ]

    async def region_loan_stats(self) -> List[Dict[str, Any]]:
        """Size statistics of approved loans per region"""
        total_disbursed = func.sum(Loan.amount)
        query = (
            select(
                Region.name.label("region_name"),
                func.count(Loan.id).label("total_loans"),
                func.avg(Loan.amount).label("avg_loan_size"),
                total_disbursed.label("total_disbursed"),
                func.max(Loan.amount).label("max_loan"),
                func.min(Loan.amount).label("min_loan"),
            )
            .select_from(Region)
            .join(Borrower, Borrower.region_id == Region.id)
            .join(Loan, Loan.borrower_id == Borrower.id)
            .where(Loan.status == LoanStatus.APPROVED)
            .group_by(Region.id, Region.name)
            .having(func.count(Loan.id) > 0)
            .order_by(total_disbursed.desc())
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def regional_breakdown(self) -> List[Dict[str, Any]]:
        """Borrowers and loans per region, including regions with none"""
        total_amount = func.coalesce(func.sum(Loan.amount), 0)
        query = (
            select(
                Region.id.label("region_id"),
                Region.name.label("region_name"),
                func.count(distinct(Borrower.id)).label("total_borrowers"),
                func.count(distinct(Loan.id)).label("total_loans"),
                total_amount.label("total_approved_amount"),
                func.coalesce(func.avg(Loan.amount), 0).label("avg_loan_amount"),
                _count_status(LoanStatus.PENDING).label("pending_loans"),
                _count_status(LoanStatus.APPROVED).label("approved_loans"),
                _count_status(LoanStatus.REJECTED).label("rejected_loans"),
            )
            .select_from(Region)
            .outerjoin(Borrower, Borrower.region_id == Region.id)
            .outerjoin(Loan, Loan.borrower_id == Borrower.id)
            .group_by(Region.id, Region.name)
            .order_by(total_amount.desc(), Region.id)
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]
