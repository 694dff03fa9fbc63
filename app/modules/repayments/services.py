from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Dict, Any, Optional
import logging

from app.core.config import settings
from app.core.exceptions import MicrofinanceError, NotFoundError, ValidationError, store_error_from
from app.modules.borrowers.models import Borrower
from app.modules.loans.models import Loan
from app.modules.loans.amortization import Number, round_money, to_decimal
from app.modules.repayments.models import Repayment, RepaymentStatus
from app.modules.repayments.posting import apply_payment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    repayment_id: int
    amount_paid: Decimal
    status: RepaymentStatus
    penalty: Decimal


class RepaymentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_repayments(self) -> List[Dict[str, Any]]:
        """All installments with borrower name, earliest due first"""
        query = (
            select(
                Repayment.id.label("repayment_id"),
                Repayment.loan_id,
                Borrower.name.label("borrower_name"),
                Repayment.due_date,
                Repayment.amount_due,
                Repayment.amount_paid,
                Repayment.penalty,
                Repayment.status,
            )
            .select_from(Repayment)
            .join(Loan, Repayment.loan_id == Loan.id)
            .join(Borrower, Loan.borrower_id == Borrower.id)
            .order_by(Repayment.due_date.asc(), Repayment.id.asc())
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def get_loan_repayments(self, loan_id: int) -> List[Repayment]:
        result = await self.db.execute(
            select(Repayment).where(Repayment.loan_id == loan_id).order_by(Repayment.due_date.asc())
        )
        return list(result.scalars().all())

    async def get_repayment(self, repayment_id: int) -> Optional[Repayment]:
        return await self.db.get(Repayment, repayment_id)

    async def post_payment(
        self,
        repayment_id: int,
        amount_paid: Number,
        today: Optional[date] = None
    ) -> PaymentResult:
        """
        Apply a payment to one installment.

        The installment row is locked for the read-modify-write so that
        concurrent postings accumulate instead of overwriting each other.
        """
        amount = round_money(to_decimal(amount_paid))
        if amount <= 0:
            raise ValidationError("Valid payment amount is required")
        today = today or date.today()

        try:
            result = await self.db.execute(
                select(Repayment).where(Repayment.id == repayment_id).with_for_update()
            )
            repayment = result.scalar_one_or_none()
            if repayment is None:
                raise NotFoundError("Repayment record not found", {"repayment_id": repayment_id})

            posted = apply_payment(
                amount_due=repayment.amount_due,
                amount_paid=repayment.amount_paid,
                penalty=repayment.penalty,
                due_date=repayment.due_date,
                payment=amount,
                today=today,
                penalty_rate=settings.PENALTY_RATE,
                reset_on_catchup=settings.PENALTY_RESET_ON_CATCHUP,
            )

            repayment.amount_paid = posted.amount_paid
            repayment.status = posted.status
            repayment.penalty = posted.penalty
            await self.db.commit()
        except MicrofinanceError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Payment on repayment {repayment_id} rolled back: {e}")
            raise store_error_from(e) from e

        logger.info(
            f"Posted {amount} to repayment {repayment_id}: paid {posted.amount_paid}, status {posted.status.value}",
            extra={"repayment_id": repayment_id}
        )
        return PaymentResult(
            repayment_id=repayment_id,
            amount_paid=posted.amount_paid,
            status=posted.status,
            penalty=posted.penalty,
        )
