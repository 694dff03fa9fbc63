from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.modules.repayments.schemas import RepaymentListItem, PaymentRequest, PaymentResponse
from app.modules.repayments.services import RepaymentService

router = APIRouter(prefix="/api/repayments", tags=["repayments"])


@router.get("", response_model=List[RepaymentListItem])
async def list_repayments(db: AsyncSession = Depends(get_db)):
    """List every installment, earliest due date first"""
    return await RepaymentService(db).list_repayments()


@router.put("/{repayment_id}/pay", response_model=PaymentResponse)
async def pay_repayment(
    repayment_id: int,
    payment: PaymentRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Post a payment against an installment.

    - Payments accumulate across calls
    - Overdue installments that stay short are charged a penalty on the remainder
    """
    result = await RepaymentService(db).post_payment(repayment_id, payment.amount_paid)
    return PaymentResponse(
        message="Payment processed successfully",
        repayment_id=result.repayment_id,
        amount_paid=float(result.amount_paid),
        status=result.status,
        penalty=float(result.penalty),
    )
