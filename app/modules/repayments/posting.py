"""
Payment posting rules for a single installment.

Payments accumulate. While an installment is overdue and still short, its
penalty is recomputed as a flat share of the outstanding amount on every
posting; it is never compounded.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.core.exceptions import ValidationError
from app.modules.loans.amortization import Number, ZERO, round_money, to_decimal
from app.modules.repayments.models import RepaymentStatus

DEFAULT_PENALTY_RATE = Decimal("0.02")


@dataclass(frozen=True)
class PostedPayment:
    amount_paid: Decimal
    status: RepaymentStatus
    penalty: Decimal


def installment_status(amount_paid: Decimal, amount_due: Decimal) -> RepaymentStatus:
    if amount_paid >= amount_due:
        return RepaymentStatus.PAID
    if amount_paid > 0:
        return RepaymentStatus.PARTIAL
    return RepaymentStatus.PENDING


def apply_payment(
    amount_due: Number,
    amount_paid: Number,
    penalty: Number,
    due_date: date,
    payment: Number,
    today: date,
    penalty_rate: Number = DEFAULT_PENALTY_RATE,
    reset_on_catchup: bool = False
) -> PostedPayment:
    """
    Compute the installment state after posting ``payment``.

    Overpayment is accepted and marks the installment Paid. When the
    installment is not (or no longer) both overdue and short, the previous
    penalty is kept unless ``reset_on_catchup`` is set.
    """
    # Sub-cent amounts would round away without being recorded
    payment = round_money(to_decimal(payment))
    if payment <= 0:
        raise ValidationError("Valid payment amount is required")

    amount_due = to_decimal(amount_due)
    new_amount_paid = round_money(to_decimal(amount_paid or ZERO) + payment)
    new_penalty = to_decimal(penalty or ZERO)

    if new_amount_paid < amount_due and due_date < today:
        new_penalty = round_money((amount_due - new_amount_paid) * to_decimal(penalty_rate))
    elif reset_on_catchup:
        new_penalty = ZERO

    return PostedPayment(
        amount_paid=new_amount_paid,
        status=installment_status(new_amount_paid, amount_due),
        penalty=new_penalty,
    )
