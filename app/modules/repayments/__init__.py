# Repayments module
from app.modules.repayments.models import Repayment, RepaymentStatus
from app.modules.repayments.posting import apply_payment, PostedPayment

__all__ = ["Repayment", "RepaymentStatus", "apply_payment", "PostedPayment"]
