# Borrowers module
from app.modules.borrowers.models import Borrower, Guarantor, LoanGuarantor

__all__ = ["Borrower", "Guarantor", "LoanGuarantor"]
