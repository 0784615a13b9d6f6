"""Demo data generators."""

from loan_ledger.generators.loan import LoanGenerator
from loan_ledger.generators.patterns import PaymentBehavior

__all__ = ["LoanGenerator", "PaymentBehavior"]
