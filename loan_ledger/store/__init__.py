"""In-memory stores with referential integrity."""

from loan_ledger.store.book import LoanBook

__all__ = ["LoanBook"]
