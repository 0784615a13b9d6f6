"""Loan amortization and installment ledger engine."""

__version__ = "0.1.0"
