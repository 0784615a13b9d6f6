"""Domain models for the loan ledger."""

from loan_ledger.models.dashboard import DashboardStats, MonthlyReport
from loan_ledger.models.enums import (
    InstallmentFrequency,
    InstallmentStatus,
    InterestType,
    LoanStatus,
)
from loan_ledger.models.loan import Installment, Loan, Payment

__all__ = [
    "DashboardStats",
    "Installment",
    "InstallmentFrequency",
    "InstallmentStatus",
    "InterestType",
    "Loan",
    "LoanStatus",
    "MonthlyReport",
    "Payment",
]
