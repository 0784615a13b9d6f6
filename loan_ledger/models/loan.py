"""Loan, installment and payment models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from loan_ledger.models.enums import (
    InstallmentFrequency,
    InstallmentStatus,
    InterestType,
    LoanStatus,
)


@dataclass
class Loan:
    """Loan contract entity.

    Either ``interest_rate`` (annual percent) or ``interest_amount`` must be
    set; the other is derivable from the loan's duration.
    """

    loan_id: str
    customer_id: str
    principal: Decimal
    interest_rate: Decimal | None  # Annual percent (e.g., 12 for 12%)
    interest_type: InterestType
    start_date: date
    end_date: date
    installment_frequency: InstallmentFrequency
    number_of_installments: int
    status: LoanStatus = LoanStatus.ACTIVE
    interest_amount: Decimal | None = None
    borrower_name: str = ""
    borrower_phone: str = ""
    notes: str = ""
    created_at: datetime | None = None


@dataclass
class Installment:
    """One scheduled repayment slice of a loan."""

    installment_id: str
    loan_id: str
    installment_number: int  # 1, 2, 3, ...
    due_date: date
    principal_amount: Decimal
    interest_amount: Decimal
    total_amount: Decimal
    paid_amount: Decimal = Decimal("0")
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_date: date | None = None
    notes: str = ""


@dataclass(frozen=True)
class Payment:
    """Money received against one installment.

    The principal/interest split is chosen by the caller and stored as is.
    """

    payment_id: str
    loan_id: str
    installment_id: str
    amount: Decimal
    principal_amount: Decimal
    interest_amount: Decimal
    payment_date: date
    method: str = "Cash"
    notes: str = ""
