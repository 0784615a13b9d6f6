"""Computed portfolio views (never persisted)."""

from dataclasses import dataclass, field
from decimal import Decimal

from loan_ledger.models.loan import Installment


@dataclass(frozen=True)
class DashboardStats:
    """Portfolio-wide statistics for one ``as_of`` date."""

    total_loans_count: int
    active_loans_count: int
    completed_loans_count: int
    overdue_loans_count: int  # Distinct loans with an overdue installment
    overdue_installments_count: int
    total_amount_lent: Decimal
    total_amount_to_receive: Decimal
    total_amount_received: Decimal
    total_outstanding: Decimal
    total_interest_expected: Decimal
    total_interest_earned: Decimal
    total_principal_received: Decimal
    total_principal_outstanding: Decimal
    upcoming_payments: tuple[Installment, ...] = field(default_factory=tuple)
    overdue_payments: tuple[Installment, ...] = field(default_factory=tuple)


@dataclass
class MonthlyReport:
    """Activity totals for one calendar month."""

    month: str  # YYYY-MM
    loans_created: int = 0
    amount_lent: Decimal = Decimal("0")
    payments_received: int = 0
    amount_received: Decimal = Decimal("0")
    interest_earned: Decimal = Decimal("0")
