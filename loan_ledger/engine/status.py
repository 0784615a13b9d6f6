"""Installment and loan status derivation."""

from dataclasses import replace
from datetime import date
from typing import Any, Iterable

from loan_ledger.engine.values import to_date
from loan_ledger.models.enums import InstallmentStatus, LoanStatus
from loan_ledger.models.loan import Installment, Loan


def resolve_as_of(value: Any) -> date:
    """Reference date for status checks (default: today)."""
    if value is None:
        return date.today()
    return to_date(value, "as_of")


def derive_status(installment: Installment, as_of: Any = None) -> InstallmentStatus:
    """Derive the lifecycle status of ``installment`` on ``as_of``.

    First match wins: fully paid, then partially paid, then past due,
    otherwise pending. Payment state therefore outranks the due date: a
    paid installment is never overdue, and neither is a partial one.
    """
    today = resolve_as_of(as_of)

    if installment.paid_amount >= installment.total_amount:
        return InstallmentStatus.PAID
    if installment.paid_amount > 0:
        return InstallmentStatus.PARTIAL
    if today > installment.due_date:
        return InstallmentStatus.OVERDUE
    return InstallmentStatus.PENDING


def with_status(installment: Installment, as_of: Any = None) -> Installment:
    """Return a copy of ``installment`` with its status re-derived."""
    return replace(installment, status=derive_status(installment, as_of))


def refresh_statuses(installments: Iterable[Installment], as_of: Any = None) -> list[Installment]:
    """Re-derive every status against one ``as_of`` date."""
    today = resolve_as_of(as_of)
    return [with_status(inst, today) for inst in installments]


def derive_loan_status(
    loan: Loan,
    installments: Iterable[Installment],
    as_of: Any = None,
) -> LoanStatus:
    """Derive a loan's status from its installments.

    All installments paid means completed; any overdue installment means
    overdue. Otherwise a manually set ``defaulted`` is kept and everything
    else is active.
    """
    today = resolve_as_of(as_of)
    statuses = [derive_status(inst, today) for inst in installments]

    if statuses and all(s == InstallmentStatus.PAID for s in statuses):
        return LoanStatus.COMPLETED
    if any(s == InstallmentStatus.OVERDUE for s in statuses):
        return LoanStatus.OVERDUE
    if loan.status == LoanStatus.DEFAULTED:
        return LoanStatus.DEFAULTED
    return LoanStatus.ACTIVE
