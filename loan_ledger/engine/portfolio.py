"""Portfolio aggregator: dashboard statistics and monthly activity.

Both entry points are read-only functions of their inputs. Pass one
``as_of`` date for a whole pass so that the pending/overdue partition is
consistent across installments.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.status import refresh_statuses, resolve_as_of
from loan_ledger.models.dashboard import DashboardStats, MonthlyReport
from loan_ledger.models.enums import InstallmentStatus, LoanStatus
from loan_ledger.models.loan import Installment, Loan, Payment

_ZERO = Decimal("0")


def _by_due_date(installments: Iterable[Installment]) -> list[Installment]:
    return sorted(installments, key=lambda i: (i.due_date, i.loan_id, i.installment_number))


def build_dashboard(
    loans: Iterable[Loan],
    installments: Iterable[Installment],
    payments: Iterable[Payment],
    as_of: Any = None,
    config: LedgerConfig | None = None,
) -> DashboardStats:
    """Summarize a portfolio on ``as_of``.

    Parameters
    ----------
    loans : Iterable[Loan]
        All loans.
    installments : Iterable[Installment]
        All installments; statuses are re-derived against ``as_of``.
    payments : Iterable[Payment]
        All payments; their recorded principal/interest split is summed
        as is.
    as_of : date | str | None
        Reference date (default: today).
    config : LedgerConfig | None
        Upcoming window, upcoming cap and optional overdue cap.

    Returns
    -------
    DashboardStats
        Frozen statistics snapshot.
    """
    config = config or LedgerConfig()
    today = resolve_as_of(as_of)
    loans = list(loans)
    payments = list(payments)
    current = refresh_statuses(installments, today)

    total_amount_lent = sum((l.principal for l in loans), _ZERO)
    total_amount_to_receive = sum((i.total_amount for i in current), _ZERO)
    total_amount_received = sum((i.paid_amount for i in current), _ZERO)
    total_interest_expected = sum((i.interest_amount for i in current), _ZERO)
    total_interest_earned = sum((p.interest_amount for p in payments), _ZERO)
    total_principal_received = sum((p.principal_amount for p in payments), _ZERO)

    window_end = today + timedelta(days=config.upcoming_window_days)
    upcoming = _by_due_date(
        i
        for i in current
        if i.status == InstallmentStatus.PENDING and today <= i.due_date <= window_end
    )[: config.upcoming_limit]

    overdue = _by_due_date(i for i in current if i.status == InstallmentStatus.OVERDUE)
    overdue_loan_ids = {i.loan_id for i in overdue}
    if config.overdue_limit is not None:
        overdue = overdue[: config.overdue_limit]

    return DashboardStats(
        total_loans_count=len(loans),
        active_loans_count=sum(1 for l in loans if l.status == LoanStatus.ACTIVE),
        completed_loans_count=sum(1 for l in loans if l.status == LoanStatus.COMPLETED),
        overdue_loans_count=len(overdue_loan_ids),
        overdue_installments_count=sum(1 for i in current if i.status == InstallmentStatus.OVERDUE),
        total_amount_lent=total_amount_lent,
        total_amount_to_receive=total_amount_to_receive,
        total_amount_received=total_amount_received,
        total_outstanding=total_amount_to_receive - total_amount_received,
        total_interest_expected=total_interest_expected,
        total_interest_earned=total_interest_earned,
        total_principal_received=total_principal_received,
        total_principal_outstanding=total_amount_lent - total_principal_received,
        upcoming_payments=tuple(upcoming),
        overdue_payments=tuple(overdue),
    )


def _month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def monthly_report(loans: Iterable[Loan], payments: Iterable[Payment]) -> list[MonthlyReport]:
    """Per-month lending and collection totals, newest month first.

    Loans count in the month they were created (falling back to their
    start date); payments count in the month of their payment date.
    """
    reports: dict[str, MonthlyReport] = {}

    for loan in loans:
        created = loan.created_at.date() if loan.created_at else loan.start_date
        key = _month_key(created)
        report = reports.setdefault(key, MonthlyReport(month=key))
        report.loans_created += 1
        report.amount_lent += loan.principal

    for payment in payments:
        key = _month_key(payment.payment_date)
        report = reports.setdefault(key, MonthlyReport(month=key))
        report.payments_received += 1
        report.amount_received += payment.amount
        report.interest_earned += payment.interest_amount

    return [reports[key] for key in sorted(reports, reverse=True)]
