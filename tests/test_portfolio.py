"""Tests for the portfolio dashboard and monthly report."""

import json
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.ledger import make_payment
from loan_ledger.engine.portfolio import build_dashboard, monthly_report
from loan_ledger.engine.schedule import generate_installments
from loan_ledger.models import (
    InstallmentFrequency,
    InstallmentStatus,
    Loan,
    LoanStatus,
)
from loan_ledger.sinks.serialization import to_dict
from loan_ledger.store import LoanBook


@pytest.fixture
def weekly_book(sample_loan: Loan) -> LoanBook:
    """Six weekly loans starting a day apart, plus the monthly sample loan."""
    book = LoanBook()
    book.add_loan(sample_loan)
    for n in range(6):
        loan = replace(
            sample_loan,
            loan_id=f"loan-weekly-{n}",
            start_date=sample_loan.start_date + timedelta(days=n),
            installment_frequency=InstallmentFrequency.WEEKLY,
            number_of_installments=4,
        )
        book.add_loan(loan)
    return book


class TestDashboardTotals:
    """Money totals."""

    def test_empty_portfolio(self) -> None:
        stats = build_dashboard([], [], [], as_of=date(2024, 1, 1))

        assert stats.total_loans_count == 0
        assert stats.total_amount_lent == Decimal("0")
        assert stats.total_outstanding == Decimal("0")
        assert stats.upcoming_payments == ()
        assert stats.overdue_payments == ()

    def test_totals_after_payments(self, book: LoanBook) -> None:
        installments = book.get_loan_installments("loan-test-001")
        book.record_payment(make_payment(installments[0], "112", "2024-01-30"), as_of="2024-02-01")
        book.record_payment(make_payment(installments[1], "56", "2024-02-20"), as_of="2024-02-21")

        stats = book.dashboard(as_of=date(2024, 2, 21))

        assert stats.total_loans_count == 1
        assert stats.active_loans_count == 1
        assert stats.total_amount_lent == Decimal("1200")
        assert stats.total_amount_to_receive == Decimal("1344")
        assert stats.total_amount_received == Decimal("168")
        assert stats.total_outstanding == Decimal("1176")
        assert stats.total_interest_expected == Decimal("144")
        assert stats.total_interest_earned == Decimal("18")
        assert stats.total_principal_received == Decimal("150")
        assert stats.total_principal_outstanding == Decimal("1050")

    def test_interest_earned_uses_recorded_split(self, book: LoanBook) -> None:
        inst = book.get_loan_installments("loan-test-001")[0]
        book.record_payment(
            make_payment(inst, "112", "2024-01-30", principal_amount="100", interest_amount="12"),
            as_of="2024-01-30",
        )
        stats = book.dashboard(as_of="2024-01-30")
        assert stats.total_interest_earned == Decimal("12")

    def test_loan_status_counts(self, weekly_book: LoanBook) -> None:
        weekly_book.update_loan("loan-weekly-0", status=LoanStatus.COMPLETED)
        weekly_book.update_loan("loan-weekly-1", status=LoanStatus.DEFAULTED)

        stats = weekly_book.dashboard(as_of=date(2024, 1, 1))

        assert stats.total_loans_count == 7
        assert stats.active_loans_count == 5
        assert stats.completed_loans_count == 1


class TestUpcomingAndOverdue:
    """Upcoming window, overdue list and counts."""

    def test_upcoming_window_and_cap(self, weekly_book: LoanBook) -> None:
        # First weekly dues fall on 01-08..01-13, the second round on 01-15..01-20
        stats = weekly_book.dashboard(as_of=date(2024, 1, 8))

        due_dates = [i.due_date for i in stats.upcoming_payments]
        assert len(due_dates) == 5
        assert due_dates == sorted(due_dates)
        assert due_dates[0] == date(2024, 1, 8)
        assert all(date(2024, 1, 8) <= d <= date(2024, 1, 15) for d in due_dates)
        assert all(i.status == InstallmentStatus.PENDING for i in stats.upcoming_payments)

    def test_upcoming_excludes_beyond_window(self, weekly_book: LoanBook) -> None:
        stats = weekly_book.dashboard(as_of=date(2024, 1, 1))
        assert [i.due_date for i in stats.upcoming_payments] == [
            date(2024, 1, 8)
        ]

    def test_upcoming_limit_from_config(self, weekly_book: LoanBook) -> None:
        config = LedgerConfig(upcoming_window_days=30, upcoming_limit=2)
        stats = weekly_book.dashboard(as_of=date(2024, 1, 1), config=config)
        assert len(stats.upcoming_payments) == 2

    def test_overdue_sorted_and_counted(self, weekly_book: LoanBook) -> None:
        stats = weekly_book.dashboard(as_of=date(2024, 1, 20))

        overdue = stats.overdue_payments
        assert [i.due_date for i in overdue] == sorted(i.due_date for i in overdue)
        # 01-08..01-13 and 01-15..01-19 for the weekly loans
        assert stats.overdue_installments_count == 11
        assert stats.overdue_loans_count == 6
        assert all(i.status == InstallmentStatus.OVERDUE for i in overdue)

    def test_overdue_limit_keeps_counts(self, weekly_book: LoanBook) -> None:
        stats = weekly_book.dashboard(as_of=date(2024, 1, 20), config=LedgerConfig(overdue_limit=2))

        assert len(stats.overdue_payments) == 2
        assert stats.overdue_installments_count == 11
        assert stats.overdue_loans_count == 6

    def test_partial_installment_not_overdue(self, book: LoanBook) -> None:
        inst = book.get_loan_installments("loan-test-001")[0]
        book.record_payment(make_payment(inst, "10", "2024-01-20"), as_of="2024-01-20")

        stats = book.dashboard(as_of=date(2024, 2, 15))

        assert stats.overdue_installments_count == 0
        assert stats.overdue_loans_count == 0

    def test_statuses_rederived_against_as_of(self, sample_loan: Loan) -> None:
        """Stored statuses are ignored in favour of the as_of date."""
        installments = generate_installments(sample_loan)
        stats = build_dashboard([sample_loan], installments, [], as_of=date(2024, 2, 2))

        assert stats.overdue_installments_count == 1
        assert installments[0].status == InstallmentStatus.PENDING

    def test_idempotent(self, weekly_book: LoanBook) -> None:
        first = weekly_book.dashboard(as_of=date(2024, 1, 12))
        second = weekly_book.dashboard(as_of=date(2024, 1, 12))

        assert first == second
        assert json.dumps(to_dict(first)) == json.dumps(to_dict(second))


class TestMonthlyReport:
    """Tests for monthly_report."""

    def test_groups_loans_and_payments_by_month(self, book: LoanBook, sample_loan: Loan) -> None:
        book.add_loan(
            replace(
                sample_loan,
                loan_id="loan-feb",
                principal=Decimal("500"),
                created_at=datetime(2024, 2, 3, 12, 0),
            )
        )
        installments = book.get_loan_installments("loan-test-001")
        book.record_payment(make_payment(installments[0], "112", "2024-01-30"))
        book.record_payment(make_payment(installments[1], "112", "2024-02-28"))

        report = monthly_report(book.loans.values(), book.payments.values())

        assert [r.month for r in report] == ["2024-02", "2024-01"]
        feb, jan = report
        assert jan.loans_created == 1
        assert jan.amount_lent == Decimal("1200")
        assert jan.payments_received == 1
        assert jan.amount_received == Decimal("112")
        assert jan.interest_earned == Decimal("12")
        assert feb.loans_created == 1
        assert feb.amount_lent == Decimal("500")
        assert feb.payments_received == 1

    def test_falls_back_to_start_date(self, sample_loan: Loan) -> None:
        loan = replace(sample_loan, created_at=None, start_date=date(2023, 11, 5))
        report = monthly_report([loan], [])
        assert report[0].month == "2023-11"

    def test_empty(self) -> None:
        assert monthly_report([], []) == []
