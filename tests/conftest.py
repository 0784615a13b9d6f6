"""Pytest configuration and fixtures."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from loan_ledger.engine.schedule import generate_installments
from loan_ledger.models import (
    Installment,
    InstallmentFrequency,
    InterestType,
    Loan,
    LoanStatus,
)
from loan_ledger.store import LoanBook

START_DATE = date(2024, 1, 1)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def start_date() -> date:
    """Loan start date used across tests."""
    return START_DATE


@pytest.fixture
def sample_loan() -> Loan:
    """1200 at 12% simple over 12 thirty-day months, 12 monthly installments."""
    return Loan(
        loan_id="loan-test-001",
        customer_id="cust-test-001",
        principal=Decimal("1200"),
        interest_rate=Decimal("12"),
        interest_type=InterestType.SIMPLE,
        start_date=START_DATE,
        end_date=START_DATE + timedelta(days=360),
        installment_frequency=InstallmentFrequency.MONTHLY,
        number_of_installments=12,
        status=LoanStatus.ACTIVE,
        borrower_name="Test Borrower",
        created_at=datetime(2024, 1, 1, 9, 30),
    )


@pytest.fixture
def sample_installments(sample_loan: Loan) -> list[Installment]:
    """Schedule for ``sample_loan``."""
    return generate_installments(sample_loan)


@pytest.fixture
def first_installment(sample_installments: list[Installment]) -> Installment:
    """Installment #1 of ``sample_loan`` (due 2024-01-31)."""
    return sample_installments[0]


@pytest.fixture
def book(sample_loan: Loan) -> LoanBook:
    """Book holding ``sample_loan`` and its schedule."""
    book = LoanBook()
    book.add_loan(sample_loan)
    return book
