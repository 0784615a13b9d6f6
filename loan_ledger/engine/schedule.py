"""Installment generator for flat-split loans.

Every installment of a loan carries the same principal share, interest
share and total: one total-interest figure for the whole loan duration is
divided evenly by the number of installments. The outstanding balance
plays no part, so this is fixed-fee installment billing rather than
declining-balance amortization.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from loan_ledger.engine.interest import (
    duration_in_months,
    implied_rate,
    interval_days,
    total_interest,
)
from loan_ledger.engine.values import to_date, to_decimal, to_enum
from loan_ledger.exceptions import InvalidInputError
from loan_ledger.models.enums import (
    InstallmentFrequency,
    InstallmentStatus,
    InterestType,
    LoanStatus,
)
from loan_ledger.models.loan import Installment, Loan

logger = logging.getLogger(__name__)


def installment_id_for(loan_id: str, installment_number: int) -> str:
    """Stable installment id derived from its loan and sequence number."""
    return f"{loan_id}-inst-{installment_number}"


def validate_loan_terms(loan: Loan) -> None:
    """Reject terms that cannot produce a schedule.

    Raises
    ------
    InvalidInputError
        On a non-positive principal, a count that is not an integer >= 1,
        a negative rate or interest amount, a missing rate and amount,
        an unknown interest type or frequency, or malformed dates.
    """
    if not loan.loan_id:
        raise InvalidInputError("loan_id is required")

    principal = to_decimal(loan.principal, "principal")
    if principal <= 0:
        raise InvalidInputError(f"principal must be > 0, got {principal}")

    count = loan.number_of_installments
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidInputError(f"number_of_installments must be an integer, got {count!r}")
    if count < 1:
        raise InvalidInputError(f"number_of_installments must be >= 1, got {count}")

    if loan.interest_rate is None and loan.interest_amount is None:
        raise InvalidInputError("Either interest_rate or interest_amount is required")
    if loan.interest_rate is not None and to_decimal(loan.interest_rate, "interest_rate") < 0:
        raise InvalidInputError(f"interest_rate must be >= 0, got {loan.interest_rate}")
    if loan.interest_amount is not None and to_decimal(loan.interest_amount, "interest_amount") < 0:
        raise InvalidInputError(f"interest_amount must be >= 0, got {loan.interest_amount}")

    to_enum(InterestType, loan.interest_type, "interest_type")
    to_enum(InstallmentFrequency, loan.installment_frequency, "installment_frequency")
    to_date(loan.start_date, "start_date")
    to_date(loan.end_date, "end_date")


def effective_rate(loan: Loan) -> Decimal:
    """Annual percent rate of ``loan``, derived from its interest amount if unset."""
    if loan.interest_rate is not None:
        return to_decimal(loan.interest_rate, "interest_rate")
    return implied_rate(
        loan.principal,
        loan.interest_amount,
        loan.interest_type,
        duration_in_months(loan.start_date, loan.end_date),
    )


def generate_installments(loan: Loan) -> list[Installment]:
    """Generate the ordered installment schedule for ``loan``.

    Parameters
    ----------
    loan : Loan
        Loan terms. ``interest_rate`` may be ``None`` when
        ``interest_amount`` is given; the rate is then derived first.

    Returns
    -------
    list[Installment]
        Installments numbered 1..n, all pending with nothing paid.
    """
    validate_loan_terms(loan)

    principal = to_decimal(loan.principal, "principal")
    count = loan.number_of_installments
    start = to_date(loan.start_date, "start_date")
    duration = duration_in_months(loan.start_date, loan.end_date)

    interest = total_interest(principal, effective_rate(loan), loan.interest_type, duration)
    total = principal + interest

    per_total = total / count
    per_principal = principal / count
    per_interest = interest / count
    step = interval_days(loan.installment_frequency)

    installments = [
        Installment(
            installment_id=installment_id_for(loan.loan_id, i),
            loan_id=loan.loan_id,
            installment_number=i,
            due_date=start + timedelta(days=step * i),
            principal_amount=per_principal,
            interest_amount=per_interest,
            total_amount=per_total,
            paid_amount=Decimal("0"),
            status=InstallmentStatus.PENDING,
        )
        for i in range(1, count + 1)
    ]

    logger.debug(
        "Generated %d installments for loan %s: total interest %s, installment %s",
        count,
        loan.loan_id,
        interest,
        per_total,
    )
    return installments


def build_loan(
    loan_id: str,
    customer_id: str,
    principal: Any,
    interest_type: InterestType | str,
    start_date: Any,
    end_date: Any,
    installment_frequency: InstallmentFrequency | str,
    number_of_installments: int,
    interest_rate: Any = None,
    interest_amount: Any = None,
    borrower_name: str = "",
    borrower_phone: str = "",
    notes: str = "",
    created_at: datetime | None = None,
) -> tuple[Loan, list[Installment]]:
    """Create a loan and its installments together.

    Loose inputs (strings, floats, ISO dates) are normalized. Whichever of
    ``interest_rate`` / ``interest_amount`` is missing is derived from the
    other, so the returned loan always carries both.

    Returns
    -------
    tuple[Loan, list[Installment]]
        The normalized loan and its schedule. Nothing is returned on error.
    """
    loan = Loan(
        loan_id=loan_id,
        customer_id=customer_id,
        principal=to_decimal(principal, "principal"),
        interest_rate=None if interest_rate is None else to_decimal(interest_rate, "interest_rate"),
        interest_amount=(
            None if interest_amount is None else to_decimal(interest_amount, "interest_amount")
        ),
        interest_type=to_enum(InterestType, interest_type, "interest_type"),
        start_date=to_date(start_date, "start_date"),
        end_date=to_date(end_date, "end_date"),
        installment_frequency=to_enum(
            InstallmentFrequency, installment_frequency, "installment_frequency"
        ),
        number_of_installments=number_of_installments,
        status=LoanStatus.ACTIVE,
        borrower_name=borrower_name,
        borrower_phone=borrower_phone,
        notes=notes,
        created_at=created_at or datetime.now(),
    )
    validate_loan_terms(loan)

    rate = effective_rate(loan)
    if loan.interest_amount is None:
        duration = duration_in_months(loan.start_date, loan.end_date)
        loan = replace(
            loan,
            interest_amount=total_interest(loan.principal, rate, loan.interest_type, duration),
        )
    loan = replace(loan, interest_rate=rate)

    return loan, generate_installments(loan)
