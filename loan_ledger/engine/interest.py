"""Interest calculator: totals, inverses and the 30-day month convention.

All functions are pure. Rates are annual percentages (``12`` means 12%)
and durations are months, possibly fractional. A month is always 30 days
here, independent of the calendar, so that schedule generation and any
rate/amount recalculation agree on the same duration.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from loan_ledger.engine.values import to_date, to_datetime, to_decimal, to_enum
from loan_ledger.exceptions import ArithmeticDegeneracyError, InvalidInputError
from loan_ledger.models.enums import InstallmentFrequency, InterestType

DAYS_PER_MONTH = Decimal("30")
MONTHS_PER_YEAR = Decimal("12")
PERCENT = Decimal("100")

INTERVAL_DAYS: dict[InstallmentFrequency, int] = {
    InstallmentFrequency.WEEKLY: 7,
    InstallmentFrequency.BIWEEKLY: 14,
    InstallmentFrequency.MONTHLY: 30,
    InstallmentFrequency.QUARTERLY: 90,
    InstallmentFrequency.YEARLY: 365,
}

_ZERO = Decimal("0")
_ONE = Decimal("1")


def total_interest(
    principal: Any,
    annual_rate: Any,
    interest_type: InterestType | str,
    duration_months: Any,
) -> Decimal:
    """Total interest owed over ``duration_months``.

    Parameters
    ----------
    principal : Decimal | int | float | str
        Amount lent.
    annual_rate : Decimal | int | float | str
        Annual interest rate in percent.
    interest_type : InterestType | str
        ``simple`` (linear in time) or ``compound`` (monthly compounding).
    duration_months : Decimal | int | float | str
        Loan duration in months; fractional values are allowed.

    Returns
    -------
    Decimal
        Interest amount. Zero when the duration is not positive.
    """
    principal = to_decimal(principal, "principal")
    rate = to_decimal(annual_rate, "interest_rate")
    duration = to_decimal(duration_months, "duration_months")
    kind = to_enum(InterestType, interest_type, "interest_type")

    if duration <= _ZERO:
        return _ZERO

    if kind == InterestType.SIMPLE:
        return principal * rate * duration / (PERCENT * MONTHS_PER_YEAR)

    monthly_rate = rate / (MONTHS_PER_YEAR * PERCENT)
    return principal * (_ONE + monthly_rate) ** duration - principal


def interest_amount(
    principal: Any,
    annual_rate: Any,
    interest_type: InterestType | str,
    duration_months: Any,
) -> Decimal:
    """Interest amount implied by a rate (rate -> amount recalculation)."""
    return total_interest(principal, annual_rate, interest_type, duration_months)


def implied_rate(
    principal: Any,
    interest: Any,
    interest_type: InterestType | str,
    duration_months: Any,
) -> Decimal:
    """Annual percent rate that yields ``interest`` over ``duration_months``.

    Inverse of :func:`total_interest`.

    Raises
    ------
    ArithmeticDegeneracyError
        If ``principal`` or ``duration_months`` is zero.
    InvalidInputError
        If ``interest`` is negative.
    """
    principal = to_decimal(principal, "principal")
    interest = to_decimal(interest, "interest_amount")
    duration = to_decimal(duration_months, "duration_months")
    kind = to_enum(InterestType, interest_type, "interest_type")

    if principal == _ZERO:
        raise ArithmeticDegeneracyError("Cannot derive a rate for a zero principal")
    if duration == _ZERO:
        raise ArithmeticDegeneracyError("Cannot derive a rate for a zero duration")
    if interest < _ZERO:
        raise InvalidInputError(f"interest_amount must be >= 0, got {interest}")

    if kind == InterestType.SIMPLE:
        return interest * PERCENT * MONTHS_PER_YEAR / (principal * duration)

    growth = (principal + interest) / principal
    monthly_rate = growth ** (_ONE / duration) - _ONE
    return monthly_rate * MONTHS_PER_YEAR * PERCENT


def duration_in_months(start_date: Any, end_date: Any) -> Decimal:
    """Absolute distance between two dates in 30-day months.

    Partial days round up to a whole day before dividing.
    """
    start = to_datetime(start_date, "start_date")
    end = to_datetime(end_date, "end_date")
    delta = abs(end - start)
    days = delta.days + (1 if delta.seconds or delta.microseconds else 0)
    return Decimal(days) / DAYS_PER_MONTH


def interval_days(frequency: InstallmentFrequency | str) -> int:
    """Fixed number of days between installments for ``frequency``."""
    return INTERVAL_DAYS[to_enum(InstallmentFrequency, frequency, "installment_frequency")]


def schedule_end_date(
    start_date: Any,
    frequency: InstallmentFrequency | str,
    number_of_installments: int,
) -> date:
    """Date of the last installment: ``start + count * interval``."""
    start = to_date(start_date, "start_date")
    return start + timedelta(days=interval_days(frequency) * number_of_installments)
