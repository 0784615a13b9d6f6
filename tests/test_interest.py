"""Tests for the interest calculator."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.engine.interest import (
    INTERVAL_DAYS,
    duration_in_months,
    implied_rate,
    interest_amount,
    interval_days,
    schedule_end_date,
    total_interest,
)
from loan_ledger.exceptions import ArithmeticDegeneracyError, InvalidInputError
from loan_ledger.models import InstallmentFrequency, InterestType

TOLERANCE = Decimal("1e-9")


class TestTotalInterest:
    """Tests for total_interest."""

    def test_simple_interest(self) -> None:
        assert total_interest(1200, 12, InterestType.SIMPLE, 12) == Decimal("144")

    def test_simple_interest_accepts_strings(self) -> None:
        assert total_interest("1200", "12", "simple", "6") == Decimal("72")

    def test_compound_interest_monthly(self) -> None:
        """1000 at 12% compounds at 1% per month for 12 months."""
        result = total_interest(1000, 12, InterestType.COMPOUND, 12)
        assert abs(result - Decimal("126.825030131969720661201")) < TOLERANCE

    def test_compound_fractional_duration(self) -> None:
        """A fractional month count uses a fractional power."""
        result = total_interest(1000, 12, InterestType.COMPOUND, Decimal("0.5"))
        expected = 1000 * (1.01**0.5 - 1)
        assert abs(float(result) - expected) < 1e-9

    def test_zero_rate(self) -> None:
        assert total_interest(1000, 0, InterestType.SIMPLE, 12) == 0
        assert total_interest(1000, 0, InterestType.COMPOUND, 12) == 0

    @pytest.mark.parametrize("interest_type", ["simple", "compound"])
    def test_zero_duration_is_zero(self, interest_type: str) -> None:
        assert total_interest(1000, 12, interest_type, 0) == 0

    def test_negative_duration_is_zero(self) -> None:
        assert total_interest(1000, 12, InterestType.SIMPLE, -3) == 0

    def test_unknown_interest_type(self) -> None:
        with pytest.raises(InvalidInputError, match="interest_type"):
            total_interest(1000, 12, "continuous", 12)

    def test_non_numeric_principal(self) -> None:
        with pytest.raises(InvalidInputError, match="principal"):
            total_interest("lots", 12, InterestType.SIMPLE, 12)

    def test_interest_amount_matches_total_interest(self) -> None:
        assert interest_amount(5000, 9, "compound", 7) == total_interest(5000, 9, "compound", 7)


class TestImpliedRate:
    """Tests for implied_rate."""

    def test_simple_inverse(self) -> None:
        assert implied_rate(1200, 144, InterestType.SIMPLE, 12) == Decimal("12")

    def test_compound_inverse_round_trip(self) -> None:
        interest = total_interest(1000, 12, InterestType.COMPOUND, 12)
        rate = implied_rate(1000, interest, InterestType.COMPOUND, 12)
        assert abs(rate - Decimal("12")) < TOLERANCE

    def test_compound_inverse_fractional_duration(self) -> None:
        duration = duration_in_months("2024-01-01", "2024-03-15")
        interest = total_interest(2500, 18, InterestType.COMPOUND, duration)
        rate = implied_rate(2500, interest, InterestType.COMPOUND, duration)
        assert abs(rate - Decimal("18")) < TOLERANCE

    def test_zero_interest_gives_zero_rate(self) -> None:
        assert implied_rate(1000, 0, InterestType.SIMPLE, 12) == 0
        assert implied_rate(1000, 0, InterestType.COMPOUND, 12) == 0

    def test_zero_principal_is_degenerate(self) -> None:
        with pytest.raises(ArithmeticDegeneracyError):
            implied_rate(0, 100, InterestType.SIMPLE, 12)

    def test_zero_duration_is_degenerate(self) -> None:
        with pytest.raises(ArithmeticDegeneracyError):
            implied_rate(1000, 100, InterestType.COMPOUND, 0)

    def test_degeneracy_is_a_zero_division(self) -> None:
        with pytest.raises(ZeroDivisionError):
            implied_rate(1000, 100, InterestType.SIMPLE, duration_in_months("2024-01-01", "2024-01-01"))

    def test_negative_interest_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            implied_rate(1000, -5, InterestType.SIMPLE, 12)


class TestDurationInMonths:
    """Tests for duration_in_months."""

    def test_thirty_days_is_one_month(self) -> None:
        assert duration_in_months("2024-01-01", "2024-01-31") == 1

    def test_calendar_months_are_ignored(self) -> None:
        """February 2024 has 29 days, which is not a whole month here."""
        assert duration_in_months(date(2024, 2, 1), date(2024, 3, 1)) == Decimal(29) / 30

    def test_order_does_not_matter(self) -> None:
        assert duration_in_months("2024-12-26", "2024-01-01") == 12

    def test_same_day_is_zero(self) -> None:
        assert duration_in_months("2024-05-05", "2024-05-05") == 0

    def test_partial_day_rounds_up(self) -> None:
        result = duration_in_months("2024-01-01T00:00:00Z", "2024-01-01T12:00:00Z")
        assert result == Decimal(1) / 30

    def test_timezone_offsets_normalized(self) -> None:
        result = duration_in_months("2024-01-01T00:00:00+02:00", "2024-01-30T22:00:00Z")
        assert result == 1

    def test_malformed_date(self) -> None:
        with pytest.raises(InvalidInputError, match="start_date"):
            duration_in_months("01/02/2024", "2024-03-01")

    def test_wrong_type(self) -> None:
        with pytest.raises(InvalidInputError):
            duration_in_months(20240101, "2024-03-01")


class TestIntervals:
    """Tests for interval_days and schedule_end_date."""

    @pytest.mark.parametrize(
        ("frequency", "days"),
        [
            ("weekly", 7),
            ("biweekly", 14),
            ("monthly", 30),
            ("quarterly", 90),
            ("yearly", 365),
        ],
    )
    def test_interval_days(self, frequency: str, days: int) -> None:
        assert interval_days(frequency) == days

    def test_every_frequency_has_an_interval(self) -> None:
        assert set(INTERVAL_DAYS) == set(InstallmentFrequency)

    def test_unknown_frequency(self) -> None:
        with pytest.raises(InvalidInputError, match="installment_frequency"):
            interval_days("daily")

    def test_schedule_end_date(self) -> None:
        assert schedule_end_date(date(2024, 1, 1), "monthly", 12) == date(2024, 12, 26)

    def test_schedule_end_date_from_iso_string(self) -> None:
        assert schedule_end_date("2024-01-01", InstallmentFrequency.WEEKLY, 4) == date(2024, 1, 29)
