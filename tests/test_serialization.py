"""Tests for the record codec."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

import pytest

from loan_ledger.engine.ledger import make_payment
from loan_ledger.exceptions import InvalidInputError
from loan_ledger.models import (
    Installment,
    InstallmentFrequency,
    InstallmentStatus,
    InterestType,
    Loan,
    LoanStatus,
)
from loan_ledger.sinks.serialization import (
    dataclass_to_dict,
    installment_from_dict,
    loan_from_dict,
    payment_from_dict,
    serialize_value,
    to_dict,
    to_dict_fast,
)


@dataclass
class _SampleData:
    name: str
    amount: Decimal
    created_at: datetime


class TestToDict:
    """Tests for to_dict function."""

    def test_dataclass(self) -> None:
        obj = _SampleData(name="test", amount=Decimal("100.50"), created_at=datetime(2024, 1, 1))
        result = to_dict(obj)
        assert result["name"] == "test"
        assert result["amount"] == "100.50"
        assert result["created_at"] == "2024-01-01T00:00:00"

    def test_dict_passthrough(self) -> None:
        d = {"key": "value"}
        assert to_dict(d) == d

    def test_other_type(self) -> None:
        assert to_dict(42) == {"value": "42"}

    def test_loan_fields(self, sample_loan: Loan) -> None:
        result = dataclass_to_dict(sample_loan)

        assert result["principal"] == "1200"
        assert result["interest_type"] == "simple"
        assert result["installment_frequency"] == "monthly"
        assert result["status"] == "active"
        assert result["start_date"] == "2024-01-01"
        assert result["interest_amount"] is None

    def test_fast_matches_deep_for_flat_records(self, first_installment: Installment) -> None:
        assert to_dict_fast(first_installment) == dataclass_to_dict(first_installment)


class TestSerializeValue:
    """Tests for serialize_value function."""

    def test_decimal(self) -> None:
        assert serialize_value(Decimal("112.0000000000000000000000001")) == "112.0000000000000000000000001"

    def test_enum(self) -> None:
        assert serialize_value(InstallmentStatus.OVERDUE) == "overdue"

    def test_date_and_datetime(self) -> None:
        assert serialize_value(date(2024, 1, 31)) == "2024-01-31"
        assert serialize_value(datetime(2024, 1, 31, 8, 5)) == "2024-01-31T08:05:00"

    def test_nested(self) -> None:
        value = {"items": (Decimal("1"), {"when": date(2024, 2, 1)})}
        assert serialize_value(value) == {"items": ["1", {"when": "2024-02-01"}]}

    def test_passthrough(self) -> None:
        assert serialize_value(None) is None
        assert serialize_value(3) == 3


class TestFromDict:
    """Rebuilding records from their serialized form."""

    def test_loan_round_trip(self, sample_loan: Loan) -> None:
        assert loan_from_dict(to_dict(sample_loan)) == sample_loan

    def test_installment_round_trip(self, first_installment: Installment) -> None:
        assert installment_from_dict(to_dict(first_installment)) == first_installment

    def test_payment_round_trip(self, first_installment: Installment) -> None:
        payment = make_payment(first_installment, "56", date(2024, 1, 20), payment_id="pay-1")
        assert payment_from_dict(to_dict(payment)) == payment

    def test_loan_defaults(self) -> None:
        loan = loan_from_dict(
            {
                "loan_id": "loan-1",
                "principal": "500",
                "interest_rate": 10,
                "interest_type": "compound",
                "start_date": "2024-01-01",
                "end_date": "2024-07-01T00:00:00Z",
                "installment_frequency": "quarterly",
                "number_of_installments": "2",
            }
        )

        assert loan.interest_type == InterestType.COMPOUND
        assert loan.installment_frequency == InstallmentFrequency.QUARTERLY
        assert loan.interest_rate == Decimal("10")
        assert loan.end_date == date(2024, 7, 1)
        assert loan.number_of_installments == 2
        assert loan.status == LoanStatus.ACTIVE
        assert loan.created_at is None

    def test_missing_field(self) -> None:
        with pytest.raises(InvalidInputError, match="Missing field 'due_date'"):
            installment_from_dict({"installment_id": "i-1", "loan_id": "l-1", "installment_number": 1})

    def test_bad_value(self) -> None:
        with pytest.raises(InvalidInputError):
            payment_from_dict(
                {
                    "payment_id": "p-1",
                    "loan_id": "l-1",
                    "installment_id": "i-1",
                    "amount": "lots",
                    "payment_date": "2024-01-01",
                }
            )
