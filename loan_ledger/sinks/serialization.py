"""Record codec between models and JSON-safe dictionaries."""

from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from loan_ledger.engine.values import to_date, to_datetime, to_decimal, to_enum
from loan_ledger.exceptions import InvalidInputError
from loan_ledger.models.enums import (
    InstallmentFrequency,
    InstallmentStatus,
    InterestType,
    LoanStatus,
)
from loan_ledger.models.loan import Installment, Loan, Payment


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization.

    Nested dataclasses (e.g. installments inside ``DashboardStats``) are
    flattened to dicts by ``asdict``; tuples become lists.
    """
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def to_dict_fast(obj: Any) -> dict:
    """Convert a flat dataclass without the deep copy ``asdict`` makes."""
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def _require(data: dict, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise InvalidInputError(f"Missing field {key!r}") from None


def _optional_decimal(data: dict, key: str) -> Decimal | None:
    value = data.get(key)
    return None if value is None else to_decimal(value, key)


def loan_from_dict(data: dict) -> Loan:
    """Rebuild a ``Loan`` from its serialized form."""
    created_at = data.get("created_at")
    return Loan(
        loan_id=_require(data, "loan_id"),
        customer_id=data.get("customer_id", ""),
        principal=to_decimal(_require(data, "principal"), "principal"),
        interest_rate=_optional_decimal(data, "interest_rate"),
        interest_type=to_enum(InterestType, _require(data, "interest_type"), "interest_type"),
        start_date=to_date(_require(data, "start_date"), "start_date"),
        end_date=to_date(_require(data, "end_date"), "end_date"),
        installment_frequency=to_enum(
            InstallmentFrequency,
            _require(data, "installment_frequency"),
            "installment_frequency",
        ),
        number_of_installments=int(_require(data, "number_of_installments")),
        status=to_enum(LoanStatus, data.get("status", LoanStatus.ACTIVE), "status"),
        interest_amount=_optional_decimal(data, "interest_amount"),
        borrower_name=data.get("borrower_name", ""),
        borrower_phone=data.get("borrower_phone", ""),
        notes=data.get("notes", ""),
        created_at=to_datetime(created_at, "created_at") if created_at else None,
    )


def installment_from_dict(data: dict) -> Installment:
    """Rebuild an ``Installment`` from its serialized form."""
    paid_date = data.get("paid_date")
    return Installment(
        installment_id=_require(data, "installment_id"),
        loan_id=_require(data, "loan_id"),
        installment_number=int(_require(data, "installment_number")),
        due_date=to_date(_require(data, "due_date"), "due_date"),
        principal_amount=to_decimal(_require(data, "principal_amount"), "principal_amount"),
        interest_amount=to_decimal(_require(data, "interest_amount"), "interest_amount"),
        total_amount=to_decimal(_require(data, "total_amount"), "total_amount"),
        paid_amount=to_decimal(data.get("paid_amount", "0"), "paid_amount"),
        status=to_enum(
            InstallmentStatus, data.get("status", InstallmentStatus.PENDING), "status"
        ),
        paid_date=to_date(paid_date, "paid_date") if paid_date else None,
        notes=data.get("notes", ""),
    )


def payment_from_dict(data: dict) -> Payment:
    """Rebuild a ``Payment`` from its serialized form."""
    return Payment(
        payment_id=_require(data, "payment_id"),
        loan_id=_require(data, "loan_id"),
        installment_id=_require(data, "installment_id"),
        amount=to_decimal(_require(data, "amount"), "amount"),
        principal_amount=to_decimal(data.get("principal_amount", "0"), "principal_amount"),
        interest_amount=to_decimal(data.get("interest_amount", "0"), "interest_amount"),
        payment_date=to_date(_require(data, "payment_date"), "payment_date"),
        method=data.get("method", "Cash"),
        notes=data.get("notes", ""),
    )
