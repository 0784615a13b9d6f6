"""Coercion of caller-supplied amounts and dates."""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, TypeVar

from loan_ledger.exceptions import InvalidInputError

E = TypeVar("E", bound=Enum)


def to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    """Convert ``value`` to a finite ``Decimal``.

    Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise InvalidInputError(f"{field_name} must be a number, got {value!r}")
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidInputError(f"{field_name} must be a number, got {value!r}") from exc

    if not result.is_finite():
        raise InvalidInputError(f"{field_name} must be finite, got {value!r}")
    return result


def to_datetime(value: Any, field_name: str = "date") -> datetime:
    """Convert a date, datetime or ISO-8601 string to a naive UTC datetime."""
    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            result = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidInputError(f"{field_name} is not an ISO-8601 date: {value!r}") from exc
    else:
        raise InvalidInputError(f"{field_name} must be a date or ISO-8601 string, got {value!r}")

    if result.tzinfo is not None:
        result = result.astimezone(timezone.utc).replace(tzinfo=None)
    return result


def to_date(value: Any, field_name: str = "date") -> date:
    """Convert a date, datetime or ISO-8601 string to a ``date``."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return to_datetime(value, field_name).date()


def to_enum(enum_cls: type[E], value: Any, field_name: str) -> E:
    """Look up ``value`` in ``enum_cls`` by member or by value."""
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(m.value for m in enum_cls)
        raise InvalidInputError(f"{field_name} must be one of {choices}, got {value!r}") from exc
