"""Payment ledger: apply and reverse payments against installments.

These functions never mutate their arguments; they return updated
copies. Looking records up and persisting them is the caller's job
(see :class:`loan_ledger.store.LoanBook`).
"""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any, Iterable

from loan_ledger.engine.status import derive_status
from loan_ledger.engine.values import to_date, to_decimal
from loan_ledger.exceptions import InvalidInputError, ReferentialIntegrityError
from loan_ledger.models.enums import InstallmentStatus, LoanStatus
from loan_ledger.models.loan import Installment, Loan, Payment

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def _check_reference(installment: Installment, payment: Payment) -> None:
    if payment.installment_id != installment.installment_id:
        raise ReferentialIntegrityError(
            f"Payment {payment.payment_id} references installment {payment.installment_id}, "
            f"not {installment.installment_id}"
        )
    if payment.loan_id != installment.loan_id:
        raise ReferentialIntegrityError(
            f"Payment {payment.payment_id} references loan {payment.loan_id}, "
            f"not {installment.loan_id}"
        )


def _context(payment: Payment) -> dict[str, str]:
    return {
        "loan_id": payment.loan_id,
        "installment_id": payment.installment_id,
        "payment_id": payment.payment_id,
    }


def record_payment(installment: Installment, payment: Payment, as_of: Any = None) -> Installment:
    """Apply ``payment`` to ``installment``.

    The paid amount grows by ``payment.amount``, the paid date becomes the
    payment date and the status is re-derived. Overpayment is accepted and
    only logged; rejecting it is :func:`validate_payment_amount`'s job.

    Raises
    ------
    ReferentialIntegrityError
        If the payment belongs to another installment or loan.
    """
    _check_reference(installment, payment)

    paid = installment.paid_amount + to_decimal(payment.amount, "amount")
    if paid > installment.total_amount:
        logger.warning(
            "Installment %s overpaid: %s paid of %s due",
            installment.installment_id,
            paid,
            installment.total_amount,
            extra=_context(payment),
        )

    updated = replace(
        installment,
        paid_amount=paid,
        paid_date=to_date(payment.payment_date, "payment_date"),
    )
    updated = replace(updated, status=derive_status(updated, as_of))

    logger.debug(
        "Recorded payment %s of %s on installment %s -> %s",
        payment.payment_id,
        payment.amount,
        installment.installment_id,
        updated.status.value,
        extra=_context(payment),
    )
    return updated


def delete_payment(installment: Installment, payment: Payment, as_of: Any = None) -> Installment:
    """Reverse ``payment`` on ``installment``.

    The paid amount never drops below zero, so reversing the same payment
    twice leaves the installment unpaid rather than negative. The paid
    date is cleared once nothing remains paid.

    Raises
    ------
    ReferentialIntegrityError
        If the payment belongs to another installment or loan.
    """
    _check_reference(installment, payment)

    paid = installment.paid_amount - to_decimal(payment.amount, "amount")
    if paid < _ZERO:
        logger.warning(
            "Reversing payment %s would leave installment %s at %s; flooring at 0",
            payment.payment_id,
            installment.installment_id,
            paid,
            extra=_context(payment),
        )
        paid = _ZERO

    updated = replace(
        installment,
        paid_amount=paid,
        paid_date=installment.paid_date if paid > _ZERO else None,
    )
    updated = replace(updated, status=derive_status(updated, as_of))

    logger.debug(
        "Reversed payment %s of %s on installment %s -> %s",
        payment.payment_id,
        payment.amount,
        installment.installment_id,
        updated.status.value,
        extra=_context(payment),
    )
    return updated


def normalize_payment(payment: Payment) -> Payment:
    """Coerce a payment's amounts to ``Decimal`` and its date to ``date``."""
    return replace(
        payment,
        amount=to_decimal(payment.amount, "amount"),
        principal_amount=to_decimal(payment.principal_amount, "principal_amount"),
        interest_amount=to_decimal(payment.interest_amount, "interest_amount"),
        payment_date=to_date(payment.payment_date, "payment_date"),
    )


def is_settled(installments: Iterable[Installment]) -> bool:
    """True when there is at least one installment and all are paid."""
    statuses = [inst.status for inst in installments]
    return bool(statuses) and all(s == InstallmentStatus.PAID for s in statuses)


def settle_loan(loan: Loan, installments: Iterable[Installment]) -> Loan:
    """Mark ``loan`` completed once every installment is paid.

    This is the only automatic transition after recording a payment.
    """
    if loan.status != LoanStatus.COMPLETED and is_settled(installments):
        logger.info(
            "Loan %s fully paid; marking completed", loan.loan_id, extra={"loan_id": loan.loan_id}
        )
        return replace(loan, status=LoanStatus.COMPLETED)
    return loan


def reopen_loan(loan: Loan, installments: Iterable[Installment]) -> Loan:
    """Return a completed loan to active when a reversal unsettles it."""
    if loan.status == LoanStatus.COMPLETED and not is_settled(installments):
        logger.info(
            "Loan %s no longer fully paid; marking active", loan.loan_id, extra={"loan_id": loan.loan_id}
        )
        return replace(loan, status=LoanStatus.ACTIVE)
    return loan


def remaining_balance(installment: Installment) -> Decimal:
    """Amount still due on ``installment`` (never negative)."""
    return max(_ZERO, installment.total_amount - installment.paid_amount)


def suggest_payment_split(installment: Installment) -> tuple[Decimal, Decimal]:
    """Remaining principal and interest, in proportion to the installment's shares.

    Returns
    -------
    tuple[Decimal, Decimal]
        ``(principal, interest)`` still outstanding on the installment.
    """
    if installment.total_amount == _ZERO:
        return _ZERO, _ZERO

    paid = installment.paid_amount
    total = installment.total_amount
    principal = max(_ZERO, installment.principal_amount - paid * installment.principal_amount / total)
    interest = max(_ZERO, installment.interest_amount - paid * installment.interest_amount / total)
    return principal, interest


def validate_payment_amount(
    installment: Installment,
    amount: Any,
    tolerance: Any = Decimal("0.01"),
) -> Decimal:
    """Reject a payment that is not positive or exceeds the remaining balance.

    Returns
    -------
    Decimal
        The validated amount.

    Raises
    ------
    InvalidInputError
        If ``amount <= 0`` or ``amount > remaining + tolerance``.
    """
    value = to_decimal(amount, "amount")
    if value <= _ZERO:
        raise InvalidInputError(f"Payment amount must be > 0, got {value}")

    remaining = remaining_balance(installment)
    if value > remaining + to_decimal(tolerance, "tolerance"):
        raise InvalidInputError(
            f"Payment amount {value} cannot exceed remaining amount of {remaining}"
        )
    return value


def make_payment(
    installment: Installment,
    amount: Any,
    payment_date: Any,
    principal_amount: Any = None,
    interest_amount: Any = None,
    method: str = "Cash",
    notes: str = "",
    payment_id: str | None = None,
) -> Payment:
    """Build a payment for ``installment``.

    When no split is given the amount is divided in the same proportion as
    the installment's principal and interest shares.
    """
    value = to_decimal(amount, "amount")

    if principal_amount is None and interest_amount is None:
        if installment.total_amount == _ZERO:
            principal, interest = value, _ZERO
        else:
            principal = value * installment.principal_amount / installment.total_amount
            interest = value - principal
    else:
        principal = to_decimal(principal_amount or 0, "principal_amount")
        interest = to_decimal(interest_amount or 0, "interest_amount")

    return Payment(
        payment_id=payment_id or str(uuid.uuid4()),
        loan_id=installment.loan_id,
        installment_id=installment.installment_id,
        amount=value,
        principal_amount=principal,
        interest_amount=interest,
        payment_date=to_date(payment_date, "payment_date"),
        method=method,
        notes=notes,
    )
