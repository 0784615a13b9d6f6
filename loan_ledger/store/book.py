"""In-memory loan book with referential integrity and per-loan write locks."""

import logging
import threading
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from loan_ledger.config import LedgerConfig
from loan_ledger.engine import ledger
from loan_ledger.engine.portfolio import build_dashboard, monthly_report
from loan_ledger.engine.schedule import build_loan, generate_installments, validate_loan_terms
from loan_ledger.engine.status import derive_loan_status, refresh_statuses
from loan_ledger.engine.values import to_enum
from loan_ledger.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    InvalidInputError,
    ReferentialIntegrityError,
)
from loan_ledger.models.dashboard import DashboardStats, MonthlyReport
from loan_ledger.models.enums import LoanStatus
from loan_ledger.models.loan import Installment, Loan, Payment

logger = logging.getLogger(__name__)

# Loan fields that may change after creation without regenerating the schedule
UPDATABLE_LOAN_FIELDS = frozenset(
    {"status", "notes", "borrower_name", "borrower_phone", "customer_id"}
)


@dataclass
class LoanBook:
    """Loans, installments and payments keyed by id.

    Writes to one loan's installments are serialized through a lock per
    loan id, so concurrent payments against the same loan cannot race on
    an installment's paid amount. Reads are not locked.
    """

    loans: dict[str, Loan] = field(default_factory=dict)
    installments: dict[str, Installment] = field(default_factory=dict)
    payments: dict[str, Payment] = field(default_factory=dict)

    # Relationship indexes
    _loan_installments: dict[str, list[str]] = field(default_factory=dict)
    _loan_payments: dict[str, list[str]] = field(default_factory=dict)

    _locks: dict[str, threading.Lock] = field(default_factory=dict, repr=False)
    _locks_guard: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def loan_lock(self, loan_id: str) -> threading.Lock:
        """Get the write lock for ``loan_id``."""
        with self._locks_guard:
            if loan_id not in self._locks:
                self._locks[loan_id] = threading.Lock()
            return self._locks[loan_id]

    # Loans
    def add_loan(self, loan: Loan, installments: list[Installment] | None = None) -> list[Installment]:
        """Add a loan together with its installments.

        The schedule is generated when ``installments`` is not given.
        Everything is validated before anything is stored.
        """
        if loan.loan_id in self.loans:
            raise InvalidEntityStateError(f"Loan {loan.loan_id} already exists")

        validate_loan_terms(loan)
        if installments is None:
            installments = generate_installments(loan)

        if not installments:
            raise InvalidInputError(f"Loan {loan.loan_id} has no installments")
        seen: set[str] = set()
        for inst in installments:
            if inst.loan_id != loan.loan_id:
                raise ReferentialIntegrityError(
                    f"Installment {inst.installment_id} belongs to loan {inst.loan_id}"
                )
            if inst.installment_id in self.installments or inst.installment_id in seen:
                raise InvalidEntityStateError(f"Installment {inst.installment_id} already exists")
            seen.add(inst.installment_id)

        with self.loan_lock(loan.loan_id):
            self.loans[loan.loan_id] = loan
            self._loan_installments[loan.loan_id] = []
            self._loan_payments[loan.loan_id] = []
            for inst in installments:
                self.installments[inst.installment_id] = inst
                self._loan_installments[loan.loan_id].append(inst.installment_id)

        logger.debug("Added loan %s with %d installments", loan.loan_id, len(installments))
        return list(installments)

    def create_loan(self, **terms: Any) -> tuple[Loan, list[Installment]]:
        """Build a loan from loose terms and add it (see ``build_loan``)."""
        loan, installments = build_loan(**terms)
        self.add_loan(loan, installments)
        return loan, installments

    def update_loan(self, loan_id: str, **updates: Any) -> Loan:
        """Change descriptive fields or the status of a loan.

        Term fields (principal, rate, dates, count) are rejected because
        the existing schedule would no longer match them.
        """
        loan = self.get_loan(loan_id)
        invalid = set(updates) - UPDATABLE_LOAN_FIELDS
        if invalid:
            raise InvalidInputError(f"Cannot update loan fields: {', '.join(sorted(invalid))}")
        if "status" in updates:
            updates["status"] = to_enum(LoanStatus, updates["status"], "status")

        with self.loan_lock(loan_id):
            updated = replace(loan, **updates)
            self.loans[loan_id] = updated
        return updated

    def delete_loan(self, loan_id: str) -> None:
        """Remove a loan with all of its installments and payments."""
        self.get_loan(loan_id)

        with self.loan_lock(loan_id):
            for inst_id in self._loan_installments.pop(loan_id, []):
                del self.installments[inst_id]
            for payment_id in self._loan_payments.pop(loan_id, []):
                del self.payments[payment_id]
            del self.loans[loan_id]

        with self._locks_guard:
            self._locks.pop(loan_id, None)
        logger.info("Deleted loan %s", loan_id)

    # Payments
    def check_payment_amount(
        self, installment_id: str, amount: Any, config: LedgerConfig | None = None
    ) -> Decimal:
        """Validate ``amount`` against what is still due on an installment.

        Uses the configured overpayment tolerance. Call this before
        :meth:`record_payment` to reject overpayments.
        """
        config = config or LedgerConfig()
        return ledger.validate_payment_amount(
            self.get_installment(installment_id), amount, config.overpayment_tolerance
        )

    def record_payment(self, payment: Payment, as_of: Any = None) -> Installment:
        """Apply a payment and complete the loan once fully paid.

        Raises
        ------
        ReferentialIntegrityError
            If the installment or loan does not exist.
        InvalidEntityStateError
            If a payment with the same id was already recorded.
        """
        payment = ledger.normalize_payment(payment)

        if payment.loan_id not in self.loans:
            raise ReferentialIntegrityError(f"Loan {payment.loan_id} not found")

        with self.loan_lock(payment.loan_id):
            installment = self.installments.get(payment.installment_id)
            if installment is None:
                raise ReferentialIntegrityError(f"Installment {payment.installment_id} not found")
            if payment.payment_id in self.payments:
                raise InvalidEntityStateError(f"Payment {payment.payment_id} already recorded")

            updated = ledger.record_payment(installment, payment, as_of)
            self.installments[updated.installment_id] = updated
            self.payments[payment.payment_id] = payment
            self._loan_payments[payment.loan_id].append(payment.payment_id)

            loan = self.loans[payment.loan_id]
            self.loans[loan.loan_id] = ledger.settle_loan(
                loan, self.get_loan_installments(loan.loan_id)
            )

        return updated

    def delete_payment(self, payment_id: str, as_of: Any = None) -> Installment:
        """Reverse and remove a recorded payment.

        The installment's paid date falls back to the latest remaining
        payment against it. A completed loan that is no longer fully paid
        becomes active again.

        Raises
        ------
        EntityNotFoundError
            If no payment with ``payment_id`` exists.
        """
        payment = self.payments.get(payment_id)
        if payment is None:
            raise EntityNotFoundError(f"Payment {payment_id} not found")

        with self.loan_lock(payment.loan_id):
            installment = self.installments.get(payment.installment_id)
            if installment is None:
                raise ReferentialIntegrityError(f"Installment {payment.installment_id} not found")

            updated = ledger.delete_payment(installment, payment, as_of)
            del self.payments[payment_id]
            self._loan_payments[payment.loan_id].remove(payment_id)

            if updated.paid_date is not None:
                remaining = [
                    p.payment_date
                    for p in self.get_loan_payments(payment.loan_id)
                    if p.installment_id == installment.installment_id
                ]
                updated = replace(updated, paid_date=max(remaining) if remaining else None)
            self.installments[updated.installment_id] = updated

            loan = self.loans[payment.loan_id]
            self.loans[loan.loan_id] = ledger.reopen_loan(
                loan, self.get_loan_installments(loan.loan_id)
            )

        return updated

    # Status maintenance
    def refresh(self, as_of: Any = None) -> None:
        """Re-derive every installment status against ``as_of``."""
        for inst in refresh_statuses(list(self.installments.values()), as_of):
            self.installments[inst.installment_id] = inst

    def sync_loan_statuses(self, as_of: Any = None) -> None:
        """Re-derive every loan status from its installments."""
        for loan_id, loan in list(self.loans.items()):
            status = derive_loan_status(loan, self.get_loan_installments(loan_id), as_of)
            if status != loan.status:
                logger.info("Loan %s status %s -> %s", loan_id, loan.status.value, status.value)
                self.loans[loan_id] = replace(loan, status=status)

    # Query methods
    def get_loan(self, loan_id: str) -> Loan:
        """Get a loan by id."""
        try:
            return self.loans[loan_id]
        except KeyError:
            raise EntityNotFoundError(f"Loan {loan_id} not found") from None

    def get_installment(self, installment_id: str) -> Installment:
        """Get an installment by id."""
        try:
            return self.installments[installment_id]
        except KeyError:
            raise EntityNotFoundError(f"Installment {installment_id} not found") from None

    def get_loan_installments(self, loan_id: str) -> list[Installment]:
        """Get all installments for a loan, in sequence order."""
        ids = self._loan_installments.get(loan_id, [])
        return sorted(
            (self.installments[i] for i in ids), key=lambda inst: inst.installment_number
        )

    def get_loan_payments(self, loan_id: str) -> list[Payment]:
        """Get all payments for a loan, newest first."""
        ids = self._loan_payments.get(loan_id, [])
        return sorted(
            (self.payments[p] for p in ids), key=lambda pay: pay.payment_date, reverse=True
        )

    def dashboard(self, as_of: Any = None, config: LedgerConfig | None = None) -> DashboardStats:
        """Portfolio statistics for the whole book."""
        return build_dashboard(
            self.loans.values(),
            self.installments.values(),
            self.payments.values(),
            as_of=as_of,
            config=config,
        )

    def monthly_report(self) -> list[MonthlyReport]:
        """Monthly lending and collection activity."""
        return monthly_report(self.loans.values(), self.payments.values())

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "loans": len(self.loans),
            "installments": len(self.installments),
            "payments": len(self.payments),
        }
