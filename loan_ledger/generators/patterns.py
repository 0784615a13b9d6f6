"""Behavioral patterns for realistic payment histories."""

import random
from datetime import date, timedelta
from decimal import Decimal

from loan_ledger.engine.ledger import make_payment, remaining_balance
from loan_ledger.models.enums import LoanStatus
from loan_ledger.models.loan import Payment
from loan_ledger.store.book import LoanBook

PAYMENT_METHODS = ["Cash", "Bank Transfer", "Cheque", "Card"]
BEHAVIORS = ["good", "late", "partial", "defaulter"]


class PaymentBehavior:
    """Simulate how a borrower pays a loan's installments."""

    def __init__(self, seed: int | None = None) -> None:
        if seed is not None:
            random.seed(seed)

    def pick_behavior(
        self,
        on_time_rate: float = 0.70,
        late_rate: float = 0.15,
        partial_rate: float = 0.10,
        default_rate: float = 0.05,
    ) -> str:
        """Pick a borrower behavior type by weight."""
        return random.choices(
            BEHAVIORS,
            weights=[on_time_rate, late_rate, partial_rate, default_rate],
            k=1,
        )[0]

    def apply_payment_behavior(
        self,
        book: LoanBook,
        loan_id: str,
        behavior: str | None = None,
        reference_date: date | None = None,
    ) -> list[Payment]:
        """Record payments for every installment of a loan due by ``reference_date``.

        Parameters
        ----------
        book : LoanBook
            Book holding the loan; payments are recorded into it.
        loan_id : str
            Loan to pay.
        behavior : str | None
            One of ``good``, ``late``, ``partial``, ``defaulter``
            (picked at random when omitted).
        reference_date : date | None
            Current date; installments due later stay untouched.

        Returns
        -------
        list[Payment]
            Payments recorded.
        """
        if reference_date is None:
            reference_date = date.today()
        if behavior is None:
            behavior = self.pick_behavior()

        recorded = []
        consecutive_missed = 0
        stop_after = random.randint(1, 3)

        for inst in book.get_loan_installments(loan_id):
            if inst.due_date > reference_date:
                break

            due = remaining_balance(inst)
            if behavior == "good":
                amount = due
                paid_on = inst.due_date - timedelta(days=random.randint(0, 3))
            elif behavior == "late":
                amount = due
                paid_on = inst.due_date + timedelta(days=random.randint(5, 30))
            elif behavior == "partial":
                # Pays 30-70% of what is due
                amount = (due * Decimal(random.randint(30, 70)) / 100).quantize(Decimal("0.01"))
                paid_on = inst.due_date + timedelta(days=random.randint(0, 10))
            else:  # defaulter
                if inst.installment_number > stop_after:
                    consecutive_missed += 1
                    continue
                amount = due
                paid_on = inst.due_date + timedelta(days=random.randint(0, 15))

            if paid_on > reference_date or amount <= 0:
                continue

            payment = make_payment(
                inst,
                amount,
                paid_on,
                method=random.choice(PAYMENT_METHODS),
            )
            book.record_payment(payment, as_of=reference_date)
            recorded.append(payment)

        if behavior == "defaulter" and consecutive_missed >= 3:
            book.update_loan(loan_id, status=LoanStatus.DEFAULTED)

        return recorded
