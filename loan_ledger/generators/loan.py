"""Loan generator producing demo loans through the schedule engine."""

import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from loan_ledger.engine.interest import schedule_end_date
from loan_ledger.engine.schedule import build_loan
from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models.enums import InstallmentFrequency, InterestType
from loan_ledger.models.loan import Installment, Loan


class LoanGenerator(BaseGenerator):
    """Generate synthetic personal loans with their installments."""

    FREQUENCIES = list(InstallmentFrequency)
    FREQUENCY_WEIGHTS = [0.15, 0.15, 0.55, 0.10, 0.05]

    # Installment counts offered per frequency
    INSTALLMENT_COUNTS = {
        InstallmentFrequency.WEEKLY: [4, 8, 12, 26],
        InstallmentFrequency.BIWEEKLY: [4, 6, 12, 26],
        InstallmentFrequency.MONTHLY: [3, 6, 12, 18, 24],
        InstallmentFrequency.QUARTERLY: [2, 4, 8],
        InstallmentFrequency.YEARLY: [1, 2, 3],
    }

    def generate(
        self,
        customer_id: str | None = None,
        as_of: date | None = None,
    ) -> tuple[Loan, list[Installment]]:
        """Generate a loan with installments.

        Parameters
        ----------
        customer_id : str | None
            Borrower id (a new one is made up when omitted).
        as_of : date | None
            Reference date; loans start up to a year before it.

        Returns
        -------
        tuple[Loan, list[Installment]]
            Generated loan and its installments.
        """
        as_of = as_of or date.today()

        frequency = random.choices(self.FREQUENCIES, weights=self.FREQUENCY_WEIGHTS, k=1)[0]
        count = random.choice(self.INSTALLMENT_COUNTS[frequency])
        start_date = as_of - timedelta(days=random.randint(0, 365))
        end_date = schedule_end_date(start_date, frequency, count)

        principal = Decimal(random.randint(1, 50) * 1000)
        interest_type = random.choices(
            [InterestType.SIMPLE, InterestType.COMPOUND], weights=[0.7, 0.3], k=1
        )[0]

        # Lenders sometimes agree on a flat interest amount instead of a rate
        if random.random() < 0.25:
            rate = None
            amount = (principal * Decimal(random.randint(5, 30)) / 100).quantize(Decimal("1"))
        else:
            rate = Decimal(random.choice([6, 8, 10, 12, 15, 18, 24]))
            amount = None

        name, phone = self.borrower()
        return build_loan(
            loan_id=self.new_id(),
            customer_id=customer_id or self.new_id(),
            principal=principal,
            interest_type=interest_type,
            start_date=start_date,
            end_date=end_date,
            installment_frequency=frequency,
            number_of_installments=count,
            interest_rate=rate,
            interest_amount=amount,
            borrower_name=name,
            borrower_phone=phone,
            created_at=datetime.combine(start_date, datetime.min.time()),
        )
