"""Loan portfolio scenario for generating a demo book with payment history."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Any

from loan_ledger.config import LedgerConfig, ScenarioConfig
from loan_ledger.generators import LoanGenerator, PaymentBehavior
from loan_ledger.models.dashboard import DashboardStats
from loan_ledger.models.enums import LoanStatus
from loan_ledger.store.book import LoanBook

logger = logging.getLogger(__name__)


class LoanPortfolioScenario:
    """Generate a realistic loan book.

    This scenario creates:
    - Borrowers with one or more loans each
    - Flat-split installment schedules from the engine
    - Payments recorded through the ledger with a behavior per loan:
        - On time
        - Late (5-30 days)
        - Partial payers
        - Defaulters (stop after a few installments)
    """

    def __init__(
        self,
        num_borrowers: int = 20,
        loans_per_borrower: int = 1,
        on_time_rate: float = 0.70,
        late_rate: float = 0.15,
        partial_rate: float = 0.10,
        default_rate: float = 0.05,
        seed: int | None = None,
        as_of: date | None = None,
        *,
        config: ScenarioConfig | None = None,
    ) -> None:
        """Initialize loan portfolio scenario.

        Parameters
        ----------
        num_borrowers : int
            Number of borrowers to generate.
        loans_per_borrower : int
            Loans issued to each borrower.
        on_time_rate, late_rate, partial_rate, default_rate : float
            Relative weights of borrower behaviors.
        seed : int | None
            Random seed for reproducibility.
        as_of : date | None
            Reference date for payments and statuses (default: today).
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            keyword arguments above.
        """
        if config is not None:
            num_borrowers = config.num_borrowers
            loans_per_borrower = config.loans_per_borrower
            on_time_rate = config.on_time_rate
            late_rate = config.late_rate
            partial_rate = config.partial_rate
            default_rate = config.default_rate
            as_of = config.as_of or as_of

        self.config = config
        self.name = config.name if config is not None else "loan_portfolio"
        self.num_borrowers = num_borrowers
        self.loans_per_borrower = loans_per_borrower
        self.weights = {
            "on_time_rate": on_time_rate,
            "late_rate": late_rate,
            "partial_rate": partial_rate,
            "default_rate": default_rate,
        }
        self.seed = seed
        self.as_of = as_of or date.today()

        if seed is not None:
            random.seed(seed)

        self.book = LoanBook()
        self._loan_gen = LoanGenerator(seed=seed)
        self._payment_behavior = PaymentBehavior(seed=seed)
        self.behaviors: dict[str, str] = {}

    def generate(self) -> LoanBook:
        """Generate all loans and payments.

        Returns
        -------
        LoanBook
            Book containing the generated portfolio.
        """
        logger.info(
            "Starting scenario %s: %d borrowers, %d loans each, as of %s",
            self.name,
            self.num_borrowers,
            self.loans_per_borrower,
            self.as_of.isoformat(),
        )

        for _ in range(self.num_borrowers):
            customer_id = self._loan_gen.new_id()
            for _ in range(self.loans_per_borrower):
                loan, installments = self._loan_gen.generate(customer_id, as_of=self.as_of)
                self.book.add_loan(loan, installments)

                behavior = self._payment_behavior.pick_behavior(**self.weights)
                self.behaviors[loan.loan_id] = behavior
                self._payment_behavior.apply_payment_behavior(
                    self.book, loan.loan_id, behavior=behavior, reference_date=self.as_of
                )

        self.book.refresh(self.as_of)

        logger.info(
            "Generated %d loans (%d completed, %d defaulted) with %d installments and %d payments",
            len(self.book.loans),
            sum(1 for l in self.book.loans.values() if l.status == LoanStatus.COMPLETED),
            sum(1 for l in self.book.loans.values() if l.status == LoanStatus.DEFAULTED),
            len(self.book.installments),
            len(self.book.payments),
        )

        return self.book

    def export(self, sinks: list[Any], ledger_config: LedgerConfig | None = None) -> None:
        """Export the book and its dashboard to sinks.

        Parameters
        ----------
        sinks : list[Any]
            Sink instances exposing ``write_batch`` and ``write_record``.
        ledger_config : LedgerConfig | None
            Dashboard settings.
        """
        dashboard = self.get_portfolio_summary(ledger_config)
        for sink in sinks:
            sink.write_batch("loans", list(self.book.loans.values()))
            sink.write_batch("installments", list(self.book.installments.values()))
            sink.write_batch("payments", list(self.book.payments.values()))
            sink.write_batch("monthly_report", self.book.monthly_report())
            sink.write_record("dashboard", dashboard)

        logger.info("Exported loan portfolio to %d sinks", len(sinks))

    def get_portfolio_summary(self, ledger_config: LedgerConfig | None = None) -> DashboardStats:
        """Dashboard statistics for the generated book on ``as_of``."""
        return self.book.dashboard(as_of=self.as_of, config=ledger_config)
