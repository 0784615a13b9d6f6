"""Loan engine: interest, schedules, status, payments and aggregation."""

from loan_ledger.engine.interest import (
    duration_in_months,
    implied_rate,
    interest_amount,
    interval_days,
    schedule_end_date,
    total_interest,
)
from loan_ledger.engine.ledger import (
    delete_payment,
    make_payment,
    record_payment,
    remaining_balance,
    settle_loan,
    suggest_payment_split,
    validate_payment_amount,
)
from loan_ledger.engine.portfolio import build_dashboard, monthly_report
from loan_ledger.engine.schedule import build_loan, generate_installments
from loan_ledger.engine.status import derive_loan_status, derive_status, refresh_statuses

__all__ = [
    "build_dashboard",
    "build_loan",
    "delete_payment",
    "derive_loan_status",
    "derive_status",
    "duration_in_months",
    "generate_installments",
    "implied_rate",
    "interest_amount",
    "interval_days",
    "make_payment",
    "monthly_report",
    "record_payment",
    "refresh_statuses",
    "remaining_balance",
    "schedule_end_date",
    "settle_loan",
    "suggest_payment_split",
    "total_interest",
    "validate_payment_amount",
]
