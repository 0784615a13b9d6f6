"""Scenarios for generating demo loan books."""

from loan_ledger.scenarios.loan_portfolio import LoanPortfolioScenario

__all__ = ["LoanPortfolioScenario"]
