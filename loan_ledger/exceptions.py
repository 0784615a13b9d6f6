"""Custom exception hierarchy for loan-ledger."""


class LoanLedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class InvalidInputError(LoanLedgerError, ValueError):
    """Raised when loan terms, dates or amounts are invalid."""


class ArithmeticDegeneracyError(LoanLedgerError, ZeroDivisionError):
    """Raised when an inverse calculation would divide by zero."""


class EntityNotFoundError(LoanLedgerError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(LoanLedgerError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(LoanLedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(LoanLedgerError):
    """Raised when a sink operation fails."""
