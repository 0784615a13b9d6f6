"""Output sinks for exporting loan book data."""

from loan_ledger.sinks.json_file import JsonFileSink

__all__ = ["JsonFileSink"]
