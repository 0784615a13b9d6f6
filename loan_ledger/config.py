"""Configuration management for loan-ledger."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from loan_ledger.exceptions import ConfigurationError


@dataclass
class LedgerConfig:
    """Engine and dashboard tuning."""

    upcoming_window_days: int = 7
    upcoming_limit: int = 5
    overdue_limit: int | None = None
    overpayment_tolerance: Decimal = Decimal("0.01")


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for demo portfolio generation."""

    name: str
    num_borrowers: int = 20
    loans_per_borrower: int = 1
    on_time_rate: float = 0.70
    late_rate: float = 0.15
    partial_rate: float = 0.10
    default_rate: float = 0.05
    as_of: date | None = None


@dataclass
class LoanLedgerConfig:
    """Main configuration for loan-ledger."""

    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LoanLedgerConfig":
        """Create config from environment variables."""
        import os

        overdue_limit = os.getenv("OVERDUE_LIMIT")

        try:
            ledger = LedgerConfig(
                upcoming_window_days=int(os.getenv("UPCOMING_WINDOW_DAYS", "7")),
                upcoming_limit=int(os.getenv("UPCOMING_LIMIT", "5")),
                overdue_limit=int(overdue_limit) if overdue_limit else None,
                overpayment_tolerance=Decimal(os.getenv("OVERPAYMENT_TOLERANCE", "0.01")),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ValueError, InvalidOperation) as exc:
            raise ConfigurationError(f"Invalid ledger configuration: {exc}") from exc

        if ledger.upcoming_window_days < 0 or ledger.upcoming_limit < 0:
            raise ConfigurationError("UPCOMING_WINDOW_DAYS and UPCOMING_LIMIT must be >= 0")
        if ledger.overdue_limit is not None and ledger.overdue_limit < 0:
            raise ConfigurationError("OVERDUE_LIMIT must be >= 0")

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            ledger=ledger,
            output=output,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
