#!/usr/bin/env python3
"""Generate a demo loan portfolio and its dashboard as JSON files.

Loans, installments, payments, the monthly report and the dashboard are
written to the output directory, one file per collection.
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_ledger.config import LoanLedgerConfig, ScenarioConfig
from loan_ledger.engine.values import to_date
from loan_ledger.logging import setup_logging
from loan_ledger.scenarios import LoanPortfolioScenario
from loan_ledger.sinks import JsonFileSink

logger = logging.getLogger("loan_ledger.scripts.generate_sample_portfolio")

CENTS = Decimal("0.01")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate a demo loan portfolio and dashboard as JSON"
    )
    parser.add_argument(
        "--borrowers",
        type=int,
        default=20,
        help="Number of borrowers to generate (default: 20)",
    )
    parser.add_argument(
        "--loans-per-borrower",
        type=int,
        default=1,
        help="Loans issued to each borrower (default: 1)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility (default: SEED env or none)",
    )
    parser.add_argument(
        "--as-of",
        type=str,
        default=None,
        help="Reference date YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for JSON files (default: OUTPUT_DIR env or ./output)",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Generate the portfolio and write it out."""
    args = parse_args(argv)
    config = LoanLedgerConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    as_of = to_date(args.as_of, "as_of") if args.as_of else date.today()
    seed = args.seed if args.seed is not None else config.seed
    output_dir = args.output_dir or config.output.json_output_dir

    scenario = LoanPortfolioScenario(
        seed=seed,
        config=ScenarioConfig(
            name="sample_portfolio",
            num_borrowers=args.borrowers,
            loans_per_borrower=args.loans_per_borrower,
            as_of=as_of,
        ),
    )
    scenario.generate()

    sink = JsonFileSink(output_dir, pretty=args.pretty or config.output.pretty_json)
    scenario.export([sink], ledger_config=config.ledger)
    sink.close()

    stats = scenario.get_portfolio_summary(config.ledger)
    logger.info(
        "Lent %s, received %s, outstanding %s, %d overdue installments",
        stats.total_amount_lent,
        stats.total_amount_received.quantize(CENTS),
        stats.total_outstanding.quantize(CENTS),
        stats.overdue_installments_count,
    )


if __name__ == "__main__":
    main()
