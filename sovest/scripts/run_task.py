#!/usr/bin/env python3
"""
Command line entry point for scheduled tasks.

Example crontab:
    0 0 * * *  sovest-task evaluate
    0 * * * *  sovest-task update-prices
"""

import argparse
import json
import sys

from sovest.app_logging import setup_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sovest-task", description="SoVest scheduled tasks")
    subcommands = parser.add_subparsers(dest="command", required=True)
    subcommands.add_parser("init-db", help="Create database tables")
    subcommands.add_parser("init-stocks", help="Track the configured default stocks")
    subcommands.add_parser("evaluate", help="Evaluate expired predictions")
    subcommands.add_parser("update-prices", help="Refresh prices for all active stocks")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()

    from sovest.storage.db import init_db
    from sovest.jobs.scoring import (
        job_evaluate_predictions, job_initialize_default_stocks, job_update_stock_prices
    )

    tasks = {
        "init-db": init_db,
        "init-stocks": job_initialize_default_stocks,
        "evaluate": job_evaluate_predictions,
        "update-prices": job_update_stock_prices,
    }

    try:
        result = tasks[args.command]()
    except Exception as e:
        logger.error(f"Task {args.command} failed: {e}", exc_info=True)
        return 1

    if result is not None:
        print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
