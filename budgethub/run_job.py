"""
Run one scheduled job by hand (diagnostics, missed cron runs)

Usage:
    python -m budgethub.run_job recurring-transactions
    python -m budgethub.run_job budget-rollover
"""
import argparse
import json
import logging
import sys

from budgethub.config import get_settings
from budgethub.handlers.registry import JOBS
from budgethub.infrastructure.db.session import Database


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a Budget Hub batch job once")
    parser.add_argument("job", choices=sorted(JOBS))
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    database = Database.from_settings(get_settings())
    try:
        result = JOBS[args.job](database)
    finally:
        database.dispose()

    print(json.dumps(json.loads(result["body"]), indent=2, ensure_ascii=False))
    return 0 if result["statusCode"] == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
