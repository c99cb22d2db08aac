"""
Job handler: monthly budget rollover (1st of the month, 00:05 UTC).
"""
from budgethub.application.budget_rollover import perform_monthly_rollover
from budgethub.handlers.base import run_job
from budgethub.infrastructure.db.session import Database


def handler(database: Database) -> dict:
    return run_job(
        database,
        "budget rollover",
        perform_monthly_rollover,
        lambda stats: stats.to_dict(),
    )
