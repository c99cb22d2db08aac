"""
Job handler: recurring transaction generation (hourly).
"""
from budgethub.application.recurring_transactions import generate_recurring_transactions
from budgethub.handlers.base import run_job
from budgethub.infrastructure.db.session import Database


def handler(database: Database) -> dict:
    return run_job(
        database,
        "recurring transaction generation",
        generate_recurring_transactions,
        lambda stats: {"stats": stats.to_dict()},
    )
