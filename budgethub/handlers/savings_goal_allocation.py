"""
Job handler: saving goal auto-allocation (1st of the month, 01:00 UTC).
"""
from budgethub.application.saving_goals import allocate_saving_goals
from budgethub.handlers.base import run_job
from budgethub.infrastructure.db.session import Database


def handler(database: Database) -> dict:
    return run_job(
        database,
        "savings goal auto-allocation",
        allocate_saving_goals,
        lambda stats: stats.to_dict(),
    )
