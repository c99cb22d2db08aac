"""
Job handler: budget threshold alerts (hourly).
"""
from budgethub.application.budget_alerts import check_budget_thresholds
from budgethub.handlers.base import run_job
from budgethub.infrastructure.db.session import Database


def handler(database: Database) -> dict:
    return run_job(
        database,
        "budget alerts",
        check_budget_thresholds,
        lambda stats: stats.to_dict(),
    )
