"""
Job name -> handler mapping used by the scheduler, the operator endpoint and the CLI.
"""
from typing import Callable

from budgethub.handlers import budget_alerts, budget_rollover, recurring_transactions, savings_goal_allocation
from budgethub.infrastructure.db.session import Database

JobHandler = Callable[[Database], dict]

JOBS: dict[str, JobHandler] = {
    "recurring-transactions": recurring_transactions.handler,
    "budget-rollover": budget_rollover.handler,
    "savings-goal-allocation": savings_goal_allocation.handler,
    "budget-alerts": budget_alerts.handler,
}
