"""
Background scheduler: runs the batch jobs inside the FastAPI process.

Jobs (UTC):
  - Recurring transactions (every hour at :00)
  - Budget alerts (every hour at :30)
  - Budget rollover (1st of the month, 00:05)
  - Savings goal allocation (1st of the month, 01:00)
"""
import json
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from budgethub.handlers.registry import JOBS
from budgethub.infrastructure.db.session import Database

logger = logging.getLogger(__name__)

# job name -> cron trigger arguments
SCHEDULES: dict[str, dict] = {
    "recurring-transactions": {"minute": 0},
    "budget-alerts": {"minute": 30},
    "budget-rollover": {"day": 1, "hour": 0, "minute": 5},
    "savings-goal-allocation": {"day": 1, "hour": 1, "minute": 0},
}


def run_scheduled_job(database: Database, job_name: str) -> dict:
    """Run one handler and log its outcome."""
    result = JOBS[job_name](database)
    body = json.loads(result["body"])
    if result["statusCode"] == 200:
        logger.info("Job %s finished: %s", job_name, body.get("message"))
    else:
        logger.warning("Job %s returned %d: %s", job_name, result["statusCode"], body.get("message"))
    return result


def build_scheduler(database: Database) -> BackgroundScheduler:
    """Create a scheduler with all periodic jobs registered (not started)."""
    scheduler = BackgroundScheduler(daemon=True, timezone="UTC")
    for job_name, cron in SCHEDULES.items():
        scheduler.add_job(
            run_scheduled_job,
            CronTrigger(timezone="UTC", **cron),
            args=[database, job_name],
            id=job_name,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
    return scheduler


def start_scheduler(database: Database) -> BackgroundScheduler:
    """Start the background scheduler with all periodic jobs."""
    scheduler = build_scheduler(database)
    scheduler.start()
    logger.info(
        "Scheduler started: recurring-transactions (hourly :00), budget-alerts (hourly :30), "
        "budget-rollover (1st 00:05 UTC), savings-goal-allocation (1st 01:00 UTC)"
    )
    return scheduler


def shutdown_scheduler(scheduler: BackgroundScheduler) -> None:
    """Gracefully stop the scheduler."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
