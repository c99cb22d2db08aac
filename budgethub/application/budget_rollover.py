"""
Monthly budget rollover - creates budget instances of the target month for every hub.

Runs on the 1st of each month. Each hub is processed in its own unit of
work; a failing hub is rolled back, logged and counted, the others go on.
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date

from sqlalchemy.orm import Session

from budgethub.application.budget import ensure_budget_instances
from budgethub.domain.budget import validate_period
from budgethub.domain.result import Ok, Err, ErrorKind, Result
from budgethub.infrastructure.db.queries import get_all_hubs
from budgethub.utils.dates import local_today

logger = logging.getLogger(__name__)


@dataclass
class RolloverStats:
    processed: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def perform_monthly_rollover(
    db: Session,
    target_month: int | None = None,
    target_year: int | None = None,
    today: date | None = None,
) -> Result[RolloverStats]:
    """
    Ensure budget instances for (target_month, target_year) in all hubs.

    Defaults to the current calendar month. Safe to call repeatedly for the
    same period.
    """
    if today is None:
        today = local_today()
    month = target_month if target_month is not None else today.month
    year = target_year if target_year is not None else today.year

    try:
        validate_period(month, year)
    except ValueError as exc:
        return Err(ErrorKind.VALIDATION, str(exc))

    logger.info("[Budget Rollover] Starting rollover for %d/%d", month, year)

    fetched = get_all_hubs(db)
    if isinstance(fetched, Err):
        return fetched

    hubs = [(hub.id, hub.name) for hub in fetched.data]
    stats = RolloverStats()
    for hub_id, hub_name in hubs:
        try:
            ensure_budget_instances(db, hub_id, month, year)
        except Exception:
            db.rollback()
            stats.failed += 1
            logger.exception("[Budget Rollover] Failed for hub %d", hub_id)
            continue
        stats.processed += 1
        logger.debug("[Budget Rollover] Processed hub: %s (%d)", hub_name, hub_id)

    message = (
        f"Budget rollover completed for {month}/{year}. "
        f"Processed: {stats.processed}, Failed: {stats.failed}"
    )
    logger.info("[Budget Rollover] %s", message)
    return Ok(stats, message)
