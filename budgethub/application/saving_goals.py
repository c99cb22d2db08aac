"""
Saving goal auto-allocation - monthly increment of amount_saved.

For each goal with auto_allocation_enabled:
  - skip when monthly_allocation <= 0 or the goal is already fully funded
  - amount_saved += monthly_allocation, capped at goal_amount (0 = no cap)
"""
import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from budgethub.domain.result import Ok, Err, Result
from budgethub.domain.saving_goal import next_amount_saved
from budgethub.infrastructure.db.models import SavingGoal
from budgethub.infrastructure.db.queries import get_auto_allocation_goals

logger = logging.getLogger(__name__)


@dataclass
class AllocationStats:
    processed: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def allocate_saving_goals(db: Session, now: datetime | None = None) -> Result[AllocationStats]:
    if now is None:
        now = datetime.now(timezone.utc)

    fetched = get_auto_allocation_goals(db)
    if isinstance(fetched, Err):
        return fetched

    goal_ids = [g.id for g in fetched.data]
    logger.info("Found %d goals with auto-allocation enabled", len(goal_ids))

    stats = AllocationStats()
    for goal_id in goal_ids:
        try:
            goal = db.get(SavingGoal, goal_id)
            if goal is None:
                continue
            new_saved = next_amount_saved(goal.amount_saved, goal.goal_amount, goal.monthly_allocation)
            if new_saved is None:
                logger.debug("Goal %d skipped (no allocation or fully funded)", goal_id)
                continue

            goal.amount_saved = new_saved
            goal.updated_at = now
            db.commit()
        except Exception:
            db.rollback()
            stats.failed += 1
            logger.exception("Failed to process goal %d", goal_id)
            continue
        stats.processed += 1

    message = f"Auto-allocation completed. Processed: {stats.processed}, Failed: {stats.failed}"
    logger.info(message)
    return Ok(stats, message)
