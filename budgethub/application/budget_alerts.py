"""
Budget threshold alerts - notify a hub when a budget reaches its warning level (default 80%)
or 100% of its allocation.

At most one notification per (hub, budget, threshold, month).
"""
import logging
from dataclasses import dataclass, asdict
from datetime import date

from sqlalchemy.orm import Session

from budgethub.application.notifications import (
    send_notification, already_notified, BUDGET_THRESHOLD_80, BUDGET_THRESHOLD_100,
)
from budgethub.config import get_settings
from budgethub.domain.budget import period_bounds, period_key, threshold_reached
from budgethub.domain.result import Ok, Err, Result
from budgethub.infrastructure.db.models import Budget, TransactionCategory
from budgethub.infrastructure.db.queries import get_all_hubs, get_category_expenses
from budgethub.utils.dates import local_today
from budgethub.utils.money import format_money

logger = logging.getLogger(__name__)


@dataclass
class AlertStats:
    processed: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def check_budget_thresholds(db: Session, today: date | None = None) -> Result[AlertStats]:
    if today is None:
        today = local_today()

    fetched = get_all_hubs(db)
    if isinstance(fetched, Err):
        return fetched

    currency = get_settings().DEFAULT_CURRENCY
    period = period_key(today.month, today.year)
    date_from, date_to = period_bounds(today.month, today.year)

    hub_ids = [hub.id for hub in fetched.data if hub.budget_email_warnings]
    stats = AlertStats()

    for hub_id in hub_ids:
        try:
            stats.processed += _check_hub(db, hub_id, period, date_from, date_to, currency)
        except Exception:
            db.rollback()
            logger.exception("Budget threshold check failed for hub_id=%d", hub_id)

    message = f"Processed {stats.processed} budget threshold notifications"
    logger.info(message)
    return Ok(stats, message)


def _check_hub(db: Session, hub_id: int, period: str, date_from: date, date_to: date, currency: str) -> int:
    """Create missing threshold notifications for one hub. Returns notifications created."""
    rows = (
        db.query(Budget, TransactionCategory.name)
        .outerjoin(TransactionCategory, TransactionCategory.id == Budget.category_id)
        .filter(Budget.hub_id == hub_id, Budget.allocated_amount > 0)
        .all()
    )

    created = 0
    for budget, category_name in rows:
        spent = (budget.spent_amount or 0) + get_category_expenses(
            db, hub_id, budget.category_id, date_from, date_to,
        )
        threshold = threshold_reached(spent, budget.allocated_amount, budget.warning_percentage)
        if threshold is None:
            continue

        # BUDGET_THRESHOLD_80 is the warning rule whatever the budget's warning level
        rule_code = BUDGET_THRESHOLD_100 if threshold == 100 else BUDGET_THRESHOLD_80
        if already_notified(db, hub_id, rule_code, "budget", budget.id, period):
            continue

        send_notification(
            db,
            hub_id=hub_id,
            rule_code=rule_code,
            entity_type="budget",
            entity_id=budget.id,
            period=period,
            meta={
                "budget_id": budget.id,
                "category_name": category_name,
                "spent_amount": str(spent),
                "allocated_amount": str(budget.allocated_amount),
                "threshold": threshold,
                "period": period,
            },
            category=category_name or "category",
            percentage=threshold,
            spent=format_money(spent, currency),
            allocated=format_money(budget.allocated_amount, currency),
        )
        created += 1

    if created:
        db.commit()
    return created
