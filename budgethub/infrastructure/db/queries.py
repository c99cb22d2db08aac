"""
Read queries used by the scheduled jobs.

Each function returns a Result: the rows on success, Err(INFRASTRUCTURE)
when the database call itself fails.
"""
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from budgethub.domain.result import Ok, Err, ErrorKind, Result
from budgethub.infrastructure.db.models import (
    Hub, RecurringTransactionTemplate, SavingGoal, Transaction,
    TEMPLATE_STATUS_ACTIVE, TRANSACTION_TYPE_EXPENSE,
)

logger = logging.getLogger(__name__)


def get_active_recurring_templates(db: Session) -> Result[list[RecurringTransactionTemplate]]:
    try:
        rows = db.query(RecurringTransactionTemplate).filter(
            RecurringTransactionTemplate.status == TEMPLATE_STATUS_ACTIVE,
        ).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load active recurring templates")
        return Err(ErrorKind.INFRASTRUCTURE, f"Failed to load recurring templates: {exc}")
    return Ok(rows, f"Loaded {len(rows)} active templates")


def get_all_hubs(db: Session) -> Result[list[Hub]]:
    try:
        rows = db.query(Hub).order_by(Hub.id).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load hubs")
        return Err(ErrorKind.INFRASTRUCTURE, f"Failed to load hubs: {exc}")
    return Ok(rows, f"Loaded {len(rows)} hubs")


def get_auto_allocation_goals(db: Session) -> Result[list[SavingGoal]]:
    try:
        rows = db.query(SavingGoal).filter(
            SavingGoal.auto_allocation_enabled == True,  # noqa: E712
        ).all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load saving goals")
        return Err(ErrorKind.INFRASTRUCTURE, f"Failed to load saving goals: {exc}")
    return Ok(rows, f"Loaded {len(rows)} goals with auto-allocation")


def get_category_expenses(
    db: Session,
    hub_id: int,
    category_id: int | None,
    date_from: date,
    date_to: date,
) -> Decimal:
    """Sum of expenses booked to the category in [date_from, date_to]."""
    if category_id is None:
        return Decimal("0")
    total = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
        Transaction.hub_id == hub_id,
        Transaction.category_id == category_id,
        Transaction.type == TRANSACTION_TYPE_EXPENSE,
        Transaction.occurred_on >= date_from,
        Transaction.occurred_on <= date_to,
    ).scalar()
    return Decimal(str(total)).quantize(Decimal("0.01"))
