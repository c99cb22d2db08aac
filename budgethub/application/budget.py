"""
Budget use cases and query helpers.

BudgetInstance rows are the per-month copies of a hub's Budget plans.
Spent amount of a period = manual spent_amount + expenses booked to the
category within the month (computed on the fly from transactions).
"""
import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from budgethub.domain.budget import (
    validate_period, previous_period, period_bounds, compute_carry_over,
)
from budgethub.infrastructure.db.models import Hub, Budget, BudgetInstance
from budgethub.infrastructure.db.queries import get_category_expenses

logger = logging.getLogger(__name__)


class BudgetValidationError(ValueError):
    pass


def get_budget_instances(db: Session, hub_id: int, month: int, year: int) -> list[BudgetInstance]:
    return db.query(BudgetInstance).filter(
        BudgetInstance.hub_id == hub_id,
        BudgetInstance.month == month,
        BudgetInstance.year == year,
    ).all()


def compute_instance_spent(db: Session, instance: BudgetInstance) -> Decimal:
    """Manual spent amount of the instance plus expenses booked in its month."""
    date_from, date_to = period_bounds(instance.month, instance.year)
    booked = get_category_expenses(db, instance.hub_id, instance.category_id, date_from, date_to)
    return (instance.spent_amount or Decimal("0")) + booked


class EnsureBudgetInstancesUseCase:
    """
    Idempotently ensure every budget of the hub has an instance for (month, year).

    Budgets that already have an instance are left untouched, so carry-over is
    never applied twice. With hub.budget_carry_over enabled the new instance
    receives the previous month's leftover.
    A budget whose category already has an instance in the period (from an
    earlier budget of the same category) is skipped with a warning.
    """

    def __init__(self, db: Session):
        self.db = db

    def execute(self, hub_id: int, month: int, year: int) -> int:
        """
        Returns:
            number of instances created (0 when everything already existed)
        """
        try:
            validate_period(month, year)
        except ValueError as exc:
            raise BudgetValidationError(str(exc)) from exc

        hub = self.db.get(Hub, hub_id)
        if hub is None:
            raise BudgetValidationError(f"Hub #{hub_id} not found")

        budgets = self.db.query(Budget).filter(Budget.hub_id == hub_id).order_by(Budget.id).all()
        if not budgets:
            return 0

        existing = get_budget_instances(self.db, hub_id, month, year)
        existing_budget_ids = {inst.budget_id for inst in existing}
        # one instance per category and period; NULL categories never collide
        taken_categories = {inst.category_id for inst in existing if inst.category_id is not None}
        missing = [b for b in budgets if b.id not in existing_budget_ids]
        if not missing:
            return 0

        previous: dict[int, BudgetInstance] = {}
        if hub.budget_carry_over:
            pm, py = previous_period(month, year)
            previous = {inst.budget_id: inst for inst in get_budget_instances(self.db, hub_id, pm, py)}

        created = 0
        for budget in missing:
            if budget.category_id is not None and budget.category_id in taken_categories:
                logger.warning(
                    "Hub %d: budget %d skipped, category %d already has an instance for %d/%d",
                    hub_id, budget.id, budget.category_id, month, year,
                )
                continue
            taken_categories.add(budget.category_id)

            carry_over = Decimal("0")
            prev = previous.get(budget.id)
            if prev is not None:
                carry_over = compute_carry_over(
                    prev.allocated_amount,
                    prev.carried_over_amount,
                    compute_instance_spent(self.db, prev),
                )

            self.db.add(BudgetInstance(
                budget_id=budget.id,
                hub_id=hub_id,
                category_id=budget.category_id,
                month=month,
                year=year,
                allocated_amount=budget.allocated_amount,
                carried_over_amount=carry_over,
                spent_amount=Decimal("0"),
            ))
            created += 1

        if not created:
            return 0
        self.db.commit()
        logger.info("Hub %d: created %d budget instances for %d/%d", hub_id, created, month, year)
        return created


def ensure_budget_instances(db: Session, hub_id: int, month: int, year: int) -> int:
    return EnsureBudgetInstancesUseCase(db).execute(hub_id, month, year)
