"""
Saving goal auto-allocation rule
"""
from decimal import Decimal


def next_amount_saved(
    amount_saved: Decimal,
    goal_amount: Decimal,
    monthly_allocation: Decimal,
) -> Decimal | None:
    """
    New saved amount after one monthly allocation, or None when nothing changes.

    goal_amount == 0 means the goal has no target and the sum grows without cap.
    """
    if monthly_allocation <= 0:
        return None
    if goal_amount > 0 and amount_saved >= goal_amount:
        return None  # already fully funded

    new_saved = amount_saved + monthly_allocation
    if goal_amount > 0:
        new_saved = min(new_saved, goal_amount)
    return new_saved
