"""
Budget period helpers and carry-over rule
"""
import calendar
from datetime import date
from decimal import Decimal


def validate_period(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")
    if year < 1:
        raise ValueError(f"year must be positive, got {year}")


def previous_period(month: int, year: int) -> tuple[int, int]:
    """(month, year) of the month before the given one."""
    if month == 1:
        return 12, year - 1
    return month - 1, year


def period_bounds(month: int, year: int) -> tuple[date, date]:
    """First and last day of the month (inclusive)."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def period_key(month: int, year: int) -> str:
    """'YYYY-MM' label used to dedup monthly notifications."""
    return f"{year:04d}-{month:02d}"


def compute_carry_over(
    allocated_amount: Decimal | None,
    carried_over_amount: Decimal | None,
    spent_amount: Decimal,
) -> Decimal:
    """
    Leftover of a budget period: allocated + carried over - spent.

    Negative when the period was overspent; the deficit is carried as well.
    """
    allocated = allocated_amount or Decimal("0")
    carried = carried_over_amount or Decimal("0")
    return allocated + carried - spent_amount


def threshold_reached(spent: Decimal, allocated: Decimal, warning_percentage: int = 80) -> int | None:
    """
    Highest alert threshold reached by spent, or None.

    Returns 100 when the budget is exhausted, warning_percentage when the
    warning level of the budget is reached.
    """
    if allocated <= 0:
        return None
    percentage = spent * 100 / allocated
    if percentage >= 100:
        return 100
    if 0 < warning_percentage < 100 and percentage >= warning_percentage:
        return warning_percentage
    return None
