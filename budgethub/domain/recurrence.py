"""
Due-date arithmetic for recurring transaction templates.

Uses date only (no timezone). A template repeats every `frequency_days`
days starting at `start_date`; `last_generated_date` marks the last cycle
that produced a transaction.
"""
from datetime import date, timedelta


def first_due_date(
    start_date: date,
    last_generated_date: date | None,
    frequency_days: int,
) -> date:
    """The earliest cycle that has not produced a transaction yet."""
    if frequency_days < 1:
        raise ValueError("frequency_days must be >= 1")
    if last_generated_date is None:
        return start_date
    return last_generated_date + timedelta(days=frequency_days)


def due_date_reached(
    start_date: date,
    last_generated_date: date | None,
    frequency_days: int,
    today: date,
    end_date: date | None = None,
) -> date | None:
    """
    Latest due date <= today (and <= end_date) counted from the first pending cycle.

    Returns None when the first pending cycle lies in the future or after end_date.
    Missed cycles collapse into one: the caller generates a single transaction
    dated on the returned cycle.

    Example (frequency 30, start 2024-01-01, never generated):
        today=2024-01-15 -> 2024-01-01
        today=2024-02-01 -> 2024-01-31
        today=2023-12-31 -> None
    """
    due = first_due_date(start_date, last_generated_date, frequency_days)
    limit = today if end_date is None else min(today, end_date)
    if due > limit:
        return None

    step = timedelta(days=frequency_days)
    # Jump straight to the last cycle instead of stepping one by one
    cycles = (limit - due).days // frequency_days
    return due + step * cycles
