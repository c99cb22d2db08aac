"""
Tests for recurring template due-date arithmetic
"""
from datetime import date

import pytest

from budgethub.domain.recurrence import first_due_date, due_date_reached


class TestFirstDueDate:
    def test_never_generated_starts_at_start_date(self):
        assert first_due_date(date(2024, 1, 1), None, 30) == date(2024, 1, 1)

    def test_after_generation_adds_frequency(self):
        assert first_due_date(date(2024, 1, 1), date(2024, 1, 31), 30) == date(2024, 3, 1)

    def test_zero_frequency_rejected(self):
        with pytest.raises(ValueError):
            first_due_date(date(2024, 1, 1), None, 0)


class TestDueDateReached:
    def test_start_today_is_due(self):
        assert due_date_reached(date(2024, 1, 1), None, 30, today=date(2024, 1, 1)) == date(2024, 1, 1)

    def test_future_start_not_due(self):
        assert due_date_reached(date(2024, 1, 6), None, 30, today=date(2024, 1, 1)) is None

    def test_missed_cycles_collapse_to_latest(self):
        # start 01.01, +30 = 31.01 <= 01.02, +60 = 01.03 > 01.02
        assert due_date_reached(date(2024, 1, 1), None, 30, today=date(2024, 2, 1)) == date(2024, 1, 31)

    def test_next_cycle_after_last_generated(self):
        assert due_date_reached(
            date(2024, 1, 1), date(2024, 1, 31), 30, today=date(2024, 3, 1),
        ) == date(2024, 3, 1)

    def test_last_generated_recently_not_due(self):
        assert due_date_reached(
            date(2024, 1, 1), date(2024, 1, 31), 30, today=date(2024, 2, 15),
        ) is None

    def test_daily_frequency_reaches_today(self):
        assert due_date_reached(date(2024, 1, 1), None, 1, today=date(2024, 1, 10)) == date(2024, 1, 10)

    def test_end_date_caps_due_cycle(self):
        # cycles: 01.01, 31.01, 01.03; end 15.02 -> 31.01
        assert due_date_reached(
            date(2024, 1, 1), None, 30, today=date(2024, 4, 1), end_date=date(2024, 2, 15),
        ) == date(2024, 1, 31)

    def test_first_cycle_after_end_date_not_due(self):
        assert due_date_reached(
            date(2024, 1, 1), date(2024, 1, 31), 30, today=date(2024, 4, 1), end_date=date(2024, 2, 15),
        ) is None
