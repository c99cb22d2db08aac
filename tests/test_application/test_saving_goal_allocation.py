"""
Tests for monthly saving goal auto-allocation
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from budgethub.application import saving_goals
from budgethub.application.saving_goals import allocate_saving_goals
from budgethub.domain.result import Ok
from budgethub.infrastructure.db.models import SavingGoal

_NOW = datetime(2026, 3, 1, 1, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_goal(db_session, hub):
    def _make(**overrides) -> SavingGoal:
        values = dict(
            hub_id=hub.id, name="Holidays",
            goal_amount=Decimal("1000.00"), amount_saved=Decimal("0"),
            monthly_allocation=Decimal("100.00"), auto_allocation_enabled=True,
        )
        values.update(overrides)
        goal = SavingGoal(**values)
        db_session.add(goal)
        db_session.commit()
        return goal
    return _make


def test_allocation_capped_at_goal(db_session, make_goal):
    goal = make_goal(amount_saved=Decimal("950.00"))

    result = allocate_saving_goals(db_session, now=_NOW)

    assert isinstance(result, Ok)
    assert result.data.processed == 1
    assert goal.amount_saved == Decimal("1000.00")
    assert goal.updated_at.replace(tzinfo=None) == _NOW.replace(tzinfo=None)


def test_fully_funded_goal_skipped_next_run(db_session, make_goal):
    goal = make_goal(amount_saved=Decimal("950.00"))
    allocate_saving_goals(db_session, now=_NOW)

    result = allocate_saving_goals(db_session, now=_NOW)

    assert result.data.processed == 0
    assert result.data.failed == 0
    assert goal.amount_saved == Decimal("1000.00")


def test_unbounded_goal_grows_every_run(db_session, make_goal):
    goal = make_goal(goal_amount=Decimal("0"), amount_saved=Decimal("5000.00"))

    allocate_saving_goals(db_session, now=_NOW)
    allocate_saving_goals(db_session, now=_NOW)

    assert goal.amount_saved == Decimal("5200.00")


def test_zero_allocation_skipped(db_session, make_goal):
    goal = make_goal(monthly_allocation=Decimal("0"))

    result = allocate_saving_goals(db_session, now=_NOW)

    assert result.data.processed == 0
    assert goal.amount_saved == Decimal("0")


def test_disabled_goal_untouched(db_session, make_goal):
    goal = make_goal(auto_allocation_enabled=False)

    allocate_saving_goals(db_session, now=_NOW)

    assert goal.amount_saved == Decimal("0")


def test_message(db_session, make_goal):
    make_goal()
    make_goal(name="Car", amount_saved=Decimal("1000.00"))

    result = allocate_saving_goals(db_session, now=_NOW)

    assert result.message == "Auto-allocation completed. Processed: 1, Failed: 0"


def test_failing_goal_does_not_stop_others(db_session, make_goal, monkeypatch):
    broken = make_goal(name="Broken", goal_amount=Decimal("666.00"))
    fine = make_goal(name="Bike")
    real = saving_goals.next_amount_saved

    def flaky(amount_saved, goal_amount, monthly_allocation):
        if goal_amount == Decimal("666.00"):
            raise RuntimeError("boom")
        return real(amount_saved, goal_amount, monthly_allocation)

    monkeypatch.setattr(saving_goals, "next_amount_saved", flaky)

    result = allocate_saving_goals(db_session, now=_NOW)

    assert result.data.processed == 1
    assert result.data.failed == 1
    assert result.message == "Auto-allocation completed. Processed: 1, Failed: 1"
    assert fine.amount_saved == Decimal("100.00")
    assert broken.amount_saved == Decimal("0")
