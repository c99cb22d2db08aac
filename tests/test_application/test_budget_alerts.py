"""
Tests for budget threshold notifications
"""
from datetime import date
from decimal import Decimal

import pytest

from budgethub.application.budget_alerts import check_budget_thresholds
from budgethub.application.notifications import BUDGET_THRESHOLD_80, BUDGET_THRESHOLD_100
from budgethub.infrastructure.db.models import Budget, Notification, Transaction

_TODAY = date(2026, 3, 10)


@pytest.fixture
def budget(db_session, hub, category):
    b = Budget(hub_id=hub.id, category_id=category.id, allocated_amount=Decimal("100.00"))
    db_session.add(b)
    db_session.commit()
    return b


@pytest.fixture
def spend(db_session, hub, account, category):
    def _spend(amount, occurred_on=_TODAY):
        db_session.add(Transaction(
            hub_id=hub.id, financial_account_id=account.id, category_id=category.id,
            type="expense", amount=Decimal(amount), occurred_on=occurred_on,
        ))
        db_session.commit()
    return _spend


def _notifications(db):
    return db.query(Notification).order_by(Notification.id).all()


def test_below_threshold_no_notification(db_session, budget, spend):
    spend("79.00")

    result = check_budget_thresholds(db_session, today=_TODAY)

    assert result.data.processed == 0
    assert _notifications(db_session) == []


def test_80_percent_notified_once(db_session, budget, spend):
    spend("85.00")

    first = check_budget_thresholds(db_session, today=_TODAY)
    second = check_budget_thresholds(db_session, today=_TODAY)

    assert first.data.processed == 1
    assert second.data.processed == 0
    notifs = _notifications(db_session)
    assert len(notifs) == 1
    assert notifs[0].rule_code == BUDGET_THRESHOLD_80
    assert notifs[0].type == "warning"
    assert notifs[0].period == "2026-03"
    assert notifs[0].entity_id == budget.id
    assert "Rent" in notifs[0].message
    assert first.message == "Processed 1 budget threshold notifications"


def test_exceeded_after_warning(db_session, budget, spend):
    spend("85.00")
    check_budget_thresholds(db_session, today=_TODAY)
    spend("30.00")

    result = check_budget_thresholds(db_session, today=_TODAY)

    assert result.data.processed == 1
    assert _notifications(db_session)[-1].rule_code == BUDGET_THRESHOLD_100
    assert _notifications(db_session)[-1].type == "error"


def test_new_month_notifies_again(db_session, budget, spend):
    spend("85.00")
    check_budget_thresholds(db_session, today=_TODAY)
    spend("90.00", occurred_on=date(2026, 4, 2))

    result = check_budget_thresholds(db_session, today=date(2026, 4, 5))

    assert result.data.processed == 1
    assert _notifications(db_session)[-1].period == "2026-04"


def test_previous_month_spending_ignored(db_session, budget, spend):
    spend("95.00", occurred_on=date(2026, 2, 28))

    result = check_budget_thresholds(db_session, today=_TODAY)

    assert result.data.processed == 0


def test_manual_spent_amount_counts(db_session, budget):
    budget.spent_amount = Decimal("100.00")
    db_session.commit()

    check_budget_thresholds(db_session, today=_TODAY)

    assert _notifications(db_session)[0].rule_code == BUDGET_THRESHOLD_100


def test_hub_with_warnings_disabled_skipped(db_session, hub, budget, spend):
    hub.budget_email_warnings = False
    db_session.commit()
    spend("95.00")

    result = check_budget_thresholds(db_session, today=_TODAY)

    assert result.data.processed == 0


def test_budget_warning_level_drives_warning(db_session, budget, spend):
    budget.warning_percentage = 50
    db_session.commit()
    spend("55.00")

    result = check_budget_thresholds(db_session, today=_TODAY)

    assert result.data.processed == 1
    notif = _notifications(db_session)[0]
    assert notif.rule_code == BUDGET_THRESHOLD_80
    assert "reached 50%" in notif.message
    assert notif.meta["threshold"] == 50
