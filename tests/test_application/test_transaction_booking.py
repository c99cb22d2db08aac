"""
Tests for CreateTransactionUseCase
"""
from datetime import date
from decimal import Decimal

import pytest

from budgethub.application.transactions import CreateTransactionUseCase, TransactionValidationError
from budgethub.infrastructure.db.models import Hub, FinancialAccount


def _book(db, hub, account, **overrides):
    values = dict(
        hub_id=hub.id, financial_account_id=account.id, type="expense",
        amount=Decimal("100.00"), occurred_on=date(2026, 3, 1),
    )
    values.update(overrides)
    return CreateTransactionUseCase(db).execute(**values)


def test_expense_reduces_balance(db_session, hub, account):
    tx = _book(db_session, hub, account)

    assert tx.id is not None
    assert account.balance == Decimal("4900.00")


def test_income_increases_balance(db_session, hub, account):
    _book(db_session, hub, account, type="income", amount=Decimal("50.00"))

    assert account.balance == Decimal("5050.00")


def test_insufficient_funds(db_session, hub, account):
    with pytest.raises(TransactionValidationError, match="Insufficient funds"):
        _book(db_session, hub, account, amount=Decimal("5000.01"))
    assert account.balance == Decimal("5000.00")


def test_whole_balance_can_be_spent(db_session, hub, account):
    _book(db_session, hub, account, amount=Decimal("5000.00"))

    assert account.balance == Decimal("0.00")


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10")])
def test_non_positive_amount(db_session, hub, account, amount):
    with pytest.raises(TransactionValidationError, match="greater than zero"):
        _book(db_session, hub, account, amount=amount)


def test_unknown_type(db_session, hub, account):
    with pytest.raises(TransactionValidationError, match="Unknown transaction type"):
        _book(db_session, hub, account, type="transfer")


def test_account_of_other_hub_rejected(db_session, hub):
    other = Hub(name="Other")
    db_session.add(other)
    db_session.flush()
    foreign = FinancialAccount(hub_id=other.id, name="Savings", balance=Decimal("100"))
    db_session.add(foreign)
    db_session.flush()

    with pytest.raises(TransactionValidationError, match="not found"):
        _book(db_session, hub, foreign)
