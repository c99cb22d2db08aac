"""
Pytest fixtures for testing
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine, JSON
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.dialects.postgresql import JSONB

from budgethub.infrastructure.db import models  # noqa: F401  (registers tables)
from budgethub.infrastructure.db.models import (
    Hub, FinancialAccount, TransactionCategory, RecurringTransactionTemplate,
)
from budgethub.infrastructure.db.session import Base, Database


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests, with JSONB→JSON mapping."""
    # StaticPool: every session (and the TestClient thread) shares one connection
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite has no JSONB; remap to JSON for tests
    for table in Base.metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def database(db_engine) -> Database:
    """Store handle as passed to job handlers"""
    return Database(db_engine)


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def hub(db_session):
    h = Hub(name="Household", budget_carry_over=False, budget_email_warnings=True)
    db_session.add(h)
    db_session.commit()
    return h


@pytest.fixture
def account(db_session, hub):
    a = FinancialAccount(hub_id=hub.id, name="Checking", balance=Decimal("5000.00"))
    db_session.add(a)
    db_session.commit()
    return a


@pytest.fixture
def category(db_session, hub):
    c = TransactionCategory(hub_id=hub.id, name="Rent")
    db_session.add(c)
    db_session.commit()
    return c


@pytest.fixture
def make_template(db_session, hub, account, category):
    """Factory: create a recurring template with sensible defaults."""
    def _make(**overrides) -> RecurringTransactionTemplate:
        values = dict(
            hub_id=hub.id,
            financial_account_id=account.id,
            category_id=category.id,
            type="expense",
            amount=Decimal("1000.00"),
            source="Rent",
            frequency_days=30,
            start_date=date(2024, 1, 1),
            status="active",
            consecutive_failures=0,
            user_language="en",
        )
        values.update(overrides)
        tmpl = RecurringTransactionTemplate(**values)
        db_session.add(tmpl)
        db_session.commit()
        return tmpl
    return _make
