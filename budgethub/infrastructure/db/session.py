"""
Database session management (SQLAlchemy)

The engine and session factory live on an explicitly constructed Database
handle. The FastAPI app builds one in its lifespan and stores it on
app.state; scheduled jobs receive the same handle as an argument.
"""
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from budgethub.config import Settings


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all ORM models
    """
    pass


class Database:
    """Engine + session factory with an explicit lifecycle."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(create_engine(settings.get_sqlalchemy_url(), pool_pre_ping=True))

    def session(self) -> Session:
        return self.session_factory()

    def check_connection(self) -> None:
        """
        Health check - SELECT 1 against the configured database

        Raises:
            sqlalchemy.exc.OperationalError: if the database is unreachable
        """
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency - the Database handle created by the app lifespan"""
    return request.app.state.database
