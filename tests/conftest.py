"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any waitlist_api import, because the
settings module validates DATABASE_URL at import time.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from typing import Callable, Iterator
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.pool import StaticPool

from waitlist_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from waitlist_api.adapters.store.models import WaitlistEntry
from waitlist_api.adapters.store.sqlalchemy_store import SqlAlchemyWaitlistStore
from waitlist_api.core.app_factory import create_app


@pytest.fixture
def store() -> Iterator[SqlAlchemyWaitlistStore]:
    """Waitlist store on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = SqlAlchemyWaitlistStore(engine)
    store.create_schema()
    yield store
    store.close()


@pytest.fixture
def entries(store: SqlAlchemyWaitlistStore) -> Callable[[], list[WaitlistEntry]]:
    """Return a callable listing every stored row."""

    def _entries() -> list[WaitlistEntry]:
        with store._session_factory() as session:
            return list(session.scalars(select(WaitlistEntry)))

    return _entries


@pytest.fixture
def entry_count(store: SqlAlchemyWaitlistStore) -> Callable[[], int]:
    def _count() -> int:
        with store.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(WaitlistEntry)).scalar_one()

    return _count


@pytest.fixture
def clock() -> Mock:
    """Controllable time source for the rate limiter."""
    return Mock(return_value=1000.0)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(limit=12, window_seconds=10, clock=clock)


@pytest.fixture
def app(store: SqlAlchemyWaitlistStore, limiter: InMemoryFixedWindowRateLimiter) -> FastAPI:
    return create_app(store=store, rate_limiter=limiter, configure_logs=False)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)
