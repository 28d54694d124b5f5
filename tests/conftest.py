"""Shared fixtures for the Sales Rep Tracker test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from utils.db import KeyValueStore
from utils.sales_tracker.models import DealRecord, Representative
from utils.sales_tracker.storage import SalesRepStorage
from utils.sales_tracker.store import SalesRepStore

# Wednesday afternoon, mid-month, so T-8d/T-2d/T-0 all fall in June
FIXED_NOW = datetime(2025, 6, 18, 15, 30, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock; returns the same instant until moved."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def set(self, moment: datetime) -> None:
        self.current = moment

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class BrokenKeyValueStore:
    """Backend whose every call fails, like a full or blocked store."""

    def get_item(self, key):
        raise RuntimeError("storage unavailable")

    def set_item(self, key, value):
        raise RuntimeError("quota exceeded")

    def remove_item(self, key):
        raise RuntimeError("storage unavailable")


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine():
    """Private in-memory SQLite database shared across connections."""
    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield eng
    eng.dispose()


@pytest.fixture
def kv_store(engine) -> KeyValueStore:
    return KeyValueStore(engine=engine, table="test_kv")


@pytest.fixture
def storage(kv_store) -> SalesRepStorage:
    return SalesRepStorage(kv_store)


@pytest.fixture
def broken_storage() -> SalesRepStorage:
    return SalesRepStorage(BrokenKeyValueStore())


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(storage, clock) -> SalesRepStore:
    return SalesRepStore(storage=storage, clock=clock)


# ---------------------------------------------------------------------------
# Domain helpers
# ---------------------------------------------------------------------------


def make_rep(rep_id: int, name: str, deals=()) -> Representative:
    """Rep with consistent totals built from (datetime, amount) pairs."""
    rep = Representative(id=rep_id, name=name)
    for when, amount in deals:
        rep.add_deal(amount, when)
    return rep


@pytest.fixture
def week_rep() -> Representative:
    """Deals at T-8d, T-2d and T-0 worth 100, 200 and 300."""
    return make_rep(1, "Alice", [
        (FIXED_NOW - timedelta(days=8), 100.0),
        (FIXED_NOW - timedelta(days=2), 200.0),
        (FIXED_NOW, 300.0),
    ])


@pytest.fixture
def deal() -> DealRecord:
    return DealRecord(date=FIXED_NOW, amount=150.0)
