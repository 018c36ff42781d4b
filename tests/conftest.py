# tests/conftest.py
"""Shared fixtures. Points the app at an in-memory SQLite DB before anything imports settings."""

import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.pop("API_KEY", None)

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from parking_engine.services.allocation_engine import AllocationEngine
from parking_engine.services.spot_pool import SpotClass, SpotPool
from parking_engine.services.ticket_store import TicketStore


class FakeClock:
    """Manually advanced clock for fee tests."""

    def __init__(self, start=datetime(2026, 2, 20, 9, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_engine(clock):
    def _make(bikes=0, cars=0, large=0, rate=Decimal("10.00")):
        pool = SpotPool.from_counts({
            SpotClass.BIKE_SPOT: bikes,
            SpotClass.CAR_SPOT: cars,
            SpotClass.LARGE_SPOT: large,
        })
        return AllocationEngine(pool, TicketStore(), rate, clock=clock)
    return _make
