from __future__ import annotations

import os

# Cheap Argon2 parameters keep the suite fast; must be set before settings load.
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")
os.environ.setdefault("ARGON2_PARALLELISM", "1")

from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from fakes import (
    FakeAccountRepository,
    FakeLocationRepository,
    FakeOrderRepository,
    FakeRestaurantRepository,
    build_app,
)
from qfoods.domain.service import AccountService
from qfoods.security.throttle import SlidingWindowLoginThrottle


@dataclass
class Harness:
    client: TestClient
    accounts: FakeAccountRepository
    restaurants: FakeRestaurantRepository
    orders: FakeOrderRepository
    locations: FakeLocationRepository
    account_service: AccountService


@pytest.fixture
def harness():
    """Provide a FastAPI test client wired to in-memory repositories."""
    accounts = FakeAccountRepository()
    throttle = SlidingWindowLoginThrottle(max_failures=3, window_seconds=60)
    app, restaurants, orders, locations, account_service = build_app(accounts, throttle)

    with TestClient(app) as client:
        yield Harness(
            client=client,
            accounts=accounts,
            restaurants=restaurants,
            orders=orders,
            locations=locations,
            account_service=account_service,
        )
