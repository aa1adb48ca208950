"""Shared pytest fixtures for the storefront core."""

from datetime import datetime, timedelta, timezone

import pytest

from storefront.repositories.kv_store import MemoryKeyValueStore
from storefront.repositories.products import InMemoryProductRepository
from storefront.schemas.product import ProductRecord, ProductSnapshot
from storefront.services.notifications import NotificationCollector


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def events():
    return NotificationCollector()


@pytest.fixture
def milk():
    """A product with three units in stock."""
    return ProductSnapshot(id="milk-1", name="Milk", price=120.0, stock=3, category="Dairy", unit="liter")


@pytest.fixture
def bread():
    return ProductSnapshot(id="bread-1", name="Bread", price=55.5, stock=10, category="Bakery")


@pytest.fixture
def active_window():
    return {"start_at": NOW - timedelta(days=1), "end_at": NOW + timedelta(days=1), "active": True}


@pytest.fixture
def repo():
    return InMemoryProductRepository()


@pytest.fixture
def seeded_repo(repo):
    """Repository holding one product with no reviews yet."""
    repo.upsert("apple-1", lambda _: ProductRecord(id="apple-1", name="Apple", price=1000, stock=50, category="Fruits"))
    return repo
