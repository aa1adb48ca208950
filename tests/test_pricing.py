"""Effective price and sale status."""

from datetime import timedelta

import pytest

from storefront.schemas.product import Discount, ProductSnapshot
from storefront.services.pricing import effective_price, is_on_sale, quote


def _product(discount=None, price=1000.0):
    return ProductSnapshot(id="p1", name="Olive Oil", price=price, stock=5, discount=discount)


class TestEffectivePrice:
    def test_no_discount_returns_list_price(self, now):
        product = _product()
        assert effective_price(product, now) == 1000.0
        assert is_on_sale(product, now) is False

    def test_percentage_inside_window(self, now, active_window):
        product = _product(Discount(kind="percentage", value=20, **active_window))
        assert effective_price(product, now) == pytest.approx(800.0)
        assert is_on_sale(product, now) is True

    def test_window_already_ended(self, now):
        discount = Discount(
            kind="percentage", value=20, active=True,
            start_at=now - timedelta(days=10), end_at=now - timedelta(days=1),
        )
        product = _product(discount)
        assert effective_price(product, now) == 1000.0
        assert is_on_sale(product, now) is False

    def test_window_not_started(self, now):
        discount = Discount(
            kind="percentage", value=20, active=True,
            start_at=now + timedelta(hours=1), end_at=now + timedelta(days=1),
        )
        assert effective_price(_product(discount), now) == 1000.0

    def test_inactive_discount_ignored(self, now, active_window):
        window = {**active_window, "active": False}
        product = _product(Discount(kind="percentage", value=50, **window))
        assert effective_price(product, now) == 1000.0
        assert is_on_sale(product, now) is False

    def test_fixed_discount_never_negative(self, now, active_window):
        product = _product(Discount(kind="fixed", value=150, **active_window), price=100.0)
        assert effective_price(product, now) == 0.0

    def test_fixed_discount(self, now, active_window):
        product = _product(Discount(kind="fixed", value=150, **active_window))
        assert effective_price(product, now) == 850.0

    def test_window_bounds_are_inclusive(self, now):
        discount = Discount(kind="percentage", value=10, active=True, start_at=now, end_at=now)
        assert effective_price(_product(discount), now) == pytest.approx(900.0)

    def test_recomputed_as_time_moves(self, now, active_window):
        product = _product(Discount(kind="percentage", value=20, **active_window))
        assert effective_price(product, now) == pytest.approx(800.0)
        assert effective_price(product, now + timedelta(days=2)) == 1000.0
        assert effective_price(product, now) == pytest.approx(800.0)

    def test_naive_datetimes_are_utc(self, now, active_window):
        naive = {k: (v.replace(tzinfo=None) if hasattr(v, "tzinfo") else v) for k, v in active_window.items()}
        product = _product(Discount(kind="percentage", value=20, **naive))
        assert is_on_sale(product, now) is True


class TestInvalidWindowFailsSafe:
    def test_end_before_start(self, now):
        discount = Discount(
            kind="percentage", value=20, active=True,
            start_at=now + timedelta(days=1), end_at=now - timedelta(days=1),
        )
        product = _product(discount)
        assert effective_price(product, now) == 1000.0
        assert is_on_sale(product, now) is False

    @pytest.mark.parametrize("missing", ["start_at", "end_at"])
    def test_missing_bound_on_active_discount(self, now, active_window, missing):
        window = {**active_window, missing: None}
        product = _product(Discount(kind="percentage", value=20, **window))
        assert effective_price(product, now) == 1000.0
        assert is_on_sale(product, now) is False


def test_effective_price_never_above_list_price(now, active_window):
    for kind, value in [("percentage", 1), ("percentage", 100), ("fixed", 0.5), ("fixed", 5000)]:
        product = _product(Discount(kind=kind, value=value, **active_window))
        assert 0 <= effective_price(product, now) <= product.price


def test_quote_bundles_price_and_status(now, active_window):
    q = quote(_product(Discount(kind="percentage", value=25, **active_window)), now)
    assert q.price == 1000.0
    assert q.final_price == pytest.approx(750.0)
    assert q.on_sale is True
