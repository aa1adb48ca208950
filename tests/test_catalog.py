from datetime import timedelta

import pytest

from storefront.core.errors import InvalidDiscount, InvalidDiscountWindow, ProductNotFound
from storefront.schemas.product import DiscountIn, ProductIn
from storefront.schemas.review import ReviewIn
from storefront.services.catalog import Catalog, generate_sku
from storefront.services.reviews import ReviewService


@pytest.fixture
def catalog(seeded_repo):
    return Catalog(seeded_repo)


def _product_in(**overrides):
    data = {"name": "Banana", "price": 90, "stock": 12, "category": "Fruits", "unit": "bunch"}
    data.update(overrides)
    return ProductIn(**data)


def test_get_by_id_returns_snapshot(catalog):
    snap = catalog.get_by_id("apple-1")
    assert snap.name == "Apple"
    assert not hasattr(snap, "reviews")


def test_get_by_id_unknown(catalog):
    with pytest.raises(ProductNotFound):
        catalog.get_by_id("nope")


def test_generate_sku_format():
    sku = generate_sku("Vegetables")
    prefix, code = sku.split("-")
    assert prefix == "VEG"
    assert len(code) == 6
    assert code.isalnum() and code.upper() == code


def test_save_product_generates_sku(catalog):
    snap = catalog.save_product("banana-1", _product_in())
    assert snap.sku.startswith("FRU-")
    assert snap.rating == 0 and snap.review_count == 0


def test_save_product_keeps_sku_and_reviews(catalog, seeded_repo):
    ReviewService(seeded_repo).add_review("apple-1", ReviewIn(user_id="u", rating=4, comment="good"))
    first = catalog.save_product("apple-1", _product_in(name="Green Apple"))
    again = catalog.save_product("apple-1", _product_in(name="Green Apple", price=95))
    assert again.sku == first.sku
    assert again.price == 95
    assert again.rating == 4 and again.review_count == 1
    assert len(seeded_repo.get("apple-1").reviews) == 1


def test_explicit_sku_wins(catalog):
    assert catalog.save_product("b", _product_in(sku="BAN-000001")).sku == "BAN-000001"


def test_list_hides_inactive(catalog):
    catalog.save_product("hidden", _product_in(is_active=False))
    ids = [p.id for p in catalog.list_products()]
    assert "hidden" not in ids and "apple-1" in ids
    assert "hidden" in [p.id for p in catalog.list_products(include_inactive=True)]


class TestDiscountAuthoring:
    def test_set_and_clear(self, catalog, now):
        snap = catalog.set_discount(
            "apple-1", DiscountIn(kind="percentage", value=20, start_at=now, end_at=now + timedelta(days=3))
        )
        assert snap.discount.value == 20
        assert catalog.clear_discount("apple-1").discount is None

    def test_end_before_start(self, catalog, now):
        with pytest.raises(InvalidDiscountWindow):
            catalog.set_discount("apple-1", DiscountIn(value=10, start_at=now, end_at=now - timedelta(days=1)))
        assert catalog.get_by_id("apple-1").discount is None

    def test_active_without_bounds(self, catalog, now):
        with pytest.raises(InvalidDiscountWindow):
            catalog.set_discount("apple-1", DiscountIn(value=10, start_at=now))

    def test_inactive_without_bounds_is_allowed(self, catalog):
        snap = catalog.set_discount("apple-1", DiscountIn(value=10, active=False))
        assert snap.discount.active is False

    @pytest.mark.parametrize("kind,value", [("percentage", 0), ("percentage", 120), ("fixed", 0)])
    def test_bad_values(self, catalog, now, kind, value):
        with pytest.raises(InvalidDiscount):
            catalog.set_discount(
                "apple-1", DiscountIn(kind=kind, value=value, start_at=now, end_at=now + timedelta(days=1))
            )

    def test_unknown_product(self, catalog, now):
        with pytest.raises(ProductNotFound):
            catalog.set_discount("nope", DiscountIn(value=10, start_at=now, end_at=now))
