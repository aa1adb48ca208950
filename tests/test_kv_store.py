import json

from storefront.core.deps import MemorySessionStores
from storefront.repositories.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore
from storefront.services.cart_store import CartStore


def test_memory_store():
    store = MemoryKeyValueStore({"a": "1"})
    assert store.get_item("a") == "1"
    store.set_item("b", "2")
    store.remove_item("a")
    store.remove_item("missing")
    assert store.get_item("a") is None
    assert store.get_item("b") == "2"


def test_json_file_store(tmp_path):
    path = tmp_path / "sessions" / "s1.json"
    store = JsonFileKeyValueStore(str(path))
    assert store.get_item("andan_cart") is None

    store.set_item("andan_cart", "[]")
    store.set_item("other", "x")
    assert json.loads(path.read_text()) == {"andan_cart": "[]", "other": "x"}

    store.remove_item("other")
    assert JsonFileKeyValueStore(str(path)).get_item("other") is None
    assert JsonFileKeyValueStore(str(path)).get_item("andan_cart") == "[]"


def test_json_file_store_with_garbage_file(tmp_path):
    path = tmp_path / "s.json"
    path.write_text("{{{")
    store = JsonFileKeyValueStore(str(path))
    assert store.get_item("andan_cart") is None
    store.set_item("andan_cart", "[]")
    assert store.get_item("andan_cart") == "[]"


def test_cart_survives_across_file_store_instances(tmp_path, milk):
    path = str(tmp_path / "cart.json")
    CartStore.open(JsonFileKeyValueStore(path)).add(milk)
    restored = CartStore.open(JsonFileKeyValueStore(path))
    assert restored.get("milk-1").quantity == 1


def test_session_stores_keep_only_sessions_with_data():
    stores = MemorySessionStores()
    for i in range(50):
        assert stores(f"visitor-{i}").get_item("andan_cart") is None
        stores(f"visitor-{i}").remove_item("andan_cart")
    assert len(stores) == 0

    stores("shopper-1").set_item("andan_cart", "[]")
    assert stores("shopper-1").get_item("andan_cart") == "[]"
    assert stores("shopper-2").get_item("andan_cart") is None
    assert len(stores) == 1

    stores("shopper-1").remove_item("andan_cart")
    assert len(stores) == 0


def test_viewing_an_empty_cart_allocates_nothing(milk):
    stores = MemorySessionStores()
    cart = CartStore.open(stores("visitor"))
    assert len(cart) == 0
    assert len(stores) == 0
    cart.add(milk)
    assert len(stores) == 1
