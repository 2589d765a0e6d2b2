from decimal import Decimal
from types import SimpleNamespace
import json
import pytest

from brewhub.services.cart import (
    CART_KEY,
    CROSS_VENDOR_MESSAGE,
    CartStorage,
    CartStore,
    DatabaseCartStorage,
    FileCartStorage,
    MemoryCartStorage,
)


def product(pid, price, vendor_id=1, name=None):
    return SimpleNamespace(id=pid, name=name or f"P{pid}", price=price, vendor_id=vendor_id)


@pytest.fixture
def storage():
    return MemoryCartStorage()


def test_empty_cart(storage):
    cart = CartStore(storage)
    assert len(cart) == 0
    assert cart.total_items() == 0
    assert cart.total_price() == Decimal("0")
    assert cart.vendor_id() is None


def test_add_merges_same_product(storage):
    cart = CartStore(storage)
    assert cart.add_item(product(1, 10)).added
    outcome = cart.add_item(product(1, 10), 2)
    assert outcome.added
    assert "quantity updated" in outcome.message
    assert len(cart) == 1
    assert cart.line(1).quantity == 3


def test_totals(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, "10.00"), 2)
    cart.add_item(product(2, "2.50"), 3)
    assert cart.total_items() == 5
    assert cart.total_price() == Decimal("27.50")
    assert cart.vendor_id() == 1


def test_cross_vendor_add_is_refused_without_mutation(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, 10, vendor_id=1))
    before = storage.load(CART_KEY)

    outcome = cart.add_item(product(9, 4, vendor_id=2))

    assert outcome.added is False
    assert outcome.message == CROSS_VENDOR_MESSAGE
    assert [line.product_id for line in cart.items] == [1]
    assert storage.load(CART_KEY) == before


def test_new_vendor_allowed_after_clear(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, 10, vendor_id=1))
    cart.clear()
    assert cart.add_item(product(9, 4, vendor_id=2)).added
    assert cart.vendor_id() == 2


def test_add_rejects_non_positive_quantity(storage):
    cart = CartStore(storage)
    with pytest.raises(ValueError):
        cart.add_item(product(1, 10), 0)
    assert len(cart) == 0


def test_set_quantity_and_remove(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, 10))
    cart.add_item(product(2, 5))

    cart.set_quantity(1, 4)
    assert cart.line(1).quantity == 4

    cart.set_quantity(1, 0)
    assert cart.line(1) is None
    assert len(cart) == 1

    # unknown ids are ignored
    cart.set_quantity(42, 3)
    assert cart.remove_item(42) is False
    assert cart.remove_item(2) is True
    assert len(cart) == 0


def test_items_are_copies(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, 10))
    cart.items[0].quantity = 99
    assert cart.line(1).quantity == 1


def test_every_mutation_persists_json_array(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, "3.20"), 2)
    saved = json.loads(storage.load(CART_KEY))
    assert saved == [{
        "product_id": 1,
        "name": "P1",
        "unit_price": "3.20",
        "quantity": 2,
        "vendor_id": 1,
    }]
    cart.clear()
    assert json.loads(storage.load(CART_KEY)) == []


def test_rehydrates_from_storage(storage):
    first = CartStore(storage)
    first.add_item(product(1, 10), 2)
    first.add_item(product(2, 1))

    second = CartStore(storage)
    assert second.total_items() == 3
    assert second.total_price() == Decimal("21")
    assert second.vendor_id() == 1


def test_keys_are_isolated(storage):
    CartStore(storage, key="cart:a").add_item(product(1, 10))
    assert len(CartStore(storage, key="cart:b")) == 0
    assert len(CartStore(storage, key="cart:a")) == 1


def test_file_storage_round_trip(tmp_path):
    storage = FileCartStorage(str(tmp_path / "carts"))
    cart = CartStore(storage, key="cart:user/1")
    cart.add_item(product(7, "4.75"), 2)

    restored = CartStore(FileCartStorage(str(tmp_path / "carts")), key="cart:user/1")
    assert restored.line(7).quantity == 2
    assert restored.total_price() == Decimal("9.50")
    assert not list((tmp_path / "carts").glob("*.tmp"))


def test_unreadable_snapshot_starts_empty(storage):
    storage.save(CART_KEY, "{not json")
    cart = CartStore(storage)
    assert len(cart) == 0


def test_snapshot_spanning_vendors_is_discarded(storage):
    storage.save(CART_KEY, json.dumps([
        {"product_id": 1, "name": "A", "unit_price": "1", "quantity": 1, "vendor_id": 1},
        {"product_id": 2, "name": "B", "unit_price": "1", "quantity": 1, "vendor_id": 2},
    ]))
    cart = CartStore(storage)
    assert len(cart) == 0
    assert cart.vendor_id() is None


def test_to_dict_shape(storage):
    cart = CartStore(storage)
    cart.add_item(product(1, 10), 2)
    data = cart.to_dict()
    assert data["vendor_id"] == 1
    assert data["total_items"] == 2
    assert data["total_price"] == 20.0
    assert data["items"][0]["subtotal"] == 20.0


def test_storage_backend_must_implement_save():
    class LoadOnly(CartStorage):
        def load(self, key):
            return None

    with pytest.raises(TypeError):
        LoadOnly()


def test_only_database_storage_is_transactional(tmp_path):
    assert CartStore(MemoryCartStorage()).transactional is False
    assert CartStore(FileCartStorage(str(tmp_path))).transactional is False
    assert DatabaseCartStorage.transactional is True
