import json
import logging
from datetime import datetime, timezone

import pytest

from storefront.models.product import Product
from storefront.repositories.cart_repo import FileCartStorage, MemoryCartStorage
from storefront.services.cart_service import CART_STORAGE_KEY, CartStore


def product(pid="1", stock=10, price=4.0):
    return {"id": pid, "name": f"Product {pid}", "price": price, "images": [f"/img/{pid}.png"], "stock": stock}


class FailingStorage(MemoryCartStorage):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def write(self, key, value):
        self.writes += 1
        raise OSError("quota exceeded")


class CountingStorage(MemoryCartStorage):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    def write(self, key, value):
        self.writes += 1
        super().write(key, value)


def test_every_mutation_is_persisted_under_fixed_key():
    storage = MemoryCartStorage()
    cart = CartStore(storage)

    cart.add_to_cart(product("1"), 2)
    assert json.loads(storage.data[CART_STORAGE_KEY])[0]["quantity"] == 2

    cart.update_quantity("1", 5)
    assert json.loads(storage.data[CART_STORAGE_KEY])[0]["quantity"] == 5

    cart.remove_from_cart("1")
    assert CART_STORAGE_KEY not in storage.data


def test_ignored_operations_do_not_write():
    storage = CountingStorage()
    cart = CartStore(storage)

    cart.add_to_cart(product(), 0)
    cart.remove_from_cart("missing")
    cart.update_quantity("missing", 3)

    assert storage.writes == 0


def test_round_trip_through_storage_restores_identical_items():
    storage = MemoryCartStorage()
    cart = CartStore(storage)
    cart.add_to_cart(product("1", price=4.0), 2)
    cart.add_to_cart(product("2", stock=3, price=1.25), 5)

    reloaded = CartStore(storage)

    assert reloaded.items == cart.items
    assert reloaded.item_count == cart.item_count
    assert reloaded.total == cart.total


def test_round_trip_through_serialize():
    cart = CartStore()
    cart.add_to_cart(product("7"), 3)

    storage = MemoryCartStorage({CART_STORAGE_KEY: cart.serialize()})

    assert CartStore(storage).items == cart.items


def test_file_storage_round_trip(tmp_path):
    storage = FileCartStorage(tmp_path / "carts")
    cart = CartStore(storage, key="cart:abc12345")
    cart.add_to_cart(product("1"), 2)

    assert storage.path_for("cart:abc12345").exists()
    assert CartStore(FileCartStorage(tmp_path / "carts"), key="cart:abc12345").items == cart.items


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"product_id": "1"}),
        json.dumps([{"product_id": "1", "quantity": 2}]),
        json.dumps(
            [
                {"product_id": "1", "name": "a", "unit_price": 1, "image_ref": "", "quantity": 1, "stock_limit": 5},
                {"product_id": "1", "name": "a", "unit_price": 1, "image_ref": "", "quantity": 2, "stock_limit": 5},
            ]
        ),
    ],
)
def test_corrupt_persisted_cart_is_discarded(raw, caplog):
    storage = MemoryCartStorage({CART_STORAGE_KEY: raw})

    with caplog.at_level(logging.WARNING):
        cart = CartStore(storage)

    assert cart.items == []
    assert CART_STORAGE_KEY not in storage.data
    assert "Discarding corrupt cart" in caplog.text


def test_storage_write_failure_is_logged_not_raised(caplog):
    storage = FailingStorage()
    cart = CartStore(storage)

    with caplog.at_level(logging.ERROR):
        change = cart.add_to_cart(product(), 2)

    assert change.kind == "added"
    assert cart.item_count == 2
    assert storage.writes == 1
    assert "Error saving cart" in caplog.text


def test_invalid_quantity_logs_warning(caplog):
    cart = CartStore()

    with caplog.at_level(logging.WARNING):
        change = cart.add_to_cart(product(), -3)

    assert change.kind == "ignored"
    assert cart.items == []
    assert "quantity must be a positive integer" in caplog.text


def test_add_accepts_catalog_product_model():
    now = datetime.now(timezone.utc)
    catalog_product = Product(
        id="9",
        name="Desk Organizer",
        price=24.99,
        images=["/img/desk.png"],
        stock=2,
        created_at=now,
        updated_at=now,
    )
    cart = CartStore()

    change = cart.add_to_cart(catalog_product, 5)

    assert change.quantity == 2
    assert change.clamped
    line = cart.items[0]
    assert (line.product_id, line.name, line.image_ref, line.stock_limit) == ("9", "Desk Organizer", "/img/desk.png", 2)


def test_derived_values_hold_after_any_sequence():
    cart = CartStore(MemoryCartStorage())
    operations = [
        lambda: cart.add_to_cart(product("1", stock=5, price=3.0), 2),
        lambda: cart.add_to_cart(product("2", stock=2, price=10.0), 4),
        lambda: cart.add_to_cart(product("1", stock=5, price=3.0), 9),
        lambda: cart.update_quantity("2", 1),
        lambda: cart.update_quantity("1", -1),
        lambda: cart.add_to_cart(product("3", stock=8, price=0.5), 3),
        lambda: cart.remove_from_cart("2"),
        lambda: cart.clear_cart(),
        lambda: cart.add_to_cart(product("4", stock=1, price=7.0), 1),
    ]

    for op in operations:
        op()
        items = cart.items
        assert cart.item_count == sum(i.quantity for i in items)
        assert cart.total == pytest.approx(sum(i.unit_price * i.quantity for i in items))
        assert len({i.product_id for i in items}) == len(items)
        assert all(1 <= i.quantity <= i.stock_limit for i in items)

    assert cart.item_count == 1
    assert cart.total == pytest.approx(7.0)


def test_items_are_copies():
    cart = CartStore()
    cart.add_to_cart(product(), 1)

    cart.items[0].quantity = 99

    assert cart.item_count == 1


def test_clear_cart_removes_persisted_key():
    storage = MemoryCartStorage()
    cart = CartStore(storage)
    cart.add_to_cart(product("1"), 1)
    cart.add_to_cart(product("2"), 1)

    change = cart.clear_cart()

    assert change.kind == "cleared"
    assert cart.items == []
    assert CART_STORAGE_KEY not in storage.data
    assert CartStore(storage).items == []


def test_listeners_receive_committed_items_and_can_unsubscribe():
    cart = CartStore()
    seen = []
    unsubscribe = cart.subscribe(lambda items: seen.append([i.quantity for i in items]))

    cart.add_to_cart(product(), 1)
    cart.add_to_cart(product(), 2)
    unsubscribe()
    cart.add_to_cart(product(), 3)

    assert seen == [[1], [3]]


def test_emptied_file_cart_leaves_no_file(tmp_path):
    storage = FileCartStorage(tmp_path / "carts")
    cart = CartStore(storage, key="cart:abc12345")
    cart.add_to_cart(product("1"), 2)

    cart.update_quantity("1", 0)

    assert not storage.path_for("cart:abc12345").exists()


@pytest.mark.parametrize("quantity", [1.5, "3", None, True])
def test_non_integer_update_quantity_logs_warning(quantity, caplog):
    cart = CartStore()
    cart.add_to_cart(product(), 2)

    with caplog.at_level(logging.WARNING):
        change = cart.update_quantity("1", quantity)

    assert change.kind == "ignored"
    assert cart.item_count == 2
    assert "quantity must be an integer" in caplog.text


@pytest.mark.parametrize("bad", [float("inf"), float("nan")])
def test_non_finite_product_price_is_rejected(bad):
    cart = CartStore(MemoryCartStorage())

    with pytest.raises(ValueError):
        cart.add_to_cart(product(price=bad), 1)

    assert cart.items == []
