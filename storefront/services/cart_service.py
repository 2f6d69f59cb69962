# storefront/services/cart_service.py
import json
import logging
from typing import Any, Callable, Sequence

from storefront.models.cart import CartChange, CartLineItem, CartProduct
from storefront.repositories.cart_repo import CartStorage

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "cart"

CartListener = Callable[[list[CartLineItem]], None]


# ---------------------------------------------------------
# Pure state transitions
#
# Each function takes the current line items and returns
# (new line items, CartChange). Inputs are never mutated, so
# these can be tested without any storage backend.
# ---------------------------------------------------------


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _find(items: Sequence[CartLineItem], product_id: str) -> int | None:
    for i, item in enumerate(items):
        if item.product_id == product_id:
            return i
    return None


def as_cart_product(product: Any) -> CartProduct:
    """
    Accept a CartProduct, a plain dict, or any object exposing
    id / name / price / images / stock (e.g. a catalog Product).
    """
    if isinstance(product, CartProduct):
        return product
    if isinstance(product, dict):
        return CartProduct.model_validate(product)
    return CartProduct.model_validate(product, from_attributes=True)


def add_item(
    items: Sequence[CartLineItem],
    product: CartProduct,
    quantity: int = 1,
) -> tuple[list[CartLineItem], CartChange]:
    """
    Add `quantity` units of `product`.

    Rules:
      - quantity must be a positive int, otherwise nothing changes
      - existing line: min(existing + quantity, product.stock), and the
        line's stock_limit follows the product's current stock
      - new line: min(quantity, product.stock)
      - a result of 0 (no stock left) means no line for this product
    """
    if not _is_positive_int(quantity):
        return list(items), CartChange(kind="ignored", product_id=product.id, requested=None)

    updated = list(items)
    index = _find(updated, product.id)

    if index is not None:
        existing = updated[index]
        requested = existing.quantity + quantity
        new_qty = min(requested, product.stock)
        if new_qty <= 0:
            del updated[index]
            return updated, CartChange(
                kind="removed", product_id=product.id, requested=requested, quantity=0
            )
        updated[index] = existing.model_copy(
            update={"quantity": new_qty, "stock_limit": product.stock}
        )
        return updated, CartChange(
            kind="merged", product_id=product.id, requested=requested, quantity=new_qty
        )

    new_qty = min(quantity, product.stock)
    if new_qty <= 0:
        return updated, CartChange(
            kind="ignored", product_id=product.id, requested=quantity, quantity=0
        )

    updated.append(
        CartLineItem(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            image_ref=product.images[0] if product.images else "",
            quantity=new_qty,
            stock_limit=product.stock,
        )
    )
    return updated, CartChange(
        kind="added", product_id=product.id, requested=quantity, quantity=new_qty
    )


def remove_item(
    items: Sequence[CartLineItem],
    product_id: str,
) -> tuple[list[CartLineItem], CartChange]:
    """Drop the line for `product_id`; absent ids are ignored."""
    index = _find(items, product_id)
    if index is None:
        return list(items), CartChange(kind="ignored", product_id=product_id)

    updated = list(items)
    del updated[index]
    return updated, CartChange(kind="removed", product_id=product_id, quantity=0)


def update_item_quantity(
    items: Sequence[CartLineItem],
    product_id: str,
    quantity: int,
) -> tuple[list[CartLineItem], CartChange]:
    """
    Set the quantity of an existing line.

    quantity <= 0 removes the line. Otherwise the quantity is clamped to
    the line's recorded stock_limit. Unknown ids are ignored.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return list(items), CartChange(kind="ignored", product_id=product_id)

    if quantity <= 0:
        updated, change = remove_item(items, product_id)
        return updated, change.model_copy(update={"requested": quantity})

    index = _find(items, product_id)
    if index is None:
        return list(items), CartChange(
            kind="ignored", product_id=product_id, requested=quantity
        )

    updated = list(items)
    line = updated[index]
    new_qty = min(quantity, line.stock_limit)
    if new_qty <= 0:
        del updated[index]
        return updated, CartChange(
            kind="removed", product_id=product_id, requested=quantity, quantity=0
        )

    updated[index] = line.model_copy(update={"quantity": new_qty})
    return updated, CartChange(
        kind="updated", product_id=product_id, requested=quantity, quantity=new_qty
    )


def cart_item_count(items: Sequence[CartLineItem]) -> int:
    return sum(item.quantity for item in items)


def cart_total(items: Sequence[CartLineItem]) -> float:
    return sum(item.unit_price * item.quantity for item in items)


def serialize_items(items: Sequence[CartLineItem]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items], allow_nan=False)


def deserialize_items(text: str) -> list[CartLineItem]:
    """
    Parse a serialized cart.

    Raises:
        ValueError: not a JSON array of valid line items, or the same
                    product appears twice.
    """
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    items = [CartLineItem.model_validate(raw) for raw in data]
    if len({item.product_id for item in items}) != len(items):
        raise ValueError("duplicate product ids in cart")
    return items


# ---------------------------------------------------------
# Stateful store
# ---------------------------------------------------------


class CartStore:
    """
    The visitor's cart: line items held in memory and mirrored to storage.

    Responsibilities:
      - apply the pure transitions above and commit their result
      - notify listeners after every committed change
      - persist through a listener, best-effort (failures are logged,
        callers never see them)
      - load persisted items on construction, discarding corrupt data

    All operations are synchronous; one store serves one cart, so there
    is no locking.
    """

    def __init__(
        self,
        storage: CartStorage | None = None,
        key: str = CART_STORAGE_KEY,
    ):
        self.storage = storage
        self.key = key
        self._items: list[CartLineItem] = []
        self._listeners: list[CartListener] = []

        if storage is not None:
            self._items = self._load()
            self.subscribe(self._persist)

    # ----- Observers -----

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """
        Register `listener(items)` to run after each committed change.

        Returns a callable that unregisters it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, items: list[CartLineItem], change: CartChange) -> CartChange:
        if change.kind == "ignored":
            return change
        self._items = items
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)
        return change

    # ----- Persistence -----

    def _load(self) -> list[CartLineItem]:
        try:
            text = self.storage.read(self.key)
        except Exception:
            logger.exception(f"Error reading cart '{self.key}' from storage")
            return []

        if text is None:
            return []

        try:
            return deserialize_items(text)
        except ValueError as e:
            logger.warning(f"Discarding corrupt cart '{self.key}': {e}")
            try:
                self.storage.remove(self.key)
            except Exception:
                logger.exception(f"Error removing corrupt cart '{self.key}'")
            return []

    def _persist(self, items: list[CartLineItem]) -> None:
        # An empty cart leaves nothing behind in storage.
        try:
            if items:
                self.storage.write(self.key, serialize_items(items))
            else:
                self.storage.remove(self.key)
        except Exception:
            logger.exception(f"Error saving cart '{self.key}' to storage")

    def serialize(self) -> str:
        return serialize_items(self._items)

    # ----- Derived values -----

    @property
    def items(self) -> list[CartLineItem]:
        return [item.model_copy() for item in self._items]

    @property
    def item_count(self) -> int:
        return cart_item_count(self._items)

    @property
    def total(self) -> float:
        return cart_total(self._items)

    # ----- Mutations -----

    def add_to_cart(self, product: Any, quantity: int = 1) -> CartChange:
        cart_product = as_cart_product(product)
        if not _is_positive_int(quantity):
            logger.warning(
                f"Ignoring add_to_cart for product {cart_product.id}: "
                f"quantity must be a positive integer, got {quantity!r}"
            )
        items, change = add_item(self._items, cart_product, quantity)
        return self._commit(items, change)

    def remove_from_cart(self, product_id: str) -> CartChange:
        items, change = remove_item(self._items, product_id)
        return self._commit(items, change)

    def update_quantity(self, product_id: str, quantity: int) -> CartChange:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            logger.warning(
                f"Ignoring update_quantity for product {product_id}: "
                f"quantity must be an integer, got {quantity!r}"
            )
        items, change = update_item_quantity(self._items, product_id, quantity)
        return self._commit(items, change)

    def clear_cart(self) -> CartChange:
        return self._commit([], CartChange(kind="cleared"))
