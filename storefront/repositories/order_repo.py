# storefront/repositories/order_repo.py
from typing import Any

from storefront.models.order import Order
from storefront.repositories.record_store import RecordStore


class OrderRepository(RecordStore[Order]):
    """
    Data access layer for orders.json.

    NOTE:
      - Order items are embedded in the order record; they get their ids
        (item-<order id>-<index>) when the order is created.
      - New orders always start with status 'pending'.
    """

    model = Order
    entity = "order"

    def prepare_create(self, fields: dict[str, Any], record_id: str) -> dict[str, Any]:
        data = dict(fields)
        data["status"] = "pending"
        data["items"] = [
            {**item, "id": f"item-{record_id}-{index}"}
            for index, item in enumerate(data.get("items") or [])
        ]
        return data

    def list_for_user(self, user_id: str) -> list[Order]:
        return [order for order in self.get_all() if order.user_id == user_id]
