# storefront/services/order_service.py
import logging
from typing import Any

from fastapi import HTTPException, status

from storefront.models.order import Order
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import DEFAULT_PLACEHOLDER_IMAGE, ProductRepository
from storefront.schemas.order import CheckoutRequest, OrderUpdate
from storefront.schemas.user import Principal

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create an order from the cart lines sent at checkout
      - Snapshot product name / image / price from the catalog at order
        time (client-sent values are only a fallback for deleted products)
      - Compute total_amount
      - Ownership checks on order lookup
      - Admin status / payment status updates
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.placeholder_image = placeholder_image

    # -------- Checkout --------

    def checkout(self, payload: CheckoutRequest, user: Principal | None) -> Order:
        """
        Convert the submitted cart lines into an Order.

        Steps:
          1. Reject an empty cart.
          2. For each line, fetch the product and snapshot name, first
             image and current price. If the product was deleted in the
             meantime, keep the client's name and price and use the
             placeholder image.
          3. total_amount = sum(price_at_purchase * quantity).
          4. Persist the order (status='pending').
        """
        if not payload.items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        items: list[dict[str, Any]] = []
        total_amount = 0.0

        for line in payload.items:
            product = self.product_repo.get_by_id(line.product_id)

            if product is not None:
                name = product.name
                image = product.thumbnail or self.placeholder_image
                price = product.price
            else:
                logger.warning(
                    f"Checkout: product {line.product_id} no longer exists, "
                    "using client-supplied snapshot"
                )
                name = line.name or f"Product {line.product_id}"
                image = self.placeholder_image
                price = line.price

            items.append(
                {
                    "product_id": line.product_id,
                    "product_name": name,
                    "product_image": image,
                    "quantity": line.quantity,
                    "price_at_purchase": price,
                }
            )
            total_amount += price * line.quantity

        order = self.order_repo.create(
            {
                "user_id": user.id if user else None,
                "customer_name": payload.customer_name,
                "customer_email": payload.customer_email,
                "total_amount": round(total_amount, 2),
                "payment_status": payload.payment_status,
                "payment_reference": payload.payment_reference,
                "shipping_address": payload.shipping_address.model_dump(),
                "items": items,
            }
        )
        logger.info(
            f"Order placed: id={order.id} email={order.customer_email} "
            f"total={order.total_amount}"
        )
        return order

    # -------- Lookups --------

    def get_order(self, order_id: str, user: Principal | None) -> Order:
        """
        Get a single order.

        - 404 if the order does not exist.
        - Logged-in non-admins may only see their own orders (403).
        - Guests can look an order up by id (guest checkout confirmation).
        """
        order = self.order_repo.get_by_id(order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        if user is not None and not user.is_admin and order.user_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to view this order",
            )
        return order

    def list_user_orders(self, user: Principal) -> list[Order]:
        return self.order_repo.list_for_user(user.id)

    # -------- Admin operations --------

    def list_orders(
        self,
        status_filter: str | None = None,
        payment_status_filter: str | None = None,
    ) -> list[Order]:
        """
        List all orders, optionally filtered. "all" means no filter.
        """
        orders = self.order_repo.get_all()

        if status_filter and status_filter != "all":
            orders = [o for o in orders if o.status == status_filter]

        if payment_status_filter and payment_status_filter != "all":
            orders = [o for o in orders if o.payment_status == payment_status_filter]

        return orders

    def update_order(self, order_id: str, payload: OrderUpdate) -> Order:
        """
        Partial update of status / payment_status / payment_reference.

        Fields not sent keep their stored value. payment_reference may be
        set to null explicitly; the two status fields may not.
        """
        changes = payload.model_dump(exclude_unset=True)
        for key in ("status", "payment_status"):
            if changes.get(key, ...) is None:
                del changes[key]

        if not changes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No valid update fields provided",
            )

        order = self.order_repo.update(order_id, changes)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order
