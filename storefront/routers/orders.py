# storefront/routers/orders.py
from fastapi import APIRouter, Depends, Query, status

from storefront.core.auth import get_current_user, require_admin, require_auth
from storefront.core.config import Settings
from storefront.database import get_app_settings, get_order_repo, get_product_repo
from storefront.models.order import Order
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import CheckoutRequest, OrderList, OrderUpdate
from storefront.schemas.user import Principal
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(
    order_repo: OrderRepository = Depends(get_order_repo),
    product_repo: ProductRepository = Depends(get_product_repo),
    settings: Settings = Depends(get_app_settings),
) -> OrderService:
    return OrderService(order_repo, product_repo, settings.PLACEHOLDER_IMAGE)


# -------- Customer-facing endpoints --------


@router.post(
    "/checkout",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: CheckoutRequest,
    service: OrderService = Depends(get_order_service),
    current_user: Principal | None = Depends(get_current_user),
):
    """
    Place an order from the submitted cart lines.

    Auth:
      - Optional. Guests get an order with user_id = null.
    """
    return service.checkout(payload, current_user)


@router.get("/me", response_model=list[Order])
def list_my_orders(
    service: OrderService = Depends(get_order_service),
    current_user: Principal = Depends(require_auth),
):
    """
    List the authenticated user's orders.
    """
    return service.list_user_orders(current_user)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
    current_user: Principal | None = Depends(get_current_user),
):
    """
    Get a single order.

    - Admins: any order.
    - Customers: their own orders only.
    - Guests: by id (checkout confirmation page).
    """
    return service.get_order(order_id, current_user)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=OrderList,
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    payment_status: str | None = None,
    service: OrderService = Depends(get_order_service),
):
    """
    List all orders (admin only), optionally filtered by `status` and/or
    `payment_status` ("all" disables a filter).
    """
    orders = service.list_orders(status_filter, payment_status)
    return OrderList(orders=orders, total=len(orders))


@router.patch(
    "/{order_id}",
    response_model=Order,
    dependencies=[Depends(require_admin)],
)
def update_order(
    order_id: str,
    payload: OrderUpdate,
    service: OrderService = Depends(get_order_service),
):
    """
    Update status / payment status / payment reference (admin only).
    """
    return service.update_order(order_id, payload)
