# storefront/schemas/order.py
from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

from storefront.models.order import Order, OrderStatus, PaymentStatus, ShippingAddress


class ShippingAddressIn(ShippingAddress):
    """
    Shipping address as submitted at checkout; every line except line2
    must be non-blank.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    @field_validator("name", "line1", "city", "state", "postal_code", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("field cannot be empty")
        return v


class CheckoutItem(SQLModel):
    """
    One cart line as sent by the client at checkout.

    name / price are only used when the product no longer exists;
    otherwise the catalog values win.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    product_id: str
    name: str = ""
    price: float = Field(default=0.0, ge=0)
    quantity: int = Field(gt=0)


class CheckoutRequest(SQLModel):
    """
    Payload for placing an order.

    Backend derives:
      - user_id from the token (None for guests)
      - status = 'pending'
      - product snapshots and total_amount from the catalog
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    customer_name: str
    customer_email: EmailStr
    shipping_address: ShippingAddressIn
    items: list[CheckoutItem]
    payment_status: PaymentStatus = "pending"
    payment_reference: str | None = None

    @field_validator("customer_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OrderUpdate(SQLModel):
    """
    Admin payload to change an order. Only the fields sent are changed.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    payment_reference: str | None = None


class OrderList(SQLModel):
    """
    List response with the number of orders after filtering.
    """

    orders: list[Order]
    total: int
