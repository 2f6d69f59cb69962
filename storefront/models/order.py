# storefront/models/order.py
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.models.record import Record, clamp_non_negative

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]


class ShippingAddress(SQLModel):
    """
    Postal address an order ships to. Only line2 is optional.
    """

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    name: str
    line1: str
    line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str


class OrderItem(SQLModel):
    """
    Line item inside an order.

    product_name / product_image / price_at_purchase are snapshots taken
    when the order was placed; later product edits do not touch them.
    """

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    # item-<order id>-<index>
    id: str
    product_id: str
    product_name: str
    product_image: str = ""
    quantity: int
    price_at_purchase: float

    @field_validator("quantity", "price_at_purchase")
    @classmethod
    def non_negative(cls, v: float) -> float:
        return clamp_non_negative(v)


class Order(Record):
    """
    Customer order stored in orders.json.

    user_id is None for guest checkout.
    """

    user_id: str | None = Field(
        default=None,
        description="Owner of the order, None for guest checkout",
    )

    customer_name: str
    customer_email: str

    # Sum of price_at_purchase * quantity over items
    total_amount: float = Field(default=0.0)

    status: OrderStatus = Field(
        default="pending",
        description="Fulfillment lifecycle",
    )
    payment_status: PaymentStatus = Field(default="pending")
    payment_reference: str | None = Field(
        default=None,
        description="Identifier from the payment provider, if any",
    )

    shipping_address: ShippingAddress
    items: list[OrderItem] = Field(default_factory=list)

    @field_validator("total_amount")
    @classmethod
    def non_negative(cls, v: float) -> float:
        return clamp_non_negative(v)

    @field_validator("customer_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()
