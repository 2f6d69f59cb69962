# storefront/models/cart.py
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartProduct(SQLModel):
    """
    Product snapshot handed to the cart when adding an item.

    Only these five fields are read; anything else is ignored.
    """

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: str
    name: str
    price: float
    images: list[str] = Field(default_factory=list)
    stock: int


class CartLineItem(SQLModel):
    """
    One row in the cart.

    One cart cannot hold 2 rows for the same product_id.
    name / unit_price / image_ref are taken when the product is first
    added and are not re-synced afterwards.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    product_id: str
    name: str
    unit_price: float
    image_ref: str = ""
    quantity: int = Field(ge=1, description="Must be >= 1")
    stock_limit: int = Field(ge=0, description="Stock seen at the last add/update")

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


CartChangeKind = Literal["added", "merged", "updated", "removed", "cleared", "ignored"]


class CartChange(SQLModel):
    """
    Outcome of one cart mutation.

    `requested` is the line quantity the call would have produced without
    stock limits (for a merge: existing + added), `quantity` is what the
    cart now holds for that product (0 when the line is gone). Callers
    compare the two to decide whether to tell the user about clamping.
    """

    kind: CartChangeKind
    product_id: str | None = None
    requested: int | None = None
    quantity: int = 0

    @property
    def clamped(self) -> bool:
        return (
            self.kind in ("added", "merged", "updated")
            and self.requested is not None
            and self.quantity < self.requested
        )
