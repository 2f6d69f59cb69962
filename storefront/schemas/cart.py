# storefront/schemas/cart.py
from sqlmodel import SQLModel

from storefront.models.cart import CartChange, CartLineItem


class CartItemAdd(SQLModel):
    """
    Payload for adding to cart.

    quantity is not range-checked here: the cart ignores non-positive
    quantities and clamps to stock.
    """

    product_id: str
    quantity: int = 1


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line. <= 0 removes it.
    """

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    product_id: str
    name: str
    unit_price: float
    image_ref: str
    quantity: int
    stock_limit: int
    line_total: float

    @classmethod
    def from_line(cls, line: CartLineItem) -> "CartItemRead":
        return cls(**line.model_dump(), line_total=line.line_total)


class CartChangeRead(SQLModel):
    kind: str
    product_id: str | None = None
    requested: int | None = None
    quantity: int
    clamped: bool


class CartSummary(SQLModel):
    """
    Full cart response model with totals and, after a mutation, what
    the mutation actually did.
    """

    items: list[CartItemRead]
    item_count: int
    total: float
    change: CartChangeRead | None = None

    @classmethod
    def build(
        cls,
        items: list[CartLineItem],
        item_count: int,
        total: float,
        change: CartChange | None = None,
    ) -> "CartSummary":
        return cls(
            items=[CartItemRead.from_line(it) for it in items],
            item_count=item_count,
            total=total,
            change=(
                CartChangeRead(**change.model_dump(), clamped=change.clamped)
                if change is not None
                else None
            ),
        )
