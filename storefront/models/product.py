# storefront/models/product.py
from pydantic import field_validator
from sqlmodel import Field

from storefront.models.record import Record, clamp_non_negative


class Product(Record):
    """
    Catalog entry stored in products.json.

    Fields:
      - id, name, description, price, category, images, stock,
        created_at, updated_at
    """

    name: str = Field(description="Display name of the product")

    description: str = Field(
        default="",
        description="Long description shown on the product page",
    )

    price: float = Field(
        default=0.0,
        description="Unit price in dollars, never negative",
    )

    category: str = Field(
        default="",
        description="Free-form category label (e.g. 'Gaming')",
    )

    images: list[str] = Field(
        default_factory=list,
        description="Image URLs; the first one is used as the thumbnail",
    )

    stock: int = Field(
        default=0,
        description="Units currently available, never negative",
    )

    @field_validator("price", "stock")
    @classmethod
    def non_negative(cls, v: float) -> float:
        return clamp_non_negative(v)

    @property
    def thumbnail(self) -> str:
        return self.images[0] if self.images else ""
