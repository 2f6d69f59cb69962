# storefront/schemas/product.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin).

    - images is optional: the store falls back to a placeholder image.
    - stock defaults to 0; negative values are clamped by the store.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    name: str = Field(max_length=255)
    description: str
    price: float = Field(gt=0)
    category: str = Field(max_length=50)
    images: list[str] | None = None
    stock: int = 0

    @field_validator("name", "description", "category")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional; only the ones sent are changed.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: float | None = None
    category: str | None = Field(default=None, max_length=50)
    images: list[str] | None = None
    stock: int | None = None

    @field_validator("name", "category")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class CategoryRead(SQLModel):
    """
    Category with the number of products currently filed under it.

    Labels used by products but missing from categories.json are listed
    too, without id, description, image or timestamps.
    """

    id: str | None = None
    name: str
    slug: str
    description: str = ""
    image: str = ""
    product_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryUpdate(SQLModel):
    """
    Admin payload to change a category. Only the fields sent are changed;
    description may be set to an empty string.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=50)
    description: str | None = None
    image: str | None = None

    @field_validator("name", "image")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v
