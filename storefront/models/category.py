from sqlmodel import Field

from storefront.models.record import Record


class Category(Record):
    """
    Catalog category stored in categories.json.

    Products reference a category by its name (case-insensitive), so
    the product count is never stored here.
    """

    name: str = Field(description="Display name, matched against Product.category")
    slug: str = Field(description="URL-friendly form of the name")
    description: str = Field(default="")
    image: str = Field(default="", description="Banner image URL")
