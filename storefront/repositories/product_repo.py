# storefront/repositories/product_repo.py
from pathlib import Path
from typing import Any

from storefront.models.product import Product
from storefront.repositories.record_store import RecordStore

DEFAULT_PLACEHOLDER_IMAGE = "/api/placeholder/300/300"

# Demo catalog written when products.json does not exist yet.
DEFAULT_PRODUCTS: list[dict[str, Any]] = [
    {
        "name": "Custom Phone Stand",
        "description": "Adjustable phone stand perfect for desk work",
        "price": 12.99,
        "category": "Accessories",
        "stock": 50,
    },
    {
        "name": "Gaming Controller Holder",
        "description": "Organize your gaming controllers with this sleek holder",
        "price": 18.99,
        "category": "Gaming",
        "stock": 25,
    },
    {
        "name": "Desk Organizer",
        "description": "Keep your desk tidy with this multi-compartment organizer",
        "price": 24.99,
        "category": "Office",
        "stock": 30,
    },
]


class ProductRepository(RecordStore[Product]):
    """
    Data access layer for products.json.

    - Pure file operations (CRUD) via RecordStore.
    - No FastAPI, no business logic.
    """

    model = Product
    entity = "product"

    def __init__(
        self,
        path: str | Path,
        *,
        placeholder_image: str = DEFAULT_PLACEHOLDER_IMAGE,
        seed_defaults: bool = False,
        **kwargs: Any,
    ):
        self.placeholder_image = placeholder_image
        seed = DEFAULT_PRODUCTS if seed_defaults else None
        super().__init__(path, seed=seed, **kwargs)

    def prepare_create(self, fields: dict[str, Any], record_id: str) -> dict[str, Any]:
        data = dict(fields)
        if not data.get("images"):
            data["images"] = [self.placeholder_image]
        if data.get("stock") is None:
            data["stock"] = 0
        return data
