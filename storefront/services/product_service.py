# storefront/services/product_service.py
from fastapi import HTTPException, status

from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductUpdate


class ProductService:
    """
    Business logic for the catalog.

    Responsibilities:
      - category / search filtering
      - map "not found" results from the store to HTTP 404
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Products -----

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Product]:
        """
        List products, optionally filtered.

        - category: case-insensitive exact match
        - search: case-insensitive substring of name or description
        """
        products = self.repo.get_all()

        if category:
            wanted = category.lower()
            products = [p for p in products if p.category.lower() == wanted]

        if search:
            needle = search.lower()
            products = [
                p
                for p in products
                if needle in p.name.lower() or needle in p.description.lower()
            ]

        return products

    def get_product(self, product_id: str) -> Product:
        product = self.repo.get_by_id(product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def create_product(self, payload: ProductCreate) -> Product:
        return self.repo.create(payload.model_dump(exclude_none=True))

    def update_product(self, product_id: str, payload: ProductUpdate) -> Product:
        """
        Partial update: only fields present in the request body change.
        Explicit nulls are treated as "not sent".
        """
        changes = {
            k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None
        }
        product = self.repo.update(product_id, changes)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def delete_product(self, product_id: str) -> None:
        if not self.repo.delete(product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

