# storefront/routers/products.py
from fastapi import APIRouter, Depends, status

from storefront.core.auth import require_admin
from storefront.database import get_product_repo
from storefront.models.product import Product
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])


def get_product_service(repo: ProductRepository = Depends(get_product_repo)) -> ProductService:
    return ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=list[Product])
def list_products(
    category: str | None = None,
    search: str | None = None,
    service: ProductService = Depends(get_product_service),
):
    """
    List products.

    - Public endpoint.
    - `category` filters by exact category (case-insensitive).
    - `search` matches name or description (case-insensitive).
    """
    return service.list_products(category=category, search=search)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
):
    """
    Create a new product (admin only).
    """
    return service.create_product(payload)


@router.patch(
    "/{product_id}",
    response_model=Product,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    """
    Update an existing product (admin only).
    """
    return service.update_product(product_id, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    """
    Delete a product (admin only).
    """
    service.delete_product(product_id)
    return None
