# storefront/routers/categories.py
from fastapi import APIRouter, Depends

from storefront.core.auth import require_admin
from storefront.database import get_category_repo, get_product_repo
from storefront.repositories.category_repo import CategoryRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import CategoryRead, CategoryUpdate
from storefront.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


def get_category_service(
    category_repo: CategoryRepository = Depends(get_category_repo),
    product_repo: ProductRepository = Depends(get_product_repo),
) -> CategoryService:
    return CategoryService(category_repo, product_repo)


# -------- Public endpoints --------


@router.get("", response_model=list[CategoryRead])
def list_categories(service: CategoryService = Depends(get_category_service)):
    """
    All categories with their product counts (public).
    """
    return service.list_categories()


# -------- Admin endpoints --------


@router.patch(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    """
    Update a category's name, description or image (admin only).
    """
    return service.update_category(category_id, payload)
