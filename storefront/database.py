# storefront/database.py
from dataclasses import dataclass

from fastapi import Depends, Request

from storefront.core.config import Settings, get_settings
from storefront.repositories.cart_repo import FileCartStorage
from storefront.repositories.category_repo import CategoryRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository

# ---------------------------------------------------------
# File-backed "database"
#
# - one JSON array document per entity under DATA_DIR
#   (products.json, orders.json, categories.json)
# - one JSON file per cart session under DATA_DIR/carts/
#
# The stores are built once per process at startup and handed to
# routes through the dependencies below; nothing is a module-level
# singleton, so tests can point a fresh app at a temp directory.
# ---------------------------------------------------------


@dataclass
class Stores:
    products: ProductRepository
    orders: OrderRepository
    categories: CategoryRepository
    carts: FileCartStorage


def open_stores(settings: Settings) -> Stores:
    """
    Create the data directory and the stores on top of it.

    Called once on application startup.
    """
    settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return Stores(
        products=ProductRepository(
            settings.products_path,
            placeholder_image=settings.PLACEHOLDER_IMAGE,
            seed_defaults=settings.SEED_PRODUCTS,
            reload_on_access=settings.STORE_RELOAD_ON_ACCESS,
        ),
        orders=OrderRepository(
            settings.orders_path,
            reload_on_access=settings.STORE_RELOAD_ON_ACCESS,
        ),
        categories=CategoryRepository(
            settings.categories_path,
            default_image=settings.CATEGORY_PLACEHOLDER_IMAGE,
            seed_defaults=settings.SEED_CATEGORIES,
            reload_on_access=settings.STORE_RELOAD_ON_ACCESS,
        ),
        carts=FileCartStorage(settings.carts_path),
    )


def get_stores(request: Request) -> Stores:
    """
    FastAPI dependency returning the stores opened in the app lifespan.

    Usage:

        @router.get("/example")
        def example_endpoint(stores: Stores = Depends(get_stores)):
            ...
    """
    return request.app.state.stores


def get_product_repo(stores: Stores = Depends(get_stores)) -> ProductRepository:
    return stores.products


def get_order_repo(stores: Stores = Depends(get_stores)) -> OrderRepository:
    return stores.orders


def get_category_repo(stores: Stores = Depends(get_stores)) -> CategoryRepository:
    return stores.categories


def get_cart_storage(stores: Stores = Depends(get_stores)) -> FileCartStorage:
    return stores.carts


def get_app_settings() -> Settings:
    return get_settings()
