# storefront/routers/cart.py
from fastapi import APIRouter, Depends, Header

from storefront.database import get_cart_storage, get_product_repo
from storefront.repositories.cart_repo import FileCartStorage
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.cart import CartItemAdd, CartItemUpdate, CartSummary
from storefront.services.cart_service import CART_STORAGE_KEY, CartStore
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/cart", tags=["Cart"])


def get_cart_store(
    x_cart_session: str = Header(pattern=r"^[A-Za-z0-9_-]{8,64}$"),
    storage: FileCartStorage = Depends(get_cart_storage),
) -> CartStore:
    """
    Load the cart for the session named by the X-Cart-Session header.

    Each session's items live under their own storage key, so the store
    mirrors itself into that session's file after every change.
    """
    return CartStore(storage, key=f"{CART_STORAGE_KEY}:{x_cart_session}")


def _summary(cart: CartStore, change=None) -> CartSummary:
    return CartSummary.build(cart.items, cart.item_count, cart.total, change)


@router.get("", response_model=CartSummary)
def get_cart(cart: CartStore = Depends(get_cart_store)):
    """
    Get the session's cart with item count and total.
    """
    return _summary(cart)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemAdd,
    cart: CartStore = Depends(get_cart_store),
    product_repo: ProductRepository = Depends(get_product_repo),
):
    """
    Add a product to the cart.

    - 404 if the product does not exist.
    - Quantity is clamped to stock; `change` reports requested vs. applied.
    """
    product = ProductService(product_repo).get_product(payload.product_id)
    change = cart.add_to_cart(product, payload.quantity)
    return _summary(cart, change)


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Set the quantity of a product in the cart (<= 0 removes it).
    """
    change = cart.update_quantity(product_id, payload.quantity)
    return _summary(cart, change)


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: str,
    cart: CartStore = Depends(get_cart_store),
):
    """
    Remove a product from the cart. Absent products are not an error.
    """
    change = cart.remove_from_cart(product_id)
    return _summary(cart, change)


@router.delete("", response_model=CartSummary)
def clear_cart(cart: CartStore = Depends(get_cart_store)):
    """
    Clear the entire cart (e.g. after a successful checkout).
    """
    change = cart.clear_cart()
    return _summary(cart, change)
