# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from app.core.notifications import NotificationCollector
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartItemCreate, CartItemUpdate, CartResponse, MembershipRead
from app.services.cart_service import CartService
from app.stores.cart_store import CartStore, generate_cart_key
from app.stores.deps import get_cart_store, get_notifications

router = APIRouter(prefix="/cart", tags=["Cart"])

product_repo = ProductRepository()
service = CartService(product_repo)


@router.get("", response_model=CartResponse)
def get_my_cart(
    store: CartStore = Depends(get_cart_store),
    notifications: NotificationCollector = Depends(get_notifications),
):
    """
    Get the calling client's cart (X-Client-Id header).
    """
    return service.cart_response(store, notifications)


@router.post("", response_model=CartResponse)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    store: CartStore = Depends(get_cart_store),
    notifications: NotificationCollector = Depends(get_notifications),
):
    """
    Add a product (optionally a variant selection) to the cart.

    Exceeding stock is not an HTTP error: the response carries
    result.success=false and a "Not enough stock" notification.
    """
    item = service.build_cart_item(session, payload)
    result = store.add_item(item)
    return service.cart_response(store, notifications, result)


@router.get("/contains", response_model=MembershipRead)
def is_in_cart(
    product_id: uuid.UUID,
    variant: list[str] = Query(default=[], description="type:value, repeatable"),
    store: CartStore = Depends(get_cart_store),
):
    """
    Whether a product + variant selection is already in the cart.

    Example: /cart/contains?product_id=...&variant=color:red&variant=size:M
    """
    variants: dict[str, str] = {}
    for raw in variant:
        type_, sep, value = raw.partition(":")
        if not sep or not type_ or not value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="variant must look like type:value",
            )
        variants[type_] = value

    key = generate_cart_key(str(product_id), variants)
    return MembershipRead(key=key, in_list=store.is_in_cart(str(product_id), variants))


# Cart keys embed raw variant values, which may contain "/"
@router.patch("/items/{key:path}", response_model=CartResponse)
def update_cart_item(
    key: str,
    payload: CartItemUpdate,
    store: CartStore = Depends(get_cart_store),
    notifications: NotificationCollector = Depends(get_notifications),
):
    """
    Set the quantity of a cart line. 0 or less removes it;
    above stock it is clamped to the stock limit.
    """
    result = store.update_quantity(key, payload.quantity)
    return service.cart_response(store, notifications, result)


@router.delete("/items/{key:path}", response_model=CartResponse)
def remove_cart_item(
    key: str,
    store: CartStore = Depends(get_cart_store),
    notifications: NotificationCollector = Depends(get_notifications),
):
    """
    Remove a cart line. Removing a missing key is a no-op.
    """
    result = store.remove_item(key)
    return service.cart_response(store, notifications, result)


@router.delete("", response_model=CartResponse)
def clear_cart(
    store: CartStore = Depends(get_cart_store),
    notifications: NotificationCollector = Depends(get_notifications),
):
    """
    Clear the entire cart.
    """
    result = store.clear_cart()
    return service.cart_response(store, notifications, result)
