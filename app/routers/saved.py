# app/routers/saved.py
"""
Wishlist and compare list endpoints. Both lists share one shape,
so the routes are built once per store dependency.
"""

import uuid
from collections.abc import Callable

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.notifications import NotificationCollector
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import MembershipRead, SavedItemCreate, SavedListResponse
from app.services.cart_service import CartService
from app.stores.deps import get_compare_store, get_notifications, get_wishlist_store
from app.stores.saved_store import SavedProductStore

product_repo = ProductRepository()
service = CartService(product_repo)


def build_saved_router(
    prefix: str,
    tag: str,
    get_store: Callable[..., SavedProductStore],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=SavedListResponse)
    def list_items(
        store: SavedProductStore = Depends(get_store),
        notifications: NotificationCollector = Depends(get_notifications),
    ):
        return service.saved_response(store, notifications)

    @router.post("", response_model=SavedListResponse)
    def add_item(
        payload: SavedItemCreate,
        session: Session = Depends(get_session),
        store: SavedProductStore = Depends(get_store),
        notifications: NotificationCollector = Depends(get_notifications),
    ):
        """
        Save a product. Already saved is a no-op; a full compare list
        comes back with result.success=false.
        """
        product = service.build_saved_product(session, payload.product_id)
        result = store.add_item(product)
        return service.saved_response(store, notifications, result)

    @router.post("/{product_id}/toggle", response_model=SavedListResponse)
    def toggle_item(
        product_id: uuid.UUID,
        session: Session = Depends(get_session),
        store: SavedProductStore = Depends(get_store),
        notifications: NotificationCollector = Depends(get_notifications),
    ):
        if store.contains(str(product_id)):
            result = store.remove_item(str(product_id))
        else:
            product = service.build_saved_product(session, product_id)
            result = store.toggle_item(product)
        return service.saved_response(store, notifications, result)

    @router.get("/{product_id}", response_model=MembershipRead)
    def contains_item(
        product_id: uuid.UUID,
        store: SavedProductStore = Depends(get_store),
    ):
        return MembershipRead(key=str(product_id), in_list=store.contains(str(product_id)))

    @router.delete("/{product_id}", response_model=SavedListResponse)
    def remove_item(
        product_id: uuid.UUID,
        store: SavedProductStore = Depends(get_store),
        notifications: NotificationCollector = Depends(get_notifications),
    ):
        result = store.remove_item(str(product_id))
        return service.saved_response(store, notifications, result)

    @router.delete("", response_model=SavedListResponse)
    def clear_items(
        store: SavedProductStore = Depends(get_store),
        notifications: NotificationCollector = Depends(get_notifications),
    ):
        result = store.clear_all()
        return service.saved_response(store, notifications, result)

    return router


wishlist_router = build_saved_router("/wishlist", "Wishlist", get_wishlist_store)
compare_router = build_saved_router("/compare", "Compare", get_compare_store)
