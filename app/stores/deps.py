# app/stores/deps.py
"""
FastAPI dependencies that hand each request the stores of the calling client.

Every request rebuilds its stores from storage (hydrate) and writes back
on each mutation; nothing is cached in process between requests.
"""

from pathlib import Path

from fastapi import Depends

from app.core.auth import require_client_id
from app.core.config import Settings, get_settings
from app.core.notifications import NotificationCollector
from app.core.storage import FileStorage, KeyValueStorage
from app.stores.cart_store import CartStore
from app.stores.saved_store import CompareStore, WishlistStore


def get_client_storage(
    client_id: str = Depends(require_client_id),
    settings: Settings = Depends(get_settings),
) -> KeyValueStorage:
    return FileStorage(Path(settings.STORE_DATA_DIR) / client_id)


def get_notifications() -> NotificationCollector:
    """One collector per request; FastAPI reuses it across dependencies."""
    return NotificationCollector()


def get_cart_store(
    storage: KeyValueStorage = Depends(get_client_storage),
    notifications: NotificationCollector = Depends(get_notifications),
) -> CartStore:
    store = CartStore(storage, notifications)
    store.hydrate()
    return store


def get_wishlist_store(
    storage: KeyValueStorage = Depends(get_client_storage),
    notifications: NotificationCollector = Depends(get_notifications),
) -> WishlistStore:
    store = WishlistStore(storage, notifications)
    store.hydrate()
    return store


def get_compare_store(
    storage: KeyValueStorage = Depends(get_client_storage),
    notifications: NotificationCollector = Depends(get_notifications),
    settings: Settings = Depends(get_settings),
) -> CompareStore:
    store = CompareStore(storage, notifications, max_items=settings.COMPARE_MAX_ITEMS)
    store.hydrate()
    return store
