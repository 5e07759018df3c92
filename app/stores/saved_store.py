# app/stores/saved_store.py
"""
Wishlist and compare lists: deduplicated, persisted product references.

Membership is by product id only; there is no quantity or variant.
The compare list is capped, and the cap is checked on add only.
"""

from pydantic import BaseModel, Field

from app.core.notifications import Notification, Notifier
from app.core.storage import KeyValueStorage
from app.stores.base import ActionResult, PersistedStore, Transition

WISHLIST_STORAGE_KEY = "wishlist-store"
COMPARE_STORAGE_KEY = "compare-store"
DEFAULT_COMPARE_MAX_ITEMS = 4


class SavedProduct(BaseModel):
    """
    Snapshot of a product at the time it was saved.
    """

    id: str
    name: str
    slug: str
    price: float
    original_price: float | None = None
    main_image: str | None = None
    stock: int = 0
    brand: str | None = None
    category: str | None = None
    average_rating: float = 0.0
    specifications: dict[str, str] = Field(default_factory=dict)


def _contains(items: list[SavedProduct], product_id: str) -> bool:
    return any(p.id == product_id for p in items)


# ---- pure transitions ----


def add_saved(
    items: list[SavedProduct],
    product: SavedProduct,
    label: str,
    max_items: int | None = None,
) -> Transition:
    if _contains(items, product.id):
        return Transition(items, ActionResult(success=True, message="Already saved"))

    if max_items is not None and len(items) >= max_items:
        return Transition(
            items,
            ActionResult(success=False, message="List full"),
            Notification(
                title=f"{label} Full",
                description=(
                    f"You can only compare up to {max_items} items. "
                    "Please remove one first."
                ),
                variant="destructive",
            ),
        )

    return Transition(
        [*items, product],
        ActionResult(success=True, message="Added"),
        Notification(
            title=f"Added to {label}",
            description=f"{product.name} has been added to your {label.lower()}.",
        ),
    )


def remove_saved(items: list[SavedProduct], product_id: str, label: str) -> Transition:
    removed = next((p for p in items if p.id == product_id), None)
    if removed is None:
        return Transition(items, ActionResult(success=True, message="Not saved"))

    return Transition(
        [p for p in items if p.id != product_id],
        ActionResult(success=True, message="Removed"),
        Notification(
            title=f"Removed from {label}",
            description=f"{removed.name} has been removed from your {label.lower()}.",
            variant="destructive",
        ),
    )


def toggle_saved(
    items: list[SavedProduct],
    product: SavedProduct,
    label: str,
    max_items: int | None = None,
) -> Transition:
    if _contains(items, product.id):
        return remove_saved(items, product.id, label)
    return add_saved(items, product, label, max_items)


def clear_saved(items: list[SavedProduct], label: str) -> Transition:
    return Transition(
        [],
        ActionResult(success=True, message="Cleared"),
        Notification(title=f"{label} Cleared"),
    )


class SavedProductStore(PersistedStore[SavedProduct]):
    """
    Shared behaviour for the wishlist and compare list.
    """

    item_type = SavedProduct
    label: str
    max_items: int | None = None

    def add_item(self, product: SavedProduct) -> ActionResult:
        return self._commit(add_saved(self.items, product, self.label, self.max_items))

    def remove_item(self, product_id: str) -> ActionResult:
        return self._commit(remove_saved(self.items, product_id, self.label))

    def toggle_item(self, product: SavedProduct) -> ActionResult:
        return self._commit(toggle_saved(self.items, product, self.label, self.max_items))

    def clear_all(self) -> ActionResult:
        return self._commit(clear_saved(self.items, self.label))

    def contains(self, product_id: str) -> bool:
        return _contains(self.items, product_id)


class WishlistStore(SavedProductStore):
    storage_key = WISHLIST_STORAGE_KEY
    label = "Wishlist"

    def is_in_wishlist(self, product_id: str) -> bool:
        return self.contains(product_id)


class CompareStore(SavedProductStore):
    storage_key = COMPARE_STORAGE_KEY
    label = "Compare List"

    def __init__(
        self,
        storage: KeyValueStorage,
        notifier: Notifier | None = None,
        max_items: int = DEFAULT_COMPARE_MAX_ITEMS,
    ):
        super().__init__(storage, notifier)
        self.max_items = max_items

    def is_in_compare(self, product_id: str) -> bool:
        return self.contains(product_id)
