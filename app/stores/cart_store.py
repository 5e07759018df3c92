# app/stores/cart_store.py
"""
Persisted shopping cart.

The rules live in pure transition functions (items in, Transition out)
so they can be tested without storage or notifications; CartStore applies
them, writes through to storage and dispatches the notification.
"""

from collections.abc import Mapping

from pydantic import BaseModel, Field, model_validator

from app.core.notifications import Notification
from app.stores.base import ActionResult, PersistedStore, Transition

CART_STORAGE_KEY = "cart-store"


def generate_cart_key(product_id: str, variants: Mapping[str, str] | None = None) -> str:
    """
    Composite cart key: the product id alone, or
    "<product_id>-<type>=<value>&..." with variant types sorted,
    so the same selection always yields the same key.
    """
    if not variants:
        return product_id
    variant_key = "&".join(f"{type_}={variants[type_]}" for type_ in sorted(variants))
    return f"{product_id}-{variant_key}"


class CartItem(BaseModel):
    """
    One cart line. `stock` is the ceiling recorded when the line was added.
    """

    key: str = ""
    id: str
    name: str
    slug: str
    price: float = Field(ge=0)
    main_image: str | None = None
    quantity: int = Field(gt=0)
    stock: int = Field(ge=0)
    variants: dict[str, str] = Field(default_factory=dict)
    category_id: str
    category: str | None = None

    @model_validator(mode="after")
    def derive_key(self) -> "CartItem":
        # Never trust a supplied key; it is a function of id + variants
        self.key = generate_cart_key(self.id, self.variants)
        return self

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


def _stock_notification(item: CartItem, title: str) -> Notification:
    return Notification(
        title=title,
        description=f"Only {item.stock} of {item.name} available.",
        variant="destructive",
    )


def _find(items: list[CartItem], key: str) -> CartItem | None:
    return next((i for i in items if i.key == key), None)


def _with_quantity(items: list[CartItem], key: str, quantity: int) -> list[CartItem]:
    return [
        i.model_copy(update={"quantity": quantity}) if i.key == key else i
        for i in items
    ]


# ---- pure transitions ----


def add_item(items: list[CartItem], new_item: CartItem) -> Transition:
    """
    Merge into an existing line or insert a new one.

      - existing line: quantities are summed; above the recorded stock
        the line is clamped to stock and the result is unsuccessful.
      - new line: inserted only if quantity <= stock.
    """
    existing = _find(items, new_item.key)

    if existing is not None:
        new_qty = existing.quantity + new_item.quantity
        if new_qty > existing.stock:
            if existing.quantity == existing.stock:
                updated = items
            else:
                updated = _with_quantity(items, existing.key, existing.stock)
            return Transition(
                updated,
                ActionResult(success=False, message="Stock exceeded"),
                _stock_notification(existing, "Not enough stock"),
            )

        return Transition(
            _with_quantity(items, existing.key, new_qty),
            ActionResult(success=True, message="Quantity increased"),
            Notification(
                title="Cart Updated",
                description=f"{new_item.name} quantity increased.",
                variant="success",
            ),
        )

    if new_item.quantity > new_item.stock:
        return Transition(
            items,
            ActionResult(success=False, message="Stock exceeded"),
            _stock_notification(new_item, "Not enough stock"),
        )

    return Transition(
        [*items, new_item],
        ActionResult(success=True, message="Item added"),
        Notification(
            title="Item Added",
            description=f"{new_item.name} was added to your cart.",
            variant="success",
        ),
    )


def remove_item(items: list[CartItem], key: str) -> Transition:
    if _find(items, key) is None:
        return Transition(items, ActionResult(success=True, message="Not in cart"))

    return Transition(
        [i for i in items if i.key != key],
        ActionResult(success=True, message="Removed"),
        Notification(
            title="Item Removed",
            description="The item was removed from your cart.",
        ),
    )


def update_quantity(items: list[CartItem], key: str, quantity: int) -> Transition:
    if quantity <= 0:
        removed = remove_item(items, key)
        return removed._replace(result=ActionResult(success=True, message="Removed"))

    item = _find(items, key)
    if item is None:
        return Transition(items, ActionResult(success=False, message="Not found"))

    if quantity > item.stock:
        return Transition(
            _with_quantity(items, key, item.stock),
            ActionResult(success=False, message="Quantity adjusted to stock limit"),
            _stock_notification(item, "Stock limit reached"),
        )

    return Transition(
        _with_quantity(items, key, quantity),
        ActionResult(success=True, message="Quantity updated"),
        Notification(
            title="Quantity Updated",
            description=f"{item.name} quantity set to {quantity}.",
            variant="success",
        ),
    )


def clear_cart(items: list[CartItem]) -> Transition:
    return Transition(
        [],
        ActionResult(success=True, message="Cart cleared"),
        Notification(title="Cart cleared"),
    )


class CartStore(PersistedStore[CartItem]):
    """
    The customer's cart, persisted under "cart-store".
    """

    storage_key = CART_STORAGE_KEY
    item_type = CartItem

    def add_item(self, item: CartItem) -> ActionResult:
        return self._commit(add_item(self.items, item))

    def remove_item(self, key: str) -> ActionResult:
        return self._commit(remove_item(self.items, key))

    def update_quantity(self, key: str, quantity: int) -> ActionResult:
        return self._commit(update_quantity(self.items, key, quantity))

    def clear_cart(self) -> ActionResult:
        return self._commit(clear_cart(self.items))

    # ---- queries ----

    def get_item(self, key: str) -> CartItem | None:
        return _find(self.items, key)

    def is_in_cart(self, product_id: str, variants: Mapping[str, str] | None = None) -> bool:
        return _find(self.items, generate_cart_key(product_id, variants)) is not None

    @property
    def cart_count(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def subtotal(self) -> float:
        return sum(i.line_total for i in self.items)
