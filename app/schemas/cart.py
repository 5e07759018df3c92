# app/schemas/cart.py
import uuid

from pydantic import computed_field
from sqlmodel import SQLModel, Field

from app.core.notifications import Notification
from app.stores.base import ActionResult
from app.stores.cart_store import CartItem
from app.stores.saved_store import SavedProduct


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    variants: variant type -> chosen value, e.g. {"color": "red", "size": "M"}
    """

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)
    variants: dict[str, str] = Field(default_factory=dict)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item. 0 or less removes it.
    """

    quantity: int


class CartItemRead(CartItem):
    """
    Cart line with its line_total.
    """

    @computed_field
    @property
    def line_total(self) -> float:
        return super().line_total


class CartResponse(SQLModel):
    """
    Cart state after an action, plus what happened.
    """

    items: list[CartItemRead]
    total_quantity: int
    total_price: float
    result: ActionResult | None = None
    notifications: list[Notification] = Field(default_factory=list)


class SavedItemCreate(SQLModel):
    product_id: uuid.UUID


class SavedListResponse(SQLModel):
    items: list[SavedProduct]
    max_items: int | None = None
    result: ActionResult | None = None
    notifications: list[Notification] = Field(default_factory=list)


class MembershipRead(SQLModel):
    key: str
    in_list: bool
