# app/services/cart_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.notifications import NotificationCollector
from app.models.product import Product
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemRead,
    CartResponse,
    SavedListResponse,
)
from app.stores.base import ActionResult
from app.stores.cart_store import CartItem, CartStore
from app.stores.saved_store import SavedProduct, SavedProductStore


class CartService:
    """
    Glue between the catalog and the client state stores.

    Responsibilities:
      - validate product existence and active flag
      - validate the variant selection against the product's variants
      - snapshot price (base + variant modifiers) and stock ceiling
      - shape store state into API responses
    """

    def __init__(self, product_repo: ProductRepository):
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product is inactive",
            )
        return product

    # ---- building store items ----

    def build_cart_item(self, session: Session, payload: CartItemCreate) -> CartItem:
        """
        Turn an add-to-cart request into a CartItem.

        Rules:
          - product must exist and be active
          - each selected variant type/value must exist on the product
          - unit price = product price + selected price modifiers
          - stock ceiling = product stock, or the lowest stock among
            the selected variant values
        """
        product = self._get_valid_product(session, payload.product_id)
        category = self.product_repo.get_category(session, product.category_id)

        price = product.price
        stock = product.stock

        if payload.variants:
            available = {
                (v.type, v.value): v
                for v in self.product_repo.list_variants(session, product.id)
            }
            selected = []
            for type_, value in payload.variants.items():
                variant = available.get((type_, value))
                if variant is None:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Unknown variant {type_}={value}",
                    )
                selected.append(variant)
            price += sum(v.price_modifier for v in selected)
            stock = min(v.stock for v in selected)

        return CartItem(
            id=str(product.id),
            name=product.name,
            slug=product.slug,
            price=max(price, 0.0),
            main_image=product.main_image,
            quantity=payload.quantity,
            stock=stock,
            variants=dict(payload.variants),
            category_id=str(product.category_id),
            category=category.name if category else None,
        )

    def build_saved_product(self, session: Session, product_id) -> SavedProduct:
        product = self._get_valid_product(session, product_id)
        category = self.product_repo.get_category(session, product.category_id)
        brand = (
            self.product_repo.get_brand(session, product.brand_id)
            if product.brand_id
            else None
        )
        return SavedProduct(
            id=str(product.id),
            name=product.name,
            slug=product.slug,
            price=product.price,
            original_price=product.original_price,
            main_image=product.main_image,
            stock=product.stock,
            brand=brand.name if brand else None,
            category=category.name if category else None,
            average_rating=product.average_rating,
            specifications=self.product_repo.list_specifications(session, product.id),
        )

    # ---- responses ----

    @staticmethod
    def cart_response(
        store: CartStore,
        notifications: NotificationCollector,
        result: ActionResult | None = None,
    ) -> CartResponse:
        """
        Full cart response:
          - list of CartItemRead (with line_total)
          - total_quantity
          - total_price
        """
        return CartResponse(
            items=[
                CartItemRead(**item.model_dump())
                for item in store.items
            ],
            total_quantity=store.cart_count,
            total_price=store.subtotal,
            result=result,
            notifications=notifications.notifications,
        )

    @staticmethod
    def saved_response(
        store: SavedProductStore,
        notifications: NotificationCollector,
        result: ActionResult | None = None,
    ) -> SavedListResponse:
        return SavedListResponse(
            items=store.items,
            max_items=store.max_items,
            result=result,
            notifications=notifications.notifications,
        )
