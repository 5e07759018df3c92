# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Filterable columns used by the listing query:
      - category_id, brand_id, price, stock, featured,
        average_rating, is_active, created_at
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description / HTML",
    )

    price: float = Field(
        ge=0,
        index=True,
        description="Current selling price",
    )

    original_price: float | None = Field(
        default=None,
        description="Price before discount, shown struck through",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    featured: bool = Field(default=False, index=True)

    average_rating: float = Field(default=0.0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)

    main_image: str | None = Field(
        default=None,
        description="Main image URL",
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    category_id: uuid.UUID = Field(
        foreign_key="categories.id",
        index=True,
    )

    brand_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="brands.id",
        index=True,
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class ProductVariant(SQLModel, table=True):
    """
    One value on one variant axis (e.g. type="color", value="red").

    A cart selection picks at most one value per type.
    """

    __tablename__ = "product_variants"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    name: str = Field(max_length=100)
    type: str = Field(max_length=50, description="Variant axis, e.g. color / size")
    value: str = Field(max_length=100)

    price_modifier: float = Field(
        default=0.0,
        description="Added to the product price when this value is selected",
    )

    stock: int = Field(default=0, ge=0)

    sku: str | None = Field(
        default=None,
        unique=True,
        index=True,
    )


class ProductTag(SQLModel, table=True):
    __tablename__ = "product_tags"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    name: str = Field(max_length=50, index=True)


class ProductSpecification(SQLModel, table=True):
    """
    Category-specific attribute value for a product (e.g. "RAM" = "16GB").
    """

    __tablename__ = "product_specifications"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    name: str = Field(max_length=100, index=True)
    value: str = Field(max_length=255)
