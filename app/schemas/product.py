# app/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class VariantCreate(SQLModel):
    """
    One variant value for a new product. `sku` is generated when omitted.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    type: str = Field(max_length=50)
    value: str = Field(max_length=100)
    price_modifier: float = 0.0
    stock: int = Field(default=0, ge=0)
    sku: str | None = None

    @field_validator("name", "type", "value")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class VariantRead(SQLModel):
    id: uuid.UUID
    name: str
    type: str
    value: str
    price_modifier: float
    stock: int
    sku: str | None = None


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    - specifications: category-specific attributes, name -> value.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    description: str | None = None
    price: float = Field(ge=0)
    original_price: float | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)
    featured: bool = False
    is_active: bool = True
    main_image: str | None = None
    category_id: uuid.UUID
    brand_id: uuid.UUID | None = None
    tags: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    variants: list[VariantCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        tags: list[str] = []
        for tag in v:
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags


class ProductListItem(SQLModel):
    """
    Product card in a listing.
    """

    id: uuid.UUID
    name: str
    slug: str
    price: float
    original_price: float | None = None
    main_image: str | None = None
    stock: int
    featured: bool
    average_rating: float
    review_count: int
    category_slug: str
    category_name: str
    brand_slug: str | None = None
    brand_name: str | None = None


class ProductDetail(SQLModel):
    """
    Full product page payload.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    price: float
    original_price: float | None = None
    main_image: str | None = None
    stock: int
    featured: bool
    is_active: bool
    average_rating: float
    review_count: int
    category_id: uuid.UUID
    brand_id: uuid.UUID | None = None
    created_at: datetime
    tags: list[str] = Field(default_factory=list)
    specifications: dict[str, str] = Field(default_factory=dict)
    variants: list[VariantRead] = Field(default_factory=list)


class ProductPage(SQLModel):
    """
    One page of a filtered listing plus pagination links.
    """

    items: list[ProductListItem]
    total_count: int
    total_pages: int
    page: int
    limit: int
    has_next: bool
    has_prev: bool
    next_url: str | None = None
    prev_url: str | None = None


class FacetCount(SQLModel):
    name: str
    slug: str | None = None
    count: int


class PriceRange(SQLModel):
    min: float
    max: float


class ProductFacets(SQLModel):
    categories: list[FacetCount]
    brands: list[FacetCount]
    price_range: PriceRange
    tags: list[FacetCount]
