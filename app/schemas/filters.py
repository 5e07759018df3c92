# app/schemas/filters.py
from enum import Enum

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.core.config import get_settings


class SortKey(str, Enum):
    """
    Accepted values for the `sort` query parameter.
    """

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NAME_ASC = "name-asc"
    NAME_DESC = "name-desc"
    RATING_DESC = "rating-desc"


DEFAULT_SORT = SortKey.NEWEST

# (page - 1) * limit has to fit a 64-bit OFFSET
MAX_PAGE = 1_000_000_000


class ProductFilter(SQLModel):
    """
    Typed product listing query, rebuilt from URL parameters on every request.

    `None` always means "no constraint". An inverted price range
    (min_price > max_price) is kept as given and simply matches nothing.
    """

    model_config = ConfigDict(extra="forbid")

    category: str | None = None
    subcategories: list[str] = Field(default_factory=list)
    brands: list[str] = Field(default_factory=list)
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None
    sort: SortKey = DEFAULT_SORT
    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    limit: int = Field(default=12, ge=1)
    tags: list[str] = Field(default_factory=list)
    featured: bool | None = None
    in_stock: bool | None = None
    min_rating: float | None = None
    specifications: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        return min(v, get_settings().MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
