# app/routers/products.py
from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.search_params import parse_product_filter
from app.database import get_session
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductFacets,
    ProductPage,
)
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=ProductPage)
def list_products(
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Filtered, sorted, paginated product listing.

    Query params (all optional, malformed values fall back to defaults):
      - category, subcategories, brands|brand
      - minPrice|priceMin, maxPrice|priceMax
      - search|query|q, sort, page, limit|perPage
      - tags, featured, inStock, rating
      - any other key: specification filter, e.g. `ram=8GB,16GB`
    """
    product_filter = parse_product_filter(request.query_params)
    return service.search_products(session, product_filter, base_path=request.url.path)


@router.get("/facets", response_model=ProductFacets)
def get_product_facets(
    category: str | None = None,
    session: Session = Depends(get_session),
):
    """
    Category / brand / tag counts and price range for the filter sidebar.
    """
    return service.get_facets(session, category)


@router.get("/{slug}", response_model=ProductDetail)
def get_product(
    slug: str,
    session: Session = Depends(get_session),
):
    """
    Get a single active product by slug, with variants, tags and specifications.
    """
    return service.get_product_by_slug(session, slug)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductDetail,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).

    Variants without a SKU get a generated one.
    """
    return service.create_product(session, payload)
