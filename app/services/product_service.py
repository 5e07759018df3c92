# app/services/product_service.py
import logging
import math

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.search_params import build_filter_url
from app.models.product import (
    Product,
    ProductSpecification,
    ProductTag,
    ProductVariant,
)
from app.repositories.product_repo import ProductRepository
from app.schemas.filters import ProductFilter
from app.schemas.product import (
    FacetCount,
    PriceRange,
    ProductCreate,
    ProductDetail,
    ProductFacets,
    ProductListItem,
    ProductPage,
    VariantRead,
)
from app.utils.sku import generate_variant_sku
from app.utils.slugs import ensure_unique_slug, slugify

logger = logging.getLogger(__name__)


def _catalog_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Failed to load products",
    )


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - filtered, paginated listings (query built from ProductFilter)
      - facet counts for the filter sidebar
      - product detail with variants, tags and specifications
      - slug generation & uniqueness, SKU generation for variants
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Listing -----

    def search_products(
        self,
        session: Session,
        product_filter: ProductFilter,
        base_path: str = "/products",
    ) -> ProductPage:
        """
        One page of products matching the filter.

        A database failure is logged and reported as 503; no retry here.
        """
        try:
            rows, total_count = self.repo.search(session, product_filter)
        except SQLAlchemyError:
            logger.exception("Product search failed for filter %s", product_filter)
            raise _catalog_unavailable()

        items = [
            ProductListItem(
                id=product.id,
                name=product.name,
                slug=product.slug,
                price=product.price,
                original_price=product.original_price,
                main_image=product.main_image,
                stock=product.stock,
                featured=product.featured,
                average_rating=product.average_rating,
                review_count=product.review_count,
                category_slug=category_slug,
                category_name=category_name,
                brand_slug=brand_slug,
                brand_name=brand_name,
            )
            for product, category_slug, category_name, brand_slug, brand_name in rows
        ]

        page = product_filter.page
        total_pages = math.ceil(total_count / product_filter.limit)
        has_next = page < total_pages
        has_prev = page > 1

        return ProductPage(
            items=items,
            total_count=total_count,
            total_pages=total_pages,
            page=page,
            limit=product_filter.limit,
            has_next=has_next,
            has_prev=has_prev,
            next_url=build_filter_url(base_path, product_filter, page=page + 1) if has_next else None,
            prev_url=build_filter_url(base_path, product_filter, page=page - 1) if has_prev else None,
        )

    def get_facets(self, session: Session, category: str | None = None) -> ProductFacets:
        try:
            raw = self.repo.facets(session, category)
        except SQLAlchemyError:
            logger.exception("Facet query failed for category %s", category)
            raise _catalog_unavailable()

        price_min, price_max = raw["price_range"]
        return ProductFacets(
            categories=[
                FacetCount(name=name, slug=slug, count=count)
                for name, slug, count in raw["categories"]
            ],
            brands=[
                FacetCount(name=name, slug=slug, count=count)
                for name, slug, count in raw["brands"]
            ],
            price_range=PriceRange(min=price_min, max=price_max),
            tags=[FacetCount(name=name, count=count) for name, count in raw["tags"]],
        )

    # ----- Products -----

    def get_active_product(self, session: Session, product_id) -> Product:
        product = self.repo.get_by_id(session, product_id)
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

    def get_product_by_slug(self, session: Session, slug: str) -> ProductDetail:
        product = self.repo.get_by_slug(session, slug)
        if not product or not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return self._to_detail(session, product)

    def _to_detail(self, session: Session, product: Product) -> ProductDetail:
        variants = self.repo.list_variants(session, product.id)
        return ProductDetail(
            **product.model_dump(),
            tags=self.repo.list_tags(session, product.id),
            specifications=self.repo.list_specifications(session, product.id),
            variants=[VariantRead(**v.model_dump()) for v in variants],
        )

    def create_product(self, session: Session, payload: ProductCreate) -> ProductDetail:
        """
        Create a new product with a unique slug.

        - If slug is provided => slugify & ensure unique.
        - Else => slugify from name & ensure unique.
        - Variants without a SKU get a generated one, unique across the catalog.
        """
        if self.repo.get_category(session, payload.category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown category",
            )
        if payload.brand_id is not None and self.repo.get_brand(session, payload.brand_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown brand",
            )

        base_slug = slugify(payload.slug or payload.name, fallback="product")
        slug = ensure_unique_slug(
            base_slug, lambda s: self.repo.get_by_slug(session, s) is not None
        )

        product = Product(
            name=payload.name,
            slug=slug,
            description=payload.description,
            price=payload.price,
            original_price=payload.original_price,
            stock=payload.stock,
            featured=payload.featured,
            is_active=payload.is_active,
            main_image=payload.main_image,
            category_id=payload.category_id,
            brand_id=payload.brand_id,
        )

        taken_skus = self.repo.list_skus(session)
        variants: list[ProductVariant] = []
        for v in payload.variants:
            sku = v.sku
            if sku is None:
                sku = generate_variant_sku(payload.name, v.type, v.value, taken_skus)
            elif sku in taken_skus:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"SKU {sku} already exists",
                )
            taken_skus.append(sku)
            variants.append(
                ProductVariant(
                    product_id=product.id,
                    name=v.name,
                    type=v.type,
                    value=v.value,
                    price_modifier=v.price_modifier,
                    stock=v.stock,
                    sku=sku,
                )
            )

        tags = [ProductTag(product_id=product.id, name=t) for t in payload.tags]
        specifications = [
            ProductSpecification(product_id=product.id, name=name, value=value)
            for name, value in payload.specifications.items()
        ]

        product = self.repo.create(session, product, variants, tags, specifications)
        logger.info("Created product %s (%d variants)", product.slug, len(variants))
        return self._to_detail(session, product)
