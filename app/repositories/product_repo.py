# app/repositories/product_repo.py
import uuid
from typing import Any

from sqlalchemy import Select, func, or_
from sqlalchemy.orm import aliased
from sqlmodel import Session, col, select

from app.models.category import Brand, Category
from app.models.product import (
    Product,
    ProductSpecification,
    ProductTag,
    ProductVariant,
)
from app.schemas.filters import ProductFilter, SortKey


# ----- Query composition -----
#
# Pure functions of the filter: the same ProductFilter always yields the
# same SQL. Only the database content decides the result.

SORT_ORDERS: dict[SortKey, tuple[Any, ...]] = {
    SortKey.NEWEST: (col(Product.created_at).desc(),),
    SortKey.OLDEST: (col(Product.created_at).asc(),),
    SortKey.PRICE_ASC: (col(Product.price).asc(),),
    SortKey.PRICE_DESC: (col(Product.price).desc(),),
    SortKey.NAME_ASC: (col(Product.name).asc(),),
    SortKey.NAME_DESC: (col(Product.name).desc(),),
    SortKey.RATING_DESC: (
        col(Product.average_rating).desc(),
        col(Product.review_count).desc(),
    ),
}


def _category_ids_for_slug(slug: str):
    """
    Ids of the category with this slug and of its direct children.
    """
    parent = aliased(Category)
    return (
        select(Category.id)
        .outerjoin(parent, col(Category.parent_id) == col(parent.id))
        .where(or_(Category.slug == slug, parent.slug == slug))
    )


def apply_product_filters(stmt: Select, f: ProductFilter) -> Select:
    """
    Add WHERE predicates for every constraint present on the filter.
    """
    stmt = stmt.where(Product.is_active == True)  # noqa: E712

    if f.category:
        stmt = stmt.where(col(Product.category_id).in_(_category_ids_for_slug(f.category)))

    if f.subcategories:
        stmt = stmt.where(
            col(Product.category_id).in_(
                select(Category.id).where(col(Category.slug).in_(f.subcategories))
            )
        )

    if f.brands:
        stmt = stmt.where(
            col(Product.brand_id).in_(
                select(Brand.id).where(col(Brand.slug).in_(f.brands))
            )
        )

    if f.min_price is not None:
        stmt = stmt.where(Product.price >= f.min_price)
    if f.max_price is not None:
        stmt = stmt.where(Product.price <= f.max_price)

    if f.search:
        term = f.search
        stmt = stmt.where(
            or_(
                col(Product.name).icontains(term, autoescape=True),
                col(Product.description).icontains(term, autoescape=True),
                col(Product.brand_id).in_(
                    select(Brand.id).where(col(Brand.name).icontains(term, autoescape=True))
                ),
                col(Product.category_id).in_(
                    select(Category.id).where(
                        col(Category.name).icontains(term, autoescape=True)
                    )
                ),
                col(Product.id).in_(
                    select(ProductTag.product_id).where(ProductTag.name == term)
                ),
            )
        )

    if f.featured is not None:
        stmt = stmt.where(Product.featured == f.featured)

    if f.in_stock is True:
        stmt = stmt.where(Product.stock > 0)
    elif f.in_stock is False:
        stmt = stmt.where(Product.stock == 0)

    if f.min_rating is not None:
        stmt = stmt.where(Product.average_rating >= f.min_rating)

    if f.tags:
        stmt = stmt.where(
            col(Product.id).in_(
                select(ProductTag.product_id).where(col(ProductTag.name).in_(f.tags))
            )
        )

    # One predicate per specification name; values within a name are OR-ed
    for name in sorted(f.specifications):
        values = f.specifications[name]
        if not values:
            continue
        stmt = stmt.where(
            col(Product.id).in_(
                select(ProductSpecification.product_id).where(
                    ProductSpecification.name == name,
                    col(ProductSpecification.value).in_(values),
                )
            )
        )

    return stmt


def order_by_sort(stmt: Select, sort: SortKey) -> Select:
    # Product.id last so pages never shuffle between requests
    return stmt.order_by(*SORT_ORDERS[SortKey(sort)], col(Product.id).asc())


def build_product_statement(f: ProductFilter) -> Select:
    """
    SELECT one page of products with their category and brand labels.
    """
    stmt = (
        select(
            Product,
            col(Category.slug).label("category_slug"),
            col(Category.name).label("category_name"),
            col(Brand.slug).label("brand_slug"),
            col(Brand.name).label("brand_name"),
        )
        .join(Category, col(Product.category_id) == col(Category.id))
        .outerjoin(Brand, col(Product.brand_id) == col(Brand.id))
    )
    stmt = apply_product_filters(stmt, f)
    stmt = order_by_sort(stmt, f.sort)
    return stmt.offset(f.offset).limit(f.limit)


def build_count_statement(f: ProductFilter) -> Select:
    inner = apply_product_filters(select(Product.id), f).subquery()
    return select(func.count()).select_from(inner)


class ProductRepository:
    """
    Data access layer for the catalog.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Listing -----

    def search(self, session: Session, f: ProductFilter) -> tuple[list[Any], int]:
        """
        Return (rows, total_count) for one page of the filtered listing.

        Each row is (Product, category_slug, category_name, brand_slug, brand_name).
        """
        rows = session.exec(build_product_statement(f)).all()
        total = session.exec(build_count_statement(f)).one()
        return list(rows), int(total)

    def facets(self, session: Session, category: str | None = None) -> dict[str, Any]:
        """
        Counts used to render the filter sidebar.

        Restricted to the given category (and its children) when provided.
        """
        base = ProductFilter(category=category)
        product_ids = apply_product_filters(select(Product.id), base).subquery()

        category_rows = session.exec(
            select(Category.name, Category.slug, func.count(col(Product.id)))
            .join(Product, col(Product.category_id) == col(Category.id))
            .where(col(Product.id).in_(select(product_ids.c.id)))
            .group_by(Category.name, Category.slug)
            .order_by(func.count(col(Product.id)).desc(), col(Category.slug))
        ).all()

        brand_rows = session.exec(
            select(Brand.name, Brand.slug, func.count(col(Product.id)))
            .join(Product, col(Product.brand_id) == col(Brand.id))
            .where(col(Product.id).in_(select(product_ids.c.id)))
            .group_by(Brand.name, Brand.slug)
            .order_by(func.count(col(Product.id)).desc(), col(Brand.slug))
        ).all()

        price_min, price_max = session.exec(
            select(func.min(Product.price), func.max(Product.price)).where(
                col(Product.id).in_(select(product_ids.c.id))
            )
        ).one()

        tag_rows = session.exec(
            select(ProductTag.name, func.count(col(ProductTag.id)))
            .where(col(ProductTag.product_id).in_(select(product_ids.c.id)))
            .group_by(ProductTag.name)
            .order_by(func.count(col(ProductTag.id)).desc(), col(ProductTag.name))
        ).all()

        return {
            "categories": category_rows,
            "brands": brand_rows,
            "price_range": (price_min or 0.0, price_max or 0.0),
            "tags": tag_rows,
        }

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def get_category(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_brand(self, session: Session, brand_id: uuid.UUID) -> Brand | None:
        return session.get(Brand, brand_id)

    def create(
        self,
        session: Session,
        product: Product,
        variants: list[ProductVariant],
        tags: list[ProductTag],
        specifications: list[ProductSpecification],
    ) -> Product:
        """
        Insert a product and its child rows in one transaction.
        """
        session.add(product)
        session.flush()
        session.add_all([*variants, *tags, *specifications])
        session.commit()
        session.refresh(product)
        return product

    # ----- Child rows -----

    def list_variants(self, session: Session, product_id: uuid.UUID) -> list[ProductVariant]:
        stmt = (
            select(ProductVariant)
            .where(ProductVariant.product_id == product_id)
            .order_by(col(ProductVariant.type), col(ProductVariant.value))
        )
        return list(session.exec(stmt).all())

    def list_tags(self, session: Session, product_id: uuid.UUID) -> list[str]:
        stmt = (
            select(ProductTag.name)
            .where(ProductTag.product_id == product_id)
            .order_by(col(ProductTag.name))
        )
        return list(session.exec(stmt).all())

    def list_specifications(
        self, session: Session, product_id: uuid.UUID
    ) -> dict[str, str]:
        stmt = (
            select(ProductSpecification.name, ProductSpecification.value)
            .where(ProductSpecification.product_id == product_id)
            .order_by(col(ProductSpecification.name))
        )
        return {name: value for name, value in session.exec(stmt).all()}

    def list_skus(self, session: Session) -> list[str]:
        stmt = select(ProductVariant.sku).where(col(ProductVariant.sku).is_not(None))
        return [sku for sku in session.exec(stmt).all() if sku]
