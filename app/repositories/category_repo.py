# app/repositories/category_repo.py
from sqlmodel import Session, col, select

from app.models.category import Brand, Category


class CategoryRepository:
    """
    Data access for categories and brands.
    """

    # ----- Categories -----

    def list_categories(self, session: Session) -> list[Category]:
        stmt = select(Category).order_by(col(Category.name))
        return list(session.exec(stmt).all())

    def get_category_by_slug(self, session: Session, slug: str) -> Category | None:
        stmt = select(Category).where(Category.slug == slug)
        return session.exec(stmt).first()

    def create_category(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    # ----- Brands -----

    def list_brands(self, session: Session, only_active: bool = True) -> list[Brand]:
        stmt = select(Brand)
        if only_active:
            stmt = stmt.where(Brand.is_active == True)  # noqa: E712
        stmt = stmt.order_by(col(Brand.name))
        return list(session.exec(stmt).all())

    def get_brand_by_slug(self, session: Session, slug: str) -> Brand | None:
        stmt = select(Brand).where(Brand.slug == slug)
        return session.exec(stmt).first()

    def create_brand(self, session: Session, brand: Brand) -> Brand:
        session.add(brand)
        session.commit()
        session.refresh(brand)
        return brand
