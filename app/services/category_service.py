# app/services/category_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.category import Brand, Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import BrandCreate, CategoryCreate
from app.utils.slugs import ensure_unique_slug, slugify


class CategoryService:
    """
    Categories and brands: listing for the storefront, creation for admins.
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    def list_categories(self, session: Session) -> list[Category]:
        return self.repo.list_categories(session)

    def create_category(self, session: Session, payload: CategoryCreate) -> Category:
        if payload.parent_id is not None and session.get(Category, payload.parent_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown parent category",
            )
        slug = ensure_unique_slug(
            slugify(payload.slug or payload.name, fallback="category"),
            lambda s: self.repo.get_category_by_slug(session, s) is not None,
        )
        category = Category(
            name=payload.name,
            slug=slug,
            description=payload.description,
            parent_id=payload.parent_id,
        )
        return self.repo.create_category(session, category)

    def list_brands(self, session: Session) -> list[Brand]:
        return self.repo.list_brands(session)

    def create_brand(self, session: Session, payload: BrandCreate) -> Brand:
        slug = ensure_unique_slug(
            slugify(payload.slug or payload.name, fallback="brand"),
            lambda s: self.repo.get_brand_by_slug(session, s) is not None,
        )
        brand = Brand(
            name=payload.name,
            slug=slug,
            logo=payload.logo,
            is_active=payload.is_active,
        )
        return self.repo.create_brand(session, brand)
