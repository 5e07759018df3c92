# app/routers/categories.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import BrandCreate, BrandRead, CategoryCreate, CategoryRead
from app.services.category_service import CategoryService

categories_router = APIRouter(prefix="/categories", tags=["Categories"])
brands_router = APIRouter(prefix="/brands", tags=["Brands"])

repo = CategoryRepository()
service = CategoryService(repo)


@categories_router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    return service.list_categories(session)


@categories_router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    """
    Create a category (admin only). Slug is derived from the name if omitted.
    """
    return service.create_category(session, payload)


@brands_router.get("", response_model=list[BrandRead])
def list_brands(session: Session = Depends(get_session)):
    """
    Active brands, alphabetically.
    """
    return service.list_brands(session)


@brands_router.post(
    "",
    response_model=BrandRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_brand(
    payload: BrandCreate,
    session: Session = Depends(get_session),
):
    return service.create_brand(session, payload)
