from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.auth import require_client_id
from app.core.config import Settings, get_settings
from app.core.storage import InMemoryStorage
from app.database import get_session
from app.main import app
from app.models.category import Brand, Category
from app.models.coupon import Coupon
from app.models.product import (
    Product,
    ProductSpecification,
    ProductTag,
    ProductVariant,
)
from app.stores.deps import get_client_storage

ADMIN_KEY = "test-admin-key"
CLIENT_ID = "client-0001"
OTHER_CLIENT_ID = "client-0002"

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs in a worker)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client_storages() -> dict[str, InMemoryStorage]:
    """Per-client storage, keyed by X-Client-Id."""
    return {}


@pytest.fixture
def client(engine, client_storages):
    def override_session():
        with Session(engine) as s:
            yield s

    def override_storage(client_id: str = Depends(require_client_id)):
        return client_storages.setdefault(client_id, InMemoryStorage())

    def override_settings():
        return Settings(ADMIN_API_KEY=ADMIN_KEY, COMPARE_MAX_ITEMS=4)

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_client_storage] = override_storage
    app.dependency_overrides[get_settings] = override_settings

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def catalog(session) -> dict:
    """
    Small catalog:

      electronics
        laptops: Acme Laptop Pro (1500), Acme Laptop Air (999, out of stock)
        phones:  Globex Phone X (799), Globex Phone Mini (499)
        (direct): Hidden Gadget (inactive)
      clothing:  Plain T-Shirt (20, with color/size variants)

    created_at increases in the order listed (Pro oldest, Hidden newest).
    """
    electronics = Category(name="Electronics", slug="electronics")
    clothing = Category(name="Clothing", slug="clothing")
    session.add_all([electronics, clothing])
    session.flush()

    laptops = Category(name="Laptops", slug="laptops", parent_id=electronics.id)
    phones = Category(name="Phones", slug="phones", parent_id=electronics.id)
    acme = Brand(name="Acme", slug="acme")
    globex = Brand(name="Globex", slug="globex")
    session.add_all([laptops, phones, acme, globex])
    session.flush()

    def product(name, slug, price, stock, category, brand, day, **extra):
        return Product(
            name=name,
            slug=slug,
            price=price,
            stock=stock,
            category_id=category.id,
            brand_id=brand.id if brand else None,
            created_at=BASE_TIME + timedelta(days=day),
            **extra,
        )

    pro = product(
        "Acme Laptop Pro", "acme-laptop-pro", 1500, 5, laptops, acme, 1,
        featured=True, average_rating=4.5, review_count=10,
    )
    air = product(
        "Acme Laptop Air", "acme-laptop-air", 999, 0, laptops, acme, 2,
        average_rating=4.0, review_count=3,
    )
    phone_x = product(
        "Globex Phone X", "globex-phone-x", 799, 10, phones, globex, 3,
        featured=True, average_rating=4.8, review_count=20,
    )
    phone_mini = product(
        "Globex Phone Mini", "globex-phone-mini", 499, 3, phones, globex, 4,
        average_rating=3.9, review_count=2,
    )
    shirt = product(
        "Plain T-Shirt", "plain-t-shirt", 20, 100, clothing, None, 5,
        average_rating=4.1, review_count=7, description="100% cotton_tee",
    )
    hidden = product(
        "Hidden Gadget", "hidden-gadget", 50, 9, electronics, None, 6,
        is_active=False,
    )
    session.add_all([pro, air, phone_x, phone_mini, shirt, hidden])
    session.flush()

    session.add_all(
        [
            ProductTag(product_id=pro.id, name="sale"),
            ProductTag(product_id=pro.id, name="new"),
            ProductTag(product_id=phone_x.id, name="new"),
            ProductTag(product_id=shirt.id, name="sale"),
            ProductSpecification(product_id=pro.id, name="ram", value="16GB"),
            ProductSpecification(product_id=air.id, name="ram", value="8GB"),
            ProductSpecification(product_id=phone_x.id, name="ram", value="8GB"),
            ProductSpecification(product_id=phone_x.id, name="storage", value="256GB"),
            ProductVariant(
                product_id=shirt.id, name="Red", type="color", value="red",
                stock=4, sku="SKU-PLA-CORE-AAAAAA",
            ),
            ProductVariant(
                product_id=shirt.id, name="Blue", type="color", value="blue",
                stock=0, sku="SKU-PLA-COBL-BBBBBB",
            ),
            ProductVariant(
                product_id=shirt.id, name="Medium", type="size", value="M",
                stock=6, price_modifier=2.5, sku="SKU-PLA-SIM-CCCCCC",
            ),
            ProductVariant(
                product_id=shirt.id, name="Large", type="size", value="L",
                stock=2, price_modifier=5.0, sku="SKU-PLA-SIL-DDDDDD",
            ),
        ]
    )
    session.commit()

    return {
        "categories": {
            "electronics": electronics.id,
            "clothing": clothing.id,
            "laptops": laptops.id,
            "phones": phones.id,
        },
        "brands": {"acme": acme.id, "globex": globex.id},
        "products": {
            "pro": pro.id,
            "air": air.id,
            "phone_x": phone_x.id,
            "phone_mini": phone_mini.id,
            "shirt": shirt.id,
            "hidden": hidden.id,
        },
    }


@pytest.fixture
def coupons(session) -> None:
    session.add_all(
        [
            Coupon(code="SAVE10", discount_type="PERCENTAGE", discount_value=10),
            Coupon(code="FIVEOFF", discount_type="FIXED", discount_value=5),
            Coupon(code="OFF", discount_type="FIXED", discount_value=5, active=False),
            Coupon(
                code="OLD",
                discount_type="PERCENTAGE",
                discount_value=50,
                expires_at=datetime(2020, 1, 1, tzinfo=timezone.utc),
            ),
        ]
    )
    session.commit()
