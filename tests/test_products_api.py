from sqlalchemy.exc import OperationalError

from app.routers import products as products_router
from app.schemas.filters import MAX_PAGE
from app.utils.sku import validate_sku_format

from tests.conftest import ADMIN_KEY

BASE = "/api/v1/products"


def test_listing_defaults(client, catalog):
    resp = client.get(BASE)

    assert resp.status_code == 200
    body = resp.json()
    assert body["total_count"] == 5
    assert body["total_pages"] == 1
    assert body["page"] == 1
    assert body["limit"] == 12
    assert body["has_next"] is False and body["has_prev"] is False
    assert body["next_url"] is None and body["prev_url"] is None
    assert [p["slug"] for p in body["items"]][0] == "plain-t-shirt"


def test_listing_pagination_links(client, catalog):
    resp = client.get(BASE, params={"limit": 2, "page": 2})
    body = resp.json()

    assert body["total_count"] == 5
    assert body["total_pages"] == 3
    assert [p["name"] for p in body["items"]] == ["Globex Phone X", "Acme Laptop Air"]
    assert body["next_url"] == "/api/v1/products?page=3&limit=2"
    assert body["prev_url"] == "/api/v1/products?limit=2"


def test_listing_links_keep_filters(client, catalog):
    body = client.get(f"{BASE}?brand=acme&perPage=1&sort=price-asc").json()

    assert [p["name"] for p in body["items"]] == ["Acme Laptop Air"]
    assert body["next_url"] == "/api/v1/products?brands=acme&sort=price-asc&page=2&limit=1"


def test_listing_tolerates_malformed_params(client, catalog):
    resp = client.get(f"{BASE}?page=abc&limit=-5&sort=bogus&minPrice=cheap&featured=yes")

    assert resp.status_code == 200
    body = resp.json()
    assert body["page"] == 1
    assert body["limit"] == 12
    assert body["total_count"] == 5


def test_listing_huge_page_falls_back_to_first_page(client, catalog):
    resp = client.get(BASE, params={"page": str(10**20)})

    assert resp.status_code == 200
    body = resp.json()
    assert body["page"] == 1
    assert len(body["items"]) == 5


def test_listing_last_allowed_page_is_empty(client, catalog):
    resp = client.get(BASE, params={"page": MAX_PAGE, "limit": 100})

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["total_count"] == 5
    assert body["has_next"] is False
    assert body["prev_url"] == f"/api/v1/products?page={MAX_PAGE - 1}&limit=100"


def test_listing_specification_filter(client, catalog):
    body = client.get(f"{BASE}?ram=8GB,16GB&sort=name-asc").json()

    assert [p["name"] for p in body["items"]] == [
        "Acme Laptop Air",
        "Acme Laptop Pro",
        "Globex Phone X",
    ]


def test_listing_item_labels(client, catalog):
    body = client.get(f"{BASE}?category=phones&sort=price-asc").json()
    first = body["items"][0]

    assert first["name"] == "Globex Phone Mini"
    assert first["category_slug"] == "phones"
    assert first["brand_name"] == "Globex"


def test_listing_database_failure_is_503(client, catalog, monkeypatch):
    def boom(session, f):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(products_router.repo, "search", boom)

    resp = client.get(BASE)

    assert resp.status_code == 503
    assert resp.json()["detail"] == "Failed to load products"


def test_facets(client, catalog):
    body = client.get(f"{BASE}/facets").json()

    assert [(c["slug"], c["count"]) for c in body["categories"]] == [
        ("laptops", 2),
        ("phones", 2),
        ("clothing", 1),
    ]
    assert body["price_range"] == {"min": 20.0, "max": 1500.0}
    assert [(t["name"], t["count"]) for t in body["tags"]] == [("new", 2), ("sale", 2)]


def test_product_detail(client, catalog):
    body = client.get(f"{BASE}/plain-t-shirt").json()

    assert body["name"] == "Plain T-Shirt"
    assert body["tags"] == ["sale"]
    assert [(v["type"], v["value"]) for v in body["variants"]] == [
        ("color", "blue"),
        ("color", "red"),
        ("size", "L"),
        ("size", "M"),
    ]


def test_product_detail_specifications(client, catalog):
    body = client.get(f"{BASE}/globex-phone-x").json()

    assert body["specifications"] == {"ram": "8GB", "storage": "256GB"}


def test_unknown_or_inactive_product_is_404(client, catalog):
    assert client.get(f"{BASE}/nope").status_code == 404
    assert client.get(f"{BASE}/hidden-gadget").status_code == 404


# --- Admin ---


def new_product(catalog, **extra) -> dict:
    payload = {
        "name": "Acme Laptop Pro",
        "price": 1800,
        "stock": 2,
        "category_id": str(catalog["categories"]["laptops"]),
        "brand_id": str(catalog["brands"]["acme"]),
        "tags": ["new", " new ", ""],
        "specifications": {"ram": "32GB"},
        "variants": [
            {"name": "Silver", "type": "color", "value": "silver", "stock": 1},
            {"name": "Space Grey", "type": "color", "value": "grey", "stock": 1},
        ],
    }
    payload.update(extra)
    return payload


def test_create_product_requires_admin_key(client, catalog):
    assert client.post(BASE, json=new_product(catalog)).status_code == 401
    resp = client.post(BASE, json=new_product(catalog), headers={"X-Admin-Key": "wrong"})
    assert resp.status_code == 401


def test_create_product_generates_unique_slug_and_skus(client, catalog):
    resp = client.post(BASE, json=new_product(catalog), headers={"X-Admin-Key": ADMIN_KEY})

    assert resp.status_code == 201
    body = resp.json()
    assert body["slug"] == "acme-laptop-pro-2"
    assert body["tags"] == ["new"]
    assert body["specifications"] == {"ram": "32GB"}

    skus = [v["sku"] for v in body["variants"]]
    assert len(set(skus)) == 2
    assert all(validate_sku_format(sku) for sku in skus)
    assert all(sku.startswith("SKU-ACM-CO") for sku in skus)


def test_created_product_is_listed(client, catalog):
    client.post(
        BASE,
        json=new_product(catalog, name="Acme Laptop Ultra"),
        headers={"X-Admin-Key": ADMIN_KEY},
    )

    body = client.get(f"{BASE}?ram=32GB").json()
    assert [p["slug"] for p in body["items"]] == ["acme-laptop-ultra"]


def test_create_product_rejects_taken_sku(client, catalog):
    payload = new_product(
        catalog,
        variants=[{"name": "Red", "type": "color", "value": "red", "sku": "SKU-PLA-CORE-AAAAAA"}],
    )
    resp = client.post(BASE, json=payload, headers={"X-Admin-Key": ADMIN_KEY})

    assert resp.status_code == 409


def test_create_product_rejects_unknown_category(client, catalog):
    payload = new_product(catalog, category_id="00000000-0000-0000-0000-000000000000")
    resp = client.post(BASE, json=payload, headers={"X-Admin-Key": ADMIN_KEY})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Unknown category"


def test_create_product_validates_payload(client, catalog):
    payload = new_product(catalog, price=-1)
    resp = client.post(BASE, json=payload, headers={"X-Admin-Key": ADMIN_KEY})

    assert resp.status_code == 422


def test_admin_routes_disabled_without_configured_key(client, catalog):
    from app.core.config import Settings, get_settings
    from app.main import app

    app.dependency_overrides[get_settings] = lambda: Settings(ADMIN_API_KEY=None)

    resp = client.post(BASE, json=new_product(catalog), headers={"X-Admin-Key": ADMIN_KEY})

    assert resp.status_code == 503


# --- Categories & brands ---


def test_list_categories_and_brands(client, catalog):
    categories = client.get("/api/v1/categories").json()
    brands = client.get("/api/v1/brands").json()

    assert {c["slug"] for c in categories} == {"electronics", "clothing", "laptops", "phones"}
    assert [b["slug"] for b in brands] == ["acme", "globex"]


def test_create_category_under_parent(client, catalog):
    resp = client.post(
        "/api/v1/categories",
        json={"name": "Tablets", "parent_id": str(catalog["categories"]["electronics"])},
        headers={"X-Admin-Key": ADMIN_KEY},
    )

    assert resp.status_code == 201
    assert resp.json()["slug"] == "tablets"


def test_create_category_with_unknown_parent(client, catalog):
    resp = client.post(
        "/api/v1/categories",
        json={"name": "Tablets", "parent_id": "00000000-0000-0000-0000-000000000000"},
        headers={"X-Admin-Key": ADMIN_KEY},
    )

    assert resp.status_code == 400


def test_create_brand_slug_is_unique(client, catalog):
    resp = client.post(
        "/api/v1/brands",
        json={"name": "ACME"},
        headers={"X-Admin-Key": ADMIN_KEY},
    )

    assert resp.status_code == 201
    assert resp.json()["slug"] == "acme-2"
