import pytest

from app.repositories.product_repo import ProductRepository, build_product_statement
from app.schemas.filters import ProductFilter, SortKey

repo = ProductRepository()


def names(session, **filters) -> list[str]:
    rows, _ = repo.search(session, ProductFilter(**filters))
    return [product.name for product, *_ in rows]


def count(session, **filters) -> int:
    _, total = repo.search(session, ProductFilter(**filters))
    return total


def test_default_listing_is_newest_first_and_hides_inactive(session, catalog):
    assert names(session) == [
        "Plain T-Shirt",
        "Globex Phone Mini",
        "Globex Phone X",
        "Acme Laptop Air",
        "Acme Laptop Pro",
    ]


@pytest.mark.parametrize(
    "filters, expected",
    [
        ({"category": "electronics"}, 4),
        ({"category": "laptops"}, 2),
        ({"category": "unknown"}, 0),
        ({"subcategories": ["laptops", "phones"]}, 4),
        ({"brands": ["acme"]}, 2),
        ({"brands": ["acme", "globex"]}, 4),
        ({"min_price": 500, "max_price": 1000}, 2),
        ({"min_price": 10, "max_price": 5}, 0),
        ({"min_price": 799}, 3),
        ({"tags": ["new"]}, 2),
        ({"tags": ["new", "sale"]}, 3),
        ({"featured": True}, 2),
        ({"featured": False}, 3),
        ({"in_stock": True}, 4),
        ({"in_stock": False}, 1),
        ({"min_rating": 4.5}, 2),
        ({"specifications": {"ram": ["16GB"]}}, 1),
        ({"specifications": {"ram": ["8GB", "16GB"]}}, 3),
        ({"specifications": {"ram": ["8GB"], "storage": ["256GB"]}}, 1),
        ({"category": "phones", "featured": True}, 1),
    ],
)
def test_filter_counts(session, catalog, filters, expected):
    assert count(session, **filters) == expected


@pytest.mark.parametrize(
    "term, expected",
    [
        ("laptop", 2),
        ("LAPTOP", 2),
        ("globex", 2),
        ("clothing", 1),
        ("%", 1),
        ("_", 1),
        ("sale", 2),
        ("nothing-matches", 0),
    ],
)
def test_search(session, catalog, term, expected):
    assert count(session, search=term) == expected


def test_search_treats_wildcards_literally(session, catalog):
    assert names(session, search="%") == ["Plain T-Shirt"]


@pytest.mark.parametrize(
    "sort, expected",
    [
        (
            SortKey.PRICE_ASC,
            ["Plain T-Shirt", "Globex Phone Mini", "Globex Phone X", "Acme Laptop Air", "Acme Laptop Pro"],
        ),
        (
            SortKey.PRICE_DESC,
            ["Acme Laptop Pro", "Acme Laptop Air", "Globex Phone X", "Globex Phone Mini", "Plain T-Shirt"],
        ),
        (
            SortKey.NAME_ASC,
            ["Acme Laptop Air", "Acme Laptop Pro", "Globex Phone Mini", "Globex Phone X", "Plain T-Shirt"],
        ),
        (
            SortKey.OLDEST,
            ["Acme Laptop Pro", "Acme Laptop Air", "Globex Phone X", "Globex Phone Mini", "Plain T-Shirt"],
        ),
        (
            SortKey.RATING_DESC,
            ["Globex Phone X", "Acme Laptop Pro", "Plain T-Shirt", "Acme Laptop Air", "Globex Phone Mini"],
        ),
    ],
)
def test_sort_orders(session, catalog, sort, expected):
    assert names(session, sort=sort) == expected


def test_pagination_window(session, catalog):
    rows, total = repo.search(session, ProductFilter(page=2, limit=2))

    assert total == 5
    assert [product.name for product, *_ in rows] == ["Globex Phone X", "Acme Laptop Air"]


def test_page_past_end_is_empty_but_counts(session, catalog):
    rows, total = repo.search(session, ProductFilter(page=10, limit=2))

    assert rows == []
    assert total == 5


def test_rows_carry_category_and_brand_labels(session, catalog):
    rows, _ = repo.search(session, ProductFilter(search="shirt"))
    product, category_slug, category_name, brand_slug, brand_name = rows[0]

    assert product.slug == "plain-t-shirt"
    assert (category_slug, category_name) == ("clothing", "Clothing")
    assert brand_slug is None and brand_name is None


def test_statement_is_deterministic():
    f = ProductFilter(category="laptops", brands=["acme"], specifications={"ram": ["8GB"]})

    first = build_product_statement(f).compile()
    second = build_product_statement(f.model_copy()).compile()

    assert str(first) == str(second)
    assert first.params == second.params


def test_facets_for_whole_catalog(session, catalog):
    facets = repo.facets(session)

    assert [(slug, n) for _, slug, n in facets["categories"]] == [
        ("laptops", 2),
        ("phones", 2),
        ("clothing", 1),
    ]
    assert [(slug, n) for _, slug, n in facets["brands"]] == [("acme", 2), ("globex", 2)]
    assert facets["price_range"] == (20, 1500)
    assert list(facets["tags"]) == [("new", 2), ("sale", 2)]


def test_facets_restricted_to_category(session, catalog):
    facets = repo.facets(session, "phones")

    assert [(slug, n) for _, slug, n in facets["categories"]] == [("phones", 2)]
    assert facets["price_range"] == (499, 799)
    assert list(facets["tags"]) == [("new", 1)]


def test_facets_for_empty_category(session, catalog):
    facets = repo.facets(session, "unknown")

    assert facets["categories"] == []
    assert facets["price_range"] == (0.0, 0.0)
