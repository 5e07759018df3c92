# app/core/search_params.py
"""
URL query parameters -> ProductFilter, and back.

URLs are untyped, so every recognized parameter is described once in
PRODUCT_FILTER_PARAMS (field name, accepted aliases, parser, default).
Parsers never raise: malformed input parses to None and the field falls
back to its default. Unrecognized keys are category-specific
specification filters (e.g. `?ram=8GB,16GB`).
"""

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NamedTuple
from urllib.parse import urlencode

from app.core.config import get_settings
from app.schemas.filters import DEFAULT_SORT, MAX_PAGE, ProductFilter, SortKey


# ----- Parsers: list of raw values -> typed value or None -----


def parse_string(values: list[str]) -> str | None:
    for raw in values:
        value = raw.strip()
        if value:
            return value
    return None


def parse_float(values: list[str]) -> float | None:
    if not values:
        return None
    try:
        number = float(values[0].strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_positive_int(values: list[str]) -> int | None:
    if not values:
        return None
    try:
        number = int(values[0].strip())
    except ValueError:
        return None
    return number if number >= 1 else None


def parse_page(values: list[str]) -> int | None:
    number = parse_positive_int(values)
    if number is None or number > MAX_PAGE:
        return None
    return number


def parse_csv(values: list[str]) -> list[str]:
    """
    Comma-separated list. Repeated keys are concatenated,
    empty segments and duplicates are dropped, order is kept.
    """
    items: list[str] = []
    for raw in values:
        for segment in raw.split(","):
            segment = segment.strip()
            if segment and segment not in items:
                items.append(segment)
    return items


def parse_bool(values: list[str]) -> bool | None:
    if not values:
        return None
    if values[0] == "true":
        return True
    if values[0] == "false":
        return False
    return None


def parse_sort(values: list[str]) -> SortKey | None:
    if not values:
        return None
    try:
        return SortKey(values[0].strip())
    except ValueError:
        return None


# ----- Declarative schema -----


class ParamSpec(NamedTuple):
    field: str
    aliases: tuple[str, ...]  # first alias is the canonical URL name
    parser: Callable[[list[str]], Any]
    default: Any = None


PRODUCT_FILTER_PARAMS: tuple[ParamSpec, ...] = (
    ParamSpec("category", ("category",), parse_string),
    ParamSpec("subcategories", ("subcategories",), parse_csv, []),
    ParamSpec("brands", ("brands", "brand"), parse_csv, []),
    ParamSpec("min_price", ("minPrice", "priceMin"), parse_float),
    ParamSpec("max_price", ("maxPrice", "priceMax"), parse_float),
    ParamSpec("search", ("search", "query", "q"), parse_string),
    ParamSpec("sort", ("sort",), parse_sort, DEFAULT_SORT),
    ParamSpec("page", ("page",), parse_page, 1),
    # default/clamp for limit come from settings
    ParamSpec("limit", ("limit", "perPage"), parse_positive_int),
    ParamSpec("tags", ("tags",), parse_csv, []),
    ParamSpec("featured", ("featured",), parse_bool),
    ParamSpec("in_stock", ("inStock",), parse_bool),
    ParamSpec("min_rating", ("rating",), parse_float),
)

KNOWN_PARAM_NAMES: frozenset[str] = frozenset(
    alias for spec in PRODUCT_FILTER_PARAMS for alias in spec.aliases
)

RawParams = Mapping[str, str | Sequence[str]]


def _get_values(params: RawParams, key: str) -> list[str]:
    # Starlette QueryParams keeps repeated keys; plain dicts hold str or list
    if hasattr(params, "getlist"):
        return list(params.getlist(key))
    raw = params.get(key)
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [value for value in raw if isinstance(value, str)]


def parse_product_filter(
    params: RawParams,
    default_limit: int | None = None,
    max_limit: int | None = None,
) -> ProductFilter:
    """
    Build a ProductFilter from raw query parameters.

    - page: positive int up to MAX_PAGE, else 1
    - limit: positive int, else DEFAULT_PAGE_SIZE; clamped to MAX_PAGE_SIZE
    - sort: known SortKey, else "newest"
    - featured / inStock: only "true" / "false", else unset
    - extra keys: specification filters (comma-separated values)
    """
    settings = get_settings()
    if default_limit is None:
        default_limit = settings.DEFAULT_PAGE_SIZE
    if max_limit is None:
        max_limit = settings.MAX_PAGE_SIZE

    data: dict[str, Any] = {}
    for spec in PRODUCT_FILTER_PARAMS:
        values: list[str] = []
        for alias in spec.aliases:
            values.extend(_get_values(params, alias))
        value = spec.parser(values)
        data[spec.field] = spec.default if value is None else value

    limit = data["limit"] or default_limit
    data["limit"] = min(limit, max_limit)

    specifications: dict[str, list[str]] = {}
    for key in params.keys():
        if key in KNOWN_PARAM_NAMES:
            continue
        values = parse_csv(_get_values(params, key))
        if values:
            specifications[key] = values
    data["specifications"] = specifications

    return ProductFilter(**data)


# ----- Canonical URLs -----


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def build_query_string(
    product_filter: ProductFilter,
    default_limit: int | None = None,
    **overrides: Any,
) -> str:
    """
    Canonical query string for a filter: canonical parameter names,
    fixed order, defaults omitted (so page=1 never appears).

    Overrides replace filter fields, e.g. build_query_string(f, page=3).
    """
    if default_limit is None:
        default_limit = get_settings().DEFAULT_PAGE_SIZE
    f = product_filter.model_copy(update=overrides) if overrides else product_filter

    pairs: list[tuple[str, str]] = []
    if f.category:
        pairs.append(("category", f.category))
    if f.subcategories:
        pairs.append(("subcategories", ",".join(f.subcategories)))
    if f.brands:
        pairs.append(("brands", ",".join(f.brands)))
    if f.min_price is not None:
        pairs.append(("minPrice", _format_number(f.min_price)))
    if f.max_price is not None:
        pairs.append(("maxPrice", _format_number(f.max_price)))
    if f.search:
        pairs.append(("search", f.search))
    if f.sort != DEFAULT_SORT:
        pairs.append(("sort", SortKey(f.sort).value))
    if f.page != 1:
        pairs.append(("page", str(f.page)))
    if f.limit != default_limit:
        pairs.append(("limit", str(f.limit)))
    if f.tags:
        pairs.append(("tags", ",".join(f.tags)))
    if f.featured is not None:
        pairs.append(("featured", _format_bool(f.featured)))
    if f.in_stock is not None:
        pairs.append(("inStock", _format_bool(f.in_stock)))
    if f.min_rating is not None:
        pairs.append(("rating", _format_number(f.min_rating)))
    for name in sorted(f.specifications):
        if f.specifications[name]:
            pairs.append((name, ",".join(f.specifications[name])))

    return urlencode(pairs, safe=",")


def build_filter_url(path: str, product_filter: ProductFilter, **overrides: Any) -> str:
    query = build_query_string(product_filter, **overrides)
    return f"{path}?{query}" if query else path
