# app/utils/sku.py
import re
import time
import uuid
from collections.abc import Iterable
from typing import NamedTuple

# SKU-XXX-XXXXXX-XXXXXX: product code, variant code, unique id
SKU_PATTERN = re.compile(r"^SKU-[A-Z0-9]{1,3}-[A-Z0-9]{1,6}-[A-Z0-9]{6}$")

MAX_ATTEMPTS = 10

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class SKUParts(NamedTuple):
    is_valid: bool
    product_code: str | None = None
    variant_code: str | None = None
    unique_id: str | None = None


def _product_code(product_name: str | None) -> str:
    code = _NON_ALNUM.sub("", product_name or "")[:3].upper()
    return code or "PRD"


def _variant_code(variant_name: str | None, variant_value: str | None) -> str:
    if not variant_name or not variant_value:
        return "VAR"
    code = _NON_ALNUM.sub("", f"{variant_name[:2]}{variant_value[:2]}").upper()
    return code or "VAR"


def _unique_id() -> str:
    return uuid.uuid4().hex[:6].upper()


def generate_variant_sku(
    product_name: str | None = None,
    variant_name: str | None = None,
    variant_value: str | None = None,
    existing_skus: Iterable[str] = (),
) -> str:
    """
    Generate a SKU for a product variant.

    Format: SKU-{productCode}-{variantCode}-{uniqueId}

    Retries the random part on collision with `existing_skus`; if every
    one of MAX_ATTEMPTS retries collides it falls back to the last 6
    digits of the current millisecond timestamp.
    """
    taken = set(existing_skus)
    prefix = f"SKU-{_product_code(product_name)}-{_variant_code(variant_name, variant_value)}"

    sku = f"{prefix}-{_unique_id()}"
    attempts = 0
    while sku in taken and attempts < MAX_ATTEMPTS:
        sku = f"{prefix}-{_unique_id()}"
        attempts += 1

    if sku in taken:
        timestamp = str(time.time_ns() // 1_000_000)[-6:]
        sku = f"{prefix}-{timestamp}"

    return sku


def validate_sku_format(sku: str) -> bool:
    return SKU_PATTERN.match(sku) is not None


def generate_batch_skus(
    variants: Iterable[tuple[str, str]],
    product_name: str,
    existing_skus: Iterable[str] = (),
) -> list[str]:
    """
    One SKU per (variant_name, variant_value), unique within the batch
    and against `existing_skus`.
    """
    taken = list(existing_skus)
    generated: list[str] = []
    for variant_name, variant_value in variants:
        sku = generate_variant_sku(product_name, variant_name, variant_value, taken)
        generated.append(sku)
        taken.append(sku)
    return generated


def parse_sku(sku: str) -> SKUParts:
    if not validate_sku_format(sku):
        return SKUParts(is_valid=False)
    _, product_code, variant_code, unique_id = sku.split("-")
    return SKUParts(
        is_valid=True,
        product_code=product_code,
        variant_code=variant_code,
        unique_id=unique_id,
    )
