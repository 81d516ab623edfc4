"""
Field normalization for catalog records.

Every upstream names the same data differently (camelCase from the backend, snake_case
columns in the datastore, `duration_minutes`/`image_url` on the at-home endpoint, a
single `price` column in the legacy tables). Each canonical field is described by a
`FieldRule`: the accepted variants in priority order, a coercion, and a default.
A profile is a mapping of canonical field -> rule; sources pick or override profiles.

Normalizers never raise for missing optional fields. A record without a usable `id`
or `name` normalizes to None and is excluded from the result.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService, ServiceProduct

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60

_FALSE_STRINGS = {"", "false", "0", "no", "off"}


def to_number(value: Any) -> float:
    """Coerce to a non-negative float; anything non-numeric becomes 0."""
    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0

    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def to_flag(value: Any) -> bool:
    """Truthiness, except that flag-like strings ("false", "0", "no", "off", "") read as False."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def to_minutes(value: Any) -> int | None:
    minutes = to_number(value)
    if minutes <= 0:
        return None
    return int(minutes)


def to_count(value: Any) -> int | None:
    count = to_number(value)
    if count <= 0:
        return None
    return int(count)


def to_text(value: Any) -> str | None:
    """Identifier-style text: stripped, empty means missing."""
    if isinstance(value, (dict, list, tuple, set)):
        return None
    text = str(value).strip()
    return text or None


def to_optional_text(value: Any) -> str | None:
    if isinstance(value, (dict, list, tuple, set)):
        return None
    return str(value)


@dataclass(frozen=True)
class FieldRule:
    variants: tuple[str, ...] = ()
    coerce: Callable[[Any], Any] = to_optional_text
    default: Any = None
    extract: Callable[[Mapping[str, Any]], Any] | None = None

    def read(self, record: Mapping[str, Any]) -> Any:
        raw = self.extract(record) if self.extract is not None else pick(record, self.variants)
        if raw is None:
            return self.default
        value = self.coerce(raw)
        return self.default if value is None else value


Profile = Mapping[str, FieldRule]


def pick(record: Mapping[str, Any], variants: Iterable[str]) -> Any:
    """Return the first variant present with a non-null value."""
    for key in variants:
        value = record.get(key)
        if value is not None:
            return value
    return None


def constant(value: Any) -> Callable[[Mapping[str, Any]], Any]:
    return lambda record: value


def first_joined_category(record: Mapping[str, Any]) -> str | None:
    """Legacy services carry categories through `service_category_map -> service_categories.name`."""
    entries = record.get("service_category_map")
    if not isinstance(entries, list):
        return None
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        category = entry.get("service_categories")
        if isinstance(category, list):
            category = category[0] if category else None
        if isinstance(category, Mapping) and category.get("name"):
            return str(category["name"])
    return None


_ID = FieldRule(("id",), to_text)
_NAME = FieldRule(("name",), to_text)
_CUSTOMER_PRICE = FieldRule(("customerPrice", "customer_price", "price"), to_number, 0.0)
_VENDOR_PAYOUT = FieldRule(("vendorPayout", "vendor_payout"), to_number, 0.0)
_SHARED_PRICE = FieldRule(("price",), to_number, 0.0)


SERVICE_FIELDS: Profile = {
    "id": _ID,
    "slug": FieldRule(("slug",), to_text),
    "name": _NAME,
    "description": FieldRule(("description",)),
    "duration": FieldRule(("duration",), to_minutes, DEFAULT_DURATION_MINUTES),
    "customer_price": _CUSTOMER_PRICE,
    "vendor_payout": _VENDOR_PAYOUT,
    "category": FieldRule(("category",)),
    "icon": FieldRule(("icon",)),
    "allows_products": FieldRule(("allowsProducts", "allows_products"), to_flag, False),
    "is_active": FieldRule(("isActive", "is_active"), to_flag, True),
}

SPECIALIZED_SERVICE_FIELDS: Profile = {
    **SERVICE_FIELDS,
    "slug": FieldRule(("slug", "id"), to_text),
    "duration": FieldRule(("duration_minutes", "duration"), to_minutes, DEFAULT_DURATION_MINUTES),
    "customer_price": _SHARED_PRICE,
    "vendor_payout": _SHARED_PRICE,
    "icon": FieldRule(extract=constant(None)),
    "allows_products": FieldRule(coerce=to_flag, extract=constant(True)),
    "is_active": FieldRule(("is_active", "isActive"), to_flag, True),
}

LEGACY_SERVICE_FIELDS: Profile = {
    **SERVICE_FIELDS,
    "slug": FieldRule(extract=constant(None)),
    "customer_price": _SHARED_PRICE,
    "vendor_payout": _SHARED_PRICE,
    "category": FieldRule(extract=first_joined_category),
    "icon": FieldRule(extract=constant(None)),
    "allows_products": FieldRule(coerce=to_flag, extract=constant(False)),
    "is_active": FieldRule(("is_active",), to_flag, True),
}

PRODUCT_FIELDS: Profile = {
    "id": _ID,
    "slug": FieldRule(("slug",), to_text),
    "name": _NAME,
    "description": FieldRule(("description",)),
    "category": FieldRule(("category",)),
    "image": FieldRule(("image",)),
    "customer_price": _CUSTOMER_PRICE,
    "vendor_payout": _VENDOR_PAYOUT,
    "sku": FieldRule(("sku",)),
    "is_active": FieldRule(("isActive", "is_active"), to_flag, False),
}

SPECIALIZED_PRODUCT_FIELDS: Profile = {
    **PRODUCT_FIELDS,
    "slug": FieldRule(("slug", "id"), to_text),
    "image": FieldRule(("image_url", "image")),
    "customer_price": _SHARED_PRICE,
    "vendor_payout": _SHARED_PRICE,
    "sku": FieldRule(extract=constant(None)),
    "is_active": FieldRule(("is_active", "isActive"), to_flag, True),
}

LEGACY_PRODUCT_FIELDS: Profile = {
    **PRODUCT_FIELDS,
    "slug": FieldRule(extract=constant(None)),
    "customer_price": _SHARED_PRICE,
    "vendor_payout": _SHARED_PRICE,
    "is_active": FieldRule(("is_active",), to_flag, True),
}


def apply_profile(record: Mapping[str, Any], profile: Profile) -> dict[str, Any]:
    return {field: rule.read(record) for field, rule in profile.items()}


def normalize_product(record: Any, profile: Profile = PRODUCT_FIELDS) -> CatalogProduct | None:
    if not isinstance(record, Mapping):
        return None
    values = apply_profile(record, profile)
    if values.get("id") is None or values.get("name") is None:
        return None
    return CatalogProduct(**values)


def normalize_service_product(entry: Any) -> ServiceProduct | None:
    """Nested product link on a service; entries without a usable product record are dropped."""
    if not isinstance(entry, Mapping):
        return None
    product = normalize_product(pick(entry, ("productCatalog", "product_catalog")))
    if product is None:
        return None
    return ServiceProduct(
        id=to_text(entry.get("id")) or product.id,
        product_catalog=product,
        quantity=to_count(entry.get("quantity")) or 1,
        optional=to_flag(entry["optional"]) if entry.get("optional") is not None else True,
    )


def normalize_service(
    record: Any,
    profile: Profile = SERVICE_FIELDS,
    *,
    expand_products: bool = False,
) -> CatalogService | None:
    if not isinstance(record, Mapping):
        return None
    values = apply_profile(record, profile)
    if values.get("id") is None or values.get("name") is None:
        return None

    products: tuple[ServiceProduct, ...] = ()
    if expand_products and isinstance(record.get("products"), list):
        products = tuple(
            link for link in (normalize_service_product(p) for p in record["products"]) if link is not None
        )
    return CatalogService(**values, products=products)


def normalize_services(
    records: Iterable[Any],
    profile: Profile = SERVICE_FIELDS,
    *,
    expand_products: bool = False,
) -> list[CatalogService]:
    records = list(records or [])
    out = [
        service
        for service in (normalize_service(r, profile, expand_products=expand_products) for r in records)
        if service is not None
    ]
    _log_excluded("service", len(records), len(out))
    return out


def normalize_products(records: Iterable[Any], profile: Profile = PRODUCT_FIELDS) -> list[CatalogProduct]:
    records = list(records or [])
    out = [product for product in (normalize_product(r, profile) for r in records) if product is not None]
    _log_excluded("product", len(records), len(out))
    return out


def _log_excluded(entity: str, total: int, kept: int) -> None:
    if kept < total:
        logger.debug(
            "Excluded catalog records without id/name",
            extra={"entity": entity, "count": total - kept},
        )
