from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogProduct:
    id: str
    name: str
    slug: str | None = None
    description: str | None = None
    category: str | None = None
    image: str | None = None
    customer_price: float = 0.0
    vendor_payout: float = 0.0
    sku: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class ServiceProduct:
    id: str
    product_catalog: CatalogProduct
    quantity: int = 1
    optional: bool = True


@dataclass(frozen=True)
class CatalogService:
    id: str
    name: str
    slug: str | None = None
    description: str | None = None
    duration: int = 60
    customer_price: float = 0.0
    vendor_payout: float = 0.0
    category: str | None = None
    icon: str | None = None
    allows_products: bool = False
    is_active: bool = True
    products: tuple[ServiceProduct, ...] = ()
