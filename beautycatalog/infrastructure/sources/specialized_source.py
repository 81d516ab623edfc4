from __future__ import annotations

from beautycatalog.application.ports.catalog_backend import CatalogBackendPort
from beautycatalog.application.ports.catalog_source import CatalogSourcePort
from beautycatalog.application.ports.credentials import CredentialProviderPort
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.application.utils.field_normalizer import (
    SPECIALIZED_PRODUCT_FIELDS,
    SPECIALIZED_SERVICE_FIELDS,
    normalize_products,
    normalize_services,
)
from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService
from beautycatalog.domain.entities.catalog_filters import CatalogFilters


class _AtHomeEndpoint:
    name = "specialized"

    def __init__(self, backend: CatalogBackendPort, credentials: CredentialProviderPort) -> None:
        self._backend = backend
        self._credentials = credentials

    def applies_to(self, filters: CatalogFilters) -> bool:
        return bool(filters.is_at_home)

    async def _fetch(self, endpoint: str, cancellation: CancellationToken) -> list[dict]:
        data = await self._backend.get_envelope(
            endpoint,
            cancellation,
            headers=self._credentials.auth_headers(),
        )
        return data or []


class SpecializedServiceSource(_AtHomeEndpoint, CatalogSourcePort[CatalogService]):
    """At-home service catalog. Every item supports add-on products."""

    endpoint = "/customer/athome/services"

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogService]:
        records = await self._fetch(self.endpoint, cancellation)
        return normalize_services(records, SPECIALIZED_SERVICE_FIELDS)


class SpecializedProductSource(_AtHomeEndpoint, CatalogSourcePort[CatalogProduct]):
    endpoint = "/customer/athome/products"

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogProduct]:
        records = await self._fetch(self.endpoint, cancellation)
        return normalize_products(records, SPECIALIZED_PRODUCT_FIELDS)
