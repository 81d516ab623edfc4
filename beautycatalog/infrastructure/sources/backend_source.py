from __future__ import annotations

from beautycatalog.application.ports.catalog_backend import CatalogBackendPort
from beautycatalog.application.ports.catalog_source import CatalogSourcePort
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.application.utils.field_normalizer import (
    PRODUCT_FIELDS,
    SERVICE_FIELDS,
    normalize_products,
    normalize_services,
)
from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService
from beautycatalog.domain.entities.catalog_filters import CatalogFilters


def service_query_params(filters: CatalogFilters) -> dict[str, str]:
    params: dict[str, str] = {}
    if filters.include_products:
        params["includeProducts"] = "true"
    if filters.search_term:
        params["search"] = filters.search_term
    if filters.show_inactive:
        params["showInactive"] = "true"
    if filters.is_at_home is not None:
        params["isAtHome"] = "true" if filters.is_at_home else "false"
    return params


def product_query_params(filters: CatalogFilters) -> dict[str, str]:
    params: dict[str, str] = {}
    if filters.category:
        params["category"] = filters.category
    if filters.search_term:
        params["search"] = filters.search_term
    if filters.show_inactive:
        params["showInactive"] = "true"
    return params


class BackendServiceSource(CatalogSourcePort[CatalogService]):
    name = "backend"
    endpoint = "/catalog/services"

    def __init__(self, backend: CatalogBackendPort) -> None:
        self._backend = backend

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogService]:
        data = await self._backend.get_envelope(self.endpoint, cancellation, params=service_query_params(filters))
        if data is None:
            return []
        return normalize_services(data, SERVICE_FIELDS, expand_products=filters.include_products)


class BackendProductSource(CatalogSourcePort[CatalogProduct]):
    name = "backend"
    endpoint = "/catalog/products"

    def __init__(self, backend: CatalogBackendPort) -> None:
        self._backend = backend

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogProduct]:
        data = await self._backend.get_envelope(self.endpoint, cancellation, params=product_query_params(filters))
        if data is None:
            return []
        return normalize_products(data, PRODUCT_FIELDS)
