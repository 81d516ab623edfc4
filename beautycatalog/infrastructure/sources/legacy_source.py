from __future__ import annotations

from beautycatalog.application.ports.catalog_source import CatalogSourcePort
from beautycatalog.application.ports.datastore import DatastorePort, TableQuery
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.application.utils.field_normalizer import (
    LEGACY_PRODUCT_FIELDS,
    LEGACY_SERVICE_FIELDS,
    normalize_products,
    normalize_services,
)
from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService
from beautycatalog.domain.entities.catalog_filters import CatalogFilters

SERVICE_TABLE = "services"
PRODUCT_TABLE = "products"

SERVICE_COLUMNS = ", ".join(
    [
        "id",
        "name",
        "description",
        "duration",
        "price",
        "is_active",
        "service_category_map(service_categories(name))",
    ]
)
PRODUCT_COLUMNS = "id, name, description, category, image, price, sku, is_active"


class LegacyServiceSource(CatalogSourcePort[CatalogService]):
    """Older `services` table: one `price` column and categories behind a join."""

    name = "legacy"

    def __init__(self, datastore: DatastorePort) -> None:
        self._datastore = datastore

    def build_query(self, filters: CatalogFilters) -> TableQuery:
        query = TableQuery(table=SERVICE_TABLE, columns=SERVICE_COLUMNS).order("name")
        if filters.excludes_inactive:
            query = query.eq("is_active", True)
        if filters.search_term:
            query = query.contains("name", filters.search_term)
        return query

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogService]:
        rows = await self._datastore.select(self.build_query(filters), cancellation)
        return normalize_services(rows, LEGACY_SERVICE_FIELDS)


class LegacyProductSource(CatalogSourcePort[CatalogProduct]):
    name = "legacy"

    def __init__(self, datastore: DatastorePort) -> None:
        self._datastore = datastore

    def build_query(self, filters: CatalogFilters) -> TableQuery:
        query = TableQuery(table=PRODUCT_TABLE, columns=PRODUCT_COLUMNS).order("name")
        if filters.category:
            query = query.eq("category", filters.category)
        if filters.search_term:
            query = query.contains("name", filters.search_term)
        if filters.excludes_inactive:
            query = query.eq("is_active", True)
        return query

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogProduct]:
        rows = await self._datastore.select(self.build_query(filters), cancellation)
        return normalize_products(rows, LEGACY_PRODUCT_FIELDS)
