from __future__ import annotations

from beautycatalog.application.ports.catalog_source import CatalogSourcePort
from beautycatalog.application.ports.datastore import DatastorePort, TableQuery
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.application.utils.field_normalizer import (
    PRODUCT_FIELDS,
    SERVICE_FIELDS,
    normalize_products,
    normalize_services,
)
from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService
from beautycatalog.domain.entities.catalog_filters import CatalogFilters

SERVICE_TABLE = "service_catalog"
PRODUCT_TABLE = "product_catalog"


def _base_query(table: str, filters: CatalogFilters) -> TableQuery:
    query = TableQuery(table=table).order("name")
    if filters.excludes_inactive:
        query = query.eq("is_active", True)
    term = filters.search_term
    if term:
        query = query.contains_any(("name", "description"), term)
    return query


class PrimaryServiceSource(CatalogSourcePort[CatalogService]):
    name = "primary"

    def __init__(self, datastore: DatastorePort) -> None:
        self._datastore = datastore

    def build_query(self, filters: CatalogFilters) -> TableQuery:
        query = _base_query(SERVICE_TABLE, filters)
        if filters.is_at_home is not None:
            query = query.eq("isAtHome", filters.is_at_home)
        return query

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogService]:
        rows = await self._datastore.select(self.build_query(filters), cancellation)
        # Nested products are not joined on this table; expansion comes from the backend tier.
        return normalize_services(rows, SERVICE_FIELDS)


class PrimaryProductSource(CatalogSourcePort[CatalogProduct]):
    name = "primary"

    def __init__(self, datastore: DatastorePort) -> None:
        self._datastore = datastore

    def build_query(self, filters: CatalogFilters) -> TableQuery:
        query = _base_query(PRODUCT_TABLE, filters)
        if filters.category:
            query = query.eq("category", filters.category)
        return query

    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[CatalogProduct]:
        rows = await self._datastore.select(self.build_query(filters), cancellation)
        return normalize_products(rows, PRODUCT_FIELDS)
