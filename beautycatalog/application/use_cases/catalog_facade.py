from __future__ import annotations

import logging
from typing import Any

from beautycatalog.application.dto.catalog_payloads import (
    ProductCreatePayload,
    ProductUpdatePayload,
    ServiceCreatePayload,
    ServiceUpdatePayload,
)
from beautycatalog.application.ports.catalog_backend import CatalogBackendPort
from beautycatalog.application.ports.credentials import CredentialProviderPort
from beautycatalog.application.use_cases.resolve_catalog import ResolveCatalogUseCase
from beautycatalog.application.utils.cancellation import CancellationToken, ensure_token
from beautycatalog.application.utils.field_normalizer import normalize_product, normalize_service
from beautycatalog.domain.entities.catalog import CatalogProduct, CatalogService
from beautycatalog.domain.entities.catalog_filters import CatalogFilters

SERVICES_ENDPOINT = "/catalog/services"
PRODUCTS_ENDPOINT = "/catalog/products"


class CatalogFacade:
    """
    Public entry points for catalog reads and writes.

    Reads go through the tiered resolvers and only raise AbortedError.
    Writes always target the generic backend, with no fallback and no retry.
    """

    def __init__(
        self,
        services: ResolveCatalogUseCase[CatalogService],
        products: ResolveCatalogUseCase[CatalogProduct],
        backend: CatalogBackendPort,
        credentials: CredentialProviderPort,
    ) -> None:
        self._services = services
        self._products = products
        self._backend = backend
        self._credentials = credentials
        self._logger = logging.getLogger(__name__)

    async def fetch_catalog_services(
        self,
        filters: CatalogFilters | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> list[CatalogService]:
        token = ensure_token(cancellation)
        token.raise_if_cancelled()
        return await self._services.execute(filters or CatalogFilters(), token)

    async def fetch_catalog_products(
        self,
        filters: CatalogFilters | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> list[CatalogProduct]:
        token = ensure_token(cancellation)
        token.raise_if_cancelled()
        return await self._products.execute(filters or CatalogFilters(), token)

    async def create_catalog_service(self, payload: ServiceCreatePayload) -> CatalogService | None:
        body = await self._write("POST", SERVICES_ENDPOINT, payload.to_create_body())
        return normalize_service(_data(body), expand_products=True)

    async def update_catalog_service(
        self, service_id: str, payload: ServiceUpdatePayload
    ) -> CatalogService | None:
        body = await self._write("PUT", f"{SERVICES_ENDPOINT}/{service_id}", payload.to_update_body())
        return normalize_service(_data(body), expand_products=True)

    async def delete_catalog_service(self, service_id: str) -> None:
        await self._write("DELETE", f"{SERVICES_ENDPOINT}/{service_id}")

    async def create_catalog_product(self, payload: ProductCreatePayload) -> CatalogProduct | None:
        body = await self._write("POST", PRODUCTS_ENDPOINT, payload.to_create_body())
        return normalize_product(_data(body))

    async def update_catalog_product(
        self, product_id: str, payload: ProductUpdatePayload
    ) -> CatalogProduct | None:
        body = await self._write("PUT", f"{PRODUCTS_ENDPOINT}/{product_id}", payload.to_update_body())
        return normalize_product(_data(body))

    async def delete_catalog_product(self, product_id: str) -> None:
        await self._write("DELETE", f"{PRODUCTS_ENDPOINT}/{product_id}")

    async def _write(
        self, method: str, endpoint: str, payload: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        headers = self._credentials.auth_headers()
        if payload is not None:
            headers["Content-Type"] = "application/json"
        self._logger.info("Catalog write", extra={"method": method, "endpoint": endpoint})
        return await self._backend.send(method, endpoint, payload=payload, headers=headers)


def _data(body: dict[str, Any] | None) -> Any:
    if not isinstance(body, dict):
        return None
    return body.get("data")
