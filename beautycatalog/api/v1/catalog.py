from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from pydantic import BaseModel

from beautycatalog.api.v1.schemas import CatalogProductSchema, CatalogServiceSchema
from beautycatalog.application.dto.catalog_payloads import (
    ProductCreatePayload,
    ProductUpdatePayload,
    ServiceCreatePayload,
    ServiceUpdatePayload,
)
from beautycatalog.application.exceptions import AbortedError, MutationError
from beautycatalog.application.use_cases.catalog_facade import CatalogFacade
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.core.config import settings
from beautycatalog.domain.entities.catalog_filters import CatalogFilters
from beautycatalog.wiring.dependencies import get_catalog_facade

router = APIRouter(prefix="/v1/catalog")
logger = logging.getLogger(__name__)

CLIENT_CLOSED_REQUEST = 499


def catalog_facade(authorization: str | None = Header(None)) -> CatalogFacade:
    return get_catalog_facade(authorization)


@asynccontextmanager
async def cancel_on_disconnect(request: Request) -> AsyncIterator[CancellationToken]:
    """Signal the token when the client goes away, so upstream calls are abandoned."""
    token = CancellationToken()

    async def _watch() -> None:
        while not token.cancelled:
            if await request.is_disconnected():
                token.cancel("client disconnected")
                return
            await asyncio.sleep(settings.DISCONNECT_POLL_SECONDS)

    watcher = asyncio.create_task(_watch())
    try:
        yield token
    finally:
        watcher.cancel()


def _aborted(e: AbortedError) -> Response:
    logger.info("Catalog request aborted", extra={"reason": str(e)})
    return Response(status_code=CLIENT_CLOSED_REQUEST)


def _mutation_failed(e: MutationError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


@router.get("/services", response_model=list[CatalogServiceSchema], response_model_by_alias=True)
async def list_services(
    request: Request,
    include_products: bool = Query(False, alias="includeProducts"),
    search: str | None = Query(None),
    show_inactive: bool | None = Query(None, alias="showInactive"),
    is_at_home: bool | None = Query(None, alias="isAtHome"),
    facade: CatalogFacade = Depends(catalog_facade),
):
    filters = CatalogFilters(
        include_products=include_products,
        search=search,
        show_inactive=show_inactive,
        is_at_home=is_at_home,
    )
    try:
        async with cancel_on_disconnect(request) as token:
            services = await facade.fetch_catalog_services(filters, cancellation=token)
    except AbortedError as e:
        return _aborted(e)
    return [CatalogServiceSchema.model_validate(s) for s in services]


@router.get("/products", response_model=list[CatalogProductSchema], response_model_by_alias=True)
async def list_products(
    request: Request,
    category: str | None = Query(None),
    search: str | None = Query(None),
    show_inactive: bool | None = Query(None, alias="showInactive"),
    is_at_home: bool | None = Query(None, alias="isAtHome"),
    facade: CatalogFacade = Depends(catalog_facade),
):
    filters = CatalogFilters(
        category=category,
        search=search,
        show_inactive=show_inactive,
        is_at_home=is_at_home,
    )
    try:
        async with cancel_on_disconnect(request) as token:
            products = await facade.fetch_catalog_products(filters, cancellation=token)
    except AbortedError as e:
        return _aborted(e)
    return [CatalogProductSchema.model_validate(p) for p in products]


@router.post("/services", status_code=201)
async def create_service(
    payload: ServiceCreatePayload,
    facade: CatalogFacade = Depends(catalog_facade),
):
    try:
        service = await facade.create_catalog_service(payload)
    except MutationError as e:
        raise _mutation_failed(e)
    return _dump(CatalogServiceSchema, service)


@router.put("/services/{service_id}")
async def update_service(
    service_id: str,
    payload: ServiceUpdatePayload,
    facade: CatalogFacade = Depends(catalog_facade),
):
    try:
        service = await facade.update_catalog_service(service_id, payload)
    except MutationError as e:
        raise _mutation_failed(e)
    return _dump(CatalogServiceSchema, service)


@router.delete("/services/{service_id}", status_code=204)
async def delete_service(service_id: str, facade: CatalogFacade = Depends(catalog_facade)) -> Response:
    try:
        await facade.delete_catalog_service(service_id)
    except MutationError as e:
        raise _mutation_failed(e)
    return Response(status_code=204)


@router.post("/products", status_code=201)
async def create_product(
    payload: ProductCreatePayload,
    facade: CatalogFacade = Depends(catalog_facade),
):
    try:
        product = await facade.create_catalog_product(payload)
    except MutationError as e:
        raise _mutation_failed(e)
    return _dump(CatalogProductSchema, product)


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    payload: ProductUpdatePayload,
    facade: CatalogFacade = Depends(catalog_facade),
):
    try:
        product = await facade.update_catalog_product(product_id, payload)
    except MutationError as e:
        raise _mutation_failed(e)
    return _dump(CatalogProductSchema, product)


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: str, facade: CatalogFacade = Depends(catalog_facade)) -> Response:
    try:
        await facade.delete_catalog_product(product_id)
    except MutationError as e:
        raise _mutation_failed(e)
    return Response(status_code=204)


def _dump(schema: type[BaseModel], entity: object | None) -> dict[str, Any]:
    if entity is None:
        return {"data": None}
    return {"data": schema.model_validate(entity).model_dump(by_alias=True)}
