"""Shared test fixtures."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from beautycatalog.application.use_cases.catalog_facade import CatalogFacade
from beautycatalog.infrastructure.auth.credentials import StaticCredentialProvider
from beautycatalog.infrastructure.backend.backend_client import HttpCatalogBackend
from beautycatalog.infrastructure.datastore.memory_datastore import MemoryDatastore
from beautycatalog.wiring.dependencies import build_catalog_facade

BACKEND_URL = "http://backend.test/api"

Route = httpx.Response | Callable[[httpx.Request], Any]


class FakeUpstream:
    """Routes requests by (method, path) and records every request it sees."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Route] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response: Route) -> None:
        self.routes[(method.upper(), f"/api{path}")] = response

    def envelope(self, path: str, data: list[dict[str, Any]] | None, success: bool = True) -> None:
        body: dict[str, Any] = {"success": success}
        if data is not None:
            body["data"] = data
        self.on("GET", path, httpx.Response(200, json=body))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, httpx.Response):
            return route
        result = route(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/api") for r in self.requests]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def datastore() -> MemoryDatastore:
    return MemoryDatastore()


@pytest.fixture
def backend(upstream: FakeUpstream) -> HttpCatalogBackend:
    return HttpCatalogBackend(base_url=BACKEND_URL, transport=upstream.transport())


@pytest.fixture
def make_facade(backend: HttpCatalogBackend, datastore: MemoryDatastore) -> Callable[..., CatalogFacade]:
    def _create(token: str | None = "session-token") -> CatalogFacade:
        return build_catalog_facade(
            backend=backend,
            datastore=datastore,
            credentials=StaticCredentialProvider(token),
        )

    return _create
