from __future__ import annotations

import logging
from typing import Any

import httpx

from beautycatalog.application.exceptions import MutationError, UpstreamError
from beautycatalog.application.ports.catalog_backend import CatalogBackendPort
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.core.config import settings


class HttpCatalogBackend(CatalogBackendPort):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.CATALOG_API_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport
        self._logger = logging.getLogger(__name__)

    def url(self, endpoint: str = "") -> str:
        path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        return f"{self._base_url}{path}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    async def get_envelope(
        self,
        endpoint: str,
        cancellation: CancellationToken,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> list[dict[str, Any]] | None:
        url = self.url(endpoint)
        request_headers = {"Content-Type": "application/json", **(headers or {})}
        try:
            async with self._client() as client:
                resp = await cancellation.run(client.get(url, params=params or None, headers=request_headers))
        except httpx.HTTPError as e:
            raise UpstreamError(f"GET {endpoint} failed: {e}", source=endpoint) from e

        if not resp.is_success:
            raise UpstreamError(
                f"GET {endpoint} returned HTTP {resp.status_code}",
                source=endpoint,
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError(f"GET {endpoint} returned a non-JSON body", source=endpoint) from e

        if not isinstance(body, dict):
            raise UpstreamError(f"GET {endpoint} returned a non-envelope body", source=endpoint)

        data = body.get("data")
        if not body.get("success") or data is None:
            self._logger.info("Backend envelope not usable", extra={"endpoint": endpoint})
            return None
        if not isinstance(data, list):
            raise UpstreamError(f"GET {endpoint} returned non-list data", source=endpoint)
        return data

    async def send(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any] | None:
        url = self.url(endpoint)
        try:
            async with self._client() as client:
                resp = await client.request(method, url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Catalog write failed", extra={"endpoint": endpoint, "error": str(e)})
            raise MutationError(str(e)) from e

        if not resp.is_success:
            self._logger.error(
                "Catalog write rejected",
                extra={"endpoint": endpoint, "status": resp.status_code},
            )
            raise MutationError(resp.text, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            body = resp.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None
