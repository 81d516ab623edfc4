from __future__ import annotations

import logging
from typing import Any

import httpx

from beautycatalog.application.exceptions import UpstreamError
from beautycatalog.application.ports.datastore import DatastorePort, TableQuery
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.core.config import settings

_RESERVED = set(',()"\\:')


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _pattern(term: str) -> str:
    return f"*{term}*"


def _or_pattern(term: str) -> str:
    pattern = _pattern(term)
    if any(ch in _RESERVED for ch in pattern):
        escaped = pattern.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return pattern


def build_params(query: TableQuery) -> list[tuple[str, str]]:
    """Translate a TableQuery into PostgREST query parameters."""
    params: list[tuple[str, str]] = [("select", query.columns)]
    for column, value in query.equals:
        op = "is" if value is None else "eq"
        params.append((column, f"{op}.{_literal(value)}"))
    for column, term in query.ilike:
        params.append((column, f"ilike.{_pattern(term)}"))
    for columns, term in query.ilike_any:
        group = ",".join(f"{column}.ilike.{_or_pattern(term)}" for column in columns)
        params.append(("or", f"({group})"))
    if query.order_by:
        params.append(("order", f"{query.order_by}.{'asc' if query.ascending else 'desc'}"))
    return params


class PostgrestDatastore(DatastorePort):
    """Table reads against the managed datastore's REST interface (`/rest/v1/<table>`)."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.SUPABASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.SUPABASE_ANON_KEY
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("SUPABASE_URL is required for the PostgREST datastore")

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def select(self, query: TableQuery, cancellation: CancellationToken) -> list[dict[str, Any]]:
        url = f"{self._base_url}/rest/v1/{query.table}"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                resp = await cancellation.run(
                    client.get(url, params=build_params(query), headers=self._headers())
                )
        except httpx.HTTPError as e:
            raise UpstreamError(f"select {query.table} failed: {e}", source=query.table) from e

        if not resp.is_success:
            self._logger.warning(
                "Datastore query rejected",
                extra={"table": query.table, "status": resp.status_code, "error": resp.text[:200]},
            )
            raise UpstreamError(
                f"select {query.table} returned HTTP {resp.status_code}",
                source=query.table,
                status_code=resp.status_code,
            )

        try:
            rows = resp.json()
        except ValueError as e:
            raise UpstreamError(f"select {query.table} returned a non-JSON body", source=query.table) from e
        if not isinstance(rows, list):
            raise UpstreamError(f"select {query.table} returned a non-list body", source=query.table)
        return [row for row in rows if isinstance(row, dict)]
