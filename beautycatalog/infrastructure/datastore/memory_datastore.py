from __future__ import annotations

import asyncio
import copy
from typing import Any

from beautycatalog.application.exceptions import UpstreamError
from beautycatalog.application.ports.datastore import DatastorePort, TableQuery
from beautycatalog.application.utils.cancellation import CancellationToken


def _top_level_columns(columns: str) -> list[str] | None:
    """`id, name, rel(child(name))` -> ['id', 'name', 'rel']; None for `*`."""
    if columns.strip() == "*":
        return None
    names: list[str] = []
    depth = 0
    current = ""
    for ch in columns:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            names.append(current)
            current = ""
            continue
        if depth == 0 and ch not in "()":
            current += ch
    names.append(current)
    return [n.strip() for n in names if n.strip()]


def _ilike(value: Any, term: str) -> bool:
    if value is None:
        return False
    return term.lower() in str(value).lower()


class MemoryDatastore(DatastorePort):
    """
    In-process datastore with the same query semantics as the managed one.

    Used for local development and tests. `failing` tables raise UpstreamError,
    and every query is recorded in `queries`.
    """

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self._tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self._failing = set(failing or ())
        self.queries: list[TableQuery] = []

    def insert(self, table: str, row: dict[str, Any]) -> None:
        self._tables.setdefault(table, []).append(dict(row))

    def fail(self, table: str) -> None:
        self._failing.add(table)

    async def select(self, query: TableQuery, cancellation: CancellationToken) -> list[dict[str, Any]]:
        cancellation.raise_if_cancelled()
        self.queries.append(query)
        await asyncio.sleep(0)
        cancellation.raise_if_cancelled()

        if query.table in self._failing:
            raise UpstreamError(f"select {query.table} failed: unavailable", source=query.table)

        rows = [row for row in self._tables.get(query.table, []) if self._matches(row, query)]
        if query.order_by:
            rows.sort(key=lambda r: str(r.get(query.order_by) or "").casefold(), reverse=not query.ascending)

        columns = _top_level_columns(query.columns)
        if columns is None:
            return [copy.deepcopy(row) for row in rows]
        return [{c: copy.deepcopy(row.get(c)) for c in columns} for row in rows]

    @staticmethod
    def _matches(row: dict[str, Any], query: TableQuery) -> bool:
        for column, value in query.equals:
            if row.get(column) != value:
                return False
        for column, term in query.ilike:
            if not _ilike(row.get(column), term):
                return False
        for columns, term in query.ilike_any:
            if not any(_ilike(row.get(column), term) for column in columns):
                return False
        return True
