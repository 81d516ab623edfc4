from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any

from beautycatalog.application.utils.cancellation import CancellationToken


@dataclass(frozen=True)
class TableQuery:
    """Immutable select against one datastore table."""

    table: str
    columns: str = "*"
    equals: tuple[tuple[str, Any], ...] = ()
    ilike: tuple[tuple[str, str], ...] = ()
    ilike_any: tuple[tuple[tuple[str, ...], str], ...] = ()
    order_by: str | None = None
    ascending: bool = True

    def eq(self, column: str, value: Any) -> TableQuery:
        return replace(self, equals=self.equals + ((column, value),))

    def contains(self, column: str, term: str) -> TableQuery:
        """Case-insensitive substring match on one column."""
        return replace(self, ilike=self.ilike + ((column, term),))

    def contains_any(self, columns: tuple[str, ...], term: str) -> TableQuery:
        """Case-insensitive substring match on any of the columns (an OR group)."""
        return replace(self, ilike_any=self.ilike_any + ((tuple(columns), term),))

    def order(self, column: str, ascending: bool = True) -> TableQuery:
        return replace(self, order_by=column, ascending=ascending)


class DatastorePort(ABC):
    @abstractmethod
    async def select(self, query: TableQuery, cancellation: CancellationToken) -> list[dict[str, Any]]:
        """
        Run a select and return the raw rows.

        Raises:
            UpstreamError: the datastore could not answer the query
            AbortedError: the cancellation token was signalled
        """
        raise NotImplementedError
