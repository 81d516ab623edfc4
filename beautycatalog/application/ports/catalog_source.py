from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.domain.entities.catalog_filters import CatalogFilters

T = TypeVar("T")


class CatalogSourcePort(ABC, Generic[T]):
    """One upstream catalog source plus the normalization of its records."""

    name: str = "source"

    def applies_to(self, filters: CatalogFilters) -> bool:
        """Whether this source takes part in resolving the given request."""
        return True

    @abstractmethod
    async def resolve(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[T]:
        """
        Query the upstream and return canonical entities.

        Raises:
            UpstreamError: the source failed outright (an empty result is not a failure)
            AbortedError: the cancellation token was signalled
        """
        raise NotImplementedError
