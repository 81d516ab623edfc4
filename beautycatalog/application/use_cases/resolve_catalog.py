from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

from beautycatalog.application.exceptions import UpstreamError
from beautycatalog.application.ports.catalog_source import CatalogSourcePort
from beautycatalog.application.utils.cancellation import CancellationToken
from beautycatalog.domain.entities.catalog_filters import CatalogFilters

T = TypeVar("T")


def never_final(filters: CatalogFilters) -> bool:
    return False


def final_when_inactive_explicitly_excluded(filters: CatalogFilters) -> bool:
    """An empty answer is trusted only when the caller passed show_inactive=False themselves."""
    return filters.show_inactive is False


@dataclass(frozen=True)
class CatalogTier(Generic[T]):
    source: CatalogSourcePort[T]
    empty_is_final: Callable[[CatalogFilters], bool] = never_final


class ResolveCatalogUseCase(Generic[T]):
    """
    Walks catalog tiers in priority order and returns the first usable result.

    - tiers run strictly one after another, a lower tier is never queried once a higher one answered
    - UpstreamError from a tier is logged and the next tier is tried
    - an empty result falls through unless the tier's emptiness policy says it is final
    - the last tier is the floor: whatever it returns is the answer
    - AbortedError is never caught here
    """

    def __init__(self, entity: str, tiers: Sequence[CatalogTier[T]]) -> None:
        if not tiers:
            raise ValueError("At least one catalog tier is required")
        self._entity = entity
        self._tiers = tuple(tiers)
        self._logger = logging.getLogger(__name__)

    async def execute(self, filters: CatalogFilters, cancellation: CancellationToken) -> list[T]:
        cancellation.raise_if_cancelled()

        last_index = len(self._tiers) - 1
        for index, tier in enumerate(self._tiers):
            source = tier.source
            if not source.applies_to(filters):
                continue

            cancellation.raise_if_cancelled()
            try:
                records = await source.resolve(filters, cancellation)
            except UpstreamError as e:
                cancellation.raise_if_cancelled()
                self._logger.warning(
                    "Catalog tier failed, trying next tier",
                    extra={"entity": self._entity, "tier": source.name, "error": str(e)},
                )
                continue
            cancellation.raise_if_cancelled()

            if records:
                self._logger.info(
                    "Catalog resolved",
                    extra={"entity": self._entity, "tier": source.name, "count": len(records)},
                )
                return records

            if index == last_index:
                break

            if tier.empty_is_final(filters):
                self._logger.info(
                    "Empty result treated as final",
                    extra={"entity": self._entity, "tier": source.name},
                )
                return []

            self._logger.info(
                "Catalog tier returned nothing, trying next tier",
                extra={"entity": self._entity, "tier": source.name},
            )

        self._logger.warning("No catalog tier returned data", extra={"entity": self._entity})
        return []
