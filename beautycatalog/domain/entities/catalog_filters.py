from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogFilters:
    """
    Filter set shared by service and product lookups.

    `show_inactive` is tri-state: None means the caller did not say, which still excludes
    inactive items but is not treated as an explicit exclusion by the product fallback rule.
    """

    include_products: bool = False
    search: str | None = None
    show_inactive: bool | None = None
    is_at_home: bool | None = None
    category: str | None = None

    @property
    def excludes_inactive(self) -> bool:
        return not self.show_inactive

    @property
    def search_term(self) -> str | None:
        term = (self.search or "").strip()
        return term or None
