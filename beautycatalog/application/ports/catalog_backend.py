from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from beautycatalog.application.utils.cancellation import CancellationToken


class CatalogBackendPort(ABC):
    @abstractmethod
    async def get_envelope(
        self,
        endpoint: str,
        cancellation: CancellationToken,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> list[dict[str, Any]] | None:
        """
        GET an endpoint that answers with a `{success, data}` envelope.

        Returns the `data` records, or None when the envelope reports `success=false`
        or carries no `data`.

        Raises:
            UpstreamError: network failure, non-2xx status, or a body that is not an envelope
            AbortedError: the cancellation token was signalled
        """
        raise NotImplementedError

    @abstractmethod
    async def send(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any] | None:
        """
        Issue a write (POST/PUT/DELETE). Returns the decoded JSON body, or None for an empty body.

        Raises:
            MutationError: non-2xx status (message is the raw body) or transport failure
        """
        raise NotImplementedError
