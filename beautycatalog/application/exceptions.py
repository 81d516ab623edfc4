class CatalogError(RuntimeError):
    """Base class for catalog resolution failures."""
    pass


class AbortedError(CatalogError):
    """Raised when the caller's cancellation token is signalled (before or during a request)."""
    pass


class UpstreamError(CatalogError):
    """Raised when a catalog source fails outright (network errors, non-2xx, malformed envelope)."""

    def __init__(self, message: str, source: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class MutationError(CatalogError):
    """Raised when a write against the catalog backend fails. The message is the raw response body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
