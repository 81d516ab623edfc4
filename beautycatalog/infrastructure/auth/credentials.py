from __future__ import annotations

import json
import logging
from pathlib import Path

from beautycatalog.application.ports.credentials import CredentialProviderPort


class StaticCredentialProvider(CredentialProviderPort):
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get_token(self) -> str | None:
        return self._token or None


class HeaderCredentialProvider(CredentialProviderPort):
    """Reuses the bearer token of an inbound request (`Authorization: Bearer <token>`)."""

    def __init__(self, authorization: str | None) -> None:
        self._authorization = authorization or ""

    def get_token(self) -> str | None:
        scheme, _, token = self._authorization.strip().partition(" ")
        if scheme.lower() != "bearer":
            return None
        return token.strip() or None


class SessionFileCredentialProvider(CredentialProviderPort):
    """
    Reads the session token from a JSON file (`{"token": "..."}`) on every call,
    so a refreshed session is picked up without rebuilding the provider.
    """

    def __init__(self, path: str | Path, key: str = "token") -> None:
        self._path = Path(path)
        self._key = key
        self._logger = logging.getLogger(__name__)

    def get_token(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.warning("Session file unreadable", extra={"error": str(e)})
            return None
        if not isinstance(data, dict):
            return None
        token = data.get(self._key)
        return str(token) if token else None
