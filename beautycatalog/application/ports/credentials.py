from __future__ import annotations

from abc import ABC, abstractmethod


class CredentialProviderPort(ABC):
    @abstractmethod
    def get_token(self) -> str | None:
        """Bearer token for authenticated backend calls, or None when there is no session."""
        raise NotImplementedError

    def auth_headers(self) -> dict[str, str]:
        token = self.get_token()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
