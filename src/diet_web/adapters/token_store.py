"""Persistence for the auth token."""

from dataclasses import dataclass
from typing import Protocol


class TokenStore(Protocol):
    """Holds the bearer token for the current visitor."""

    def get(self) -> str | None:
        """Return the stored token, if present and not expired."""

    def set(self, token: str) -> None:
        """Persist a token."""

    def clear(self) -> None:
        """Forget the stored token."""


@dataclass
class InMemoryTokenStore(TokenStore):
    """Token store living only as long as the process."""

    token: str | None = None

    def get(self) -> str | None:
        """Return the stored token."""
        return self.token

    def set(self, token: str) -> None:
        """Remember a token."""
        self.token = token

    def clear(self) -> None:
        """Forget the token."""
        self.token = None
