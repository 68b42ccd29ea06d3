"""HTTP client for the diet recommendation REST API."""

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass, replace
from typing import Protocol

import httpx

from diet_web.adapters.token_store import TokenStore

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class BearerTokenAuth(httpx.Auth):
    """Attach the stored token and react to 401 responses.

    Every unauthorized response clears the token and calls
    ``on_unauthorized``, whatever the caller does with the error afterwards.
    """

    def __init__(
        self,
        token_store: TokenStore,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> None:
        self.token_store = token_store
        self.on_unauthorized = on_unauthorized

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        """Add the Authorization header and handle 401 responses."""
        token = self.token_store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if response.status_code == httpx.codes.UNAUTHORIZED:
            _logger.info(
                "Unauthorized response for %s; clearing token", request.url.path
            )
            self.token_store.clear()
            if self.on_unauthorized is not None:
                self.on_unauthorized()


class ApiClient(Protocol):
    """Interface for JSON calls against the remote API."""

    def bind(
        self,
        token_store: TokenStore,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> "ApiClient":
        """Return a client that authenticates with ``token_store``."""

    async def get(
        self, path: str, params: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a GET request and return the decoded body."""

    async def post(
        self, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a POST request and return the decoded body."""

    async def put(
        self, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a PUT request and return the decoded body."""

    async def delete(self, path: str) -> dict[str, object]:
        """Send a DELETE request and return the decoded body."""


@dataclass
class HttpxApiClient(ApiClient):
    """HTTPX-backed API client."""

    base_url: str
    http_client: httpx.AsyncClient
    auth: httpx.Auth | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    ) -> "HttpxApiClient":
        """Create an API client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(
                headers={"Content-Type": "application/json"}
            ),
            timeout_seconds=timeout_seconds,
        )

    def bind(
        self,
        token_store: TokenStore,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> "HttpxApiClient":
        """Return a copy sharing the HTTP session with bearer auth attached."""
        return replace(self, auth=BearerTokenAuth(token_store, on_unauthorized))

    async def get(
        self, path: str, params: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a GET request."""
        return await self._request("GET", path, params=_drop_none(params))

    async def post(
        self, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a POST request."""
        return await self._request("POST", path, json=json)

    async def put(
        self, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send a PUT request."""
        return await self._request("PUT", path, json=json)

    async def delete(self, path: str) -> dict[str, object]:
        """Send a DELETE request."""
        return await self._request("DELETE", path)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, object] | None = None,
        json: dict[str, object] | None = None,
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            auth=self.auth,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        if not response.content:
            return {}
        payload = response.json()
        if isinstance(payload, dict):
            return payload
        return {"data": payload}


def _drop_none(params: dict[str, object] | None) -> dict[str, object] | None:
    if params is None:
        return None
    return {key: value for key, value in params.items() if value is not None}
