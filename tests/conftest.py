"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from diet_web.adapters.api_client import ApiClient
from diet_web.adapters.token_store import InMemoryTokenStore, TokenStore
from diet_web.config import Settings
from diet_web.containers import ApiServices, AppContainer, build_services
from diet_web.services.notifications import RecordingNavigator, RecordingNotifier

API_BASE_URL = "http://api.test/api"


def http_error(
    status_code: int,
    payload: dict[str, object] | None = None,
    method: str = "GET",
    path: str = "/",
) -> httpx.HTTPStatusError:
    """Build the error ``raise_for_status`` produces for a JSON response."""
    request = httpx.Request(method, f"{API_BASE_URL}{path}")
    response = httpx.Response(status_code, json=payload or {}, request=request)
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


def user_payload(**overrides: object) -> dict[str, object]:
    """User as the API sends it, with a complete profile."""
    payload: dict[str, object] = {
        "user_id": 1,
        "email": "ann@example.com",
        "nama": "Ann",
        "umur": 30,
        "jenis_kelamin": "P",
        "tinggi_badan": 165,
        "berat_badan": 60,
        "aktivitas": "moderate",
        "diet_goal": "menjaga",
        "role": "user",
    }
    payload.update(overrides)
    return payload


def food_payload(**overrides: object) -> dict[str, object]:
    """Food as the API sends it."""
    payload: dict[str, object] = {
        "food_id": 7,
        "nama_makanan": "Nasi goreng masakan",
        "energi": 150,
        "protein": 12,
        "lemak": 4,
        "serat": 1,
        "natrium": 250,
        "estimated_gi": 40,
        "health_score": 72,
        "category_name": "Rice",
        "diet_suitability": "hypertension, diabetes, vegan",
    }
    payload.update(overrides)
    return payload


@dataclass
class FakeApiClient(ApiClient):
    """API client returning canned payloads and recording calls.

    Responses are keyed by ``(method, path)``. Queued responses are used
    first, one per call. An exception given as a response is raised; a 401
    error first clears the bound token store and calls the unauthorized hook,
    like the bearer auth does.
    """

    responses: dict[tuple[str, str], object] = field(default_factory=dict)
    queued: dict[tuple[str, str], list[object]] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, object] | None]] = field(
        default_factory=list
    )
    tokens_seen: list[str | None] = field(default_factory=list)
    token_store: TokenStore | None = None
    on_unauthorized: Callable[[], None] | None = None

    def bind(
        self,
        token_store: TokenStore,
        on_unauthorized: Callable[[], None] | None = None,
    ) -> "FakeApiClient":
        self.token_store = token_store
        self.on_unauthorized = on_unauthorized
        return self

    def respond(self, method: str, path: str, result: object) -> None:
        self.responses[(method, path)] = result

    def respond_in_turn(self, method: str, path: str, *results: object) -> None:
        self.queued.setdefault((method, path), []).extend(results)

    def paths(self, method: str | None = None) -> list[str]:
        return [
            path for called, path, _ in self.calls if method in (None, called)
        ]

    async def get(
        self, path: str, params: dict[str, object] | None = None
    ) -> dict[str, object]:
        return self._call("GET", path, params)

    async def post(
        self, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        return self._call("POST", path, json)

    async def put(
        self, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        return self._call("PUT", path, json)

    async def delete(self, path: str) -> dict[str, object]:
        return self._call("DELETE", path, None)

    def _call(
        self, method: str, path: str, body: dict[str, object] | None
    ) -> dict[str, object]:
        self.calls.append((method, path, body))
        self.tokens_seen.append(self.token_store.get() if self.token_store else None)
        queued = self.queued.get((method, path))
        if queued:
            result = queued.pop(0)
        else:
            result = self.responses.get((method, path), {})
        if isinstance(result, httpx.HTTPStatusError):
            if result.response.status_code == httpx.codes.UNAUTHORIZED:
                if self.token_store is not None:
                    self.token_store.clear()
                if self.on_unauthorized is not None:
                    self.on_unauthorized()
            raise result
        if isinstance(result, Exception):
            raise result
        return result  # type: ignore[return-value]


@dataclass
class Visitor:
    """Services bound to one in-memory visitor."""

    services: ApiServices
    token_store: InMemoryTokenStore
    notifier: RecordingNotifier
    navigator: RecordingNavigator


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url=API_BASE_URL)


@pytest.fixture
def api_client() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture
def visitor(api_client: FakeApiClient) -> Visitor:
    token_store = InMemoryTokenStore()
    notifier = RecordingNotifier()
    navigator = RecordingNavigator()
    services = build_services(api_client, token_store, notifier, navigator)
    return Visitor(
        services=services,
        token_store=token_store,
        notifier=notifier,
        navigator=navigator,
    )


@pytest.fixture
def container(settings: Settings, api_client: FakeApiClient) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        api_client=api_client,
        close_resources=close_resources,
    )
