"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from diet_web.adapters.api_client import ApiClient, HttpxApiClient
from diet_web.adapters.token_store import TokenStore
from diet_web.config import Settings, normalize_base_url
from diet_web.domain.routes import LOGIN_PATH
from diet_web.services.auth import AuthService
from diet_web.services.foods import FoodService
from diet_web.services.meal_planning import MealPlanningService
from diet_web.services.notifications import Navigator, Notifier
from diet_web.services.recommendations import RecommendationService
from diet_web.services.session import SessionController
from diet_web.services.system import SystemService
from diet_web.services.users import UserProfileService


@dataclass
class ApiServices:
    """Services bound to one visitor's token."""

    auth: AuthService
    foods: FoodService
    recommendations: RecommendationService
    meal_planning: MealPlanningService
    users: UserProfileService
    system: SystemService
    session: SessionController


def build_services(
    api_client: ApiClient,
    token_store: TokenStore,
    notifier: Notifier,
    navigator: Navigator,
) -> ApiServices:
    """Bind the API client to a token store and build the services on top."""
    bound_client = api_client.bind(
        token_store, on_unauthorized=lambda: navigator.push(LOGIN_PATH)
    )
    auth_service = AuthService(api_client=bound_client, token_store=token_store)
    return ApiServices(
        auth=auth_service,
        foods=FoodService(bound_client),
        recommendations=RecommendationService(bound_client),
        meal_planning=MealPlanningService(bound_client),
        users=UserProfileService(bound_client),
        system=SystemService(bound_client),
        session=SessionController(
            auth_service=auth_service, notifier=notifier, navigator=navigator
        ),
    )


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    api_client: ApiClient
    close_resources: Callable[[], Awaitable[None]]

    def services_for(
        self, token_store: TokenStore, notifier: Notifier, navigator: Navigator
    ) -> ApiServices:
        """Build the services for one visitor."""
        return build_services(self.api_client, token_store, notifier, navigator)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    api_client = HttpxApiClient.create(
        base_url=normalize_base_url(resolved_settings.api_base_url),
        timeout_seconds=resolved_settings.request_timeout_seconds,
    )

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        api_client=api_client,
        close_resources=close_resources,
    )
