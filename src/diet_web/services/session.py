"""Session state and route guarding for a single visitor.

The controller owns who is logged in. Other code reads ``user`` and the
derived flags; every change goes through ``initialize``, ``login``,
``register``, ``logout`` or ``refresh_user``. Calls are expected one at a
time; overlapping calls (say a logout racing a refresh) are not coordinated.
"""

import logging
from dataclasses import dataclass, field

import httpx

from diet_web.domain.routes import (
    DEFAULT_ROUTE_TABLE,
    HOME_PATH,
    NavigationDecision,
    RouteTable,
    decide_navigation,
)
from diet_web.domain.users import LoginCredentials, RegistrationForm, User
from diet_web.errors import api_error_message, status_code_of
from diet_web.services.auth import AuthService
from diet_web.services.notifications import Navigator, NotificationLevel, Notifier

_logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
PROFILE_REMINDER = "Complete your profile to get more accurate recommendations."
PASSWORD_MISMATCH = "Password confirmation does not match."
LOGGED_OUT = "You have been logged out."


@dataclass
class SessionController:
    """Single source of truth for the current user."""

    auth_service: AuthService
    notifier: Notifier
    navigator: Navigator
    route_table: RouteTable = DEFAULT_ROUTE_TABLE
    _user: User | None = field(default=None, init=False)
    _loading: bool = field(default=True, init=False)
    _initialized: bool = field(default=False, init=False)

    @property
    def user(self) -> User | None:
        """The logged-in user, if any."""
        return self._user

    @property
    def loading(self) -> bool:
        """True until ``initialize`` has finished."""
        return self._loading

    @property
    def is_authenticated(self) -> bool:
        """Whether a user is logged in."""
        return self._user is not None

    @property
    def is_admin(self) -> bool:
        """Whether the logged-in user has the admin role."""
        return self._user is not None and self._user.role == ADMIN_ROLE

    @property
    def has_completed_profile(self) -> bool:
        """Whether name, age, sex, height and weight are all filled in."""
        return self._user is not None and self._user.has_complete_profile

    @property
    def display_name(self) -> str:
        """Name to greet the user with."""
        if self._user is not None and self._user.name:
            return self._user.name
        return "User"

    async def initialize(self) -> None:
        """Restore the session from a stored token.

        Runs once; later calls return immediately.
        """
        if self._initialized:
            _logger.debug("Session already initialized")
            return
        self._initialized = True
        try:
            if self.auth_service.is_authenticated():
                self._user = await self.auth_service.get_profile()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Stored session is no longer valid: %s", exc)
            self.auth_service.logout()
            self._user = None
        finally:
            self._loading = False

    async def login(self, credentials: LoginCredentials) -> bool:
        """Log in; report failures as notifications instead of raising."""
        try:
            result = await self.auth_service.login(credentials)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.info("Login failed: %s", exc)
            self.notifier.notify(NotificationLevel.ERROR, api_error_message(exc))
            return False
        self._user = result.user
        self.notifier.notify(
            NotificationLevel.SUCCESS, f"Welcome, {self.display_name}!"
        )
        self._remind_incomplete_profile()
        return True

    async def register(self, form: RegistrationForm) -> bool:
        """Create an account and log in with it."""
        if not form.passwords_match():
            self.notifier.notify(NotificationLevel.ERROR, PASSWORD_MISMATCH)
            return False
        try:
            result = await self.auth_service.register(form)
        except (httpx.HTTPError, ValueError) as exc:
            _logger.info("Registration failed: %s", exc)
            self.notifier.notify(NotificationLevel.ERROR, api_error_message(exc))
            return False
        self._user = result.user
        self.notifier.notify(
            NotificationLevel.SUCCESS,
            f"Registration successful! Welcome, {self.display_name}!",
        )
        self._remind_incomplete_profile()
        return True

    def logout(self) -> None:
        """End the session and go home."""
        self._user = None
        self.auth_service.logout()
        self.notifier.notify(NotificationLevel.SUCCESS, LOGGED_OUT)
        self.navigator.push(HOME_PATH)

    async def refresh_user(self) -> None:
        """Re-fetch the user; a failure ends the session.

        A 401 has already sent the visitor to the login page, so only the
        session state is dropped in that case.
        """
        try:
            self._user = await self.auth_service.get_profile()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Refreshing user failed, logging out: %s", exc)
            if status_code_of(exc) == httpx.codes.UNAUTHORIZED:
                self._user = None
                self.auth_service.logout()
                self.notifier.notify(NotificationLevel.INFO, LOGGED_OUT)
                return
            self.logout()

    def protect_route(self, path: str) -> NavigationDecision | None:
        """Apply the route rules to ``path`` and navigate if needed.

        Nothing happens while the session is still loading.
        """
        if self._loading:
            return None
        decision = decide_navigation(
            path,
            authenticated=self.is_authenticated,
            admin=self.is_admin,
            table=self.route_table,
        )
        if decision is None:
            return None
        if decision.notification:
            self.notifier.notify(NotificationLevel.ERROR, decision.notification)
        self.navigator.push(decision.redirect_to)
        return decision

    def can_access(self, required_role: str | None = None) -> bool:
        """Whether the user may see something that needs ``required_role``."""
        if self._user is None:
            return False
        if not required_role:
            return True
        return self._user.role in {required_role, ADMIN_ROLE}

    def can_modify(self, resource_user_id: int | None) -> bool:
        """Whether the user may edit or delete a resource owned by another user."""
        if self.is_admin:
            return True
        if self._user is None or not resource_user_id:
            return False
        return self._user.user_id == resource_user_id

    def _remind_incomplete_profile(self) -> None:
        if not self.has_completed_profile:
            self.notifier.notify(NotificationLevel.INFO, PROFILE_REMINDER)
