"""Route protection table and navigation rules."""

from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import quote, urlsplit

HOME_PATH = "/"
LOGIN_PATH = "/login"
REGISTER_PATH = "/register"

ACCESS_DENIED_MESSAGE = "Access denied. You do not have admin permission."


class RouteAccess(StrEnum):
    """Who may open a page."""

    PUBLIC = "public"
    PROTECTED = "protected"
    ADMIN = "admin"


@dataclass(frozen=True)
class RouteTable:
    """Static classification of path prefixes."""

    protected_prefixes: tuple[str, ...]
    admin_prefixes: tuple[str, ...]
    auth_pages: tuple[str, ...] = (LOGIN_PATH, REGISTER_PATH)

    def classify(self, path: str) -> RouteAccess:
        """Return the access class of a path; the first matching class wins."""
        if any(path.startswith(prefix) for prefix in self.protected_prefixes):
            return RouteAccess.PROTECTED
        if any(path.startswith(prefix) for prefix in self.admin_prefixes):
            return RouteAccess.ADMIN
        return RouteAccess.PUBLIC

    def is_auth_page(self, path: str) -> bool:
        """Whether the path is the login or register form."""
        return path in self.auth_pages


DEFAULT_ROUTE_TABLE = RouteTable(
    protected_prefixes=("/recommendations", "/profile", "/meal-planning", "/favorites"),
    admin_prefixes=("/admin",),
)


@dataclass(frozen=True)
class NavigationDecision:
    """A redirect produced by route protection."""

    redirect_to: str
    notification: str | None = None


def login_redirect(path: str) -> str:
    """Build the login URL that returns the visitor to ``path`` afterwards."""
    encoded = quote(path, safe="!'()*")
    return f"{LOGIN_PATH}?redirect={encoded}"


def decide_navigation(
    path: str,
    *,
    authenticated: bool,
    admin: bool,
    table: RouteTable = DEFAULT_ROUTE_TABLE,
) -> NavigationDecision | None:
    """Return the redirect a visit to ``path`` requires, if any."""
    access = table.classify(path)
    if access is RouteAccess.PROTECTED and not authenticated:
        return NavigationDecision(redirect_to=login_redirect(path))
    if access is RouteAccess.ADMIN and not admin:
        return NavigationDecision(
            redirect_to=HOME_PATH, notification=ACCESS_DENIED_MESSAGE
        )
    if authenticated and table.is_auth_page(path):
        return NavigationDecision(redirect_to=HOME_PATH)
    return None


def safe_redirect_target(raw: str | None) -> str:
    """Return ``raw`` if it is a local path, else the home path."""
    if not raw:
        return HOME_PATH
    candidate = raw.strip()
    if not candidate.startswith("/") or candidate.startswith("//"):
        return HOME_PATH
    parts = urlsplit(candidate)
    if parts.scheme or parts.netloc or "\\" in candidate:
        return HOME_PATH
    return candidate
