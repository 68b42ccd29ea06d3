"""Cookie-backed token storage and flash messages."""

import logging
from dataclasses import dataclass

from fastapi import Request, Response
from itsdangerous import BadData, URLSafeSerializer

from diet_web.adapters.token_store import TokenStore
from diet_web.config import Settings
from diet_web.services.notifications import Notification, NotificationLevel

FLASH_COOKIE_NAME = "flash"
FLASH_SALT = "flash-notifications"
MAX_FLASH_ITEMS = 5
MAX_FLASH_TEXT = 300

_logger = logging.getLogger(__name__)


@dataclass
class CookieTokenStore(TokenStore):
    """Token store seeded from the request cookie.

    Changes are written back to the response by ``apply``.
    """

    token: str | None = None
    changed: bool = False

    @classmethod
    def from_request(cls, request: Request, cookie_name: str) -> "CookieTokenStore":
        """Read the token cookie of ``request``."""
        return cls(token=request.cookies.get(cookie_name) or None)

    def get(self) -> str | None:
        """Return the token from the cookie or the latest login."""
        return self.token

    def set(self, token: str) -> None:
        """Remember a new token."""
        self.token = token
        self.changed = True

    def clear(self) -> None:
        """Forget the token."""
        if self.token is not None:
            self.changed = True
        self.token = None

    def apply(self, response: Response, settings: Settings) -> None:
        """Set or delete the token cookie if the token changed."""
        if not self.changed:
            return
        if self.token:
            response.set_cookie(
                settings.token_cookie_name,
                self.token,
                max_age=settings.token_max_age_seconds,
                httponly=True,
                samesite="lax",
                secure=settings.secure_cookies,
            )
        else:
            response.delete_cookie(settings.token_cookie_name)


def _flash_serializer(settings: Settings) -> URLSafeSerializer:
    return URLSafeSerializer(settings.secret_key, salt=FLASH_SALT)


def read_flash(request: Request, settings: Settings) -> list[Notification]:
    """Decode notifications carried over from the previous response.

    Cookies with a bad signature are ignored. At most ``MAX_FLASH_ITEMS``
    notifications are read, each cut to ``MAX_FLASH_TEXT`` characters.
    """
    raw = request.cookies.get(FLASH_COOKIE_NAME)
    if not raw:
        return []
    try:
        items = _flash_serializer(settings).loads(raw)
    except BadData:
        _logger.warning("Ignoring malformed flash cookie")
        return []
    notifications: list[Notification] = []
    for item in items if isinstance(items, list) else []:
        if len(notifications) >= MAX_FLASH_ITEMS:
            break
        if not isinstance(item, dict):
            continue
        try:
            level = NotificationLevel(item.get("level"))
        except ValueError:
            continue
        text = item.get("text")
        if isinstance(text, str):
            notifications.append(
                Notification(level=level, text=text[:MAX_FLASH_TEXT])
            )
    return notifications


def write_flash(
    response: Response, notifications: list[Notification], settings: Settings
) -> None:
    """Carry notifications over to the next page in a signed cookie."""
    if not notifications:
        return
    items = [
        {"level": item.level.value, "text": item.text[:MAX_FLASH_TEXT]}
        for item in notifications[-MAX_FLASH_ITEMS:]
    ]
    response.set_cookie(
        FLASH_COOKIE_NAME,
        _flash_serializer(settings).dumps(items),
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )


def clear_flash(response: Response) -> None:
    """Drop carried-over notifications once shown."""
    response.delete_cookie(FLASH_COOKIE_NAME)
