"""User-facing notifications and navigation."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol


class NotificationLevel(StrEnum):
    """Visual weight of a notification."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    """A transient message for the user."""

    level: NotificationLevel
    text: str


class Notifier(Protocol):
    """Sink for transient user messages."""

    def notify(self, level: NotificationLevel, text: str) -> None:
        """Show a message to the user."""


class Navigator(Protocol):
    """Moves the visitor to another page."""

    def push(self, path: str) -> None:
        """Navigate to ``path``."""


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that keeps messages until they are rendered."""

    notifications: list[Notification] = field(default_factory=list)

    def notify(self, level: NotificationLevel, text: str) -> None:
        """Queue a message."""
        self.notifications.append(Notification(level=level, text=text))

    def drain(self) -> list[Notification]:
        """Return queued messages and clear the queue."""
        drained = list(self.notifications)
        self.notifications.clear()
        return drained


@dataclass
class RecordingNavigator(Navigator):
    """Navigator that records the requested location."""

    history: list[str] = field(default_factory=list)

    @property
    def location(self) -> str | None:
        """The latest requested path, if any navigation happened."""
        return self.history[-1] if self.history else None

    def push(self, path: str) -> None:
        """Record a navigation."""
        self.history.append(path)
