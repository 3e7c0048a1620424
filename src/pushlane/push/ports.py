"""Abstract interfaces for the external collaborators.

The controller only consumes these. Platform bindings (a mobile push SDK, an
OS notification center, an analytics SDK) implement them; the in-memory
adapters in :mod:`pushlane.push.memory` implement them for simulation and
tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from pushlane.notifications.models import InboundMessage

MessageHandler = Callable[[InboundMessage], Awaitable[None]]
OpenedHandler = Callable[[Optional[InboundMessage]], Awaitable[None]]
Unsubscribe = Callable[[], None]

# Raw platform authorization result, e.g. 1 or "authorized".
AuthorizationResult = Union[int, str]


class PushMessagingProvider(ABC):
    """Remote push delivery service: identity, permission and inbound events."""

    @abstractmethod
    async def request_permission(self, options: Mapping[str, bool]) -> AuthorizationResult:
        """Ask the host platform for notification permission."""
        ...

    @abstractmethod
    async def get_token(self) -> str:
        """Return the device delivery token."""
        ...

    @abstractmethod
    def on_message(self, handler: MessageHandler) -> Unsubscribe:
        """Register the foreground delivery handler.

        Returns:
            Callable that removes the handler
        """
        ...

    @abstractmethod
    def set_background_message_handler(self, handler: MessageHandler) -> None:
        """Register the background delivery handler for the process lifetime."""
        ...

    @abstractmethod
    def on_notification_opened_app(self, handler: OpenedHandler) -> None:
        """Register the handler fired when a notification tap resumes the app."""
        ...

    @abstractmethod
    async def get_initial_notification(self) -> Optional[InboundMessage]:
        """Return the message that launched the app from terminated state, if any."""
        ...


class LocalNotifier(ABC):
    """Local notification renderer of the host platform."""

    @abstractmethod
    def create_channel(
        self, config: Dict[str, Any], callback: Optional[Callable[[bool], None]] = None
    ) -> None:
        """Declare a rendering channel; ``callback`` receives whether it was created."""
        ...

    @abstractmethod
    def local_notification(self, payload: Dict[str, Any]) -> None:
        """Queue a local notification for display."""
        ...

    @abstractmethod
    def configure(self, handlers: Dict[str, Any]) -> None:
        """Install renderer callbacks (registration, tap, action, error)."""
        ...


class AnalyticsBackend(ABC):
    """Telemetry collector. No return value is relied upon."""

    @abstractmethod
    async def log_event(self, name: str, params: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def set_user_property(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    async def log_screen_view(self, params: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def log_app_open(self) -> None:
        ...


class AlertPresenter(ABC):
    """Interactive, user-dismissable alert surface."""

    @abstractmethod
    def alert(self, title: str, message: str) -> None:
        ...
