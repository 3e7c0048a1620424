"""In-memory collaborator adapters.

They record every call for inspection, can be told to fail, and expose
``deliver_*`` / ``open_*`` methods that play the part of the remote push
service. Used by ``pushlane simulate`` and by the test-suite.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
from uuid import uuid4

from pushlane.notifications.models import InboundMessage
from pushlane.push.ports import (
    AlertPresenter,
    AnalyticsBackend,
    AuthorizationResult,
    LocalNotifier,
    MessageHandler,
    OpenedHandler,
    PushMessagingProvider,
    Unsubscribe,
)

logger = logging.getLogger(__name__)

AUTHORIZED = 1
DENIED = 0


def _generate_token() -> str:
    return f"{uuid4().hex}:APA91b{uuid4().hex}{uuid4().hex}"


class InMemoryPushProvider(PushMessagingProvider):
    """Push provider that keeps handlers in memory and delivers on demand."""

    def __init__(
        self,
        *,
        authorization: AuthorizationResult = AUTHORIZED,
        token: Optional[str] = None,
        initial_notification: Optional[InboundMessage] = None,
    ) -> None:
        self.authorization = authorization
        self.token = token or _generate_token()
        self.initial_notification = initial_notification
        self.permission_error: Optional[Exception] = None
        self.token_error: Optional[Exception] = None

        self.permission_requests: List[Dict[str, bool]] = []
        self.token_requests = 0
        self.initial_notification_queries = 0

        self._foreground_handlers: List[MessageHandler] = []
        self._background_handler: Optional[MessageHandler] = None
        self._opened_handlers: List[OpenedHandler] = []

    def configure(
        self,
        *,
        authorization: Optional[AuthorizationResult] = None,
        permission_error: Optional[Exception] = None,
        token_error: Optional[Exception] = None,
    ) -> None:
        """Configure the fake provider behavior for testing.

        Only the arguments given are changed; use :meth:`clear_failures` to
        make the provider succeed again.
        """
        if authorization is not None:
            self.authorization = authorization
        if permission_error is not None:
            self.permission_error = permission_error
        if token_error is not None:
            self.token_error = token_error

    def clear_failures(self) -> None:
        self.permission_error = None
        self.token_error = None

    # ------------------------------------------------------------------
    # PushMessagingProvider
    # ------------------------------------------------------------------

    async def request_permission(self, options: Mapping[str, bool]) -> AuthorizationResult:
        self.permission_requests.append(dict(options))
        await asyncio.sleep(0)
        if self.permission_error is not None:
            raise self.permission_error
        return self.authorization

    async def get_token(self) -> str:
        self.token_requests += 1
        await asyncio.sleep(0)
        if self.token_error is not None:
            raise self.token_error
        return self.token

    def on_message(self, handler: MessageHandler) -> Unsubscribe:
        self._foreground_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._foreground_handlers:
                self._foreground_handlers.remove(handler)

        return unsubscribe

    def set_background_message_handler(self, handler: MessageHandler) -> None:
        self._background_handler = handler

    def on_notification_opened_app(self, handler: OpenedHandler) -> None:
        self._opened_handlers.append(handler)

    async def get_initial_notification(self) -> Optional[InboundMessage]:
        self.initial_notification_queries += 1
        await asyncio.sleep(0)
        return self.initial_notification

    # ------------------------------------------------------------------
    # Remote side
    # ------------------------------------------------------------------

    @property
    def foreground_subscriber_count(self) -> int:
        return len(self._foreground_handlers)

    @property
    def has_background_handler(self) -> bool:
        return self._background_handler is not None

    async def deliver_foreground(self, message: InboundMessage) -> None:
        for handler in list(self._foreground_handlers):
            await handler(message)

    async def deliver_background(self, message: InboundMessage) -> None:
        if self._background_handler is None:
            logger.debug("Background message dropped: no handler registered")
            return
        await self._background_handler(message)

    async def open_from_background(self, message: Optional[InboundMessage]) -> None:
        for handler in list(self._opened_handlers):
            await handler(message)


class InMemoryLocalNotifier(LocalNotifier):
    """Local renderer that records channels and queued notifications.

    Like the platforms that require channels, a notification addressed to an
    undeclared channel is dropped silently rather than raising.
    """

    def __init__(self, *, requires_channels: bool = True) -> None:
        self.requires_channels = requires_channels
        self.channels: Dict[str, Dict[str, Any]] = {}
        self.create_channel_calls = 0
        self.notifications: List[Dict[str, Any]] = []
        self.dropped: List[Dict[str, Any]] = []
        self.handlers: Dict[str, Any] = {}
        self.should_succeed = True
        self.failure_reason = "Local notification failed"
        self.channel_error: Optional[Exception] = None

    def configure(self, handlers: Dict[str, Any]) -> None:
        self.handlers = dict(handlers)

    def fail_rendering(self, failure_reason: str = "Local notification failed") -> None:
        """Make every following ``local_notification`` call raise."""
        self.should_succeed = False
        self.failure_reason = failure_reason

    def create_channel(
        self, config: Dict[str, Any], callback: Optional[Callable[[bool], None]] = None
    ) -> None:
        self.create_channel_calls += 1
        if self.channel_error is not None:
            raise self.channel_error
        channel_id = config["channelId"]
        created = channel_id not in self.channels
        if created:
            self.channels[channel_id] = dict(config)
        if callback is not None:
            callback(created)

    def local_notification(self, payload: Dict[str, Any]) -> None:
        if not self.should_succeed:
            raise RuntimeError(self.failure_reason)
        if self.requires_channels and payload.get("channelId") not in self.channels:
            self.dropped.append(dict(payload))
            return
        self.notifications.append(dict(payload))


class RecordingAnalyticsBackend(AnalyticsBackend):
    """Analytics backend that records events in memory for test assertions."""

    def __init__(self, *, delay: float = 0.0) -> None:
        self.delay = delay
        self.events: List[Tuple[str, Dict[str, Any]]] = []
        self.user_properties: Dict[str, Any] = {}
        self.screen_views: List[Dict[str, Any]] = []
        self.app_opens = 0
        self.should_succeed = True
        self.failure_reason = "Analytics transport failed"

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Analytics transport failed",
        delay: Optional[float] = None,
    ) -> None:
        """Configure the fake backend behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        if delay is not None:
            self.delay = delay

    async def _transmit(self) -> None:
        await asyncio.sleep(self.delay)
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)

    async def log_event(self, name: str, params: Dict[str, Any]) -> None:
        await self._transmit()
        self.events.append((name, dict(params)))

    async def set_user_property(self, key: str, value: Any) -> None:
        await self._transmit()
        self.user_properties[key] = value

    async def log_screen_view(self, params: Dict[str, Any]) -> None:
        await self._transmit()
        self.screen_views.append(dict(params))

    async def log_app_open(self) -> None:
        await self._transmit()
        self.app_opens += 1

    def named(self, name: str) -> List[Dict[str, Any]]:
        """Properties of every delivered event called ``name``."""
        return [params for event_name, params in self.events if event_name == name]


class RecordingAlertPresenter(AlertPresenter):
    """Alert surface that records alerts instead of showing them."""

    def __init__(self) -> None:
        self.alerts: List[Tuple[str, str]] = []
        self.should_succeed = True

    def alert(self, title: str, message: str) -> None:
        if not self.should_succeed:
            raise RuntimeError("Alert could not be shown")
        self.alerts.append((title, message))
