"""Lifecycle-aware dispatch of inbound push events.

The host process decides which lifecycle state the application is in; the
router only has to do the right thing for an event arriving in each of them:

    FOREGROUND  on_message            -> record + render + alert + telemetry
    BACKGROUND  background handler    -> render + telemetry
    BACKGROUND  opened from a tap     -> telemetry (origin=background)
    TERMINATED  initial notification  -> telemetry (origin=quit), queried once

Only foreground deliveries are recorded: the record list holds what the user
saw live in this session. Every collaborator call is guarded so one failing
action never prevents the others for the same event.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Type

from pushlane.configuration.settings import RenderingSettings
from pushlane.errors import (
    AlertError,
    HandlerRegistrationError,
    InitialNotificationError,
    PushlaneError,
    wrap_collaborator_error,
)
from pushlane.notifications.models import (
    InboundMessage,
    LifecycleState,
    NotificationLog,
    NotificationRecord,
)
from pushlane.notifications.renderer import NotificationRenderer
from pushlane.telemetry.events import OpenOrigin, TelemetryEventName

if TYPE_CHECKING:
    from pushlane.push.ports import AlertPresenter, PushMessagingProvider, Unsubscribe
    from pushlane.telemetry.emitter import TelemetryEmitter

logger = logging.getLogger(__name__)


class Subscription:
    """Revocable handle for the foreground delivery subscription."""

    def __init__(self, unsubscribe: "Unsubscribe") -> None:
        self._unsubscribe: Optional["Unsubscribe"] = unsubscribe

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def unsubscribe(self) -> None:
        """Stop foreground processing. Safe to call more than once."""
        if self._unsubscribe is None:
            return
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        try:
            unsubscribe()
        except Exception as e:
            logger.error(f"Provider unsubscribe failed: {e}")


class LifecycleRouter:
    """Dispatches push events to the renderer, the record log and telemetry.

    Usage:
        router = LifecycleRouter(provider, renderer, alerts, emitter, log)
        subscription = router.subscribe()
        await router.check_initial_notification()
        ...
        subscription.unsubscribe()
    """

    def __init__(
        self,
        provider: "PushMessagingProvider",
        renderer: NotificationRenderer,
        alerts: "AlertPresenter",
        emitter: "TelemetryEmitter",
        log: NotificationLog,
        settings: Optional[RenderingSettings] = None,
    ) -> None:
        self._provider = provider
        self._renderer = renderer
        self._alerts = alerts
        self._emitter = emitter
        self._log = log
        self._settings = settings or RenderingSettings()

        self._subscription: Optional[Subscription] = None
        self._lifetime_handlers_registered = False
        self._initial_checked = False
        self.handled_counts: Dict[LifecycleState, int] = {
            LifecycleState.FOREGROUND: 0,
            LifecycleState.BACKGROUND: 0,
        }
        self.opened_counts: Dict[OpenOrigin, int] = {origin: 0 for origin in OpenOrigin}

    @property
    def foreground_active(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def subscribe(self) -> Optional[Subscription]:
        """Register every event source.

        Background and opened-app handlers are installed once for the
        process lifetime. The returned handle only revokes the foreground
        path. Calling again while subscribed returns the existing handle.
        A provider that refuses a registration is reported, and the
        foreground path yields None until a later call succeeds.
        """
        if not self._lifetime_handlers_registered:
            self._lifetime_handlers_registered = True
            self._register("background", self._provider.set_background_message_handler, self.handle_background)
            self._register("opened", self._provider.on_notification_opened_app, self.handle_opened_app)

        if self.foreground_active:
            return self._subscription

        unsubscribe = self._register("foreground", self._provider.on_message, self.handle_foreground)
        if unsubscribe is None:
            return None
        self._subscription = Subscription(unsubscribe)
        return self._subscription

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def handle_foreground(self, message: InboundMessage) -> Optional[NotificationRecord]:
        """Handle a delivery while the UI is visible.

        All four actions are started in this call, before any suspension.
        """
        if not self.foreground_active:
            logger.debug("Foreground message ignored: subscription revoked")
            return None

        self.handled_counts[LifecycleState.FOREGROUND] += 1
        title = self._renderer.display_title(message)
        body = self._renderer.display_body(message)
        logger.info(f"Foreground notification received: {title[:50]}")

        record = self._log.append(title, body)
        self._attempt("render", self._renderer.render, message)
        self._attempt(
            "alert",
            self._alerts.alert,
            self._settings.alert_title,
            f"{title}: {body}",
            error_cls=AlertError,
            failed_event=TelemetryEventName.ALERT_FAILED,
        )
        self._emitter.emit(
            TelemetryEventName.FOREGROUND_RECEIVED,
            {"title": title, "record_id": record.record_id, "has_payload": message.has_payload},
        )
        return record

    async def handle_background(self, message: InboundMessage) -> None:
        """Handle a delivery while the process runs without visible UI."""
        self.handled_counts[LifecycleState.BACKGROUND] += 1
        logger.info(f"Background notification received: {self._renderer.display_title(message)[:50]}")

        self._attempt("render", self._renderer.render, message)
        self._emitter.emit(
            TelemetryEventName.BACKGROUND_RECEIVED,
            {"title": message.title, "has_payload": message.has_payload},
        )

    async def handle_opened_app(self, message: Optional[InboundMessage]) -> None:
        """Handle the app being resumed by a notification tap."""
        if message is None:
            logger.debug("App opened without an associated notification")
            return

        self.opened_counts[OpenOrigin.BACKGROUND] += 1
        logger.info(f"Background notification opened: {message.title!r}")
        self._emitter.emit(
            TelemetryEventName.NOTIFICATION_OPENED,
            {"from": OpenOrigin.BACKGROUND, "title": message.title},
        )

    async def check_initial_notification(self) -> Optional[InboundMessage]:
        """Ask once whether a notification launched the app from terminated state.

        Re-entry returns None without querying the provider or emitting.
        """
        if self._initial_checked:
            logger.debug("Initial notification already consumed")
            return None
        self._initial_checked = True

        try:
            message = await self._provider.get_initial_notification()
        except Exception as exc:
            error = wrap_collaborator_error(InitialNotificationError, exc)
            logger.warning(f"Initial notification query failed: {error}")
            self._emitter.emit(
                TelemetryEventName.INITIAL_NOTIFICATION_FAILED, error.telemetry_properties()
            )
            return None

        if message is None:
            return None

        self.opened_counts[OpenOrigin.QUIT] += 1
        logger.info(f"Quit state notification opened: {message.title!r}")
        self._emitter.emit(
            TelemetryEventName.NOTIFICATION_OPENED,
            {"from": OpenOrigin.QUIT, "title": message.title},
        )
        return message

    def _register(self, label: str, register: Callable[[Any], Any], handler: Callable[..., Any]) -> Any:
        """Install ``handler``; returns None if the provider raised."""
        try:
            return register(handler)
        except Exception as exc:
            error = wrap_collaborator_error(HandlerRegistrationError, exc)
            logger.error(f"Registering the {label} handler failed: {error}")
            self._emitter.emit(
                TelemetryEventName.HANDLER_REGISTRATION_FAILED,
                {"handler": label, **error.telemetry_properties()},
            )
            return None

    def _attempt(
        self,
        label: str,
        action: Callable[..., None],
        *args: Any,
        error_cls: Type[PushlaneError] = PushlaneError,
        failed_event: Optional[TelemetryEventName] = None,
    ) -> None:
        try:
            action(*args)
        except Exception as exc:
            error = wrap_collaborator_error(error_cls, exc)
            logger.error(f"Router action {label!r} failed: {error}")
            if failed_event is not None:
                self._emitter.emit(failed_event, error.telemetry_properties())
