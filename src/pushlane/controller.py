"""Notification lifecycle controller.

Owns the process-wide state (current device token, foreground notification
records, one-shot startup guard) and exposes it only through its operations.
Startup order:

1. register the local channel (must precede any rendering)
2. configure the local renderer callbacks and log the app open
3. install the background / opened handlers and the foreground subscription
4. concurrently: permission -> token, and the terminated-state query
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

from pushlane.configuration.settings import Settings
from pushlane.errors import HandlerRegistrationError, wrap_collaborator_error
from pushlane.notifications.channels import ChannelRegistrar
from pushlane.notifications.models import (
    DeviceToken,
    NotificationLog,
    NotificationRecord,
    PermissionState,
)
from pushlane.notifications.renderer import NotificationRenderer
from pushlane.push.permission import PermissionNegotiator
from pushlane.push.ports import (
    AlertPresenter,
    AnalyticsBackend,
    LocalNotifier,
    PushMessagingProvider,
)
from pushlane.push.router import LifecycleRouter, Subscription
from pushlane.push.tokens import TokenManager
from pushlane.telemetry.emitter import TelemetryEmitter
from pushlane.telemetry.events import TelemetryEventName

logger = logging.getLogger(__name__)


class NotificationController:
    """Single owner of the notification pipeline for one application process.

    Usage:
        controller = NotificationController(provider, notifier, analytics, alerts)
        await controller.start()
        ...
        controller.clear_notifications()
        await controller.stop()
    """

    def __init__(
        self,
        provider: PushMessagingProvider,
        notifier: LocalNotifier,
        analytics: AnalyticsBackend,
        alerts: AlertPresenter,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.provider = provider
        self.notifier = notifier
        self.analytics = analytics
        self.alerts = alerts

        self.emitter = TelemetryEmitter(
            analytics,
            app_version=self.settings.telemetry.app_version,
            history_size=self.settings.telemetry.history_size,
        )
        self._log = NotificationLog()
        self.registrar = ChannelRegistrar(notifier, self.settings.channel, self.emitter)
        self.renderer = NotificationRenderer(
            notifier, self.registrar, self.emitter, self.settings.rendering
        )
        self.negotiator = PermissionNegotiator(provider, self.emitter, self.settings.permission)
        self.tokens = TokenManager(provider, self.emitter)
        self.router = LifecycleRouter(
            provider,
            self.renderer,
            alerts,
            self.emitter,
            self._log,
            self.settings.rendering,
        )

        self._started = False
        self._subscription: Optional[Subscription] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Run startup once; later calls return immediately."""
        if self._started:
            logger.debug("Controller already started")
            return
        self._started = True

        self.registrar.register_default_channel()
        self._configure_renderer()
        self.emitter.log_app_open()
        self._subscription = self.router.subscribe()

        await asyncio.gather(
            self._negotiate_and_acquire(),
            self.router.check_initial_notification(),
        )
        logger.info(
            f"Notification controller started (permission={self.permission_state.value}, "
            f"token={'yes' if self.token else 'no'})"
        )

    async def stop(self) -> None:
        """Revoke the foreground subscription and flush telemetry."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
        await self.emitter.drain()

    async def _negotiate_and_acquire(self) -> None:
        state = await self.negotiator.request_permission()
        if state.is_enabled:
            await self.tokens.acquire()
        else:
            logger.info(f"Notifications not enabled ({state.value}); skipping token fetch")

    def _configure_renderer(self) -> None:
        try:
            self.notifier.configure(self._renderer_handlers())
        except Exception as exc:
            error = wrap_collaborator_error(HandlerRegistrationError, exc)
            logger.error(f"Local renderer configuration failed: {error}")
            self.emitter.emit(
                TelemetryEventName.HANDLER_REGISTRATION_FAILED,
                {"handler": "local_renderer", **error.telemetry_properties()},
            )

    def _renderer_handlers(self) -> Dict[str, Any]:
        return {
            "on_register": lambda token: logger.debug(f"Local renderer registered: {token}"),
            "on_notification": lambda notification: logger.info(
                f"Local notification: {notification}"
            ),
            "on_action": lambda notification: logger.info(
                f"Local notification action: {notification.get('action')}"
            ),
            "on_registration_error": lambda err: logger.error(
                f"Local renderer registration error: {err}"
            ),
            "permissions": {"alert": True, "badge": True, "sound": True},
            "pop_initial_notification": True,
            # Permission goes through PermissionNegotiator, not the renderer.
            "request_permissions": False,
        }

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def notifications(self) -> Tuple[NotificationRecord, ...]:
        return self._log.snapshot()

    @property
    def token(self) -> Optional[DeviceToken]:
        return self.tokens.current

    @property
    def token_display(self) -> str:
        return self.tokens.display_text

    @property
    def permission_state(self) -> PermissionState:
        return self.negotiator.state

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------

    def clear_notifications(self) -> int:
        """Drop every foreground record.

        Returns:
            Number of records cleared
        """
        count = self._log.clear()
        logger.info(f"Cleared {count} notifications")
        self.emitter.emit(TelemetryEventName.NOTIFICATIONS_CLEARED, {"cleared_count": count})
        return count

    def copy_token(self) -> Optional[str]:
        """Write the token to the log for manual copying, if there is one."""
        token = self.tokens.current
        if token is None:
            return None
        logger.info("=== COPY THIS TOKEN ===")
        logger.info(token.value)
        logger.info("=======================")
        self.emitter.emit(TelemetryEventName.TOKEN_COPIED)
        return token.value

    def send_test_notification(self) -> None:
        self.renderer.render_test()


def create_in_memory_controller(
    settings: Optional[Settings] = None, **provider_options: Any
) -> NotificationController:
    """Controller wired to the in-memory adapters.

    Args:
        settings: Settings to use (defaults when omitted)
        **provider_options: Passed to :class:`InMemoryPushProvider`
    """
    from pushlane.push.memory import (
        InMemoryLocalNotifier,
        InMemoryPushProvider,
        RecordingAlertPresenter,
        RecordingAnalyticsBackend,
    )

    return NotificationController(
        InMemoryPushProvider(**provider_options),
        InMemoryLocalNotifier(),
        RecordingAnalyticsBackend(),
        RecordingAlertPresenter(),
        settings=settings,
    )
