"""Turns inbound push messages into local notifications."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from pushlane.configuration.settings import RenderingSettings
from pushlane.errors import RenderError, wrap_collaborator_error
from pushlane.notifications.channels import ChannelRegistrar
from pushlane.notifications.models import InboundMessage
from pushlane.telemetry.events import TelemetryEventName

if TYPE_CHECKING:
    from pushlane.push.ports import LocalNotifier
    from pushlane.telemetry.emitter import TelemetryEmitter

logger = logging.getLogger(__name__)


class NotificationRenderer:
    """Queues local notifications on the registered channel.

    ``render`` never raises: a renderer failure is logged and reported as a
    ``notification_render_failed`` telemetry event.
    """

    def __init__(
        self,
        notifier: "LocalNotifier",
        registrar: ChannelRegistrar,
        emitter: "TelemetryEmitter",
        settings: Optional[RenderingSettings] = None,
    ) -> None:
        self._notifier = notifier
        self._registrar = registrar
        self._emitter = emitter
        self._settings = settings or RenderingSettings()

    def display_title(self, message: InboundMessage) -> str:
        return message.title or self._settings.default_title

    def display_body(self, message: InboundMessage) -> str:
        return message.body or self._settings.default_body

    def build_payload(self, message: InboundMessage) -> Dict[str, Any]:
        """Local notifier payload for ``message``."""
        return {
            "channelId": self._registrar.channel_id,
            "title": self.display_title(message),
            "message": self.display_body(message),
            "playSound": True,
            "soundName": self._registrar.config.sound_name,
            "importance": "max",
            "priority": "max",
            "vibrate": True,
            "vibration": self._settings.vibration_ms,
            "actions": list(self._settings.actions),
            "invokeApp": True,
            "userInfo": dict(message.data),
        }

    def render(self, message: InboundMessage) -> None:
        """Queue ``message`` for display and report it.

        Args:
            message: The inbound push message
        """
        payload = self.build_payload(message)
        self._queue(payload)
        self._emitter.emit(
            TelemetryEventName.NOTIFICATION_RECEIVED,
            {
                "title": payload["title"],
                "body_length": len(payload["message"]),
                "has_payload": message.has_payload,
            },
        )

    def render_test(self) -> None:
        """Issue the fixed self-test notification."""
        payload = {
            "channelId": self._registrar.channel_id,
            "title": self._settings.test_title,
            "message": self._settings.test_body,
            "playSound": True,
            "soundName": self._registrar.config.sound_name,
            "importance": "max",
            "priority": "max",
        }
        self._queue(payload)
        self._emitter.emit(TelemetryEventName.TEST_LOCAL_NOTIFICATION)

    def _queue(self, payload: Dict[str, Any]) -> bool:
        try:
            if not self._registrar.is_registered:
                logger.warning(
                    f"Rendering before channel {self._registrar.channel_id} was registered; registering now"
                )
                self._registrar.register_default_channel()
            self._notifier.local_notification(payload)
        except Exception as exc:
            error = wrap_collaborator_error(RenderError, exc)
            logger.error(f"Failed to render notification '{payload['title'][:50]}': {error}")
            self._emitter.emit(
                TelemetryEventName.NOTIFICATION_RENDER_FAILED, error.telemetry_properties()
            )
            return False

        logger.debug(f"Queued local notification: {payload['title'][:50]}")
        return True
