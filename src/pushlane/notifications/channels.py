"""Registration of the single local rendering channel.

Platforms that require channels drop notifications addressed to an
undeclared channel without any error, so the channel must exist before the
first local notification is issued.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pushlane.configuration.settings import ChannelSettings
from pushlane.errors import ChannelRegistrationError, wrap_collaborator_error
from pushlane.notifications.models import MAX_IMPORTANCE, ChannelConfig
from pushlane.telemetry.events import TelemetryEventName

if TYPE_CHECKING:
    from pushlane.push.ports import LocalNotifier
    from pushlane.telemetry.emitter import TelemetryEmitter

logger = logging.getLogger(__name__)


class ChannelRegistrar:
    """Idempotently declares the default notification channel."""

    def __init__(
        self,
        notifier: "LocalNotifier",
        settings: Optional[ChannelSettings] = None,
        emitter: Optional["TelemetryEmitter"] = None,
    ) -> None:
        settings = settings or ChannelSettings()
        self._notifier = notifier
        self._emitter = emitter
        self._config = ChannelConfig(
            channel_id=settings.channel_id,
            name=settings.name,
            description=settings.description,
            importance=MAX_IMPORTANCE,
            play_sound=settings.play_sound,
            sound_name=settings.sound_name,
            vibrate=settings.vibrate,
        )
        self._registered = False

    @property
    def config(self) -> ChannelConfig:
        return self._config

    @property
    def channel_id(self) -> str:
        return self._config.channel_id

    @property
    def is_registered(self) -> bool:
        return self._registered

    def register_default_channel(self) -> bool:
        """Declare the channel once; later calls are no-ops.

        A failing platform call is logged and reported, and leaves the
        channel unregistered so the next call tries again.

        Returns:
            Whether the channel is registered afterwards
        """
        if self._registered:
            logger.debug(f"Channel {self.channel_id} already registered")
            return True

        try:
            self._notifier.create_channel(self._config.to_platform(), self._on_created)
        except Exception as exc:
            error = wrap_collaborator_error(ChannelRegistrationError, exc)
            logger.error(f"Channel {self.channel_id} registration failed: {error}")
            if self._emitter is not None:
                self._emitter.emit(
                    TelemetryEventName.CHANNEL_REGISTRATION_FAILED,
                    error.telemetry_properties(),
                )
            return False

        self._registered = True
        return True

    def _on_created(self, created: bool) -> None:
        logger.info(f"Channel created: {created} ({self.channel_id})")
