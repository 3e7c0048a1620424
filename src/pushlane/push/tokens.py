"""Device token acquisition."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pushlane.errors import TokenAcquisitionError, wrap_collaborator_error
from pushlane.errors.user_messages import TOKEN_PENDING_TEXT
from pushlane.notifications.models import DeviceToken
from pushlane.telemetry.events import TelemetryEventName

if TYPE_CHECKING:
    from pushlane.push.ports import PushMessagingProvider
    from pushlane.telemetry.emitter import TelemetryEmitter

logger = logging.getLogger(__name__)


class TokenManager:
    """Holds the current device token.

    A new token replaces the old one without notifying anybody. Token
    rotation pushed by the remote service is not observed.
    """

    def __init__(self, provider: "PushMessagingProvider", emitter: "TelemetryEmitter") -> None:
        self._provider = provider
        self._emitter = emitter
        self._current: Optional[DeviceToken] = None

    @property
    def current(self) -> Optional[DeviceToken]:
        return self._current

    @property
    def display_text(self) -> str:
        """Token value, or the placeholder shown while none is available."""
        return self._current.value if self._current else TOKEN_PENDING_TEXT

    async def acquire(self) -> Optional[DeviceToken]:
        """Fetch a token from the provider and make it current.

        Returns:
            The current token after the attempt; on failure the previous one
            (possibly None)
        """
        try:
            value = await self._provider.get_token()
            if not value:
                raise TokenAcquisitionError("Provider returned an empty token")
        except Exception as exc:
            error = wrap_collaborator_error(TokenAcquisitionError, exc)
            logger.warning(f"Error getting device token: {error}")
            self._emitter.emit(TelemetryEventName.TOKEN_FAILED, error.telemetry_properties())
            return self._current

        self._current = DeviceToken(value)
        logger.debug(f"Device token: {value}")
        logger.info(f"Device token acquired ({self._current.length} chars)")
        self._emitter.emit(TelemetryEventName.TOKEN_RECEIVED, {"token_length": self._current.length})
        return self._current
