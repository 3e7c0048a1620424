"""One-shot notification permission negotiation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Union

from pushlane.configuration.settings import PermissionSettings
from pushlane.errors import PermissionRequestError, wrap_collaborator_error
from pushlane.notifications.models import PermissionState
from pushlane.telemetry.events import TelemetryEventName

if TYPE_CHECKING:
    from pushlane.push.ports import PushMessagingProvider
    from pushlane.telemetry.emitter import TelemetryEmitter

logger = logging.getLogger(__name__)


# Platform authorization codes and their string spellings.
_AUTHORIZATION_MAP: Dict[Union[int, str], PermissionState] = {
    -1: PermissionState.UNDETERMINED,
    0: PermissionState.DENIED,
    1: PermissionState.AUTHORIZED,
    2: PermissionState.PROVISIONAL,
    3: PermissionState.PROVISIONAL,  # ephemeral (app clips)
    "not_determined": PermissionState.UNDETERMINED,
    "denied": PermissionState.DENIED,
    "authorized": PermissionState.AUTHORIZED,
    "provisional": PermissionState.PROVISIONAL,
    "ephemeral": PermissionState.PROVISIONAL,
}


def map_authorization_status(result: object) -> PermissionState:
    """Translate a platform authorization result; unknown values are DENIED."""
    if isinstance(result, PermissionState):
        return result
    if isinstance(result, bool):
        return PermissionState.AUTHORIZED if result else PermissionState.DENIED
    key = result.strip().lower() if isinstance(result, str) else result
    try:
        return _AUTHORIZATION_MAP.get(key, PermissionState.DENIED)  # type: ignore[arg-type]
    except TypeError:
        return PermissionState.DENIED


class PermissionNegotiator:
    """Requests notification permission exactly once per process.

    The resolved state never changes afterwards; there is no re-request flow.
    """

    def __init__(
        self,
        provider: "PushMessagingProvider",
        emitter: "TelemetryEmitter",
        settings: Optional[PermissionSettings] = None,
    ) -> None:
        self._provider = provider
        self._emitter = emitter
        self._settings = settings or PermissionSettings()
        self._state = PermissionState.UNDETERMINED
        self._resolved = False

    @property
    def state(self) -> PermissionState:
        return self._state

    @property
    def is_enabled(self) -> bool:
        return self._state.is_enabled

    async def request_permission(self) -> PermissionState:
        """Ask the platform once and return the resulting state."""
        if self._resolved:
            return self._state
        self._resolved = True

        try:
            result = await self._provider.request_permission(self._settings.as_options())
        except Exception as exc:
            error = wrap_collaborator_error(PermissionRequestError, exc)
            logger.warning(f"Permission request failed: {error}")
            self._state = PermissionState.DENIED
            self._emitter.emit(
                TelemetryEventName.PERMISSION_REQUEST_FAILED, error.telemetry_properties()
            )
            return self._state

        self._state = map_authorization_status(result)
        logger.info(f"Authorization status: {self._state.value} (platform result {result!r})")
        self._emitter.emit(TelemetryEventName.PERMISSION_RESOLVED, {"status": self._state})
        return self._state
