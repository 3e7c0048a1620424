"""Telemetry event names and the enriched event record."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

Scalar = Union[str, int, float, bool]


class TelemetryEventName(str, Enum):
    """Every event name the controller emits."""

    # Startup
    APP_OPEN = "app_open"
    PERMISSION_RESOLVED = "permission_resolved"
    PERMISSION_REQUEST_FAILED = "permission_request_failed"

    # Device token
    TOKEN_RECEIVED = "fcm_token_received"
    TOKEN_FAILED = "fcm_token_failed"
    TOKEN_COPIED = "fcm_token_copied"

    # Rendering
    NOTIFICATION_RECEIVED = "notification_received"
    NOTIFICATION_RENDER_FAILED = "notification_render_failed"
    TEST_LOCAL_NOTIFICATION = "test_local_notification"
    CHANNEL_REGISTRATION_FAILED = "channel_registration_failed"
    ALERT_FAILED = "alert_failed"

    # Lifecycle routing
    FOREGROUND_RECEIVED = "notification_foreground_received"
    BACKGROUND_RECEIVED = "notification_background_received"
    NOTIFICATION_OPENED = "notification_opened"
    INITIAL_NOTIFICATION_FAILED = "initial_notification_failed"
    HANDLER_REGISTRATION_FAILED = "handler_registration_failed"

    # User interaction
    NOTIFICATIONS_CLEARED = "notifications_cleared"


class OpenOrigin(str, Enum):
    """Value of the ``from`` property on ``notification_opened``."""

    BACKGROUND = "background"
    QUIT = "quit"


def to_scalar(value: Any) -> Scalar:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def flatten_properties(properties: Optional[Mapping[str, Any]]) -> Dict[str, Scalar]:
    """Drop ``None`` values and coerce everything else to a scalar."""
    if not properties:
        return {}
    return {str(k): to_scalar(v) for k, v in properties.items() if v is not None}


@dataclass(frozen=True)
class TelemetryEvent:
    """A named event with flat scalar properties.

    ``properties`` already includes the ``captured_at`` and ``app_version``
    enrichment when built through :meth:`enriched`.
    """

    name: str
    properties: Dict[str, Scalar] = field(default_factory=dict)
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def enriched(
        cls,
        name: Union[str, TelemetryEventName],
        properties: Optional[Mapping[str, Any]],
        *,
        app_version: str,
    ) -> "TelemetryEvent":
        name = name.value if isinstance(name, TelemetryEventName) else str(name)
        captured_at = datetime.now(timezone.utc)
        payload = flatten_properties(properties)
        payload["captured_at"] = captured_at.isoformat()
        payload["app_version"] = app_version
        return cls(name=name, properties=payload, captured_at=captured_at)
