"""Best-effort telemetry for the notification lifecycle."""

from pushlane.telemetry.emitter import TelemetryEmitter
from pushlane.telemetry.events import (
    OpenOrigin,
    TelemetryEvent,
    TelemetryEventName,
    flatten_properties,
)

__all__ = [
    "TelemetryEmitter",
    "OpenOrigin",
    "TelemetryEvent",
    "TelemetryEventName",
    "flatten_properties",
]
