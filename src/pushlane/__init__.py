"""pushlane: device-side push notification lifecycle controller."""

from pushlane.controller import NotificationController, create_in_memory_controller
from pushlane.notifications.models import (
    DeviceToken,
    InboundMessage,
    LifecycleState,
    NotificationRecord,
    PermissionState,
)

__version__ = "0.1.0"

__all__ = [
    "NotificationController",
    "create_in_memory_controller",
    "DeviceToken",
    "InboundMessage",
    "LifecycleState",
    "NotificationRecord",
    "PermissionState",
    "__version__",
]
