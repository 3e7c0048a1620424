"""Local notification rendering and the foreground notification log."""

from pushlane.notifications.channels import ChannelRegistrar
from pushlane.notifications.models import (
    ChannelConfig,
    DeviceToken,
    InboundMessage,
    LifecycleState,
    NotificationLog,
    NotificationRecord,
    PermissionState,
)
from pushlane.notifications.renderer import NotificationRenderer

__all__ = [
    "ChannelRegistrar",
    "ChannelConfig",
    "DeviceToken",
    "InboundMessage",
    "LifecycleState",
    "NotificationLog",
    "NotificationRecord",
    "PermissionState",
    "NotificationRenderer",
]
