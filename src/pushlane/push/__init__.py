"""Push delivery: permission, device token and lifecycle routing."""

from pushlane.push.permission import PermissionNegotiator, map_authorization_status
from pushlane.push.ports import (
    AlertPresenter,
    AnalyticsBackend,
    LocalNotifier,
    PushMessagingProvider,
)
from pushlane.push.router import LifecycleRouter, Subscription
from pushlane.push.tokens import TokenManager

__all__ = [
    "PermissionNegotiator",
    "map_authorization_status",
    "AlertPresenter",
    "AnalyticsBackend",
    "LocalNotifier",
    "PushMessagingProvider",
    "LifecycleRouter",
    "Subscription",
    "TokenManager",
]
