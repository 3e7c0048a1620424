"""Centralized error definitions for pushlane.

Collaborator failures (push provider, local renderer, analytics backend) are
caught at the boundary of the component that made the call and wrapped in one
of these errors for logging and telemetry. None of them is re-raised past the
lifecycle router.

Usage:
    from pushlane.errors import TokenAcquisitionError, wrap_collaborator_error

    try:
        token = await provider.get_token()
    except Exception as exc:
        error = wrap_collaborator_error(TokenAcquisitionError, exc)
        emitter.emit("fcm_token_failed", error.telemetry_properties())
"""

from __future__ import annotations

from typing import Any, Dict, Type, TypeVar

from pushlane.errors.user_messages import (
    format_error_for_user,
    get_recovery_suggestion,
    get_user_message,
)


# =============================================================================
# Base Error
# =============================================================================


class PushlaneError(Exception):
    """Base exception for all pushlane errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "PUSHLANE_ERROR"
    default_message: str = "An unexpected error occurred"
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message or self.default_message
        self._user_message = user_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Get user-friendly message."""
        if self._user_message:
            return self._user_message
        return get_user_message(self)

    @property
    def recovery_suggestion(self) -> str:
        """Get recovery suggestion."""
        return get_recovery_suggestion(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "recoverable": self.recoverable,
            "details": self.details,
        }

    def telemetry_properties(self) -> Dict[str, Any]:
        """Flat, non-sensitive properties describing this failure."""
        return {
            "error_code": self.code,
            "error_type": self.details.get("cause_type", type(self).__name__),
        }


# =============================================================================
# Push Pipeline Errors
# =============================================================================


class PermissionRequestError(PushlaneError):
    """The platform permission request raised."""

    code = "PERMISSION_REQUEST_ERROR"
    default_message = "Notification permission request failed"
    recoverable = False


class TokenAcquisitionError(PushlaneError):
    """The push identity provider failed to issue a device token."""

    code = "TOKEN_ACQUISITION_ERROR"
    default_message = "Device token could not be acquired"


class TelemetryDeliveryError(PushlaneError):
    """The analytics backend rejected or failed to receive an event."""

    code = "TELEMETRY_DELIVERY_ERROR"
    default_message = "Telemetry event could not be delivered"


class RenderError(PushlaneError):
    """The local notification renderer raised while queuing a notification."""

    code = "RENDER_ERROR"
    default_message = "Local notification could not be rendered"


class ChannelRegistrationError(PushlaneError):
    """The local renderer refused to declare the notification channel."""

    code = "CHANNEL_REGISTRATION_ERROR"
    default_message = "Notification channel could not be registered"


class HandlerRegistrationError(PushlaneError):
    """A collaborator raised while a callback was being installed."""

    code = "HANDLER_REGISTRATION_ERROR"
    default_message = "Notification handler could not be registered"


class AlertError(PushlaneError):
    """The interactive alert could not be shown."""

    code = "ALERT_ERROR"
    default_message = "Alert could not be shown"


class InitialNotificationError(PushlaneError):
    """The launch notification query raised."""

    code = "INITIAL_NOTIFICATION_ERROR"
    default_message = "Launch notification could not be read"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PushlaneError):
    """Settings file is missing or invalid."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"


# =============================================================================
# Helpers
# =============================================================================


E = TypeVar("E", bound=PushlaneError)


def wrap_collaborator_error(error_cls: Type[E], exc: BaseException, **details: Any) -> E:
    """Wrap an exception raised by an external collaborator.

    The original exception is chained as ``__cause__`` and its type name is
    kept in ``details`` so telemetry can report it without the message text.
    """
    if isinstance(exc, error_cls):
        return exc
    error = error_cls(
        f"{error_cls.default_message}: {exc}",
        details={"cause_type": type(exc).__name__, **details},
    )
    error.__cause__ = exc
    return error


def handle_error(error: Exception) -> str:
    """Return a user-friendly message with recovery suggestion."""
    return format_error_for_user(error)


def is_recoverable(error: Exception) -> bool:
    if isinstance(error, PushlaneError):
        return error.recoverable
    return False


__all__ = [
    "PushlaneError",
    "PermissionRequestError",
    "TokenAcquisitionError",
    "TelemetryDeliveryError",
    "RenderError",
    "ChannelRegistrationError",
    "HandlerRegistrationError",
    "AlertError",
    "InitialNotificationError",
    "ConfigurationError",
    "wrap_collaborator_error",
    "handle_error",
    "is_recoverable",
]
