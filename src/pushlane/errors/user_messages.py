"""User-friendly error messages for pushlane.

Privacy Note:
- Error messages NEVER include device token values
- Notification payload contents are never exposed
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    "PUSHLANE_ERROR": "Something went wrong with notifications.",
    "PERMISSION_REQUEST_ERROR": "We couldn't ask for notification permission.",
    "TOKEN_ACQUISITION_ERROR": "The device token isn't available yet.",
    "TELEMETRY_DELIVERY_ERROR": "Usage statistics couldn't be sent.",
    "RENDER_ERROR": "A notification couldn't be displayed.",
    "CHANNEL_REGISTRATION_ERROR": "The notification channel couldn't be set up.",
    "HANDLER_REGISTRATION_ERROR": "Notification handling couldn't be fully set up.",
    "ALERT_ERROR": "A notification alert couldn't be shown.",
    "INITIAL_NOTIFICATION_ERROR": "The notification that opened the app couldn't be read.",
    "CONFIGURATION_ERROR": "There's a configuration issue.",
    "UNKNOWN_ERROR": "An unexpected error occurred.",
}

RECOVERY_SUGGESTIONS: dict[str, str] = {
    "PUSHLANE_ERROR": "Restart the application.",
    "PERMISSION_REQUEST_ERROR": "Enable notifications for this app in system settings and restart it.",
    "TOKEN_ACQUISITION_ERROR": "Check the network connection and restart the application.",
    "TELEMETRY_DELIVERY_ERROR": "No action needed. Notifications keep working.",
    "RENDER_ERROR": "Check that notifications are allowed for this app.",
    "CHANNEL_REGISTRATION_ERROR": "Restart the application to retry channel setup.",
    "HANDLER_REGISTRATION_ERROR": "Restart the application.",
    "ALERT_ERROR": "No action needed. The notification was still recorded.",
    "INITIAL_NOTIFICATION_ERROR": "No action needed.",
    "CONFIGURATION_ERROR": "Run 'pushlane config init' to recreate the settings file.",
    "UNKNOWN_ERROR": "Please try again.",
}

# Shown in place of the device token until one has been acquired.
TOKEN_PENDING_TEXT = "Getting token..."


# =============================================================================
# Helper Functions
# =============================================================================


def _error_code(error: Any) -> str:
    if hasattr(error, "code"):
        return error.code
    if isinstance(error, str):
        return error
    return type(error).__name__.upper()


def get_user_message(error: Any) -> str:
    """Get user-friendly message for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        User-friendly error message
    """
    return ERROR_MESSAGES.get(_error_code(error), ERROR_MESSAGES["UNKNOWN_ERROR"])


def get_recovery_suggestion(error: Any) -> str:
    return RECOVERY_SUGGESTIONS.get(
        _error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"]
    )


def format_error_for_user(error: Any) -> str:
    """Format a complete user-friendly error message.

    Args:
        error: The error to format

    Returns:
        Complete error message with recovery suggestion
    """
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)

    return f"{message}\n\nSuggestion: {suggestion}"


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "TOKEN_PENDING_TEXT",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_user",
]
