"""Configuration loading utilities for pushlane."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    ChannelSettings,
    PermissionSettings,
    RenderingSettings,
    Settings,
    TelemetrySettings,
    bootstrap_settings,
    load_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ChannelSettings",
    "PermissionSettings",
    "RenderingSettings",
    "Settings",
    "TelemetrySettings",
    "bootstrap_settings",
    "load_settings",
    "save_settings",
]
