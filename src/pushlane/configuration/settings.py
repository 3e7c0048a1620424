"""Typed settings for the pushlane notification controller.

User configuration is wrapped in Pydantic models so the controller and the
CLI can rely on validated values. Everything has a default: a process that
never wrote a settings file runs with the stock channel, rendering and
telemetry configuration.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from pushlane.errors import ConfigurationError


DEFAULT_CONFIG_PATH = Path.home() / ".pushlane" / "config.json"
DEFAULT_APP_VERSION = "1.0.0"
DEFAULT_CHANNEL_ID = "default_notification_channel"


class TelemetrySettings(BaseModel):
    """Static metadata attached to every telemetry event."""

    app_version: str = Field(DEFAULT_APP_VERSION, description="Version tag added to every event")
    history_size: int = Field(1000, ge=1, le=100_000, description="Locally retained recent events")


class ChannelSettings(BaseModel):
    """The single local rendering channel."""

    channel_id: str = Field(DEFAULT_CHANNEL_ID, min_length=1)
    name: str = Field("General Notifications", min_length=1)
    description: str = Field("Notifications for general app updates")
    play_sound: bool = True
    sound_name: str = "default"
    vibrate: bool = True


class RenderingSettings(BaseModel):
    """Local notification presentation defaults."""

    default_title: str = "New Notification"
    default_body: str = "You have a new message"
    test_title: str = "🧪 Test Notification"
    test_body: str = "If you see this, notifications are working!"
    alert_title: str = "📱 Notification Received"
    vibration_ms: int = Field(300, ge=0)
    actions: List[str] = Field(default_factory=lambda: ["View"])


class PermissionSettings(BaseModel):
    """Options passed to the platform permission request."""

    alert: bool = True
    badge: bool = True
    sound: bool = True
    announcement: bool = True

    def as_options(self) -> Dict[str, bool]:
        return self.model_dump()


class Settings(BaseModel):
    """Root configuration state."""

    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)
    channel: ChannelSettings = Field(default_factory=ChannelSettings)
    rendering: RenderingSettings = Field(default_factory=RenderingSettings)
    permission: PermissionSettings = Field(default_factory=PermissionSettings)

    @field_validator("rendering")
    def _validate_defaults(cls, value: RenderingSettings) -> RenderingSettings:
        if not value.default_title or not value.default_body:
            raise ValueError("default_title and default_body must not be empty")
        return value


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if invalid."""

    if not path.exists():
        raise ConfigurationError(f"Settings file not found at {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Settings file {path} is not valid JSON: {exc}") from exc
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk."""

    payload = settings.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def bootstrap_settings(
    *,
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    persist: bool = False,
) -> Settings:
    """Create or load settings respecting explicit and environment overrides.

    Without a ``path`` the defaults are used. ``persist`` writes the resolved
    settings back to ``path``.
    """

    overrides = overrides or {}

    if path is not None and path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()

    merged = settings.model_dump(mode="python")
    merged = _apply_overrides(merged, overrides)
    merged = _apply_env_overrides(merged)

    try:
        resolved = Settings.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    if persist and path is not None:
        save_settings(resolved, path)
    return resolved


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _apply_overrides(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    telemetry = data.setdefault("telemetry", {})
    _set_env_override(telemetry, "app_version", "PUSHLANE_APP_VERSION")

    channel = data.setdefault("channel", {})
    _set_env_override(channel, "channel_id", "PUSHLANE_CHANNEL_ID")
    _set_env_override(channel, "vibrate", "PUSHLANE_CHANNEL_VIBRATE", cast_bool=True)

    rendering = data.setdefault("rendering", {})
    _set_env_override(rendering, "default_title", "PUSHLANE_DEFAULT_TITLE")
    _set_env_override(rendering, "default_body", "PUSHLANE_DEFAULT_BODY")
    _set_env_override(rendering, "vibration_ms", "PUSHLANE_VIBRATION_MS", cast_int=True)
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_bool: bool = False,
    cast_int: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    if cast_bool:
        mapping[key] = raw.lower() in {"1", "true", "yes"}
    elif cast_int:
        try:
            mapping[key] = int(raw)
        except ValueError as exc:
            raise ConfigurationError(f"{env_name} must be an integer, got {raw!r}") from exc
    else:
        mapping[key] = raw
