"""Tests for pushlane configuration settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pushlane.configuration.settings import (
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)
from pushlane.errors import ConfigurationError


def test_defaults_match_stock_channel_and_rendering() -> None:
    settings = Settings()

    assert settings.channel.channel_id == "default_notification_channel"
    assert settings.rendering.default_title == "New Notification"
    assert settings.rendering.default_body == "You have a new message"
    assert settings.permission.as_options() == {
        "alert": True,
        "badge": True,
        "sound": True,
        "announcement": True,
    }


def test_bootstrap_persists_default_config(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    bootstrap_settings(path=config_path, persist=True)

    assert config_path.exists()
    data = json.loads(config_path.read_text())
    assert data["channel"]["channel_id"] == "default_notification_channel"


def test_bootstrap_without_path_does_not_write(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    settings = bootstrap_settings()

    assert settings.telemetry.app_version == "1.0.0"
    assert not (tmp_path / ".pushlane").exists()


def test_load_settings_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    settings = Settings.model_validate(
        {"telemetry": {"app_version": "2.0.0"}, "rendering": {"vibration_ms": 100}}
    )
    save_settings(settings, config_path)

    loaded = load_settings(config_path)
    assert loaded.telemetry.app_version == "2.0.0"
    assert loaded.rendering.vibration_ms == 100
    assert loaded.rendering.test_title == "🧪 Test Notification"


def test_overrides_merge_nested_sections(tmp_path: Path) -> None:
    settings = bootstrap_settings(overrides={"channel": {"name": "Promotions"}})

    assert settings.channel.name == "Promotions"
    assert settings.channel.channel_id == "default_notification_channel"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUSHLANE_APP_VERSION", "3.1.4")
    monkeypatch.setenv("PUSHLANE_CHANNEL_VIBRATE", "false")
    monkeypatch.setenv("PUSHLANE_VIBRATION_MS", "120")
    monkeypatch.setenv("PUSHLANE_DEFAULT_TITLE", "Heads up")

    settings = bootstrap_settings()

    assert settings.telemetry.app_version == "3.1.4"
    assert settings.channel.vibrate is False
    assert settings.rendering.vibration_ms == 120
    assert settings.rendering.default_title == "Heads up"


def test_env_override_not_an_integer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUSHLANE_VIBRATION_MS", "long")

    with pytest.raises(ConfigurationError):
        bootstrap_settings()


def test_negative_vibration_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PUSHLANE_VIBRATION_MS", "-5")

    with pytest.raises(ConfigurationError):
        bootstrap_settings()


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "absent.json")


def test_load_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json")

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(config_path)
    assert excinfo.value.code == "CONFIGURATION_ERROR"


def test_empty_default_title_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"rendering": {"default_title": ""}}))

    with pytest.raises(ConfigurationError):
        load_settings(config_path)


@pytest.mark.parametrize("raw, expected", [("1", True), ("YES", True), ("true", True), ("0", False), ("off", False)])
def test_env_bool_override(monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("PUSHLANE_CHANNEL_VIBRATE", raw)

    assert bootstrap_settings().channel.vibrate is expected
