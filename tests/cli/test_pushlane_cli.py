"""Tests for pushlane CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pushlane.cli import cli


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def test_config_init_writes_file(runner, tmp_path: Path):
    config_path = tmp_path / "pushlane" / "config.json"

    result = runner.invoke(
        cli,
        ["config", "init", "--config-path", str(config_path), "--app-version", "4.2.0"],
    )

    assert result.exit_code == 0
    assert "Configuration initialized" in result.output
    data = json.loads(config_path.read_text())
    assert data["telemetry"]["app_version"] == "4.2.0"


def test_config_show_outputs_json(runner, tmp_path: Path):
    config_path = tmp_path / "config.json"
    runner.invoke(cli, ["config", "init", "--config-path", str(config_path), "--channel-id", "alerts"])

    result = runner.invoke(cli, ["config", "show", "--config-path", str(config_path)])

    assert result.exit_code == 0
    assert json.loads(result.output)["channel"]["channel_id"] == "alerts"


def test_config_show_missing_file(runner, tmp_path: Path):
    result = runner.invoke(cli, ["config", "show", "--config-path", str(tmp_path / "absent.json")])

    assert result.exit_code == 1
    assert "pushlane config init" in result.output


def test_simulate_default_session(runner):
    result = runner.invoke(cli, ["simulate"])

    assert result.exit_code == 0
    assert "Permission: authorized" in result.output
    assert "Received Notifications" in result.output
    assert "notification_foreground_received" in result.output


def test_simulate_denied_permission(runner):
    result = runner.invoke(cli, ["simulate", "--deny-permission", "--foreground", "0"])

    assert result.exit_code == 0
    assert "Permission: denied" in result.output
    assert "Getting token..." in result.output
    assert "No notifications yet. Send a test!" in result.output


def test_simulate_clear_empties_list(runner):
    result = runner.invoke(cli, ["simulate", "--clear", "--test"])

    assert result.exit_code == 0
    assert "No notifications yet. Send a test!" in result.output
    assert "notifications_cleared" in result.output
    assert "test_local_notification" in result.output
