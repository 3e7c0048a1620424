"""CLI commands for managing pushlane settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from pushlane.configuration.settings import (
    DEFAULT_CONFIG_PATH,
    bootstrap_settings,
    load_settings,
)
from pushlane.errors import ConfigurationError, handle_error

console = Console()
config_app = typer.Typer(help="Manage pushlane configuration")


@config_app.command("init")
def init_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
    app_version: Optional[str] = typer.Option(None, help="Version tag added to telemetry"),
    channel_id: Optional[str] = typer.Option(None, help="Local notification channel identifier"),
) -> None:
    """Create the settings file (or normalize an existing one)."""

    overrides: dict = {}
    if app_version:
        overrides.setdefault("telemetry", {})["app_version"] = app_version
    if channel_id:
        overrides.setdefault("channel", {})["channel_id"] = channel_id

    try:
        bootstrap_settings(path=config_path, overrides=overrides, persist=True)
    except ConfigurationError as exc:
        console.print(f"[red]{handle_error(exc)}[/red]")
        raise typer.Exit(1)
    console.print(f"Configuration initialized at {config_path}")


@config_app.command("show")
def show_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Display the effective configuration."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        console.print(exc.recovery_suggestion)
        raise typer.Exit(1)
    typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2, ensure_ascii=False))
