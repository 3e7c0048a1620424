"""Scripted notification session over the in-memory collaborators."""

from __future__ import annotations

import asyncio
from collections import Counter
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from pushlane.configuration.settings import bootstrap_settings
from pushlane.controller import NotificationController, create_in_memory_controller
from pushlane.errors import ConfigurationError, handle_error
from pushlane.notifications.models import InboundMessage
from pushlane.push.memory import AUTHORIZED, DENIED

console = Console()


async def run_session(
    controller: NotificationController,
    *,
    foreground: int = 0,
    background: int = 0,
    opened: bool = False,
    clear: bool = False,
    test_notification: bool = False,
) -> None:
    """Drive ``controller`` through a startup and a series of deliveries."""
    provider = controller.provider
    await controller.start()

    for index in range(1, foreground + 1):
        await provider.deliver_foreground(
            InboundMessage(title=f"Foreground #{index}", body="Delivered while open")
        )
    for index in range(1, background + 1):
        await provider.deliver_background(
            InboundMessage(title=f"Background #{index}", data={"seq": str(index)})
        )
    if opened:
        await provider.open_from_background(InboundMessage(title="Tapped notification"))
    if test_notification:
        controller.send_test_notification()
    if clear:
        controller.clear_notifications()

    await controller.stop()


def simulate(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Settings file to use"),
    deny_permission: bool = typer.Option(False, "--deny-permission", help="Platform denies permission"),
    token_failure: bool = typer.Option(False, "--token-failure", help="Token fetch raises"),
    foreground: int = typer.Option(2, "--foreground", min=0, help="Foreground deliveries"),
    background: int = typer.Option(1, "--background", min=0, help="Background deliveries"),
    launched_from_notification: bool = typer.Option(
        False, "--launched-from-notification", help="App was launched by tapping a notification"
    ),
    opened: bool = typer.Option(False, "--opened", help="Resume the app from a notification tap"),
    clear: bool = typer.Option(False, "--clear", help="Clear the notification list at the end"),
    test_notification: bool = typer.Option(False, "--test", help="Send the local test notification"),
) -> None:
    """Run a notification session against in-memory collaborators."""

    try:
        settings = bootstrap_settings(path=config_path)
    except ConfigurationError as exc:
        console.print(f"[red]{handle_error(exc)}[/red]")
        raise typer.Exit(1)

    controller = create_in_memory_controller(
        settings,
        authorization=DENIED if deny_permission else AUTHORIZED,
        initial_notification=(
            InboundMessage(title="Launch notification") if launched_from_notification else None
        ),
    )
    if token_failure:
        controller.provider.configure(token_error=ConnectionError("token service unreachable"))

    asyncio.run(
        run_session(
            controller,
            foreground=foreground,
            background=background,
            opened=opened,
            clear=clear,
            test_notification=test_notification,
        )
    )
    _print_summary(controller)


def _print_summary(controller: NotificationController) -> None:
    console.print(f"[bold]Permission:[/bold] {controller.permission_state.value}")
    console.print(f"[bold]Device token:[/bold] {controller.token_display}")
    console.print(f"[bold]Rendered locally:[/bold] {len(controller.notifier.notifications)}")

    records = controller.notifications
    if records:
        table = Table(title="Received Notifications")
        table.add_column("ID", style="dim")
        table.add_column("Title")
        table.add_column("Body")
        table.add_column("Time")
        for record in records:
            table.add_row(str(record.record_id), record.title, record.body, record.time)
        console.print(table)
    else:
        console.print("No notifications yet. Send a test!")

    counts = Counter(event.name for event in controller.emitter.get_recent_events(limit=1000))
    telemetry = Table(title="Telemetry")
    telemetry.add_column("Event")
    telemetry.add_column("Count", justify="right")
    for name, count in sorted(counts.items()):
        telemetry.add_row(name, str(count))
    console.print(telemetry)
