"""Command line entry points for pushlane."""

from typer import Typer

from .config import config_app
from .simulate import simulate


cli = Typer(help="pushlane command line tools")
cli.add_typer(config_app, name="config")
cli.command("simulate")(simulate)

__all__ = ["cli", "config_app", "simulate"]
