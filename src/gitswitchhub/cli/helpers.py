"""Shared CLI state and helpers."""

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from gitswitchhub.config.settings import Settings, get_settings
from gitswitchhub.core.logging import configure_logging
from gitswitchhub.exceptions import ConfigurationError


err_console = Console(stderr=True)


@dataclass
class CLIState:
    """Options given before the subcommand."""

    config_path: Path | None = None
    log_level: str | None = None
    json_logs: bool = False


def load_settings(ctx: typer.Context) -> Settings:
    """Load settings for a command, exiting with status 1 on bad configuration.

    A log level from the configuration replaces the command default unless
    one was given on the command line.
    """
    state = ctx.ensure_object(CLIState)
    try:
        settings = get_settings(state.config_path)
    except ConfigurationError as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if state.log_level is None and settings.log_level is not None:
        configure_logging(settings.log_level, state.json_logs or settings.json_logs)
    return settings
