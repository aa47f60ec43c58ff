"""Main entry point for the gitswitchhub CLI."""

from pathlib import Path

import typer

from gitswitchhub import __version__
from gitswitchhub.cli.commands import accounts, helper, mappings, ssh
from gitswitchhub.cli.commands.credential import credential_helper
from gitswitchhub.cli.helpers import CLIState
from gitswitchhub.core.logging import configure_logging


HELPER_COMMAND = "credential-helper"

app = typer.Typer(
    name="gitswitchhub",
    help="Use several GitHub accounts from one machine through git's credential helper.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gitswitchhub {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        envvar="GITSWITCHHUB_CONFIG_FILE",
        help="Path to a TOML configuration file",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR (logs go to stderr)",
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Log JSON lines"),
) -> None:
    """Use several GitHub accounts from one machine."""
    # Logging must be set up before anything logs: unconfigured structlog
    # writes to stdout, which git reads as credential fields
    default_level = "WARNING" if ctx.invoked_subcommand == HELPER_COMMAND else "INFO"
    configure_logging(log_level or default_level, json_logs)
    ctx.obj = CLIState(config_path=config, log_level=log_level, json_logs=json_logs)


app.command(name=HELPER_COMMAND)(credential_helper)
app.add_typer(accounts.app, name="accounts")
app.add_typer(mappings.app, name="mappings")
app.add_typer(helper.app, name="helper")
app.add_typer(ssh.app, name="ssh")


def main() -> None:
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
