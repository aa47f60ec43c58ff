"""CLI commands for registering the git credential helper."""

import typer
from rich.console import Console

from gitswitchhub.exceptions import GitConfigError
from gitswitchhub.git.config import helper_status, install_helper


app = typer.Typer(name="helper", help="Install gitswitchhub as git's credential helper")

console = Console()


def install() -> None:
    """Set gitswitchhub as the only global credential helper."""
    try:
        command = install_helper()
    except GitConfigError as e:
        console.print(f"[red]{e.message}[/red]")
        if e.details.get("stderr"):
            console.print(f"[dim]{e.details['stderr']}[/dim]")
        raise typer.Exit(1) from e

    console.print("[green]Credential helper installed.[/green]")
    console.print(f"  credential.helper = {command}")


def status() -> None:
    """Show whether git uses gitswitchhub for credentials."""
    result = helper_status()
    if not result.installed:
        console.print("[red]git is not installed or not on PATH.[/red]")
        raise typer.Exit(1)

    if result.configured:
        console.print("[green]gitswitchhub is the global credential helper.[/green]")
        return

    console.print("[yellow]gitswitchhub is not the global credential helper.[/yellow]")
    if result.current:
        console.print(f"  Current helper: {result.current}")
    console.print("Run: [cyan]gitswitchhub helper install[/cyan]")
    raise typer.Exit(1)


app.command(name="install")(install)
app.command(name="status")(status)
