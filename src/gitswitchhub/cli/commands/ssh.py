"""CLI commands for per-account SSH keys."""

import typer
from rich.console import Console

from gitswitchhub.exceptions import SSHError
from gitswitchhub.ssh import SSHManager, convert_remote_to_ssh


app = typer.Typer(name="ssh", help="SSH keys and host aliases per account")

console = Console()


def _fail(e: SSHError) -> typer.Exit:
    console.print(f"[red]{e.message}[/red]")
    if e.details.get("stderr"):
        console.print(f"[dim]{e.details['stderr']}[/dim]")
    return typer.Exit(1)


def keygen(
    username: str = typer.Argument(..., help="GitHub username"),
    write_config: bool = typer.Option(
        True, "--config/--no-config", help="Also add the host alias to ~/.ssh/config"
    ),
) -> None:
    """Generate an ed25519 key for an account."""
    manager = SSHManager()
    try:
        key = manager.generate_key(username)
        if write_config:
            manager.add_to_ssh_config(username)
    except SSHError as e:
        raise _fail(e) from e

    console.print(f"[green]Key created:[/green] {key.private_key_path}")
    console.print()
    console.print("Add this public key at [cyan]https://github.com/settings/keys[/cyan]:")
    console.print()
    console.print(key.public_key, soft_wrap=True)


def config(
    username: str = typer.Argument(..., help="GitHub username"),
    write: bool = typer.Option(False, "--write", help="Append to ~/.ssh/config"),
    remove: bool = typer.Option(False, "--remove", help="Remove from ~/.ssh/config"),
) -> None:
    """Print, add or remove the SSH host alias for an account."""
    manager = SSHManager()
    if not write and not remove:
        console.print(manager.host_config(username).render(), end="")
        return

    try:
        if remove:
            changed = manager.remove_from_ssh_config(username)
        else:
            changed = manager.add_to_ssh_config(username)
    except SSHError as e:
        raise _fail(e) from e

    if changed:
        console.print(f"[green]Updated {manager.config_path}[/green]")
    else:
        console.print(f"[yellow]{manager.config_path} already up to date.[/yellow]")


def convert_remote(
    remote_url: str = typer.Argument(..., help="https://github.com/... remote"),
    username: str = typer.Argument(..., help="GitHub username"),
) -> None:
    """Print the SSH form of a remote using the account's host alias."""
    try:
        console.print(convert_remote_to_ssh(remote_url, username), soft_wrap=True)
    except SSHError as e:
        raise _fail(e) from e


app.command(name="keygen")(keygen)
app.command(name="config")(config)
app.command(name="convert-remote")(convert_remote)
