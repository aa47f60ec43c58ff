"""CLI commands for GitHub account management."""

import asyncio
import sys
import webbrowser

import typer
from rich.console import Console
from rich.table import Table

from gitswitchhub.accounts import ConnectionTestResult
from gitswitchhub.cli.helpers import load_settings
from gitswitchhub.config.settings import Settings
from gitswitchhub.context import open_app_context
from gitswitchhub.db.models import Account
from gitswitchhub.exceptions import (
    DeviceFlowDeniedError,
    DeviceFlowError,
    DeviceFlowExpiredError,
    DeviceFlowTimeoutError,
    GitSwitchHubError,
)
from gitswitchhub.github import DeviceFlowSession


app = typer.Typer(name="accounts", help="Manage GitHub accounts")

console = Console()


async def _list_accounts(settings: Settings) -> tuple[list[Account], set[str]]:
    async with open_app_context(settings) as ctx:
        accounts = await ctx.service.list_accounts()
        return accounts, ctx.secret_store.list()


def list_accounts(ctx: typer.Context) -> None:
    """List configured accounts, newest first."""
    settings = load_settings(ctx)
    try:
        accounts, stored = asyncio.run(_list_accounts(settings))
    except GitSwitchHubError as e:
        console.print(f"[red]Failed to list accounts: {e.message}[/red]")
        raise typer.Exit(1) from e

    if not accounts:
        console.print("[yellow]No accounts configured.[/yellow]")
        console.print("Add one with: [cyan]gitswitchhub accounts add[/cyan]")
        return

    table = Table(title="GitHub Accounts")
    table.add_column("Username", style="cyan")
    table.add_column("Auth method")
    table.add_column("Added")
    table.add_column("Token")
    table.add_column("ID", style="dim")

    for account in accounts:
        token = (
            "[green]stored[/green]"
            if account.username in stored
            else "[red]missing[/red]"
        )
        table.add_row(
            account.username,
            account.auth_method,
            account.created_at_datetime.strftime("%Y-%m-%d %H:%M UTC"),
            token,
            account.id,
        )

    console.print(table)


def _show_user_code(session: DeviceFlowSession, open_browser: bool) -> None:
    console.print()
    console.print(f"Open [cyan]{session.verification_uri}[/cyan] and enter the code:")
    console.print()
    console.print(f"    [bold yellow]{session.user_code}[/bold yellow]")
    console.print()
    console.print("[dim]Waiting for authorization...[/dim]")
    if open_browser:
        webbrowser.open(session.verification_uri_complete or session.verification_uri)


async def _add_account(
    settings: Settings, token: str | None, open_browser: bool
) -> Account:
    async with open_app_context(settings) as ctx:
        if token is not None:
            return await ctx.service.add_with_token(token)
        return await ctx.service.add_with_device_flow(
            lambda session: _show_user_code(session, open_browser)
        )


def add_account(
    ctx: typer.Context,
    token_stdin: bool = typer.Option(
        False,
        "--token-stdin",
        help="Read a personal access token from stdin instead of using the device flow",
    ),
    open_browser: bool = typer.Option(
        True, "--browser/--no-browser", help="Open the verification page"
    ),
) -> None:
    """Add a GitHub account through the OAuth device flow or a token."""
    settings = load_settings(ctx)

    token: str | None = None
    if token_stdin:
        token = sys.stdin.readline().strip()
        if not token:
            console.print("[red]No token given on stdin.[/red]")
            raise typer.Exit(1)

    try:
        account = asyncio.run(_add_account(settings, token, open_browser))
    except DeviceFlowDeniedError as e:
        console.print("[red]Authorization was denied on GitHub.[/red]")
        console.print("Run the command again and approve the request to retry.")
        raise typer.Exit(1) from e
    except (DeviceFlowExpiredError, DeviceFlowTimeoutError) as e:
        console.print(f"[red]{e.message}.[/red]")
        console.print("The code is no longer valid. Run the command again for a new one.")
        raise typer.Exit(1) from e
    except DeviceFlowError as e:
        console.print(f"[red]Device flow failed: {e.message}[/red]")
        raise typer.Exit(1) from e
    except GitSwitchHubError as e:
        console.print(f"[red]Failed to add account: {e.message}[/red]")
        raise typer.Exit(1) from e
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user.[/yellow]")
        raise typer.Exit(1) from None

    console.print(f"[green]Account {account.username} added.[/green]")


async def _remove_account(settings: Settings, username: str) -> None:
    async with open_app_context(settings) as ctx:
        await ctx.service.remove_account(username)


def remove_account(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="GitHub username"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Remove an account, its repository mappings and its stored token."""
    if not force:
        confirm = typer.confirm(f"Remove account {username} and its mappings?")
        if not confirm:
            raise typer.Abort()

    settings = load_settings(ctx)
    try:
        asyncio.run(_remove_account(settings, username))
    except GitSwitchHubError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]Account {username} removed.[/green]")


def check_account(
    ctx: typer.Context,
    username: str = typer.Argument(..., help="GitHub username"),
) -> None:
    """Check that the stored token for an account still works."""
    settings = load_settings(ctx)

    async def _test() -> ConnectionTestResult:
        async with open_app_context(settings) as app_ctx:
            return await app_ctx.service.test_connection(username)

    try:
        result = asyncio.run(_test())
    except GitSwitchHubError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if not result.success:
        console.print(f"[red]{result.message}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]{result.message}[/green]")
    if result.scopes:
        console.print(f"  Scopes: {', '.join(sorted(result.scopes))}")


app.command(name="list")(list_accounts)
app.command(name="add")(add_account)
app.command(name="remove")(remove_account)
app.command(name="test")(check_account)
