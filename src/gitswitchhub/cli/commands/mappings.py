"""CLI commands for repository-to-account mappings."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from gitswitchhub.cli.helpers import load_settings
from gitswitchhub.config.settings import Settings
from gitswitchhub.context import open_app_context
from gitswitchhub.db.models import RepositoryMapping
from gitswitchhub.exceptions import GitSwitchHubError


app = typer.Typer(name="mappings", help="Pin repositories to accounts")

console = Console()


async def _list_mappings(settings: Settings) -> list[tuple[RepositoryMapping, str]]:
    async with open_app_context(settings) as ctx:
        usernames = {a.id: a.username for a in await ctx.accounts.list_all()}
        return [
            (mapping, usernames.get(mapping.account_id, "?"))
            for mapping in await ctx.resolver.list_mappings()
        ]


def list_mappings(ctx: typer.Context) -> None:
    """List repository mappings, newest first."""
    settings = load_settings(ctx)
    try:
        rows = asyncio.run(_list_mappings(settings))
    except GitSwitchHubError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if not rows:
        console.print("[yellow]No repository mappings.[/yellow]")
        return

    table = Table(title="Repository Mappings")
    table.add_column("ID", style="dim")
    table.add_column("Repository", style="cyan")
    table.add_column("Account", style="green")
    table.add_column("Remember")

    for mapping, username in rows:
        table.add_row(
            mapping.id,
            mapping.remote_url,
            username,
            "yes" if mapping.remember else "no",
        )

    console.print(table)


def set_mapping(
    ctx: typer.Context,
    remote_url: str = typer.Argument(
        ..., help="Repository URL exactly as git reports it"
    ),
    username: str = typer.Argument(..., help="GitHub username"),
    remember: bool = typer.Option(True, "--remember/--no-remember"),
) -> None:
    """Use an account for one repository, replacing any earlier choice."""
    settings = load_settings(ctx)

    async def _set() -> RepositoryMapping:
        async with open_app_context(settings) as app_ctx:
            account = await app_ctx.service.get_account(username)
            return await app_ctx.resolver.set_mapping(remote_url, account.id, remember)

    try:
        mapping = asyncio.run(_set())
    except GitSwitchHubError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]{remote_url} now uses {username}[/green] ({mapping.id})")


def remove_mapping(
    ctx: typer.Context,
    mapping_id: str = typer.Argument(..., help="Mapping ID from 'mappings list'"),
) -> None:
    """Delete a repository mapping."""
    settings = load_settings(ctx)

    async def _remove() -> None:
        async with open_app_context(settings) as app_ctx:
            await app_ctx.resolver.remove_mapping(mapping_id)

    try:
        asyncio.run(_remove())
    except GitSwitchHubError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]Mapping {mapping_id} removed.[/green]")


app.command(name="list")(list_mappings)
app.command(name="set")(set_mapping)
app.command(name="remove")(remove_mapping)
