"""The command git runs as its credential helper."""

import asyncio
import sys
from functools import partial

import typer

from gitswitchhub.cli.helpers import load_settings
from gitswitchhub.context import open_resolver
from gitswitchhub.git.credential_helper import CredentialProtocolHandler


def credential_helper(
    ctx: typer.Context,
    operation: str = typer.Argument(
        "get", help="Operation requested by git: get, store or erase"
    ),
) -> None:
    """Answer a git credential request read from stdin.

    Configure it with: git config --global credential.helper '!gitswitchhub credential-helper'
    """
    settings = load_settings(ctx)
    handler = CredentialProtocolHandler(partial(open_resolver, settings))
    code = asyncio.run(handler.handle(operation, sys.stdin, sys.stdout, sys.stderr))
    raise typer.Exit(code)
