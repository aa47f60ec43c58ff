"""Wiring of stores, repositories and services for one command run."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from gitswitchhub.accounts import AccountResolver, AccountService
from gitswitchhub.config.settings import Settings
from gitswitchhub.db import Database, init_db
from gitswitchhub.db.repositories import AccountRepository, RepositoryMappingRepository
from gitswitchhub.exceptions import ConfigurationError
from gitswitchhub.github import DeviceFlowClient, TokenValidator
from gitswitchhub.secrets import SecretStore, create_secret_store


@dataclass
class AppContext:
    settings: Settings
    db: Database
    secret_store: SecretStore
    accounts: AccountRepository
    mappings: RepositoryMappingRepository
    resolver: AccountResolver
    service: AccountService


@asynccontextmanager
async def open_app_context(
    settings: Settings,
    secret_store: SecretStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncIterator[AppContext]:
    """Open the database and build every component on top of it.

    The database engine is disposed when the context exits.

    Raises:
        ConfigurationError: If no database path was resolved

    """
    if settings.database_path is None:
        raise ConfigurationError("No database path configured")
    db = await init_db(settings.database_path)
    store = secret_store or create_secret_store(settings.secrets)
    accounts = AccountRepository(db)
    mappings = RepositoryMappingRepository(db)
    try:
        yield AppContext(
            settings=settings,
            db=db,
            secret_store=store,
            accounts=accounts,
            mappings=mappings,
            resolver=AccountResolver(accounts, mappings, store),
            service=AccountService(
                accounts,
                store,
                TokenValidator(settings.github, http_client=http_client),
                DeviceFlowClient(settings.github, http_client=http_client),
            ),
        )
    finally:
        await db.close()


@asynccontextmanager
async def open_resolver(settings: Settings) -> AsyncIterator[AccountResolver]:
    """Open just enough to resolve a credential."""
    async with open_app_context(settings) as ctx:
        yield ctx.resolver
