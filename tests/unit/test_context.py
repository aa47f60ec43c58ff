"""Tests for wiring the application context."""

from pathlib import Path

import pytest

from gitswitchhub.config.settings import Settings
from gitswitchhub.context import open_app_context
from gitswitchhub.exceptions import ConfigurationError
from gitswitchhub.secrets import MemorySecretStore


async def test_opens_database_under_configured_path(tmp_path: Path) -> None:
    settings = Settings(database_path=tmp_path / "ctx.db")
    store = MemorySecretStore()

    async with open_app_context(settings, secret_store=store) as ctx:
        assert await ctx.accounts.list_all() == []
        assert ctx.secret_store is store

    assert (tmp_path / "ctx.db").exists()


async def test_missing_database_path_is_a_configuration_error(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path)
    settings.database_path = None

    with pytest.raises(ConfigurationError, match="database path"):
        async with open_app_context(settings, secret_store=MemorySecretStore()):
            pass
