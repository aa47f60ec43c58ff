"""Shared fixtures for gitswitchhub tests."""

import logging
from collections.abc import AsyncGenerator, Iterator
from pathlib import Path

import pytest
import structlog

from gitswitchhub.db import Database, init_db
from gitswitchhub.db.repositories import AccountRepository, RepositoryMappingRepository
from gitswitchhub.secrets import MemorySecretStore


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the real home directory and user config."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in (
        "GITSWITCHHUB_CONFIG_FILE",
        "GITSWITCHHUB_CONFIG_OVERRIDES",
        "GITSWITCHHUB_DATA_DIR",
        "GITSWITCHHUB_DATABASE_PATH",
        "GITSWITCHHUB_LOG_LEVEL",
        "GITSWITCHHUB_SECRETS__BACKEND",
        "XDG_CONFIG_HOME",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop logging configuration made by CLI runs and logging tests."""
    yield
    structlog.reset_defaults()
    logging.getLogger().setLevel(logging.WARNING)


@pytest.fixture
async def db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Database in a temporary directory."""
    database = await init_db(tmp_path / "data" / "test.db")
    yield database
    await database.close()


@pytest.fixture
def account_repo(db: Database) -> AccountRepository:
    return AccountRepository(db)


@pytest.fixture
def mapping_repo(db: Database) -> RepositoryMappingRepository:
    return RepositoryMappingRepository(db)


@pytest.fixture
def secret_store() -> MemorySecretStore:
    return MemorySecretStore()
