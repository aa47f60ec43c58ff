"""Tests for AccountService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from gitswitchhub.accounts import AccountService
from gitswitchhub.db.repositories import AccountRepository, RepositoryMappingRepository
from gitswitchhub.exceptions import (
    AccountNotFoundError,
    DeviceFlowDeniedError,
    InvalidTokenError,
    ProviderTransportError,
)
from gitswitchhub.github import DeviceTokenResponse, GitHubUser, TokenInfo
from gitswitchhub.secrets import MemorySecretStore


@pytest.fixture
def validator() -> MagicMock:
    validator = MagicMock()
    validator.validate = AsyncMock(
        return_value=GitHubUser(login="octocat", id=1, avatar_url="https://a/1")
    )
    validator.inspect = AsyncMock(
        return_value=TokenInfo(
            user=GitHubUser(login="octocat", id=1), scopes={"repo", "user"}
        )
    )
    return validator


@pytest.fixture
def device_flow() -> MagicMock:
    device_flow = MagicMock()
    device_flow.run = AsyncMock(
        return_value=DeviceTokenResponse(access_token="gho_device", scope="repo,user")
    )
    return device_flow


@pytest.fixture
def service(
    account_repo: AccountRepository,
    secret_store: MemorySecretStore,
    validator: MagicMock,
    device_flow: MagicMock,
) -> AccountService:
    return AccountService(account_repo, secret_store, validator, device_flow)


async def test_add_with_token_uses_provider_username(
    service: AccountService, secret_store: MemorySecretStore, validator: MagicMock
) -> None:
    account = await service.add_with_token("  ghp_manual\n")

    validator.validate.assert_awaited_once_with("ghp_manual")
    assert account.username == "octocat"
    assert account.auth_method == "manual"
    assert account.avatar_url == "https://a/1"
    assert secret_store.fetch("octocat") == "ghp_manual"


async def test_add_invalid_token_stores_nothing(
    service: AccountService,
    secret_store: MemorySecretStore,
    account_repo: AccountRepository,
    validator: MagicMock,
) -> None:
    validator.validate.side_effect = InvalidTokenError()

    with pytest.raises(InvalidTokenError):
        await service.add_with_token("ghp_bad")

    assert secret_store.list() == set()
    assert await account_repo.list_all() == []


async def test_readding_replaces_token(
    service: AccountService,
    secret_store: MemorySecretStore,
    account_repo: AccountRepository,
) -> None:
    first = await service.add_with_token("ghp_one")
    second = await service.add_with_token("ghp_two")

    assert second.id == first.id
    assert secret_store.fetch("octocat") == "ghp_two"
    assert len(await account_repo.list_all()) == 1


async def test_add_with_device_flow(
    service: AccountService,
    secret_store: MemorySecretStore,
    device_flow: MagicMock,
) -> None:
    callback = MagicMock()

    account = await service.add_with_device_flow(callback)

    device_flow.run.assert_awaited_once_with(callback)
    assert account.auth_method == "device_flow"
    assert secret_store.fetch("octocat") == "gho_device"


async def test_device_flow_denied_adds_nothing(
    service: AccountService,
    account_repo: AccountRepository,
    device_flow: MagicMock,
) -> None:
    device_flow.run.side_effect = DeviceFlowDeniedError()

    with pytest.raises(DeviceFlowDeniedError):
        await service.add_with_device_flow()

    assert await account_repo.list_all() == []


async def test_device_flow_requires_client(
    account_repo: AccountRepository,
    secret_store: MemorySecretStore,
    validator: MagicMock,
) -> None:
    service = AccountService(account_repo, secret_store, validator)

    with pytest.raises(RuntimeError):
        await service.add_with_device_flow()


async def test_remove_account(
    service: AccountService,
    secret_store: MemorySecretStore,
    account_repo: AccountRepository,
    mapping_repo: RepositoryMappingRepository,
) -> None:
    account = await service.add_with_token("ghp_manual")
    await mapping_repo.set("https://github.com/org/repo", account.id, True)

    await service.remove_account("octocat")

    assert await account_repo.list_all() == []
    assert await mapping_repo.list_all() == []
    assert secret_store.list() == set()


async def test_remove_unknown_account(service: AccountService) -> None:
    with pytest.raises(AccountNotFoundError):
        await service.remove_account("ghost")


class TestConnection:
    async def test_success(self, service: AccountService) -> None:
        await service.add_with_token("ghp_manual")

        result = await service.test_connection("octocat")

        assert result.success is True
        assert result.message == "Connected as octocat"
        assert result.scopes == {"repo", "user"}

    async def test_no_token(self, service: AccountService) -> None:
        result = await service.test_connection("ghost")

        assert result.success is False
        assert result.message == "No token stored for ghost"

    async def test_rejected_token(
        self, service: AccountService, validator: MagicMock
    ) -> None:
        await service.add_with_token("ghp_manual")
        validator.inspect.side_effect = InvalidTokenError()

        result = await service.test_connection("octocat")

        assert result.success is False
        assert result.message == "Connection failed: Invalid token"

    async def test_transport_failure(
        self, service: AccountService, validator: MagicMock
    ) -> None:
        await service.add_with_token("ghp_manual")
        validator.inspect.side_effect = ProviderTransportError("network down")

        result = await service.test_connection("octocat")

        assert result.success is False
        assert "network down" in result.message
