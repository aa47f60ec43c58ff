"""Tests for AccountRepository."""

import pytest

from gitswitchhub.db.models import AuthMethod
from gitswitchhub.db.repositories import AccountRepository, RepositoryMappingRepository
from gitswitchhub.exceptions import DatabaseError


async def test_create_account(account_repo: AccountRepository):
    """Test creating an account via repository."""
    account = await account_repo.create("alice", AuthMethod.DEVICE_FLOW)

    assert account.username == "alice"
    assert account.auth_method == "device_flow"
    assert account.id
    assert account.created_at_datetime.tzinfo is not None


async def test_get_account_by_id_and_username(account_repo: AccountRepository):
    created = await account_repo.create("alice")

    assert (await account_repo.get(created.id)).username == "alice"
    assert (await account_repo.get_by_username("alice")).id == created.id


async def test_get_nonexistent_account(account_repo: AccountRepository):
    """Test retrieving nonexistent account returns None."""
    assert await account_repo.get("does-not-exist") is None
    assert await account_repo.get_by_username("nobody") is None


async def test_usernames_are_case_sensitive(account_repo: AccountRepository):
    await account_repo.create("Alice")
    await account_repo.create("alice")

    assert (await account_repo.get_by_username("Alice")).username == "Alice"
    assert (await account_repo.get_by_username("alice")).username == "alice"
    assert len(await account_repo.list_all()) == 2


async def test_duplicate_username_is_rejected(account_repo: AccountRepository):
    await account_repo.create("alice")

    with pytest.raises(DatabaseError):
        await account_repo.create("alice")


async def test_list_all_newest_first(account_repo: AccountRepository):
    """Test listing all accounts."""
    await account_repo.create("old", created_at="2024-01-01T00:00:00.000000+00:00")
    await account_repo.create("new", created_at="2024-06-01T00:00:00.000000+00:00")
    await account_repo.create("mid", created_at="2024-03-01T00:00:00.000000+00:00")

    accounts = await account_repo.list_all()
    assert [a.username for a in accounts] == ["new", "mid", "old"]


async def test_upsert_creates_then_updates(account_repo: AccountRepository):
    account, created = await account_repo.upsert("alice", AuthMethod.MANUAL)
    assert created is True

    again, created = await account_repo.upsert(
        "alice", AuthMethod.DEVICE_FLOW, avatar_url="https://avatars/alice"
    )
    assert created is False
    assert again.id == account.id
    assert again.auth_method == "device_flow"
    assert again.avatar_url == "https://avatars/alice"
    assert again.created_at == account.created_at
    assert len(await account_repo.list_all()) == 1


async def test_delete_with_mappings(
    account_repo: AccountRepository, mapping_repo: RepositoryMappingRepository
):
    """Deleting an account removes its mappings and nobody else's."""
    alice = await account_repo.create("alice")
    bob = await account_repo.create("bob")
    await mapping_repo.set("https://github.com/a/one", alice.id, True)
    await mapping_repo.set("https://github.com/a/two", alice.id, False)
    await mapping_repo.set("https://github.com/b/one", bob.id, True)

    assert await account_repo.delete_with_mappings(alice.id) is True

    assert await account_repo.get(alice.id) is None
    remaining = await mapping_repo.list_all()
    assert [m.remote_url for m in remaining] == ["https://github.com/b/one"]


async def test_delete_nonexistent_account(account_repo: AccountRepository):
    """Test deleting nonexistent account returns False."""
    assert await account_repo.delete_with_mappings("does-not-exist") is False
