"""Tests for RepositoryMappingRepository."""

from gitswitchhub.db.repositories import AccountRepository, RepositoryMappingRepository


async def test_set_and_get_by_url(
    account_repo: AccountRepository, mapping_repo: RepositoryMappingRepository
):
    account = await account_repo.create("alice")

    mapping = await mapping_repo.set("https://github.com/org/repo", account.id, True)

    found = await mapping_repo.get_by_url("https://github.com/org/repo")
    assert found is not None
    assert found.id == mapping.id
    assert found.account_id == account.id
    assert found.remember is True


async def test_urls_match_literally(
    account_repo: AccountRepository, mapping_repo: RepositoryMappingRepository
):
    account = await account_repo.create("alice")
    await mapping_repo.set("https://github.com/org/repo", account.id, True)

    assert await mapping_repo.get_by_url("https://github.com/org/repo.git") is None
    assert await mapping_repo.get_by_url("https://github.com/org/repo/") is None
    assert await mapping_repo.get_by_url("https://github.com/Org/Repo") is None


async def test_set_replaces_existing_mapping(
    account_repo: AccountRepository, mapping_repo: RepositoryMappingRepository
):
    alice = await account_repo.create("alice")
    bob = await account_repo.create("bob")
    url = "https://github.com/org/repo"

    first = await mapping_repo.set(url, alice.id, True)
    second = await mapping_repo.set(url, bob.id, False)

    mappings = await mapping_repo.list_all()
    assert len(mappings) == 1
    assert mappings[0].id == second.id != first.id
    assert (await mapping_repo.get_by_url(url)).account_id == bob.id


async def test_delete(
    account_repo: AccountRepository, mapping_repo: RepositoryMappingRepository
):
    account = await account_repo.create("alice")
    mapping = await mapping_repo.set("https://github.com/org/repo", account.id, True)

    assert await mapping_repo.delete(mapping.id) is True
    assert await mapping_repo.delete(mapping.id) is False
    assert await mapping_repo.list_all() == []
