"""Tests for KeyringSecretStore against an in-memory keyring backend."""

import pytest
from keyring.errors import KeyringLocked, PasswordDeleteError

from gitswitchhub.exceptions import SecretNotFoundError, SecretStoreError
from gitswitchhub.secrets import KeyringSecretStore


class FakeKeyring:
    """Implements the get/set/delete_password calls of the keyring module."""

    def __init__(self) -> None:
        self.items: dict[tuple[str, str], str] = {}
        self.locked = False

    def _check(self) -> None:
        if self.locked:
            raise KeyringLocked("keychain is locked")

    def get_password(self, service: str, username: str) -> str | None:
        self._check()
        return self.items.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self._check()
        self.items[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        self._check()
        if (service, username) not in self.items:
            raise PasswordDeleteError("not found")
        del self.items[(service, username)]


@pytest.fixture
def backend() -> FakeKeyring:
    return FakeKeyring()


@pytest.fixture
def store(backend: FakeKeyring) -> KeyringSecretStore:
    return KeyringSecretStore(service_name="gitswitchhub", backend=backend)


class TestKeyringSecretStore:
    def test_store_uses_namespaced_key(
        self, store: KeyringSecretStore, backend: FakeKeyring
    ) -> None:
        store.store("alice", "ghp_alice")

        assert backend.items[("gitswitchhub", "github:alice")] == "ghp_alice"
        assert store.fetch("alice") == "ghp_alice"

    def test_list_tracks_index(self, store: KeyringSecretStore) -> None:
        store.store("alice", "a")
        store.store("bob", "b")
        store.store("alice", "a2")

        assert store.list() == {"alice", "bob"}

        store.delete("alice")
        assert store.list() == {"bob"}

    def test_fetch_missing(self, store: KeyringSecretStore) -> None:
        with pytest.raises(SecretNotFoundError):
            store.fetch("nobody")

    def test_delete_missing_is_noop(self, store: KeyringSecretStore) -> None:
        store.delete("nobody")
        assert store.list() == set()

    def test_backend_errors_are_wrapped(
        self, store: KeyringSecretStore, backend: FakeKeyring
    ) -> None:
        backend.locked = True

        with pytest.raises(SecretStoreError):
            store.store("alice", "a")
        with pytest.raises(SecretStoreError):
            store.fetch("alice")
        with pytest.raises(SecretStoreError):
            store.list()

    def test_corrupted_index_reads_as_empty(
        self, store: KeyringSecretStore, backend: FakeKeyring
    ) -> None:
        backend.items[("gitswitchhub.index", "github")] = "not json"
        assert store.list() == set()

    def test_index_lives_in_its_own_service(
        self, store: KeyringSecretStore, backend: FakeKeyring
    ) -> None:
        store.store("alice", "a")

        assert backend.items[("gitswitchhub.index", "github")] == '["alice"]'
        assert ("gitswitchhub", "github::index") not in backend.items

    def test_colon_key_does_not_clobber_index(self, store: KeyringSecretStore) -> None:
        store.store("alice", "a")
        store.store(":index", "not-an-index")

        assert store.list() == {"alice", ":index"}
        assert store.fetch(":index") == "not-an-index"
        assert store.fetch("alice") == "a"

    def test_non_list_index_reads_as_empty(
        self, store: KeyringSecretStore, backend: FakeKeyring
    ) -> None:
        backend.items[("gitswitchhub.index", "github")] = "42"
        assert store.list() == set()
