"""Abstract base class for secret storage."""

import threading
from abc import ABC, abstractmethod


class SecretStore(ABC):
    """Key/value store for account tokens.

    ``account_key`` is the account's username. Implementations derive the
    backing key as ``<namespace>:<account_key>``, so storing twice under one
    username overwrites. Keys are case-preserving: ``Alice`` and ``alice``
    are distinct entries.

    Secrets must never be logged or written anywhere other than the backing
    store.
    """

    def __init__(self, namespace: str = "github") -> None:
        self.namespace = namespace
        self._lock = threading.Lock()

    def backing_key(self, account_key: str) -> str:
        """Namespaced key under which ``account_key``'s secret is kept."""
        return f"{self.namespace}:{account_key}"

    def account_key_from(self, backing_key: str) -> str | None:
        """Inverse of :meth:`backing_key`; None for keys outside the namespace."""
        prefix = f"{self.namespace}:"
        if not backing_key.startswith(prefix):
            return None
        return backing_key[len(prefix) :]

    @abstractmethod
    def store(self, account_key: str, secret: str) -> None:
        """Store (or overwrite) the secret for an account.

        Raises:
            SecretStoreError: If the backend rejects the write

        """

    @abstractmethod
    def fetch(self, account_key: str) -> str:
        """Fetch the secret for an account.

        Raises:
            SecretNotFoundError: If nothing is stored for ``account_key``
            SecretStoreError: If the backend cannot be read

        """

    @abstractmethod
    def delete(self, account_key: str) -> None:
        """Delete an account's secret. Deleting a missing key is a no-op."""

    @abstractmethod
    def list(self) -> set[str]:
        """Account keys that currently have a stored secret."""

    @abstractmethod
    def get_location(self) -> str:
        """Human-readable description of where secrets are stored."""
