"""Process-local secret store."""

from gitswitchhub.exceptions import SecretNotFoundError
from gitswitchhub.secrets.base import SecretStore


class MemorySecretStore(SecretStore):
    """Secrets held in a dict owned by this instance.

    Nothing survives the process; meant for tests and dry runs.
    """

    def __init__(self, namespace: str = "github") -> None:
        super().__init__(namespace)
        self._items: dict[str, str] = {}

    def store(self, account_key: str, secret: str) -> None:
        with self._lock:
            self._items[self.backing_key(account_key)] = secret

    def fetch(self, account_key: str) -> str:
        with self._lock:
            try:
                return self._items[self.backing_key(account_key)]
            except KeyError:
                raise SecretNotFoundError(account_key) from None

    def delete(self, account_key: str) -> None:
        with self._lock:
            self._items.pop(self.backing_key(account_key), None)

    def list(self) -> set[str]:
        with self._lock:
            keys = (self.account_key_from(k) for k in self._items)
            return {k for k in keys if k is not None}

    def get_location(self) -> str:
        return "in-memory (not persisted)"
