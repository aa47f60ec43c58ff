"""Platform keychain secret store."""

from typing import Any

import keyring
import orjson
from keyring.errors import KeyringError, PasswordDeleteError
from structlog import get_logger

from gitswitchhub.exceptions import SecretNotFoundError, SecretStoreError
from gitswitchhub.secrets.base import SecretStore


logger = get_logger(__name__)


class KeyringSecretStore(SecretStore):
    """Secrets in the OS keychain (macOS Keychain, Secret Service, Windows).

    Keychains cannot enumerate entries portably, so the set of account keys is
    kept in an index entry filed under its own ``<service_name>.index``
    service, where no account key can land on it.
    """

    def __init__(
        self,
        service_name: str = "gitswitchhub",
        namespace: str = "github",
        backend: Any = None,
    ) -> None:
        """Initialize the keychain store.

        Args:
            service_name: Keychain service the entries are filed under
            namespace: Prefix of every stored key
            backend: Object with keyring's get/set/delete_password API;
                defaults to the active ``keyring`` backend

        """
        super().__init__(namespace)
        self.service_name = service_name
        self._backend = backend if backend is not None else keyring

    @property
    def _index_service(self) -> str:
        return f"{self.service_name}.index"

    def _read_index(self) -> set[str]:
        raw = self._backend.get_password(self._index_service, self.namespace)
        if not raw:
            return set()
        try:
            return set(orjson.loads(raw))
        except (orjson.JSONDecodeError, TypeError):
            logger.warning("keyring_index_corrupted", service=self.service_name)
            return set()

    def _write_index(self, keys: set[str]) -> None:
        self._backend.set_password(
            self._index_service, self.namespace, orjson.dumps(sorted(keys)).decode()
        )

    def store(self, account_key: str, secret: str) -> None:
        with self._lock:
            try:
                self._backend.set_password(
                    self.service_name, self.backing_key(account_key), secret
                )
                index = self._read_index()
                if account_key not in index:
                    index.add(account_key)
                    self._write_index(index)
            except KeyringError as e:
                raise SecretStoreError(f"Failed to store token: {e}") from e
        logger.debug("secret_stored", account_key=account_key, backend="keyring")

    def fetch(self, account_key: str) -> str:
        with self._lock:
            try:
                secret = self._backend.get_password(
                    self.service_name, self.backing_key(account_key)
                )
            except KeyringError as e:
                raise SecretStoreError(f"Failed to read token: {e}") from e
        if secret is None:
            raise SecretNotFoundError(account_key)
        return str(secret)

    def delete(self, account_key: str) -> None:
        with self._lock:
            try:
                try:
                    self._backend.delete_password(
                        self.service_name, self.backing_key(account_key)
                    )
                except PasswordDeleteError:
                    logger.debug("secret_already_absent", account_key=account_key)
                index = self._read_index()
                if account_key in index:
                    index.discard(account_key)
                    self._write_index(index)
            except KeyringError as e:
                raise SecretStoreError(f"Failed to delete token: {e}") from e

    def list(self) -> set[str]:
        with self._lock:
            try:
                return self._read_index()
            except KeyringError as e:
                raise SecretStoreError(f"Failed to list tokens: {e}") from e

    def get_location(self) -> str:
        return f"system keychain (service '{self.service_name}')"
