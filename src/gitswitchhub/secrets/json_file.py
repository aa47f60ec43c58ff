"""JSON file secret store for hosts without a keychain."""

import os
from pathlib import Path

import orjson
from structlog import get_logger

from gitswitchhub.exceptions import SecretNotFoundError, SecretStoreError
from gitswitchhub.secrets.base import SecretStore


logger = get_logger(__name__)


class JsonFileSecretStore(SecretStore):
    """Secrets in a JSON file readable only by the owner (mode 0600).

    The file is not encrypted; protecting it is left to the filesystem.
    """

    def __init__(self, file_path: Path, namespace: str = "github") -> None:
        """Initialize storage with file path.

        Args:
            file_path: Path to the JSON file holding the secrets
            namespace: Prefix of every stored key

        """
        super().__init__(namespace)
        self.file_path = file_path

    def _load_all(self) -> dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            data = orjson.loads(self.file_path.read_bytes())
        except orjson.JSONDecodeError as e:
            raise SecretStoreError(
                f"Secrets file {self.file_path} is corrupted: {e}"
            ) from e
        except OSError as e:
            raise SecretStoreError(
                f"Cannot read secrets file {self.file_path}: {e}"
            ) from e
        secrets = data.get("secrets", {}) if isinstance(data, dict) else None
        if not isinstance(secrets, dict):
            raise SecretStoreError(
                f"Secrets file {self.file_path} has an unexpected layout"
            )
        return secrets

    def _save_all(self, secrets: dict[str, str]) -> None:
        data = {"secrets": secrets, "version": 1}
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
            os.chmod(self.file_path, 0o600)
        except OSError as e:
            raise SecretStoreError(
                f"Cannot write secrets file {self.file_path}: {e}"
            ) from e

    def store(self, account_key: str, secret: str) -> None:
        with self._lock:
            secrets = self._load_all()
            secrets[self.backing_key(account_key)] = secret
            self._save_all(secrets)
        logger.debug("secret_stored", account_key=account_key, backend="file")

    def fetch(self, account_key: str) -> str:
        with self._lock:
            secrets = self._load_all()
        try:
            return secrets[self.backing_key(account_key)]
        except KeyError:
            raise SecretNotFoundError(account_key) from None

    def delete(self, account_key: str) -> None:
        with self._lock:
            secrets = self._load_all()
            if secrets.pop(self.backing_key(account_key), None) is not None:
                self._save_all(secrets)
                logger.debug("secret_deleted", account_key=account_key, backend="file")

    def list(self) -> set[str]:
        with self._lock:
            secrets = self._load_all()
        keys = (self.account_key_from(k) for k in secrets)
        return {k for k in keys if k is not None}

    def get_location(self) -> str:
        return str(self.file_path)
