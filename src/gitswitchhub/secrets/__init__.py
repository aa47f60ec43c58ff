"""Secret storage for account tokens."""

from gitswitchhub.config.settings import SecretBackend, SecretStoreSettings
from gitswitchhub.exceptions import ConfigurationError
from gitswitchhub.secrets.base import SecretStore
from gitswitchhub.secrets.json_file import JsonFileSecretStore
from gitswitchhub.secrets.keyring_store import KeyringSecretStore
from gitswitchhub.secrets.memory import MemorySecretStore


def create_secret_store(settings: SecretStoreSettings) -> SecretStore:
    """Build the secret store backend selected in settings."""
    if settings.backend == SecretBackend.FILE:
        if settings.file_path is None:
            raise ConfigurationError("secrets.file_path is required for the file backend")
        return JsonFileSecretStore(settings.file_path, namespace=settings.namespace)
    if settings.backend == SecretBackend.MEMORY:
        return MemorySecretStore(namespace=settings.namespace)
    return KeyringSecretStore(
        service_name=settings.service_name, namespace=settings.namespace
    )


__all__ = [
    "JsonFileSecretStore",
    "KeyringSecretStore",
    "MemorySecretStore",
    "SecretStore",
    "create_secret_store",
]
