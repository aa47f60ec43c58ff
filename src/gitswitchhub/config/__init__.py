"""Configuration module for GitSwitchHub."""

from gitswitchhub.exceptions import ConfigurationError

from .settings import (
    GitHubSettings,
    SecretBackend,
    SecretStoreSettings,
    Settings,
    get_settings,
)


__all__ = [
    "ConfigurationError",
    "GitHubSettings",
    "SecretBackend",
    "SecretStoreSettings",
    "Settings",
    "get_settings",
]
