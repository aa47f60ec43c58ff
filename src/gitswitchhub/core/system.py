"""Platform directory helpers."""

import os
from pathlib import Path

import platformdirs

from gitswitchhub.exceptions import ConfigurationError


APP_NAME = "gitswitchhub"


def get_home_dir() -> Path:
    """Resolve the user's home directory.

    Raises:
        ConfigurationError: If no home directory can be determined at all
    """
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE")
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigurationError("HOME directory not found") from e


def get_default_data_dir() -> Path:
    """Get the directory holding the database and file-backed secrets."""
    return get_home_dir() / f".{APP_NAME}"


def get_ssh_dir() -> Path:
    """Get the user's ~/.ssh directory."""
    return get_home_dir() / ".ssh"


def get_config_dir() -> Path:
    """Get the platform config directory for gitswitchhub.

    Returns:
        Path to the user config directory (cross-platform).
    """
    return Path(platformdirs.user_config_dir(APP_NAME))
