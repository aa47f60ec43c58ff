from pathlib import Path

from gitswitchhub.core.system import get_config_dir, get_default_data_dir


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for gitswitchhub.

    Searches in the following order:
    1. .gitswitchhub.toml in current directory
    2. config.toml in the data directory (~/.gitswitchhub/)
    3. config.toml in user config directory/gitswitchhub/ (platform-specific)
    """
    candidates = [
        Path(".gitswitchhub.toml").resolve(),
        get_default_data_dir() / "config.toml",
        get_config_dir() / "config.toml",
    ]

    for candidate in candidates:
        if candidate.exists() and candidate.is_file():
            return candidate

    return None
