"""Core helpers shared across gitswitchhub."""

from gitswitchhub.core.logging import configure_logging
from gitswitchhub.core.system import get_default_data_dir, get_home_dir


__all__ = ["configure_logging", "get_default_data_dir", "get_home_dir"]
