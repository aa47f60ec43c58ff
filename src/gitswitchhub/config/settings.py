"""Settings configuration for GitSwitchHub."""

import os
import tomllib
from enum import StrEnum
from pathlib import Path
from typing import Any

import orjson
import structlog
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitswitchhub.config.discovery import find_toml_config_file
from gitswitchhub.core.system import get_default_data_dir
from gitswitchhub.exceptions import ConfigurationError


__all__ = [
    "GitHubSettings",
    "SecretBackend",
    "SecretStoreSettings",
    "Settings",
    "get_settings",
]

logger = structlog.get_logger(__name__)


class SecretBackend(StrEnum):
    """Where account tokens are kept."""

    KEYRING = "keyring"
    FILE = "file"
    MEMORY = "memory"


class GitHubSettings(BaseModel):
    """GitHub OAuth application and API endpoints."""

    client_id: str = Field(
        default="Ov23liA2BpF0gI3E4nUX",
        description="OAuth App client ID used for the device flow",
    )
    scope: str = Field(default="repo,user", description="Requested OAuth scopes")
    oauth_base_url: str = Field(default="https://github.com")
    api_base_url: str = Field(default="https://api.github.com")
    user_agent: str = Field(default="GitSwitchHub/1.0")
    request_timeout: float = Field(default=30.0, gt=0)
    poll_interval_default: int = Field(
        default=5, ge=1, description="Poll interval when the provider sends none"
    )
    max_poll_attempts: int = Field(
        default=60,
        ge=1,
        description="Attempt cap when the provider does not send expires_in",
    )

    @field_validator("oauth_base_url", "api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def device_code_url(self) -> str:
        return f"{self.oauth_base_url}/login/device/code"

    @property
    def access_token_url(self) -> str:
        return f"{self.oauth_base_url}/login/oauth/access_token"


class SecretStoreSettings(BaseModel):
    """Secret store backend selection."""

    backend: SecretBackend = SecretBackend.KEYRING
    service_name: str = Field(
        default="gitswitchhub", description="Keychain service name"
    )
    namespace: str = Field(
        default="github", description="Prefix of every stored account key"
    )
    file_path: Path | None = Field(
        default=None,
        description="Secrets file for the 'file' backend (defaults to data_dir)",
    )


class Settings(BaseSettings):
    """
    Configuration settings for GitSwitchHub.

    Settings are loaded from a TOML file, then environment variables
    (GITSWITCHHUB_ prefix, "__" for nested fields), then explicit overrides.
    """

    model_config = SettingsConfigDict(
        env_prefix="GITSWITCHHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    data_dir: Path = Field(default_factory=get_default_data_dir)
    database_path: Path | None = Field(
        default=None, description="SQLite database file (defaults to data_dir)"
    )
    log_level: str | None = Field(
        default=None, description="Overrides the per-command default log level"
    )
    json_logs: bool = Field(default=False)

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    secrets: SecretStoreSettings = Field(default_factory=SecretStoreSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        if v is None:
            return None
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @model_validator(mode="after")
    def resolve_paths(self) -> "Settings":
        """Expand user paths and place derived files under data_dir."""
        self.data_dir = self.data_dir.expanduser()
        if self.database_path is None:
            self.database_path = self.data_dir / "database.db"
        else:
            self.database_path = self.database_path.expanduser()
        if self.secrets.file_path is None:
            self.secrets.file_path = self.data_dir / "secrets.json"
        return self

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Args:
            toml_path: Path to the TOML configuration file

        Returns:
            dict: Configuration data from the TOML file

        Raises:
            ConfigurationError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Use GITSWITCHHUB_CONFIG_FILE or auto-discover
                - Path or str: Use this specific config file
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("GITSWITCHHUB_CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_toml_config(config_path)
            logger.debug("config_file_loaded", path=str(config_path))

        # kwargs take precedence over the file
        merged_config = {**config_data, **kwargs}
        return cls(**merged_config)


def get_settings(config_path: Path | str | None = None, **overrides: Any) -> Settings:
    """Build settings from file, environment and overrides.

    GITSWITCHHUB_CONFIG_OVERRIDES may hold a JSON object of extra overrides.

    Raises:
        ConfigurationError: If the configuration cannot be loaded
    """
    env_overrides: dict[str, Any] = {}
    overrides_json = os.environ.get("GITSWITCHHUB_CONFIG_OVERRIDES")
    if overrides_json:
        try:
            env_overrides = orjson.loads(overrides_json)
        except orjson.JSONDecodeError as e:
            raise ConfigurationError(
                f"GITSWITCHHUB_CONFIG_OVERRIDES is not valid JSON: {e}"
            ) from e

    try:
        return Settings.from_config(config_path, **{**env_overrides, **overrides})
    except ValueError as e:
        # pydantic's ValidationError subclasses ValueError
        raise ConfigurationError(f"Configuration error: {e}") from e
