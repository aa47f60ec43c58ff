"""Consolidated exception hierarchy for GitSwitchHub.

All exceptions use proper exception chaining with the `from` keyword.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from typing import Any


class ErrorType(StrEnum):
    """Error type codes used in diagnostics and structured logs."""

    MALFORMED_REQUEST = "malformed_request"
    NO_ACCOUNTS = "no_accounts_configured"
    NO_TOKEN = "no_token_for_account"
    INVALID_TOKEN = "invalid_token"
    DEVICE_FLOW = "device_flow_error"
    DENIED = "device_flow_denied"
    EXPIRED = "device_flow_expired"
    TIMEOUT = "device_flow_timeout"
    TRANSPORT = "transport_error"
    PROCESS = "process_error"
    SECRET_STORE = "secret_store_error"
    NOT_FOUND = "not_found"
    DATABASE = "database_error"
    CONFIGURATION = "configuration_error"
    INTERNAL = "internal_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class GitSwitchHubError(Exception):
    """Base exception for all GitSwitchHub errors.

    All exceptions inherit from this base class for easy catching.
    """

    error_type: ErrorType = ErrorType.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_type is not None:
            self.error_type = error_type
        self.details = details or {}


# ============================================================================
# Credential Helper & Resolution Errors
# ============================================================================


class MalformedRequestError(GitSwitchHubError):
    """The credential request does not describe a usable origin."""

    error_type = ErrorType.MALFORMED_REQUEST

    def __init__(self, message: str = "No repository URL found") -> None:
        super().__init__(message)


class NoAccountsConfiguredError(GitSwitchHubError):
    """No GitHub accounts are configured."""

    error_type = ErrorType.NO_ACCOUNTS

    def __init__(self, message: str = "No GitHub accounts configured") -> None:
        super().__init__(message)


class NoTokenForAccountError(GitSwitchHubError):
    """The selected account has no secret in the secret store."""

    error_type = ErrorType.NO_TOKEN

    def __init__(self, username: str) -> None:
        super().__init__(
            f"No token found for account '{username}'",
            details={"username": username},
        )
        self.username = username


class AccountNotFoundError(GitSwitchHubError):
    """Account not found."""

    error_type = ErrorType.NOT_FOUND

    def __init__(self, account: str) -> None:
        super().__init__(f"Account '{account}' not found", details={"account": account})
        self.account = account


class MappingNotFoundError(GitSwitchHubError):
    """Repository mapping not found."""

    error_type = ErrorType.NOT_FOUND

    def __init__(self, mapping_id: str) -> None:
        super().__init__(f"Repository mapping '{mapping_id}' not found")
        self.mapping_id = mapping_id


# ============================================================================
# Provider (GitHub) Errors
# ============================================================================


class ProviderTransportError(GitSwitchHubError):
    """Network failure while talking to the hosting provider."""

    error_type = ErrorType.TRANSPORT


class InvalidTokenError(GitSwitchHubError):
    """The provider rejected the token, or failed to confirm it."""

    error_type = ErrorType.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class DeviceFlowError(GitSwitchHubError):
    """Device authorization flow failed."""

    error_type = ErrorType.DEVICE_FLOW

    def __init__(
        self,
        message: str,
        *,
        provider_error: str | None = None,
        status_code: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if provider_error:
            details["provider_error"] = provider_error
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details)
        self.provider_error = provider_error
        self.status_code = status_code


class DeviceFlowDeniedError(DeviceFlowError):
    """The user declined the authorization request."""

    error_type = ErrorType.DENIED

    def __init__(self, message: str = "Device flow denied") -> None:
        super().__init__(message, provider_error="access_denied")


class DeviceFlowExpiredError(DeviceFlowError):
    """The device code expired before the user authorized it."""

    error_type = ErrorType.EXPIRED

    def __init__(self, message: str = "Device code expired") -> None:
        super().__init__(message, provider_error="expired_token")


class DeviceFlowTimeoutError(DeviceFlowError):
    """Polling gave up before the provider reported a terminal state."""

    error_type = ErrorType.TIMEOUT

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Device flow timeout after {attempts} attempts")
        self.attempts = attempts


# ============================================================================
# Storage Errors
# ============================================================================


class SecretStoreError(GitSwitchHubError):
    """Error occurred during secret store operations."""

    error_type = ErrorType.SECRET_STORE


class SecretNotFoundError(SecretStoreError):
    """No secret is stored under the requested account key."""

    def __init__(self, account_key: str) -> None:
        super().__init__("Item not found", details={"account_key": account_key})
        self.account_key = account_key


class DatabaseError(GitSwitchHubError):
    """Persistence layer failure."""

    error_type = ErrorType.DATABASE


# ============================================================================
# Process & Configuration Errors
# ============================================================================


class ProcessError(GitSwitchHubError):
    """An external command failed."""

    error_type = ErrorType.PROCESS

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        stderr: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if command:
            details["command"] = command
        if stderr:
            details["stderr"] = stderr
        super().__init__(message, details=details)
        self.stderr = stderr


class GitConfigError(ProcessError):
    """Reading or writing git's global configuration failed."""


class SSHError(ProcessError):
    """SSH key or config operation failed."""


class ConfigurationError(GitSwitchHubError):
    """Raised when configuration loading or validation fails."""

    error_type = ErrorType.CONFIGURATION


__all__ = [
    # Enums
    "ErrorType",
    # Base
    "GitSwitchHubError",
    # Credential helper & resolution
    "MalformedRequestError",
    "NoAccountsConfiguredError",
    "NoTokenForAccountError",
    "AccountNotFoundError",
    "MappingNotFoundError",
    # Provider
    "ProviderTransportError",
    "InvalidTokenError",
    "DeviceFlowError",
    "DeviceFlowDeniedError",
    "DeviceFlowExpiredError",
    "DeviceFlowTimeoutError",
    # Storage
    "SecretStoreError",
    "SecretNotFoundError",
    "DatabaseError",
    # Process & configuration
    "ProcessError",
    "GitConfigError",
    "SSHError",
    "ConfigurationError",
]
