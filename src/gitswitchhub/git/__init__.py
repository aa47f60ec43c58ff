"""git integration: the credential helper protocol and its registration."""

from gitswitchhub.git.config import (
    GitHelperStatus,
    helper_command,
    helper_status,
    install_helper,
)
from gitswitchhub.git.credential_helper import (
    CredentialOperation,
    CredentialProtocolHandler,
    CredentialRequest,
    format_response,
)


__all__ = [
    "CredentialOperation",
    "CredentialProtocolHandler",
    "CredentialRequest",
    "GitHelperStatus",
    "format_response",
    "helper_command",
    "helper_status",
    "install_helper",
]
