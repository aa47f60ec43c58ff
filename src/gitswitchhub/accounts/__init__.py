"""Account resolution and management."""

from gitswitchhub.accounts.resolver import (
    AccountResolver,
    AccountSelectionPolicy,
    Credential,
    MostRecentAccountPolicy,
)
from gitswitchhub.accounts.service import AccountService, ConnectionTestResult


__all__ = [
    "AccountResolver",
    "AccountSelectionPolicy",
    "AccountService",
    "ConnectionTestResult",
    "Credential",
    "MostRecentAccountPolicy",
]
