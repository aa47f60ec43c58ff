"""Decides which stored identity answers a credential request.

Resolution order for an origin:

1. A remembered mapping whose account still exists. Its token is used, or
   resolution fails. Another account is never substituted.
2. Otherwise the injected selection policy picks an account. By default
   this is the most recently created one.

Origins are compared literally: ``https://github.com/org/repo`` and
``https://github.com/org/repo.git`` are different origins.
"""

from dataclasses import dataclass
from typing import Protocol

from structlog import get_logger

from gitswitchhub.db.models import Account, RepositoryMapping
from gitswitchhub.db.repositories import AccountRepository, RepositoryMappingRepository
from gitswitchhub.exceptions import (
    AccountNotFoundError,
    MappingNotFoundError,
    NoAccountsConfiguredError,
    NoTokenForAccountError,
    SecretNotFoundError,
)
from gitswitchhub.secrets import SecretStore


logger = get_logger(__name__)


@dataclass(frozen=True)
class Credential:
    """Username/secret pair handed to git."""

    username: str
    secret: str

    def __repr__(self) -> str:
        return f"Credential(username={self.username!r}, secret='***')"

    __str__ = __repr__


class AccountSelectionPolicy(Protocol):
    """Chooses an account when no mapping applies to an origin."""

    def select(self, origin: str, accounts: list[Account]) -> Account | None:
        """Pick one of ``accounts`` (never empty) for ``origin``, or None."""
        ...


class MostRecentAccountPolicy:
    """Pick the most recently created account.

    Ties on ``created_at`` are broken by username, so the choice is stable for
    a given set of accounts.
    """

    def select(self, origin: str, accounts: list[Account]) -> Account | None:
        if not accounts:
            return None
        # max() keeps the first of equal keys, so username order wins ties
        by_username = sorted(accounts, key=lambda a: a.username)
        return max(by_username, key=lambda a: a.created_at)


class AccountResolver:
    """Maps an origin to the credential git should use."""

    def __init__(
        self,
        accounts: AccountRepository,
        mappings: RepositoryMappingRepository,
        secret_store: SecretStore,
        policy: AccountSelectionPolicy | None = None,
    ) -> None:
        self.accounts = accounts
        self.mappings = mappings
        self.secret_store = secret_store
        self.policy: AccountSelectionPolicy = policy or MostRecentAccountPolicy()

    def _credential_for(self, account: Account) -> Credential:
        try:
            secret = self.secret_store.fetch(account.username)
        except SecretNotFoundError as e:
            raise NoTokenForAccountError(account.username) from e
        return Credential(username=account.username, secret=secret)

    async def _mapped_account(self, origin: str) -> Account | None:
        mapping = await self.mappings.get_by_url(origin)
        if mapping is None:
            return None
        account = await self.accounts.get(mapping.account_id)
        if account is None:
            logger.warning(
                "dangling_repository_mapping",
                mapping_id=mapping.id,
                account_id=mapping.account_id,
            )
        return account

    async def resolve(self, origin: str) -> Credential:
        """Return the credential for ``origin``.

        Raises:
            NoTokenForAccountError: The chosen account has no stored token
            NoAccountsConfiguredError: There is no account to choose from

        """
        account = await self._mapped_account(origin)
        if account is not None:
            logger.debug("account_resolved", source="mapping", username=account.username)
            return self._credential_for(account)

        candidates = await self.accounts.list_all()
        if not candidates:
            raise NoAccountsConfiguredError()

        selected = self.policy.select(origin, candidates)
        if selected is None:
            raise NoAccountsConfiguredError("No account selected for this repository")
        logger.debug("account_resolved", source="policy", username=selected.username)
        return self._credential_for(selected)

    async def set_mapping(
        self, origin: str, account_id: str, remember: bool = True
    ) -> RepositoryMapping:
        """Map ``origin`` to an account, replacing any existing mapping for it."""
        if await self.accounts.get(account_id) is None:
            raise AccountNotFoundError(account_id)
        mapping = await self.mappings.set(origin, account_id, remember)
        logger.info(
            "repository_mapping_set",
            remote_url=origin,
            account_id=account_id,
            remember=remember,
        )
        return mapping

    async def remove_mapping(self, mapping_id: str) -> None:
        """Delete a mapping by id."""
        if not await self.mappings.delete(mapping_id):
            raise MappingNotFoundError(mapping_id)
        logger.info("repository_mapping_removed", mapping_id=mapping_id)

    async def list_mappings(self) -> list[RepositoryMapping]:
        return await self.mappings.list_all()
