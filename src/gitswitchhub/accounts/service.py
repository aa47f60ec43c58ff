"""Account management: adding, removing and checking GitHub identities."""

from collections.abc import Callable
from dataclasses import dataclass, field

from structlog import get_logger

from gitswitchhub.db.models import Account, AuthMethod
from gitswitchhub.db.repositories import AccountRepository
from gitswitchhub.exceptions import (
    AccountNotFoundError,
    InvalidTokenError,
    ProviderTransportError,
    SecretNotFoundError,
)
from gitswitchhub.github import DeviceFlowClient, DeviceFlowSession, TokenValidator
from gitswitchhub.secrets import SecretStore


logger = get_logger(__name__)


@dataclass
class ConnectionTestResult:
    """Outcome of checking a stored token against GitHub."""

    success: bool
    message: str
    scopes: set[str] | None = field(default=None)


class AccountService:
    """Creates and removes accounts, keeping the database and secret store in step."""

    def __init__(
        self,
        accounts: AccountRepository,
        secret_store: SecretStore,
        validator: TokenValidator,
        device_flow: DeviceFlowClient | None = None,
    ) -> None:
        self.accounts = accounts
        self.secret_store = secret_store
        self.validator = validator
        self.device_flow = device_flow

    async def list_accounts(self) -> list[Account]:
        """All accounts, newest first."""
        return await self.accounts.list_all()

    async def get_account(self, username: str) -> Account:
        account = await self.accounts.get_by_username(username)
        if account is None:
            raise AccountNotFoundError(username)
        return account

    async def _save(self, token: str, auth_method: AuthMethod) -> Account:
        # The username always comes from GitHub, never from user input
        user = await self.validator.validate(token)
        self.secret_store.store(user.login, token)
        account, created = await self.accounts.upsert(
            username=user.login,
            auth_method=auth_method,
            avatar_url=user.avatar_url,
        )
        logger.info(
            "account_added" if created else "account_token_replaced",
            username=account.username,
            auth_method=auth_method.value,
        )
        return account

    async def add_with_token(self, token: str) -> Account:
        """Add (or refresh) an account from a personal access token.

        Raises:
            InvalidTokenError: If GitHub does not accept the token

        """
        return await self._save(token.strip(), AuthMethod.MANUAL)

    async def add_with_device_flow(
        self, on_user_code: Callable[[DeviceFlowSession], None] | None = None
    ) -> Account:
        """Mint a token through the device flow and add its account.

        Raises:
            DeviceFlowError: Denied, expired, timed out or failed flow
            InvalidTokenError: If the minted token does not validate

        """
        if self.device_flow is None:
            raise RuntimeError("AccountService was created without a device flow client")
        token = await self.device_flow.run(on_user_code)
        return await self._save(token.access_token, AuthMethod.DEVICE_FLOW)

    async def remove_account(self, username: str) -> None:
        """Remove an account, its mappings and its secret.

        Mappings and the account row go in one transaction; the secret is
        deleted afterwards.
        """
        account = await self.get_account(username)
        await self.accounts.delete_with_mappings(account.id)
        self.secret_store.delete(account.username)
        logger.info("account_removed", username=account.username)

    async def test_connection(self, username: str) -> ConnectionTestResult:
        """Check the stored token for ``username`` against GitHub."""
        try:
            token = self.secret_store.fetch(username)
        except SecretNotFoundError:
            return ConnectionTestResult(
                success=False, message=f"No token stored for {username}"
            )

        try:
            info = await self.validator.inspect(token)
        except (InvalidTokenError, ProviderTransportError) as e:
            return ConnectionTestResult(
                success=False, message=f"Connection failed: {e.message}"
            )
        return ConnectionTestResult(
            success=True,
            message=f"Connected as {info.user.login}",
            scopes=info.scopes,
        )
