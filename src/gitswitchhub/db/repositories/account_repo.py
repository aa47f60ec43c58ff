"""Account repository for database operations."""

from sqlalchemy import delete
from sqlmodel import col, select

from gitswitchhub.db.engine import Database
from gitswitchhub.db.models import Account, AuthMethod, RepositoryMapping
from gitswitchhub.utils.id_generator import utc_now_rfc3339


class AccountRepository:
    """Repository for Account operations."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def create(
        self,
        username: str,
        auth_method: AuthMethod = AuthMethod.MANUAL,
        avatar_url: str | None = None,
        created_at: str | None = None,
    ) -> Account:
        """Create a new account."""
        async with self.db.session() as session:
            account = Account(
                username=username,
                auth_method=auth_method.value,
                avatar_url=avatar_url or None,
                created_at=created_at or utc_now_rfc3339(),
            )
            session.add(account)
            await session.flush()
            await session.refresh(account)
            return account

    async def upsert(
        self,
        username: str,
        auth_method: AuthMethod,
        avatar_url: str | None = None,
    ) -> tuple[Account, bool]:
        """Create the account, or refresh an existing one with that username.

        Returns:
            (account, created) where created is False if the username existed

        """
        async with self.db.session() as session:
            result = await session.execute(
                select(Account).where(Account.username == username)
            )
            account = result.scalar_one_or_none()
            created = account is None
            if account is None:
                account = Account(
                    username=username,
                    auth_method=auth_method.value,
                    avatar_url=avatar_url or None,
                )
            else:
                account.auth_method = auth_method.value
                if avatar_url:
                    account.avatar_url = avatar_url
            session.add(account)
            await session.flush()
            await session.refresh(account)
            return account, created

    async def get(self, account_id: str) -> Account | None:
        """Get an account by id."""
        async with self.db.session() as session:
            result = await session.execute(select(Account).where(Account.id == account_id))
            return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Account | None:
        """Get an account by username (exact, case-sensitive match)."""
        async with self.db.session() as session:
            result = await session.execute(
                select(Account).where(Account.username == username)
            )
            return result.scalar_one_or_none()

    async def list_all(self) -> list[Account]:
        """List all accounts, most recently created first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(Account).order_by(
                    col(Account.created_at).desc(), col(Account.username)
                )
            )
            return list(result.scalars().all())

    async def delete_with_mappings(self, account_id: str) -> bool:
        """Delete an account and every mapping that references it.

        Mappings go first, in the same transaction, so no dangling mapping is
        ever left behind by this call.

        Returns:
            True if the account was deleted, False if not found

        """
        async with self.db.session() as session:
            result = await session.execute(select(Account).where(Account.id == account_id))
            account = result.scalar_one_or_none()
            await session.execute(
                delete(RepositoryMapping).where(
                    col(RepositoryMapping.account_id) == account_id
                )
            )
            if account is None:
                return False
            await session.delete(account)
            return True
