"""Repository mapping repository for database operations."""

from sqlalchemy import delete
from sqlmodel import col, select

from gitswitchhub.db.engine import Database
from gitswitchhub.db.models import RepositoryMapping


class RepositoryMappingRepository:
    """Repository for RepositoryMapping operations.

    Remote URLs are matched literally: no normalisation of scheme, case,
    trailing slashes or a ``.git`` suffix.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get_by_url(self, remote_url: str) -> RepositoryMapping | None:
        """Get the mapping for an exact remote URL."""
        async with self.db.session() as session:
            result = await session.execute(
                select(RepositoryMapping)
                .where(RepositoryMapping.remote_url == remote_url)
                .order_by(col(RepositoryMapping.created_at).desc())
            )
            return result.scalars().first()

    async def set(
        self, remote_url: str, account_id: str, remember: bool
    ) -> RepositoryMapping:
        """Replace any mapping for ``remote_url`` with a new one."""
        async with self.db.session() as session:
            await session.execute(
                delete(RepositoryMapping).where(
                    col(RepositoryMapping.remote_url) == remote_url
                )
            )
            mapping = RepositoryMapping(
                remote_url=remote_url,
                account_id=account_id,
                remember=remember,
            )
            session.add(mapping)
            await session.flush()
            await session.refresh(mapping)
            return mapping

    async def list_all(self) -> list[RepositoryMapping]:
        """List all mappings, newest first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(RepositoryMapping).order_by(
                    col(RepositoryMapping.created_at).desc()
                )
            )
            return list(result.scalars().all())

    async def delete(self, mapping_id: str) -> bool:
        """Delete a mapping. Returns True if deleted."""
        async with self.db.session() as session:
            result = await session.execute(
                select(RepositoryMapping).where(RepositoryMapping.id == mapping_id)
            )
            mapping = result.scalar_one_or_none()
            if mapping:
                await session.delete(mapping)
                return True
            return False
