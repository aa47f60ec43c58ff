"""Repository layer for database operations."""

from gitswitchhub.db.repositories.account_repo import AccountRepository
from gitswitchhub.db.repositories.mapping_repo import RepositoryMappingRepository


__all__ = ["AccountRepository", "RepositoryMappingRepository"]
