"""Database package for SQLite persistence."""

from gitswitchhub.db.engine import Database, init_db
from gitswitchhub.db.models import Account, AuthMethod, RepositoryMapping


__all__ = [
    "Account",
    "AuthMethod",
    "Database",
    "RepositoryMapping",
    "init_db",
]
