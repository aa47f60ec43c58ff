"""SQLModel database models."""

from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from gitswitchhub.utils.id_generator import generate_id, utc_now_rfc3339


class AuthMethod(StrEnum):
    """How an account's token was obtained."""

    DEVICE_FLOW = "device_flow"
    MANUAL = "manual"


class Account(SQLModel, table=True):
    """A GitHub identity. Its token lives in the secret store, never here."""

    __tablename__ = "accounts"

    id: str = Field(default_factory=generate_id, primary_key=True)
    username: str = Field(unique=True, index=True)
    avatar_url: str | None = None
    auth_method: str = Field(default=AuthMethod.MANUAL.value)
    # RFC 3339, fixed width
    created_at: str = Field(default_factory=utc_now_rfc3339, index=True)

    @property
    def created_at_datetime(self) -> datetime:
        return datetime.fromisoformat(self.created_at)


class RepositoryMapping(SQLModel, table=True):
    """Remembered association between a remote origin and an account."""

    __tablename__ = "repository_mappings"

    id: str = Field(default_factory=generate_id, primary_key=True)
    remote_url: str = Field(index=True)
    account_id: str = Field(foreign_key="accounts.id")
    remember: bool = Field(default=False)
    created_at: str = Field(default_factory=utc_now_rfc3339)

    @property
    def created_at_datetime(self) -> datetime:
        return datetime.fromisoformat(self.created_at)
