"""Pydantic models for GitHub OAuth and API responses."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class DeviceCodeResponse(BaseModel):
    """Response of ``POST /login/device/code``."""

    model_config = ConfigDict(extra="ignore")

    device_code: str
    user_code: str
    verification_uri: str
    verification_uri_complete: str | None = None
    expires_in: int | None = None
    interval: int | None = None


class DeviceTokenResponse(BaseModel):
    """Successful response of ``POST /login/oauth/access_token``."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    scope: str = ""

    def __repr__(self) -> str:
        return f"DeviceTokenResponse(token_type={self.token_type!r}, scope={self.scope!r})"

    __str__ = __repr__


class GitHubUser(BaseModel):
    """Identity returned by ``GET /user``."""

    model_config = ConfigDict(extra="ignore")

    login: str
    id: int
    avatar_url: str = ""
    name: str | None = None
    email: str | None = None


class TokenInfo(BaseModel):
    """Identity and granted scopes of a token."""

    user: GitHubUser
    scopes: set[str] = Field(default_factory=set)


class DeviceFlowState(StrEnum):
    """States of the device authorization exchange."""

    IDLE = "idle"
    AWAITING_USER_AUTHORIZATION = "awaiting_user_authorization"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    DENIED = "denied"
    EXPIRED = "expired"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {
            DeviceFlowState.SUCCEEDED,
            DeviceFlowState.DENIED,
            DeviceFlowState.EXPIRED,
            DeviceFlowState.FAILED,
        }


@dataclass
class DeviceFlowSession:
    """In-memory state of one pending device authorization.

    Only the polling loop mutates it (``attempts`` and ``waited``, and
    ``interval`` on ``slow_down``). ``wait_budget`` is the number of seconds
    the loop may sleep in total before the code expires. Never persisted.
    """

    device_code: str
    user_code: str
    verification_uri: str
    interval: int
    expires_at: datetime
    max_attempts: int
    wait_budget: int
    verification_uri_complete: str | None = None
    attempts: int = 0
    waited: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_response(
        cls,
        response: DeviceCodeResponse,
        default_interval: int,
        default_max_attempts: int,
    ) -> "DeviceFlowSession":
        """Build a session, capping attempts so total waiting fits ``expires_in``."""
        interval = response.interval or default_interval
        if response.expires_in:
            expires_in = response.expires_in
            max_attempts = max(1, expires_in // interval)
        else:
            max_attempts = default_max_attempts
            expires_in = max_attempts * interval
        return cls(
            device_code=response.device_code,
            user_code=response.user_code,
            verification_uri=response.verification_uri,
            verification_uri_complete=response.verification_uri_complete,
            interval=interval,
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
            max_attempts=max_attempts,
            wait_budget=expires_in,
        )

    def __repr__(self) -> str:
        return (
            f"DeviceFlowSession(user_code={self.user_code!r}, "
            f"verification_uri={self.verification_uri!r}, interval={self.interval}, "
            f"attempts={self.attempts}/{self.max_attempts})"
        )


class PollStatus(StrEnum):
    """Classification of one access-token poll response."""

    PENDING = "authorization_pending"
    SLOW_DOWN = "slow_down"
    DENIED = "access_denied"
    EXPIRED = "expired_token"
    SUCCESS = "success"
    ERROR = "error"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class PollResult:
    """Tagged result of one poll: a status plus its payload, if any."""

    status: PollStatus
    token: DeviceTokenResponse | None = None
    error: str | None = None
    error_description: str | None = None
    interval: int | None = None
