"""GitHub OAuth device flow and token validation."""

from gitswitchhub.github.device_flow import DeviceFlowClient, classify_poll_response
from gitswitchhub.github.models import (
    DeviceCodeResponse,
    DeviceFlowSession,
    DeviceFlowState,
    DeviceTokenResponse,
    GitHubUser,
    PollResult,
    PollStatus,
    TokenInfo,
)
from gitswitchhub.github.validator import TokenValidator


__all__ = [
    "DeviceCodeResponse",
    "DeviceFlowClient",
    "DeviceFlowSession",
    "DeviceFlowState",
    "DeviceTokenResponse",
    "GitHubUser",
    "PollResult",
    "PollStatus",
    "TokenInfo",
    "TokenValidator",
    "classify_poll_response",
]
