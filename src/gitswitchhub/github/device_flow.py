"""OAuth 2.0 device authorization flow against GitHub.

State machine::

    IDLE -> AWAITING_USER_AUTHORIZATION -> POLLING -> SUCCEEDED
                                                   -> DENIED
                                                   -> EXPIRED
                                                   -> FAILED

The poll loop is the only place in gitswitchhub that retries. It waits the
provider-supplied interval between polls and does not add its own backoff.
"""

import asyncio
import urllib.parse
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import ValidationError
from structlog import get_logger

from gitswitchhub.config.settings import GitHubSettings
from gitswitchhub.exceptions import (
    DeviceFlowDeniedError,
    DeviceFlowError,
    DeviceFlowExpiredError,
    DeviceFlowTimeoutError,
    ProviderTransportError,
)
from gitswitchhub.github.http import GitHubHTTPClient, log_http_error_compact
from gitswitchhub.github.models import (
    DeviceCodeResponse,
    DeviceFlowSession,
    DeviceFlowState,
    DeviceTokenResponse,
    PollResult,
    PollStatus,
)


logger = get_logger(__name__)

DEVICE_CODE_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"
# RFC 8628 section 3.5: slow_down adds 5 seconds when no interval is echoed
SLOW_DOWN_INCREMENT = 5

_ERROR_STATUSES = {
    "authorization_pending": PollStatus.PENDING,
    "slow_down": PollStatus.SLOW_DOWN,
    "access_denied": PollStatus.DENIED,
    "expired_token": PollStatus.EXPIRED,
}

SleepFunc = Callable[[float], Awaitable[None]]


def _decode_body(response: httpx.Response) -> dict[str, Any] | None:
    """Decode a JSON body, falling back to form encoding."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        return data

    form = urllib.parse.parse_qs(response.text.strip(), strict_parsing=False)
    if form and ("error" in form or "access_token" in form):
        return {key: values[0] for key, values in form.items()}
    return None


def _classify_text(text: str) -> PollResult:
    """Last-resort classification by substring, for bodies that decode to nothing.

    Mirrors how GitHub's plain-text error bodies have historically been read.
    """
    for marker, status in _ERROR_STATUSES.items():
        if marker in text:
            return PollResult(status=status, error=marker)
    return PollResult(status=PollStatus.UNRECOGNIZED)


def _parse_interval(value: Any) -> int | None:
    """Read a provider interval; anything that is not a positive integer is ignored."""
    try:
        interval = int(value)
    except (TypeError, ValueError):
        return None
    return interval if interval > 0 else None


def classify_poll_response(response: httpx.Response) -> PollResult:
    """Decode an access-token poll response into a tagged :class:`PollResult`."""
    data = _decode_body(response)
    if data is None:
        return _classify_text(response.text)

    if data.get("access_token"):
        try:
            token = DeviceTokenResponse.model_validate(data)
        except ValidationError:
            return PollResult(status=PollStatus.UNRECOGNIZED)
        return PollResult(status=PollStatus.SUCCESS, token=token)

    error = data.get("error")
    if error:
        return PollResult(
            status=_ERROR_STATUSES.get(str(error), PollStatus.ERROR),
            error=str(error),
            error_description=data.get("error_description"),
            interval=_parse_interval(data.get("interval")),
        )

    return PollResult(status=PollStatus.UNRECOGNIZED)


class DeviceFlowClient(GitHubHTTPClient):
    """Drives one device authorization exchange at a time.

    Cancel the awaiting task to abandon a flow; nothing survives a restart.
    """

    def __init__(
        self,
        settings: GitHubSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        """Initialize the device flow client.

        Args:
            settings: GitHub endpoints and OAuth app configuration
            http_client: Optional shared httpx client for connection pooling
            sleep: Awaitable sleep used between polls (injectable for tests)

        """
        self.settings = settings or GitHubSettings()
        super().__init__(http_client, timeout=self.settings.request_timeout)
        self._sleep = sleep
        self.state = DeviceFlowState.IDLE

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }

    def _fail(self, error: DeviceFlowError) -> DeviceFlowError:
        self.state = DeviceFlowState.FAILED
        return error

    async def _post(self, url: str, data: dict[str, str]) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.post(url, data=data, headers=self._headers())
        except httpx.HTTPError as e:
            self.state = DeviceFlowState.FAILED
            raise ProviderTransportError(
                f"Request to {url} failed: {e}", details={"url": url}
            ) from e

    async def request_device_code(self) -> DeviceFlowSession:
        """Ask the provider for a device and user code.

        Returns:
            The new session, whose ``user_code`` and ``verification_uri`` the
            user must act on out-of-band

        Raises:
            DeviceFlowError: If the provider refuses or answers malformed data
            ProviderTransportError: On network failure

        """
        self.state = DeviceFlowState.IDLE
        response = await self._post(
            self.settings.device_code_url,
            {"client_id": self.settings.client_id, "scope": self.settings.scope},
        )

        if not response.is_success:
            log_http_error_compact("Device code request", response)
            data = _decode_body(response) or {}
            raise self._fail(
                DeviceFlowError(
                    f"Device code request failed: {response.status_code}",
                    provider_error=data.get("error_description") or data.get("error"),
                    status_code=response.status_code,
                )
            )

        data = _decode_body(response)
        if data and data.get("error"):
            raise self._fail(
                DeviceFlowError(
                    f"Device code request rejected: {data['error']}",
                    provider_error=data.get("error_description") or data["error"],
                )
            )
        try:
            code = DeviceCodeResponse.model_validate(data or {})
        except ValidationError as e:
            raise self._fail(
                DeviceFlowError(f"Malformed device code response: {e}")
            ) from e

        session = DeviceFlowSession.from_response(
            code,
            default_interval=self.settings.poll_interval_default,
            default_max_attempts=self.settings.max_poll_attempts,
        )
        self.state = DeviceFlowState.AWAITING_USER_AUTHORIZATION
        logger.info(
            "device_code_issued",
            verification_uri=session.verification_uri,
            interval=session.interval,
            max_attempts=session.max_attempts,
        )
        return session

    async def poll_once(self, session: DeviceFlowSession) -> PollResult:
        """Send one access-token request and classify the answer."""
        response = await self._post(
            self.settings.access_token_url,
            {
                "client_id": self.settings.client_id,
                "device_code": session.device_code,
                "grant_type": DEVICE_CODE_GRANT_TYPE,
            },
        )
        if not response.is_success:
            log_http_error_compact("Access token poll", response)
            raise self._fail(
                DeviceFlowError(
                    f"Access token request failed: {response.status_code}",
                    status_code=response.status_code,
                )
            )
        return classify_poll_response(response)

    async def poll_for_token(self, session: DeviceFlowSession) -> DeviceTokenResponse:
        """Poll until the user authorizes, declines, or the code runs out.

        Raises:
            DeviceFlowDeniedError: The user declined (not retried)
            DeviceFlowExpiredError: The provider expired the device code
            DeviceFlowTimeoutError: ``session.max_attempts`` polls stayed pending,
                or the next wait would overrun ``session.wait_budget``
            DeviceFlowError: Any other provider error
            ProviderTransportError: On network failure

        """
        self.state = DeviceFlowState.POLLING

        while True:
            result = await self.poll_once(session)

            if result.status == PollStatus.SUCCESS and result.token is not None:
                self.state = DeviceFlowState.SUCCEEDED
                logger.info(
                    "device_flow_succeeded",
                    attempts=session.attempts,
                    scope=result.token.scope,
                )
                return result.token

            if result.status == PollStatus.DENIED:
                self.state = DeviceFlowState.DENIED
                logger.info("device_flow_denied", attempts=session.attempts)
                raise DeviceFlowDeniedError()

            if result.status == PollStatus.EXPIRED:
                self.state = DeviceFlowState.EXPIRED
                logger.info("device_flow_expired", attempts=session.attempts)
                raise DeviceFlowExpiredError()

            if result.status == PollStatus.ERROR:
                raise self._fail(
                    DeviceFlowError(
                        f"Device flow failed: {result.error}",
                        provider_error=result.error_description or result.error,
                    )
                )

            if result.status == PollStatus.SLOW_DOWN:
                session.interval = result.interval or (
                    session.interval + SLOW_DOWN_INCREMENT
                )
                logger.debug("device_flow_slow_down", interval=session.interval)
            elif result.status == PollStatus.UNRECOGNIZED:
                logger.debug("device_flow_unrecognized_response")

            # pending, slow_down and unrecognized all consume an attempt
            session.attempts += 1
            # total sleep stays within expires_in, whatever slow_down asked for
            out_of_time = session.waited + session.interval > session.wait_budget
            if session.attempts >= session.max_attempts or out_of_time:
                self.state = DeviceFlowState.FAILED
                logger.warning("device_flow_timeout", attempts=session.attempts)
                raise DeviceFlowTimeoutError(session.attempts)

            session.waited += session.interval
            await self._sleep(session.interval)

    async def run(
        self, on_user_code: Callable[[DeviceFlowSession], None] | None = None
    ) -> DeviceTokenResponse:
        """Request a device code, report it through ``on_user_code``, then poll."""
        session = await self.request_device_code()
        if on_user_code is not None:
            on_user_code(session)
        return await self.poll_for_token(session)
