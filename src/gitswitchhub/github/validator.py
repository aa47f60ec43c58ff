"""Token validation against the GitHub REST API."""

import httpx
from pydantic import ValidationError
from structlog import get_logger

from gitswitchhub.config.settings import GitHubSettings
from gitswitchhub.exceptions import InvalidTokenError, ProviderTransportError
from gitswitchhub.github.http import GitHubHTTPClient
from gitswitchhub.github.models import GitHubUser, TokenInfo


logger = get_logger(__name__)

SCOPES_HEADER = "X-OAuth-Scopes"


def parse_scopes(header_value: str | None) -> set[str]:
    """Parse a comma separated ``X-OAuth-Scopes`` value."""
    if not header_value:
        return set()
    return {scope.strip() for scope in header_value.split(",") if scope.strip()}


class TokenValidator(GitHubHTTPClient):
    """Confirms a token is live and resolves who it belongs to.

    Every call fails fast: no retries, any non-success status is reported
    as :class:`InvalidTokenError` without the provider's status code.
    """

    def __init__(
        self,
        settings: GitHubSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or GitHubSettings()
        super().__init__(http_client, timeout=self.settings.request_timeout)

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.settings.user_agent,
        }

    async def _get(self, path: str, token: str) -> httpx.Response:
        url = f"{self.settings.api_base_url}{path}"
        try:
            async with self._client() as client:
                return await client.get(url, headers=self._headers(token))
        except httpx.HTTPError as e:
            raise ProviderTransportError(
                f"Request to {url} failed: {e}", details={"url": url}
            ) from e

    async def _get_user_response(self, token: str) -> httpx.Response:
        response = await self._get("/user", token)
        if not response.is_success:
            logger.info("token_rejected", status_code=response.status_code)
            raise InvalidTokenError()
        return response

    @staticmethod
    def _parse_user(response: httpx.Response) -> GitHubUser:
        try:
            return GitHubUser.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise InvalidTokenError("Unexpected identity response") from e

    async def validate(self, token: str) -> GitHubUser:
        """Return the identity the token belongs to.

        Raises:
            InvalidTokenError: If the provider does not accept the token
            ProviderTransportError: On network failure

        """
        response = await self._get_user_response(token)
        user = self._parse_user(response)
        logger.debug("token_validated", login=user.login)
        return user

    async def scopes(self, token: str) -> set[str]:
        """Scopes granted to the token; empty if the header is absent."""
        response = await self._get_user_response(token)
        return parse_scopes(response.headers.get(SCOPES_HEADER))

    async def inspect(self, token: str) -> TokenInfo:
        """Identity and scopes from a single ``/user`` round trip."""
        response = await self._get_user_response(token)
        return TokenInfo(
            user=self._parse_user(response),
            scopes=parse_scopes(response.headers.get(SCOPES_HEADER)),
        )

    async def check_org_sso_requirement(self, token: str, org: str) -> bool:
        """Best-effort guess whether ``org`` needs SSO authorization for this token.

        GitHub has no dedicated signal for this, so any non-success answer from
        the membership endpoint counts as "may be required". Advisory only.
        """
        response = await self._get(f"/orgs/{org}/memberships/me", token)
        sso_suspected = not response.is_success
        if sso_suspected:
            logger.info(
                "org_membership_check_failed",
                org=org,
                status_code=response.status_code,
                sso_header=response.headers.get("X-GitHub-SSO"),
            )
        return sso_suspected
