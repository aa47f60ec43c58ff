"""git credential helper protocol.

git runs ``gitswitchhub credential-helper <operation>`` and writes a request
of ``key=value`` lines to stdin, ended by a blank line or EOF. For ``get``
the helper answers on stdout with exactly::

    username=<username>
    password=<token>

Anything else git reads from stdout would be taken as credential fields, so
failures write nothing there: a diagnostic goes to stderr and the process
exits non-zero.
"""

from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from enum import StrEnum
from typing import TextIO

from structlog import get_logger

from gitswitchhub.accounts.resolver import AccountResolver, Credential
from gitswitchhub.exceptions import GitSwitchHubError, MalformedRequestError


logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

DIAGNOSTIC_PREFIX = "gitswitchhub credential helper error"


class CredentialOperation(StrEnum):
    """Operations git passes as the helper's last argument."""

    GET = "get"
    STORE = "store"
    ERASE = "erase"


@dataclass
class CredentialRequest:
    """One parsed helper request."""

    url: str | None = None
    protocol: str | None = None
    host: str | None = None
    path: str | None = None

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "CredentialRequest":
        """Read ``key=value`` lines up to a blank line or end of input.

        Unknown keys and lines without ``=`` are ignored. Later values for a
        key replace earlier ones.
        """
        fields: dict[str, str] = {}
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line:
                break
            key, sep, value = line.partition("=")
            if sep and key in {"url", "protocol", "host", "path"}:
                fields[key] = value
        return cls(**fields)

    @property
    def origin(self) -> str:
        """The mapping lookup key for this request.

        ``url`` verbatim when present, otherwise ``protocol://host``.

        Raises:
            MalformedRequestError: If neither form can be built

        """
        if self.url:
            return self.url
        if self.protocol and self.host:
            return f"{self.protocol}://{self.host}"
        raise MalformedRequestError()


def format_response(credential: Credential) -> str:
    """Render the two-line ``get`` answer.

    Raises:
        MalformedRequestError: If a value would break the line protocol

    """
    for value in (credential.username, credential.secret):
        if "\n" in value or "\r" in value or "\0" in value:
            raise MalformedRequestError(
                "Refusing to emit a credential containing a line break or NUL"
            )
    return f"username={credential.username}\npassword={credential.secret}\n"


ResolverOpener = Callable[[], AbstractAsyncContextManager[AccountResolver]]


class CredentialProtocolHandler:
    """Answers one git credential request per process."""

    def __init__(self, open_resolver: ResolverOpener) -> None:
        """Initialize the handler.

        Args:
            open_resolver: Opens the resolver (and the stores behind it). It is
                only called once the request is known to be well formed.

        """
        self._open_resolver = open_resolver

    async def handle(
        self,
        operation: str,
        stdin: TextIO,
        stdout: TextIO,
        stderr: TextIO,
    ) -> int:
        """Process one request and return the exit code."""
        try:
            request = CredentialRequest.parse(stdin)
            if operation != CredentialOperation.GET:
                # store/erase carry credentials git wants persisted or
                # forgotten; accounts are only managed through the CLI
                logger.debug("credential_operation_ignored", operation=operation)
                return EXIT_SUCCESS

            origin = request.origin
            async with self._open_resolver() as resolver:
                credential = await resolver.resolve(origin)
            response = format_response(credential)
        except GitSwitchHubError as e:
            logger.debug("credential_request_failed", error_type=str(e.error_type))
            stderr.write(f"{DIAGNOSTIC_PREFIX}: {e.message}\n")
            stderr.flush()
            return EXIT_FAILURE
        except OSError as e:
            stderr.write(f"{DIAGNOSTIC_PREFIX}: {e}\n")
            stderr.flush()
            return EXIT_FAILURE

        stdout.write(response)
        stdout.flush()
        logger.debug("credential_supplied", username=credential.username)
        return EXIT_SUCCESS
