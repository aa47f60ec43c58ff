"""Shared httpx client handling for GitHub calls."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from structlog import get_logger


logger = get_logger(__name__)


def truncate_error_text(response_text: str) -> str:
    """Truncate response text for compact error logging."""
    if len(response_text) > 200:
        return f"{response_text[:100]}...{response_text[-50:]}"
    if len(response_text) > 100:
        return f"{response_text[:100]}..."
    return response_text


def log_http_error_compact(operation: str, response: httpx.Response) -> None:
    """Log an HTTP error response without dumping the whole body."""
    logger.warning(
        "http_operation_failed",
        operation=operation,
        status_code=response.status_code,
        response_preview=truncate_error_text(response.text),
    )


class GitHubHTTPClient:
    """Base for GitHub clients.

    Reuses an injected ``httpx.AsyncClient`` for connection pooling, or opens
    a short-lived one per call when none is given.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._shared_client = http_client
        self.timeout = timeout

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._shared_client is not None:
            yield self._shared_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client
