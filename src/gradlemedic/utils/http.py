"""Async JSON fetching for the Gradle release lookup."""

import asyncio
from typing import Any

import httpx

from gradlemedic import __version__
from gradlemedic.utils.logging import get_logger

logger = get_logger(__name__)


class AsyncHttpClient:
    """Fetches JSON documents, retrying connection failures and 5xx responses.

    Use as an async context manager::

        async with AsyncHttpClient() as client:
            data = await client.get_json(url)
    """

    DEFAULT_TIMEOUT = 15.0
    DEFAULT_RETRIES = 2
    RETRY_DELAYS = [1.0, 2.0, 4.0]

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout: Request timeout in seconds.
            max_retries: Retries after the first attempt.
            transport: Optional httpx transport (used by tests).
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncHttpClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": f"gradlemedic/{__version__}"},
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _retry_delay(self, attempt: int) -> float | None:
        """Delay before the next attempt, or None when retries are used up."""
        if attempt >= self.max_retries:
            return None
        return self.RETRY_DELAYS[min(attempt, len(self.RETRY_DELAYS) - 1)]

    async def get_json(self, url: str) -> Any:
        """GET a URL and parse the JSON body.

        Raises:
            RuntimeError: If used outside ``async with``.
            httpx.HTTPError: On 4xx responses, or once retries are exhausted.
        """
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async with statement.")

        attempt = 0
        while True:
            try:
                response = await self._client.get(url)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                if e.response.status_code < 500:
                    raise
                delay = self._retry_delay(attempt)
                if delay is None:
                    raise
                logger.warning(
                    "Server error %d from %s, retrying in %.1f seconds",
                    e.response.status_code,
                    url,
                    delay,
                )
            except (httpx.ConnectError, httpx.ReadTimeout) as e:
                delay = self._retry_delay(attempt)
                if delay is None:
                    raise
                logger.warning("Connection error, retrying in %.1f seconds: %s", delay, e)

            await asyncio.sleep(delay)
            attempt += 1
