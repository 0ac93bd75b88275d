"""
Source fetcher.

Retrieves raw source text over HTTP with bounded retries and
exponential backoff.
"""

import asyncio
from types import TracebackType

import httpx

from civicstats.config.settings import FetchConfig
from civicstats.errors import FetchError
from civicstats.utils.logging import get_logger

log = get_logger(__name__)


class _ContentTooShortError(Exception):
    """Response body was empty or implausibly short."""


class SourceFetcher:
    """
    Fetches source texts from a static file host.

    Failed attempts (transport error, non-success status, or content
    shorter than ``min_content_length``) are retried. After attempt n
    fails the fetcher sleeps ``backoff_base_seconds * 2**n`` seconds
    before the next attempt.

    Use as an async context manager to close an owned client.
    """

    def __init__(
        self,
        base_url: str,
        config: FetchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize source fetcher.

        Args:
            base_url: Host that source paths are resolved against.
            config: Retry and content policy (defaults apply if omitted).
            client: Optional preconfigured client. A client passed in is
                not closed by the fetcher.
        """
        self.config = config or FetchConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=self.config.request_timeout_seconds,
            headers={"Cache-Control": self.config.cache_control},
        )

    async def __aenter__(self) -> "SourceFetcher":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if the fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        return self.config.backoff_base_seconds * (2**attempt)

    async def _attempt(self, path: str) -> str:
        response = await self._client.get(path)
        response.raise_for_status()
        text = response.text
        if len(text.strip()) < self.config.min_content_length:
            msg = f"Empty or invalid content ({len(text.strip())} chars)"
            raise _ContentTooShortError(msg)
        return text

    async def fetch(self, path: str, max_retries: int | None = None) -> str:
        """
        Fetch the text of a source.

        Args:
            path: Source path relative to the base URL.
            max_retries: Total attempts (defaults to config.max_retries).

        Returns:
            The response body.

        Raises:
            FetchError: If every attempt failed.
        """
        attempts = max_retries if max_retries is not None else self.config.max_retries
        if attempts < 1:
            msg = f"max_retries must be at least 1, got {attempts}"
            raise ValueError(msg)

        last_cause = "no attempt made"
        for attempt in range(1, attempts + 1):
            try:
                text = await self._attempt(path)
            except httpx.HTTPStatusError as e:
                last_cause = (
                    f"HTTP {e.response.status_code}: {e.response.reason_phrase}"
                )
            except httpx.HTTPError as e:
                last_cause = f"{type(e).__name__}: {e}"
            except _ContentTooShortError as e:
                last_cause = str(e)
            else:
                if attempt > 1:
                    log.info("Fetch succeeded after retry", path=path, attempt=attempt)
                return text

            log.warning(
                "Fetch attempt failed",
                path=path,
                attempt=attempt,
                max_attempts=attempts,
                error=last_cause,
            )
            if attempt < attempts:
                await asyncio.sleep(self.backoff_delay(attempt))

        raise FetchError(path, last_cause, attempts)
