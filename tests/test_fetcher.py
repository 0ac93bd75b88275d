"""Tests for the source fetcher."""

from unittest.mock import AsyncMock, call, patch

import httpx
import pytest

from civicstats.config.settings import FetchConfig
from civicstats.errors import FetchError
from civicstats.ingestion.fetcher import SourceFetcher
from tests.fakes import BASE_URL, SOURCES, VEHICLE_CSV, FakeHost


class FlakyHost:
    """Answers with a scripted sequence of responses or errors."""

    def __init__(self, *outcomes: httpx.Response | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    async def handler(self, request: httpx.Request) -> httpx.Response:
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def fetcher(self, config: FetchConfig) -> SourceFetcher:
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler), base_url=BASE_URL
        )
        return SourceFetcher(BASE_URL, config, client=client)


class TestFetch:
    """Tests for SourceFetcher.fetch."""

    async def test_success_first_attempt(
        self, fetcher: SourceFetcher, host: FakeHost
    ) -> None:
        """Test that a healthy source is fetched with a single request."""
        text = await fetcher.fetch(SOURCES.vehicle)

        assert text == VEHICLE_CSV
        assert host.count(SOURCES.vehicle) == 1

    async def test_missing_file_exhausts_retries(
        self, fetcher: SourceFetcher, host: FakeHost
    ) -> None:
        """Test that a persistent 404 fails after max_retries requests."""
        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("/data/missing.csv")

        error = exc_info.value
        assert error.path == "/data/missing.csv"
        assert error.attempts == 3
        assert error.last_cause == "HTTP 404: Not Found"
        assert error.retriable is True
        assert "after 3 attempts" in str(error)
        assert host.count("/data/missing.csv") == 3

    async def test_max_retries_override(
        self, fetcher: SourceFetcher, host: FakeHost
    ) -> None:
        """Test that an explicit max_retries bounds the attempts."""
        host.statuses[SOURCES.vehicle] = 503

        with pytest.raises(FetchError, match="after 1 attempts"):
            await fetcher.fetch(SOURCES.vehicle, max_retries=1)

        assert host.count(SOURCES.vehicle) == 1

    async def test_invalid_max_retries(self, fetcher: SourceFetcher) -> None:
        """Test that fewer than one attempt is rejected."""
        with pytest.raises(ValueError, match="at least 1"):
            await fetcher.fetch(SOURCES.vehicle, max_retries=0)

    async def test_transient_failure_then_success(
        self, fetch_config: FetchConfig
    ) -> None:
        """Test that a source recovering within the budget succeeds."""
        flaky = FlakyHost(
            httpx.Response(500),
            httpx.ConnectError("connection refused"),
            httpx.Response(200, text=VEHICLE_CSV),
        )
        async with flaky.fetcher(fetch_config) as fetcher:
            text = await fetcher.fetch(SOURCES.vehicle)

        assert text == VEHICLE_CSV
        assert flaky.calls == 3

    async def test_short_content_retried(self, fetch_config: FetchConfig) -> None:
        """Test that near-empty bodies count as failed attempts."""
        flaky = FlakyHost(httpx.Response(200, text="  tiny \n"))
        fetcher = flaky.fetcher(fetch_config)

        with pytest.raises(FetchError, match="Empty or invalid content"):
            await fetcher.fetch(SOURCES.vehicle)

        assert flaky.calls == 3

    async def test_transport_error_cause(self, fetch_config: FetchConfig) -> None:
        """Test that transport errors are reported with their type."""
        flaky = FlakyHost(httpx.ConnectError("connection refused"))
        fetcher = flaky.fetcher(fetch_config)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch(SOURCES.vehicle)

        assert exc_info.value.last_cause == "ConnectError: connection refused"


class TestBackoff:
    """Tests for retry backoff."""

    def test_backoff_delay_doubles(self) -> None:
        """Test the exponential delay schedule."""
        fetcher = SourceFetcher(BASE_URL, FetchConfig(backoff_base_seconds=1.0))
        assert [fetcher.backoff_delay(n) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]

    @patch("civicstats.ingestion.fetcher.asyncio.sleep", new_callable=AsyncMock)
    async def test_sleeps_between_attempts_only(self, mock_sleep: AsyncMock) -> None:
        """Test that the fetcher waits after each failed attempt but the last."""
        config = FetchConfig(max_retries=3, backoff_base_seconds=0.5)
        flaky = FlakyHost(httpx.Response(500))
        fetcher = flaky.fetcher(config)

        with pytest.raises(FetchError):
            await fetcher.fetch(SOURCES.vehicle)

        assert mock_sleep.await_args_list == [call(1.0), call(2.0)]

    @patch("civicstats.ingestion.fetcher.asyncio.sleep", new_callable=AsyncMock)
    async def test_no_sleep_on_success(self, mock_sleep: AsyncMock) -> None:
        """Test that a first-attempt success never waits."""
        flaky = FlakyHost(httpx.Response(200, text=VEHICLE_CSV))
        await flaky.fetcher(FetchConfig()).fetch(SOURCES.vehicle)

        mock_sleep.assert_not_awaited()


class TestClientLifecycle:
    """Tests for client ownership."""

    async def test_injected_client_not_closed(self, host: FakeHost) -> None:
        """Test that the caller keeps ownership of an injected client."""
        client = host.client()
        async with SourceFetcher(BASE_URL, client=client):
            pass

        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_closed(self) -> None:
        """Test that a client created by the fetcher is closed with it."""
        fetcher = SourceFetcher(BASE_URL)
        await fetcher.aclose()
        assert fetcher._client.is_closed
