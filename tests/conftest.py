"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import pytest

from civicstats.config.settings import AppConfig, FetchConfig, ManagerConfig
from civicstats.ingestion.cache import ParsingCache
from civicstats.ingestion.fetcher import SourceFetcher
from civicstats.ingestion.loader import LoaderOrchestrator
from civicstats.utils.logging import configure_logging
from tests.fakes import BASE_URL, SOURCES, FakeHost


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fetch_config() -> FetchConfig:
    """Fetch policy without backoff delays."""
    return FetchConfig(max_retries=3, backoff_base_seconds=0.0)


@pytest.fixture
def app_config(fetch_config: FetchConfig) -> AppConfig:
    """App configuration pointing at the fake host."""
    return AppConfig(
        sources=SOURCES,
        fetch=fetch_config,
        manager=ManagerConfig(load_timeout_seconds=5.0),
    )


@pytest.fixture
def host() -> FakeHost:
    """Fake host serving all four source files."""
    return FakeHost()


@pytest.fixture
async def fetcher(host: FakeHost, fetch_config: FetchConfig) -> AsyncIterator[SourceFetcher]:
    """Fetcher bound to the fake host."""
    client = host.client()
    yield SourceFetcher(BASE_URL, fetch_config, client=client)
    await client.aclose()


@pytest.fixture
def orchestrator(fetcher: SourceFetcher) -> LoaderOrchestrator:
    """Orchestrator over the fake host with a fresh parsing cache."""
    return LoaderOrchestrator(SOURCES, fetcher, ParsingCache())


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Rebind logging to the current stderr after tests that reconfigure it."""
    yield
    configure_logging()
