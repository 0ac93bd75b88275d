"""
Loader orchestrator.

Fetches all sources concurrently, parses each through the parsing
cache and tolerates failure per source.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any

from civicstats.config.settings import DatasetKind, SourcesConfig
from civicstats.ingestion.cache import ParsingCache
from civicstats.ingestion.dataset import Dataset
from civicstats.ingestion.fetcher import SourceFetcher
from civicstats.ingestion.transformers import TRANSFORMERS, RecordTransformer
from civicstats.utils.logging import get_logger, log_context

log = get_logger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of loading all sources.

    Attributes:
        vehicle: Vehicle registrations dataset.
        outbreak: Disease outbreak dataset.
        population: Population projection dataset.
        air_quality: Air quality dataset.
        failures: Error message per source that failed (its dataset is empty).
        elapsed_seconds: Wall-clock duration of the load.
    """

    vehicle: Dataset[Any]
    outbreak: Dataset[Any]
    population: Dataset[Any]
    air_quality: Dataset[Any]
    failures: dict[DatasetKind, str] = field(default_factory=dict)
    elapsed_seconds: float = 0.0

    @classmethod
    def empty(cls) -> "LoadResult":
        """A result with every dataset empty."""
        return cls(**{kind.value: Dataset.empty(kind) for kind in DatasetKind})

    def dataset(self, kind: DatasetKind) -> Dataset[Any]:
        """Dataset for a kind."""
        return getattr(self, kind.value)

    @property
    def counts(self) -> dict[str, int]:
        """Record count per dataset kind."""
        return {kind.value: len(self.dataset(kind)) for kind in DatasetKind}

    @property
    def total_records(self) -> int:
        """Records across all datasets."""
        return sum(self.counts.values())

    @property
    def is_empty(self) -> bool:
        """True if no dataset holds any record."""
        return self.total_records == 0


class LoaderOrchestrator:
    """
    Loads the four configured sources concurrently.

    One source failing never blocks or empties the others: its dataset
    is replaced by an empty one and the cause is logged.
    """

    def __init__(
        self,
        sources: SourcesConfig,
        fetcher: SourceFetcher,
        cache: ParsingCache | None = None,
        transformers: dict[DatasetKind, RecordTransformer] | None = None,
    ) -> None:
        """
        Initialize loader orchestrator.

        Args:
            sources: Source path per dataset kind.
            fetcher: Fetcher used for every source.
            cache: Parsing cache (a private one is created if omitted).
            transformers: Transformer per kind (defaults to TRANSFORMERS).
        """
        self.sources = sources
        self.fetcher = fetcher
        self.cache = cache if cache is not None else ParsingCache()
        self.transformers = transformers or TRANSFORMERS

    async def _load_source(self, kind: DatasetKind, path: str) -> Dataset[Any]:
        with log_context(source=kind.value):
            cached = self.cache.get(kind.value)
            if cached is not None:
                return cached
            text = await self.fetcher.fetch(path)
            return self.cache.get_or_parse(kind.value, text, self.transformers[kind])

    async def load_all(self) -> LoadResult:
        """
        Load every source, waiting for all of them to settle.

        Returns:
            LoadResult with one dataset per kind; failed sources are empty.
        """
        started = time.perf_counter()
        log.info("Starting data load", sources=len(DatasetKind))

        pairs = self.sources.items()
        outcomes = await asyncio.gather(
            *(self._load_source(kind, path) for kind, path in pairs),
            return_exceptions=True,
        )

        datasets: dict[str, Dataset[Any]] = {}
        failures: dict[DatasetKind, str] = {}
        for (kind, path), outcome in zip(pairs, outcomes, strict=True):
            if isinstance(outcome, Exception):
                log.error(
                    "Failed to load source",
                    source=kind.value,
                    path=path,
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                )
                failures[kind] = str(outcome)
                datasets[kind.value] = Dataset.empty(kind)
            elif isinstance(outcome, BaseException):
                # Cancellation and interpreter exits are not source failures
                raise outcome
            else:
                log.info("Loaded source", source=kind.value, records=len(outcome))
                datasets[kind.value] = outcome

        result = LoadResult(
            **datasets,
            failures=failures,
            elapsed_seconds=time.perf_counter() - started,
        )
        log.info(
            "Data load completed",
            elapsed_ms=round(result.elapsed_seconds * 1000, 2),
            total_records=result.total_records,
            failed_sources=[kind.value for kind in failures],
            **result.counts,
        )
        return result
