"""
Data manager.

Owns the loaded datasets, guarantees at most one load in flight and
always ends a load in the loaded state, substituting sample data when
loading fails entirely.

State machine::

    EMPTY --load_all_data()--> LOADING --(done|timeout|error)--> LOADED
    LOADED --reload()--> EMPTY --> LOADING --> LOADED
"""

import asyncio
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Any

from civicstats.analysis import statistics
from civicstats.analysis.statistics import DataStats
from civicstats.config.settings import AppConfig, DatasetKind, ManagerConfig
from civicstats.errors import LoadTimeoutError
from civicstats.ingestion.cache import ParsingCache
from civicstats.ingestion.dataset import Dataset
from civicstats.ingestion.fetcher import SourceFetcher
from civicstats.ingestion.loader import LoaderOrchestrator, LoadResult
from civicstats.manager.samples import sample_data
from civicstats.schemas.records import (
    AirQualityRecord,
    OutbreakRecord,
    PopulationRecord,
    VehicleRecord,
)
from civicstats.utils.logging import get_logger

log = get_logger(__name__)


class LoadState(str, Enum):
    """Lifecycle state of the manager's datasets."""

    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"


@dataclass(frozen=True)
class DataSummary:
    """Point-in-time counts and state flags."""

    vehicle_count: int
    outbreak_count: int
    population_count: int
    air_quality_count: int
    total_records: int
    rejected_records: int
    is_loaded: bool
    is_loading: bool
    using_sample_data: bool


class DataManager:
    """
    Process-wide owner of the four datasets.

    Construct one instance and pass it to the code that needs it. Loading
    happens once; concurrent ``load_all_data()`` calls share the same
    in-flight load.
    """

    def __init__(
        self,
        orchestrator: LoaderOrchestrator,
        config: ManagerConfig | None = None,
    ) -> None:
        """
        Initialize data manager.

        Args:
            orchestrator: Loader used to fetch and parse all sources.
            config: Load policy (defaults apply if omitted).
        """
        self.orchestrator = orchestrator
        self.config = config or ManagerConfig()
        self._data: LoadResult = LoadResult.empty()
        self._state = LoadState.EMPTY
        self._load_task: asyncio.Task[None] | None = None
        # Incremented by reload(); a load only applies results of its own generation
        self._generation = 0
        self._using_sample_data = False

    @classmethod
    def from_config(cls, config: AppConfig) -> "DataManager":
        """Build a manager with its fetcher, cache and orchestrator."""
        fetcher = SourceFetcher(config.sources.base_url, config.fetch)
        orchestrator = LoaderOrchestrator(config.sources, fetcher, ParsingCache())
        return cls(orchestrator, config.manager)

    async def __aenter__(self) -> "DataManager":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the fetcher's HTTP client."""
        await self.orchestrator.fetcher.aclose()

    @property
    def cache(self) -> ParsingCache:
        """Parsing cache shared with the orchestrator."""
        return self.orchestrator.cache

    @property
    def state(self) -> LoadState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is LoadState.LOADED

    @property
    def is_loading(self) -> bool:
        return self._state is LoadState.LOADING

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_all_data(self) -> None:
        """
        Load all datasets once.

        Returns immediately when already loaded and awaits the in-flight
        load when one is running. Never raises for load failures: they
        are logged and replaced by sample data.
        """
        while self._state is not LoadState.LOADED:
            if self._load_task is None:
                # No await between the check above and task creation
                self._state = LoadState.LOADING
                self._load_task = asyncio.create_task(
                    self._perform_load(self._generation)
                )
            task = self._load_task
            try:
                # Shielded so one cancelled caller cannot cancel the shared load
                await asyncio.shield(task)
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if not task.cancelled() or (current is not None and current.cancelling()):
                    raise
                # The load was superseded by reload(); wait for its replacement

    async def _perform_load(self, generation: int) -> None:
        started = time.perf_counter()
        timeout = self.config.load_timeout_seconds
        result: LoadResult | None = None

        log.info("Starting data load", generation=generation, timeout_s=timeout)
        try:
            result = await asyncio.wait_for(self.orchestrator.load_all(), timeout)
        except asyncio.TimeoutError:
            log.error("Error loading data", error=str(LoadTimeoutError(timeout)))
        except Exception as e:
            log.error(
                "Error loading data",
                error=f"{type(e).__name__}: {e!s}",
            )

        if generation != self._generation:
            log.info("Discarding superseded load", generation=generation)
            return

        if result is None or result.is_empty:
            if result is not None:
                log.warning("No data loaded from any source")
            self._apply_fallback()
        else:
            self._data = result
            self._using_sample_data = False

        self._state = LoadState.LOADED
        self._load_task = None

        summary = self.get_data_summary()
        log.info(
            "Data loaded",
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            total_records=summary.total_records,
            rejected_records=summary.rejected_records,
            using_sample_data=summary.using_sample_data,
        )

    def _apply_fallback(self) -> None:
        if self.config.use_sample_fallback:
            log.warning("Using sample data as fallback")
            self._data = sample_data()
            self._using_sample_data = True
        else:
            self._data = LoadResult.empty()
            self._using_sample_data = False

    async def reload(self) -> None:
        """
        Discard loaded data and parse results, then load again.

        A load still in flight is cancelled; callers waiting on it are
        carried over to the new load.
        """
        log.info("Reloading data")
        self._generation += 1
        if self._load_task is not None:
            self._load_task.cancel()
            self._load_task = None
        self.cache.clear()
        self._data = LoadResult.empty()
        self._using_sample_data = False
        self._state = LoadState.EMPTY
        await self.load_all_data()

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def _dataset(self, kind: DatasetKind) -> Dataset[Any]:
        if self._state is not LoadState.LOADED:
            log.warning("Data not loaded yet, returning empty dataset", kind=kind.value)
            return Dataset.empty(kind)
        return self._data.dataset(kind)

    def get_vehicle_data(self) -> Dataset[VehicleRecord]:
        """Vehicle registrations (empty before the first load)."""
        return self._dataset(DatasetKind.VEHICLE)

    def get_outbreak_data(self) -> Dataset[OutbreakRecord]:
        """Disease outbreaks (empty before the first load)."""
        return self._dataset(DatasetKind.OUTBREAK)

    def get_population_data(self) -> Dataset[PopulationRecord]:
        """Population projections (empty before the first load)."""
        return self._dataset(DatasetKind.POPULATION)

    def get_air_quality_data(self) -> Dataset[AirQualityRecord]:
        """Air quality readings (empty before the first load)."""
        return self._dataset(DatasetKind.AIR_QUALITY)

    def get_data(self, kind: DatasetKind | str) -> Dataset[Any]:
        """Dataset for a kind given by enum or name."""
        return self._dataset(DatasetKind(kind))

    def is_data_loaded(self) -> bool:
        """Whether a load has completed."""
        return self.is_loaded

    def get_loading_status(self) -> dict[str, bool]:
        """Current state flags."""
        return {"is_loading": self.is_loading, "is_loaded": self.is_loaded}

    def get_data_summary(self) -> DataSummary:
        """Counts per dataset and state flags at call time."""
        datasets = [self._data.dataset(kind) for kind in DatasetKind]
        return DataSummary(
            vehicle_count=len(self._data.vehicle),
            outbreak_count=len(self._data.outbreak),
            population_count=len(self._data.population),
            air_quality_count=len(self._data.air_quality),
            total_records=sum(len(d) for d in datasets),
            rejected_records=sum(d.rejected for d in datasets),
            is_loaded=self.is_loaded,
            is_loading=self.is_loading,
            using_sample_data=self._using_sample_data,
        )

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def calculate_stats(self, values: Iterable[float]) -> DataStats:
        """Descriptive statistics; see ``statistics.stats``."""
        return statistics.stats(values)

    def get_unique_values(self, records: Iterable[Any], field: str) -> list[str]:
        """Distinct string values; see ``statistics.unique_strings``."""
        return statistics.unique_strings(records, field)

    def get_unique_numbers(self, records: Iterable[Any], field: str) -> list[float]:
        """Distinct numeric values; see ``statistics.unique_numbers``."""
        return statistics.unique_numbers(records, field)

    def calculate_correlation(self, x: Sequence[float], y: Sequence[float]) -> float:
        """Pearson correlation; see ``statistics.correlation``."""
        return statistics.correlation(x, y)

    def detect_anomalies(
        self,
        values: Iterable[float],
        threshold: float = statistics.DEFAULT_ANOMALY_THRESHOLD,
    ) -> list[float]:
        """Z-score anomalies; see ``statistics.anomalies``."""
        return statistics.anomalies(values, threshold)
