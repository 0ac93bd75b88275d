"""
Data ingestion layer for fetching, parsing and validating sources.

All source data enters the engine through this package so that every
record in memory has passed its transformer.
"""

from civicstats.ingestion.cache import ParsingCache
from civicstats.ingestion.dataset import Dataset
from civicstats.ingestion.fetcher import SourceFetcher
from civicstats.ingestion.loader import LoaderOrchestrator, LoadResult
from civicstats.ingestion.transformers import (
    TRANSFORMERS,
    Accepted,
    RecordTransformer,
    Rejected,
    TransformResult,
)

__all__ = [
    "TRANSFORMERS",
    "Accepted",
    "Dataset",
    "LoadResult",
    "LoaderOrchestrator",
    "ParsingCache",
    "RecordTransformer",
    "Rejected",
    "SourceFetcher",
    "TransformResult",
]
