"""Statistical analysis over in-memory datasets."""

from civicstats.analysis.profile import ColumnInfo, ColumnType, describe_columns
from civicstats.analysis.statistics import (
    EMPTY_STATS,
    DataStats,
    anomalies,
    correlation,
    stats,
    unique_numbers,
    unique_strings,
)

__all__ = [
    "EMPTY_STATS",
    "ColumnInfo",
    "ColumnType",
    "DataStats",
    "anomalies",
    "correlation",
    "describe_columns",
    "stats",
    "unique_numbers",
    "unique_strings",
]
