"""
Column profiling for datasets.

Classifies each record field and attaches distinct values or
descriptive statistics, for presentation layers that build filters
and chart axes from the data.
"""

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from civicstats.analysis.statistics import DataStats, stats, unique_strings
from civicstats.ingestion.dataset import Dataset
from civicstats.schemas.registry import SchemaRegistry

# String columns with more distinct values than this are free text
MAX_CATEGORIES = 50


class ColumnType(str, Enum):
    """Kind of values held by a column."""

    CATEGORICAL = "categorical"
    NUMERIC = "numeric"
    DATE = "date"
    TEXT = "text"


@dataclass(frozen=True)
class ColumnInfo:
    """Profile of one dataset column."""

    name: str
    type: ColumnType
    unique_values: list[str] = field(default_factory=list)
    stats: DataStats | None = None


def _column_type(annotation: Any) -> ColumnType:
    if annotation in (int, float):
        return ColumnType.NUMERIC
    if annotation is dt.date:
        return ColumnType.DATE
    return ColumnType.CATEGORICAL


def describe_columns(
    dataset: Dataset[Any],
    max_categories: int = MAX_CATEGORIES,
) -> list[ColumnInfo]:
    """
    Profile every field of a dataset's record type.

    Args:
        dataset: Dataset to profile.
        max_categories: Distinct-value limit for categorical columns.

    Returns:
        One ColumnInfo per field, in record field order.
    """
    record_type = SchemaRegistry.record_type(dataset.kind)
    columns: list[ColumnInfo] = []

    for name, info in record_type.model_fields.items():
        column_type = _column_type(info.annotation)

        if column_type is ColumnType.NUMERIC:
            columns.append(
                ColumnInfo(name=name, type=column_type, stats=stats(dataset.values(name)))
            )
        elif column_type is ColumnType.CATEGORICAL:
            values = unique_strings(dataset, name)
            if len(values) > max_categories:
                columns.append(ColumnInfo(name=name, type=ColumnType.TEXT))
            else:
                columns.append(
                    ColumnInfo(name=name, type=column_type, unique_values=values)
                )
        else:
            columns.append(ColumnInfo(name=name, type=column_type))

    return columns
