"""
Statistics toolkit.

Pure, stateless functions over plain numeric sequences and record
collections: descriptive statistics, distinct values, Pearson
correlation and z-score anomaly detection.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from civicstats.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_ANOMALY_THRESHOLD = 2.0


@dataclass(frozen=True)
class DataStats:
    """
    Descriptive statistics of a numeric sequence.

    Attributes:
        mean: Arithmetic mean.
        median: Middle value (mean of the two middle values for even counts).
        min: Smallest value.
        max: Largest value.
        std_dev: Population standard deviation (divides by count).
        count: Number of values.
    """

    mean: float
    median: float
    min: float
    max: float
    std_dev: float
    count: int

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return asdict(self)

    def __str__(self) -> str:
        """String representation."""
        return (
            f"n={self.count}, mean={self.mean:.2f}, median={self.median:.2f}, "
            f"min={self.min:.2f}, max={self.max:.2f}, sd={self.std_dev:.2f}"
        )


EMPTY_STATS = DataStats(mean=0.0, median=0.0, min=0.0, max=0.0, std_dev=0.0, count=0)


def _as_array(values: Iterable[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=float).ravel()


def _field_value(record: Any, field: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def stats(values: Iterable[float]) -> DataStats:
    """
    Compute descriptive statistics.

    Args:
        values: Numeric values.

    Returns:
        DataStats; all zeros with count 0 for empty input.
    """
    arr = _as_array(values)
    if arr.size == 0:
        return EMPTY_STATS

    return DataStats(
        mean=float(np.mean(arr)),
        median=float(np.median(arr)),
        min=float(np.min(arr)),
        max=float(np.max(arr)),
        std_dev=float(np.std(arr)),  # ddof=0: population
        count=int(arr.size),
    )


def unique_strings(records: Iterable[Any], field: str) -> list[str]:
    """
    Distinct non-empty string values of a field.

    Args:
        records: Records (models, objects or mappings).
        field: Field name to read.

    Returns:
        Trimmed, de-duplicated values sorted lexicographically.
    """
    seen: set[str] = set()
    for record in records:
        value = _field_value(record, field)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            seen.add(text)
    return sorted(seen)


def unique_numbers(records: Iterable[Any], field: str) -> list[float]:
    """
    Distinct finite numeric values of a field.

    Values that do not convert to a finite number are skipped.

    Args:
        records: Records (models, objects or mappings).
        field: Field name to read.

    Returns:
        De-duplicated values sorted ascending.
    """
    seen: set[float] = set()
    for record in records:
        value = _field_value(record, field)
        if value is None or isinstance(value, bool):
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            seen.add(number)
    return sorted(seen)


def correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient.

    Args:
        x: First sample.
        y: Second sample, same length as ``x``.

    Returns:
        Coefficient in [-1, 1]. Returns 0.0 for empty or unequal-length
        input and when either sample has zero variance.
    """
    xs = _as_array(x)
    ys = _as_array(y)
    if xs.size == 0 or xs.size != ys.size:
        if xs.size != ys.size:
            log.warning("Correlation inputs differ in length", n_x=xs.size, n_y=ys.size)
        return 0.0

    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0.0:
        return 0.0

    r = float(np.sum(dx * dy)) / denominator
    # Guard against rounding pushing |r| past 1
    return max(-1.0, min(1.0, r))


def anomalies(
    values: Iterable[float],
    threshold: float = DEFAULT_ANOMALY_THRESHOLD,
) -> list[float]:
    """
    Z-score outlier detection.

    Args:
        values: Numeric values.
        threshold: Number of standard deviations beyond which a value is
            an anomaly.

    Returns:
        Values with ``|value - mean| > threshold * std_dev``, in input order.
    """
    arr = _as_array(values)
    if arr.size == 0:
        return []

    summary = stats(arr)
    limit = threshold * summary.std_dev
    mask = np.abs(arr - summary.mean) > limit
    return [float(v) for v in arr[mask]]
