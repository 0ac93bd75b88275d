"""
Parsing cache for source texts.

Memoizes parsed and transformed datasets by source key so that a
source is only parsed once per process until the cache is cleared.
"""

import csv
import io
from collections import Counter
from dataclasses import dataclass
from typing import Any

import pandas as pd

from civicstats.errors import ParseError
from civicstats.ingestion.dataset import Dataset
from civicstats.ingestion.transformers import Accepted, RecordTransformer
from civicstats.normalization.columns import normalize_columns
from civicstats.utils.logging import get_logger

log = get_logger(__name__)

MALFORMED_ROW = "malformed_row"


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time view of the cache contents."""

    size: int
    keys: list[str]


def parse_rows(
    source_key: str,
    raw_text: str,
    delimiter: str = ",",
) -> tuple[list[dict[str, Any]], int]:
    """
    Parse delimited text with a header row into generic rows.

    Every cell is read as a string; blank lines are skipped and header
    names are normalized. Rows with more or fewer fields than the header
    are logged and skipped.

    Args:
        source_key: Source identifier (for logging and errors).
        raw_text: Delimited text including the header row.
        delimiter: Field delimiter.

    Returns:
        Tuple of (rows keyed by canonical column name, malformed row count).

    Raises:
        ParseError: If the text cannot be parsed as delimited data at all.
    """
    if not raw_text.strip():
        return [], 0

    malformed: list[list[str]] = []

    def on_bad_line(fields: list[str]) -> None:
        log.warning(
            "Skipping malformed row",
            source=source_key,
            n_fields=len(fields),
            preview=delimiter.join(fields)[:80],
        )
        malformed.append(fields)
        return None

    try:
        df = pd.read_csv(
            io.StringIO(raw_text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            skipinitialspace=True,
            on_bad_lines=on_bad_line,
            engine="python",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error) as e:
        raise ParseError(source_key, str(e)) from e

    # empty cells read as "", so NaN only marks fields missing from a short row
    short = df.isna().any(axis=1)
    for _, row in df[short].iterrows():
        on_bad_line([str(value) for value in row.dropna()])
    df = df[~short]

    df = normalize_columns(df)
    return df.to_dict(orient="records"), len(malformed)


class ParsingCache:
    """
    In-memory cache of transformed datasets keyed by source.

    Entries are never evicted; ``clear()`` empties the cache before a
    forced reload.
    """

    def __init__(self, delimiter: str = ",") -> None:
        """
        Initialize parsing cache.

        Args:
            delimiter: Field delimiter of the source texts.
        """
        self.delimiter = delimiter
        self._entries: dict[str, Dataset[Any]] = {}

    def __contains__(self, source_key: object) -> bool:
        return source_key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, source_key: str) -> Dataset[Any] | None:
        """Get a cached dataset, or None on miss."""
        dataset = self._entries.get(source_key)
        if dataset is None:
            log.debug("Cache miss", key=source_key)
        else:
            log.debug("Cache hit", key=source_key, records=len(dataset))
        return dataset

    def get_or_parse(
        self,
        source_key: str,
        raw_text: str,
        transform: RecordTransformer,
    ) -> Dataset[Any]:
        """
        Return the cached dataset for a source, parsing it on a miss.

        Args:
            source_key: Cache key (one per source).
            raw_text: Delimited text to parse on a miss.
            transform: Transformer producing records of the source's kind.

        Returns:
            Dataset of accepted records, with rejection counts.

        Raises:
            ParseError: If the text cannot be parsed at all.
        """
        cached = self.get(source_key)
        if cached is not None:
            return cached

        rows, n_malformed = parse_rows(source_key, raw_text, self.delimiter)

        records: list[Any] = []
        reasons: Counter[str] = Counter()
        for row in rows:
            result = transform(row)
            if isinstance(result, Accepted):
                records.append(result.record)
            else:
                reasons[result.reason] += 1
        if n_malformed:
            reasons[MALFORMED_ROW] += n_malformed

        dataset: Dataset[Any] = Dataset(
            kind=transform.kind,
            records=tuple(records),
            rejected=sum(reasons.values()),
            rejection_reasons=dict(reasons),
        )

        log.info(
            "Parsed source",
            key=source_key,
            kind=transform.kind.value,
            accepted=len(dataset),
            rejected=dataset.rejected,
        )
        if reasons:
            log.debug("Rejection reasons", key=source_key, reasons=dict(reasons))

        self._entries[source_key] = dataset
        return dataset

    def invalidate(self, source_key: str) -> bool:
        """
        Invalidate a cache entry.

        Returns:
            True if an entry was removed.
        """
        if self._entries.pop(source_key, None) is not None:
            log.debug("Cache invalidated", key=source_key)
            return True
        return False

    def clear(self) -> int:
        """
        Clear all cache entries.

        Returns:
            Number of entries removed.
        """
        count = len(self._entries)
        self._entries.clear()
        log.info("Parsing cache cleared", entries_removed=count)
        return count

    def stats(self) -> CacheStats:
        """Size and keys of the cache."""
        return CacheStats(size=len(self._entries), keys=list(self._entries))
