"""
Dataset container.

A Dataset is the validated, immutable output of ingesting one source.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, overload

import pandas as pd
from pydantic import BaseModel

from civicstats.config.settings import DatasetKind
from civicstats.schemas.registry import SchemaRegistry

R = TypeVar("R", bound=BaseModel)


@dataclass(frozen=True)
class Dataset(Generic[R]):
    """
    Ordered sequence of validated records of one kind.

    Attributes:
        kind: Dataset kind the records belong to.
        records: The accepted records, in source order.
        rejected: Number of source rows dropped by the transformer.
        rejection_reasons: Count of dropped rows per rejection reason.
    """

    kind: DatasetKind
    records: tuple[R, ...] = ()
    rejected: int = 0
    rejection_reasons: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, kind: DatasetKind) -> "Dataset[Any]":
        """An empty dataset of the given kind."""
        return cls(kind=kind)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[R]:
        return iter(self.records)

    @overload
    def __getitem__(self, index: int) -> R: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[R, ...]: ...

    def __getitem__(self, index: int | slice) -> R | tuple[R, ...]:
        return self.records[index]

    def __bool__(self) -> bool:
        return bool(self.records)

    @property
    def total_rows(self) -> int:
        """Rows seen in the source, accepted or not."""
        return len(self.records) + self.rejected

    def values(self, field_name: str) -> list[Any]:
        """
        Extract one field from every record.

        Raises:
            KeyError: If the record type has no such field.
        """
        record_type = SchemaRegistry.record_type(self.kind)
        if field_name not in record_type.model_fields:
            msg = f"{record_type.__name__} has no field '{field_name}'"
            raise KeyError(msg)
        return [getattr(record, field_name) for record in self.records]

    def to_frame(self, *, validate: bool = True) -> pd.DataFrame:
        """
        Tabular view of the dataset, one row per record.

        Args:
            validate: Whether to validate against the kind's frame schema.

        Returns:
            DataFrame with one column per record field.
        """
        info = SchemaRegistry.get_info(self.kind)
        df = pd.DataFrame(
            [record.model_dump() for record in self.records],
            columns=info.fields,
        )
        if validate:
            df = SchemaRegistry.validate(df, self.kind)
        return df
