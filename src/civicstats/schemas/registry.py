"""
Schema registry for dataset kinds.

Provides centralized access to the record model and frame schema of
each dataset kind.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import pandera.pandas as pa
from pydantic import BaseModel

from civicstats.config.settings import DatasetKind
from civicstats.schemas.frames import (
    AirQualityFrameSchema,
    OutbreakFrameSchema,
    PopulationFrameSchema,
    VehicleFrameSchema,
)
from civicstats.schemas.records import (
    AirQualityRecord,
    OutbreakRecord,
    PopulationRecord,
    VehicleRecord,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class SchemaInfo:
    """Metadata about a registered dataset kind."""

    kind: DatasetKind
    record: type[BaseModel]
    frame: type[pa.DataFrameModel]
    version: str
    description: str

    @property
    def fields(self) -> list[str]:
        """Record field names in declaration order."""
        return list(self.record.model_fields.keys())


class SchemaRegistry:
    """
    Centralized registry for all dataset schemas.

    Provides version tracking and schema discovery.
    """

    _version = "1.0.0"

    _schemas: ClassVar[dict[DatasetKind, SchemaInfo]] = {
        DatasetKind.VEHICLE: SchemaInfo(
            kind=DatasetKind.VEHICLE,
            record=VehicleRecord,
            frame=VehicleFrameSchema,
            version="1.0.0",
            description="Monthly vehicle registrations (VAHAN)",
        ),
        DatasetKind.OUTBREAK: SchemaInfo(
            kind=DatasetKind.OUTBREAK,
            record=OutbreakRecord,
            frame=OutbreakFrameSchema,
            version="1.0.0",
            description="Disease outbreak reports (IDSP)",
        ),
        DatasetKind.POPULATION: SchemaInfo(
            kind=DatasetKind.POPULATION,
            record=PopulationRecord,
            frame=PopulationFrameSchema,
            version="1.0.0",
            description="Population projections by district and gender",
        ),
        DatasetKind.AIR_QUALITY: SchemaInfo(
            kind=DatasetKind.AIR_QUALITY,
            record=AirQualityRecord,
            frame=AirQualityFrameSchema,
            version="1.0.0",
            description="Daily air quality index readings",
        ),
    }

    @classmethod
    def registry_version(cls) -> str:
        """Get the registry version."""
        return cls._version

    @classmethod
    def get_info(cls, kind: DatasetKind | str) -> SchemaInfo:
        """
        Get full schema info for a dataset kind.

        Args:
            kind: Dataset kind or its string value.

        Returns:
            SchemaInfo with metadata.

        Raises:
            KeyError: If the kind is unknown.
        """
        try:
            return cls._schemas[DatasetKind(kind)]
        except ValueError:
            available = ", ".join(k.value for k in cls._schemas)
            msg = f"Unknown dataset kind '{kind}'. Available: {available}"
            raise KeyError(msg) from None

    @classmethod
    def get(cls, kind: DatasetKind | str) -> type[pa.DataFrameModel]:
        """Get the frame schema for a dataset kind."""
        return cls.get_info(kind).frame

    @classmethod
    def record_type(cls, kind: DatasetKind | str) -> type[BaseModel]:
        """Get the record model for a dataset kind."""
        return cls.get_info(kind).record

    @classmethod
    def list_kinds(cls) -> list[DatasetKind]:
        """List all registered dataset kinds."""
        return list(cls._schemas.keys())

    @classmethod
    def validate(cls, df: "pd.DataFrame", kind: DatasetKind | str) -> "pd.DataFrame":
        """
        Validate a DataFrame against a dataset kind's frame schema.

        Args:
            df: DataFrame to validate.
            kind: Dataset kind to validate against.

        Returns:
            Validated (and coerced) DataFrame.

        Raises:
            pandera.errors.SchemaError: If validation fails.
        """
        return cls.get(kind).validate(df)
