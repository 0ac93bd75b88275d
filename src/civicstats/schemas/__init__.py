"""
Schema definitions for records and dataset frames.

Records are Pydantic models (one per dataset kind); their tabular
views are validated with Pandera.
"""

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
    Record,
    VehicleRecord,
)
from civicstats.schemas.registry import SchemaInfo, SchemaRegistry

__all__ = [
    "AirQualityFrameSchema",
    "AirQualityRecord",
    "OutbreakFrameSchema",
    "OutbreakRecord",
    "PopulationFrameSchema",
    "PopulationRecord",
    "Record",
    "SchemaInfo",
    "SchemaRegistry",
    "VehicleFrameSchema",
    "VehicleRecord",
]
