"""
Pandera schemas for the tabular view of each dataset.

``Dataset.to_frame()`` validates against these so that analysis code
working on DataFrames sees the same constraints as the record models.
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series


class VehicleFrameSchema(pa.DataFrameModel):
    """Schema for vehicle registration frames."""

    state: Series[str]
    district: Series[str]
    vehicle_class: Series[str]
    fuel: Series[str]
    year: Series[int]
    month: Series[int] = pa.Field(ge=1, le=12)
    value: Series[float] = pa.Field(ge=0.0)

    class Config:
        """Schema configuration."""

        name = "VehicleFrameSchema"
        strict = True
        coerce = True


class OutbreakFrameSchema(pa.DataFrameModel):
    """Schema for disease outbreak frames."""

    state: Series[str]
    district: Series[str]
    disease_name: Series[str]
    status: Series[str]
    outbreak_start: Series[pa.DateTime]
    reporting_date: Series[pa.DateTime]
    cases: Series[int] = pa.Field(ge=0)
    deaths: Series[int] = pa.Field(ge=0)

    @pa.dataframe_check
    def start_not_after_report(cls, df: pd.DataFrame) -> Series[bool]:
        """Outbreak start must not be later than the reporting date."""
        return df["outbreak_start"] <= df["reporting_date"]

    class Config:
        """Schema configuration."""

        name = "OutbreakFrameSchema"
        strict = True
        coerce = True


class PopulationFrameSchema(pa.DataFrameModel):
    """Schema for population projection frames."""

    state: Series[str]
    district: Series[str]
    gender: Series[str]
    year: Series[int] = pa.Field(ge=1900, le=2100)
    value: Series[float] = pa.Field(ge=0.0)

    class Config:
        """Schema configuration."""

        name = "PopulationFrameSchema"
        strict = True
        coerce = True


class AirQualityFrameSchema(pa.DataFrameModel):
    """Schema for air quality frames."""

    state: Series[str]
    area: Series[str]
    pollutants: Series[str]
    status: Series[str]
    date: Series[pa.DateTime]
    aqi_value: Series[float] = pa.Field(ge=0.0, le=1000.0)
    monitoring_stations: Series[int] = pa.Field(ge=0)

    class Config:
        """Schema configuration."""

        name = "AirQualityFrameSchema"
        strict = True
        coerce = True
