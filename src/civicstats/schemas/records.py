"""
Typed record models for the four dataset kinds.

Records are immutable and only ever constructed by the record
transformers, so every instance in a Dataset satisfies the field
constraints declared here.
"""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, model_validator

_RECORD_CONFIG = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)


class VehicleRecord(BaseModel):
    """Monthly vehicle registrations for one district/class/fuel."""

    model_config = _RECORD_CONFIG

    state: str = ""
    district: str = ""
    vehicle_class: str = ""
    fuel: str = ""
    year: int
    month: int = Field(ge=1, le=12)
    value: float = Field(ge=0.0, allow_inf_nan=False)


class OutbreakRecord(BaseModel):
    """A reported disease outbreak (IDSP)."""

    model_config = _RECORD_CONFIG

    state: str = ""
    district: str = ""
    disease_name: str = ""
    status: str = ""
    outbreak_start: dt.date
    reporting_date: dt.date
    cases: int = Field(default=0, ge=0)
    deaths: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_dates(self) -> "OutbreakRecord":
        """An outbreak cannot start after it was reported."""
        if self.outbreak_start > self.reporting_date:
            msg = (
                f"outbreak_start {self.outbreak_start} is after "
                f"reporting_date {self.reporting_date}"
            )
            raise ValueError(msg)
        return self


class PopulationRecord(BaseModel):
    """Projected population for one district, gender and year."""

    model_config = _RECORD_CONFIG

    state: str = ""
    district: str = ""
    gender: str = ""
    year: int = Field(ge=1900, le=2100)
    value: float = Field(ge=0.0, allow_inf_nan=False)


class AirQualityRecord(BaseModel):
    """Daily AQI reading for one monitored area."""

    model_config = _RECORD_CONFIG

    state: str = ""
    area: str = ""
    pollutants: str = ""
    status: str = ""
    date: dt.date
    aqi_value: float = Field(ge=0.0, le=1000.0, allow_inf_nan=False)
    monitoring_stations: int = Field(default=0, ge=0)


Record = VehicleRecord | OutbreakRecord | PopulationRecord | AirQualityRecord
