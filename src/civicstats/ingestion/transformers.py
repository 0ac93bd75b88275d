"""
Record transformers.

Each transformer turns one generic source row (canonical column name ->
cell) into a validated record or a rejection. Transformers never raise:
parse failures become ``Rejected`` results carrying a short reason key
such as ``missing:year`` or ``out_of_range:month``.

Policy per field type:
    - required fields that are absent or blank reject the row
    - numeric fields must parse to a finite number; integer fields must
      hold an integral value
    - declared ranges (month, year, AQI) reject when violated
    - counts (cases, deaths, monitoring stations) never reject: missing or
      unparsable counts become 0 and negative counts are clamped to 0
    - string fields are trimmed and default to ""
"""

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from civicstats.config.settings import DatasetKind
from civicstats.schemas.records import (
    AirQualityRecord,
    OutbreakRecord,
    PopulationRecord,
    VehicleRecord,
)

R = TypeVar("R", bound=BaseModel)

Row = Mapping[str, Any]

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%d %b %Y",
    "%d-%b-%Y",
    "%d %B %Y",
)


@dataclass(frozen=True)
class Accepted(Generic[R]):
    """A row that produced a valid record."""

    record: R


@dataclass(frozen=True)
class Rejected:
    """A row that was dropped, with the reason it was dropped."""

    reason: str


TransformResult = Accepted[Any] | Rejected


class _Reject(Exception):
    """Internal signal used to abort a transform with a reason."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _text(row: Row, name: str) -> str:
    value = row.get(name)
    return "" if _is_blank(value) else str(value).strip()


def _required(row: Row, name: str) -> Any:
    value = row.get(name)
    if _is_blank(value):
        raise _Reject(f"missing:{name}")
    return value.strip() if isinstance(value, str) else value


def _to_float(value: Any) -> float | None:
    """Parse a finite float, or None."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _required_float(row: Row, name: str) -> float:
    number = _to_float(_required(row, name))
    if number is None:
        raise _Reject(f"not_numeric:{name}")
    return number


def _required_int(row: Row, name: str) -> int:
    number = _required_float(row, name)
    if not number.is_integer():
        raise _Reject(f"not_integer:{name}")
    return int(number)


def _count(row: Row, name: str) -> int:
    """Parse an optional count; unparsable becomes 0, negatives clamp to 0."""
    number = _to_float(row.get(name))
    if number is None:
        return 0
    return max(0, int(number))


def parse_date(value: Any) -> date | None:
    """
    Parse a date cell.

    Accepts ``date``/``datetime`` objects and the string formats in
    DATE_FORMATS, falling back to ISO-8601 parsing. Slash dates are read
    month first (``01/02/2023`` is 2 January); a slash date whose first
    part cannot be a month is read day first (``15/01/2023``).

    Returns:
        The parsed date, or None if the value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _required_date(row: Row, name: str) -> date:
    parsed = parse_date(_required(row, name))
    if parsed is None:
        raise _Reject(f"invalid_date:{name}")
    return parsed


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise _Reject(f"out_of_range:{name}")


def _rejection_from(error: ValidationError) -> Rejected:
    """Reduce a Pydantic error to a reason key naming the first bad field."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "record"
    return Rejected(f"invalid:{location}")


def _guarded(build: Callable[[Row], BaseModel]) -> Callable[[Row], TransformResult]:
    """Wrap a record builder so that every failure becomes a Rejected result."""

    def transform(row: Row) -> TransformResult:
        try:
            return Accepted(build(row))
        except _Reject as e:
            return Rejected(e.reason)
        except ValidationError as e:
            return _rejection_from(e)
        except (TypeError, ValueError, OverflowError) as e:
            return Rejected(f"unparsable:{type(e).__name__}")

    transform.__name__ = build.__name__
    transform.__doc__ = build.__doc__
    return transform


@_guarded
def transform_vehicle(row: Row) -> VehicleRecord:
    """Build a VehicleRecord; year, month and value are required."""
    year = _required_int(row, "year")
    month = _required_int(row, "month")
    value = _required_float(row, "value")
    _check_range("month", month, 1, 12)
    if value < 0:
        raise _Reject("negative:value")

    return VehicleRecord(
        state=_text(row, "state"),
        district=_text(row, "district"),
        vehicle_class=_text(row, "vehicle_class"),
        fuel=_text(row, "fuel"),
        year=year,
        month=month,
        value=value,
    )


@_guarded
def transform_outbreak(row: Row) -> OutbreakRecord:
    """Build an OutbreakRecord; both dates are required."""
    outbreak_start = _required_date(row, "outbreak_start")
    reporting_date = _required_date(row, "reporting_date")
    if outbreak_start > reporting_date:
        raise _Reject("start_after_reporting")

    return OutbreakRecord(
        state=_text(row, "state"),
        district=_text(row, "district"),
        disease_name=_text(row, "disease_name"),
        status=_text(row, "status"),
        outbreak_start=outbreak_start,
        reporting_date=reporting_date,
        cases=_count(row, "cases"),
        deaths=_count(row, "deaths"),
    )


@_guarded
def transform_population(row: Row) -> PopulationRecord:
    """Build a PopulationRecord; year and value are required."""
    year = _required_int(row, "year")
    value = _required_float(row, "value")
    _check_range("year", year, 1900, 2100)
    if value < 0:
        raise _Reject("negative:value")

    return PopulationRecord(
        state=_text(row, "state"),
        district=_text(row, "district"),
        gender=_text(row, "gender"),
        year=year,
        value=value,
    )


@_guarded
def transform_air_quality(row: Row) -> AirQualityRecord:
    """Build an AirQualityRecord; aqi_value and date are required."""
    aqi_value = _required_float(row, "aqi_value")
    reading_date = _required_date(row, "date")
    _check_range("aqi_value", aqi_value, 0.0, 1000.0)

    return AirQualityRecord(
        state=_text(row, "state"),
        area=_text(row, "area"),
        pollutants=_text(row, "pollutants"),
        status=_text(row, "status"),
        date=reading_date,
        aqi_value=aqi_value,
        monitoring_stations=_count(row, "monitoring_stations"),
    )


@dataclass(frozen=True)
class RecordTransformer:
    """A transformer bound to the dataset kind it produces."""

    kind: DatasetKind
    transform: Callable[[Row], TransformResult]

    def __call__(self, row: Row) -> TransformResult:
        return self.transform(row)


TRANSFORMERS: dict[DatasetKind, RecordTransformer] = {
    DatasetKind.VEHICLE: RecordTransformer(DatasetKind.VEHICLE, transform_vehicle),
    DatasetKind.OUTBREAK: RecordTransformer(DatasetKind.OUTBREAK, transform_outbreak),
    DatasetKind.POPULATION: RecordTransformer(
        DatasetKind.POPULATION, transform_population
    ),
    DatasetKind.AIR_QUALITY: RecordTransformer(
        DatasetKind.AIR_QUALITY, transform_air_quality
    ),
}
