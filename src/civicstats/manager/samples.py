"""
Built-in sample data.

Used as a deterministic fallback when a load fails entirely. The rows
go through the regular transformers so that sample records obey the
same invariants as loaded ones.
"""

from typing import Any

from civicstats.config.settings import DatasetKind
from civicstats.ingestion.dataset import Dataset
from civicstats.ingestion.loader import LoadResult
from civicstats.ingestion.transformers import TRANSFORMERS, Accepted

SAMPLE_ROWS: dict[DatasetKind, list[dict[str, Any]]] = {
    DatasetKind.VEHICLE: [
        {"state": "Maharashtra", "district": "Mumbai", "vehicle_class": "Car",
         "fuel": "Petrol", "year": 2023, "month": 1, "value": 15000},
        {"state": "Maharashtra", "district": "Mumbai", "vehicle_class": "Motorcycle",
         "fuel": "Petrol", "year": 2023, "month": 1, "value": 25000},
        {"state": "Maharashtra", "district": "Pune", "vehicle_class": "Car",
         "fuel": "Diesel", "year": 2023, "month": 1, "value": 8000},
        {"state": "Delhi", "district": "New Delhi", "vehicle_class": "Car",
         "fuel": "CNG", "year": 2023, "month": 1, "value": 12000},
        {"state": "Karnataka", "district": "Bangalore", "vehicle_class": "Bus",
         "fuel": "Diesel", "year": 2023, "month": 2, "value": 800},
        {"state": "Tamil Nadu", "district": "Chennai", "vehicle_class": "Truck",
         "fuel": "Diesel", "year": 2023, "month": 2, "value": 1200},
    ],
    DatasetKind.OUTBREAK: [
        {"state": "Maharashtra", "district": "Mumbai", "disease_name": "Dengue",
         "outbreak_start": "2023-01-15", "reporting_date": "2023-01-20",
         "cases": 150, "deaths": 2, "status": "Active"},
        {"state": "Delhi", "district": "New Delhi", "disease_name": "Malaria",
         "outbreak_start": "2023-02-01", "reporting_date": "2023-02-05",
         "cases": 89, "deaths": 1, "status": "Controlled"},
    ],
    DatasetKind.POPULATION: [
        {"state": "Maharashtra", "district": "Mumbai", "gender": "Male",
         "year": 2023, "value": 6200000},
        {"state": "Maharashtra", "district": "Mumbai", "gender": "Female",
         "year": 2023, "value": 5800000},
        {"state": "Delhi", "district": "New Delhi", "gender": "Male",
         "year": 2023, "value": 8900000},
        {"state": "Delhi", "district": "New Delhi", "gender": "Female",
         "year": 2023, "value": 8100000},
    ],
    DatasetKind.AIR_QUALITY: [
        {"state": "Maharashtra", "area": "Mumbai Central", "date": "2023-01-15",
         "aqi_value": 156, "status": "Moderate", "pollutants": "PM2.5, NO2",
         "monitoring_stations": 5},
        {"state": "Delhi", "area": "Connaught Place", "date": "2023-01-15",
         "aqi_value": 289, "status": "Poor", "pollutants": "PM2.5, PM10",
         "monitoring_stations": 8},
    ],
}


def sample_dataset(kind: DatasetKind) -> Dataset[Any]:
    """Sample records of one kind."""
    transform = TRANSFORMERS[kind]
    records = []
    for row in SAMPLE_ROWS[kind]:
        result = transform(row)
        if not isinstance(result, Accepted):
            msg = f"Invalid built-in sample row for {kind.value}: {result.reason}"
            raise RuntimeError(msg)
        records.append(result.record)
    return Dataset(kind=kind, records=tuple(records))


def sample_data() -> LoadResult:
    """Sample records for every dataset kind."""
    return LoadResult(**{kind.value: sample_dataset(kind) for kind in DatasetKind})
