"""Tests for record models, frame schemas and the schema registry."""

from datetime import date

import pandas as pd
import pytest
from pandera.errors import SchemaError
from pydantic import ValidationError

from civicstats.config.settings import DatasetKind
from civicstats.ingestion.cache import ParsingCache
from civicstats.ingestion.dataset import Dataset
from civicstats.ingestion.transformers import TRANSFORMERS
from civicstats.schemas import (
    OutbreakFrameSchema,
    OutbreakRecord,
    SchemaRegistry,
    VehicleFrameSchema,
    VehicleRecord,
)
from tests.fakes import OUTBREAK_CSV, VEHICLE_CSV


class TestRecords:
    """Tests for the record models."""

    def test_records_are_frozen(self) -> None:
        """Test that records cannot be mutated."""
        record = VehicleRecord(year=2023, month=1, value=1.0)
        with pytest.raises(ValidationError):
            record.value = 2.0  # type: ignore[misc]

    def test_unknown_field_rejected(self) -> None:
        """Test that records do not accept undeclared fields."""
        with pytest.raises(ValidationError):
            VehicleRecord(year=2023, month=1, value=1.0, colour="red")  # type: ignore[call-arg]

    def test_outbreak_date_order(self) -> None:
        """Test the model-level date ordering check."""
        with pytest.raises(ValidationError, match="is after"):
            OutbreakRecord(
                outbreak_start=date(2023, 2, 2), reporting_date=date(2023, 2, 1)
            )


class TestFrameSchemas:
    """Tests for the Pandera frame schemas."""

    def test_valid_vehicle_frame(self) -> None:
        """Test that a well-formed frame passes and is coerced."""
        df = pd.DataFrame(
            {
                "state": ["Goa"],
                "district": ["Panaji"],
                "vehicle_class": ["Car"],
                "fuel": ["Petrol"],
                "year": ["2023"],
                "month": [4],
                "value": [10],
            }
        )
        result = VehicleFrameSchema.validate(df)
        assert result["year"].iloc[0] == 2023

    def test_invalid_month(self) -> None:
        """Test that out-of-range months fail validation."""
        df = pd.DataFrame(
            {
                "state": ["Goa"],
                "district": ["Panaji"],
                "vehicle_class": ["Car"],
                "fuel": ["Petrol"],
                "year": [2023],
                "month": [13],
                "value": [10.0],
            }
        )
        with pytest.raises(SchemaError):
            VehicleFrameSchema.validate(df)

    def test_extra_column_rejected(self) -> None:
        """Test that strict schemas reject undeclared columns."""
        df = pd.DataFrame(
            {
                "state": ["Goa"],
                "district": ["Panaji"],
                "vehicle_class": ["Car"],
                "fuel": ["Petrol"],
                "year": [2023],
                "month": [1],
                "value": [10.0],
                "extra": ["x"],
            }
        )
        with pytest.raises(SchemaError):
            VehicleFrameSchema.validate(df)

    def test_outbreak_date_check(self) -> None:
        """Test the frame-level date ordering check."""
        df = pd.DataFrame(
            {
                "state": ["Delhi"],
                "district": ["New Delhi"],
                "disease_name": ["Malaria"],
                "status": ["Active"],
                "outbreak_start": ["2023-02-10"],
                "reporting_date": ["2023-02-05"],
                "cases": [1],
                "deaths": [0],
            }
        )
        with pytest.raises(SchemaError):
            OutbreakFrameSchema.validate(df)


class TestSchemaRegistry:
    """Tests for SchemaRegistry."""

    def test_every_kind_registered(self) -> None:
        """Test that each dataset kind has schema info."""
        assert SchemaRegistry.list_kinds() == list(DatasetKind)

    def test_lookup_by_string(self) -> None:
        """Test that kinds can be given by value."""
        assert SchemaRegistry.record_type("vehicle") is VehicleRecord
        assert SchemaRegistry.get("outbreak") is OutbreakFrameSchema

    def test_unknown_kind(self) -> None:
        """Test that unknown kinds raise KeyError listing the options."""
        with pytest.raises(KeyError, match="Available"):
            SchemaRegistry.get_info("weather")

    def test_fields_in_declaration_order(self) -> None:
        """Test the field list of a schema."""
        info = SchemaRegistry.get_info(DatasetKind.VEHICLE)
        assert info.fields == [
            "state",
            "district",
            "vehicle_class",
            "fuel",
            "year",
            "month",
            "value",
        ]

    def test_registry_version(self) -> None:
        """Test that the registry reports a version."""
        assert SchemaRegistry.registry_version() == "1.0.0"


class TestDataset:
    """Tests for the Dataset container."""

    @pytest.fixture
    def vehicles(self) -> Dataset[VehicleRecord]:
        """Vehicle dataset parsed from the fake CSV."""
        return ParsingCache().get_or_parse(
            "vehicle", VEHICLE_CSV, TRANSFORMERS[DatasetKind.VEHICLE]
        )

    def test_sequence_protocol(self, vehicles: Dataset[VehicleRecord]) -> None:
        """Test length, iteration, indexing and truthiness."""
        assert len(vehicles) == 2
        assert vehicles[0].district == "Mumbai"
        assert len(vehicles[:1]) == 1
        assert [r.district for r in vehicles] == ["Mumbai", "Bangalore"]
        assert vehicles
        assert not Dataset.empty(DatasetKind.VEHICLE)

    def test_total_rows(self, vehicles: Dataset[VehicleRecord]) -> None:
        """Test that accepted and rejected rows add up to the source rows."""
        assert vehicles.total_rows == 4

    def test_values(self, vehicles: Dataset[VehicleRecord]) -> None:
        """Test extracting one field."""
        assert vehicles.values("value") == [15000.0, 800.0]

    def test_values_unknown_field(self, vehicles: Dataset[VehicleRecord]) -> None:
        """Test that unknown fields raise KeyError."""
        with pytest.raises(KeyError, match="no field"):
            vehicles.values("colour")

    def test_to_frame(self, vehicles: Dataset[VehicleRecord]) -> None:
        """Test the validated tabular view."""
        df = vehicles.to_frame()

        assert list(df.columns) == SchemaRegistry.get_info(DatasetKind.VEHICLE).fields
        assert len(df) == 2
        assert df["value"].sum() == 15800.0

    def test_to_frame_dates(self) -> None:
        """Test that date fields become datetime columns."""
        outbreaks = ParsingCache().get_or_parse(
            "outbreak", OUTBREAK_CSV, TRANSFORMERS[DatasetKind.OUTBREAK]
        )
        df = outbreaks.to_frame()

        assert pd.api.types.is_datetime64_any_dtype(df["outbreak_start"])
        assert len(df) == 2

    def test_empty_to_frame(self) -> None:
        """Test that an empty dataset still has every column."""
        df = Dataset.empty(DatasetKind.POPULATION).to_frame(validate=False)

        assert df.empty
        assert list(df.columns) == ["state", "district", "gender", "year", "value"]
