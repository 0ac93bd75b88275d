"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Source locations, retry policy and load budgets are never hardcoded in
processing code.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DatasetKind(str, Enum):
    """The four dataset kinds the engine ingests."""

    VEHICLE = "vehicle"
    OUTBREAK = "outbreak"
    POPULATION = "population"
    AIR_QUALITY = "air_quality"


class SourcesConfig(BaseModel):
    """Location of the delimited-text resource for each dataset kind.

    Paths are resolved against ``base_url`` by the fetcher.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str = Field(
        default="http://localhost:3000",
        description="Static file host serving the source CSV files",
    )
    vehicle: str = Field(
        default="/data/vahan.csv", description="Vehicle registrations CSV"
    )
    outbreak: str = Field(
        default="/data/idsp.csv", description="Disease outbreak reports CSV"
    )
    population: str = Field(
        default="/data/population_projection.csv",
        description="Population projections CSV",
    )
    air_quality: str = Field(
        default="/data/aqi.csv", description="Air quality readings CSV"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL is absolute HTTP(S)."""
        if not v.startswith(("http://", "https://")):
            msg = f"base_url must start with http:// or https://, got: {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    def path_for(self, kind: DatasetKind) -> str:
        """Path of the source serving ``kind``."""
        return getattr(self, kind.value)

    def items(self) -> list[tuple[DatasetKind, str]]:
        """All (kind, path) pairs in declaration order."""
        return [(kind, self.path_for(kind)) for kind in DatasetKind]


class FetchConfig(BaseModel):
    """Retry and content policy for the source fetcher."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: int = Field(default=3, ge=1, le=10)
    backoff_base_seconds: float = Field(
        default=1.0,
        ge=0.0,
        description="Delay after attempt n is backoff_base_seconds * 2**n",
    )
    min_content_length: int = Field(
        default=10, ge=0, description="Shorter (stripped) responses count as failures"
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0.0)
    cache_control: str = Field(default="max-age=3600")


class ManagerConfig(BaseModel):
    """Data manager load policy."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    load_timeout_seconds: float = Field(default=30.0, gt=0.0)
    use_sample_fallback: bool = Field(
        default=True,
        description="Substitute built-in sample data when a load fails entirely",
    )


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure level is a standard logging level name."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            msg = f"Unknown log level {v!r}. Valid: {', '.join(sorted(valid))}"
            raise ValueError(msg)
        return v.upper()


class AppConfig(BaseModel):
    """Complete engine configuration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    manager: ManagerConfig = Field(default_factory=ManagerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def base_url(self) -> str:
        """Convenience accessor for the source host."""
        return self.sources.base_url

    @property
    def load_timeout(self) -> float:
        """Convenience accessor for the aggregate load budget."""
        return self.manager.load_timeout_seconds
