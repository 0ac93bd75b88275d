"""
Configuration management with typed Pydantic models.

Provides source locations, retry policy and load budgets with
environment-aware configuration loading.
"""

from civicstats.config.loader import default_config, load_config
from civicstats.config.settings import (
    AppConfig,
    DatasetKind,
    FetchConfig,
    LoggingConfig,
    ManagerConfig,
    SourcesConfig,
)

__all__ = [
    "AppConfig",
    "DatasetKind",
    "FetchConfig",
    "LoggingConfig",
    "ManagerConfig",
    "SourcesConfig",
    "default_config",
    "load_config",
]
