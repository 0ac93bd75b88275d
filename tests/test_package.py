"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import civicstats

    assert civicstats.__version__


def test_config_module_imports() -> None:
    """Verify config module structure is correct."""
    from civicstats.config import (
        AppConfig,
        DatasetKind,
        FetchConfig,
        LoggingConfig,
        ManagerConfig,
        SourcesConfig,
        load_config,
    )

    assert AppConfig is not None
    assert FetchConfig is not None
    assert LoggingConfig is not None
    assert ManagerConfig is not None
    assert SourcesConfig is not None
    assert load_config is not None
    assert len(DatasetKind) == 4


def test_layer_imports() -> None:
    """Verify every layer exposes its public names."""
    from civicstats.analysis import DataStats, describe_columns
    from civicstats.errors import CivicStatsError, FetchError, ParseError
    from civicstats.ingestion import Dataset, LoaderOrchestrator, ParsingCache
    from civicstats.manager import DataManager, LoadState
    from civicstats.schemas import SchemaRegistry

    assert issubclass(FetchError, CivicStatsError)
    assert issubclass(ParseError, CivicStatsError)
    assert DataStats is not None
    assert describe_columns is not None
    assert Dataset is not None
    assert LoaderOrchestrator is not None
    assert ParsingCache is not None
    assert DataManager is not None
    assert LoadState.LOADED.value == "loaded"
    assert SchemaRegistry is not None
