"""Command-line interface for inspecting the ingestion engine."""

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console

from civicstats.config.settings import DatasetKind

if TYPE_CHECKING:
    from civicstats.config.settings import AppConfig
    from civicstats.manager.core import DataManager

app = typer.Typer(
    name="civicstats",
    help="Load public datasets and inspect their statistics.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file (defaults apply if omitted).",
        exists=True,
        dir_okay=False,
    ),
]

DatasetOption = Annotated[
    str,
    typer.Option(
        "--dataset",
        "-d",
        help="Dataset kind: vehicle, outbreak, population or air_quality.",
    ),
]


def _load_app_config(config: Path | None) -> "AppConfig":
    from civicstats.config.loader import default_config, load_config
    from civicstats.utils.logging import configure_logging

    app_config = load_config(config) if config is not None else default_config()
    configure_logging(app_config.logging)
    return app_config


def _parse_kind(dataset: str) -> DatasetKind:
    try:
        return DatasetKind(dataset)
    except ValueError:
        valid = ", ".join(k.value for k in DatasetKind)
        console.print(f"[red]Error: Unknown dataset '{dataset}'. Use one of: {valid}[/red]")
        raise typer.Exit(code=1) from None


def _with_loaded_manager(
    app_config: "AppConfig",
    action: Callable[["DataManager"], None],
) -> None:
    """Load all data with a fresh manager, then run ``action`` on it."""
    from civicstats.manager.core import DataManager

    async def _run() -> None:
        async with DataManager.from_config(app_config) as manager:
            await manager.load_all_data()
            action(manager)

    asyncio.run(_run())


@app.command()
def summary(config: ConfigOption = None) -> None:
    """Load all sources and print record counts per dataset."""
    from civicstats.manager.reporter import ConsoleReporter

    app_config = _load_app_config(config)
    reporter = ConsoleReporter(console)
    _with_loaded_manager(app_config, reporter.print_summary)


@app.command()
def columns(
    dataset: DatasetOption = "vehicle",
    config: ConfigOption = None,
) -> None:
    """Profile the columns of one dataset."""
    from civicstats.analysis.profile import describe_columns
    from civicstats.manager.reporter import ConsoleReporter

    kind = _parse_kind(dataset)
    app_config = _load_app_config(config)
    reporter = ConsoleReporter(console)

    def show(manager: "DataManager") -> None:
        reporter.print_columns(kind, describe_columns(manager.get_data(kind)))

    _with_loaded_manager(app_config, show)


@app.command()
def stats(
    dataset: DatasetOption = "vehicle",
    field: Annotated[
        str,
        typer.Option("--field", "-f", help="Numeric field to analyze."),
    ] = "value",
    threshold: Annotated[
        float,
        typer.Option(
            "--threshold",
            "-t",
            help="Anomaly threshold in standard deviations.",
            min=0.0,
        ),
    ] = 2.0,
    config: ConfigOption = None,
) -> None:
    """Descriptive statistics and z-score anomalies of a numeric field."""
    from civicstats.manager.reporter import ConsoleReporter
    from civicstats.schemas.registry import SchemaRegistry

    kind = _parse_kind(dataset)
    field_info = SchemaRegistry.record_type(kind).model_fields.get(field)
    if field_info is None or field_info.annotation not in (int, float):
        console.print(f"[red]Error: '{field}' is not a numeric field of {kind.value}[/red]")
        raise typer.Exit(code=1)

    app_config = _load_app_config(config)
    reporter = ConsoleReporter(console)

    def show(manager: "DataManager") -> None:
        values = manager.get_data(kind).values(field)
        reporter.print_stats(
            f"{kind.value}.{field}",
            manager.calculate_stats(values),
            manager.detect_anomalies(values, threshold),
        )

    _with_loaded_manager(app_config, show)


if __name__ == "__main__":
    app()
