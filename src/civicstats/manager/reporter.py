"""
Console reporter for loaded data.

Formats data summaries and column profiles using Rich.
"""

from typing import Any

from rich.console import Console
from rich.table import Table

from civicstats.analysis.profile import ColumnInfo, ColumnType
from civicstats.analysis.statistics import DataStats
from civicstats.config.settings import DatasetKind
from civicstats.ingestion.dataset import Dataset
from civicstats.manager.core import DataManager, DataSummary

# Distinct values shown per categorical column before truncating
MAX_VALUES_SHOWN = 5


class ConsoleReporter:
    """Formats and displays manager state and statistics to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_summary(self, manager: DataManager) -> None:
        """
        Print per-dataset counts, rejections and state flags.

        Args:
            manager: Manager whose current data is reported.
        """
        summary = manager.get_data_summary()

        table = Table(title="Loaded Datasets", show_header=True)
        table.add_column("Dataset", style="cyan", no_wrap=True)
        table.add_column("Records", justify="right")
        table.add_column("Rejected", justify="right")
        table.add_column("Top rejection reason", style="dim")

        for kind in DatasetKind:
            dataset = manager.get_data(kind)
            table.add_row(
                kind.value,
                str(len(dataset)),
                self._format_rejected(dataset),
                self._top_reason(dataset),
            )

        self.console.print(table)
        self._print_state(summary)

    def _format_rejected(self, dataset: Dataset[Any]) -> str:
        if dataset.rejected == 0:
            return "[green]0[/green]"
        return f"[yellow]{dataset.rejected}[/yellow]"

    def _top_reason(self, dataset: Dataset[Any]) -> str:
        if not dataset.rejection_reasons:
            return "-"
        reason, count = max(dataset.rejection_reasons.items(), key=lambda kv: kv[1])
        return f"{reason} ({count})"

    def _print_state(self, summary: DataSummary) -> None:
        self.console.print()
        self.console.print("[bold]Summary:[/bold]")
        self.console.print(f"  Total records: {summary.total_records}")
        self.console.print(f"  Rejected rows: {summary.rejected_records}")
        state = "[green]loaded[/green]" if summary.is_loaded else "[yellow]not loaded[/yellow]"
        self.console.print(f"  State: {state}")
        if summary.using_sample_data:
            self.console.print("  [yellow]Sources unavailable: showing sample data[/yellow]")

    def print_columns(self, kind: DatasetKind, columns: list[ColumnInfo]) -> None:
        """
        Print a column profile.

        Args:
            kind: Dataset kind the profile belongs to.
            columns: Column profiles from ``describe_columns``.
        """
        table = Table(title=f"Columns: {kind.value}", show_header=True)
        table.add_column("Column", style="cyan", no_wrap=True)
        table.add_column("Type", style="blue")
        table.add_column("Details")

        for column in columns:
            table.add_row(column.name, column.type.value, self._format_column(column))

        self.console.print(table)

    def _format_column(self, column: ColumnInfo) -> str:
        if column.type is ColumnType.NUMERIC and column.stats is not None:
            return str(column.stats)
        if column.type is ColumnType.CATEGORICAL:
            shown = column.unique_values[:MAX_VALUES_SHOWN]
            more = len(column.unique_values) - len(shown)
            details = ", ".join(shown) or "-"
            return f"{details} (+{more} more)" if more > 0 else details
        return "-"

    def print_stats(self, label: str, stats: DataStats, anomalies: list[float]) -> None:
        """
        Print descriptive statistics and anomalies of one field.

        Args:
            label: Caption naming dataset and field.
            stats: Descriptive statistics.
            anomalies: Values flagged as anomalies.
        """
        table = Table(title=label, show_header=True)
        table.add_column("Statistic", style="cyan")
        table.add_column("Value", justify="right")
        for name, value in stats.to_dict().items():
            table.add_row(name, f"{value:,.2f}" if name != "count" else str(value))
        self.console.print(table)

        if anomalies:
            shown = ", ".join(f"{v:,.2f}" for v in anomalies[:10])
            self.console.print(f"[red]Anomalies ({len(anomalies)}):[/red] {shown}")
        else:
            self.console.print("[green]No anomalies[/green]")
