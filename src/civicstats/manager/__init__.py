"""Data manager: load lifecycle, read accessors and summaries."""

from civicstats.manager.core import DataManager, DataSummary, LoadState
from civicstats.manager.reporter import ConsoleReporter
from civicstats.manager.samples import sample_data

__all__ = ["ConsoleReporter", "DataManager", "DataSummary", "LoadState", "sample_data"]
