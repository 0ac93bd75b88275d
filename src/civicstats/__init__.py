"""
civicstats: ingestion and statistics engine for public datasets.

This package fetches vehicle registration, disease outbreak, population
and air quality tables, validates every row into typed records, and
provides descriptive statistics, correlation and anomaly detection
over the loaded data.
"""

from importlib.metadata import version

__version__ = version("civicstats")

__all__ = ["__version__"]
