"""
Column name normalization.

Source files come from different publishers with inconsistent headers.
Headers are first normalized (trimmed, lower-cased, whitespace runs to
underscores) and then mapped onto canonical record field names.
"""

import re

import pandas as pd

from civicstats.utils.logging import get_logger

log = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")

# Maps normalized source headers to canonical record field names
COLUMN_MAPPING: dict[str, str] = {
    # Outbreaks (IDSP)
    "disease_illness_name": "disease_name",
    "disease": "disease_name",
    "outbreak_starting_date": "outbreak_start",
    "outbreak_start_date": "outbreak_start",
    "date_of_reporting": "reporting_date",
    "no_of_cases": "cases",
    "no_of_deaths": "deaths",
    # Air quality
    "air_quality_status": "status",
    "prominent_pollutants": "pollutants",
    "number_of_monitoring_stations": "monitoring_stations",
    "aqi": "aqi_value",
    # Vehicles (VAHAN)
    "fuel_type": "fuel",
    "vehicle_category": "vehicle_class",
}


def normalize_header(header: object) -> str:
    """
    Normalize a single header name.

    Args:
        header: Raw header cell (non-strings are stringified).

    Returns:
        Trimmed, lower-cased header with whitespace runs replaced by ``_``.
    """
    return _WHITESPACE.sub("_", str(header).strip().lower())


def normalize_columns(
    df: pd.DataFrame,
    mapping: dict[str, str] | None = None,
) -> pd.DataFrame:
    """
    Normalize column names to canonical form.

    Args:
        df: DataFrame to normalize.
        mapping: Optional custom mapping (defaults to COLUMN_MAPPING).

    Returns:
        DataFrame with normalized column names.
    """
    mapping = mapping or COLUMN_MAPPING

    df = df.rename(columns=normalize_header)

    # Do not let an alias clobber a column that already has the canonical name
    rename_dict = {
        k: v for k, v in mapping.items() if k in df.columns and v not in df.columns
    }

    if rename_dict:
        log.debug("Normalizing columns", renamed=list(rename_dict.keys()))
        df = df.rename(columns=rename_dict)

    return df
