"""
Itinerary Normalisation and Persistence

This module turns raw routing engine output into validated itinerary segments
and persists them as GeoJSON so a run can be repeated without routing again.

Responsibilities:
-----------------
- Rename engine columns to the segment schema (`mode`, `segment_duration`, `wait`).
- Convert timedeltas to float minutes and mode enums to upper-case literals.
- Keep only the fastest option per origin-destination pair when requested.
- Fail fast on empty results or broken geometries.

Functions:
----------
- `normalize_itineraries(raw)`: Engine output -> validated segment GeoDataFrame.
- `select_shortest_options(segments)`: Keep the fastest option per OD pair.
- `save_itineraries(segments, path)` / `load_itineraries(path)`: GeoJSON round trip.

Storage:
--------
- File name is controlled via `ITINERARIES_FILE` from `heatcost.core.config`.
"""


import logging
from pathlib import Path
from typing import Union

import geopandas as gpd
import pandas as pd

from heatcost.core.config import SOURCE_CRS
from heatcost.core.data_types import TRIP_KEY
from heatcost.core.errors import DataError, RoutingError
from heatcost.data.validation import validate_geometries, validate_table

logger = logging.getLogger(__name__)

ENGINE_COLUMN_MAP = {
    "transport_mode": "mode",
    "travel_time": "segment_duration",
    "wait_time": "wait",
}

def _to_minutes(series: pd.Series) -> pd.Series:
    """
    Converts a duration column to float minutes; numeric columns are assumed to be minutes already.
    """
    if pd.api.types.is_timedelta64_dtype(series):
        return series.dt.total_seconds() / 60.0
    if series.map(lambda v: isinstance(v, pd.Timedelta)).any():
        return pd.to_timedelta(series).dt.total_seconds() / 60.0
    return pd.to_numeric(series, errors="coerce")

def _mode_literal(mode) -> str:
    """
    Returns the upper-case literal of a mode enum member or string.
    """
    return str(getattr(mode, "name", mode)).upper()

def normalize_itineraries(raw: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Normalises routing engine output into itinerary segments.

    Rows without a mode (origin-destination pairs the engine could not route)
    are dropped before validation.

    Args:
        raw (GeoDataFrame): Engine output with `from_id`, `to_id`, `option`, `segment`,
            `transport_mode`, `travel_time`, `wait_time` and `geometry`.

    Returns:
        gpd.GeoDataFrame: Validated segments (new table).

    Raises:
        RoutingError: If no itineraries remain or any geometry is broken.
    """
    if raw is None or raw.empty:
        raise RoutingError("Routing engine returned no itineraries.")

    segments = raw.rename(columns=ENGINE_COLUMN_MAP).copy()

    if "mode" in segments.columns:
        unrouted = segments["mode"].isna()
        if unrouted.any():
            pairs = segments.loc[unrouted, TRIP_KEY].drop_duplicates()
            logger.warning(f"Dropping {len(pairs)} origin-destination pairs without an itinerary.")
            segments = segments[~unrouted]
        segments["mode"] = segments["mode"].map(_mode_literal)

    if segments.empty:
        raise RoutingError("Routing engine returned no itineraries for any origin-destination pair.")

    for column in ("segment_duration", "wait"):
        if column in segments.columns:
            segments[column] = _to_minutes(segments[column])
    if "wait" in segments.columns:
        segments["wait"] = segments["wait"].fillna(0.0)

    for column in ("option", "segment"):
        if column not in segments.columns:
            segments[column] = 0
        segments[column] = segments[column].fillna(0).astype(int)

    try:
        segments = validate_table(segments, "segments", "itineraries")
        validate_geometries(segments, "itineraries")
    except DataError as e:
        raise RoutingError(f"Malformed routing output: {e}") from e

    if segments.crs is None:
        logger.warning(f"Itineraries carry no CRS. Assuming EPSG:{SOURCE_CRS}.")
        segments = segments.set_crs(SOURCE_CRS)

    logger.info(
        f"Normalised {len(segments)} segments for "
        f"{segments.groupby(TRIP_KEY).ngroups} origin-destination pairs."
    )
    return segments.reset_index(drop=True)

def select_shortest_options(segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Keeps, per origin-destination pair, only the option with the lowest total
    (duration + wait) time. Ties go to the lowest option number.

    Args:
        segments (GeoDataFrame): Normalised segments, possibly with several options per pair.

    Returns:
        gpd.GeoDataFrame: Segments of the fastest option per pair, ordered by key and segment.
    """
    totals = segments.groupby(TRIP_KEY + ["option"], as_index=False).agg(
        trip_duration=("segment_duration", "sum"),
        trip_wait=("wait", "sum"),
    )
    totals["trip_total"] = totals["trip_duration"] + totals["trip_wait"]

    best = (
        totals.sort_values(TRIP_KEY + ["trip_total", "option"])
        .drop_duplicates(subset=TRIP_KEY, keep="first")[TRIP_KEY + ["option"]]
    )

    shortest = segments.merge(best, on=TRIP_KEY + ["option"], how="inner")
    shortest = shortest.sort_values(TRIP_KEY + ["segment"]).reset_index(drop=True)

    logger.info(f"Kept {len(best)} fastest options ({len(shortest)} of {len(segments)} segments).")
    return gpd.GeoDataFrame(shortest, geometry="geometry", crs=segments.crs)

def save_itineraries(segments: gpd.GeoDataFrame, path: Union[str, Path]) -> Path:
    """
    Writes itinerary segments to GeoJSON.

    Args:
        segments (GeoDataFrame): Segments to persist.
        path (str | Path): Target file.

    Returns:
        Path: The written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = [c for c in segments.columns if c != "geometry"] + ["geometry"]
    out = segments[columns].copy()
    # GeoJSON has no timedelta/datetime type for extra engine columns
    for column in out.columns:
        if pd.api.types.is_timedelta64_dtype(out[column]):
            out[column] = out[column].dt.total_seconds() / 60.0
        elif pd.api.types.is_datetime64_any_dtype(out[column]):
            out[column] = out[column].astype(str)
    if path.exists():
        path.unlink()
    out.to_file(path, driver="GeoJSON")
    logger.info(f"Itineraries successfully saved to '{path}'.")
    return path

def load_itineraries(path: Union[str, Path]) -> gpd.GeoDataFrame:
    """
    Loads previously saved itinerary segments and validates them.

    Args:
        path (str | Path): GeoJSON written by `save_itineraries`.

    Returns:
        gpd.GeoDataFrame: Validated segments.

    Raises:
        FileNotFoundError: If the file is missing.
        DataError: If required fields are missing or geometries are broken.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Itinerary file not found: {path}")

    segments = gpd.read_file(path)
    if segments.empty:
        raise DataError(f"Itinerary file '{path}' contains no segments.")
    if segments.crs is None:
        logger.warning(f"Itinerary file has no CRS. Assuming EPSG:{SOURCE_CRS}.")
        segments = segments.set_crs(SOURCE_CRS)

    segments = validate_table(segments, "segments", path.name)
    validate_geometries(segments, path.name)
    logger.info(f"Loaded {len(segments)} itinerary segments from '{path}'.")
    return segments
