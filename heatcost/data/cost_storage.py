"""
Trip Cost Output Layer

This module attaches trip geometries to the per-trip cost table and persists
the results as a geospatial vector file plus a CSV of summary statistics.

Responsibilities:
-----------------
- Dissolve each trip's segment geometries into one trip geometry.
- Write the final cost table (GeoPackage by default) and read it back.
- Describe the cost distribution, including skewness and kurtosis.

Functions:
----------
- `trip_geometries(segments)`: One (multi)line geometry per trip.
- `attach_trip_geometry(cost_data, segments)`: Cost table -> GeoDataFrame.
- `save_cost_results(results, path)` / `load_cost_results(path)`: Vector file round trip.
- `summarize_costs(results)`: Descriptive statistics per cost column.

Notes:
------
- Shapefiles limit field names to 10 characters, so columns such as
  `min_max_normalized_cost` do not survive a round trip. GeoPackage is the default.
"""


import logging
from pathlib import Path
from typing import List, Optional, Union

import geopandas as gpd
import pandas as pd
from scipy import stats

from heatcost.core.config import COST_RESULTS_LAYER
from heatcost.core.data_types import TRIP_COST_COLUMNS, TRIP_KEY

logger = logging.getLogger(__name__)

DRIVERS = {
    ".gpkg": "GPKG",
    ".shp": "ESRI Shapefile",
    ".geojson": "GeoJSON",
}

SUMMARY_COLUMNS: List[str] = ["generalized_cost", "min_max_normalized_cost"]

def trip_geometries(segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Dissolves the segments of each trip into a single geometry.

    Args:
        segments (GeoDataFrame): Itinerary segments.

    Returns:
        gpd.GeoDataFrame: `from_id`, `to_id`, `geometry`, one row per trip.
    """
    return segments[TRIP_KEY + ["geometry"]].dissolve(by=TRIP_KEY, as_index=False)

def attach_trip_geometry(cost_data: pd.DataFrame, segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Adds the dissolved trip geometry to every trip cost record.

    Args:
        cost_data (pd.DataFrame): Output of `compute_generalized_cost`.
        segments (GeoDataFrame): Segments the costs were computed from.

    Returns:
        gpd.GeoDataFrame: Trip cost records with `geometry`, in the segments' CRS.
    """
    geometries = trip_geometries(segments)
    results = geometries.merge(cost_data[TRIP_COST_COLUMNS], on=TRIP_KEY, how="inner", validate="one_to_one")
    results = results[TRIP_COST_COLUMNS + ["geometry"]]
    return gpd.GeoDataFrame(results, geometry="geometry", crs=segments.crs).reset_index(drop=True)

def save_cost_results(
    results: gpd.GeoDataFrame,
    path: Union[str, Path],
    layer: Optional[str] = COST_RESULTS_LAYER
) -> Path:
    """
    Writes the trip cost table to a vector file; the driver follows the file suffix.

    Args:
        results (GeoDataFrame): Trip cost records with geometry.
        path (str | Path): Target file (`.gpkg`, `.shp` or `.geojson`).
        layer (str, optional): Layer name, used for GeoPackage only.

    Returns:
        Path: The written file.

    Raises:
        ValueError: If the suffix has no known driver.
    """
    path = Path(path)
    driver = DRIVERS.get(path.suffix.lower())
    if driver is None:
        raise ValueError(f"Unsupported output format '{path.suffix}'. Use one of {list(DRIVERS)}.")

    if driver == "ESRI Shapefile":
        logger.warning("Shapefile output truncates field names to 10 characters.")

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        path.unlink()

    kwargs = {"layer": layer} if driver == "GPKG" and layer else {}
    results.to_file(path, driver=driver, **kwargs)
    logger.info(f"Cost results for {len(results)} trips saved to '{path}'.")
    return path

def load_cost_results(
    path: Union[str, Path],
    layer: Optional[str] = COST_RESULTS_LAYER
) -> gpd.GeoDataFrame:
    """
    Reads a trip cost table written by `save_cost_results`.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Cost results not found: {path}")
    kwargs = {"layer": layer} if path.suffix.lower() == ".gpkg" and layer else {}
    results = gpd.read_file(path, **kwargs)
    if "has_wait_data" in results.columns:
        results["has_wait_data"] = results["has_wait_data"].astype(bool)
    return results

def summarize_costs(results: pd.DataFrame, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Describes the distribution of the cost columns.

    Skewness and kurtosis use the population (biased) moment estimators;
    kurtosis is Pearson's, so a normal distribution scores 3.

    Args:
        results (pd.DataFrame): Trip cost records.
        columns (List[str], optional): Columns to describe, defaults to the generalized costs.

    Returns:
        pd.DataFrame: One row per statistic, one column per cost column.
    """
    columns = columns or SUMMARY_COLUMNS
    summary = results[columns].describe()
    summary.loc["skewness"] = [stats.skew(results[c].to_numpy(), bias=True) for c in columns]
    summary.loc["kurtosis"] = [
        stats.kurtosis(results[c].to_numpy(), fisher=False, bias=True) for c in columns
    ]
    return summary
