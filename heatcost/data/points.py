"""
Origin and Destination Point Loader

This module loads the origin and destination point tables from CSV and prepares
them as point GeoDataFrames for the routing engine.

Features:
---------
- Accepts `lon`/`lat`, `longitude`/`latitude` or `x`/`y` coordinate columns.
- Casts identifiers to strings so they match the routing engine output.
- Rejects duplicate identifiers and rows with missing coordinates.

Functions:
----------
- `load_points(...)`: Loads and validates one point table.

Returns:
--------
A GeoDataFrame in EPSG:4326 with the following columns:
- `id`: Point identifier (string)
- `geometry`: shapely Point

Usage:
------
    from heatcost.data.points import load_points

    origins = load_points(DATA_PATH / ORIGINS_FILE)
"""


import logging
from pathlib import Path
from typing import Tuple, Union

import geopandas as gpd
import pandas as pd

from heatcost.core.config import SOURCE_CRS
from heatcost.core.errors import DataError
from heatcost.data.validation import validate_table

logger = logging.getLogger(__name__)

COORDINATE_ALIASES: Tuple[Tuple[str, str], ...] = (
    ("lon", "lat"),
    ("longitude", "latitude"),
    ("x", "y"),
)

def _coordinate_columns(df: pd.DataFrame) -> Tuple[str, str]:
    columns = {c.lower(): c for c in df.columns}
    for x_name, y_name in COORDINATE_ALIASES:
        if x_name in columns and y_name in columns:
            return columns[x_name], columns[y_name]
    raise DataError(
        f"No coordinate columns found; expected one of {COORDINATE_ALIASES}, got {list(df.columns)}"
    )

def load_points(
    path: Union[str, Path],
    crs: Union[int, str] = SOURCE_CRS
) -> gpd.GeoDataFrame:
    """
    Loads an origin or destination table from CSV.

    Args:
        path (str | Path): CSV file with an `id` column and coordinate columns.
        crs (int | str, optional): CRS of the coordinates (default: WGS84).

    Returns:
        gpd.GeoDataFrame: Points with `id` and `geometry`.

    Raises:
        FileNotFoundError: If the file does not exist.
        DataError: If ids are missing or duplicated, or coordinates are missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Point table not found: {path}")

    logger.info(f"Loading points from '{path}'...")
    df = pd.read_csv(path)
    logger.info(f"Loaded {len(df)} rows from source.")

    x_col, y_col = _coordinate_columns(df)
    coords = df[[x_col, y_col]].apply(pd.to_numeric, errors="coerce")
    if coords.isna().any().any():
        raise DataError(f"'{path.name}' has missing or non-numeric coordinates.")

    gdf = gpd.GeoDataFrame(
        df.drop(columns=[x_col, y_col]),
        geometry=gpd.points_from_xy(coords[x_col], coords[y_col]),
        crs=crs
    )
    gdf = validate_table(gdf, "points", path.name)

    duplicates = gdf["id"][gdf["id"].duplicated()].unique()
    if len(duplicates):
        raise DataError(f"'{path.name}' has duplicate ids: {list(duplicates)[:10]}")

    logger.info(f"Final point count: {len(gdf)}")
    return gdf
