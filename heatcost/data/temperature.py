"""
Land Surface Temperature Raster Loader

Converts a single-band land surface temperature (LST) GeoTIFF into a point
GeoDataFrame with one point per raster cell centre. Cells matching the
raster's nodata value (or masked by it) become NaN samples, which are
ignored later when temperatures are averaged.

Functions:
----------
- `raster_to_points(...)`: Reads band 1 and returns `value` + `geometry` points.
"""


import logging
from pathlib import Path
from typing import Union

import geopandas as gpd
import numpy as np
import rasterio
from rasterio.transform import xy

from heatcost.core.errors import DataError
from heatcost.data.validation import validate_table

logger = logging.getLogger(__name__)

def raster_to_points(
    raster_path: Union[str, Path],
    band: int = 1,
    drop_nodata: bool = False
) -> gpd.GeoDataFrame:
    """
    Converts raster cells to temperature sample points.

    Args:
        raster_path (str | Path): Path to the LST raster.
        band (int): Band index to read (1-based).
        drop_nodata (bool): If True, nodata cells are dropped instead of kept as NaN.

    Returns:
        gpd.GeoDataFrame: Columns `value` (float) and `geometry` (cell centre), in the raster CRS.

    Raises:
        FileNotFoundError: If the raster does not exist.
        DataError: If the raster carries no CRS.
    """
    raster_path = Path(raster_path)
    if not raster_path.exists():
        raise FileNotFoundError(f"Temperature raster not found: {raster_path}")

    with rasterio.open(raster_path) as src:
        if src.crs is None:
            raise DataError(f"Raster '{raster_path.name}' has no georeferencing (CRS missing).")

        data = src.read(band, masked=True)
        rows, cols = np.indices(data.shape)
        xs, ys = xy(src.transform, rows.ravel(), cols.ravel(), offset="center")
        values = np.ma.filled(data.astype(float), np.nan).ravel()
        crs = src.crs

    points = gpd.GeoDataFrame(
        {"value": values},
        geometry=gpd.points_from_xy(np.asarray(xs), np.asarray(ys)),
        crs=crs
    )

    nodata_count = int(np.isnan(values).sum())
    if drop_nodata and nodata_count:
        points = points[points["value"].notna()].reset_index(drop=True)

    logger.info(
        f"Converted raster '{raster_path.name}' to {len(points)} points "
        f"({nodata_count} nodata cells{' dropped' if drop_nodata else ''})."
    )
    return validate_table(points, "temperature", raster_path.name)
