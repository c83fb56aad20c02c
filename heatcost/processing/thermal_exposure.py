"""
Thermal Exposure Join

Buffers itinerary segments and spatially joins them against land surface
temperature samples, producing the mean temperature each segment is exposed to.

Processing Stages:
------------------
1. Resolve a metric working CRS (configured, the segments' own projected CRS,
   or the estimated UTM zone).
2. Buffer each segment by `BUFFER_DISTANCE` in that CRS.
3. Join temperature points that intersect each buffer.
4. Average the sample values per segment, ignoring NaN samples.

Segments with no (non-NaN) sample inside their buffer get a NaN
`mean_temperature`; they are never silently set to zero.

Main Functions:
---------------
- walking_segments(...) / waiting_segments(...): The two segment filters the join is applied to.
- join_mean_temperature(...): Returns a new segment table with `mean_temperature`.
"""


import logging
from typing import Optional, Union

import geopandas as gpd
import numpy as np
from pyproj import CRS

from heatcost.core.config import BUFFER_DISTANCE, WALK_MODE, WORKING_CRS
from heatcost.core.errors import DataError

logger = logging.getLogger(__name__)

def walking_segments(segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Segments travelled on foot."""
    return segments[segments["mode"] == WALK_MODE].copy()

def waiting_segments(segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Segments that may be preceded by a wait (every non-walking mode)."""
    return segments[segments["mode"] != WALK_MODE].copy()

def resolve_working_crs(
    segments: gpd.GeoDataFrame,
    working_crs: Optional[Union[str, int, CRS]] = WORKING_CRS
) -> CRS:
    """
    Picks the metric CRS used for buffering.

    Args:
        segments (GeoDataFrame): Segments to be buffered (non-empty, with CRS).
        working_crs (str | int | CRS, optional): Explicit CRS; overrides detection.

    Returns:
        CRS: The configured CRS, the segments' CRS if projected, else the estimated UTM zone.
    """
    if working_crs is not None:
        return CRS.from_user_input(working_crs)
    if segments.crs.is_projected:
        return CRS.from_user_input(segments.crs)
    utm = segments.estimate_utm_crs()
    logger.info(f"Using estimated UTM zone {utm.to_string()} as working CRS.")
    return utm

def join_mean_temperature(
    segments: gpd.GeoDataFrame,
    samples: gpd.GeoDataFrame,
    buffer_distance: float = BUFFER_DISTANCE,
    working_crs: Optional[Union[str, int, CRS]] = WORKING_CRS
) -> gpd.GeoDataFrame:
    """
    Computes the mean temperature around each segment.

    Args:
        segments (GeoDataFrame): Segments with geometry and CRS.
        samples (GeoDataFrame): Temperature points with `value` and CRS.
        buffer_distance (float): Buffer radius in working CRS units.
        working_crs (str | int | CRS, optional): CRS used for buffering.

    Returns:
        gpd.GeoDataFrame: Copy of `segments` (same index, order, geometry and CRS)
            with an added `mean_temperature` column.

    Raises:
        DataError: If either table has no CRS.
    """
    result = segments.copy()
    if segments.empty:
        result["mean_temperature"] = np.array([], dtype=float)
        return result

    if segments.crs is None or samples.crs is None:
        raise DataError("Segments and temperature samples must both carry a CRS.")

    crs = resolve_working_crs(segments, working_crs)

    buffered = gpd.GeoDataFrame(
        {"segment_pos": np.arange(len(segments))},
        geometry=segments.geometry.to_crs(crs).buffer(buffer_distance).to_numpy(),
        crs=crs
    )
    points = samples[["value", "geometry"]].to_crs(crs)

    joined = gpd.sjoin(buffered, points, how="left", predicate="intersects")
    means = joined.groupby("segment_pos")["value"].mean()

    result["mean_temperature"] = means.reindex(np.arange(len(segments))).to_numpy(dtype=float)

    missing = int(result["mean_temperature"].isna().sum())
    if missing:
        logger.warning(
            f"{missing} of {len(result)} segments have no temperature sample within "
            f"{buffer_distance} units; their mean temperature is missing."
        )
    logger.info(f"Joined mean temperature for {len(result) - missing} segments.")
    return result
