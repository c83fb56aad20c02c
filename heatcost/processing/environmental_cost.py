"""
Environmental (Heat Exposure) Cost per Trip

Walking cost:  TDM_walk = segment_duration * mean_temperature   (per walking segment)
Waiting cost:  TDM_wait = wait * mean_temperature               (per non-walking segment)
Total cost:    TDM_total = TDM_walk + TDM_wait                  (per trip)

Segment costs are summed per (from_id, to_id) before the walk and wait sides
are joined, so a trip with several walking legs still yields one row.
Segments without a mean temperature are left out of the sums. The join keeps
every trip with a walking cost; trips without a usable wait cost get
`TDM_wait = 0` and `has_wait_data = False`.
"""


import logging

import geopandas as gpd
import pandas as pd

from heatcost.core.data_types import TRIP_KEY

logger = logging.getLogger(__name__)

def _sum_per_trip(segments: pd.DataFrame, time_column: str, cost_column: str) -> pd.DataFrame:
    """
    Multiplies `time_column` by `mean_temperature` and sums the product per trip,
    skipping segments whose temperature is missing.
    """
    valid = segments[segments["mean_temperature"].notna()]
    skipped = len(segments) - len(valid)
    if skipped:
        logger.warning(f"Excluded {skipped} segments without temperature from {cost_column}.")

    costs = pd.DataFrame(valid[TRIP_KEY]).copy()
    costs[cost_column] = valid[time_column].to_numpy() * valid["mean_temperature"].to_numpy()
    return costs.groupby(TRIP_KEY, as_index=False)[cost_column].sum()

def walk_cost(walk_segments: gpd.GeoDataFrame) -> pd.DataFrame:
    """
    Per-trip walking heat exposure.

    Args:
        walk_segments (GeoDataFrame): Walking segments with `mean_temperature`.

    Returns:
        pd.DataFrame: `from_id`, `to_id`, `TDM_walk`, one row per trip.
    """
    return _sum_per_trip(walk_segments, "segment_duration", "TDM_walk")

def wait_cost(wait_segments: gpd.GeoDataFrame) -> pd.DataFrame:
    """
    Per-trip waiting heat exposure.

    Args:
        wait_segments (GeoDataFrame): Non-walking segments with `mean_temperature`.

    Returns:
        pd.DataFrame: `from_id`, `to_id`, `TDM_wait`, one row per trip.
    """
    return _sum_per_trip(wait_segments, "wait", "TDM_wait")

def combine_environmental_cost(walk: pd.DataFrame, wait: pd.DataFrame) -> pd.DataFrame:
    """
    Left-joins per-trip wait costs onto per-trip walk costs and totals them.

    Args:
        walk (pd.DataFrame): Output of `walk_cost`.
        wait (pd.DataFrame): Output of `wait_cost`.

    Returns:
        pd.DataFrame: `from_id`, `to_id`, `TDM_walk`, `TDM_wait`, `has_wait_data`, `TDM_total`.
    """
    combined = walk.merge(wait, on=TRIP_KEY, how="left", validate="one_to_one")
    combined["has_wait_data"] = combined["TDM_wait"].notna()
    combined["TDM_wait"] = combined["TDM_wait"].fillna(0.0)
    combined["TDM_total"] = combined["TDM_walk"] + combined["TDM_wait"]

    without_wait = int((~combined["has_wait_data"]).sum())
    if without_wait:
        logger.info(f"{without_wait} trips have no wait cost; TDM_wait set to 0 for them.")

    dropped = len(wait) - int(combined["has_wait_data"].sum())
    if dropped:
        logger.warning(f"{dropped} trips with a wait cost have no walking cost and were dropped.")

    return combined

def compute_environmental_cost(
    walk_segments: gpd.GeoDataFrame,
    wait_segments: gpd.GeoDataFrame
) -> pd.DataFrame:
    """
    Full environmental cost stage: walk cost, wait cost, then their per-trip total.
    """
    combined = combine_environmental_cost(walk_cost(walk_segments), wait_cost(wait_segments))
    logger.info(f"Computed environmental cost for {len(combined)} trips.")
    return combined
