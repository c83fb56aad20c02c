"""
Travel Time Aggregation per Trip

Groups itinerary segments by (from_id, to_id) and sums:

- t_walking:    duration of segments with mode WALK
- t_waiting:    wait before every segment, whatever its mode
- t_in_vehicle: duration of segments whose mode literal is exactly `IN_VEHICLE_MODE` ("BUS")
- total_time:   t_walking + t_waiting + t_in_vehicle

Durations of other transit modes (e.g. RAIL, TRAM) are not counted in
`t_in_vehicle` and therefore not in `total_time` either.
"""


import logging

import pandas as pd

from heatcost.core.config import IN_VEHICLE_MODE, WALK_MODE
from heatcost.core.data_types import TRIP_KEY

logger = logging.getLogger(__name__)

def aggregate_travel_time(
    segments: pd.DataFrame,
    walk_mode: str = WALK_MODE,
    in_vehicle_mode: str = IN_VEHICLE_MODE
) -> pd.DataFrame:
    """
    Sums walking, waiting and in-vehicle time per trip.

    Args:
        segments (pd.DataFrame): Segments with `from_id`, `to_id`, `mode`,
            `segment_duration` and `wait` (minutes).
        walk_mode (str): Mode literal counted as walking.
        in_vehicle_mode (str): Mode literal counted as in-vehicle time.

    Returns:
        pd.DataFrame: One row per trip with `t_walking`, `t_waiting`,
            `t_in_vehicle` and `total_time`.
    """
    times = pd.DataFrame({
        "from_id": segments["from_id"].to_numpy(),
        "to_id": segments["to_id"].to_numpy(),
        "t_walking": segments["segment_duration"].where(segments["mode"] == walk_mode, 0.0).to_numpy(),
        "t_waiting": segments["wait"].to_numpy(),
        "t_in_vehicle": segments["segment_duration"].where(segments["mode"] == in_vehicle_mode, 0.0).to_numpy(),
    })

    excluded = segments.loc[~segments["mode"].isin([walk_mode, in_vehicle_mode]), "mode"]
    if not excluded.empty:
        logger.debug(
            f"{len(excluded)} segments with modes {sorted(excluded.unique())} "
            f"do not count as in-vehicle time."
        )

    travel_time = times.groupby(TRIP_KEY, as_index=False)[
        ["t_walking", "t_waiting", "t_in_vehicle"]
    ].sum()
    travel_time["total_time"] = (
        travel_time["t_walking"] + travel_time["t_waiting"] + travel_time["t_in_vehicle"]
    )

    logger.info(f"Aggregated travel time for {len(travel_time)} trips.")
    return travel_time
