"""
Typed Data Structures for the Heat-Exposure Travel Cost Pipeline

This module defines the `TypedDict`-based parameter contracts and the column
schemas used across the pipeline. The schemas standardize how itinerary
segments, temperature samples and per-trip cost records are named and typed.

Purpose:
--------
- Ensure type safety and IDE support across the cost computation flow.
- Declare the required columns of every table once, so ingestion can reject
  incomplete tables instead of propagating undefined values through arithmetic.

Key Structures:
---------------
- `CostWeights`: Weights of the generalized cost function.
- `RoutingParameters`: Parameters handed to the routing engine.

Notes:
------
- The `TypedDict`s are **non-enforced typing helpers**; the `TABLE_SCHEMAS` and
  `NULLABLE_COLUMNS` tables below are what `heatcost.data.validation` checks at runtime.
- Trip cost columns: TDM_* in minutes x degrees, `has_wait_data` False when no
  wait segment had a temperature (then TDM_wait is 0), normalized_* in [0, 1].
- Durations are always stored in minutes as floats.
"""


from datetime import datetime
from typing import Dict, Final, List, Tuple, TypedDict

TRIP_KEY: Final[List[str]] = ["from_id", "to_id"]


class CostWeights(TypedDict):
    """
    Weights of the generalized cost function. Must be non-negative and sum to 1.
    """
    weight_time: float
    weight_env: float


class RoutingParameters(TypedDict):
    """
    Routing request handed to the R5 engine.

    Attributes:
        transport_modes (List[str]): Allowed modes, e.g. ["WALK", "TRANSIT"].
        departure (datetime): Departure timestamp.
        max_walk_time (int): Max walking time per trip in minutes.
        max_trip_duration (int): Max trip duration in minutes.
        time_window (int): Departure time window in minutes.
        shortest_path (bool): Keep only the fastest option per OD pair.
    """
    transport_modes: List[str]
    departure: datetime
    max_walk_time: int
    max_trip_duration: int
    time_window: int
    shortest_path: bool


# === Runtime column schemas: (column, pandas dtype kind) ===
# dtype kinds follow numpy: "O" object/string, "f" float, "i" integer, "b" bool

POINT_COLUMNS: Final[List[Tuple[str, str]]] = [
    ("id", "O"),
    ("geometry", "O"),
]

SEGMENT_COLUMNS: Final[List[Tuple[str, str]]] = [
    ("from_id", "O"),
    ("to_id", "O"),
    ("mode", "O"),
    ("segment_duration", "f"),
    ("wait", "f"),
    ("geometry", "O"),
]

TEMPERATURE_COLUMNS: Final[List[Tuple[str, str]]] = [
    ("value", "f"),
    ("geometry", "O"),
]

TRIP_COST_COLUMNS: Final[List[str]] = [
    "from_id", "to_id",
    "TDM_walk", "TDM_wait", "TDM_total", "has_wait_data",
    "t_walking", "t_waiting", "t_in_vehicle", "total_time",
    "normalized_t", "normalized_e", "generalized_cost", "min_max_normalized_cost",
]

# Columns that may legitimately contain NaN (everything else required is non-null)
NULLABLE_COLUMNS: Final[Dict[str, List[str]]] = {
    "segments": [],
    "temperature": ["value"],
    "points": [],
}

TABLE_SCHEMAS: Final[Dict[str, List[Tuple[str, str]]]] = {
    "segments": SEGMENT_COLUMNS,
    "temperature": TEMPERATURE_COLUMNS,
    "points": POINT_COLUMNS,
}
