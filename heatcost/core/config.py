"""
Project Configuration and Constants

This module centralizes configuration settings, paths, and constants
used across the heat-exposure travel cost pipeline.

Contents:
---------
- Input and output locations (data folder, output folder, file names)
- Routing parameters handed to the R5 routing engine
- Thermal join settings (buffer radius, working CRS)
- Travel-time mode literals and generalized cost weights

Key Concepts:
-------------
- Paths: Resolved from environment variables, falling back to folders next to the project root.
- Weights: `WEIGHT_TIME` and `WEIGHT_ENV` must sum to 1; they are validated where they are used.
- Mode literals: Only `IN_VEHICLE_MODE` counts as in-vehicle time. Other transit modes are excluded.

Usage:
------
Import any constant from this module for use in the pipeline:

    from heatcost.core.config import BUFFER_DISTANCE, DEFAULT_WEIGHTS

Environment Variables:
----------------------
- `.env` file is used for overriding paths, routing parameters and weights.
  (`HEATCOST_DATA_PATH`, `HEATCOST_OUTPUT_PATH`, `HEATCOST_WEIGHT_TIME`, ...)

Notes:
------
- Constants use `Final` from `typing` to indicate immutability.
- Output directories are only created by `ensure_output_dir()`, never on import.
"""

from dotenv import load_dotenv
import os
from datetime import datetime
from pathlib import Path
from typing import Final, List, Optional

from heatcost.core.data_types import CostWeights, RoutingParameters

load_dotenv()

# === Directories ===

ROOT_DIR: Final[Path] = Path(__file__).resolve().parents[2]
DATA_PATH: Final[Path] = Path(os.getenv("HEATCOST_DATA_PATH", str(ROOT_DIR / "data")))
OUTPUT_PATH: Final[Path] = Path(os.getenv("HEATCOST_OUTPUT_PATH", str(ROOT_DIR / "output")))
LOG_PATH: Final[Path] = Path(os.getenv("HEATCOST_LOG_PATH", str(OUTPUT_PATH / "logs")))
LOG_FILE: Final[Path] = LOG_PATH / "heatcost.log"

# === Input Files ===

ORIGINS_FILE: Final[str] = "origin_points.csv"
DESTINATIONS_FILE: Final[str] = "destination_points.csv"
LST_RASTER_FILE: Final[str] = "LST.tif" # Land surface temperature, single band

# === Output Files ===

ITINERARIES_FILE: Final[str] = "itineraries.geojson"
COST_RESULTS_FILE: Final[str] = "cost_analysis_results.gpkg"
COST_RESULTS_LAYER: Final[str] = "trip_costs"
COST_SUMMARY_FILE: Final[str] = "cost_summary.csv"
COST_MAP_FILE: Final[str] = "normalized_generalized_cost.png"

# === Routing (R5) ===

JAVA_MAX_MEMORY: Final[str] = os.getenv("JAVA_MAX_MEMORY", "30G")
TRANSPORT_MODES: Final[List[str]] = ["WALK", "TRANSIT"]
DEPARTURE_DATETIME: Final[datetime] = datetime.fromisoformat(
    os.getenv("HEATCOST_DEPARTURE", "2022-01-24T11:00:00")
)
MAX_WALK_TIME: Final[int] = int(os.getenv("HEATCOST_MAX_WALK_TIME", "17"))  # minutes
MAX_TRIP_DURATION: Final[int] = int(os.getenv("HEATCOST_MAX_TRIP_DURATION", "120"))  # minutes
TIME_WINDOW: Final[int] = int(os.getenv("HEATCOST_TIME_WINDOW", "30"))  # minutes
SHORTEST_PATH: Final[bool] = os.getenv("HEATCOST_SHORTEST_PATH", "true").lower() == "true"

ROUTING_PARAMETERS: Final[RoutingParameters] = {
    "transport_modes": TRANSPORT_MODES,
    "departure": DEPARTURE_DATETIME,
    "max_walk_time": MAX_WALK_TIME,
    "max_trip_duration": MAX_TRIP_DURATION,
    "time_window": TIME_WINDOW,
    "shortest_path": SHORTEST_PATH,
}

# === Coordinate Reference Systems ===

SOURCE_CRS: Final[int] = 4326 # WGS84, CRS of origin/destination CSVs and R5 output

# Metric CRS used for buffering. None = estimate the UTM zone from the segments.
_working_crs = os.getenv("HEATCOST_WORKING_CRS")
WORKING_CRS: Final[Optional[str]] = _working_crs if _working_crs else None

# === Thermal Exposure ===

BUFFER_DISTANCE: Final[float] = 30.0 # Buffer radius around segments, in working CRS units (metres)

# === Travel Modes ===

WALK_MODE: Final[str] = "WALK"
IN_VEHICLE_MODE: Final[str] = "BUS" # Only this literal counts as in-vehicle time

# === Generalized Cost ===

WEIGHT_TIME: Final[float] = float(os.getenv("HEATCOST_WEIGHT_TIME", "0.5"))
WEIGHT_ENV: Final[float] = float(os.getenv("HEATCOST_WEIGHT_ENV", "0.5"))
WEIGHT_TOLERANCE: Final[float] = 1e-9

DEFAULT_WEIGHTS: Final[CostWeights] = {
    "weight_time": WEIGHT_TIME,
    "weight_env": WEIGHT_ENV,
}


def ensure_output_dir(path: Path) -> Path:
    """
    Creates the output directory (and parents) if needed.

    Args:
        path (Path): Directory to create.

    Returns:
        Path: The same directory, guaranteed to exist.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path
