"""
Detailed Itinerary Generation with the R5 Routing Engine

This module wraps `r5py` to route walk + transit itineraries between the
origin and destination point sets for a fixed departure time and time window.
The engine is treated as an opaque synchronous call; its result is normalised
into itinerary segments by `heatcost.data.itinerary_storage`.

Key Features:
-------------
- Discovers the OSM extract (`*.osm.pbf`) and GTFS feeds (`*.zip`) in the network folder
- Builds the transport network once per call
- Pairs origins and destinations one-to-one when both tables have the same length
  (set `all_to_all=True` to route every combination)
- Optionally keeps only the fastest option per origin-destination pair

External Dependencies:
----------------------
- `r5py`: Python wrapper around Conveyal's R5 (requires Java 21+).
  It is imported inside `compute_itineraries` because importing it starts a JVM.
  The JVM heap limit is passed as r5py's `--max-memory` option, which r5py
  reads from the command line on first import.

Example:
--------
    from heatcost.routing.itineraries import compute_itineraries

    segments = compute_itineraries(DATA_PATH, origins, destinations, ROUTING_PARAMETERS)
"""

import logging
import sys
from datetime import timedelta
from pathlib import Path
from typing import List, Tuple, Union

import geopandas as gpd

from heatcost.core.config import JAVA_MAX_MEMORY
from heatcost.core.data_types import RoutingParameters
from heatcost.core.errors import RoutingError
from heatcost.data.itinerary_storage import normalize_itineraries, select_shortest_options

logger = logging.getLogger(__name__)

def find_network_files(network_path: Union[str, Path]) -> Tuple[Path, List[Path]]:
    """
    Locates the OSM extract and GTFS feeds inside the network folder.

    Args:
        network_path (str | Path): Folder consumed by the routing engine.

    Returns:
        Tuple[Path, List[Path]]: The `.osm.pbf` file and the GTFS zip files (may be empty).

    Raises:
        FileNotFoundError: If the folder or the OSM extract is missing.
    """
    network_path = Path(network_path)
    if not network_path.is_dir():
        raise FileNotFoundError(f"Network folder not found: {network_path}")

    osm_files = sorted(network_path.glob("*.osm.pbf"))
    if not osm_files:
        raise FileNotFoundError(f"No .osm.pbf street network found in {network_path}")
    if len(osm_files) > 1:
        logger.warning(f"Several OSM extracts found, using '{osm_files[0].name}'.")

    gtfs_files = sorted(network_path.glob("*.zip"))
    if not gtfs_files:
        logger.warning("No GTFS feeds found. Itineraries will be walk-only.")

    return osm_files[0], gtfs_files

def configure_r5_memory(max_memory: str = JAVA_MAX_MEMORY) -> None:
    """
    Hands the JVM heap limit to r5py as its `--max-memory` command line option.

    r5py parses `sys.argv` once, when it is first imported, and starts the JVM
    with its own `-Xmx`. This must therefore run before `import r5py`. An
    option already given on the command line wins.

    Args:
        max_memory (str): Absolute size or share of RAM, e.g. "30G" or "80%".
    """
    if any(arg == "--max-memory" or arg.startswith("--max-memory=") for arg in sys.argv):
        return
    sys.argv.extend(["--max-memory", max_memory])
    logger.debug(f"R5 JVM heap limit set to {max_memory}.")

def compute_itineraries(
    network_path: Union[str, Path],
    origins: gpd.GeoDataFrame,
    destinations: gpd.GeoDataFrame,
    parameters: RoutingParameters,
    all_to_all: bool = False
) -> gpd.GeoDataFrame:
    """
    Routes detailed itineraries and returns validated segments.

    Args:
        network_path (str | Path): Folder with the OSM extract and GTFS feeds.
        origins (GeoDataFrame): Origin points with `id`.
        destinations (GeoDataFrame): Destination points with `id`.
        parameters (RoutingParameters): Modes, departure, limits and shortest-path flag.
        all_to_all (bool): Route every origin to every destination.

    Returns:
        gpd.GeoDataFrame: Itinerary segments (columns of `SEGMENT_COLUMNS`).

    Raises:
        RoutingError: If the engine fails or returns nothing usable.
        FileNotFoundError: If the network folder or the OSM extract is missing.
    """
    osm_file, gtfs_files = find_network_files(network_path)

    configure_r5_memory()
    import r5py

    try:
        logger.info("Building R5 transport network...")
        transport_network = r5py.TransportNetwork(
            osm_pbf=str(osm_file),
            gtfs=[str(f) for f in gtfs_files]
        )

        transport_modes = [r5py.TransportMode[m] for m in parameters["transport_modes"]]

        logger.info(
            f"Computing detailed itineraries for {len(origins)} origins and "
            f"{len(destinations)} destinations (departure {parameters['departure']})..."
        )
        raw = r5py.DetailedItinerariesComputer(
            transport_network,
            origins=origins[["id", "geometry"]],
            destinations=destinations[["id", "geometry"]],
            departure=parameters["departure"],
            departure_time_window=timedelta(minutes=parameters["time_window"]),
            transport_modes=transport_modes,
            max_time=timedelta(minutes=parameters["max_trip_duration"]),
            max_time_walking=timedelta(minutes=parameters["max_walk_time"]),
            force_all_to_all=all_to_all,
        ).compute_travel_details()
    except Exception as e:
        # r5py surfaces RuntimeError, ValueError, KeyError and JPype's JException
        raise RoutingError(f"R5 routing failed: {e}") from e

    segments = normalize_itineraries(gpd.GeoDataFrame(raw))

    if parameters["shortest_path"]:
        segments = select_shortest_options(segments)

    return segments
