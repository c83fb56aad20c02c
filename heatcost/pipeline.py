"""
Heat-Exposure Generalized Travel Cost Pipeline

This module chains the pipeline stages. Every stage receives tables and returns
new tables; nothing is modified in place and no state is shared between stages.

Processing Stages:
------------------
1. Route detailed walk + transit itineraries (or reload saved ones).
2. Join mean land surface temperature to walking and waiting segments.
3. Compute per-trip walking, waiting and total heat exposure (TDM).
4. Aggregate walking, waiting and in-vehicle time per trip.
5. Normalize and blend both into the generalized cost, then min-max rescale.

Outputs (in the output folder):
-------------------------------
- itineraries.geojson, cost_analysis_results.gpkg, cost_summary.csv,
  normalized_generalized_cost.png

Main Functions:
---------------
- compute_trip_costs(...): Stages 2-5 on in-memory tables.
- run_pipeline(...): Stages 1-5 from input files, including all outputs.
"""


import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import geopandas as gpd
import pandas as pd

from heatcost.core.config import (
    BUFFER_DISTANCE, COST_MAP_FILE, COST_RESULTS_FILE, COST_SUMMARY_FILE,
    DESTINATIONS_FILE, ITINERARIES_FILE, LST_RASTER_FILE, ORIGINS_FILE,
    ROUTING_PARAMETERS, WORKING_CRS, ensure_output_dir
)
from heatcost.core.data_types import CostWeights, RoutingParameters
from heatcost.core.logger import stage_context
from heatcost.data.cost_storage import attach_trip_geometry, save_cost_results, summarize_costs
from heatcost.data.itinerary_storage import load_itineraries, save_itineraries
from heatcost.data.points import load_points
from heatcost.data.temperature import raster_to_points
from heatcost.processing.environmental_cost import compute_environmental_cost
from heatcost.processing.generalized_cost import compute_generalized_cost, validate_weights
from heatcost.processing.thermal_exposure import (
    join_mean_temperature, waiting_segments, walking_segments
)
from heatcost.processing.travel_time import aggregate_travel_time
from heatcost.routing.itineraries import compute_itineraries
from heatcost.visualization.cost_map import plot_cost_map

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CostResults:
    """
    Tables produced by one pipeline run.

    Attributes:
        segments: Itinerary segments the costs were computed from.
        walk_exposure: Walking segments with `mean_temperature`.
        wait_exposure: Non-walking segments with `mean_temperature`.
        environmental_cost: Per-trip TDM_walk, TDM_wait, TDM_total.
        travel_time: Per-trip walking, waiting, in-vehicle and total time.
        trip_costs: Final Trip Cost Records with trip geometry.
    """
    segments: gpd.GeoDataFrame
    walk_exposure: gpd.GeoDataFrame
    wait_exposure: gpd.GeoDataFrame
    environmental_cost: pd.DataFrame
    travel_time: pd.DataFrame
    trip_costs: gpd.GeoDataFrame


def compute_trip_costs(
    segments: gpd.GeoDataFrame,
    lst_points: gpd.GeoDataFrame,
    weights: Optional[CostWeights] = None,
    buffer_distance: float = BUFFER_DISTANCE,
    working_crs: Optional[str] = WORKING_CRS
) -> CostResults:
    """
    Runs the cost stages on in-memory tables.

    Args:
        segments (GeoDataFrame): Validated itinerary segments.
        lst_points (GeoDataFrame): Temperature samples.
        weights (CostWeights, optional): Generalized cost weights (config default).
        buffer_distance (float): Segment buffer radius for the temperature join.
        working_crs (str, optional): Metric CRS for buffering.

    Returns:
        CostResults: All intermediate and final tables.
    """
    with stage_context("thermal_join"):
        walk_exposure = join_mean_temperature(
            walking_segments(segments), lst_points, buffer_distance, working_crs
        )
        wait_exposure = join_mean_temperature(
            waiting_segments(segments), lst_points, buffer_distance, working_crs
        )

    with stage_context("environmental_cost"):
        environmental_cost = compute_environmental_cost(walk_exposure, wait_exposure)

    with stage_context("travel_time"):
        travel_time = aggregate_travel_time(segments)

    with stage_context("generalized_cost"):
        cost_data = compute_generalized_cost(travel_time, environmental_cost, weights)
        trip_costs = attach_trip_geometry(cost_data, segments)

    return CostResults(
        segments=segments,
        walk_exposure=walk_exposure,
        wait_exposure=wait_exposure,
        environmental_cost=environmental_cost,
        travel_time=travel_time,
        trip_costs=trip_costs,
    )

def run_pipeline(
    data_path: Union[str, Path],
    output_path: Union[str, Path],
    network_path: Optional[Union[str, Path]] = None,
    itineraries_file: Optional[Union[str, Path]] = None,
    weights: Optional[CostWeights] = None,
    routing_parameters: RoutingParameters = ROUTING_PARAMETERS,
    plot: bool = True
) -> CostResults:
    """
    Runs the whole analysis from input files and writes every output.

    Args:
        data_path (str | Path): Folder with the point CSVs and the LST raster.
        output_path (str | Path): Folder for all outputs.
        network_path (str | Path, optional): Routing network folder, defaults to `data_path`.
        itineraries_file (str | Path, optional): Saved itineraries; skips routing when given.
        weights (CostWeights, optional): Generalized cost weights.
        routing_parameters (RoutingParameters): Routing engine request.
        plot (bool): Whether to render the cost map.

    Returns:
        CostResults: All intermediate and final tables.
    """
    data_path = Path(data_path)
    output_path = ensure_output_dir(Path(output_path))
    network_path = Path(network_path) if network_path else data_path
    raster_file = data_path / LST_RASTER_FILE

    if weights is not None:
        validate_weights(weights)

    required = [raster_file]
    if itineraries_file is None:
        required += [data_path / ORIGINS_FILE, data_path / DESTINATIONS_FILE]
    else:
        required.append(Path(itineraries_file))
    missing = [str(p) for p in required if not p.exists()]
    if missing:
        raise FileNotFoundError(f"Missing input files: {missing}")

    with stage_context("itineraries"):
        if itineraries_file is not None:
            segments = load_itineraries(itineraries_file)
        else:
            origins = load_points(data_path / ORIGINS_FILE)
            destinations = load_points(data_path / DESTINATIONS_FILE)
            segments = compute_itineraries(network_path, origins, destinations, routing_parameters)
            save_itineraries(segments, output_path / ITINERARIES_FILE)

    with stage_context("temperature"):
        lst_points = raster_to_points(raster_file)

    results = compute_trip_costs(segments, lst_points, weights)

    with stage_context("output"):
        save_cost_results(results.trip_costs, output_path / COST_RESULTS_FILE)
        summary = summarize_costs(results.trip_costs)
        summary.to_csv(output_path / COST_SUMMARY_FILE, index_label="statistic")
        logger.info(f"Cost summary saved to '{output_path / COST_SUMMARY_FILE}'.")
        if plot:
            plot_cost_map(results.trip_costs, output_path / COST_MAP_FILE)

    return results
