"""
Main Entry Point

This script runs the heat-exposure generalized travel cost analysis.

Key Responsibilities:
---------------------
- Sets environment variables required by GDAL.
- Sets up unified structured logging.
- Parses command line options (paths, weights, reuse of saved itineraries).
- Runs the pipeline and reports failures with a non-zero exit code.

Typical Use:
------------
    python main.py --data-path data --output-path output
    python main.py --itineraries output/itineraries.geojson --weight-time 0.7 --weight-env 0.3
"""
# --- Ensure environment variables are set before any dependent imports ---
from heatcost.core.env import set_environment_variables
set_environment_variables()

import argparse
import logging
import sys

from heatcost.core.config import DATA_PATH, DEFAULT_WEIGHTS, OUTPUT_PATH
from heatcost.core.errors import HeatCostError
from heatcost.core.logger import setup_logging
from heatcost.pipeline import run_pipeline

logger = logging.getLogger(__name__)

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generalized travel cost combining transit time and heat exposure."
    )
    parser.add_argument("--data-path", default=str(DATA_PATH),
                        help="Folder with origin/destination CSVs and LST.tif")
    parser.add_argument("--output-path", default=str(OUTPUT_PATH), help="Folder for all outputs")
    parser.add_argument("--network-path", default=None,
                        help="Folder with .osm.pbf and GTFS feeds (defaults to --data-path)")
    parser.add_argument("--itineraries", default=None,
                        help="Reuse a saved itineraries GeoJSON instead of routing")
    parser.add_argument("--weight-time", type=float, default=DEFAULT_WEIGHTS["weight_time"])
    parser.add_argument("--weight-env", type=float, default=DEFAULT_WEIGHTS["weight_env"])
    parser.add_argument("--no-plot", action="store_true", help="Skip the cost map")
    return parser.parse_args(argv)

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()

    try:
        results = run_pipeline(
            data_path=args.data_path,
            output_path=args.output_path,
            network_path=args.network_path,
            itineraries_file=args.itineraries,
            weights={"weight_time": args.weight_time, "weight_env": args.weight_env},
            plot=not args.no_plot,
        )
    except (HeatCostError, FileNotFoundError) as e:
        logger.exception(f"Analysis failed: {e}")
        return 1

    logger.info(f"Analysis finished for {len(results.trip_costs)} trips.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
