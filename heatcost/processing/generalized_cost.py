"""
Generalized Cost and Min-Max Normalization

Equation (1): generalized_cost = w_t * total_time / max(total_time)
                               + w_e * TDM_total / max(TDM_total)
Equation (2): min_max_normalized_cost = (gc - min(gc)) / (max(gc) - min(gc))

Both normalizations are relative to the trips of the current run only.
Dividing by the maximum only maps onto [0, 1] for non-negative values with a
positive maximum. Negative values (e.g. sub-zero land surface temperatures),
a non-positive maximum, or a generalized cost that is identical for every trip
are reported as `DegenerateNormalizationError` instead. A constant but positive
`total_time` or `TDM_total` is accepted: every trip then gets 1.0 on that axis
and the other axis still ranks the trips.
"""


import logging
import math
from typing import Optional

import pandas as pd

from heatcost.core.config import DEFAULT_WEIGHTS, WEIGHT_TOLERANCE
from heatcost.core.data_types import CostWeights, TRIP_KEY
from heatcost.core.errors import ConfigurationError, DegenerateNormalizationError

logger = logging.getLogger(__name__)

def validate_weights(weights: CostWeights) -> CostWeights:
    """
    Checks that the generalized cost weights are finite, non-negative and sum to 1.

    Raises:
        ConfigurationError: If a weight is missing or invalid.
    """
    try:
        weight_time = float(weights["weight_time"])
        weight_env = float(weights["weight_env"])
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid cost weights {weights!r}: {e}") from e

    if not (math.isfinite(weight_time) and math.isfinite(weight_env)):
        raise ConfigurationError(f"Cost weights must be finite, got {weights!r}.")
    if weight_time < 0 or weight_env < 0:
        raise ConfigurationError(f"Cost weights must be non-negative, got {weights!r}.")
    if abs(weight_time + weight_env - 1.0) > WEIGHT_TOLERANCE:
        raise ConfigurationError(
            f"Cost weights must sum to 1, got {weight_time} + {weight_env} = {weight_time + weight_env}."
        )
    return {"weight_time": weight_time, "weight_env": weight_env}

def _normalize_by_max(values: pd.Series, name: str) -> pd.Series:
    negative = int((values < 0).sum())
    if negative:
        raise DegenerateNormalizationError(
            f"Cannot normalize '{name}': {negative} trips have a negative value "
            f"(minimum {values.min()})."
        )
    maximum = values.max()
    if not math.isfinite(maximum) or maximum <= 0:
        raise DegenerateNormalizationError(
            f"Cannot normalize '{name}': maximum over all trips is {maximum}."
        )
    return values / maximum

def min_max_normalize(values: pd.Series, name: str) -> pd.Series:
    """
    Rescales `values` to [0, 1] using their own minimum and maximum.

    Raises:
        DegenerateNormalizationError: If the series is empty or max == min.
    """
    if values.empty:
        raise DegenerateNormalizationError(f"Cannot min-max normalize '{name}': no trips.")
    minimum, maximum = values.min(), values.max()
    if maximum == minimum:
        raise DegenerateNormalizationError(
            f"Cannot min-max normalize '{name}': all {len(values)} trips share the value {minimum}."
        )
    return (values - minimum) / (maximum - minimum)

def compute_generalized_cost(
    travel_time: pd.DataFrame,
    environmental_cost: pd.DataFrame,
    weights: Optional[CostWeights] = None
) -> pd.DataFrame:
    """
    Merges travel time and environmental cost per trip and derives the generalized cost.

    Args:
        travel_time (pd.DataFrame): Output of `aggregate_travel_time`.
        environmental_cost (pd.DataFrame): Output of `compute_environmental_cost`.
        weights (CostWeights, optional): Defaults to `DEFAULT_WEIGHTS` from config.

    Returns:
        pd.DataFrame: One row per trip present in both tables with
            `normalized_t`, `normalized_e`, `generalized_cost`, `min_max_normalized_cost`.

    Raises:
        ConfigurationError: If the weights are invalid.
        DegenerateNormalizationError: If a normalization base is negative, has a
            non-positive maximum, or the generalized cost is constant.
    """
    weights = validate_weights(weights if weights is not None else DEFAULT_WEIGHTS)

    cost_data = environmental_cost.merge(travel_time, on=TRIP_KEY, how="inner", validate="one_to_one")
    if cost_data.empty:
        raise DegenerateNormalizationError("No trip has both a travel time and an environmental cost.")

    unmatched = len(environmental_cost) - len(cost_data)
    if unmatched:
        logger.warning(f"{unmatched} trips with environmental cost have no travel time and were dropped.")

    cost_data["normalized_t"] = _normalize_by_max(cost_data["total_time"], "total_time")
    cost_data["normalized_e"] = _normalize_by_max(cost_data["TDM_total"], "TDM_total")
    cost_data["generalized_cost"] = (
        weights["weight_time"] * cost_data["normalized_t"]
        + weights["weight_env"] * cost_data["normalized_e"]
    )
    cost_data["min_max_normalized_cost"] = min_max_normalize(
        cost_data["generalized_cost"], "generalized_cost"
    )

    logger.info(
        f"Generalized cost for {len(cost_data)} trips ranges "
        f"{cost_data['generalized_cost'].min():.3f} to {cost_data['generalized_cost'].max():.3f}."
    )
    return cost_data
