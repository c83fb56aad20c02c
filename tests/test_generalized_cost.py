"""
Test suite for generalized cost and min-max normalization
File: tests/test_generalized_cost.py
"""

import pandas as pd
import pytest

from heatcost.core.errors import ConfigurationError, DegenerateNormalizationError
from heatcost.processing.generalized_cost import (
    compute_generalized_cost, min_max_normalize, validate_weights
)


def travel_time_table(total_times):
    n = len(total_times)
    return pd.DataFrame({
        "from_id": [f"O{i}" for i in range(n)],
        "to_id": [f"D{i}" for i in range(n)],
        "t_walking": total_times,
        "t_waiting": [0.0] * n,
        "t_in_vehicle": [0.0] * n,
        "total_time": total_times,
    })


def environmental_table(totals):
    n = len(totals)
    return pd.DataFrame({
        "from_id": [f"O{i}" for i in range(n)],
        "to_id": [f"D{i}" for i in range(n)],
        "TDM_walk": totals,
        "TDM_wait": [0.0] * n,
        "has_wait_data": [False] * n,
        "TDM_total": totals,
    })


class TestGeneralizedCost:

    def setup_method(self):
        self.travel_time = travel_time_table([10.0, 30.0, 40.0])
        self.environmental = environmental_table([100.0, 50.0, 200.0])

    def test_reference_values(self):
        result = compute_generalized_cost(self.travel_time, self.environmental)

        assert list(result["normalized_t"]) == pytest.approx([0.25, 0.75, 1.0])
        assert list(result["normalized_e"]) == pytest.approx([0.5, 0.25, 1.0])
        assert list(result["generalized_cost"]) == pytest.approx([0.375, 0.5, 1.0])
        assert list(result["min_max_normalized_cost"]) == pytest.approx([0.0, 0.2, 1.0])

    def test_min_and_max_are_exact(self):
        result = compute_generalized_cost(self.travel_time, self.environmental)
        cost = result["min_max_normalized_cost"]

        assert cost[result["generalized_cost"].idxmin()] == 0.0
        assert cost[result["generalized_cost"].idxmax()] == 1.0
        assert cost.between(0.0, 1.0).all()

    def test_convex_combination(self):
        weights = {"weight_time": 0.7, "weight_env": 0.3}
        result = compute_generalized_cost(self.travel_time, self.environmental, weights)

        expected = 0.7 * result["normalized_t"] + 0.3 * result["normalized_e"]
        pd.testing.assert_series_equal(result["generalized_cost"], expected, check_names=False)
        lower = result[["normalized_t", "normalized_e"]].min(axis=1)
        upper = result[["normalized_t", "normalized_e"]].max(axis=1)
        assert ((result["generalized_cost"] >= lower - 1e-12) & (result["generalized_cost"] <= upper + 1e-12)).all()

    def test_normalized_values_within_unit_interval(self):
        result = compute_generalized_cost(self.travel_time, self.environmental)
        assert result["normalized_t"].between(0, 1).all()
        assert result["normalized_e"].between(0, 1).all()

    def test_inputs_not_modified(self):
        before = self.environmental.copy()
        compute_generalized_cost(self.travel_time, self.environmental)
        pd.testing.assert_frame_equal(self.environmental, before)

    def test_only_trips_in_both_tables(self):
        travel_time = self.travel_time.iloc[:2]
        result = compute_generalized_cost(travel_time, self.environmental)
        assert len(result) == 2

    def test_constant_generalized_cost_is_degenerate(self):
        travel_time = travel_time_table([10.0, 10.0])
        environmental = environmental_table([5.0, 5.0])
        with pytest.raises(DegenerateNormalizationError):
            compute_generalized_cost(travel_time, environmental)

    def test_zero_max_time_is_degenerate(self):
        travel_time = travel_time_table([0.0, 0.0, 0.0])
        with pytest.raises(DegenerateNormalizationError):
            compute_generalized_cost(travel_time, self.environmental)

    def test_zero_max_exposure_is_degenerate(self):
        environmental = environmental_table([0.0, 0.0, 0.0])
        with pytest.raises(DegenerateNormalizationError):
            compute_generalized_cost(self.travel_time, environmental)

    @pytest.mark.parametrize("totals", [[-30.0, 20.0], [-30.0, -10.0]])
    def test_negative_exposure_is_degenerate(self, totals):
        with pytest.raises(DegenerateNormalizationError, match="negative"):
            compute_generalized_cost(travel_time_table([10.0, 20.0]), environmental_table(totals))

    def test_negative_exposure_with_zero_max_is_degenerate(self):
        with pytest.raises(DegenerateNormalizationError):
            compute_generalized_cost(travel_time_table([10.0, 20.0]), environmental_table([-5.0, 0.0]))

    def test_constant_travel_time_is_accepted(self):
        travel_time = travel_time_table([25.0, 25.0, 25.0])
        result = compute_generalized_cost(travel_time, self.environmental)

        assert result["normalized_t"].tolist() == [1.0, 1.0, 1.0]
        assert result["normalized_e"].tolist() == pytest.approx([0.5, 0.25, 1.0])
        assert result["min_max_normalized_cost"].tolist() == pytest.approx([1 / 3, 0.0, 1.0])

    def test_no_common_trips(self):
        environmental = self.environmental.assign(to_id=["X", "Y", "Z"])
        with pytest.raises(DegenerateNormalizationError):
            compute_generalized_cost(self.travel_time, environmental)


class TestWeights:

    def test_valid_weights(self):
        assert validate_weights({"weight_time": 0.25, "weight_env": 0.75}) == {
            "weight_time": 0.25, "weight_env": 0.75
        }

    @pytest.mark.parametrize("weights", [
        {"weight_time": 0.6, "weight_env": 0.6},
        {"weight_time": -0.5, "weight_env": 1.5},
        {"weight_time": 0.5},
        {"weight_time": "abc", "weight_env": 0.5},
        {"weight_time": float("nan"), "weight_env": 0.5},
    ])
    def test_invalid_weights(self, weights):
        with pytest.raises(ConfigurationError):
            validate_weights(weights)

    def test_invalid_weights_rejected_before_computation(self):
        with pytest.raises(ConfigurationError):
            compute_generalized_cost(
                travel_time_table([1.0, 2.0]),
                environmental_table([1.0, 3.0]),
                {"weight_time": 1.0, "weight_env": 1.0},
            )


class TestMinMaxNormalize:

    def test_rescales_to_unit_interval(self):
        result = min_max_normalize(pd.Series([2.0, 4.0, 6.0]), "x")
        assert list(result) == [0.0, 0.5, 1.0]

    def test_empty_series(self):
        with pytest.raises(DegenerateNormalizationError):
            min_max_normalize(pd.Series([], dtype=float), "x")
