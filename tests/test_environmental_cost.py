"""
Test suite for per-trip heat exposure (TDM) costs
File: tests/test_environmental_cost.py
"""

import numpy as np
import pandas as pd
import pytest

from conftest import make_segments
from heatcost.processing.environmental_cost import (
    combine_environmental_cost, compute_environmental_cost, wait_cost, walk_cost
)


def with_temperature(segments, temperatures):
    joined = segments.copy()
    joined["mean_temperature"] = temperatures
    return joined


class TestEnvironmentalCost:

    def setup_method(self):
        self.walk = with_temperature(make_segments([
            ("A", "X", "WALK", 5, 0, [(0, 0), (10, 0)]),
            ("A", "X", "WALK", 2, 0, [(10, 0), (20, 0)]),
            ("B", "Y", "WALK", 4, 0, [(0, 50), (10, 50)]),
            ("C", "Z", "WALK", 3, 0, [(0, 90), (10, 90)]),
            ("C", "Z", "WALK", 6, 0, [(10, 90), (20, 90)]),
        ]), [30.0, 20.0, 10.0, np.nan, 25.0])
        self.wait = with_temperature(make_segments([
            ("A", "X", "BUS", 10, 3, [(0, 0), (10, 0)]),
            ("D", "W", "BUS", 8, 2, [(0, 99), (10, 99)]),
        ]), [25.0, 40.0])

    def result_by_trip(self):
        result = compute_environmental_cost(self.walk, self.wait)
        return result.set_index(["from_id", "to_id"])

    def test_walk_cost_summed_per_trip(self):
        result = walk_cost(self.walk).set_index(["from_id", "to_id"])

        assert result.loc[("A", "X"), "TDM_walk"] == pytest.approx(5 * 30 + 2 * 20)
        assert result.loc[("B", "Y"), "TDM_walk"] == pytest.approx(40)
        assert not result.index.duplicated().any()

    def test_segments_without_temperature_excluded(self):
        result = walk_cost(self.walk).set_index(["from_id", "to_id"])
        assert result.loc[("C", "Z"), "TDM_walk"] == pytest.approx(6 * 25)

    def test_wait_cost_uses_wait_time(self):
        result = wait_cost(self.wait).set_index(["from_id", "to_id"])
        assert result.loc[("A", "X"), "TDM_wait"] == pytest.approx(3 * 25)

    def test_total_with_wait(self):
        row = self.result_by_trip().loc[("A", "X")]

        assert row["TDM_total"] == pytest.approx(190 + 75)
        assert bool(row["has_wait_data"]) is True

    def test_missing_wait_counts_as_zero_but_is_flagged(self):
        row = self.result_by_trip().loc[("B", "Y")]

        assert row["TDM_wait"] == 0
        assert row["TDM_total"] == pytest.approx(40)
        assert bool(row["has_wait_data"]) is False

    def test_trips_without_walk_cost_dropped(self):
        result = self.result_by_trip()
        assert ("D", "W") not in result.index
        assert len(result) == 3

    def test_combine_rejects_duplicate_trip_keys(self):
        walk = pd.DataFrame({"from_id": ["A", "A"], "to_id": ["X", "X"], "TDM_walk": [1.0, 2.0]})
        wait = pd.DataFrame({"from_id": ["A"], "to_id": ["X"], "TDM_wait": [1.0]})
        with pytest.raises(pd.errors.MergeError):
            combine_environmental_cost(walk, wait)
