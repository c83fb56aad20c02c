"""
Test suite for schema validation at ingestion
File: tests/test_validation.py
"""

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import LineString, Point

from heatcost.core.data_types import NULLABLE_COLUMNS
from heatcost.core.errors import DataError
from heatcost.data.validation import validate_geometries, validate_table


class TestValidateTable:

    def setup_method(self):
        self.samples = gpd.GeoDataFrame(
            {"value": [25.0, np.nan, 27]},
            geometry=[Point(0, 0), Point(1, 0), Point(2, 0)],
            crs="EPSG:32633",
        )
        self.segments = gpd.GeoDataFrame(
            {
                "from_id": [1, 2],
                "to_id": ["D1", "D2"],
                "mode": ["WALK", "BUS"],
                "segment_duration": [5, np.nan],
                "wait": [0.0, 2.0],
            },
            geometry=[LineString([(0, 0), (1, 0)]), LineString([(1, 0), (2, 0)])],
            crs="EPSG:32633",
        )

    def test_nullable_temperature_value_accepted(self):
        assert NULLABLE_COLUMNS["temperature"] == ["value"]
        validated = validate_table(self.samples, "temperature", "LST.tif")

        assert validated["value"].isna().sum() == 1
        assert validated["value"].dtype == float

    def test_null_segment_duration_rejected(self):
        with pytest.raises(DataError, match="segment_duration"):
            validate_table(self.segments, "segments", "itineraries")

    def test_identifiers_cast_and_input_untouched(self):
        segments = self.segments.assign(segment_duration=[5, 10])
        validated = validate_table(segments, "segments", "itineraries")

        assert list(validated["from_id"]) == ["1", "2"]
        assert validated["segment_duration"].dtype == float
        assert segments["from_id"].tolist() == [1, 2]

    def test_missing_column(self):
        with pytest.raises(DataError, match="missing required columns"):
            validate_table(self.segments.drop(columns="wait"), "segments", "itineraries")

    def test_non_numeric_column(self):
        samples = pd.DataFrame({"value": ["warm"], "geometry": [Point(0, 0)]})
        with pytest.raises(DataError, match="not numeric"):
            validate_table(samples, "temperature", "LST.tif")

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            validate_table(self.samples, "rasters", "LST.tif")


class TestValidateGeometries:

    def test_empty_geometry_rejected(self):
        gdf = gpd.GeoDataFrame(geometry=[Point(0, 0), LineString()], crs="EPSG:32633")
        with pytest.raises(DataError):
            validate_geometries(gdf, "itineraries")
