"""
Test suite for origin/destination CSV loading
File: tests/test_points.py
"""

import pytest

from heatcost.core.errors import DataError
from heatcost.data.points import load_points


class TestLoadPoints:

    def test_lon_lat_columns(self, tmp_path):
        path = tmp_path / "origin_points.csv"
        path.write_text("id,lon,lat\n1,13.40,52.50\n2,13.41,52.51\n")

        points = load_points(path)

        assert list(points["id"]) == ["1", "2"]
        assert points.crs.to_epsg() == 4326
        assert (points.geometry.iloc[1].x, points.geometry.iloc[1].y) == pytest.approx((13.41, 52.51))

    def test_xy_aliases(self, tmp_path):
        path = tmp_path / "destination_points.csv"
        path.write_text("id,X,Y,name\nA,13.40,52.50,station\n")

        points = load_points(path)

        assert points.loc[0, "name"] == "station"
        assert points.geometry.iloc[0].x == pytest.approx(13.40)

    def test_duplicate_ids(self, tmp_path):
        path = tmp_path / "origin_points.csv"
        path.write_text("id,lon,lat\n1,13.40,52.50\n1,13.41,52.51\n")
        with pytest.raises(DataError):
            load_points(path)

    def test_missing_coordinates(self, tmp_path):
        path = tmp_path / "origin_points.csv"
        path.write_text("id,lon,lat\n1,,52.50\n")
        with pytest.raises(DataError):
            load_points(path)

    def test_no_coordinate_columns(self, tmp_path):
        path = tmp_path / "origin_points.csv"
        path.write_text("id,easting\n1,3\n")
        with pytest.raises(DataError):
            load_points(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_points(tmp_path / "nope.csv")
