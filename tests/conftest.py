"""
Shared fixtures: small itinerary and temperature tables in a projected CRS.
"""

import geopandas as gpd
import numpy as np
import pytest
from shapely.geometry import LineString, Point

PROJECTED_CRS = "EPSG:32633"
X0, Y0 = 500000.0, 5000000.0


def make_segments(rows, crs=PROJECTED_CRS):
    """
    Builds a segment table from (from_id, to_id, mode, duration, wait, coords) tuples.
    Coordinates are offsets in metres from (X0, Y0).
    """
    records = []
    for i, (from_id, to_id, mode, duration, wait, coords) in enumerate(rows):
        records.append({
            "from_id": from_id,
            "to_id": to_id,
            "option": 0,
            "segment": i,
            "mode": mode,
            "segment_duration": float(duration),
            "wait": float(wait),
            "geometry": LineString([(X0 + x, Y0 + y) for x, y in coords]),
        })
    return gpd.GeoDataFrame(records, geometry="geometry", crs=crs)


def make_samples(points, crs=PROJECTED_CRS):
    """Builds a temperature table from (x_offset, y_offset, value) tuples."""
    return gpd.GeoDataFrame(
        {"value": [float(v) for _, _, v in points]},
        geometry=[Point(X0 + x, Y0 + y) for x, y, _ in points],
        crs=crs,
    )


@pytest.fixture
def segments():
    """Three trips: bus trip with wait, walk-only trip, trip with a rail leg."""
    return make_segments([
        ("O1", "D1", "WALK", 5, 0, [(0, 0), (100, 0)]),
        ("O1", "D1", "BUS", 0, 3, [(100, 0), (100, 1)]),
        ("O1", "D1", "BUS", 20, 0, [(100, 1), (400, 1)]),
        ("O1", "D1", "WALK", 2, 0, [(400, 1), (450, 1)]),
        ("O2", "D2", "WALK", 12, 0, [(0, 200), (300, 200)]),
        ("O3", "D3", "WALK", 4, 0, [(0, 400), (60, 400)]),
        ("O3", "D3", "RAIL", 15, 6, [(60, 400), (460, 400)]),
    ])


@pytest.fixture
def samples():
    """A regular 20 m grid of temperatures rising from west to east."""
    points = []
    for x in np.arange(-40, 500, 20):
        for y in np.arange(-40, 440, 20):
            points.append((x, y, 25.0 + x / 100.0))
    return make_samples(points)
