"""Pytest fixtures for spatial network tests."""

import geopandas as gpd
import matplotlib
import pytest
from shapely.geometry import LineString

from tests.graph_test_helpers import make_lines


matplotlib.use('Agg')


@pytest.fixture
def shared_endpoint_lines():
    """Two segments meeting at (1, 1)."""
    return make_lines([(0, 0), (1, 1)], [(1, 1), (2, 2)], highway=['primary', 'residential'])


@pytest.fixture
def street_gdf():
    """
    Small projected street layer.

        (0,100)        (100,100)
           |  \\  e4        |
        e3 |    ----------- | e5
           |                |
        (0,0) --e1-- (100,0) --e2-- (200,0)

    e1 and e6 are parallel streets between the same two nodes, e6 longer.
    """
    geometries = [
        LineString([(0, 0), (100, 0)]),
        LineString([(100, 0), (200, 0)]),
        LineString([(0, 0), (0, 100)]),
        LineString([(0, 100), (50, 120), (100, 100)]),
        LineString([(100, 100), (100, 0)]),
        LineString([(0, 0), (50, -40), (100, 0)]),
    ]
    return gpd.GeoDataFrame(
        {
            'highway': ['primary', 'primary', 'residential', 'residential', 'service', 'footway'],
            'name': ['A', 'A', 'B', 'C', None, 'D'],
        },
        geometry=geometries,
        crs='EPSG:25832',
    )
