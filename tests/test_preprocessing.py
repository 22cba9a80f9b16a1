"""Tests for street data preprocessing."""

import geopandas as gpd
import pytest
from shapely.geometry import LineString, MultiLineString, Point

from spatial_network.graph_construction import build_graph
from spatial_network.preprocessing import (
    clean_street_data,
    explode_multilines,
    gdf_to_line_features,
    round_coordinates,
    select_columns,
)


@pytest.fixture
def mixed_gdf():
    return gpd.GeoDataFrame(
        {'highway': ['primary', 'residential', 'service', 'footway', 'path']},
        geometry=[
            LineString([(0, 0), (1, 0)]),
            MultiLineString([[(1, 0), (2, 0)], [(2, 0), (2, 1)]]),
            Point(5, 5),
            None,
            LineString(),
        ],
        crs='EPSG:25832',
    )


class TestExplodeMultilines:

    def test_parts_become_rows(self, mixed_gdf):
        exploded = explode_multilines(mixed_gdf)

        assert list(exploded['highway']).count('residential') == 2
        assert 'MultiLineString' not in set(exploded.geometry.dropna().geom_type)

    def test_nothing_to_explode(self, street_gdf):
        assert explode_multilines(street_gdf) is street_gdf


class TestCleanStreetData:

    def test_keeps_only_linestrings(self, mixed_gdf):
        cleaned = clean_street_data(explode_multilines(mixed_gdf))

        assert set(cleaned.geometry.geom_type) == {'LineString'}
        assert list(cleaned['highway']) == ['primary', 'residential', 'residential']
        assert list(cleaned.index) == [0, 1, 2]


class TestSelectColumns:

    def test_geometry_is_sticky(self, street_gdf):
        selected = select_columns(street_gdf, ['highway'])
        assert list(selected.columns) == ['highway', 'geometry']

    def test_missing_column_raises(self, street_gdf):
        with pytest.raises(ValueError, match='maxspeed'):
            select_columns(street_gdf, ['maxspeed'])


class TestRoundCoordinates:

    def test_rounding_merges_nearly_equal_endpoints(self):
        gdf = gpd.GeoDataFrame(
            geometry=[
                LineString([(0, 0), (10.0001, 5.0)]),
                LineString([(10.0002, 5.0), (20, 5)]),
            ],
            crs='EPSG:25832',
        )

        unrounded = build_graph(gdf_to_line_features(gdf))
        rounded = build_graph(gdf_to_line_features(round_coordinates(gdf, 2)))

        assert len(unrounded.nodes) == 4
        assert len(rounded.nodes) == 3

    def test_original_is_unchanged(self, street_gdf):
        before = street_gdf.geometry.iloc[3].wkt
        round_coordinates(street_gdf, 0)
        assert street_gdf.geometry.iloc[3].wkt == before

    def test_negative_decimals_raise(self, street_gdf):
        with pytest.raises(ValueError):
            round_coordinates(street_gdf, -1)


class TestGdfToLineFeatures:

    def test_rows_become_features(self, street_gdf):
        features = gdf_to_line_features(street_gdf)

        assert len(features) == len(street_gdf)
        assert features[3].coords == ((0.0, 100.0), (50.0, 120.0), (100.0, 100.0))
        assert dict(features[0].attributes) == {'highway': 'primary', 'name': 'A'}

    def test_z_coordinates_are_dropped(self):
        gdf = gpd.GeoDataFrame(geometry=[LineString([(0, 0, 5), (1, 1, 6)])])

        features = gdf_to_line_features(gdf)

        assert features[0].coords == ((0.0, 0.0), (1.0, 1.0))

    def test_missing_values_become_none(self):
        gdf = gpd.GeoDataFrame(
            {'maxspeed': [50.0, float('nan')]},
            geometry=[LineString([(0, 0), (1, 0)]), LineString([(1, 0), (2, 0)])],
        )

        features = gdf_to_line_features(gdf)

        assert features[0].attributes['maxspeed'] == 50.0
        assert features[1].attributes['maxspeed'] is None
