# -*- coding: utf-8 -*-
"""
Graph Conversion

This module converts a street Graph into the structures used by the analysis
and mapping steps: node and edge GeoDataFrames, a networkx multigraph, and a
flat edge table with explicit longitude/latitude columns.
"""

import logging

import geopandas as gpd
import networkx as nx
import numpy as np
import pandas as pd
from pyproj import CRS
from shapely.geometry import LineString, Point

logger = logging.getLogger('spatial_network.conversion')

EARTH_RADIUS_M = 6371008.8

FLAT_TABLE_COLUMNS = ['edge_id', 'from_id', 'from_lon', 'from_lat',
                      'to_id', 'to_lon', 'to_lat', 'd']

GDF_EDGE_COLUMNS = ['edge_id', 'from', 'to', 'geometry']
NX_EDGE_COLUMNS = ['edge_id', 'geometry', 'length']

# Attributes whose names clash with generated columns get this prefix
ATTRIBUTE_PREFIX = "attr_"


def _edge_attributes(edge, reserved):
    """
    Copy edge attributes, prefixing names that collide with generated columns.

    Args:
        edge: Edge from build_graph
        reserved: Column names written by the conversion itself

    Returns:
        Dict of attributes; a clashing name such as 'edge_id' becomes 'attr_edge_id'
    """
    attrs = {}
    for key, value in edge.attributes.items():
        name = key
        while name in reserved or (name in edge.attributes and name != key):
            name = ATTRIBUTE_PREFIX + name
        attrs[name] = value
    return attrs


def is_geographic(crs):
    """Return True when `crs` is a longitude/latitude reference system."""
    if crs is None:
        return False
    return CRS.from_user_input(crs).is_geographic


def haversine_length(coords):
    """
    Great-circle length in metres of a lon/lat coordinate sequence.

    Args:
        coords: Sequence of (lon, lat) pairs in degrees

    Returns:
        Length in metres
    """
    arr = np.radians(np.asarray(coords, dtype=float)[:, :2])
    lon, lat = arr[:, 0], arr[:, 1]
    dlon = np.diff(lon)
    dlat = np.diff(lat)
    a = np.sin(dlat / 2) ** 2 + np.cos(lat[:-1]) * np.cos(lat[1:]) * np.sin(dlon / 2) ** 2
    return float(np.sum(2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(a))))


def geometry_length(coords, crs=None):
    """
    Length of an edge geometry.

    Metres along the great circle for geographic CRSs, planar length in CRS
    units otherwise (including when no CRS is known).

    Args:
        coords: Coordinate sequence of the edge
        crs: CRS of the coordinates

    Returns:
        Length as float
    """
    if is_geographic(crs):
        return haversine_length(coords)
    return float(LineString(coords).length)


def graph_to_gdfs(graph):
    """
    Convert a Graph into node and edge GeoDataFrames.

    Args:
        graph: Graph from build_graph

    Returns:
        Tuple of (nodes_gdf, edges_gdf); nodes are indexed by node_id, edges
        carry edge_id, from, to and the copied attributes (an attribute named
        like one of these columns is written as attr_<name>)
    """
    nodes_gdf = gpd.GeoDataFrame(
        {
            'node_id': [node.node_id for node in graph.nodes],
            'x': [node.x for node in graph.nodes],
            'y': [node.y for node in graph.nodes],
        },
        geometry=[Point(node.x, node.y) for node in graph.nodes],
        crs=graph.crs,
    ).set_index('node_id')

    records = []
    for edge in graph.edges:
        record = {'edge_id': edge.edge_id, 'from': edge.from_node_id, 'to': edge.to_node_id}
        record.update(_edge_attributes(edge, GDF_EDGE_COLUMNS))
        records.append(record)

    edges_df = pd.DataFrame.from_records(records)
    leading = ['edge_id', 'from', 'to']
    edges_df = edges_df[leading + [col for col in edges_df.columns if col not in leading]]
    edges_gdf = gpd.GeoDataFrame(
        edges_df,
        geometry=[LineString(edge.geometry) for edge in graph.edges],
        crs=graph.crs,
    )

    return nodes_gdf, edges_gdf


def graph_to_networkx(graph):
    """
    Convert a Graph into a networkx multigraph.

    Parallel streets and self loops are kept, so the result is a MultiGraph
    (or MultiDiGraph for directed graphs) with edge_id as edge key.

    Args:
        graph: Graph from build_graph

    Returns:
        networkx MultiGraph or MultiDiGraph; nodes carry x and y, edges carry
        edge_id, geometry, length and the copied attributes
    """
    G = nx.MultiDiGraph() if graph.directed else nx.MultiGraph()
    G.graph['crs'] = graph.crs

    for node in graph.nodes:
        G.add_node(node.node_id, x=node.x, y=node.y)

    for edge in graph.edges:
        attrs = _edge_attributes(edge, NX_EDGE_COLUMNS)
        attrs['edge_id'] = edge.edge_id
        attrs['geometry'] = LineString(edge.geometry)
        attrs['length'] = geometry_length(edge.geometry, graph.crs)
        G.add_edges_from([(edge.from_node_id, edge.to_node_id, edge.edge_id, attrs)])

    logger.info(f"networkx graph created: {G.number_of_nodes()} nodes, {G.number_of_edges()} edges")

    return G


def graph_to_flat_table(graph):
    """
    Flatten a Graph into one row per edge with explicit lon/lat columns.

    Routing tools that do not understand embedded geometries expect this
    layout. Node coordinates are reprojected to EPSG:4326 when the graph CRS
    is projected. `d` is the edge length (metres for geographic CRSs).

    Args:
        graph: Graph from build_graph

    Returns:
        DataFrame with edge_id, from_id, from_lon, from_lat, to_id, to_lon,
        to_lat, d and the copied attributes
    """
    xs = [node.x for node in graph.nodes]
    ys = [node.y for node in graph.nodes]

    if graph.crs is None:
        logger.warning("Graph has no CRS; node coordinates are written as lon/lat unchanged")
    elif not is_geographic(graph.crs):
        points = gpd.GeoSeries(gpd.points_from_xy(xs, ys), crs=graph.crs).to_crs('EPSG:4326')
        xs, ys = list(points.x), list(points.y)

    lon = dict(zip((node.node_id for node in graph.nodes), xs))
    lat = dict(zip((node.node_id for node in graph.nodes), ys))

    records = []
    for edge in graph.edges:
        record = {
            'edge_id': edge.edge_id,
            'from_id': edge.from_node_id,
            'from_lon': lon[edge.from_node_id],
            'from_lat': lat[edge.from_node_id],
            'to_id': edge.to_node_id,
            'to_lon': lon[edge.to_node_id],
            'to_lat': lat[edge.to_node_id],
            'd': geometry_length(edge.geometry, graph.crs),
        }
        record.update(_edge_attributes(edge, FLAT_TABLE_COLUMNS))
        records.append(record)

    table = pd.DataFrame.from_records(records)
    extra = [col for col in table.columns if col not in FLAT_TABLE_COLUMNS]
    return table[FLAT_TABLE_COLUMNS + extra]
