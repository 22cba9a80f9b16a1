# -*- coding: utf-8 -*-
"""
Graph Construction for Street Networks

This module turns a collection of street line geometries into a node/edge
graph. Every line becomes one edge; the first and last coordinates of each
line become nodes, and endpoints with exactly the same coordinates are merged
into a single node.

Numbering is reproducible: edges are numbered 1..N in input order and nodes
are numbered 1, 2, 3 ... in order of first appearance, scanning the edges in
ascending edge_id and, within an edge, the start point before the end point.
"""

import logging
import math
import numbers
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

logger = logging.getLogger('spatial_network.graph_construction')

START = 'start'
END = 'end'


class InvalidInputError(ValueError):
    """Raised when a line feature cannot be turned into an edge."""


class EmptyInputError(ValueError):
    """Raised when there are no line features to build a graph from."""


@dataclass(frozen=True)
class LineFeature:
    """One street line: its coordinate sequence and descriptive attributes."""
    coords: Tuple[Tuple[float, float], ...]
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'coords', tuple(tuple(c) for c in self.coords))
        object.__setattr__(self, 'attributes', MappingProxyType(dict(self.attributes)))


@dataclass(frozen=True)
class Node:
    node_id: int
    x: float
    y: float

    @property
    def coords(self):
        return (self.x, self.y)


@dataclass(frozen=True)
class Edge:
    edge_id: int
    from_node_id: int
    to_node_id: int
    geometry: Tuple[Tuple[float, float], ...]
    attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Endpoint:
    """Start or end point of an edge, before deduplication."""
    edge_id: int
    role: str
    x: float
    y: float

    @property
    def key(self):
        return coordinate_key(self.x, self.y)


@dataclass(frozen=True)
class Graph:
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    directed: bool = False
    crs: Optional[Any] = None

    def node(self, node_id):
        """Return the node with the given id (ids are 1-based and contiguous)."""
        if node_id < 1 or node_id > len(self.nodes):
            raise KeyError(f"Unknown node_id: {node_id}")
        return self.nodes[node_id - 1]

    def edge(self, edge_id):
        """Return the edge with the given id (ids are 1-based and contiguous)."""
        if edge_id < 1 or edge_id > len(self.edges):
            raise KeyError(f"Unknown edge_id: {edge_id}")
        return self.edges[edge_id - 1]


def coordinate_key(x, y):
    """
    Build the exact-match key used to merge endpoints.

    Two coordinates share a key only when both values are bit-identical
    doubles. No tolerance is applied; round or snap coordinates upstream if
    nearly-equal endpoints should be merged.

    Args:
        x: X coordinate
        y: Y coordinate

    Returns:
        Hashable key for the coordinate pair
    """
    return (float(x).hex(), float(y).hex())


def _is_finite_number(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


def _validate(lines):
    if len(lines) == 0:
        raise EmptyInputError("Cannot build a graph from an empty collection of lines")

    for position, line in enumerate(lines, start=1):
        if len(line.coords) < 2:
            raise InvalidInputError(
                f"Line {position} has {len(line.coords)} coordinate(s); at least 2 are required"
            )
        for coord in line.coords:
            if len(coord) != 2:
                raise InvalidInputError(
                    f"Line {position} has a coordinate with {len(coord)} values; expected (x, y): {coord!r}"
                )
            if not all(_is_finite_number(value) for value in coord):
                raise InvalidInputError(f"Line {position} has a non-numeric or non-finite coordinate: {coord!r}")


def assign_edge_ids(lines):
    """
    Number the lines 1..N in input order.

    Args:
        lines: Ordered sequence of LineFeature

    Returns:
        List of (edge_id, LineFeature) tuples
    """
    return [(edge_id, line) for edge_id, line in enumerate(lines, start=1)]


def extract_endpoints(numbered_lines):
    """
    Extract the start and end point of every line.

    Interior vertices are ignored: a line crossing another one is not split
    here, that belongs to the topology cleaning done before this step.

    Args:
        numbered_lines: Output of assign_edge_ids

    Returns:
        List of Endpoint, ordered by edge_id with start before end
    """
    endpoints = []
    for edge_id, line in numbered_lines:
        first, last = line.coords[0], line.coords[-1]
        endpoints.append(Endpoint(edge_id, START, first[0], first[1]))
        endpoints.append(Endpoint(edge_id, END, last[0], last[1]))
    return endpoints


def assign_node_ids(endpoints):
    """
    Group endpoints by exact coordinate and give each group a node id.

    Ids are handed out 1, 2, 3 ... the first time a coordinate key is seen,
    so the order of `endpoints` fixes the numbering.

    Args:
        endpoints: Endpoints ordered by edge_id, start before end

    Returns:
        Dict mapping coordinate key to node_id, in insertion (node_id) order
    """
    node_ids = {}
    for endpoint in endpoints:
        if endpoint.key not in node_ids:
            node_ids[endpoint.key] = len(node_ids) + 1
    return node_ids


def attach_nodes(numbered_lines, endpoints, node_ids):
    """
    Create the edges, pointing each one at its start and end node.

    Args:
        numbered_lines: Output of assign_edge_ids
        endpoints: Output of extract_endpoints
        node_ids: Output of assign_node_ids

    Returns:
        Tuple of Edge in edge_id order
    """
    from_to = {}
    for endpoint in endpoints:
        from_to[(endpoint.edge_id, endpoint.role)] = node_ids[endpoint.key]

    edges = []
    for edge_id, line in numbered_lines:
        edges.append(Edge(
            edge_id=edge_id,
            from_node_id=from_to[(edge_id, START)],
            to_node_id=from_to[(edge_id, END)],
            geometry=line.coords,
            attributes=MappingProxyType(dict(line.attributes)),
        ))
    return tuple(edges)


def materialize_nodes(endpoints, node_ids):
    """
    Create one Node per distinct endpoint coordinate.

    Args:
        endpoints: Output of extract_endpoints
        node_ids: Output of assign_node_ids

    Returns:
        Tuple of Node in node_id order
    """
    coords = {}
    for endpoint in endpoints:
        coords.setdefault(endpoint.key, (endpoint.x, endpoint.y))

    return tuple(
        Node(node_id=node_id, x=coords[key][0], y=coords[key][1])
        for key, node_id in node_ids.items()
    )


def build_graph(lines, directed=False, crs=None):
    """
    Build a street graph from line features.

    Args:
        lines: Ordered sequence of LineFeature
        directed: Whether edge direction is meaningful downstream
        crs: Coordinate reference system shared by all lines, carried as-is

    Returns:
        Graph with one edge per line and deduplicated endpoint nodes

    Raises:
        EmptyInputError: If `lines` is empty
        InvalidInputError: If a line has fewer than 2 coordinates, or a
            coordinate that is not a finite numeric (x, y) pair
    """
    lines = list(lines)
    _validate(lines)

    numbered_lines = assign_edge_ids(lines)
    endpoints = extract_endpoints(numbered_lines)
    node_ids = assign_node_ids(endpoints)
    edges = attach_nodes(numbered_lines, endpoints, node_ids)
    nodes = materialize_nodes(endpoints, node_ids)

    logger.info(f"Graph built with {len(nodes)} nodes and {len(edges)} edges "
                f"({'directed' if directed else 'undirected'})")

    return Graph(nodes=nodes, edges=edges, directed=bool(directed), crs=crs)


def gdf_to_graph(gdf, directed=False):
    """
    Build a street graph straight from a GeoDataFrame of LineStrings.

    Args:
        gdf: GeoDataFrame with LineString geometries
        directed: Whether edge direction is meaningful downstream

    Returns:
        Graph carrying the GeoDataFrame's CRS
    """
    from .preprocessing import gdf_to_line_features

    return build_graph(gdf_to_line_features(gdf), directed=directed, crs=gdf.crs)
