# -*- coding: utf-8 -*-
"""
Network Analysis

This module runs the standard network queries on a street graph: edge
lengths, betweenness centrality, nearest node lookup, shortest paths and
aggregation of origin-destination flows onto edges. The graph algorithms
themselves come from networkx; the functions here translate between the
networkx results and the node_id / edge_id numbering of the street Graph.
"""

import logging

import networkx as nx
import numpy as np
from tqdm import tqdm

from .config import DEFAULT_WEIGHT
from .conversion import geometry_length

logger = logging.getLogger('spatial_network.analysis')


def edge_lengths(graph):
    """
    Compute the length of every edge.

    Args:
        graph: Graph from build_graph

    Returns:
        Dict mapping edge_id to length (metres for geographic CRSs, CRS units otherwise)
    """
    return {edge.edge_id: geometry_length(edge.geometry, graph.crs) for edge in graph.edges}


def betweenness_centrality(G, weight=DEFAULT_WEIGHT, normalized=False):
    """
    Node betweenness centrality.

    Args:
        G: networkx graph from graph_to_networkx
        weight: Edge attribute used as distance, or None for hop count
        normalized: Whether to normalize the scores

    Returns:
        Dict mapping node_id to centrality
    """
    return nx.betweenness_centrality(G, weight=weight, normalized=normalized)


def edge_betweenness_centrality(G, weight=DEFAULT_WEIGHT, normalized=False):
    """
    Edge betweenness centrality.

    Args:
        G: networkx graph from graph_to_networkx
        weight: Edge attribute used as distance, or None for hop count
        normalized: Whether to normalize the scores

    Returns:
        Dict mapping edge_id to centrality
    """
    scores = nx.edge_betweenness_centrality(G, weight=weight, normalized=normalized)
    # Multigraph results are keyed (u, v, key) and the key is the edge_id
    return {key: value for (u, v, key), value in scores.items()}


def nearest_node(graph, x, y):
    """
    Find the node closest to a location.

    Args:
        graph: Graph from build_graph
        x: X coordinate, in the graph CRS
        y: Y coordinate, in the graph CRS

    Returns:
        node_id of the nearest node; ties go to the lowest node_id
    """
    coords = np.array([[node.x, node.y] for node in graph.nodes], dtype=float)
    dist2 = (coords[:, 0] - x) ** 2 + (coords[:, 1] - y) ** 2
    return graph.nodes[int(np.argmin(dist2))].node_id


def _cheapest_edge(G, u, v, weight):
    """Pick the parallel edge between u and v with the lowest weight (then lowest key)."""
    candidates = G[u][v]
    if weight is None:
        return min(candidates)
    return min(candidates, key=lambda key: (candidates[key].get(weight, 1), key))


def _path_edges(G, path, weight):
    return [_cheapest_edge(G, u, v, weight) for u, v in zip(path[:-1], path[1:])]


def shortest_path(G, source, target, weight=DEFAULT_WEIGHT):
    """
    Shortest path between two nodes.

    Args:
        G: networkx multigraph from graph_to_networkx
        source: Start node_id
        target: End node_id
        weight: Edge attribute to minimise, or None for hop count

    Returns:
        Dict with the visited `nodes`, the traversed `edges` (edge ids) and
        the total `length`

    Raises:
        networkx.NodeNotFound: If source or target is not in the graph
        networkx.NetworkXNoPath: If target cannot be reached from source
    """
    nodes = nx.shortest_path(G, source=source, target=target, weight=weight)
    edges = _path_edges(G, nodes, weight)

    length = 0.0
    for (u, v), key in zip(zip(nodes[:-1], nodes[1:]), edges):
        length += G[u][v][key].get('length', 0.0)

    return {'nodes': nodes, 'edges': edges, 'length': length}


def aggregate_flows(G, sources, targets, flows, weight=DEFAULT_WEIGHT, progress=False):
    """
    Route origin-destination flows over the network and sum them per edge.

    Each flow `flows[i][j]` travels along the shortest path from
    `sources[i]` to `targets[j]` and is added to every edge on that path.

    Args:
        G: networkx multigraph from graph_to_networkx
        sources: Origin node ids
        targets: Destination node ids
        flows: Matrix of shape (len(sources), len(targets))
        weight: Edge attribute to minimise
        progress: Show a progress bar over the sources

    Returns:
        Dict mapping every edge_id in G to its aggregated flow
    """
    flows = np.asarray(flows, dtype=float)
    if flows.shape != (len(sources), len(targets)):
        raise ValueError(
            f"flows has shape {flows.shape}, expected ({len(sources)}, {len(targets)})"
        )

    totals = {key: 0.0 for _, _, key in G.edges(keys=True)}
    unreachable = 0

    for i, source in enumerate(tqdm(sources, desc="Aggregating flows", disable=not progress)):
        paths = nx.single_source_dijkstra_path(G, source, weight=weight)
        for j, target in enumerate(targets):
            flow = flows[i, j]
            if flow <= 0 or source == target:
                continue
            if target not in paths:
                unreachable += 1
                continue
            for key in _path_edges(G, paths[target], weight):
                totals[key] += flow

    if unreachable:
        logger.warning(f"{unreachable} origin-destination pairs have no path and were skipped")

    return totals


def merge_directed_flows(graph, flows):
    """
    Combine flows of edges that join the same pair of nodes.

    Both directions of a street (and any parallel edges) end up in one total,
    keyed by the lowest edge_id of the group.

    Args:
        graph: Graph from build_graph
        flows: Dict mapping edge_id to flow, as returned by aggregate_flows

    Returns:
        Dict mapping the representative edge_id to the summed flow
    """
    groups = {}
    for edge in graph.edges:
        pair = tuple(sorted((edge.from_node_id, edge.to_node_id)))
        groups.setdefault(pair, []).append(edge.edge_id)

    return {
        min(edge_ids): float(sum(flows.get(edge_id, 0.0) for edge_id in edge_ids))
        for edge_ids in groups.values()
    }


def random_flows(G, n_samples, seed=None):
    """
    Sample random origins, destinations and flow values.

    Args:
        G: networkx graph
        n_samples: Number of origins and of destinations (sampled with replacement)
        seed: Random seed for reproducibility

    Returns:
        Tuple of (sources, targets, flows) with flows uniform in [0, 10)
    """
    rng = np.random.default_rng(seed)
    node_ids = np.array(list(G.nodes()))
    sources = [int(n) for n in rng.choice(node_ids, size=n_samples)]
    targets = [int(n) for n in rng.choice(node_ids, size=n_samples)]
    flows = 10 * rng.random((n_samples, n_samples))
    return sources, targets, flows


def calculate_network_metrics(G):
    """
    Calculate summary metrics for a street graph.

    Args:
        G: networkx graph from graph_to_networkx

    Returns:
        Dictionary of metrics
    """
    metrics = {}

    metrics['num_nodes'] = G.number_of_nodes()
    metrics['num_edges'] = G.number_of_edges()
    metrics['directed'] = G.is_directed()
    metrics['density'] = nx.density(G)
    metrics['num_self_loops'] = nx.number_of_selfloops(G)

    if G.is_directed():
        components = list(nx.weakly_connected_components(G))
    else:
        components = list(nx.connected_components(G))
    metrics['num_components'] = len(components)
    metrics['largest_component_size'] = len(max(components, key=len)) if components else 0

    degrees = [d for _, d in G.degree()]
    metrics['avg_degree'] = float(np.mean(degrees)) if degrees else 0.0
    metrics['total_length'] = float(sum(length for _, _, length in G.edges(data='length', default=0.0)))

    return metrics
