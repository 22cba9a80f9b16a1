"""Tests for network analysis on street graphs."""

import math

import networkx as nx
import numpy as np
import pytest

from spatial_network.analysis import (
    aggregate_flows,
    betweenness_centrality,
    calculate_network_metrics,
    edge_betweenness_centrality,
    edge_lengths,
    merge_directed_flows,
    nearest_node,
    random_flows,
    shortest_path,
)
from spatial_network.conversion import graph_to_networkx
from spatial_network.graph_construction import gdf_to_graph
from tests.graph_test_helpers import make_graph

E4_LENGTH = 2 * math.hypot(50, 20)
E6_LENGTH = 2 * math.hypot(50, 40)


@pytest.fixture
def street_graph(street_gdf):
    return gdf_to_graph(street_gdf)


@pytest.fixture
def G(street_graph):
    return graph_to_networkx(street_graph)


class TestEdgeLengths:

    def test_lengths_by_edge_id(self, street_graph):
        lengths = edge_lengths(street_graph)

        assert lengths[1] == pytest.approx(100.0)
        assert lengths[4] == pytest.approx(E4_LENGTH)
        assert lengths[6] == pytest.approx(E6_LENGTH)


class TestCentrality:

    def test_node_betweenness(self, G):
        scores = betweenness_centrality(G)

        assert set(scores) == {1, 2, 3, 4, 5}
        # Node 3 is a dead end and lies on no shortest path
        assert scores[3] == 0.0
        assert scores[2] == max(scores.values())

    def test_edge_betweenness_keyed_by_edge_id(self, G):
        scores = edge_betweenness_centrality(G)

        assert set(scores) == {1, 2, 3, 4, 5, 6}
        # The longer parallel street is never on a shortest path
        assert scores[6] == 0.0
        assert scores[1] > 0.0


class TestNearestNode:

    def test_picks_closest(self, street_graph):
        assert nearest_node(street_graph, 190, 10) == 3
        assert nearest_node(street_graph, 10, 90) == 4

    def test_tie_goes_to_lowest_id(self, street_graph):
        # Equidistant from node 1 (0, 0) and node 2 (100, 0)
        assert nearest_node(street_graph, 50, 0) == 1


class TestShortestPath:

    def test_prefers_shorter_parallel_edge(self, G):
        path = shortest_path(G, 1, 3)

        assert path['nodes'] == [1, 2, 3]
        assert path['edges'] == [1, 2]
        assert path['length'] == pytest.approx(200.0)

    def test_weighted_route(self, G):
        path = shortest_path(G, 4, 3)

        assert path['edges'] == [3, 1, 2]
        assert path['length'] == pytest.approx(300.0)

    def test_hop_count(self, G):
        path = shortest_path(G, 4, 2, weight=None)

        assert len(path['edges']) == 2

    def test_same_node(self, G):
        assert shortest_path(G, 2, 2) == {'nodes': [2], 'edges': [], 'length': 0.0}

    def test_no_path_raises(self):
        G = graph_to_networkx(make_graph([(0, 0), (1, 0)], [(5, 5), (6, 6)]))

        with pytest.raises(nx.NetworkXNoPath):
            shortest_path(G, 1, 4)

    def test_unknown_node_raises(self, G):
        with pytest.raises(nx.NodeNotFound):
            shortest_path(G, 1, 99)

    def test_directed_graph_respects_direction(self, street_gdf):
        G = graph_to_networkx(gdf_to_graph(street_gdf, directed=True))

        with pytest.raises(nx.NetworkXNoPath):
            shortest_path(G, 3, 1)


class TestFlows:

    def test_flows_follow_shortest_paths(self, G):
        flows = aggregate_flows(G, sources=[1, 4], targets=[3], flows=[[2.0], [5.0]])

        assert set(flows) == {1, 2, 3, 4, 5, 6}
        assert flows[1] == pytest.approx(7.0)
        assert flows[2] == pytest.approx(7.0)
        assert flows[3] == pytest.approx(5.0)
        assert flows[4] == 0.0
        assert flows[6] == 0.0

    def test_zero_flow_and_same_node_are_ignored(self, G):
        flows = aggregate_flows(G, sources=[1, 3], targets=[3], flows=[[0.0], [4.0]])

        assert sum(flows.values()) == 0.0

    def test_unreachable_pairs_are_skipped(self, caplog):
        G = graph_to_networkx(make_graph([(0, 0), (1, 0)], [(5, 5), (6, 6)]))

        flows = aggregate_flows(G, sources=[1], targets=[2, 4], flows=[[1.0, 1.0]])

        assert flows == {1: 1.0, 2: 0.0}
        assert "1 origin-destination pairs have no path" in caplog.text

    def test_shape_mismatch_raises(self, G):
        with pytest.raises(ValueError, match="shape"):
            aggregate_flows(G, sources=[1, 2], targets=[3], flows=[[1.0]])

    def test_merge_directed_flows(self):
        graph = make_graph(
            [(0, 0), (1, 0)],
            [(1, 0), (0, 0)],
            [(1, 0), (2, 0)],
            directed=True,
        )

        merged = merge_directed_flows(graph, {1: 2.0, 2: 3.0, 3: 1.5})

        assert merged == {1: 5.0, 3: 1.5}

    def test_random_flows_are_reproducible(self, G):
        first = random_flows(G, 4, seed=1)
        second = random_flows(G, 4, seed=1)

        assert first[0] == second[0]
        assert first[1] == second[1]
        np.testing.assert_array_equal(first[2], second[2])
        assert first[2].shape == (4, 4)
        assert set(first[0]) <= set(G.nodes())
        assert ((first[2] >= 0) & (first[2] < 10)).all()


class TestNetworkMetrics:

    def test_metrics(self, G):
        metrics = calculate_network_metrics(G)

        assert metrics['num_nodes'] == 5
        assert metrics['num_edges'] == 6
        assert metrics['num_components'] == 1
        assert metrics['largest_component_size'] == 5
        assert metrics['num_self_loops'] == 0
        assert metrics['avg_degree'] == pytest.approx(12 / 5)
        assert metrics['total_length'] == pytest.approx(400 + E4_LENGTH + E6_LENGTH)
        assert metrics['directed'] is False

    def test_directed_components(self):
        G = graph_to_networkx(make_graph([(0, 0), (1, 0)], [(5, 5), (6, 6)], directed=True))

        metrics = calculate_network_metrics(G)

        assert metrics['num_components'] == 2
        assert metrics['directed'] is True
