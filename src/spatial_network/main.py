# -*- coding: utf-8 -*-
"""
Main Spatial Network Pipeline

This script runs the complete walkthrough: load street lines (from a file or
OpenStreetMap), preprocess them, build the street graph, compute edge lengths
and betweenness centrality, route a shortest path and aggregate random
origin-destination flows, then write reports and figures.
"""

import os
import sys
import time
import logging
import argparse

import networkx as nx
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from . import config
from .analysis import (aggregate_flows, betweenness_centrality, calculate_network_metrics,
                       edge_betweenness_centrality, merge_directed_flows, nearest_node,
                       random_flows, shortest_path)
from .conversion import graph_to_flat_table, graph_to_gdfs, graph_to_networkx
from .data_loading import load_from_osm, load_street_data, save_street_data
from .graph_construction import gdf_to_graph
from .preprocessing import clean_street_data, explode_multilines, round_coordinates, select_columns
from .reporting import generate_network_report
from .utils import convert_time_format, setup_logging

logger = logging.getLogger('spatial_network.main')


def ensure_directories(output_dir):
    """Garantir que os diretórios de saída existam."""
    dirs = {
        'output': output_dir,
        'reports': os.path.join(output_dir, 'reports'),
        'visualizations': os.path.join(output_dir, 'visualizations'),
        'graphs': os.path.join(output_dir, 'graphs'),
    }
    for directory in dirs.values():
        os.makedirs(directory, exist_ok=True)
    return dirs


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Spatial Network Analysis Pipeline')

    group = parser.add_argument_group('Data Loading')
    group.add_argument('--data_path', type=str, help='Path to street line data file')
    group.add_argument('--layer', type=str, help='Layer name for multi-layer files')
    group.add_argument('--place_name', type=str, default=config.DEFAULT_PLACE,
                       help='Name of place to download from OSM when no data_path is given')
    group.add_argument('--save_download', action='store_true',
                       help='Save downloaded OSM streets to the data directory')

    group = parser.add_argument_group('Processing')
    group.add_argument('--crs', type=str, default=config.METRIC_CRS,
                       help='Coordinate reference system to work in')
    group.add_argument('--round_decimals', type=int,
                       help='Round coordinates before building the graph')
    group.add_argument('--columns', type=str, nargs='*', default=config.EDGE_ATTRIBUTES,
                       help='Attribute columns to keep on edges')
    group.add_argument('--directed', action='store_true', help='Build a directed graph')

    group = parser.add_argument_group('Analysis')
    group.add_argument('--from_node', type=int, help='Start node_id of the shortest path')
    group.add_argument('--to_node', type=int, help='End node_id of the shortest path')
    group.add_argument('--n_flow_samples', type=int, default=50,
                       help='Number of random origins and destinations for flow aggregation (0 disables)')
    group.add_argument('--random_seed', type=int, default=42, help='Random seed for reproducibility')

    group = parser.add_argument_group('Output')
    group.add_argument('--output_dir', type=str, default=config.OUTPUT_DIR, help='Output directory')
    group.add_argument('--save_visualizations', action='store_true', help='Generate and save figures')
    group.add_argument('--interactive_map', action='store_true', help='Generate interactive map')
    group.add_argument('--log_level', type=str, default=config.LOG_LEVEL, help='Logging level')
    group.add_argument('--log_file', type=str, help='Also write the log to this file')

    return parser.parse_args(argv)


def load_streets(args):
    """Load street lines from file or OSM and reproject them."""
    if args.data_path:
        return load_street_data(args.data_path, crs=args.crs, layer=args.layer)

    gdf = load_from_osm(args.place_name)
    if args.save_download:
        save_street_data(gdf, config.STREETS_PATH)
    return gdf.to_crs(args.crs)


def run(args):
    """
    Run the pipeline.

    Args:
        args: Parsed command line arguments

    Returns:
        Dictionary with the graph, its networkx form, analysis results and output paths
    """
    dirs = ensure_directories(args.output_dir)
    timestamp = config.get_timestamp()

    logger.info("Loading street data...")
    gdf = load_streets(args)

    logger.info("Preprocessing street data...")
    gdf = explode_multilines(gdf)
    gdf = clean_street_data(gdf)
    gdf = select_columns(gdf, [col for col in args.columns if col in gdf.columns])
    if args.round_decimals is not None:
        gdf = round_coordinates(gdf, args.round_decimals)

    logger.info("Building street graph...")
    graph = gdf_to_graph(gdf, directed=args.directed)
    G = graph_to_networkx(graph)
    nodes_gdf, edges_gdf = graph_to_gdfs(graph)

    logger.info("Computing edge lengths and centrality...")
    lengths = {key: length for _, _, key, length in G.edges(keys=True, data='length')}
    edges_gdf['length'] = edges_gdf['edge_id'].map(lengths)

    node_centrality = betweenness_centrality(G)
    nodes_gdf['betweenness'] = nodes_gdf.index.map(node_centrality)
    edges_gdf['betweenness'] = edges_gdf['edge_id'].map(edge_betweenness_centrality(G))

    results = {'graph': graph, 'networkx': G, 'nodes': nodes_gdf, 'edges': edges_gdf}

    source = args.from_node or nearest_node(graph, *nodes_gdf.geometry.union_all().centroid.coords[0])
    target = args.to_node or int(max(node_centrality, key=node_centrality.get))
    try:
        path = shortest_path(G, source, target)
        logger.info(f"Shortest path {source} -> {target}: {len(path['edges'])} edges, "
                    f"length {path['length']:.1f}")
    except nx.NetworkXNoPath:
        logger.warning(f"No path between nodes {source} and {target}")
        path = {'nodes': [], 'edges': [], 'length': None}
    results['path'] = path

    if args.n_flow_samples > 0:
        logger.info("Aggregating random origin-destination flows...")
        sources, targets, flows = random_flows(G, args.n_flow_samples, seed=args.random_seed)
        edge_flows = aggregate_flows(G, sources, targets, flows, progress=True)
        edges_gdf['flow'] = edges_gdf['edge_id'].map(edge_flows)
        if graph.directed:
            undirected = merge_directed_flows(graph, edge_flows)
            edges_gdf['flow_undirected'] = edges_gdf['edge_id'].map(undirected)
        results['flows'] = edge_flows

    flat_path = os.path.join(dirs['graphs'], f"edges_flat_{timestamp}.csv")
    graph_to_flat_table(graph).to_csv(flat_path, index=False)
    logger.info(f"Flat edge table saved to {flat_path}")

    metrics = calculate_network_metrics(G)
    results['metrics'] = metrics
    results['reports'] = generate_network_report(
        metrics,
        dirs['reports'],
        extra={'shortest_path': {'source': source, 'target': target,
                                 'num_edges': len(path['edges']), 'length': path['length']}},
    )

    if args.save_visualizations:
        from .visualization import plot_edge_values, plot_node_values, plot_path, plot_street_network

        viz_dir = dirs['visualizations']
        plot_street_network(edges_gdf, nodes_gdf, column='highway',
                            save_path=os.path.join(viz_dir, f"street_network_{timestamp}.png"))
        plot_node_values(edges_gdf, nodes_gdf, 'betweenness',
                         save_path=os.path.join(viz_dir, f"betweenness_{timestamp}.png"))
        if path['edges']:
            plot_path(edges_gdf, path['edges'], nodes_gdf, path['nodes'],
                      save_path=os.path.join(viz_dir, f"shortest_path_{timestamp}.png"))
        if 'flow' in edges_gdf.columns:
            plot_edge_values(edges_gdf, 'flow',
                             save_path=os.path.join(viz_dir, f"flows_{timestamp}.png"))
        plt.close('all')

    if args.interactive_map:
        from .visualization import create_interactive_map

        map_path = os.path.join(dirs['visualizations'], f"interactive_map_{timestamp}.html")
        create_interactive_map(edges_gdf, class_column='highway',
                               tooltip_columns=['edge_id', 'highway', 'name', 'length'],
                               output_path=map_path)

    return results


def main(argv=None):
    """Função principal do pipeline."""
    args = parse_args(argv)
    setup_logging(args.log_file, args.log_level)

    start_time = time.time()
    try:
        results = run(args)
    except Exception:
        logger.exception("Pipeline failed")
        return 1

    metrics = results['metrics']
    logger.info(f"Graph: {metrics['num_nodes']} nodes, {metrics['num_edges']} edges, "
                f"{metrics['num_components']} components")
    logger.info(f"Pipeline concluído em {convert_time_format(time.time() - start_time)}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
