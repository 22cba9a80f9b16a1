# -*- coding: utf-8 -*-
"""
Visualization Functions for Spatial Networks

This module contains functions for drawing street networks, node and edge
scores and routes on static maps, and for building interactive maps.
"""

import logging

import folium
import matplotlib
import matplotlib.pyplot as plt
import contextily as cx
from mpl_toolkits.axes_grid1 import make_axes_locatable

from .config import DEFAULT_DPI, EDGE_CMAP, EDGE_WIDTH, NODE_CMAP, NODE_SIZE, VIZ_FIGSIZE

logger = logging.getLogger('spatial_network.visualization')


def _add_basemap(ax, crs):
    if crs is None:
        return
    try:
        cx.add_basemap(ax, crs=crs, source=cx.providers.CartoDB.Positron)
    except Exception as e:
        # Basemap tiles need network access
        logger.warning(f"Could not add basemap: {e}")


def _finish(fig, ax, title, save_path, basemap, crs):
    if basemap:
        _add_basemap(ax, crs)
    ax.set_title(title, fontsize=16)
    ax.set_axis_off()
    if save_path:
        fig.savefig(save_path, dpi=DEFAULT_DPI, bbox_inches='tight')
        logger.info(f"Figure saved to {save_path}")
    return fig, ax


def plot_street_network(edges_gdf, nodes_gdf=None, column=None, fig_size=VIZ_FIGSIZE,
                        title='Street Network', basemap=True, save_path=None):
    """
    Plot the street network.

    Args:
        edges_gdf: GeoDataFrame with edge geometries
        nodes_gdf: Optional GeoDataFrame with node geometries
        column: Edge column used for colouring, e.g. 'highway'
        fig_size: Size of the figure
        title: Title for the plot
        basemap: Whether to add a tile basemap
        save_path: Path to save the figure, or None

    Returns:
        Figure and axes objects
    """
    fig, ax = plt.subplots(figsize=fig_size)

    if column is not None and column in edges_gdf.columns:
        edges_gdf.plot(ax=ax, column=column, linewidth=EDGE_WIDTH, legend=True, alpha=0.8)
    else:
        edges_gdf.plot(ax=ax, linewidth=EDGE_WIDTH, color='gray', alpha=0.8)

    if nodes_gdf is not None:
        nodes_gdf.plot(ax=ax, markersize=NODE_SIZE, color='black')

    return _finish(fig, ax, title, save_path, basemap, edges_gdf.crs)


def plot_node_values(edges_gdf, nodes_gdf, column, fig_size=VIZ_FIGSIZE,
                     title=None, basemap=True, save_path=None):
    """
    Plot a node score (e.g. betweenness) on top of the street network.

    Args:
        edges_gdf: GeoDataFrame with edge geometries
        nodes_gdf: GeoDataFrame with node geometries and the score column
        column: Node column to plot
        fig_size: Size of the figure
        title: Title for the plot, defaults to the column name
        basemap: Whether to add a tile basemap
        save_path: Path to save the figure, or None

    Returns:
        Figure and axes objects
    """
    fig, ax = plt.subplots(figsize=fig_size)

    edges_gdf.plot(ax=ax, linewidth=EDGE_WIDTH, color='lightgray')

    divider = make_axes_locatable(ax)
    cax = divider.append_axes("right", size="3%", pad=0.1)
    ordered = nodes_gdf.sort_values(column)
    ordered.plot(ax=ax, column=column, cmap=NODE_CMAP, markersize=NODE_SIZE * 2,
                 legend=True, cax=cax)

    return _finish(fig, ax, title or column, save_path, basemap, edges_gdf.crs)


def plot_edge_values(edges_gdf, column, fig_size=VIZ_FIGSIZE, title=None,
                     basemap=True, save_path=None):
    """
    Plot an edge score (e.g. aggregated flow) with line width and colour.

    Args:
        edges_gdf: GeoDataFrame with edge geometries and the score column
        column: Edge column to plot
        fig_size: Size of the figure
        title: Title for the plot, defaults to the column name
        basemap: Whether to add a tile basemap
        save_path: Path to save the figure, or None

    Returns:
        Figure and axes objects
    """
    fig, ax = plt.subplots(figsize=fig_size)

    values = edges_gdf[column].astype(float)
    max_value = values.max()
    widths = (EDGE_WIDTH + 4 * (values / max_value)).to_numpy() if max_value > 0 else EDGE_WIDTH

    edges_gdf.plot(ax=ax, column=column, cmap=EDGE_CMAP, linewidth=widths, legend=True)

    return _finish(fig, ax, title or column, save_path, basemap, edges_gdf.crs)


def plot_path(edges_gdf, path_edge_ids, nodes_gdf=None, path_node_ids=None,
              fig_size=VIZ_FIGSIZE, title='Shortest Path', basemap=True, save_path=None):
    """
    Highlight a route on the street network.

    Args:
        edges_gdf: GeoDataFrame with an edge_id column
        path_edge_ids: Edge ids on the route
        nodes_gdf: Optional GeoDataFrame of nodes indexed by node_id
        path_node_ids: Node ids on the route, drawn when nodes_gdf is given
        fig_size: Size of the figure
        title: Title for the plot
        basemap: Whether to add a tile basemap
        save_path: Path to save the figure, or None

    Returns:
        Figure and axes objects
    """
    fig, ax = plt.subplots(figsize=fig_size)

    edges_gdf.plot(ax=ax, linewidth=EDGE_WIDTH, color='lightgray')
    route = edges_gdf[edges_gdf['edge_id'].isin(path_edge_ids)]
    route.plot(ax=ax, linewidth=EDGE_WIDTH * 4, color='firebrick')

    if nodes_gdf is not None and path_node_ids:
        ends = nodes_gdf.loc[[path_node_ids[0], path_node_ids[-1]]]
        ends.plot(ax=ax, markersize=NODE_SIZE * 8, color='black', zorder=3)

    return _finish(fig, ax, title, save_path, basemap, edges_gdf.crs)


def create_interactive_map(edges_gdf, nodes_gdf=None, class_column=None,
                           tooltip_columns=None, output_path=None):
    """
    Create an interactive Folium map.

    Args:
        edges_gdf: GeoDataFrame with edge geometries
        nodes_gdf: Optional GeoDataFrame with node geometries
        class_column: Edge column to use for colouring
        tooltip_columns: Edge columns to show in tooltips
        output_path: Path to save the HTML map

    Returns:
        Folium map object
    """
    gdf_map = edges_gdf.copy()
    if gdf_map.crs is not None and gdf_map.crs.to_epsg() != 4326:
        gdf_map = gdf_map.to_crs(epsg=4326)

    minx, miny, maxx, maxy = gdf_map.total_bounds
    m = folium.Map(location=[(miny + maxy) / 2, (minx + maxx) / 2],
                   zoom_start=14, tiles='cartodbpositron')

    color_dict = {}
    if class_column and class_column in gdf_map.columns:
        colors = matplotlib.colormaps['tab10'].colors
        color_dict = {
            cls: matplotlib.colors.to_hex(colors[i % len(colors)])
            for i, cls in enumerate(gdf_map[class_column].dropna().unique())
        }

    def style_function(feature):
        value = feature['properties'].get(class_column) if class_column else None
        return {'color': color_dict.get(value, '#3388ff'), 'weight': 3, 'opacity': 0.7}

    tooltip = None
    if tooltip_columns:
        tooltip = folium.GeoJsonTooltip(fields=[c for c in tooltip_columns if c in gdf_map.columns])

    folium.GeoJson(
        gdf_map.to_json(),
        style_function=style_function,
        tooltip=tooltip,
    ).add_to(m)

    if nodes_gdf is not None:
        nodes_map = nodes_gdf
        if nodes_map.crs is not None and nodes_map.crs.to_epsg() != 4326:
            nodes_map = nodes_map.to_crs(epsg=4326)

        for node_id, row in nodes_map.iterrows():
            folium.CircleMarker(
                location=[row.geometry.y, row.geometry.x],
                radius=3,
                color='black',
                fill=True,
                fill_opacity=0.7,
                tooltip=f"node {node_id}",
            ).add_to(m)

    if output_path:
        m.save(output_path)
        logger.info(f"Interactive map saved to {output_path}")

    return m
