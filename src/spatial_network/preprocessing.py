# -*- coding: utf-8 -*-
"""
Preprocessing Functions for Street Network Data

This module contains functions for preparing street line data before graph
construction: exploding multilines, cleaning, selecting attribute columns,
rounding coordinates and converting GeoDataFrame rows into line features.

Topology cleaning (splitting lines at intersections, snapping dangles) is not
done here; run it with a GIS tool before loading the data.
"""

import logging

import pandas as pd
from shapely.geometry import LineString

from .graph_construction import InvalidInputError, LineFeature

logger = logging.getLogger('spatial_network.preprocessing')


def explode_multilines(gdf):
    """
    Explode multilinestrings into individual linestrings.

    Args:
        gdf: GeoDataFrame containing street data

    Returns:
        GeoDataFrame with exploded linestrings and attributes repeated per part
    """
    if gdf.empty:
        logger.warning("Trying to explode MultiLineStrings in an empty GeoDataFrame.")
        return gdf

    multi_mask = gdf.geometry.geom_type == 'MultiLineString'
    multi_count = int(multi_mask.sum())
    if multi_count == 0:
        logger.info("No MultiLineStrings found. Nothing to explode.")
        return gdf

    logger.info(f"Exploding {multi_count} MultiLineStrings")
    exploded = gdf.explode(index_parts=False).reset_index(drop=True)
    logger.info(f"Total features after explode: {len(exploded)}")

    return exploded


def clean_street_data(gdf):
    """
    Drop rows that cannot become graph edges.

    Removes null and empty geometries, non-LineString geometries and lines
    that do not have at least two coordinates.

    Args:
        gdf: GeoDataFrame containing street data

    Returns:
        Cleaned GeoDataFrame with a fresh index
    """
    initial_count = len(gdf)

    gdf = gdf[gdf.geometry.notna()]
    gdf = gdf[~gdf.geometry.is_empty]
    gdf = gdf[gdf.geometry.geom_type == 'LineString']
    gdf = gdf[gdf.geometry.apply(lambda geom: len(geom.coords) >= 2)]
    gdf = gdf.reset_index(drop=True)

    removed = initial_count - len(gdf)
    if removed > 0:
        logger.warning(f"Removed {removed} features that are not valid LineStrings")
    logger.info(f"Street data cleaned: {len(gdf)} LineStrings kept")

    return gdf


def select_columns(gdf, columns):
    """
    Keep only the given attribute columns; the geometry column always stays.

    Args:
        gdf: GeoDataFrame containing street data
        columns: Attribute column names to keep

    Returns:
        GeoDataFrame with the selected columns plus geometry
    """
    missing = [col for col in columns if col not in gdf.columns]
    if missing:
        raise ValueError(f"Columns not found in GeoDataFrame: {missing}")

    geometry_name = gdf.geometry.name
    keep = [col for col in columns if col != geometry_name] + [geometry_name]
    return gdf[keep]


def round_coordinates(gdf, decimals):
    """
    Round every coordinate to a fixed number of decimals.

    Endpoints only merge into one node when their coordinates match exactly,
    so rounding is the way to merge points that differ by floating point
    noise.

    Args:
        gdf: GeoDataFrame containing street data
        decimals: Number of decimals to keep

    Returns:
        Copy of the GeoDataFrame with rounded geometries
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")

    def _round(geom):
        if geom is None or geom.is_empty:
            return geom
        return LineString([(round(x, decimals), round(y, decimals)) for x, y, *_ in geom.coords])

    gdf = gdf.copy()
    gdf[gdf.geometry.name] = gdf.geometry.apply(_round)
    logger.info(f"Coordinates rounded to {decimals} decimals")

    return gdf


def gdf_to_line_features(gdf):
    """
    Convert GeoDataFrame rows into line features.

    The geometry becomes the coordinate sequence (2D, any Z is dropped) and
    every other column becomes an attribute.

    Args:
        gdf: GeoDataFrame with LineString geometries

    Returns:
        List of LineFeature in row order
    """
    geometry_name = gdf.geometry.name
    attribute_columns = [col for col in gdf.columns if col != geometry_name]

    if attribute_columns:
        records = gdf[attribute_columns].to_dict('records')
    else:
        records = [{} for _ in range(len(gdf))]

    features = []
    for position, (geom, attrs) in enumerate(zip(gdf.geometry, records), start=1):
        if geom is not None and not geom.is_empty and geom.geom_type != 'LineString':
            raise InvalidInputError(
                f"Row {position} has a {geom.geom_type} geometry; explode or clean the data first"
            )
        coords = [] if geom is None or geom.is_empty else [(x, y) for x, y, *_ in geom.coords]
        attrs = {key: (None if _is_missing(value) else value) for key, value in attrs.items()}
        features.append(LineFeature(coords=coords, attributes=attrs))

    return features


def _is_missing(value):
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
