# -*- coding: utf-8 -*-
"""
Data Loading Functions

This module contains functions for loading street line data from files or
downloading it from OpenStreetMap.
"""

import os
import logging

import geopandas as gpd
import osmnx as ox
import pandas as pd
from shapely import wkt
from shapely.errors import ShapelyError

from .config import EDGE_ATTRIBUTES, HIGHWAY_TYPES

logger = logging.getLogger('spatial_network.data_loading')

LAYER_HINTS = ('street', 'road', 'line')


def _pick_layer(file_path):
    layers = list(gpd.list_layers(file_path)['name'])
    if not layers:
        return None
    logger.info(f"Layers found in {file_path}: {layers}")
    return next((l for l in layers if any(hint in l.lower() for hint in LAYER_HINTS)), layers[0])


def load_street_data(file_path, crs=None, layer=None):
    """
    Load street line data from a file.

    Args:
        file_path: Path to a .gpkg, .shp, .geojson or .csv (WKT geometry) file
        crs: Coordinate reference system to reproject to, or None to keep the file's CRS
        layer: Layer name for multi-layer files; picked automatically when None

    Returns:
        GeoDataFrame with street data
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Street data file not found: {file_path}")

    ext = os.path.splitext(file_path)[1].lower()

    if ext == '.gpkg':
        layer = layer or _pick_layer(file_path)
        if layer:
            logger.info(f"Using layer: {layer}")
        gdf = gpd.read_file(file_path, layer=layer)
    elif ext in ['.shp', '.geojson', '.json']:
        gdf = gpd.read_file(file_path)
    elif ext == '.csv':
        df = pd.read_csv(file_path)
        if 'geometry' not in df.columns:
            raise ValueError("CSV file does not contain a 'geometry' column with WKT")
        try:
            geometry = df['geometry'].apply(wkt.loads)
        except (ShapelyError, TypeError) as e:
            raise ValueError(f"Could not parse geometry column in CSV file: {e}")
        gdf = gpd.GeoDataFrame(df.drop(columns='geometry'), geometry=geometry)
    else:
        raise ValueError(f"Unsupported file format: {ext}")

    if crs is not None:
        if gdf.crs is None:
            logger.warning(f"File has no CRS. Setting it to {crs}")
            gdf = gdf.set_crs(crs)
        else:
            gdf = gdf.to_crs(crs)

    logger.info(f"Loaded {len(gdf)} street segments from {file_path}")

    return gdf


def load_from_osm(place_name, highway_types=None, columns=None):
    """
    Download street lines for a place from OpenStreetMap.

    Args:
        place_name: Name of the place to geocode, e.g. "Münster, Germany"
        highway_types: Highway values to keep, or None for the configured defaults
        columns: Attribute columns to keep, or None for the configured defaults

    Returns:
        GeoDataFrame with one LineString per OSM way, in EPSG:4326
    """
    if not place_name:
        raise ValueError("place_name must be provided")

    highway_types = HIGHWAY_TYPES if highway_types is None else highway_types
    columns = EDGE_ATTRIBUTES if columns is None else columns

    logger.info(f"Downloading OSM streets for {place_name}")
    features = ox.features_from_place(place_name, tags={'highway': list(highway_types)})

    streets = features[features.geometry.geom_type == 'LineString'].reset_index(drop=True)
    if 'highway' in streets.columns:
        streets = streets[streets['highway'].isin(highway_types)]

    keep = [col for col in columns if col in streets.columns]
    streets = streets[keep + [streets.geometry.name]].reset_index(drop=True)

    logger.info(f"Downloaded {len(streets)} street segments from OSM")

    return streets


def save_street_data(gdf, file_path, layer='streets'):
    """
    Save street data to a GeoPackage.

    Args:
        gdf: GeoDataFrame to save
        file_path: Output .gpkg path
        layer: Layer name

    Returns:
        Path to saved file
    """
    os.makedirs(os.path.dirname(os.path.abspath(file_path)), exist_ok=True)
    gdf.to_file(file_path, layer=layer, driver='GPKG')
    logger.info(f"Saved {len(gdf)} features to {file_path} (layer '{layer}')")
    return file_path
