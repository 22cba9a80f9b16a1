# -*- coding: utf-8 -*-
"""
Configuration Settings

Este módulo contém as configurações e caminhos usados pelo pipeline de redes
espaciais. Os caminhos podem ser redirecionados com a variável de ambiente
SPATIAL_NETWORK_HOME.
"""

import os
from datetime import datetime

# Caminhos base
BASE_DIR = os.environ.get("SPATIAL_NETWORK_HOME", os.path.join(os.getcwd(), "spatial_network_data"))
DATA_DIR = os.path.join(BASE_DIR, "DATA")
OUTPUT_DIR = os.path.join(BASE_DIR, "OUTPUT")

# Dados de exemplo do OpenStreetMap
DEFAULT_PLACE = "Münster, Germany"
STREETS_PATH = os.path.join(DATA_DIR, "streets.gpkg")

# Tipos de via mantidos ao baixar do OSM
HIGHWAY_TYPES = [
    "motorway",
    "trunk",
    "primary",
    "secondary",
    "tertiary",
    "unclassified",
    "residential",
    "living_street",
    "service",
    "pedestrian",
    "footway",
    "cycleway",
    "path",
]

# Colunas de atributos mantidas nas arestas
EDGE_ATTRIBUTES = ["highway", "name"]

# Sistemas de referência
METRIC_CRS = "EPSG:25832"  # ETRS89 / UTM 32N, cobre Münster

# Peso usado nas consultas de caminho mínimo e centralidade
DEFAULT_WEIGHT = "length"

# Configurações de visualização
VIZ_FIGSIZE = (15, 15)
DEFAULT_DPI = 300
NODE_CMAP = "viridis"
EDGE_CMAP = "plasma"
NODE_SIZE = 10
EDGE_WIDTH = 1.0

# Configuração de logging
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = os.environ.get("SPATIAL_NETWORK_LOG_LEVEL", "INFO")


def get_timestamp():
    """Obter timestamp no formato padrão."""
    return datetime.now().strftime('%Y%m%d_%H%M%S')

