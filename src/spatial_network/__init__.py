# -*- coding: utf-8 -*-
"""
Spatial Network Analysis

Este pacote representa redes de ruas como grafos: cada linha vira uma aresta
e os pontos extremos idênticos viram nós compartilhados. Sobre o grafo rodam
as consultas clássicas (comprimento, centralidade, caminho mínimo, fluxos)
com networkx.
"""

__version__ = '0.1.0'

from .graph_construction import (
    Edge, EmptyInputError, Graph, InvalidInputError, LineFeature, Node,
    build_graph, gdf_to_graph,
)
from .conversion import graph_to_flat_table, graph_to_gdfs, graph_to_networkx

__all__ = [
    'Edge',
    'EmptyInputError',
    'Graph',
    'InvalidInputError',
    'LineFeature',
    'Node',
    'build_graph',
    'gdf_to_graph',
    'graph_to_flat_table',
    'graph_to_gdfs',
    'graph_to_networkx',
]
