"""Helpers for building test inputs."""

from spatial_network.graph_construction import LineFeature, build_graph


def make_lines(*coord_lists, **attributes):
    """Create LineFeatures from coordinate lists; keyword values are lists, one entry per line."""
    lines = []
    for i, coords in enumerate(coord_lists):
        attrs = {key: values[i] for key, values in attributes.items()}
        lines.append(LineFeature(coords=coords, attributes=attrs))
    return lines


def make_graph(*coord_lists, directed=False, crs=None, **attributes):
    """Build a Graph directly from coordinate lists."""
    return build_graph(make_lines(*coord_lists, **attributes), directed=directed, crs=crs)
