"""
pattern_evolution/nodes.py - Registers every node family
"""
from . import (  # noqa: F401
    color_blend_nodes, color_nodes, coord_map_nodes, discrete_nodes, noise_nodes,
    point_nodes, primitive_nodes,
)
from .node import FAMILIES, NODE_TYPES

ROOT_FAMILIES = ('FloatColorNode', 'SignedFloatNode', 'PointNode', 'BooleanNode')

__all__ = ['FAMILIES', 'NODE_TYPES', 'ROOT_FAMILIES']
