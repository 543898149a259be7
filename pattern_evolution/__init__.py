"""
pattern_evolution - Self-mutating expression trees rendered as evolving images

Every pixel of every frame is the value of a randomly grown, typed expression
tree evaluated at (x, y, t). Frames are computed a slice at a time; when the
image stagnates the tree is mutated along a single random path.
"""

__version__ = "0.1.0"
__author__ = "Pattern Evolution Project"

from .config import Config
from .datatypes import Angle, Boolean, Byte, Nibble, Point, SInt, SignedFloat, UInt, UnitFloat, map_range
from .colors import BitColor, ByteColor, FloatColor
from .generation import GenerationContext, GrammarError, weighted_choice
from .history import History, HistoryStep, TransformDescriptor
from .updatestate import CoordinateSet, UpdateState
from .node import Node, check_grammar, get_family, node_from_dict
from .nodes import ROOT_FAMILIES
from .preloader import Generator, Preloader
from .image import Image, ImageGenerator
from .genome import Genome
from .driver import Driver, FrameOutput, UpdateStat

__all__ = [
    'Config',
    'Angle', 'Boolean', 'Byte', 'Nibble', 'Point', 'SInt', 'SignedFloat', 'UInt', 'UnitFloat',
    'map_range',
    'BitColor', 'ByteColor', 'FloatColor',
    'GenerationContext', 'GrammarError', 'weighted_choice',
    'History', 'HistoryStep', 'TransformDescriptor',
    'CoordinateSet', 'UpdateState',
    'Node', 'check_grammar', 'get_family', 'node_from_dict', 'ROOT_FAMILIES',
    'Generator', 'Preloader',
    'Image', 'ImageGenerator',
    'Genome',
    'Driver', 'FrameOutput', 'UpdateStat',
]
