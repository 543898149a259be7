"""
pattern_evolution/coord_map_nodes.py - Nodes that remap the coordinate set

Polar convention: angle = atan2(-x, y), so angle 0 points along +y and grows
towards -x. ToPolar and FromPolar are exact inverses for radius <= 1.
"""
import math

from .datatypes import Angle, SignedFloat, UnitFloat
from .generation import LEAF, PIPE
from .node import Field, Node
from .updatestate import CoordinateSet

_NO_SHIFT = SignedFloat(0.0)
_NO_SCALE = UnitFloat(1.0)


class CoordMapNode(Node, family='CoordMapNode'):
    """Nodes producing a new CoordinateSet from the current one"""


class ShiftX(CoordMapNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state) -> CoordinateSet:
        return state.coordinate_set.shifted(self.child.compute(state), _NO_SHIFT)


class ShiftY(CoordMapNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state) -> CoordinateSet:
        return state.coordinate_set.shifted(_NO_SHIFT, self.child.compute(state))


class ShiftT(CoordMapNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state) -> CoordinateSet:
        return state.coordinate_set.shifted(_NO_SHIFT, _NO_SHIFT, self.child.compute(state).value)


class ScaleX(CoordMapNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state) -> CoordinateSet:
        return state.coordinate_set.scaled(self.child.compute(state), _NO_SCALE)


class ScaleY(CoordMapNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state) -> CoordinateSet:
        return state.coordinate_set.scaled(_NO_SCALE, self.child.compute(state))


class Rotate(CoordMapNode):
    """Rotation about the origin; corners that leave the square wrap around"""
    category = PIPE
    fields = (Field('child', 'AngleNode'),)

    def compute(self, state) -> CoordinateSet:
        cs = state.coordinate_set
        theta = self.child.compute(state).value
        cos_t, sin_t = math.cos(theta), math.sin(theta)
        x, y = cs.x.value, cs.y.value
        return cs.with_xy(
            SignedFloat.wrap(x * cos_t - y * sin_t),
            SignedFloat.wrap(x * sin_t + y * cos_t),
        )


class ToPolar(CoordMapNode):
    """x becomes the signed angle, y the radius clamped to 1"""
    category = LEAF

    def compute(self, state) -> CoordinateSet:
        cs = state.coordinate_set
        x, y = cs.x.value, cs.y.value
        angle = Angle(math.atan2(-x, y)).to_signed()
        radius = min(math.sqrt(x * x + y * y), 1.0)
        return cs.with_xy(angle, SignedFloat(radius))


class FromPolar(CoordMapNode):
    """Reads x as a signed angle and y as a radius"""
    category = LEAF

    def compute(self, state) -> CoordinateSet:
        cs = state.coordinate_set
        theta = cs.x.to_angle().value
        radius = cs.y.value
        return cs.with_xy(
            SignedFloat.clamped(-radius * math.sin(theta)),
            SignedFloat.clamped(radius * math.cos(theta)),
        )
