"""
pattern_evolution/updatestate.py - Per-pixel evaluation context
"""
import math
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .datatypes import Byte, Point, SignedFloat, UnitFloat

if TYPE_CHECKING:
    from .history import History


@dataclass(frozen=True)
class CoordinateSet:
    """Where (x, y) and when (t) a node is being evaluated"""
    x: SignedFloat
    y: SignedFloat
    t: float

    @classmethod
    def from_floats(cls, x: float, y: float, t: float) -> 'CoordinateSet':
        return cls(SignedFloat(x), SignedFloat(y), float(t))

    def get_byte_t(self) -> Byte:
        return Byte.wrapping(math.floor(self.t))

    def get_unit_t(self) -> UnitFloat:
        return self.get_byte_t().to_unsigned()

    def to_point(self) -> Point:
        return Point(self.x, self.y)

    def shifted(self, dx: SignedFloat, dy: SignedFloat, dt: float = 0.0) -> 'CoordinateSet':
        return CoordinateSet(self.x.circular_add(dx), self.y.circular_add(dy), self.t + dt)

    def scaled(self, sx: UnitFloat, sy: UnitFloat) -> 'CoordinateSet':
        return replace(self, x=SignedFloat(self.x.value * sx.value), y=SignedFloat(self.y.value * sy.value))

    def with_xy(self, x: SignedFloat, y: SignedFloat) -> 'CoordinateSet':
        return replace(self, x=x, y=y)


@dataclass(frozen=True)
class UpdateState:
    coordinate_set: CoordinateSet
    history: 'History'

    def with_coordinates(self, coordinate_set: CoordinateSet) -> 'UpdateState':
        return replace(self, coordinate_set=coordinate_set)
