"""
pattern_evolution/primitive_nodes.py - Boolean, angle and normalised float node families
"""
import math

from .datatypes import Angle, Boolean, SignedFloat, UnitFloat
from .generation import BRANCH, LEAF, PIPE
from .node import Field, IfElse, ModifyState, Node
from .noisefunctions import mandelbrot_escape

# z -> z^p with p in [MANDELBROT_MIN_POWER, MANDELBROT_MIN_POWER + MANDELBROT_POWER_RANGE]
MANDELBROT_MIN_POWER = 1.0
MANDELBROT_POWER_RANGE = 3.0
# Byte iteration count is halved to bound per-pixel cost
MANDELBROT_ITERATION_DIVISOR = 2
# Shifts the classic power-2 set so its body sits at the origin
MANDELBROT_X_CENTRE = -0.5


# ------------------------------------------------------------------
# Boolean
# ------------------------------------------------------------------

class BooleanNode(Node, family='BooleanNode'):
    """Nodes producing a Boolean"""


class BooleanConstant(BooleanNode):
    category = LEAF
    fields = (Field('value', Boolean),)

    def compute(self, state):
        return self.value


class UnitFloatLess(BooleanNode):
    category = BRANCH
    fields = (Field('child_a', 'UnitFloatNode'), Field('child_b', 'UnitFloatNode'))

    def compute(self, state):
        return Boolean(self.child_a.compute(state).value < self.child_b.compute(state).value)


class UnitFloatMore(BooleanNode):
    category = BRANCH
    fields = (Field('child_a', 'UnitFloatNode'), Field('child_b', 'UnitFloatNode'))

    def compute(self, state):
        return Boolean(self.child_a.compute(state).value > self.child_b.compute(state).value)


class BooleanAnd(BooleanNode):
    category = BRANCH
    fields = (Field('child_a', 'BooleanNode'), Field('child_b', 'BooleanNode'))

    def compute(self, state):
        return Boolean(self.child_a.compute(state).value and self.child_b.compute(state).value)


class BooleanOr(BooleanNode):
    category = BRANCH
    fields = (Field('child_a', 'BooleanNode'), Field('child_b', 'BooleanNode'))

    def compute(self, state):
        return Boolean(self.child_a.compute(state).value or self.child_b.compute(state).value)


class BooleanNot(BooleanNode):
    category = PIPE
    fields = (Field('child', 'BooleanNode'),)

    def compute(self, state):
        return Boolean(not self.child.compute(state).value)


class BooleanModifyState(ModifyState, BooleanNode):
    pass


class BooleanIfElse(IfElse, BooleanNode):
    pass


# ------------------------------------------------------------------
# Angle
# ------------------------------------------------------------------

class AngleNode(Node, family='AngleNode'):
    """Nodes producing an Angle"""


class AngleConstant(AngleNode):
    category = LEAF
    fields = (Field('value', Angle),)

    def compute(self, state):
        return self.value


class AngleFromGametic(AngleNode):
    category = LEAF

    def compute(self, state):
        return Angle(state.coordinate_set.t * 0.1)


class AngleFromCoordinate(AngleNode):
    """Bearing of the pixel around the origin, zero along +y"""
    category = LEAF

    def compute(self, state):
        cs = state.coordinate_set
        return Angle(math.atan2(-cs.x.value, cs.y.value))


class AngleArcSin(AngleNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return Angle(math.asin(self.child.compute(state).value))


class AngleArcCos(AngleNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return Angle(math.acos(self.child.compute(state).value))


class AngleFromPoint(AngleNode):
    category = PIPE
    fields = (Field('child', 'PointNode'),)

    def compute(self, state):
        return self.child.compute(state).to_angle()


class AngleFromSignedFloat(AngleNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).to_angle()


class AngleFromUnitFloat(AngleNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).to_angle()


class AngleModifyState(ModifyState, AngleNode):
    pass


class AngleIfElse(IfElse, AngleNode):
    pass


# ------------------------------------------------------------------
# SignedFloat
# ------------------------------------------------------------------

class SignedFloatNode(Node, family='SignedFloatNode'):
    """Nodes producing a SignedFloat"""


class SignedFloatConstant(SignedFloatNode):
    category = LEAF
    fields = (Field('value', SignedFloat),)

    def compute(self, state):
        return self.value


class XRatio(SignedFloatNode):
    category = LEAF

    def compute(self, state):
        return state.coordinate_set.x


class YRatio(SignedFloatNode):
    category = LEAF

    def compute(self, state):
        return state.coordinate_set.y


class SignedFloatFromGametic(SignedFloatNode):
    category = LEAF

    def compute(self, state):
        return state.coordinate_set.get_unit_t().to_signed()


class SignedFloatSin(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'AngleNode'),)

    def compute(self, state):
        return self.child.compute(state).sin()


class SignedFloatCos(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'AngleNode'),)

    def compute(self, state):
        return self.child.compute(state).cos()


class SignedFloatFromAngle(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'AngleNode'),)

    def compute(self, state):
        return self.child.compute(state).to_signed()


class SignedFloatFromUnitFloat(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).to_signed()


class SignedFloatMultiply(SignedFloatNode):
    category = BRANCH
    fields = (Field('child_a', 'SignedFloatNode'), Field('child_b', 'SignedFloatNode'))

    def compute(self, state):
        return self.child_a.compute(state).multiply(self.child_b.compute(state))


class SignedFloatAbs(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return SignedFloat(abs(self.child.compute(state).value))


class SignedFloatInvert(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).invert()


class NoiseFunction(SignedFloatNode):
    category = PIPE
    fields = (Field('child', 'NoiseNode'),)

    def compute(self, state):
        return self.child.compute(state)


class SignedFloatSubDivide(SignedFloatNode):
    category = BRANCH
    fields = (Field('child', 'SignedFloatNode'), Field('divisions', 'NibbleNode'))

    def compute(self, state):
        return self.child.compute(state).subdivide(self.divisions.compute(state))


class SignedFloatModifyState(ModifyState, SignedFloatNode):
    pass


class SignedFloatIfElse(IfElse, SignedFloatNode):
    pass


# ------------------------------------------------------------------
# UnitFloat
# ------------------------------------------------------------------

class UnitFloatNode(Node, family='UnitFloatNode'):
    """Nodes producing a UnitFloat"""


class UnitFloatConstant(UnitFloatNode):
    category = LEAF
    fields = (Field('value', UnitFloat),)

    def compute(self, state):
        return self.value


class UnitFloatFromGametic(UnitFloatNode):
    category = LEAF

    def compute(self, state):
        return state.coordinate_set.get_unit_t()


class UnitFloatFromAngle(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'AngleNode'),)

    def compute(self, state):
        return self.child.compute(state).to_unsigned()


class UnitFloatFromSignedFloat(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).to_unsigned()


class AbsSignedFloat(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).abs()


class SquareSignedFloat(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'SignedFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).square()


class UnitFloatFromByte(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'ByteNode'),)

    def compute(self, state):
        return self.child.compute(state).to_unsigned()


class UnitFloatMultiply(UnitFloatNode):
    category = BRANCH
    fields = (Field('child_a', 'UnitFloatNode'), Field('child_b', 'UnitFloatNode'))

    def compute(self, state):
        return self.child_a.compute(state).multiply(self.child_b.compute(state))


class CircularAdd(UnitFloatNode):
    category = BRANCH
    fields = (Field('child_a', 'UnitFloatNode'), Field('child_b', 'UnitFloatNode'))

    def compute(self, state):
        return self.child_a.compute(state).circular_add(self.child_b.compute(state))


class InvertNormalised(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state):
        return self.child.compute(state).invert()


class ColorAverage(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return self.child.compute(state).average()


class ColorComponentR(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return UnitFloat(self.child.compute(state).r)


class ColorComponentG(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return UnitFloat(self.child.compute(state).g)


class ColorComponentB(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return UnitFloat(self.child.compute(state).b)


class ColorComponentH(UnitFloatNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return self.child.compute(state).hue()


class Mandelbrot(UnitFloatNode):
    """Escape-time fraction of z -> z^p + c, with c taken from the pixel"""
    category = BRANCH
    fields = (
        Field('power', 'UnitFloatNode'),
        Field('offset', 'PointNode'),
        Field('scale', 'PointNode'),
        Field('iterations', 'ByteNode'),
    )

    def compute(self, state):
        cs = state.coordinate_set
        power = MANDELBROT_MIN_POWER + MANDELBROT_POWER_RANGE * self.power.compute(state).value
        offset = self.offset.compute(state)
        scale = self.scale.compute(state)
        iterations = self.iterations.compute(state).value // MANDELBROT_ITERATION_DIVISOR

        cx = cs.x.value * (1.0 + scale.x.value) + offset.x.value + MANDELBROT_X_CENTRE
        cy = cs.y.value * (1.0 + scale.y.value) + offset.y.value
        return UnitFloat(mandelbrot_escape(cx, cy, power, iterations))


class UnitFloatSubDivide(UnitFloatNode):
    category = BRANCH
    fields = (Field('child', 'UnitFloatNode'), Field('divisions', 'NibbleNode'))

    def compute(self, state):
        return self.child.compute(state).subdivide(self.divisions.compute(state))


class EuclideanDistance(UnitFloatNode):
    category = BRANCH
    fields = (Field('child_a', 'PointNode'), Field('child_b', 'PointNode'))

    def compute(self, state):
        distance = self.child_a.compute(state).distance(self.child_b.compute(state))
        return UnitFloat(min(distance * 0.5, 1.0))


class UnitFloatModifyState(ModifyState, UnitFloatNode):
    pass


class UnitFloatIfElse(IfElse, UnitFloatNode):
    pass
