"""
pattern_evolution/color_blend_nodes.py - Blend modes combining float colors
"""
from .colors import FloatColor
from .generation import BRANCH, LEAF, PIPE
from .node import Field, IfElse, ModifyState, Node
from .noisefunctions import dither


def _overlay_channel(base: float, top: float) -> float:
    if base < 0.5:
        return 2.0 * base * top
    return min(1.0 - 2.0 * (1.0 - base) * (1.0 - top), 1.0)


def _screen_channel(base: float, top: float) -> float:
    return 1.0 - (1.0 - base) * (1.0 - top)


class ColorBlendNode(Node, family='ColorBlendNode'):
    """Nodes mixing two or more FloatColors"""


class BlendGray(ColorBlendNode):
    category = LEAF

    def compute(self, state):
        return FloatColor.gray(0.5)


class BlendInvert(ColorBlendNode):
    """Inverts every channel, alpha included"""
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        color = self.child.compute(state)
        return FloatColor(1.0 - color.r, 1.0 - color.g, 1.0 - color.b, 1.0 - color.a)


class Dissolve(ColorBlendNode):
    """Chooses color_b with probability value, dithered per coordinate"""
    category = BRANCH
    fields = (
        Field('color_a', 'FloatColorNode'),
        Field('color_b', 'FloatColorNode'),
        Field('value', 'UnitFloatNode'),
    )

    def compute(self, state):
        cs = state.coordinate_set
        threshold = dither(cs.x.value, cs.y.value, cs.t)
        if threshold < self.value.compute(state).value:
            return self.color_b.compute(state)
        return self.color_a.compute(state)


class Overlay(ColorBlendNode):
    category = BRANCH
    fields = (Field('color_a', 'FloatColorNode'), Field('color_b', 'FloatColorNode'))

    def compute(self, state):
        base = self.color_a.compute(state)
        top = self.color_b.compute(state)
        return FloatColor(
            _overlay_channel(base.r, top.r),
            _overlay_channel(base.g, top.g),
            _overlay_channel(base.b, top.b),
            base.a,
        )


class ScreenDodge(ColorBlendNode):
    category = BRANCH
    fields = (Field('color_a', 'FloatColorNode'), Field('color_b', 'FloatColorNode'))

    def compute(self, state):
        base = self.color_a.compute(state)
        top = self.color_b.compute(state)
        return FloatColor(
            _screen_channel(base.r, top.r),
            _screen_channel(base.g, top.g),
            _screen_channel(base.b, top.b),
            _screen_channel(base.a, top.a),
        )


class BlendMultiply(ColorBlendNode):
    category = BRANCH
    fields = (Field('color_a', 'FloatColorNode'), Field('color_b', 'FloatColorNode'))

    def compute(self, state):
        a = self.color_a.compute(state)
        b = self.color_b.compute(state)
        return FloatColor(a.r * b.r, a.g * b.g, a.b * b.b, a.a * b.a)


class Lerp(ColorBlendNode):
    category = BRANCH
    fields = (
        Field('color_a', 'FloatColorNode'),
        Field('color_b', 'FloatColorNode'),
        Field('value', 'UnitFloatNode'),
    )

    def compute(self, state):
        a = self.color_a.compute(state)
        b = self.color_b.compute(state)
        w = self.value.compute(state).value
        return FloatColor(
            min(max(a.r + (b.r - a.r) * w, 0.0), 1.0),
            min(max(a.g + (b.g - a.g) * w, 0.0), 1.0),
            min(max(a.b + (b.b - a.b) * w, 0.0), 1.0),
            min(max(a.a + (b.a - a.a) * w, 0.0), 1.0),
        )


class BlendModifyState(ModifyState, ColorBlendNode):
    pass


class BlendIfElse(IfElse, ColorBlendNode):
    pass
