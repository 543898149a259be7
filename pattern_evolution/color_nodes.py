"""
pattern_evolution/color_nodes.py - Float, byte and bit color node families
"""
from .colors import BitColor, ByteColor, FloatColor
from .generation import BRANCH, LEAF, PIPE
from .image import Image
from .node import Field, IfElse, ModifyState, Node


def _sample_image(image: Image, state) -> ByteColor:
    cs = state.coordinate_set
    return image.get_pixel_normalised(cs.x, cs.y, cs.t)


def _sample_history(state) -> ByteColor:
    cs = state.coordinate_set
    return state.history.get_normalised(cs.x, cs.y, cs.t)


# ------------------------------------------------------------------
# FloatColor
# ------------------------------------------------------------------

class FloatColorNode(Node, family='FloatColorNode'):
    """Nodes producing a FloatColor; the root of every genome is one of these"""


class FloatColorGray(FloatColorNode):
    category = LEAF

    def compute(self, state):
        return FloatColor.gray(0.5)


class FloatColorConstant(FloatColorNode):
    category = LEAF
    fields = (Field('value', FloatColor),)

    def compute(self, state):
        return self.value


class FloatColorFromImage(FloatColorNode):
    category = LEAF
    fields = (Field('image', Image),)

    def compute(self, state):
        return _sample_image(self.image, state).to_float_color()


class FloatColorFromCellArray(FloatColorNode):
    """Reads the history frame at (x, y, t)"""
    category = LEAF

    def compute(self, state):
        return _sample_history(state).to_float_color()


class FloatColorGrayscale(FloatColorNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state):
        return FloatColor.gray(self.child.compute(state).value)


class FloatColorRGB(FloatColorNode):
    category = BRANCH
    fields = (
        Field('r', 'UnitFloatNode'),
        Field('g', 'UnitFloatNode'),
        Field('b', 'UnitFloatNode'),
    )

    def compute(self, state):
        return FloatColor(
            self.r.compute(state).value,
            self.g.compute(state).value,
            self.b.compute(state).value,
            1.0,
        )


class FloatColorHSV(FloatColorNode):
    category = BRANCH
    fields = (
        Field('h', 'UnitFloatNode'),
        Field('s', 'UnitFloatNode'),
        Field('v', 'UnitFloatNode'),
    )

    def compute(self, state):
        return FloatColor.from_hsv(
            self.h.compute(state).value,
            self.s.compute(state).value,
            self.v.compute(state).value,
        )


class FloatColorFromBlend(FloatColorNode):
    category = PIPE
    fields = (Field('child', 'ColorBlendNode'),)

    def compute(self, state):
        return self.child.compute(state)


class FloatColorFromBitColor(FloatColorNode):
    category = PIPE
    fields = (Field('child', 'BitColorNode'),)

    def compute(self, state):
        return self.child.compute(state).to_float_color()


class FloatColorFromByteColor(FloatColorNode):
    category = PIPE
    fields = (Field('child', 'ByteColorNode'),)

    def compute(self, state):
        return self.child.compute(state).to_float_color()


class FloatColorModifyState(ModifyState, FloatColorNode):
    pass


class FloatColorIfElse(IfElse, FloatColorNode):
    pass


# ------------------------------------------------------------------
# ByteColor
# ------------------------------------------------------------------

class ByteColorNode(Node, family='ByteColorNode'):
    """Nodes producing a ByteColor"""


class ByteColorConstant(ByteColorNode):
    category = LEAF
    fields = (Field('value', ByteColor),)

    def compute(self, state):
        return self.value


class ByteColorFromImage(ByteColorNode):
    category = LEAF
    fields = (Field('image', Image),)

    def compute(self, state):
        return _sample_image(self.image, state)


class ByteColorFromCellArray(ByteColorNode):
    category = LEAF

    def compute(self, state):
        return _sample_history(state)


class ByteColorFromFloatColor(ByteColorNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return self.child.compute(state).to_byte_color()


class ByteColorFromBitColor(ByteColorNode):
    category = PIPE
    fields = (Field('child', 'BitColorNode'),)

    def compute(self, state):
        return self.child.compute(state).to_byte_color()


class ByteColorDecompose(ByteColorNode):
    """Opaque color assembled from three byte channels"""
    category = BRANCH
    fields = (
        Field('r', 'ByteNode'),
        Field('g', 'ByteNode'),
        Field('b', 'ByteNode'),
    )

    def compute(self, state):
        return ByteColor.from_bytes(self.r.compute(state), self.g.compute(state), self.b.compute(state))


class ByteColorModifyState(ModifyState, ByteColorNode):
    pass


class ByteColorIfElse(IfElse, ByteColorNode):
    pass


# ------------------------------------------------------------------
# BitColor
# ------------------------------------------------------------------

class BitColorNode(Node, family='BitColorNode'):
    """Nodes producing one of the eight bit colors"""


class BitColorConstant(BitColorNode):
    category = LEAF
    fields = (Field('value', BitColor),)

    def compute(self, state):
        return self.value


class BitColorFromImage(BitColorNode):
    category = LEAF
    fields = (Field('image', Image),)

    def compute(self, state):
        return _sample_image(self.image, state).to_bit_color()


class BitColorFromCellArray(BitColorNode):
    category = LEAF

    def compute(self, state):
        return _sample_history(state).to_bit_color()


class BitColorGive(BitColorNode):
    """Union of the lit channels"""
    category = BRANCH
    fields = (Field('child_a', 'BitColorNode'), Field('child_b', 'BitColorNode'))

    def compute(self, state):
        return self.child_a.compute(state).give_color(self.child_b.compute(state))


class BitColorTake(BitColorNode):
    """Channels lit in a but not in b"""
    category = BRANCH
    fields = (Field('child_a', 'BitColorNode'), Field('child_b', 'BitColorNode'))

    def compute(self, state):
        return self.child_a.compute(state).take_color(self.child_b.compute(state))


class BitColorXor(BitColorNode):
    category = BRANCH
    fields = (Field('child_a', 'BitColorNode'), Field('child_b', 'BitColorNode'))

    def compute(self, state):
        return self.child_a.compute(state).xor_color(self.child_b.compute(state))


class BitColorEq(BitColorNode):
    category = BRANCH
    fields = (Field('child_a', 'BitColorNode'), Field('child_b', 'BitColorNode'))

    def compute(self, state):
        return self.child_a.compute(state).eq_color(self.child_b.compute(state))


class BitColorFromComponents(BitColorNode):
    category = BRANCH
    fields = (
        Field('r', 'BooleanNode'),
        Field('g', 'BooleanNode'),
        Field('b', 'BooleanNode'),
    )

    def compute(self, state):
        return BitColor.from_components(
            self.r.compute(state).value,
            self.g.compute(state).value,
            self.b.compute(state).value,
        )


class BitColorFromUnitFloat(BitColorNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state):
        return BitColor.from_unit_float(self.child.compute(state))


class BitColorFromFloatColor(BitColorNode):
    category = PIPE
    fields = (Field('child', 'FloatColorNode'),)

    def compute(self, state):
        return self.child.compute(state).to_bit_color()


class BitColorFromByteColor(BitColorNode):
    category = PIPE
    fields = (Field('child', 'ByteColorNode'),)

    def compute(self, state):
        return self.child.compute(state).to_bit_color()


class BitColorModifyState(ModifyState, BitColorNode):
    pass


class BitColorIfElse(IfElse, BitColorNode):
    pass
