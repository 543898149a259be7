"""
pattern_evolution/discrete_nodes.py - Wrapping integer node families
"""
import math

from .datatypes import Byte, Nibble, SInt, UInt
from .generation import BRANCH, LEAF, PIPE
from .node import SELF, Field, IfElse, Node


class _BinaryOp:
    category = BRANCH
    fields = (Field('child_a', SELF), Field('child_b', SELF))


class Add(_BinaryOp):
    def compute(self, state):
        return self.child_a.compute(state).add(self.child_b.compute(state))


class Multiply(_BinaryOp):
    def compute(self, state):
        return self.child_a.compute(state).multiply(self.child_b.compute(state))


class Divide(_BinaryOp):
    """Zero divisor yields zero"""

    def compute(self, state):
        return self.child_a.compute(state).divide(self.child_b.compute(state))


class Modulus(_BinaryOp):
    """Zero divisor yields zero"""

    def compute(self, state):
        return self.child_a.compute(state).modulus(self.child_b.compute(state))


class FromGametic:
    category = LEAF
    value_type = None

    def compute(self, state):
        return self.value_type.wrapping(math.floor(state.coordinate_set.t))


# Byte

class ByteNode(Node, family='ByteNode'):
    """Nodes producing a Byte"""
    mut_reroll = 0.0


class ByteConstant(ByteNode):
    category = LEAF
    fields = (Field('value', Byte),)

    def compute(self, state):
        return self.value


class ByteFromGametic(FromGametic, ByteNode):
    value_type = Byte


class ByteFromUnitFloat(ByteNode):
    category = PIPE
    fields = (Field('child', 'UnitFloatNode'),)

    def compute(self, state):
        return Byte(int(self.child.compute(state).value * 255))


class ByteFromUInt(ByteNode):
    category = PIPE
    fields = (Field('child', 'UIntNode'),)

    def compute(self, state):
        return Byte.wrapping(self.child.compute(state).value)


class ByteAdd(Add, ByteNode):
    pass


class ByteMultiply(Multiply, ByteNode):
    pass


class ByteDivide(Divide, ByteNode):
    pass


class ByteModulus(Modulus, ByteNode):
    pass


class ByteIfElse(IfElse, ByteNode):
    pass


# UInt

class UIntNode(Node, family='UIntNode'):
    """Nodes producing an unsigned 32-bit integer"""
    mut_reroll = 0.0


class UIntConstant(UIntNode):
    category = LEAF
    fields = (Field('value', UInt),)

    def compute(self, state):
        return self.value


class UIntFromGametic(FromGametic, UIntNode):
    value_type = UInt


class UIntFromSInt(UIntNode):
    """Reinterprets the two's complement bits"""
    category = PIPE
    fields = (Field('child', 'SIntNode'),)

    def compute(self, state):
        return UInt.wrapping(self.child.compute(state).value)


class UIntAdd(Add, UIntNode):
    pass


class UIntMultiply(Multiply, UIntNode):
    pass


class UIntDivide(Divide, UIntNode):
    pass


class UIntModulus(Modulus, UIntNode):
    pass


class UIntIfElse(IfElse, UIntNode):
    pass


# SInt

class SIntNode(Node, family='SIntNode'):
    """Nodes producing a signed 32-bit integer"""
    mut_reroll = 0.0


class SIntConstant(SIntNode):
    category = LEAF
    fields = (Field('value', SInt),)

    def compute(self, state):
        return self.value


class SIntFromGametic(FromGametic, SIntNode):
    value_type = SInt


class SIntAdd(Add, SIntNode):
    pass


class SIntMultiply(Multiply, SIntNode):
    pass


class SIntDivide(Divide, SIntNode):
    pass


class SIntModulus(Modulus, SIntNode):
    pass


class SIntIfElse(IfElse, SIntNode):
    pass


# Nibble

class NibbleNode(Node, family='NibbleNode'):
    """Nodes producing a 4-bit integer"""
    mut_reroll = 0.0


class NibbleConstant(NibbleNode):
    category = LEAF
    fields = (Field('value', Nibble),)

    def compute(self, state):
        return self.value


class NibbleFromGametic(FromGametic, NibbleNode):
    value_type = Nibble


class NibbleFromByte(NibbleNode):
    """High nibble of a byte"""
    category = PIPE
    fields = (Field('child', 'ByteNode'),)

    def compute(self, state):
        return Nibble(self.child.compute(state).value >> 4)


class NibbleAdd(Add, NibbleNode):
    pass


class NibbleMultiply(Multiply, NibbleNode):
    pass


class NibbleDivide(Divide, NibbleNode):
    pass


class NibbleModulus(Modulus, NibbleNode):
    pass


class NibbleIfElse(IfElse, NibbleNode):
    pass
