"""
pattern_evolution/point_nodes.py - Point node family
"""
from .datatypes import Point
from .generation import BRANCH, LEAF
from .node import Field, IfElse, ModifyState, Node


class PointNode(Node, family='PointNode'):
    """Nodes producing a Point in [-1, 1] x [-1, 1]"""


class PointZero(PointNode):
    category = LEAF

    def compute(self, state):
        return Point.zero()


class PointConstant(PointNode):
    category = LEAF
    fields = (Field('value', Point),)

    def compute(self, state):
        return self.value


class PointFromCoordinate(PointNode):
    category = LEAF

    def compute(self, state):
        return state.coordinate_set.to_point()


class PointFromSignedFloats(PointNode):
    category = BRANCH
    fields = (Field('x', 'SignedFloatNode'), Field('y', 'SignedFloatNode'))

    def compute(self, state):
        return Point(self.x.compute(state), self.y.compute(state))


class PointAdd(PointNode):
    """Component-wise sum wrapped back into range"""
    category = BRANCH
    fields = (Field('child_a', 'PointNode'), Field('child_b', 'PointNode'))

    def compute(self, state):
        return self.child_a.compute(state).circular_add(self.child_b.compute(state))


class PointModifyState(ModifyState, PointNode):
    pass


class PointIfElse(IfElse, PointNode):
    pass
