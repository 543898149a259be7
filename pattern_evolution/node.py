"""
pattern_evolution/node.py - Node base class, family registry, mutation and serialization

A node family is a direct subclass of Node declared with a ``family=`` keyword.
Every concrete variant subclasses its family and sets ``category`` (leaf, pipe
or branch) and ``fields``; the family's weighted draw picks it up automatically.
"""
import logging
import random
from abc import abstractmethod
from typing import Any, ClassVar, Dict, Iterator, List, Optional, Sequence, Tuple, Type

from .generation import (
    BRANCH, CATEGORY_WEIGHTS, Generatable, GenerationContext, GrammarError, weighted_choice,
)

logger = logging.getLogger(__name__)

FAMILIES: Dict[str, Type['Node']] = {}
NODE_TYPES: Dict[str, Type['Node']] = {}

SELF = 'self'


def _load_families():
    # Families refer to each other by name; importing the aggregate module
    # guarantees every one of them is registered before lookup.
    from . import nodes  # noqa: F401


def get_family(name: str) -> Type['Node']:
    if name not in FAMILIES:
        _load_families()
    try:
        return FAMILIES[name]
    except KeyError:
        raise GrammarError(f"Unknown node family: {name}") from None


class Field:
    """A named slot on a variant: either a child node family or a value type"""

    def __init__(self, name: str, kind: Any, weight: float = 1.0):
        self.name = name
        self.kind = kind
        self.weight = weight

    def resolve(self, owner: Type['Node']):
        if self.kind == SELF:
            return owner.family
        if isinstance(self.kind, str):
            return get_family(self.kind)
        return self.kind

    def holds_node(self, owner: Type['Node']) -> bool:
        kind = self.resolve(owner)
        return isinstance(kind, type) and issubclass(kind, Node)

    def generate(self, owner: Type['Node'], ctx: GenerationContext):
        return self.resolve(owner).generate(ctx)

    def from_json(self, owner: Type['Node'], data: Any):
        if self.holds_node(owner):
            return node_from_dict(data)
        return self.resolve(owner).from_json(data)

    def __repr__(self):
        return f"Field({self.name!r}, {self.kind!r})"


class Node(Generatable):
    """Base class for every expression tree node"""

    family: ClassVar[Optional[Type['Node']]] = None
    family_name: ClassVar[str] = ''
    variants: ClassVar[List[Type['Node']]] = []
    category: ClassVar[Optional[str]] = None
    fields: ClassVar[Tuple[Field, ...]] = ()
    gen_weight: ClassVar[Any] = None
    mut_reroll: ClassVar[float] = 0.1

    def __init_subclass__(cls, family: Optional[str] = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if family is not None:
            cls.family = cls
            cls.family_name = family
            cls.variants = []
            FAMILIES[family] = cls
        elif cls.category is not None:
            if cls.family is None:
                raise TypeError(f"{cls.__name__} declares a category but belongs to no family")
            if cls.__name__ in NODE_TYPES:
                raise TypeError(f"Duplicate node variant name: {cls.__name__}")
            cls.family.variants.append(cls)
            NODE_TYPES[cls.__name__] = cls

    def __init__(self, **children):
        names = [f.name for f in self.fields]
        unexpected = set(children) - set(names)
        missing = set(names) - set(children)
        if unexpected or missing:
            raise TypeError(
                f"{type(self).__name__} expects fields {names}, "
                f"missing {sorted(missing)}, unexpected {sorted(unexpected)}"
            )
        for name in names:
            setattr(self, name, children[name])

    @abstractmethod
    def compute(self, state):
        """Evaluate this node for one pixel"""
        pass

    # Generation

    @classmethod
    def generation_weight(cls, ctx: GenerationContext) -> float:
        weight = cls.gen_weight
        if weight is None:
            weight = CATEGORY_WEIGHTS[cls.category]
        if callable(weight):
            return weight(ctx)
        return float(weight)

    @classmethod
    def variant_weights(cls, ctx: GenerationContext) -> List[Tuple[float, Type['Node']]]:
        return [(variant.generation_weight(ctx), variant) for variant in cls.family.variants]

    @classmethod
    def choose_variant(cls, ctx: GenerationContext) -> Type['Node']:
        try:
            return weighted_choice(ctx.rng, cls.variant_weights(ctx))
        except GrammarError as e:
            raise GrammarError(f"{cls.family_name} at depth {ctx.depth}: {e}") from e

    @classmethod
    def build(cls, ctx: GenerationContext) -> 'Node':
        child_ctx = ctx.deeper()
        return cls(**{f.name: f.generate(cls, child_ctx) for f in cls.fields})

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'Node':
        if cls is cls.family:
            return cls.choose_variant(ctx).build(ctx)
        return cls.build(ctx)

    # Mutation

    def mutate(self, ctx: GenerationContext) -> 'Node':
        reroll = self.mut_reroll if ctx.reroll_override is None else ctx.reroll_override
        if reroll > 0 and ctx.rng.random() < reroll:
            logger.debug("Rerolling %s at depth %d", type(self).__name__, ctx.depth)
            return self.family.generate(ctx)

        if not self.fields:
            return self

        field = weighted_choice(ctx.rng, [(f.weight, f) for f in self.fields])
        setattr(self, field.name, getattr(self, field.name).mutate(ctx.deeper()))
        return self

    # Tree helpers

    @property
    def children(self) -> List['Node']:
        values = (getattr(self, f.name) for f in self.fields)
        return [value for value in values if isinstance(value, Node)]

    def get_all_nodes(self) -> List['Node']:
        """Get all nodes in this subtree"""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.get_all_nodes())
        return nodes

    def get_depth(self) -> int:
        """Get maximum depth of this subtree"""
        children = self.children
        if not children:
            return 1
        return 1 + max(child.get_depth() for child in children)

    def iter_with_depth(self, depth: int = 0) -> Iterator[Tuple[int, 'Node']]:
        yield depth, self
        for child in self.children:
            yield from child.iter_with_depth(depth + 1)

    def copy(self) -> 'Node':
        values = {}
        for f in self.fields:
            value = getattr(self, f.name)
            values[f.name] = value.copy() if isinstance(value, Node) else value
        return type(self)(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = {'type': type(self).__name__}
        for f in self.fields:
            value = getattr(self, f.name)
            data[f.name] = value.to_dict() if isinstance(value, Node) else value.to_json()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Node':
        return cls(**{f.name: f.from_json(cls, data[f.name]) for f in cls.fields})

    def __str__(self):
        if not self.fields:
            return type(self).__name__
        inner = ', '.join(str(getattr(self, f.name)) for f in self.fields)
        return f"{type(self).__name__}({inner})"


class IfElse:
    """Evaluates the predicate, then exactly one of the two children"""
    category = BRANCH
    fields = (
        Field('predicate', 'BooleanNode'),
        Field('child_a', SELF),
        Field('child_b', SELF),
    )

    def compute(self, state):
        if self.predicate.compute(state).value:
            return self.child_a.compute(state)
        return self.child_b.compute(state)


class ModifyState:
    """Evaluates the child at coordinates produced by a coordinate map"""
    category = BRANCH
    fields = (
        Field('child', SELF),
        Field('child_state', 'CoordMapNode'),
    )

    def compute(self, state):
        return self.child.compute(state.with_coordinates(self.child_state.compute(state)))


def node_from_dict(data: Dict[str, Any]) -> Node:
    """Create node from dictionary representation"""
    if not NODE_TYPES:
        _load_families()
    node_type = data['type']
    if node_type not in NODE_TYPES:
        _load_families()
    if node_type not in NODE_TYPES:
        raise ValueError(f"Unknown node type: {node_type}")
    return NODE_TYPES[node_type].from_dict(data)


def check_grammar(config, roots: Sequence[str], root_depth: int = 0) -> Dict[str, List[int]]:
    """Walk every reachable (family, depth) pair and fail on an empty draw

    Returns the depths at which each family was reached.
    """
    ctx = GenerationContext(rng=random.Random(0), config=config)
    pending = [(get_family(name), root_depth) for name in roots]
    seen = set()
    reached: Dict[str, List[int]] = {}

    while pending:
        family, depth = pending.pop()
        if (family, depth) in seen:
            continue
        seen.add((family, depth))
        reached.setdefault(family.family_name, []).append(depth)

        weights = family.variant_weights(ctx.at_depth(depth))
        if sum(weight for weight, _ in weights) <= 0:
            raise GrammarError(f"{family.family_name} has no selectable variant at depth {depth}")

        for weight, variant in weights:
            if weight <= 0:
                continue
            for f in variant.fields:
                if f.holds_node(variant):
                    pending.append((f.resolve(variant), depth + 1))

    for depths in reached.values():
        depths.sort()
    return reached
