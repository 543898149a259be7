"""
pattern_evolution/genome.py - Root color tree plus the trees driving frame transforms
"""
import json
import logging
from typing import Any, Dict, List, Tuple

from .generation import GenerationContext
from .history import History, TransformDescriptor
from .node import Node, get_family, node_from_dict
from .updatestate import CoordinateSet, UpdateState

logger = logging.getLogger(__name__)

TREE_FAMILIES = {
    'root': 'FloatColorNode',
    'rotation': 'SignedFloatNode',
    'translation': 'PointNode',
    'offset': 'PointNode',
    'from_scale': 'PointNode',
    'to_scale': 'PointNode',
    'apply_rotation': 'BooleanNode',
    'apply_translation': 'BooleanNode',
    'apply_offset': 'BooleanNode',
    'apply_scale': 'BooleanNode',
}
SECONDARY_TREES = tuple(name for name in TREE_FAMILIES if name != 'root')


class Genome:
    """Represents one evolving pattern as a collection of expression trees"""

    def __init__(self, trees: Dict[str, Node]):
        missing = set(TREE_FAMILIES) - set(trees)
        if missing:
            raise ValueError(f"Genome is missing trees: {', '.join(sorted(missing))}")
        for name, family in TREE_FAMILIES.items():
            if not isinstance(trees[name], get_family(family)):
                raise ValueError(f"Tree {name} must be a {family}, got {type(trees[name]).__name__}")
        self.trees = {name: trees[name] for name in TREE_FAMILIES}
        self.mutations = 0

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'Genome':
        root_ctx = ctx.at_depth(0)
        return cls({name: get_family(family).generate(root_ctx) for name, family in TREE_FAMILIES.items()})

    @property
    def root(self) -> Node:
        return self.trees['root']

    def mutate(self, ctx: GenerationContext) -> List[str]:
        """Mutate the root and one randomly chosen secondary tree"""
        root_ctx = ctx.at_depth(0)
        secondary = ctx.rng.choice(SECONDARY_TREES)
        for name in ('root', secondary):
            self.trees[name] = self.trees[name].mutate(root_ctx)
        self.mutations += 1
        logger.debug("Mutation %d touched root and %s", self.mutations, secondary)
        return ['root', secondary]

    def compute_transform(self, t: float, history: History) -> TransformDescriptor:
        """Evaluate the secondary trees at the origin"""
        state = UpdateState(CoordinateSet.from_floats(0.0, 0.0, t), history)
        values = {name: self.trees[name].compute(state) for name in SECONDARY_TREES}

        def point(name: str) -> Tuple[float, float]:
            return values[name].x.value, values[name].y.value

        return TransformDescriptor(
            rotation=values['rotation'].value,
            translation=point('translation'),
            offset=point('offset'),
            from_scale=point('from_scale'),
            to_scale=point('to_scale'),
            apply_rotation=values['apply_rotation'].value,
            apply_translation=values['apply_translation'].value,
            apply_offset=values['apply_offset'].value,
            apply_scale=values['apply_scale'].value,
        )

    def get_complexity(self) -> int:
        """Get total complexity (number of nodes) across all trees"""
        return sum(len(tree.get_all_nodes()) for tree in self.trees.values())

    def get_depth(self) -> int:
        """Get maximum depth across all trees"""
        return max(tree.get_depth() for tree in self.trees.values())

    def copy(self) -> 'Genome':
        genome = Genome({name: tree.copy() for name, tree in self.trees.items()})
        genome.mutations = self.mutations
        return genome

    def to_dict(self) -> Dict[str, Any]:
        return {
            'trees': {name: tree.to_dict() for name, tree in self.trees.items()},
            'mutations': self.mutations,
            'complexity': self.get_complexity(),
            'depth': self.get_depth(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Genome':
        genome = cls({name: node_from_dict(tree) for name, tree in data['trees'].items()})
        genome.mutations = data.get('mutations', 0)
        return genome

    def to_json(self, filename: str = None) -> str:
        """Serialize to JSON string or file"""
        json_str = json.dumps(self.to_dict(), indent=2)
        if filename:
            with open(filename, 'w') as f:
                f.write(json_str)
        return json_str

    @classmethod
    def from_json(cls, json_data: str = None, filename: str = None) -> 'Genome':
        """Deserialize from JSON string or file"""
        if filename:
            with open(filename, 'r') as f:
                json_data = f.read()
        return cls.from_dict(json.loads(json_data))

    def __str__(self) -> str:
        lines = [f"Genome: complexity {self.get_complexity()}, depth {self.get_depth()}, "
                 f"mutations {self.mutations}"]
        for name, tree in self.trees.items():
            text = str(tree)
            lines.append(f"  {name}: {text[:100]}{'...' if len(text) > 100 else ''}")
        return '\n'.join(lines)
