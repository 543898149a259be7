"""
pattern_evolution/generation.py - Depth-weighted random generation primitives
"""
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence, Tuple, TypeVar

T = TypeVar('T')

LEAF = 'leaf'
PIPE = 'pipe'
BRANCH = 'branch'


class GrammarError(ValueError):
    """Raised when a node family has no selectable variant at some depth"""


@dataclass(frozen=True)
class GenerationContext:
    """Everything a generate/mutate call needs, threaded down the tree"""
    rng: random.Random
    config: Any
    depth: int = 0
    images: Any = None
    reroll_override: Optional[float] = None

    def deeper(self) -> 'GenerationContext':
        return replace(self, depth=self.depth + 1)

    def at_depth(self, depth: int) -> 'GenerationContext':
        return replace(self, depth=depth)

    @property
    def image_size(self) -> Tuple[int, int]:
        return self.config.cell_array_width, self.config.cell_array_height


class Generatable(ABC):
    """Interface pair shared by node families and value types"""

    @classmethod
    @abstractmethod
    def generate(cls, ctx: GenerationContext):
        """Build a fresh random instance at ctx.depth"""
        pass

    @abstractmethod
    def mutate(self, ctx: GenerationContext):
        """Return the replacement for this value after one mutation step"""
        pass


def _rising(depth: int, lower: int, upper: int) -> float:
    if depth < lower or depth > upper:
        return 0.0
    return (depth - lower + 1) / (upper - lower + 1)


def _falling(depth: int, lower: int, upper: int) -> float:
    if depth < lower or depth > upper:
        return 0.0
    return 1.0 - (depth - lower) / (upper - lower + 1)


def leaf_node_weight(ctx: GenerationContext) -> float:
    config = ctx.config
    return _rising(ctx.depth, config.min_leaf_depth, config.max_leaf_depth)


def pipe_node_weight(ctx: GenerationContext) -> float:
    config = ctx.config
    return _falling(ctx.depth, config.min_pipe_depth, config.max_pipe_depth)


def branch_node_weight(ctx: GenerationContext) -> float:
    config = ctx.config
    return _falling(ctx.depth, config.min_branch_depth, config.max_branch_depth)


CATEGORY_WEIGHTS = {
    LEAF: leaf_node_weight,
    PIPE: pipe_node_weight,
    BRANCH: branch_node_weight,
}


def weighted_choice(rng: random.Random, choices: Sequence[Tuple[float, T]]) -> T:
    """Pick one item from (weight, item) pairs with probability proportional to weight"""
    total = 0.0
    for weight, _ in choices:
        if weight < 0:
            raise GrammarError(f"Negative weight {weight} in weighted draw")
        total += weight

    if total <= 0:
        raise GrammarError("Weighted draw over zero total weight")

    roll = rng.random() * total
    cumulative = 0.0
    chosen = None
    for weight, item in choices:
        if weight <= 0:
            continue
        cumulative += weight
        chosen = item
        if roll < cumulative:
            return item

    # Float rounding can leave roll just past the last boundary
    return chosen
