"""
pattern_evolution/config.py - Run configuration with JSON loading and validation
"""
import json
import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class Config:
    # Grid and timing
    cell_array_width: int = 64
    cell_array_height: int = 64
    history_length: int = 2
    ticks_per_update: int = 8

    # Generation depth bounds
    min_leaf_depth: int = 1
    max_leaf_depth: int = 9
    min_pipe_depth: int = 0
    max_pipe_depth: int = 6
    min_branch_depth: int = 0
    max_branch_depth: int = 4

    # Mutation thresholds on the smoothed update statistics
    activity_value_lower_bound: float = 0.002
    alpha_value_lower_bound: float = 0.5
    local_similarity_upper_bound: float = 0.995
    global_similarity_upper_bound: float = 0.98

    seed: Optional[int] = None
    parallel: bool = False
    workers: int = 4

    image_path: Optional[str] = None
    image_preload_count: int = 4

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_json(cls, filename: str) -> 'Config':
        with open(filename, 'r') as f:
            data = json.load(f)
        logger.debug("Loaded config from %s", filename)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> 'Config':
        """Raise ValueError describing the first inconsistent setting"""
        if self.cell_array_width < 1 or self.cell_array_height < 1:
            raise ValueError("Cell array dimensions must be positive")
        if self.history_length < 1:
            raise ValueError("history_length must be at least 1")
        if not 1 <= self.ticks_per_update <= self.cell_array_height:
            raise ValueError("ticks_per_update must be between 1 and cell_array_height")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.image_preload_count < 1:
            raise ValueError("image_preload_count must be at least 1")

        for kind in ('leaf', 'pipe', 'branch'):
            lower = getattr(self, f'min_{kind}_depth')
            upper = getattr(self, f'max_{kind}_depth')
            if lower < 0 or upper < lower:
                raise ValueError(f"Invalid {kind} depth range [{lower}, {upper}]")

        if self.max_branch_depth > self.max_pipe_depth:
            raise ValueError("max_branch_depth must not exceed max_pipe_depth")
        if self.max_leaf_depth <= self.max_pipe_depth:
            raise ValueError("max_leaf_depth must exceed max_pipe_depth so every tree can terminate")
        if self.min_leaf_depth > min(self.min_pipe_depth, self.min_branch_depth) + 1:
            raise ValueError("min_leaf_depth leaves a gap where no variant can be chosen")
        if min(self.min_leaf_depth, self.min_pipe_depth, self.min_branch_depth) > 0:
            raise ValueError("Some variant category must be allowed at the root")

        # Every family must have a selectable variant at each depth it can be reached
        from .genome import TREE_FAMILIES
        from .node import check_grammar
        check_grammar(self, sorted(set(TREE_FAMILIES.values())))
        return self
