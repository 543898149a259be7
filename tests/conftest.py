import random

import pytest

from pattern_evolution.config import Config
from pattern_evolution.generation import GenerationContext
from pattern_evolution.history import History
from pattern_evolution.updatestate import CoordinateSet, UpdateState


@pytest.fixture
def small_config():
    """
    The 8x8 grid used throughout: 4 slices per frame, 2 history frames.
    """
    return Config(
        cell_array_width=8,
        cell_array_height=8,
        ticks_per_update=4,
        history_length=2,
        seed=42,
    )


@pytest.fixture
def ctx(small_config):
    return GenerationContext(rng=random.Random(1234), config=small_config)


@pytest.fixture
def history():
    return History(8, 8, 2)


@pytest.fixture
def make_state(history):
    def make(x=0.0, y=0.0, t=0.0):
        return UpdateState(CoordinateSet.from_floats(x, y, t), history)
    return make

