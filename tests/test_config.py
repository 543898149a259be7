"""
Unit tests for Config loading and validation
"""
import json

import pytest

from pattern_evolution.config import Config
from pattern_evolution.generation import GrammarError


def test_defaults_are_valid():
    config = Config().validate()
    assert config.cell_array_width == 64
    assert config.ticks_per_update == 8
    assert config.seed is None


@pytest.mark.parametrize('overrides', [
    {'cell_array_width': 0},
    {'history_length': 0},
    {'ticks_per_update': 0},
    {'ticks_per_update': 65},
    {'workers': 0},
    {'max_leaf_depth': 6},
    {'max_branch_depth': 7},
    {'min_pipe_depth': 3, 'max_pipe_depth': 2},
    {'min_leaf_depth': 3},
    {'min_leaf_depth': 1, 'min_pipe_depth': 1, 'min_branch_depth': 1},
    {'min_branch_depth': 1},
])
def test_inconsistent_settings_rejected(overrides):
    with pytest.raises(ValueError):
        Config(**overrides).validate()


def test_unknown_keys_rejected():
    with pytest.raises(ValueError):
        Config.from_dict({'cell_array_width': 8, 'colour_depth': 3})


def test_from_json(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps({'cell_array_width': 16, 'cell_array_height': 12, 'seed': 9}))

    config = Config.from_json(str(path))
    assert (config.cell_array_width, config.cell_array_height, config.seed) == (16, 12, 9)
    assert Config.from_dict(config.to_dict()) == config


def test_family_without_root_variant_rejected():
    """Points have no pipe variants, so with branches pushed down nothing is drawable at the root"""
    config = Config(cell_array_width=8, cell_array_height=8, ticks_per_update=4, min_branch_depth=1)
    with pytest.raises(GrammarError, match='PointNode'):
        config.validate()
