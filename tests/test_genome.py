"""
Unit tests for Genome
"""
import math
import random

import pytest

from pattern_evolution.generation import GenerationContext
from pattern_evolution.genome import TREE_FAMILIES, Genome
from pattern_evolution.history import History, TransformDescriptor
from pattern_evolution.node import get_family


@pytest.fixture
def genome(ctx):
    return Genome.generate(ctx)


def test_generated_trees_match_their_families(genome):
    assert set(genome.trees) == set(TREE_FAMILIES)
    for name, family in TREE_FAMILIES.items():
        assert isinstance(genome.trees[name], get_family(family))
    assert genome.get_complexity() >= len(TREE_FAMILIES)


def test_json_round_trip(genome, tmp_path):
    genome.mutations = 3
    path = tmp_path / 'genome.json'
    genome.to_json(str(path))

    loaded = Genome.from_json(filename=str(path))
    assert loaded.to_dict() == genome.to_dict()
    assert Genome.from_json(genome.to_json()).mutations == 3


def test_missing_tree_rejected(genome):
    trees = dict(genome.trees)
    del trees['apply_scale']
    with pytest.raises(ValueError):
        Genome(trees)


def test_wrong_family_rejected(genome):
    trees = dict(genome.trees)
    trees['rotation'] = genome.trees['apply_offset']
    with pytest.raises(ValueError):
        Genome(trees)


def test_copy_is_independent(genome, small_config):
    clone = genome.copy()
    assert clone.to_dict() == genome.to_dict()

    clone.mutate(GenerationContext(rng=random.Random(3), config=small_config))
    assert clone.mutations == genome.mutations + 1


def test_transform_descriptor(genome):
    transform = genome.compute_transform(5, History(8, 8, 2))

    assert isinstance(transform, TransformDescriptor)
    assert -1.0 <= transform.rotation <= 1.0
    for point in (transform.translation, transform.offset, transform.from_scale, transform.to_scale):
        assert len(point) == 2
        assert all(-1.0 <= v <= 1.0 and math.isfinite(v) for v in point)
    assert isinstance(transform.apply_rotation, bool)


def test_str_lists_every_tree(genome):
    text = str(genome)
    for name in TREE_FAMILIES:
        assert f"  {name}:" in text
