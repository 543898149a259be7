"""
Unit tests for depth-weighted generation
"""
import random
from collections import Counter

import pytest

from pattern_evolution.config import Config
from pattern_evolution.generation import (
    BRANCH, LEAF, PIPE, GenerationContext, GrammarError,
    branch_node_weight, leaf_node_weight, pipe_node_weight, weighted_choice,
)
from pattern_evolution.node import check_grammar, get_family
from pattern_evolution.nodes import ROOT_FAMILIES


def context(config, depth=0, seed=0):
    return GenerationContext(rng=random.Random(seed), config=config, depth=depth)


def test_weighted_choice_frequencies():
    rng = random.Random(3)
    choices = [(1.0, 'a'), (2.0, 'b'), (3.0, 'c'), (0.0, 'never')]
    counts = Counter(weighted_choice(rng, choices) for _ in range(100_000))

    assert counts['never'] == 0
    assert counts['a'] / 100_000 == pytest.approx(1 / 6, abs=0.01)
    assert counts['b'] / 100_000 == pytest.approx(2 / 6, abs=0.01)
    assert counts['c'] / 100_000 == pytest.approx(3 / 6, abs=0.01)


def test_weighted_choice_zero_total_fails():
    with pytest.raises(GrammarError):
        weighted_choice(random.Random(0), [(0.0, 'a'), (0.0, 'b')])
    with pytest.raises(GrammarError):
        weighted_choice(random.Random(0), [])


def test_category_weight_shapes():
    """Leaves get likelier with depth; pipes and branches fade out, branches first"""
    config = Config()
    leaf = [leaf_node_weight(context(config, d)) for d in range(12)]
    pipe = [pipe_node_weight(context(config, d)) for d in range(12)]
    branch = [branch_node_weight(context(config, d)) for d in range(12)]

    assert leaf[0] == 0.0
    assert leaf[1] > 0.0
    assert leaf[config.max_leaf_depth] == 1.0
    assert leaf[config.max_leaf_depth + 1] == 0.0
    assert leaf == sorted(leaf[:config.max_leaf_depth + 1]) + leaf[config.max_leaf_depth + 1:]

    assert pipe[0] == 1.0
    assert pipe[config.max_pipe_depth] > 0.0
    assert pipe[config.max_pipe_depth + 1] == 0.0

    assert branch[config.max_branch_depth] > 0.0
    assert branch[config.max_branch_depth + 1] == 0.0
    assert pipe[config.max_branch_depth + 1] > 0.0


def test_variant_frequencies_follow_weights():
    """Over many draws each variant shows up in proportion to its weight"""
    config = Config()
    ctx = context(config, depth=3, seed=11)
    family = get_family('UnitFloatNode')

    weights = family.variant_weights(ctx)
    total = sum(w for w, _ in weights)
    draws = 100_000
    counts = Counter(family.choose_variant(ctx) for _ in range(draws))

    for weight, variant in weights:
        if weight == 0:
            assert counts[variant] == 0
        else:
            assert counts[variant] / draws == pytest.approx(weight / total, abs=0.01)


def test_unselectable_variants_never_chosen():
    """Past the branch range, no branch variant is ever drawn"""
    config = Config()
    ctx = context(config, depth=config.max_branch_depth + 1, seed=2)
    family = get_family('FloatColorNode')
    for _ in range(2000):
        assert family.choose_variant(ctx).category != BRANCH


def test_grammar_is_satisfiable_with_defaults():
    reached = check_grammar(Config(), ROOT_FAMILIES)
    assert 'NoiseNode' in reached
    assert 'CoordMapNode' in reached
    assert min(reached['NoiseNode']) >= 1


def test_grammar_check_catches_dead_ends():
    """Leaves cut off before pipes end leaves nothing to draw at the bottom"""
    broken = Config(max_leaf_depth=2)
    with pytest.raises(GrammarError):
        check_grammar(broken, ROOT_FAMILIES)


@pytest.mark.parametrize('family_name', ROOT_FAMILIES)
def test_generated_trees_respect_depth_bounds(family_name):
    config = Config()
    family = get_family(family_name)
    bounds = {
        LEAF: (config.min_leaf_depth, config.max_leaf_depth),
        PIPE: (config.min_pipe_depth, config.max_pipe_depth),
        BRANCH: (config.min_branch_depth, config.max_branch_depth),
    }

    for seed in range(60):
        tree = family.generate(context(config, seed=seed))
        for depth, node in tree.iter_with_depth():
            lower, upper = bounds[node.category]
            assert lower <= depth <= upper, f"{type(node).__name__} at depth {depth}"


def test_generation_is_deterministic_for_a_seed():
    config = Config()
    family = get_family('FloatColorNode')
    first = family.generate(context(config, seed=99)).to_dict()
    second = family.generate(context(config, seed=99)).to_dict()
    assert first == second


def test_unknown_family():
    with pytest.raises(GrammarError):
        get_family('NoSuchNode')
