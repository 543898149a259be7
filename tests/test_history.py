"""
Unit tests for CoordinateSet and the History ring
"""
import dataclasses

import numpy as np
import pytest

from pattern_evolution.colors import ByteColor
from pattern_evolution.datatypes import SignedFloat, UnitFloat
from pattern_evolution.history import History, HistoryStep
from pattern_evolution.updatestate import CoordinateSet


def test_shifted_returns_new_coordinates():
    original = CoordinateSet.from_floats(0.9, -0.5, 3.0)
    moved = original.shifted(SignedFloat(0.2), SignedFloat(0.0), 1.0)

    assert original.x.value == 0.9
    assert moved.x.value == pytest.approx(-0.9)
    assert moved.y.value == -0.5
    assert moved.t == 4.0


def test_scaled():
    coords = CoordinateSet.from_floats(-0.8, 0.4, 0.0).scaled(UnitFloat(0.5), UnitFloat(0.25))
    assert coords.x.value == pytest.approx(-0.4)
    assert coords.y.value == pytest.approx(0.1)


def test_coordinates_are_frozen():
    coords = CoordinateSet.from_floats(0.0, 0.0, 0.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        coords.t = 1.0


@pytest.mark.parametrize('t,expected', [(0.0, 0), (300.7, 44), (-1.0, 255), (255.99, 255)])
def test_byte_t_wraps(t, expected):
    coords = CoordinateSet.from_floats(0.0, 0.0, t)
    assert coords.get_byte_t().value == expected
    assert coords.get_unit_t().value == pytest.approx(expected / 255.0)


def test_new_history_is_black_and_opaque(history):
    assert len(history) == 2
    for step in history.steps:
        assert (step.cell_array[..., :3] == 0).all()
        assert (step.cell_array[..., 3] == 255).all()


def test_lookups_wrap_in_every_dimension(history):
    history[0].cell_array[0, 0] = (1, 2, 3, 4)

    expected = ByteColor(1, 2, 3, 4)
    assert history.get(0, 0, 0) == expected
    assert history.get(8, 8, 2) == expected
    assert history.get(-8, 16, -2) == expected
    assert history.get(0, 0, 1) != expected


def test_normalised_lookup(history):
    history[1].cell_array[7, 7] = (9, 9, 9, 255)
    history[1].cell_array[0, 0] = (5, 5, 5, 255)

    almost_one = SignedFloat(0.99)
    assert history.get_normalised(almost_one, almost_one, 1.5) == ByteColor(9, 9, 9, 255)
    assert history.get_normalised(SignedFloat(-1.0), SignedFloat(-1.0), 1.0) == ByteColor(5, 5, 5, 255)
    # x == 1.0 lands one past the edge and wraps to column 0
    assert history.get_normalised(SignedFloat(1.0), SignedFloat(1.0), 1.0) == ByteColor(5, 5, 5, 255)


def test_swap_returns_previous_step(history):
    replacement = HistoryStep(8, 8)
    original = history[1]

    returned = history.swap(3, replacement)

    assert returned is original
    assert history[1] is replacement


def test_step_image_cache():
    step = HistoryStep(4, 2)
    image = step.to_image()
    assert image.size == (4, 2)
    assert step.to_image() is image

    step.cell_array[0, 0] = (255, 0, 0, 255)
    step.invalidate()
    refreshed = step.to_image()
    assert refreshed is not image
    assert refreshed.getpixel((0, 0)) == (255, 0, 0, 255)


def test_history_length_must_be_positive():
    with pytest.raises(ValueError):
        History(4, 4, 0)


def test_transform_descriptor_dict():
    step = HistoryStep(2, 2)
    data = step.transform.to_dict()
    assert data['rotation'] == 0.0
    assert data['apply_scale'] is False
    assert isinstance(step.cell_array, np.ndarray)
