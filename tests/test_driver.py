"""
Unit tests for the slice-by-slice Driver
"""
from collections import Counter
from dataclasses import replace

import numpy as np
import pytest

from pattern_evolution.color_nodes import FloatColorNode
from pattern_evolution.colors import FloatColor
from pattern_evolution.config import Config
from pattern_evolution.driver import Driver, UpdateStat


class RecordingRoot(FloatColorNode):
    """Paints everything red and remembers which pixels it was asked for"""

    def __init__(self, width, height):
        super().__init__()
        self.width = width
        self.height = height
        self.visits = Counter()

    def compute(self, state):
        cs = state.coordinate_set
        px = round((cs.x.value + 1.0) * self.width / 2)
        py = round((cs.y.value + 1.0) * self.height / 2)
        self.visits[(px, py)] += 1
        return FloatColor(1.0, 0.0, 0.0, 1.0)

    def mutate(self, ctx):
        return self


@pytest.fixture
def recording_driver(small_config):
    driver = Driver(small_config)
    root = RecordingRoot(small_config.cell_array_width, small_config.cell_array_height)
    driver.genome.trees['root'] = root
    yield driver, root
    driver.close()


def test_one_cycle_visits_every_pixel_once(recording_driver):
    driver, root = recording_driver

    outputs = [driver.tick() for _ in range(4)]

    assert outputs[:3] == [None, None, None]
    frame = outputs[3]
    assert frame.t == 0
    assert frame.slot == 0
    assert len(root.visits) == 64
    assert set(root.visits.values()) == {1}

    assert (driver.history[0].cell_array[..., :3] == (255, 0, 0)).all()
    assert (driver.history[1].cell_array[..., :3] == 0).all()
    assert (frame.pixels == driver.history[0].cell_array).all()


def test_cycles_advance_through_history_slots(recording_driver):
    driver, _ = recording_driver
    frames = list(driver.run(3))
    assert [frame.t for frame in frames] == [0, 1, 2]
    assert [frame.slot for frame in frames] == [0, 1, 0]
    assert driver.tick_count == 12


def test_first_cycle_statistics(recording_driver):
    """Red over a black history: a third of full activity, then smoothed by half"""
    driver, _ = recording_driver
    frame = list(driver.run(1))[0]

    assert frame.stats.activity_value == pytest.approx(1 / 6)
    assert frame.stats.alpha_value == pytest.approx(255 / 256 / 2)
    assert 0.0 <= frame.stats.local_similarity_value <= 1.0


def test_slices_cover_all_rows():
    driver = Driver(Config(cell_array_width=4, cell_array_height=10, ticks_per_update=4, seed=1))
    assert [driver.slice_rows(i) for i in range(4)] == [(0, 2), (2, 4), (4, 6), (6, 10)]


def test_dirty_tree_mutates_on_first_cycle(small_config):
    quiet = replace(
        small_config,
        activity_value_lower_bound=-1.0,
        alpha_value_lower_bound=-1.0,
        local_similarity_upper_bound=2.0,
        global_similarity_upper_bound=2.0,
    )
    with Driver(quiet) as driver:
        first, second = list(driver.run(2))
        assert first.mutated[0] == 'root'
        assert second.mutated == []

        driver.request_mutation()
        third = list(driver.run(1))[0]
        assert third.mutated[0] == 'root'


def test_mutation_can_be_disabled(small_config):
    with Driver(small_config) as driver:
        driver.mutation_enabled = False
        before = driver.genome.to_dict()
        frames = list(driver.run(2))
        assert all(frame.mutated == [] for frame in frames)
        assert driver.genome.to_dict() == before


def test_should_mutate_thresholds(small_config):
    with Driver(small_config) as driver:
        driver.average_update_stat = UpdateStat(1.0, 1.0, 0.0, 0.0)
        assert not driver.should_mutate()
        driver.average_update_stat = UpdateStat(0.0, 1.0, 0.0, 0.0)
        assert driver.should_mutate()
        driver.average_update_stat = UpdateStat(1.0, 1.0, 0.0, 0.98)
        assert driver.should_mutate()


def test_same_seed_same_frames(small_config):
    config = replace(small_config, seed=7)
    with Driver(config) as a, Driver(config) as b:
        frames_a = list(a.run(3))
        frames_b = list(b.run(3))
        for fa, fb in zip(frames_a, frames_b):
            assert np.array_equal(fa.pixels, fb.pixels)
            assert fa.mutated == fb.mutated
        assert a.genome.to_dict() == b.genome.to_dict()


def test_parallel_rows_match_sequential(small_config):
    sequential = replace(small_config, seed=5)
    parallel = replace(sequential, parallel=True, workers=3)
    with Driver(sequential) as a, Driver(parallel) as b:
        assert b._pool is not None
        frame_a = list(a.run(1))[0]
        frame_b = list(b.run(1))[0]
        assert np.array_equal(frame_a.pixels, frame_b.pixels)


def test_frame_renders(small_config):
    with Driver(small_config) as driver:
        frame = list(driver.run(1))[0]
        image = frame.to_image()
        assert image.size == (8, 8)
        assert image.mode == 'RGBA'
        assert isinstance(frame.transform.rotation, float)


def test_update_stat_arithmetic():
    total = UpdateStat(1.0, 2.0, 3.0, 4.0) + UpdateStat(1.0, 0.0, 1.0, 0.0)
    assert total == UpdateStat(2.0, 2.0, 4.0, 4.0)
    assert total / 2 == UpdateStat(1.0, 1.0, 2.0, 2.0)
