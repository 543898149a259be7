"""
Unit tests for the background Preloader
"""
import itertools
import threading
import time

import pytest

from pattern_evolution.preloader import Generator, Preloader


class CountingGenerator(Generator):
    def __init__(self):
        self.counter = itertools.count()

    def generate(self):
        return next(self.counter)


class GatedGenerator(Generator):
    """Blocks until the gate opens"""

    def __init__(self):
        self.gate = threading.Event()

    def generate(self):
        self.gate.wait(5.0)
        return 'ready'


class FailingGenerator(Generator):
    def generate(self):
        raise RuntimeError("boom")


def test_items_arrive_in_order():
    with Preloader(2, CountingGenerator()) as preloader:
        assert [preloader.get_next() for _ in range(5)] == [0, 1, 2, 3, 4]


def test_try_get_next_does_not_block():
    generator = GatedGenerator()
    preloader = Preloader(1, generator)
    try:
        assert preloader.try_get_next() is None
        generator.gate.set()
        assert preloader.get_next() == 'ready'
    finally:
        generator.gate.set()
        preloader.close()


def test_close_with_full_queue_is_prompt():
    """A worker blocked on a full queue still shuts down quickly"""
    preloader = Preloader(1, CountingGenerator())
    time.sleep(0.2)

    started = time.monotonic()
    preloader.close()

    assert time.monotonic() - started < 2.0
    assert not preloader.running


def test_close_is_idempotent():
    preloader = Preloader(1, CountingGenerator())
    preloader.close()
    preloader.close()
    assert not preloader.running


def test_dead_worker_raises_instead_of_hanging(caplog):
    preloader = Preloader(2, FailingGenerator())
    with pytest.raises(RuntimeError):
        preloader.get_next()
    preloader.close()
    assert "stopping worker" in caplog.text


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        Preloader(0, CountingGenerator())
