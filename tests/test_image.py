"""
Unit tests for image leaves and the image generator
"""
import logging
import random

import numpy as np
import pytest
from PIL import Image as PILImage

from pattern_evolution.colors import ByteColor
from pattern_evolution.datatypes import SignedFloat
from pattern_evolution.generation import GenerationContext
from pattern_evolution.image import Image, ImageGenerator, load_image
from pattern_evolution.preloader import Generator, Preloader


def write_png(path, width, height, color):
    PILImage.new('RGB', (width, height), color).save(path)
    return str(path)


def test_default_image_has_requested_size():
    image = Image.default(8, 4)
    assert (image.width, image.height) == (8, 4)
    assert image.frames[0].shape == (4, 8, 3)


def test_pixel_lookups_wrap():
    frame = np.zeros((2, 2, 3), dtype=np.uint8)
    frame[1, 0] = (10, 20, 30)
    image = Image([frame])

    assert image.get_pixel(0, 1, 0) == ByteColor(10, 20, 30, 255)
    assert image.get_pixel(2, 3, 5) == ByteColor(10, 20, 30, 255)
    assert image.get_pixel_normalised(SignedFloat(-1.0), SignedFloat(0.0), 0.0) == ByteColor(10, 20, 30, 255)


def test_mismatched_frames_rejected():
    with pytest.raises(ValueError):
        Image([np.zeros((2, 2, 3), dtype=np.uint8), np.zeros((3, 2, 3), dtype=np.uint8)])
    with pytest.raises(ValueError):
        Image([])


def test_load_image_resizes(tmp_path):
    path = write_png(tmp_path / 'wide.png', 32, 16, (200, 100, 50))
    image = load_image(path, 8, 8)

    assert image.frames[0].shape == (8, 8, 3)
    assert image.source == path
    assert image.get_pixel(4, 4, 0) == ByteColor(200, 100, 50, 255)


def test_generator_loads_directory(tmp_path):
    write_png(tmp_path / 'a.png', 16, 16, (0, 255, 0))
    generator = ImageGenerator(str(tmp_path), 8, 8, seed=1)
    image = generator.generate()
    assert image.get_pixel(0, 0, 0) == ByteColor(0, 255, 0, 255)


def test_generator_falls_back_on_empty_directory(tmp_path):
    image = ImageGenerator(str(tmp_path), 8, 8).generate()
    assert image.source is None
    assert (image.width, image.height) == (8, 8)


def test_generator_falls_back_on_corrupt_file(tmp_path, caplog):
    (tmp_path / 'broken.png').write_bytes(b'not really a png')
    generator = ImageGenerator(str(tmp_path), 8, 8, seed=0)

    with caplog.at_level(logging.ERROR, logger='pattern_evolution.image'):
        image = generator.generate()

    assert image.source is None
    assert 'broken.png' in caplog.text


def test_image_leaf_draws_from_preloader(tmp_path, small_config):
    write_png(tmp_path / 'b.png', 8, 8, (1, 2, 3))
    with Preloader(2, ImageGenerator(str(tmp_path), 8, 8)) as preloader:
        ctx = GenerationContext(rng=random.Random(0), config=small_config, images=preloader)
        image = Image.generate(ctx)
    assert image.source.endswith('b.png')


def test_image_json_reloads_source(tmp_path):
    path = write_png(tmp_path / 'c.png', 8, 8, (9, 9, 9))
    data = load_image(path, 4, 4).to_json()
    reloaded = Image.from_json(data)
    assert reloaded.source == path
    assert reloaded.frames[0].shape == (4, 4, 3)

    data['source'] = str(tmp_path / 'missing.png')
    assert Image.from_json(data).source is None


class ExhaustedGenerator(Generator):
    def generate(self):
        raise MemoryError("image too large")


def test_image_leaf_survives_dead_preloader(small_config, caplog):
    """A crashed worker degrades to the default image instead of stopping the run"""
    with Preloader(1, ExhaustedGenerator()) as preloader:
        ctx = GenerationContext(rng=random.Random(0), config=small_config, images=preloader)
        with caplog.at_level(logging.ERROR, logger='pattern_evolution.image'):
            image = Image.generate(ctx)

    assert image.source is None
    assert (image.width, image.height) == (8, 8)
    assert 'default image' in caplog.text


def test_generator_falls_back_on_unexpected_errors(tmp_path, monkeypatch):
    write_png(tmp_path / 'huge.png', 8, 8, (0, 0, 0))

    def exhausted(filename, width, height):
        raise MemoryError("image too large")

    monkeypatch.setattr('pattern_evolution.image.load_image', exhausted)
    image = ImageGenerator(str(tmp_path), 8, 8, seed=0).generate()
    assert image.source is None
