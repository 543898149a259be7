"""
Unit tests for the command-line interface and the frame archive
"""
import json
import os

import pytest
from click.testing import CliRunner

from pattern_evolution.archive import FrameArchive
from pattern_evolution.cli import cli
from pattern_evolution.driver import Driver
from pattern_evolution.image import ImageGenerator


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'small.json'
    path.write_text(json.dumps({'cell_array_width': 8, 'cell_array_height': 8, 'ticks_per_update': 4}))
    return str(path)


def test_tree_prints_genome_json():
    result = CliRunner().invoke(cli, ['tree', '--seed', '1'])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert 'root' in data['trees']


def test_run_writes_frames(tmp_path):
    out = tmp_path / 'out'
    result = CliRunner().invoke(cli, [
        'run', '--seed', '1', '--width', '8', '--height', '8', '--ticks-per-update', '4',
        '--cycles', '2', '--out', str(out),
    ])
    assert result.exit_code == 0, result.output
    assert (out / 'last_seed.txt').read_text().strip() == '1'
    assert sorted(os.listdir(out / 'frames')) == ['frame_000000.png', 'frame_000001.png']
    log = json.loads((out / 'logs' / 'run_log.json').read_text())
    assert [entry['t'] for entry in log] == [0, 1]
    assert 'genome' in log[0]


def test_run_reports_bad_config(tmp_path):
    result = CliRunner().invoke(cli, [
        'run', '--ticks-per-update', '0', '--out', str(tmp_path / 'out'),
    ])
    assert result.exit_code == 0
    assert 'Error loading config' in result.output


def test_render_saved_genome(tmp_path, config_file):
    runner = CliRunner()
    genome_path = str(tmp_path / 'genome.json')
    image_path = str(tmp_path / 'frame.png')

    assert runner.invoke(cli, ['tree', '--seed', '4', '-c', config_file, '-o', genome_path]).exit_code == 0
    result = runner.invoke(cli, ['render', '-g', genome_path, '-c', config_file, '-n', '2', '-o', image_path])

    assert result.exit_code == 0, result.output
    assert os.path.exists(image_path)


def test_render_missing_genome(tmp_path):
    result = CliRunner().invoke(cli, ['render', '-g', str(tmp_path / 'nope.json')])
    assert 'Error loading genome' in result.output


def test_archive_load_genome(tmp_path, small_config):
    archive = FrameArchive(str(tmp_path))
    with Driver(small_config) as driver:
        frame = list(driver.run(1))[0]
        archive.record(frame, driver.genome)

        name = f"genome_{frame.t:06d}.json"
        assert archive.load_genome(name).to_dict() == driver.genome.to_dict()

    assert archive.load_genome('missing.json') is None
    assert len(archive.list_frames()) == 1


def test_unseeded_run_shares_its_seed_with_image_picks(tmp_path, monkeypatch):
    """The recorded seed must reproduce the image choices as well as the pattern"""
    seeds = []

    class RecordingImageGenerator(ImageGenerator):
        def __init__(self, path, width, height, seed=None):
            seeds.append(seed)
            super().__init__(path, width, height, seed=seed)

    monkeypatch.setattr('pattern_evolution.cli.ImageGenerator', RecordingImageGenerator)
    images = tmp_path / 'images'
    images.mkdir()
    out = tmp_path / 'out'

    result = CliRunner().invoke(cli, [
        'run', '--width', '8', '--height', '8', '--ticks-per-update', '4', '--cycles', '1',
        '--images', str(images), '--out', str(out),
    ])

    assert result.exit_code == 0, result.output
    assert seeds[0] is not None
    assert seeds == [int((out / 'last_seed.txt').read_text())]
