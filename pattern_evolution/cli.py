"""
pattern_evolution/cli.py - Command-line interface
"""
import logging
import os
import random
import time
from typing import Optional

import click

from .archive import FrameArchive
from .config import Config
from .driver import Driver
from .generation import GenerationContext
from .genome import Genome
from .image import ImageGenerator
from .preloader import Preloader

LOG_FORMAT = '[%(asctime)s][%(name)s][%(levelname)s] %(message)s'


def setup_logging(verbose: bool, out_dir: Optional[str] = None):
    """Console logging for everything, plus a file for image decode failures"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    if out_dir:
        handler = logging.FileHandler(os.path.join(out_dir, 'image_errors.log'))
        handler.setLevel(logging.ERROR)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger('pattern_evolution.image').addHandler(handler)


def build_config(config_path: Optional[str], **overrides) -> Config:
    """Load the config file if given, then apply every option that was set"""
    config = Config.from_json(config_path) if config_path else Config()
    for name, value in overrides.items():
        if value is not None:
            setattr(config, name, value)
    return config.validate()


@click.group()
def cli():
    """Pattern Evolution - Self-mutating expression trees rendered frame by frame"""
    pass


@cli.command()
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON config file')
@click.option('--seed', '-s', type=int, help='RNG seed (random if omitted)')
@click.option('--width', type=int, help='Cell array width')
@click.option('--height', type=int, help='Cell array height')
@click.option('--ticks-per-update', type=int, help='Slices per frame')
@click.option('--history-length', type=int, help='Frames kept in the history ring')
@click.option('--cycles', '-n', default=10, type=click.IntRange(min=1), help='Number of frames to produce')
@click.option('--out', '-o', default='out/', help='Output directory')
@click.option('--images', type=click.Path(exists=True, file_okay=False),
              help='Directory of images for image leaves')
@click.option('--parallel/--no-parallel', default=None, help='Evaluate slice rows on a thread pool')
@click.option('--workers', type=int, help='Thread pool size')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def run(config_path, seed, width, height, ticks_per_update, history_length, cycles, out,
        images, parallel, workers, verbose):
    """Run the pattern and write every finished frame"""
    os.makedirs(out, exist_ok=True)
    setup_logging(verbose, out)

    try:
        config = build_config(
            config_path,
            seed=seed,
            cell_array_width=width,
            cell_array_height=height,
            ticks_per_update=ticks_per_update,
            history_length=history_length,
            image_path=images,
            parallel=parallel,
            workers=workers,
        )
    except (OSError, ValueError) as e:
        click.echo(f"Error loading config: {e}")
        return

    # One seed drives both image picks and the pattern, so last_seed.txt replays both
    if config.seed is None:
        config.seed = random.SystemRandom().randrange(2 ** 32)

    archive = FrameArchive(out)
    preloader = None
    if config.image_path:
        generator = ImageGenerator(config.image_path, config.cell_array_width,
                                   config.cell_array_height, seed=config.seed)
        preloader = Preloader(config.image_preload_count, generator, name='image-preloader')

    start_time = time.time()
    try:
        with Driver(config, images=preloader) as driver:
            archive.write_seed(driver.seed)
            click.echo(f"Seed: {driver.seed}, output: {out}")

            for frame in driver.run(cycles):
                archive.record(frame, driver.genome)
                if verbose or frame.t % 10 == 0 or frame.mutated:
                    click.echo(f"Frame {frame.t:4d}: activity={frame.stats.activity_value:.4f} "
                               f"alpha={frame.stats.alpha_value:.3f} "
                               f"local={frame.stats.local_similarity_value:.3f} "
                               f"global={frame.stats.global_similarity_value:.3f}"
                               f"{' mutated ' + ','.join(frame.mutated) if frame.mutated else ''}")
    finally:
        if preloader is not None:
            preloader.close()

    total_time = time.time() - start_time
    click.echo(f"\n{cycles} frames in {total_time:.1f}s")


@cli.command()
@click.option('--seed', '-s', default=0, help='RNG seed')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON config file (depth bounds)')
@click.option('--out', '-o', help='Write the genome JSON here instead of stdout')
def tree(seed, config_path, out):
    """Generate a random genome and print it as JSON"""
    try:
        config = build_config(config_path, seed=seed)
    except (OSError, ValueError) as e:
        click.echo(f"Error loading config: {e}")
        return

    ctx = GenerationContext(rng=random.Random(seed), config=config)
    genome = Genome.generate(ctx)
    json_str = genome.to_json(out)
    if out:
        click.echo(f"Genome saved: {out}")
    else:
        click.echo(json_str)


@cli.command()
@click.option('--genome', '-g', 'genome_path', required=True, help='Path to genome JSON file')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='JSON config file')
@click.option('--seed', '-s', default=0, help='RNG seed for neighbour sampling and mutation')
@click.option('--cycles', '-n', default=1, type=click.IntRange(min=1), help='Frames to render; the last one is saved')
@click.option('--mutate/--no-mutate', default=False, help='Let the genome keep evolving')
@click.option('--out', '-o', help='Output filename (optional)')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def render(genome_path, config_path, seed, cycles, mutate, out, verbose):
    """Render a genome from JSON file"""
    setup_logging(verbose)

    try:
        genome = Genome.from_json(filename=genome_path)
        click.echo(f"Loaded genome: {genome_path}")
        if verbose:
            click.echo(str(genome))
    except (OSError, ValueError, KeyError) as e:
        click.echo(f"Error loading genome: {e}")
        return

    try:
        config = build_config(config_path, seed=seed)
    except (OSError, ValueError) as e:
        click.echo(f"Error loading config: {e}")
        return

    if not out:
        base_name = os.path.splitext(os.path.basename(genome_path))[0]
        out = f"{base_name}_t{cycles - 1:04d}.png"

    with Driver(config, genome=genome) as driver:
        driver.mutation_enabled = mutate
        frame = None
        for frame in driver.run(cycles):
            pass
        frame.to_image().save(out)

    click.echo(f"Image saved: {out}")


if __name__ == '__main__':
    cli()
