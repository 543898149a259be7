"""
pattern_evolution/driver.py - Slice-by-slice frame updates and mutation triggering
"""
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import numpy as np
from PIL import Image as PILImage

from .config import Config
from .datatypes import SignedFloat
from .generation import GenerationContext
from .genome import Genome
from .history import History, HistoryStep, TransformDescriptor
from .preloader import Preloader
from .updatestate import CoordinateSet, UpdateState

logger = logging.getLogger(__name__)


@dataclass
class UpdateStat:
    """Per-pixel statistics, already divided by the cell count, summed over pixels"""
    activity_value: float = 0.0
    alpha_value: float = 0.0
    local_similarity_value: float = 0.0
    global_similarity_value: float = 0.0

    def __add__(self, other: 'UpdateStat') -> 'UpdateStat':
        return UpdateStat(
            self.activity_value + other.activity_value,
            self.alpha_value + other.alpha_value,
            self.local_similarity_value + other.local_similarity_value,
            self.global_similarity_value + other.global_similarity_value,
        )

    def __truediv__(self, divisor: float) -> 'UpdateStat':
        return UpdateStat(
            self.activity_value / divisor,
            self.alpha_value / divisor,
            self.local_similarity_value / divisor,
            self.global_similarity_value / divisor,
        )


@dataclass
class FrameOutput:
    """A completed frame handed to the presentation layer"""
    t: int
    slot: int
    pixels: np.ndarray
    transform: TransformDescriptor
    stats: UpdateStat
    mutated: List[str] = field(default_factory=list)

    def to_image(self) -> PILImage.Image:
        return PILImage.fromarray(self.pixels, 'RGBA')


def _similarity(a: np.ndarray, b: np.ndarray) -> float:
    difference = np.abs(a[:3].astype(np.int32) - b[:3].astype(np.int32))
    return 1.0 - float(difference.mean()) / 255.0


class Driver:
    """Owns the genome and the history ring and advances them one tick at a time"""

    def __init__(self, config: Config, images: Optional[Preloader] = None,
                 genome: Optional[Genome] = None):
        self.config = config.validate()
        self.seed = config.seed if config.seed is not None else random.SystemRandom().randrange(2 ** 32)
        self.rng = random.Random(self.seed)
        self.images = images

        self.width = config.cell_array_width
        self.height = config.cell_array_height
        self.total_cells = self.width * self.height
        self.history = History(self.width, self.height, config.history_length)
        self.next_step = HistoryStep(self.width, self.height)

        self.tick_count = 0
        self.current_t = 0
        self.rolling_update_stat_total = UpdateStat()
        self.average_update_stat = UpdateStat()
        self.tree_dirty = True
        self.mutation_enabled = True

        self._xs = [SignedFloat(x / self.width * 2.0 - 1.0) for x in range(self.width)]
        self._ys = [SignedFloat(y / self.height * 2.0 - 1.0) for y in range(self.height)]

        self._pool = None
        if config.parallel and config.workers > 1:
            self._pool = ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix='slice')

        self.genome = genome if genome is not None else Genome.generate(self.generation_context())
        logger.info("Seed %d, genome complexity %d", self.seed, self.genome.get_complexity())
        logger.debug("%s", self.genome)

    def generation_context(self) -> GenerationContext:
        return GenerationContext(rng=self.rng, config=self.config, images=self.images)

    def request_mutation(self):
        self.tree_dirty = True

    def slice_rows(self, slice_index: int) -> Tuple[int, int]:
        """Row range [start, end) of a slice; the last slice takes any remainder"""
        ticks = self.config.ticks_per_update
        rows = self.height // ticks
        start = slice_index * rows
        end = self.height if slice_index == ticks - 1 else start + rows
        return start, end

    def tick(self) -> Optional[FrameOutput]:
        """Process one slice; returns the finished frame when a cycle completes"""
        ticks = self.config.ticks_per_update
        start, end = self.slice_rows(self.tick_count % ticks)
        self.rolling_update_stat_total += self.update_slice(start, end)
        self.tick_count += 1
        if self.tick_count % ticks == 0:
            return self._complete_cycle()
        return None

    def run(self, cycles: int) -> Iterator[FrameOutput]:
        completed = 0
        while completed < cycles:
            frame = self.tick()
            if frame is not None:
                completed += 1
                yield frame

    def update_slice(self, start: int, end: int) -> UpdateStat:
        # Neighbour picks come from the driver RNG on this thread, so the
        # result does not depend on how rows are spread over workers.
        draws = self._draw_neighbours(end - start)

        if self._pool is None or end - start < 2:
            return self._update_rows(start, end, draws)

        bounds = np.linspace(start, end, min(self.config.workers, end - start) + 1).astype(int)
        jobs = [
            self._pool.submit(self._update_rows, lo, hi, draws[lo - start:hi - start])
            for lo, hi in zip(bounds[:-1], bounds[1:])
        ]
        total = UpdateStat()
        for job in jobs:
            total += job.result()
        return total

    def _draw_neighbours(self, rows: int) -> np.ndarray:
        draws = np.empty((rows, self.width, 4), dtype=np.int64)
        rng = self.rng
        for row in range(rows):
            for x in range(self.width):
                draws[row, x] = (
                    rng.randint(-1, 1),
                    rng.randint(-1, 1),
                    rng.randrange(self.width),
                    rng.randrange(self.height),
                )
        return draws

    def _update_rows(self, start: int, end: int, draws: np.ndarray) -> UpdateStat:
        root = self.genome.root
        history = self.history
        cells = self.next_step.cell_array
        t = self.current_t
        previous_t = t - 1
        activity = alpha = local = global_ = 0.0

        for row, y in enumerate(range(start, end)):
            for x in range(self.width):
                state = UpdateState(CoordinateSet(self._xs[x], self._ys[y], float(t)), history)
                color = root.compute(state).to_byte_color()
                new = np.array(color.to_tuple(), dtype=np.uint8)
                cells[y, x] = new

                dx, dy, gx, gy = draws[row, x]
                older = history.get_raw(x, y, previous_t)
                activity += abs(float(new[:3].mean()) - float(older[:3].mean())) / 255.0
                alpha += color.a / 256.0
                local += _similarity(new, history.get_raw(x + int(dx), y + int(dy), previous_t))
                global_ += _similarity(new, history.get_raw(int(gx), int(gy), previous_t))

        return UpdateStat(activity, alpha, local, global_) / self.total_cells

    def should_mutate(self) -> bool:
        config = self.config
        average = self.average_update_stat
        return (
            average.activity_value < config.activity_value_lower_bound
            or average.alpha_value < config.alpha_value_lower_bound
            or average.local_similarity_value > config.local_similarity_upper_bound
            or average.global_similarity_value >= config.global_similarity_upper_bound
        )

    def _complete_cycle(self) -> FrameOutput:
        self.average_update_stat = (self.average_update_stat + self.rolling_update_stat_total) / 2
        self.rolling_update_stat_total = UpdateStat()

        mutated = []
        if self.mutation_enabled and (self.tree_dirty or self.should_mutate()):
            logger.info("====TIC: %d MUTATING TREE====", self.current_t)
            logger.info("Smoothed stats: %s", self.average_update_stat)
            mutated = self.genome.mutate(self.generation_context())
            logger.debug("%s", self.genome)
            self.tree_dirty = False

        self.next_step.transform = self.genome.compute_transform(self.current_t, self.history)
        self.next_step.invalidate()

        slot = self.current_t % len(self.history)
        self.next_step = self.history.swap(slot, self.next_step)
        finished = self.history[slot]

        frame = FrameOutput(
            t=self.current_t,
            slot=slot,
            pixels=finished.cell_array.copy(),
            transform=finished.transform,
            stats=self.average_update_stat,
            mutated=mutated,
        )
        self.current_t += 1
        return frame

    def close(self):
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> 'Driver':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
