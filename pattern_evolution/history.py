"""
pattern_evolution/history.py - Ring of recently completed frames
"""
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from PIL import Image as PILImage

from .colors import ByteColor
from .datatypes import SignedFloat


def blank_cell_array(width: int, height: int) -> np.ndarray:
    """Row-major RGBA buffer, black and fully opaque"""
    cells = np.zeros((height, width, 4), dtype=np.uint8)
    cells[..., 3] = 255
    return cells


@dataclass
class TransformDescriptor:
    """How the presentation layer should move a frame relative to the previous one"""
    rotation: float = 0.0
    translation: Tuple[float, float] = (0.0, 0.0)
    offset: Tuple[float, float] = (0.0, 0.0)
    from_scale: Tuple[float, float] = (0.0, 0.0)
    to_scale: Tuple[float, float] = (0.0, 0.0)
    apply_rotation: bool = False
    apply_translation: bool = False
    apply_offset: bool = False
    apply_scale: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class HistoryStep:
    """One frame: pixel buffer, transform metadata and a cached renderable"""

    def __init__(self, width: int, height: int):
        self.cell_array = blank_cell_array(width, height)
        self.transform = TransformDescriptor()
        self._image: Optional[PILImage.Image] = None

    def to_image(self) -> PILImage.Image:
        if self._image is None:
            self._image = PILImage.fromarray(self.cell_array, 'RGBA')
        return self._image

    def invalidate(self):
        self._image = None


class History:
    """Fixed-length ring of frames supporting wrapped (x, y, t) lookups"""

    def __init__(self, width: int, height: int, length: int):
        if length < 1:
            raise ValueError(f"History length must be at least 1, got {length}")
        self.width = width
        self.height = height
        self.steps: List[HistoryStep] = [HistoryStep(width, height) for _ in range(length)]

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> HistoryStep:
        return self.steps[index % len(self.steps)]

    def get_raw(self, x: int, y: int, t: int) -> np.ndarray:
        step = self.steps[t % len(self.steps)]
        return step.cell_array[y % self.height, x % self.width]

    def get(self, x: int, y: int, t: int) -> ByteColor:
        r, g, b, a = self.get_raw(x, y, t)
        return ByteColor(int(r), int(g), int(b), int(a))

    def get_normalised(self, x: SignedFloat, y: SignedFloat, t: float) -> ByteColor:
        px = int((x.value + 1.0) * 0.5 * self.width)
        py = int((y.value + 1.0) * 0.5 * self.height)
        return self.get(px, py, math.floor(t))

    def swap(self, index: int, step: HistoryStep) -> HistoryStep:
        """Install step at index and hand back the frame it replaced"""
        index %= len(self.steps)
        previous = self.steps[index]
        self.steps[index] = step
        return previous
