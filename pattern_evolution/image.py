"""
pattern_evolution/image.py - Decoded image frames used as leaf data, and their generator
"""
import logging
import os
import random
from typing import Any, Dict, List, Optional

import numpy as np
from PIL import Image as PILImage
from PIL import ImageSequence
from scipy import ndimage

from .colors import ByteColor
from .datatypes import SignedFloat
from .generation import Generatable, GenerationContext
from .preloader import Generator

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.bmp', '.webp', '.tif', '.tiff')
MAX_FRAMES = 64


class Image(Generatable):
    """A stack of equally sized RGB frames, indexed by (x, y, t)"""

    def __init__(self, frames: List[np.ndarray], source: Optional[str] = None):
        if not frames:
            raise ValueError("Image needs at least one frame")
        shape = frames[0].shape
        for frame in frames:
            if frame.shape != shape or frame.ndim != 3 or frame.shape[2] != 3:
                raise ValueError(f"Inconsistent image frame shape {frame.shape}")
        self.frames = [np.ascontiguousarray(frame, dtype=np.uint8) for frame in frames]
        self.source = source

    @property
    def width(self) -> int:
        return self.frames[0].shape[1]

    @property
    def height(self) -> int:
        return self.frames[0].shape[0]

    @classmethod
    def default(cls, width: int, height: int) -> 'Image':
        """Built-in fallback used whenever no decoded image is available"""
        ys, xs = np.mgrid[0:height, 0:width]
        frame = np.zeros((height, width, 3), dtype=np.uint8)
        frame[..., 0] = (xs * 255 // max(width - 1, 1)).astype(np.uint8)
        frame[..., 1] = (ys * 255 // max(height - 1, 1)).astype(np.uint8)
        frame[..., 2] = np.where((xs // 8 + ys // 8) % 2 == 0, 192, 64).astype(np.uint8)
        return cls([frame])

    def get_pixel(self, x: int, y: int, t: int) -> ByteColor:
        frame = self.frames[t % len(self.frames)]
        r, g, b = frame[y % self.height, x % self.width]
        return ByteColor(int(r), int(g), int(b), 255)

    def get_pixel_normalised(self, x: SignedFloat, y: SignedFloat, t: float) -> ByteColor:
        px = int((x.value + 1.0) * 0.5 * self.width)
        py = int((y.value + 1.0) * 0.5 * self.height)
        return self.get_pixel(px, py, int(t))

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'Image':
        width, height = ctx.image_size
        if ctx.images is not None:
            try:
                return ctx.images.get_next()
            except RuntimeError as e:
                logger.error("Image preloader unavailable, using default image: %s", e)
        return cls.default(width, height)

    def mutate(self, ctx: GenerationContext) -> 'Image':
        return Image.generate(ctx)

    def to_json(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'width': self.width,
            'height': self.height,
            'frames': len(self.frames),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Image':
        width, height = data['width'], data['height']
        source = data.get('source')
        if source:
            try:
                return load_image(source, width, height)
            except (OSError, ValueError, PILImage.DecompressionBombError) as e:
                logger.error("Failed to reload image %s: %s", source, e)
        return cls.default(width, height)

    def __str__(self):
        return f"Image({os.path.basename(self.source) if self.source else 'default'})"


def collect_image_files(path: str) -> List[str]:
    """All files below path with a known image extension, sorted for reproducibility"""
    found = []
    for root, _, files in os.walk(path):
        for name in files:
            if name.lower().endswith(IMAGE_EXTENSIONS):
                found.append(os.path.join(root, name))
    return sorted(found)


def load_image(filename: str, width: int, height: int) -> Image:
    """Decode every frame of an image file and fit it to (width, height)"""
    frames = []
    with PILImage.open(filename) as source:
        for frame in ImageSequence.Iterator(source):
            rgb = np.asarray(frame.convert('RGB'), dtype=np.float32)

            # Blur before shrinking so the resize does not alias
            sigma = max(rgb.shape[1] / width, rgb.shape[0] / height) / 2.0
            if sigma > 0.5:
                rgb = ndimage.gaussian_filter(rgb, sigma=(sigma, sigma, 0))

            smoothed = PILImage.fromarray(np.clip(np.rint(rgb), 0, 255).astype(np.uint8), 'RGB')
            resized = smoothed.resize((width, height), PILImage.Resampling.BILINEAR)
            frames.append(np.asarray(resized, dtype=np.uint8))

            if len(frames) >= MAX_FRAMES:
                break

    return Image(frames, source=filename)


class ImageGenerator(Generator):
    """Picks random image files from a directory and decodes them"""

    def __init__(self, path: str, width: int, height: int, seed: Optional[int] = None):
        self.path = path
        self.width = width
        self.height = height
        self.rng = random.Random(seed)
        self.filenames = collect_image_files(path) if path else []
        if not self.filenames:
            logger.warning("No images found under %s, using default image", path)

    def generate(self) -> Image:
        if not self.filenames:
            return Image.default(self.width, self.height)

        filename = self.rng.choice(self.filenames)
        try:
            image = load_image(filename, self.width, self.height)
            logger.debug("Loaded %s (%d frames)", filename, len(image.frames))
            return image
        except (OSError, ValueError, PILImage.DecompressionBombError) as e:
            logger.error("Failed to load image %s: %s", filename, e)
            return Image.default(self.width, self.height)
        except Exception:
            logger.exception("Unexpected failure decoding image %s", filename)
            return Image.default(self.width, self.height)
