"""
pattern_evolution/colors.py - Byte, float and 3-bit color representations
"""
import colorsys
from typing import List, Sequence, Tuple

from .datatypes import Boolean, Byte, ScalarValue, UnitFloat
from .generation import Generatable, GenerationContext


def _check_unit(name: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"FloatColor.{name} out of range: {value}")
    return value


def _check_byte(name: str, value: int) -> int:
    value = int(value)
    if not 0 <= value <= 255:
        raise ValueError(f"ByteColor.{name} out of range: {value}")
    return value


class FloatColor(Generatable):
    """RGBA color with components in [0, 1]"""
    __slots__ = ('r', 'g', 'b', 'a')

    def __init__(self, r: float, g: float, b: float, a: float = 1.0):
        self.r = _check_unit('r', r)
        self.g = _check_unit('g', g)
        self.b = _check_unit('b', b)
        self.a = _check_unit('a', a)

    @classmethod
    def gray(cls, level: float = 0.5) -> 'FloatColor':
        return cls(level, level, level, 1.0)

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float) -> 'FloatColor':
        r, g, b = colorsys.hsv_to_rgb(h, s, v)
        return cls(_clamp_unit(r), _clamp_unit(g), _clamp_unit(b), 1.0)

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'FloatColor':
        rng = ctx.rng
        return cls(rng.random(), rng.random(), rng.random(), 1.0)

    def mutate(self, ctx: GenerationContext) -> 'FloatColor':
        return FloatColor.generate(ctx)

    def average(self) -> UnitFloat:
        return UnitFloat((self.r + self.g + self.b) / 3.0)

    def hue(self) -> UnitFloat:
        h, _, _ = colorsys.rgb_to_hsv(self.r, self.g, self.b)
        return UnitFloat(_clamp_unit(h))

    def to_byte_color(self) -> 'ByteColor':
        return ByteColor(
            int(round(self.r * 255)),
            int(round(self.g * 255)),
            int(round(self.b * 255)),
            int(round(self.a * 255)),
        )

    def to_bit_color(self) -> 'BitColor':
        return BitColor.from_components(self.r >= 0.5, self.g >= 0.5, self.b >= 0.5)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return self.r, self.g, self.b, self.a

    def to_json(self) -> List[float]:
        return list(self.to_tuple())

    @classmethod
    def from_json(cls, data: Sequence[float]) -> 'FloatColor':
        return cls(*data)

    def __eq__(self, other):
        return isinstance(other, FloatColor) and self.to_tuple() == other.to_tuple()

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self):
        return "FloatColor(%r, %r, %r, %r)" % self.to_tuple()

    def __str__(self):
        return "rgba(%.2f, %.2f, %.2f, %.2f)" % self.to_tuple()


class ByteColor(Generatable):
    """RGBA color with 8-bit components"""
    __slots__ = ('r', 'g', 'b', 'a')

    def __init__(self, r: int, g: int, b: int, a: int = 255):
        self.r = _check_byte('r', r)
        self.g = _check_byte('g', g)
        self.b = _check_byte('b', b)
        self.a = _check_byte('a', a)

    @classmethod
    def from_bytes(cls, r: Byte, g: Byte, b: Byte) -> 'ByteColor':
        return cls(r.value, g.value, b.value, 255)

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'ByteColor':
        rng = ctx.rng
        return cls(rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255), 255)

    def mutate(self, ctx: GenerationContext) -> 'ByteColor':
        return ByteColor.generate(ctx)

    def to_float_color(self) -> FloatColor:
        return FloatColor(self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)

    def to_bit_color(self) -> 'BitColor':
        return BitColor.from_components(self.r > 127, self.g > 127, self.b > 127)

    def to_tuple(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a

    def to_json(self) -> List[int]:
        return list(self.to_tuple())

    @classmethod
    def from_json(cls, data: Sequence[int]) -> 'ByteColor':
        return cls(*data)

    def __eq__(self, other):
        return isinstance(other, ByteColor) and self.to_tuple() == other.to_tuple()

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self):
        return "ByteColor(%d, %d, %d, %d)" % self.to_tuple()

    __str__ = __repr__


class BitColor(ScalarValue):
    """One of the eight colors reachable with on/off RGB channels"""
    __slots__ = ()

    NAMES = ('Black', 'Red', 'Green', 'Blue', 'Cyan', 'Magenta', 'Yellow', 'White')
    COMPONENTS = (
        (False, False, False),
        (True, False, False),
        (False, True, False),
        (False, False, True),
        (False, True, True),
        (True, False, True),
        (True, True, False),
        (True, True, True),
    )

    def __init__(self, index: int):
        index = int(index)
        if not 0 <= index < len(self.NAMES):
            raise ValueError(f"BitColor index out of range: {index}")
        self.value = index

    @classmethod
    def from_name(cls, name: str) -> 'BitColor':
        return cls(cls.NAMES.index(name))

    @classmethod
    def from_components(cls, r: bool, g: bool, b: bool) -> 'BitColor':
        return cls(cls.COMPONENTS.index((bool(r), bool(g), bool(b))))

    @classmethod
    def from_unit_float(cls, value: UnitFloat) -> 'BitColor':
        return cls(int(value.value * 0.99 * len(cls.NAMES)))

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'BitColor':
        return cls(ctx.rng.randrange(len(cls.NAMES)))

    def mutate(self, ctx: GenerationContext) -> 'BitColor':
        rng = ctx.rng
        kept = [c if rng.random() < 0.5 else rng.random() < 0.5 for c in self.components]
        return BitColor.from_components(*kept)

    @property
    def name(self) -> str:
        return self.NAMES[self.value]

    @property
    def components(self) -> Tuple[bool, bool, bool]:
        return self.COMPONENTS[self.value]

    def has_color(self, other: 'BitColor') -> bool:
        return all(o <= s for s, o in zip(self.components, other.components))

    def give_color(self, other: 'BitColor') -> 'BitColor':
        return BitColor.from_components(*(s or o for s, o in zip(self.components, other.components)))

    def take_color(self, other: 'BitColor') -> 'BitColor':
        return BitColor.from_components(*(s and not o for s, o in zip(self.components, other.components)))

    def xor_color(self, other: 'BitColor') -> 'BitColor':
        return BitColor.from_components(*(s != o for s, o in zip(self.components, other.components)))

    def eq_color(self, other: 'BitColor') -> 'BitColor':
        return BitColor.from_components(*(s == o for s, o in zip(self.components, other.components)))

    def component(self, index: int) -> Boolean:
        return Boolean(self.components[index])

    def to_float_color(self) -> FloatColor:
        r, g, b = (1.0 if c else 0.0 for c in self.components)
        return FloatColor(r, g, b, 1.0)

    def to_byte_color(self) -> ByteColor:
        r, g, b = (255 if c else 0 for c in self.components)
        return ByteColor(r, g, b, 255)

    def to_json(self) -> str:
        return self.name

    @classmethod
    def from_json(cls, data: str) -> 'BitColor':
        return cls.from_name(data)

    def __str__(self):
        return self.name


def _clamp_unit(value: float) -> float:
    return min(max(value, 0.0), 1.0)
