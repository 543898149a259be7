"""
pattern_evolution/datatypes.py - Range-checked scalar value types
"""
import math
from typing import Any, Tuple

from .generation import Generatable, GenerationContext

TAU = 2.0 * math.pi
_REMAP_TOLERANCE = 1e-9


def map_range(value: float, from_range: Tuple[float, float], to_range: Tuple[float, float]) -> float:
    """Affine remap of value from one closed interval onto another"""
    from_min, from_max = from_range
    to_min, to_max = to_range
    if from_max == from_min:
        return to_min

    result = (value - from_min) / (from_max - from_min) * (to_max - to_min) + to_min
    low, high = min(to_min, to_max), max(to_min, to_max)
    assert low - _REMAP_TOLERANCE <= result <= high + _REMAP_TOLERANCE, \
        f"map_range produced {result} outside [{low}, {high}]"
    return min(max(result, low), high)


class ScalarValue(Generatable):
    """Shared plumbing for the single-field value types"""
    __slots__ = ('value',)

    def mutate(self, ctx: GenerationContext):
        return type(self).generate(ctx)

    def to_json(self) -> Any:
        return self.value

    @classmethod
    def from_json(cls, data: Any):
        return cls(data)

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"

    def __str__(self):
        if isinstance(self.value, float):
            return f"{self.value:.3f}"
        return str(self.value)


class Boolean(ScalarValue):
    __slots__ = ()

    def __init__(self, value: bool):
        self.value = bool(value)

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'Boolean':
        return cls(ctx.rng.random() < 0.5)


class UnitFloat(ScalarValue):
    """Float in [0, 1]"""
    __slots__ = ()

    def __init__(self, value: float):
        value = float(value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"UnitFloat out of range: {value}")
        self.value = value

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'UnitFloat':
        return cls(ctx.rng.random())

    @classmethod
    def from_range(cls, value: float, low: float, high: float) -> 'UnitFloat':
        return cls(map_range(value, (low, high), (0.0, 1.0)))

    def to_signed(self) -> 'SignedFloat':
        return SignedFloat(map_range(self.value, (0.0, 1.0), (-1.0, 1.0)))

    def to_angle(self) -> 'Angle':
        return Angle(map_range(self.value, (0.0, 1.0), (0.0, TAU)))

    def multiply(self, other: 'UnitFloat') -> 'UnitFloat':
        return UnitFloat(self.value * other.value)

    def circular_add(self, other: 'UnitFloat') -> 'UnitFloat':
        total = self.value + other.value
        return UnitFloat(total - math.floor(total))

    def invert(self) -> 'UnitFloat':
        return UnitFloat(1.0 - self.value)

    def subdivide(self, divisions: 'Nibble') -> 'UnitFloat':
        scaled = self.value * (divisions.value + 1)
        return UnitFloat(scaled - math.floor(scaled))


class SignedFloat(ScalarValue):
    """Float in [-1, 1]"""
    __slots__ = ()

    def __init__(self, value: float):
        value = float(value)
        if not -1.0 <= value <= 1.0:
            raise ValueError(f"SignedFloat out of range: {value}")
        self.value = value

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'SignedFloat':
        return cls(ctx.rng.uniform(-1.0, 1.0))

    @classmethod
    def wrap(cls, value: float) -> 'SignedFloat':
        """Fold any real number into [-1, 1)"""
        wrapped = (value + 1.0) % 2.0 - 1.0
        return cls(min(max(wrapped, -1.0), 1.0))

    @classmethod
    def clamped(cls, value: float) -> 'SignedFloat':
        return cls(min(max(value, -1.0), 1.0))

    def to_unsigned(self) -> UnitFloat:
        return UnitFloat(map_range(self.value, (-1.0, 1.0), (0.0, 1.0)))

    def to_angle(self) -> 'Angle':
        return Angle(map_range(self.value, (-1.0, 1.0), (0.0, TAU)))

    def abs(self) -> UnitFloat:
        return UnitFloat(abs(self.value))

    def square(self) -> UnitFloat:
        return UnitFloat(self.value * self.value)

    def invert(self) -> 'SignedFloat':
        return SignedFloat(-self.value)

    def multiply(self, other: 'SignedFloat') -> 'SignedFloat':
        return SignedFloat(self.value * other.value)

    def circular_add(self, other: 'SignedFloat') -> 'SignedFloat':
        return SignedFloat.wrap(self.value + other.value)

    def subdivide(self, divisions: 'Nibble') -> 'SignedFloat':
        return self.to_unsigned().subdivide(divisions).to_signed()


class Angle(ScalarValue):
    """Radians normalised into [0, 2pi)"""
    __slots__ = ()

    def __init__(self, value: float):
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Angle must be finite: {value}")
        normalised = value - TAU * math.floor(value / TAU)
        if normalised >= TAU:
            normalised = 0.0
        self.value = normalised

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'Angle':
        return cls(ctx.rng.random() * TAU)

    def to_signed(self) -> SignedFloat:
        return SignedFloat(map_range(self.value, (0.0, TAU), (-1.0, 1.0)))

    def to_unsigned(self) -> UnitFloat:
        return UnitFloat(map_range(self.value, (0.0, TAU), (0.0, 1.0)))

    def sin(self) -> SignedFloat:
        return SignedFloat.clamped(math.sin(self.value))

    def cos(self) -> SignedFloat:
        return SignedFloat.clamped(math.cos(self.value))


class WrappingInt(ScalarValue):
    """Fixed-width integer whose arithmetic wraps on overflow"""
    __slots__ = ()
    BITS = 8
    SIGNED = False

    def __init__(self, value: int):
        value = int(value)
        if not self.min_value() <= value <= self.max_value():
            raise ValueError(f"{type(self).__name__} out of range: {value}")
        self.value = value

    @classmethod
    def min_value(cls) -> int:
        return -(1 << (cls.BITS - 1)) if cls.SIGNED else 0

    @classmethod
    def max_value(cls) -> int:
        return (1 << (cls.BITS - 1)) - 1 if cls.SIGNED else (1 << cls.BITS) - 1

    @classmethod
    def wrapping(cls, value: int):
        """Reduce an arbitrary integer modulo the type width"""
        modulus = 1 << cls.BITS
        value = int(value) % modulus
        if cls.SIGNED and value > cls.max_value():
            value -= modulus
        return cls(value)

    @classmethod
    def generate(cls, ctx: GenerationContext):
        return cls(ctx.rng.randint(cls.min_value(), cls.max_value()))

    def add(self, other):
        return self.wrapping(self.value + other.value)

    def multiply(self, other):
        return self.wrapping(self.value * other.value)

    def divide(self, other):
        if other.value == 0:
            return type(self)(0)
        quotient = abs(self.value) // abs(other.value)
        if (self.value < 0) != (other.value < 0):
            quotient = -quotient
        return self.wrapping(quotient)

    def modulus(self, other):
        if other.value == 0:
            return type(self)(0)
        remainder = abs(self.value) % abs(other.value)
        if self.value < 0:
            remainder = -remainder
        return self.wrapping(remainder)


class Byte(WrappingInt):
    __slots__ = ()
    BITS = 8

    def to_unsigned(self) -> UnitFloat:
        return UnitFloat(self.value / 255.0)


class Nibble(WrappingInt):
    __slots__ = ()
    BITS = 4


class UInt(WrappingInt):
    __slots__ = ()
    BITS = 32


class SInt(WrappingInt):
    __slots__ = ()
    BITS = 32
    SIGNED = True


class Point(Generatable):
    """A pair of signed floats"""
    __slots__ = ('x', 'y')

    def __init__(self, x: SignedFloat, y: SignedFloat):
        self.x = x
        self.y = y

    @classmethod
    def from_floats(cls, x: float, y: float) -> 'Point':
        return cls(SignedFloat(x), SignedFloat(y))

    @classmethod
    def zero(cls) -> 'Point':
        return cls.from_floats(0.0, 0.0)

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'Point':
        return cls(SignedFloat.generate(ctx), SignedFloat.generate(ctx))

    def mutate(self, ctx: GenerationContext) -> 'Point':
        return Point.generate(ctx)

    def to_angle(self) -> Angle:
        return Angle(math.atan2(self.x.value, self.y.value))

    def circular_add(self, other: 'Point') -> 'Point':
        return Point(self.x.circular_add(other.x), self.y.circular_add(other.y))

    def distance(self, other: 'Point') -> float:
        return math.hypot(self.x.value - other.x.value, self.y.value - other.y.value)

    def to_json(self):
        return [self.x.value, self.y.value]

    @classmethod
    def from_json(cls, data) -> 'Point':
        return cls.from_floats(data[0], data[1])

    def __eq__(self, other):
        return isinstance(other, Point) and self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"Point({self.x.value!r}, {self.y.value!r})"

    def __str__(self):
        return f"({self.x}, {self.y})"
