"""
pattern_evolution/noise_nodes.py - Seeded noise leaves producing SignedFloats
"""
from typing import Any, Dict

from .datatypes import SignedFloat, UnitFloat
from .generation import LEAF, Generatable, GenerationContext
from .node import Field, Node
from .noisefunctions import (
    billow_noise, checkerboard_noise, fractal_brownian_noise, ridged_multi_noise,
    value_noise, worley_noise,
)

NOISE_X_SCALE_FACTOR = 16.0
NOISE_Y_SCALE_FACTOR = 16.0
NOISE_T_SCALE_FACTOR = 0.25
MAX_NOISE_SEED = 2 ** 31 - 1


class NoiseSettings(Generatable):
    """Seed plus per-axis frequency controls for one noise leaf"""
    __slots__ = ('seed', 'x_scale', 'y_scale', 't_scale')

    def __init__(self, seed: int, x_scale: UnitFloat, y_scale: UnitFloat, t_scale: UnitFloat):
        if not 0 <= seed <= MAX_NOISE_SEED:
            raise ValueError(f"Noise seed out of range: {seed}")
        self.seed = seed
        self.x_scale = x_scale
        self.y_scale = y_scale
        self.t_scale = t_scale

    @classmethod
    def generate(cls, ctx: GenerationContext) -> 'NoiseSettings':
        return cls(
            ctx.rng.randint(0, MAX_NOISE_SEED),
            UnitFloat.generate(ctx),
            UnitFloat.generate(ctx),
            UnitFloat.generate(ctx),
        )

    def mutate(self, ctx: GenerationContext) -> 'NoiseSettings':
        values = {
            'seed': self.seed,
            'x_scale': self.x_scale,
            'y_scale': self.y_scale,
            't_scale': self.t_scale,
        }
        target = ctx.rng.choice(sorted(values))
        if target == 'seed':
            values['seed'] = ctx.rng.randint(0, MAX_NOISE_SEED)
        else:
            values[target] = UnitFloat.generate(ctx)
        return NoiseSettings(**values)

    def scaled(self, x: float, y: float, t: float):
        return (
            x * self.x_scale.value ** 2 * NOISE_X_SCALE_FACTOR,
            y * self.y_scale.value ** 2 * NOISE_Y_SCALE_FACTOR,
            t * self.t_scale.value * NOISE_T_SCALE_FACTOR,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            'seed': self.seed,
            'x_scale': self.x_scale.value,
            'y_scale': self.y_scale.value,
            't_scale': self.t_scale.value,
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'NoiseSettings':
        return cls(
            int(data['seed']),
            UnitFloat(data['x_scale']),
            UnitFloat(data['y_scale']),
            UnitFloat(data['t_scale']),
        )

    def __str__(self):
        return f"seed={self.seed} scale=({self.x_scale}, {self.y_scale}, {self.t_scale})"


class NoiseNode(Node, family='NoiseNode'):
    """Leaves sampling a noise kernel at the current coordinates"""
    category = None
    fields = (Field('settings', NoiseSettings),)
    kernel = None

    def compute(self, state):
        cs = state.coordinate_set
        x, y, t = self.settings.scaled(cs.x.value, cs.y.value, cs.t)
        return SignedFloat.clamped(self.kernel(float(x), float(y), float(t), self.settings.seed))


class ValueNoise(NoiseNode):
    category = LEAF
    kernel = staticmethod(value_noise)


class FractalBrownianNoise(NoiseNode):
    category = LEAF
    kernel = staticmethod(fractal_brownian_noise)


class BillowNoise(NoiseNode):
    category = LEAF
    kernel = staticmethod(billow_noise)


class RidgedMultiNoise(NoiseNode):
    category = LEAF
    kernel = staticmethod(ridged_multi_noise)


class WorleyNoise(NoiseNode):
    category = LEAF
    kernel = staticmethod(worley_noise)


class CheckerboardNoise(NoiseNode):
    category = LEAF
    kernel = staticmethod(checkerboard_noise)
