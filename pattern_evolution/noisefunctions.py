"""
pattern_evolution/noisefunctions.py - Numba-compiled scalar noise and fractal kernels

Every noise kernel is a pure function of (x, y, t, seed) returning a value in [-1, 1].
"""
import numpy as np
from numba import jit


@jit(nopython=True)
def lattice_hash(ix, iy, it, seed):
    """Integer lattice point to a uniform float in [0, 1]"""
    h = (ix * 374761393 + iy * 668265263 + it * 1274126177 + seed * 1103515245) & 0xFFFFFFFF
    h = ((h ^ (h >> 15)) * 668265261) & 0xFFFFFFFF
    h = ((h ^ (h >> 13)) * 374761393) & 0xFFFFFFFF
    h = h ^ (h >> 16)
    return h / 4294967295.0


@jit(nopython=True)
def _smooth(v):
    return v * v * (3.0 - 2.0 * v)


@jit(nopython=True)
def _lerp(a, b, w):
    return a + (b - a) * w


@jit(nopython=True)
def value_noise(x, y, t, seed):
    """Trilinearly interpolated lattice noise"""
    x0 = np.floor(x)
    y0 = np.floor(y)
    t0 = np.floor(t)
    ix = int(x0)
    iy = int(y0)
    it = int(t0)
    fx = _smooth(x - x0)
    fy = _smooth(y - y0)
    ft = _smooth(t - t0)

    c000 = lattice_hash(ix, iy, it, seed)
    c100 = lattice_hash(ix + 1, iy, it, seed)
    c010 = lattice_hash(ix, iy + 1, it, seed)
    c110 = lattice_hash(ix + 1, iy + 1, it, seed)
    c001 = lattice_hash(ix, iy, it + 1, seed)
    c101 = lattice_hash(ix + 1, iy, it + 1, seed)
    c011 = lattice_hash(ix, iy + 1, it + 1, seed)
    c111 = lattice_hash(ix + 1, iy + 1, it + 1, seed)

    near = _lerp(_lerp(c000, c100, fx), _lerp(c010, c110, fx), fy)
    far = _lerp(_lerp(c001, c101, fx), _lerp(c011, c111, fx), fy)
    return _lerp(near, far, ft) * 2.0 - 1.0


@jit(nopython=True)
def fractal_brownian_noise(x, y, t, seed):
    total = 0.0
    norm = 0.0
    amplitude = 1.0
    frequency = 1.0
    for octave in range(4):
        total += value_noise(x * frequency, y * frequency, t * frequency, seed + octave) * amplitude
        norm += amplitude
        amplitude *= 0.5
        frequency *= 2.0
    return total / norm


@jit(nopython=True)
def billow_noise(x, y, t, seed):
    total = 0.0
    norm = 0.0
    amplitude = 1.0
    frequency = 1.0
    for octave in range(4):
        n = value_noise(x * frequency, y * frequency, t * frequency, seed + octave)
        total += (2.0 * abs(n) - 1.0) * amplitude
        norm += amplitude
        amplitude *= 0.5
        frequency *= 2.0
    return total / norm


@jit(nopython=True)
def ridged_multi_noise(x, y, t, seed):
    total = 0.0
    norm = 0.0
    amplitude = 1.0
    frequency = 1.0
    for octave in range(4):
        ridge = 1.0 - abs(value_noise(x * frequency, y * frequency, t * frequency, seed + octave))
        total += ridge * ridge * amplitude
        norm += amplitude
        amplitude *= 0.5
        frequency *= 2.0
    return total / norm * 2.0 - 1.0


@jit(nopython=True)
def worley_noise(x, y, t, seed):
    """Distance to the nearest jittered feature point"""
    ix = int(np.floor(x))
    iy = int(np.floor(y))
    it = int(np.floor(t))
    nearest = 10.0
    for dx in range(-1, 2):
        for dy in range(-1, 2):
            for dt in range(-1, 2):
                cx = ix + dx
                cy = iy + dy
                ct = it + dt
                px = cx + lattice_hash(cx, cy, ct, seed)
                py = cy + lattice_hash(cx, cy, ct, seed + 1)
                pt = ct + lattice_hash(cx, cy, ct, seed + 2)
                d = np.sqrt((px - x) ** 2 + (py - y) ** 2 + (pt - t) ** 2)
                if d < nearest:
                    nearest = d
    return max(min(nearest * 2.0 - 1.0, 0.99), -1.0)


@jit(nopython=True)
def checkerboard_noise(x, y, t, seed):
    parity = (int(np.floor(x)) + int(np.floor(y)) + int(np.floor(t)) + seed) % 2
    return 1.0 if parity == 0 else -1.0


@jit(nopython=True)
def dither(x, y, t):
    """Stable pseudo-random threshold in [0, 1] for a coordinate"""
    return lattice_hash(int(np.floor(x * 4096.0)), int(np.floor(y * 4096.0)), int(np.floor(t)), 7919)


@jit(nopython=True)
def mandelbrot_escape(cx, cy, power, iterations):
    """Fraction of the iteration budget used before |z| exceeds 2"""
    zr = 0.0
    zi = 0.0
    escape = iterations
    for i in range(iterations + 1):
        r = np.sqrt(zr * zr + zi * zi)
        if r > 0.0:
            theta = np.arctan2(zi, zr)
            rp = r ** power
            zr, zi = rp * np.cos(power * theta), rp * np.sin(power * theta)
        zr += cx
        zi += cy
        if zr * zr + zi * zi > 4.0:
            escape = i
            break
    return escape / (iterations + 1.0)
