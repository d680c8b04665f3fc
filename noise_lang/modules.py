"""Coherent-noise generator and combiner modules.

Each class mirrors one libnoise module: generators produce values from the
input coordinates, combiners and transformers read their source slots.
``get_value`` is vectorised with numpy so a caller can sample a whole frame
in one call; scalar input gives a ``float`` back.
"""

import math
from typing import Dict, List, Optional, Tuple, Type

import numpy as np

QUALITY_FAST = 0
QUALITY_STD = 1
QUALITY_BEST = 2

MAX_OCTAVE = 30
MAX_TERRACE_POINTS = 65536

X_NOISE_GEN = 1619
Y_NOISE_GEN = 31337
Z_NOISE_GEN = 6971
SEED_NOISE_GEN = 1013
SHIFT_NOISE_GEN = 8

SQRT_3 = math.sqrt(3.0)

_RANDOM_VECTORS = np.random.default_rng(0x1B5EED).normal(size=(256, 3))
_RANDOM_VECTORS /= np.linalg.norm(_RANDOM_VECTORS, axis=1, keepdims=True)


class ModuleError(ValueError):
    """Raised when a module is given an invalid parameter or is not wired."""

    pass


# --- Noise primitives ---


def make_int32_range(n):
    return np.where(
        n >= 1073741824.0,
        2.0 * np.fmod(n, 1073741824.0) - 1073741824.0,
        np.where(
            n <= -1073741824.0,
            2.0 * np.fmod(n, 1073741824.0) + 1073741824.0,
            n,
        ),
    )


def s_curve3(a):
    return a * a * (3.0 - 2.0 * a)


def s_curve5(a):
    a3 = a * a * a
    return (6.0 * a3 * a * a) - (15.0 * a3 * a) + (10.0 * a3)


def lerp(n0, n1, a):
    return (1.0 - a) * n0 + a * n1


def cubic_interp(n0, n1, n2, n3, a):
    p = (n3 - n2) - (n0 - n1)
    q = (n0 - n1) - p
    r = n2 - n0
    return p * a * a * a + q * a * a + r * a + n1


def _gradient_noise(fx, fy, fz, ix, iy, iz, seed):
    index = (
        X_NOISE_GEN * ix + Y_NOISE_GEN * iy + Z_NOISE_GEN * iz + SEED_NOISE_GEN * seed
    ) & 0xFFFFFFFF
    index ^= index >> SHIFT_NOISE_GEN
    index &= 0xFF
    vec = _RANDOM_VECTORS[index]
    return (
        vec[..., 0] * (fx - ix) + vec[..., 1] * (fy - iy) + vec[..., 2] * (fz - iz)
    ) * 2.12


def gradient_coherent_noise(x, y, z, seed, quality=QUALITY_STD):
    x0 = np.floor(x).astype(np.int64)
    y0 = np.floor(y).astype(np.int64)
    z0 = np.floor(z).astype(np.int64)
    x1, y1, z1 = x0 + 1, y0 + 1, z0 + 1

    xs, ys, zs = x - x0, y - y0, z - z0
    if quality == QUALITY_STD:
        xs, ys, zs = s_curve3(xs), s_curve3(ys), s_curve3(zs)
    elif quality == QUALITY_BEST:
        xs, ys, zs = s_curve5(xs), s_curve5(ys), s_curve5(zs)

    def corner(ix, iy, iz):
        return _gradient_noise(x, y, z, ix, iy, iz, seed)

    ix0 = lerp(corner(x0, y0, z0), corner(x1, y0, z0), xs)
    ix1 = lerp(corner(x0, y1, z0), corner(x1, y1, z0), xs)
    iy0 = lerp(ix0, ix1, ys)
    ix0 = lerp(corner(x0, y0, z1), corner(x1, y0, z1), xs)
    ix1 = lerp(corner(x0, y1, z1), corner(x1, y1, z1), xs)
    iy1 = lerp(ix0, ix1, ys)
    return lerp(iy0, iy1, zs)


def int_value_noise(x, y, z, seed):
    n = (
        X_NOISE_GEN * x + Y_NOISE_GEN * y + Z_NOISE_GEN * z + SEED_NOISE_GEN * seed
    ) & 0x7FFFFFFF
    n = (n >> 13) ^ n
    # Wrap-around multiplication; only the low 31 bits survive the mask.
    u = n.astype(np.uint64)
    u = (u * (u * u * np.uint64(60493) + np.uint64(19990303)) + np.uint64(1376312589)) & np.uint64(0x7FFFFFFF)
    return u.astype(np.int64)


def value_noise(x, y, z, seed=0):
    return 1.0 - int_value_noise(x, y, z, seed) / 1073741824.0


# --- Base ---


class Module:
    source_count = 0

    def __init__(self):
        self._sources: List[Optional["Module"]] = [None] * self.source_count

    @property
    def sources(self) -> Tuple[Optional["Module"], ...]:
        return tuple(self._sources)

    def set_source_module(self, index: int, module: "Module") -> None:
        if not 0 <= index < self.source_count:
            raise ModuleError(
                f"{type(self).__name__} has no source slot {index} "
                f"(slots: {self.source_count})"
            )
        self._sources[index] = module

    def get_source_module(self, index: int) -> "Module":
        if not 0 <= index < self.source_count or self._sources[index] is None:
            raise ModuleError(f"{type(self).__name__} source {index} is not set")
        return self._sources[index]

    def get_value(self, x, y, z):
        x = np.atleast_1d(np.asarray(x, dtype=np.float64))
        y = np.atleast_1d(np.asarray(y, dtype=np.float64))
        z = np.atleast_1d(np.asarray(z, dtype=np.float64))
        scalar = x.size == y.size == z.size == 1 and x.ndim == y.ndim == z.ndim == 1
        x, y, z = np.broadcast_arrays(x, y, z)
        value = np.asarray(self.evaluate(x, y, z), dtype=np.float64)
        value = np.broadcast_to(value, x.shape)
        return float(value.reshape(-1)[0]) if scalar else np.array(value)

    def evaluate(self, x, y, z):
        raise NotImplementedError

    def _source(self, index, x, y, z):
        return self.get_source_module(index).evaluate(x, y, z)


def _octave_count(count: int) -> int:
    if not 1 <= count <= MAX_OCTAVE:
        raise ModuleError(f"Octave count must be within 1..{MAX_OCTAVE}, got {count}")
    return count


def _quality(quality: int) -> int:
    if quality not in (QUALITY_FAST, QUALITY_STD, QUALITY_BEST):
        raise ModuleError(f"Noise quality must be 0, 1 or 2, got {quality}")
    return quality


# --- Generators ---


class Perlin(Module):
    def __init__(self):
        super().__init__()
        self.frequency = 1.0
        self.lacunarity = 2.0
        self.octave_count = 6
        self.persistence = 0.5
        self.seed = 0
        self.noise_quality = QUALITY_STD

    def set_frequency(self, frequency: float) -> None:
        self.frequency = frequency

    def set_lacunarity(self, lacunarity: float) -> None:
        self.lacunarity = lacunarity

    def set_octave_count(self, count: int) -> None:
        self.octave_count = _octave_count(count)

    def set_persistence(self, persistence: float) -> None:
        self.persistence = persistence

    def set_seed(self, seed: int) -> None:
        self.seed = seed

    def set_noise_quality(self, quality: int) -> None:
        self.noise_quality = _quality(quality)

    def _signal(self, signal):
        return signal

    def evaluate(self, x, y, z):
        value = 0.0
        persistence = 1.0
        x, y, z = x * self.frequency, y * self.frequency, z * self.frequency
        for octave in range(self.octave_count):
            seed = (self.seed + octave) & 0xFFFFFFFF
            signal = gradient_coherent_noise(
                make_int32_range(x),
                make_int32_range(y),
                make_int32_range(z),
                seed,
                self.noise_quality,
            )
            value = value + self._signal(signal) * persistence
            x, y, z = x * self.lacunarity, y * self.lacunarity, z * self.lacunarity
            persistence *= self.persistence
        return self._finish(value)

    def _finish(self, value):
        return value


class Billow(Perlin):
    def _signal(self, signal):
        return 2.0 * np.abs(signal) - 1.0

    def _finish(self, value):
        return value + 0.5


class RidgedMulti(Module):
    offset = 1.0
    gain = 2.0
    exponent = 1.0

    def __init__(self):
        super().__init__()
        self.frequency = 1.0
        self.lacunarity = 2.0
        self.octave_count = 6
        self.seed = 0
        self.noise_quality = QUALITY_STD
        self._weights = self._spectral_weights()

    def _spectral_weights(self):
        frequency = 1.0
        weights = []
        for _ in range(MAX_OCTAVE):
            weights.append(frequency ** -self.exponent)
            frequency *= self.lacunarity
        return weights

    def set_frequency(self, frequency: float) -> None:
        self.frequency = frequency

    def set_lacunarity(self, lacunarity: float) -> None:
        self.lacunarity = lacunarity
        self._weights = self._spectral_weights()

    def set_octave_count(self, count: int) -> None:
        self.octave_count = _octave_count(count)

    def set_seed(self, seed: int) -> None:
        self.seed = seed

    def set_noise_quality(self, quality: int) -> None:
        self.noise_quality = _quality(quality)

    def evaluate(self, x, y, z):
        x, y, z = x * self.frequency, y * self.frequency, z * self.frequency
        value = 0.0
        weight = 1.0
        for octave in range(self.octave_count):
            seed = (self.seed + octave) & 0x7FFFFFFF
            signal = gradient_coherent_noise(
                make_int32_range(x),
                make_int32_range(y),
                make_int32_range(z),
                seed,
                self.noise_quality,
            )
            signal = self.offset - np.abs(signal)
            signal = signal * signal * weight
            weight = np.clip(signal * self.gain, 0.0, 1.0)
            value = value + signal * self._weights[octave]
            x, y, z = x * self.lacunarity, y * self.lacunarity, z * self.lacunarity
        return value * 1.25 - 1.0


class Voronoi(Module):
    def __init__(self):
        super().__init__()
        self.displacement = 1.0
        self.frequency = 1.0
        self.seed = 0
        self.distance_enabled = False

    def enable_distance(self, enable: bool = True) -> None:
        self.distance_enabled = enable

    def set_displacement(self, displacement: float) -> None:
        self.displacement = displacement

    def set_frequency(self, frequency: float) -> None:
        self.frequency = frequency

    def set_seed(self, seed: int) -> None:
        self.seed = seed

    def evaluate(self, x, y, z):
        x, y, z = x * self.frequency, y * self.frequency, z * self.frequency
        xi = np.floor(x).astype(np.int64)
        yi = np.floor(y).astype(np.int64)
        zi = np.floor(z).astype(np.int64)

        min_dist = np.full(x.shape, np.inf)
        cand_x, cand_y, cand_z = np.zeros(x.shape), np.zeros(x.shape), np.zeros(x.shape)
        for dz in range(-2, 3):
            for dy in range(-2, 3):
                for dx in range(-2, 3):
                    cx, cy, cz = xi + dx, yi + dy, zi + dz
                    px = cx + value_noise(cx, cy, cz, self.seed)
                    py = cy + value_noise(cx, cy, cz, self.seed + 1)
                    pz = cz + value_noise(cx, cy, cz, self.seed + 2)
                    dist = (px - x) ** 2 + (py - y) ** 2 + (pz - z) ** 2
                    closer = dist < min_dist
                    min_dist = np.where(closer, dist, min_dist)
                    cand_x = np.where(closer, px, cand_x)
                    cand_y = np.where(closer, py, cand_y)
                    cand_z = np.where(closer, pz, cand_z)

        if self.distance_enabled:
            value = np.sqrt(min_dist) * SQRT_3 - 1.0
        else:
            value = 0.0
        return value + self.displacement * value_noise(
            np.floor(cand_x).astype(np.int64),
            np.floor(cand_y).astype(np.int64),
            np.floor(cand_z).astype(np.int64),
        )


class Cylinders(Module):
    def __init__(self):
        super().__init__()
        self.frequency = 1.0

    def set_frequency(self, frequency: float) -> None:
        self.frequency = frequency

    def evaluate(self, x, y, z):
        x, z = x * self.frequency, z * self.frequency
        dist = np.sqrt(x * x + z * z)
        small = dist - np.floor(dist)
        nearest = np.minimum(small, 1.0 - small)
        return 1.0 - nearest * 4.0


class Spheres(Module):
    def __init__(self):
        super().__init__()
        self.frequency = 1.0

    def set_frequency(self, frequency: float) -> None:
        self.frequency = frequency

    def evaluate(self, x, y, z):
        x, y, z = x * self.frequency, y * self.frequency, z * self.frequency
        dist = np.sqrt(x * x + y * y + z * z)
        small = dist - np.floor(dist)
        nearest = np.minimum(small, 1.0 - small)
        return 1.0 - nearest * 4.0


class Checkerboard(Module):
    def evaluate(self, x, y, z):
        ix = np.floor(make_int32_range(x)).astype(np.int64)
        iy = np.floor(make_int32_range(y)).astype(np.int64)
        iz = np.floor(make_int32_range(z)).astype(np.int64)
        return np.where((ix & 1) ^ (iy & 1) ^ (iz & 1), -1.0, 1.0)


class Const(Module):
    def __init__(self, value: float = 0.0):
        super().__init__()
        self.const_value = value

    def set_const_value(self, value: float) -> None:
        self.const_value = value

    def evaluate(self, x, y, z):
        return np.full(x.shape, self.const_value)


# --- Combiners and modifiers ---


class Abs(Module):
    source_count = 1

    def evaluate(self, x, y, z):
        return np.abs(self._source(0, x, y, z))


class Invert(Module):
    source_count = 1

    def evaluate(self, x, y, z):
        return -self._source(0, x, y, z)


class Add(Module):
    source_count = 2

    def evaluate(self, x, y, z):
        return self._source(0, x, y, z) + self._source(1, x, y, z)


class Max(Module):
    source_count = 2

    def evaluate(self, x, y, z):
        return np.maximum(self._source(0, x, y, z), self._source(1, x, y, z))


class Min(Module):
    source_count = 2

    def evaluate(self, x, y, z):
        return np.minimum(self._source(0, x, y, z), self._source(1, x, y, z))


class Multiply(Module):
    source_count = 2

    def evaluate(self, x, y, z):
        return self._source(0, x, y, z) * self._source(1, x, y, z)


class Power(Module):
    source_count = 2

    def evaluate(self, x, y, z):
        with np.errstate(invalid="ignore", divide="ignore", over="ignore"):
            return np.power(self._source(0, x, y, z), self._source(1, x, y, z))


class Clamp(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.lower_bound = -1.0
        self.upper_bound = 1.0

    def set_bounds(self, lower: float, upper: float) -> None:
        if lower > upper:
            raise ModuleError(f"Lower bound {lower} is greater than upper bound {upper}")
        self.lower_bound, self.upper_bound = lower, upper

    def evaluate(self, x, y, z):
        return np.clip(self._source(0, x, y, z), self.lower_bound, self.upper_bound)


class Exponent(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.exponent = 1.0

    def set_exponent(self, exponent: float) -> None:
        self.exponent = exponent

    def evaluate(self, x, y, z):
        value = self._source(0, x, y, z)
        with np.errstate(divide="ignore", over="ignore"):
            return np.power(np.abs((value + 1.0) / 2.0), self.exponent) * 2.0 - 1.0


class ScaleBias(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.scale = 1.0
        self.bias = 0.0

    def set_scale(self, scale: float) -> None:
        self.scale = scale

    def set_bias(self, bias: float) -> None:
        self.bias = bias

    def evaluate(self, x, y, z):
        return self._source(0, x, y, z) * self.scale + self.bias


class Cache(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self._cached = None

    def set_source_module(self, index: int, module: Module) -> None:
        super().set_source_module(index, module)
        self._cached = None

    def evaluate(self, x, y, z):
        cached = self._cached
        if cached is not None:
            cx, cy, cz, value = cached
            if (
                cx.shape == x.shape
                and np.array_equal(cx, x)
                and np.array_equal(cy, y)
                and np.array_equal(cz, z)
            ):
                return value
        value = self._source(0, x, y, z)
        self._cached = (np.array(x), np.array(y), np.array(z), value)
        return value

    def __getstate__(self):
        # Copies start cold.
        state = dict(self.__dict__)
        state["_cached"] = None
        return state


class Blend(Module):
    source_count = 3

    def set_control_module(self, module: Module) -> None:
        self.set_source_module(2, module)

    def evaluate(self, x, y, z):
        v0 = self._source(0, x, y, z)
        v1 = self._source(1, x, y, z)
        alpha = (self._source(2, x, y, z) + 1.0) / 2.0
        return lerp(v0, v1, alpha)


class Select(Module):
    source_count = 3

    def __init__(self):
        super().__init__()
        self.lower_bound = -1.0
        self.upper_bound = 1.0
        self.edge_falloff = 0.0

    def set_control_module(self, module: Module) -> None:
        self.set_source_module(2, module)

    def set_bounds(self, lower: float, upper: float) -> None:
        if lower > upper:
            raise ModuleError(f"Lower bound {lower} is greater than upper bound {upper}")
        self.lower_bound, self.upper_bound = lower, upper
        self.set_edge_falloff(self.edge_falloff)

    def set_edge_falloff(self, falloff: float) -> None:
        half = (self.upper_bound - self.lower_bound) / 2.0
        self.edge_falloff = half if falloff > half else falloff

    def evaluate(self, x, y, z):
        control = self._source(2, x, y, z)
        v0 = self._source(0, x, y, z)
        v1 = self._source(1, x, y, z)
        lower, upper, falloff = self.lower_bound, self.upper_bound, self.edge_falloff
        if falloff <= 0.0:
            return np.where((control < lower) | (control > upper), v0, v1)

        with np.errstate(invalid="ignore", divide="ignore"):
            low_alpha = s_curve3((control - (lower - falloff)) / (2.0 * falloff))
            high_alpha = s_curve3((control - (upper - falloff)) / (2.0 * falloff))
        return np.select(
            [
                control < lower - falloff,
                control < lower + falloff,
                control < upper - falloff,
                control < upper + falloff,
            ],
            [v0, lerp(v0, v1, low_alpha), v1, lerp(v1, v0, high_alpha)],
            default=v0,
        )


class Curve(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.control_points: List[Tuple[float, float]] = []

    def add_control_point(self, input_value: float, output_value: float) -> None:
        if any(p[0] == input_value for p in self.control_points):
            raise ModuleError(f"Curve already has a control point at {input_value}")
        self.control_points.append((input_value, output_value))
        self.control_points.sort()

    def clear_all_control_points(self) -> None:
        self.control_points = []

    def evaluate(self, x, y, z):
        value = self._source(0, x, y, z)
        count = len(self.control_points)
        if count < 4:
            return value
        inputs = np.array([p[0] for p in self.control_points])
        outputs = np.array([p[1] for p in self.control_points])
        pos = np.searchsorted(inputs, value, side="right")
        i0 = np.clip(pos - 2, 0, count - 1)
        i1 = np.clip(pos - 1, 0, count - 1)
        i2 = np.clip(pos, 0, count - 1)
        i3 = np.clip(pos + 1, 0, count - 1)
        span = inputs[i2] - inputs[i1]
        with np.errstate(invalid="ignore", divide="ignore"):
            alpha = np.where(span == 0.0, 0.0, (value - inputs[i1]) / span)
        curved = cubic_interp(outputs[i0], outputs[i1], outputs[i2], outputs[i3], alpha)
        return np.where(i1 == i2, outputs[i1], curved)


class Terrace(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.control_points: List[float] = []
        self.inverted = False

    def add_control_point(self, value: float) -> None:
        if value in self.control_points:
            raise ModuleError(f"Terrace already has a control point at {value}")
        self.control_points.append(value)
        self.control_points.sort()

    def clear_all_control_points(self) -> None:
        self.control_points = []

    def invert_terraces(self, invert: bool = True) -> None:
        self.inverted = invert

    def is_terraces_inverted(self) -> bool:
        return self.inverted

    def make_control_points(self, count: int) -> None:
        if not 2 <= count <= MAX_TERRACE_POINTS:
            raise ModuleError(
                f"Terrace control point count must be within 2..{MAX_TERRACE_POINTS}, got {count}"
            )
        step = 2.0 / (count - 1.0)
        self.control_points = [-1.0 + i * step for i in range(count)]

    def evaluate(self, x, y, z):
        value = self._source(0, x, y, z)
        count = len(self.control_points)
        if count < 2:
            return value
        points = np.array(self.control_points)
        pos = np.searchsorted(points, value, side="right")
        i0 = np.clip(pos - 1, 0, count - 1)
        i1 = np.clip(pos, 0, count - 1)
        v0, v1 = points[i0], points[i1]
        with np.errstate(invalid="ignore", divide="ignore"):
            alpha = np.where(v1 == v0, 0.0, (value - v0) / (v1 - v0))
        if self.inverted:
            alpha = 1.0 - alpha
            v0, v1 = v1, v0
        alpha = alpha * alpha
        return np.where(i0 == i1, points[i1], lerp(v0, v1, alpha))


# --- Transformers ---


class Displace(Module):
    source_count = 4

    def set_displace_modules(self, x_module: Module, y_module: Module, z_module: Module) -> None:
        self.set_source_module(1, x_module)
        self.set_source_module(2, y_module)
        self.set_source_module(3, z_module)

    def set_x_displace_module(self, module: Module) -> None:
        self.set_source_module(1, module)

    def set_y_displace_module(self, module: Module) -> None:
        self.set_source_module(2, module)

    def set_z_displace_module(self, module: Module) -> None:
        self.set_source_module(3, module)

    def evaluate(self, x, y, z):
        dx = x + self._source(1, x, y, z)
        dy = y + self._source(2, x, y, z)
        dz = z + self._source(3, x, y, z)
        return self._source(0, dx, dy, dz)


class RotatePoint(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.set_angles(0.0, 0.0, 0.0)

    def set_angles(self, x_angle: float, y_angle: float, z_angle: float) -> None:
        x_cos, y_cos, z_cos = (math.cos(math.radians(a)) for a in (x_angle, y_angle, z_angle))
        x_sin, y_sin, z_sin = (math.sin(math.radians(a)) for a in (x_angle, y_angle, z_angle))
        self.matrix = np.array(
            [
                [y_sin * x_sin * z_sin + y_cos * z_cos, x_cos * z_sin, y_sin * z_cos - y_cos * x_sin * z_sin],
                [y_sin * x_sin * z_cos - y_cos * z_sin, x_cos * z_cos, -y_cos * x_sin * z_cos - y_sin * z_sin],
                [-y_sin * x_cos, x_sin, y_cos * x_cos],
            ]
        )
        self.x_angle, self.y_angle, self.z_angle = x_angle, y_angle, z_angle

    def set_x_angle(self, angle: float) -> None:
        self.set_angles(angle, self.y_angle, self.z_angle)

    def set_y_angle(self, angle: float) -> None:
        self.set_angles(self.x_angle, angle, self.z_angle)

    def set_z_angle(self, angle: float) -> None:
        self.set_angles(self.x_angle, self.y_angle, angle)

    def evaluate(self, x, y, z):
        m = self.matrix
        nx = m[0, 0] * x + m[0, 1] * y + m[0, 2] * z
        ny = m[1, 0] * x + m[1, 1] * y + m[1, 2] * z
        nz = m[2, 0] * x + m[2, 1] * y + m[2, 2] * z
        return self._source(0, nx, ny, nz)


class ScalePoint(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.x_scale = self.y_scale = self.z_scale = 1.0

    def set_scale(self, x_scale: float, y_scale: float, z_scale: float) -> None:
        self.x_scale, self.y_scale, self.z_scale = x_scale, y_scale, z_scale

    def set_x_scale(self, scale: float) -> None:
        self.x_scale = scale

    def set_y_scale(self, scale: float) -> None:
        self.y_scale = scale

    def set_z_scale(self, scale: float) -> None:
        self.z_scale = scale

    def evaluate(self, x, y, z):
        return self._source(0, x * self.x_scale, y * self.y_scale, z * self.z_scale)


class TranslatePoint(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.x_translation = self.y_translation = self.z_translation = 0.0

    def set_translation(self, x: float, y: float, z: float) -> None:
        self.x_translation, self.y_translation, self.z_translation = x, y, z

    def set_x_translation(self, value: float) -> None:
        self.x_translation = value

    def set_y_translation(self, value: float) -> None:
        self.y_translation = value

    def set_z_translation(self, value: float) -> None:
        self.z_translation = value

    def evaluate(self, x, y, z):
        return self._source(
            0, x + self.x_translation, y + self.y_translation, z + self.z_translation
        )


class Turbulence(Module):
    source_count = 1

    def __init__(self):
        super().__init__()
        self.power = 1.0
        self._x_distort, self._y_distort, self._z_distort = Perlin(), Perlin(), Perlin()
        self.set_seed(0)
        self.set_frequency(1.0)
        self.set_roughness(3)

    @property
    def frequency(self) -> float:
        return self._x_distort.frequency

    @property
    def roughness(self) -> int:
        return self._x_distort.octave_count

    @property
    def seed(self) -> int:
        return self._x_distort.seed

    def _distorters(self):
        return (self._x_distort, self._y_distort, self._z_distort)

    def set_frequency(self, frequency: float) -> None:
        for module in self._distorters():
            module.set_frequency(frequency)

    def set_power(self, power: float) -> None:
        self.power = power

    def set_roughness(self, roughness: int) -> None:
        for module in self._distorters():
            module.set_octave_count(roughness)

    def set_seed(self, seed: int) -> None:
        for offset, module in enumerate(self._distorters()):
            module.set_seed(seed + offset)

    def evaluate(self, x, y, z):
        x0, y0, z0 = x + 12414.0 / 65536.0, y + 65124.0 / 65536.0, z + 31337.0 / 65536.0
        x1, y1, z1 = x + 26519.0 / 65536.0, y + 18128.0 / 65536.0, z + 60493.0 / 65536.0
        x2, y2, z2 = x + 53820.0 / 65536.0, y + 11213.0 / 65536.0, z + 44845.0 / 65536.0
        dx = x + self._x_distort.evaluate(x0, y0, z0) * self.power
        dy = y + self._y_distort.evaluate(x1, y1, z1) * self.power
        dz = z + self._z_distort.evaluate(x2, y2, z2) * self.power
        return self._source(0, dx, dy, dz)


MODULE_TYPES: Dict[str, Type[Module]] = {
    "abs": Abs,
    "add": Add,
    "billow": Billow,
    "blend": Blend,
    "cache": Cache,
    "checkerboard": Checkerboard,
    "clamp": Clamp,
    "const": Const,
    "curve": Curve,
    "cylinders": Cylinders,
    "displace": Displace,
    "exponent": Exponent,
    "invert": Invert,
    "max": Max,
    "min": Min,
    "multiply": Multiply,
    "perlin": Perlin,
    "power": Power,
    "ridgedmulti": RidgedMulti,
    "rotatepoint": RotatePoint,
    "scalebias": ScaleBias,
    "scalepoint": ScalePoint,
    "select": Select,
    "spheres": Spheres,
    "terrace": Terrace,
    "translatepoint": TranslatePoint,
    "turbulence": Turbulence,
    "voronoi": Voronoi,
}


def create_module(kind: str) -> Module:
    try:
        module_type = MODULE_TYPES[str(getattr(kind, "value", kind))]
    except KeyError:
        raise ModuleError(f"Unknown module kind '{kind}'") from None
    return module_type()
