"""
Color space conversions (RGB, XYZ, LAB, HSL) and the Delta-E 1994 distance.

RGB <-> XYZ <-> LAB follow the easyrgb.com formulas with the Adobe-like
primaries below; the LAB branch uses Lindbloom's continuity-corrected
constants. The numpy kernels operate on arrays of shape (..., 3) and do the
actual arithmetic; the small dataclasses are convenience wrappers for single
colors and delegate to the kernels so both paths agree bit for bit.
"""
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

GAMMA = 2.19921875
KAPPA = 24389.0 / 27.0
EPSILON = 216.0 / 24389.0
EPSILON_CUBE_ROOT = 0.20689655172413796

REFERENCE_WHITE = np.array([95.047, 100.0, 108.883])

RGB_TO_XYZ = np.array([
    [0.57667, 0.18555, 0.18819],
    [0.29738, 0.62735, 0.07527],
    [0.02703, 0.07069, 0.99110],
])

# Exact inverse. The 5-decimal published inverse leaks up to 3 levels into
# zero channels of saturated colors, e.g. pure red comes back with g=3.
XYZ_TO_RGB = np.linalg.inv(RGB_TO_XYZ)


def rgb_to_xyz(rgb) -> np.ndarray:
    """
    Convert 8-bit RGB values to XYZ tristimulus values.

    Args:
        rgb (array-like): Array of shape (..., 3) holding channels in 0-255.

    Returns:
        np.ndarray: float64 array of shape (..., 3).
    """
    channels = np.asarray(rgb, dtype=np.float64)
    linear = np.power(channels / 255.0, GAMMA) * 100.0
    return linear @ RGB_TO_XYZ.T


def xyz_to_rgb(xyz) -> np.ndarray:
    """
    Convert XYZ values back to 8-bit RGB.

    Channels are truncated, not rounded. Out-of-gamut values saturate:
    negative (or NaN) linear values become 0 and anything above 255 becomes 255.

    Returns:
        np.ndarray: uint8 array of shape (..., 3).
    """
    linear = (np.asarray(xyz, dtype=np.float64) / 100.0) @ XYZ_TO_RGB.T
    linear = np.clip(np.nan_to_num(linear, nan=0.0), 0.0, None)
    channels = np.power(linear, 1.0 / GAMMA) * 255.0
    return np.clip(np.trunc(channels), 0, 255).astype(np.uint8)


def _lab_f(t: np.ndarray) -> np.ndarray:
    return np.where(t > EPSILON, np.cbrt(t), (KAPPA * t + 16.0) / 116.0)


def xyz_to_lab(xyz) -> np.ndarray:
    f = _lab_f(np.asarray(xyz, dtype=np.float64) / REFERENCE_WHITE)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]
    return np.stack([116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)], axis=-1)


def lab_to_xyz(lab) -> np.ndarray:
    lab = np.asarray(lab, dtype=np.float64)
    l, a, b = lab[..., 0], lab[..., 1], lab[..., 2]

    fy = (l + 16.0) / 116.0
    fx = a / 500.0 + fy
    fz = fy - b / 200.0

    x = np.where(fx > EPSILON_CUBE_ROOT, fx ** 3, (fx * 116.0 - 16.0) / KAPPA)
    y = np.where(l > EPSILON * KAPPA, fy ** 3, l / KAPPA)
    z = np.where(fz > EPSILON_CUBE_ROOT, fz ** 3, (fz * 116.0 - 16.0) / KAPPA)

    return np.stack([x, y, z], axis=-1) * REFERENCE_WHITE


def rgb_to_lab(rgb) -> np.ndarray:
    """Convert an (..., 3) array of 8-bit RGB values to LAB (float64)."""
    return xyz_to_lab(rgb_to_xyz(rgb))


def lab_to_rgb(lab) -> np.ndarray:
    """Convert an (..., 3) array of LAB values to truncated 8-bit RGB."""
    return xyz_to_rgb(lab_to_xyz(lab))


def delta_e_94(reference, other) -> np.ndarray:
    """
    Delta-E 1994 between `reference` and `other`, broadcasting over leading axes.

    The chroma weighting uses the chroma of `reference` only, so the metric is
    not symmetric: delta_e_94(x, y) != delta_e_94(y, x) in general.

    Args:
        reference (array-like): LAB colors of shape (..., 3).
        other (array-like): LAB colors broadcastable against `reference`.

    Returns:
        np.ndarray: Distances with the broadcast leading shape. NaN inputs give NaN.
    """
    reference = np.asarray(reference, dtype=np.float64)
    other = np.asarray(other, dtype=np.float64)

    c1 = np.sqrt(reference[..., 1] ** 2 + reference[..., 2] ** 2)
    c2 = np.sqrt(other[..., 1] ** 2 + other[..., 2] ** 2)
    dl = other[..., 0] - reference[..., 0]
    dc = c2 - c1
    de_sq = np.sum((reference - other) ** 2, axis=-1)

    # Cancellation can push this slightly below zero
    dh = np.sqrt(np.maximum(de_sq - dl ** 2 - dc ** 2, 0.0))

    dc = dc / (1.0 + 0.045 * c1)
    dh = dh / (1.0 + 0.015 * c1)
    return np.sqrt(dl ** 2 + dc ** 2 + dh ** 2)


@dataclass(frozen=True)
class RGB:
    r: int
    g: int
    b: int

    @classmethod
    def from_array(cls, values) -> "RGB":
        r, g, b = (int(v) for v in values)
        return cls(r, g, b)

    @classmethod
    def from_lab(cls, color: "LAB") -> "RGB":
        return cls.from_array(lab_to_rgb(color.to_array()))

    @classmethod
    def from_hex(cls, value: str) -> "RGB":
        """Parse `#RRGGBB` (the leading '#' is optional, case is ignored)."""
        digits = value.strip().lstrip("#")
        if len(digits) != 6:
            raise ValueError(f"Invalid hex color: {value!r}")
        number = int(digits, 16)
        return cls((number >> 16) & 0xFF, (number >> 8) & 0xFF, number & 0xFF)

    @classmethod
    def from_hsl(cls, color: "HSL") -> "RGB":
        grey = int(color.l * 255.0)
        if color.s == 0.0:
            return cls(grey, grey, grey)

        if color.l < 0.5:
            var_2 = color.l * (1.0 + color.s)
        else:
            var_2 = (color.l + color.s) - (color.s * color.l)
        var_1 = 2.0 * color.l - var_2

        return cls(
            int(255.0 * _hue_to_rgb(var_1, var_2, color.h + 1.0 / 3.0)),
            int(255.0 * _hue_to_rgb(var_1, var_2, color.h)),
            int(255.0 * _hue_to_rgb(var_1, var_2, color.h - 1.0 / 3.0)),
        )

    def to_array(self) -> np.ndarray:
        return np.array([self.r, self.g, self.b], dtype=np.uint8)

    def to_xyz(self) -> Tuple[float, float, float]:
        x, y, z = rgb_to_xyz(self.to_array())
        return float(x), float(y), float(z)

    def hex(self) -> str:
        """Uppercase, zero-padded `#RRGGBB`."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


def _hue_to_rgb(v1: float, v2: float, vh: float) -> float:
    if vh < 0.0:
        vh += 1.0
    if vh > 1.0:
        vh -= 1.0

    if 6.0 * vh < 1.0:
        return v1 + (v2 - v1) * 6.0 * vh
    if 2.0 * vh < 1.0:
        return v2
    if 3.0 * vh < 2.0:
        return v1 + (v2 - v1) * ((2.0 / 3.0) - vh) * 6.0
    return v1


@dataclass(frozen=True)
class LAB:
    l: float
    a: float
    b: float

    @classmethod
    def from_array(cls, values) -> "LAB":
        l, a, b = (float(v) for v in values)
        return cls(l, a, b)

    @classmethod
    def from_rgb(cls, color: RGB) -> "LAB":
        return cls.from_array(rgb_to_lab(color.to_array()))

    def to_array(self) -> np.ndarray:
        return np.array([self.l, self.a, self.b], dtype=np.float64)

    def to_xyz(self) -> Tuple[float, float, float]:
        x, y, z = lab_to_xyz(self.to_array())
        return float(x), float(y), float(z)

    def chroma(self) -> float:
        return float(np.sqrt(self.a ** 2 + self.b ** 2))

    def distance(self, other: "LAB") -> float:
        """Delta-E 1994 with `self` as the reference color."""
        return float(delta_e_94(self.to_array(), other.to_array()))

    def nearest(self, colors: Sequence["LAB"]) -> Tuple[int, float]:
        """Index and distance of the closest color in `colors`."""
        from pigmnts.nearest import nearest
        return nearest(self, colors)


@dataclass(frozen=True)
class HSL:
    h: float
    s: float
    l: float

    @classmethod
    def from_rgb(cls, color: RGB) -> "HSL":
        var_r = color.r / 255.0
        var_g = color.g / 255.0
        var_b = color.b / 255.0

        var_max = max(var_r, var_g, var_b)
        var_min = min(var_r, var_g, var_b)
        del_max = var_max - var_min
        lightness = (var_max + var_min) / 2.0

        if del_max == 0.0:
            return cls(0.0, 0.0, lightness)

        if lightness < 0.5:
            saturation = del_max / (var_max + var_min)
        else:
            saturation = del_max / (2.0 - var_max - var_min)

        del_r = (((var_max - var_r) / 6.0) + del_max / 2.0) / del_max
        del_g = (((var_max - var_g) / 6.0) + del_max / 2.0) / del_max
        del_b = (((var_max - var_b) / 6.0) + del_max / 2.0) / del_max

        if var_r == var_max:
            hue = del_b - del_g
        elif var_g == var_max:
            hue = 1.0 / 3.0 + del_r - del_b
        else:
            hue = 2.0 / 3.0 + del_g - del_r

        if hue < 0.0:
            hue += 1.0
        elif hue > 1.0:
            hue -= 1.0

        return cls(hue, saturation, lightness)

    @classmethod
    def from_lab(cls, color: LAB) -> "HSL":
        return cls.from_rgb(RGB.from_lab(color))
