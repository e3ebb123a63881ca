"""
Plain RGBA samples with a Euclidean distance.

`RGBA` holds unsigned 8-bit channels; subtracting two of them gives an
`RGBADelta` with signed channels, so no arithmetic ever wraps silently.
"""
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from pigmnts.errors import NaNDistanceError


@dataclass(frozen=True)
class RGBADelta:
    r: int
    g: int
    b: int
    a: int

    def to_rgba(self) -> "RGBA":
        """Narrow back to 8 bits, wrapping like an unsigned cast."""
        return RGBA(self.r & 0xFF, self.g & 0xFF, self.b & 0xFF, self.a & 0xFF)

    def norm(self) -> float:
        return math.sqrt(self.r ** 2 + self.g ** 2 + self.b ** 2 + self.a ** 2)


@dataclass(frozen=True)
class RGBA:
    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self):
        for channel in (self.r, self.g, self.b, self.a):
            if not 0 <= channel <= 255:
                raise ValueError(f"RGBA channels must be in 0-255, got {self}")

    def __sub__(self, other: "RGBA") -> RGBADelta:
        return RGBADelta(self.r - other.r, self.g - other.g, self.b - other.b, self.a - other.a)

    def to_delta(self) -> RGBADelta:
        return RGBADelta(self.r, self.g, self.b, self.a)

    def brightness(self) -> float:
        return 0.2126 * self.r + 0.7152 * self.g + 0.0722 * self.b

    def distance(self, other: "RGBA") -> float:
        return (self - other).norm()

    def nearest(self, colors: Sequence["RGBA"]) -> Tuple[int, float]:
        """Index and distance of the closest color; the first minimum wins."""
        if not colors:
            raise ValueError("nearest() needs at least one color")

        best_index, best_distance = 0, math.inf
        for index, color in enumerate(colors):
            d = self.distance(color)
            if math.isnan(d):
                raise NaNDistanceError("NaN encountered while computing color distances")
            if d < best_distance:
                best_index, best_distance = index, d
        return best_index, best_distance

    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}{self.a:02X}"
