from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from pigmnts.color import HSL, LAB, RGB


@dataclass(frozen=True)
class PaletteColor:
    """A palette entry ready for presentation."""

    dominance: float
    hex: str
    rgb: RGB
    hsl: HSL
    lab: LAB

    @classmethod
    def from_mean(cls, mean: LAB, dominance: float) -> "PaletteColor":
        rgb = RGB.from_lab(mean)
        return cls(
            dominance=float(dominance),
            hex=rgb.hex(),
            rgb=rgb,
            hsl=HSL.from_rgb(rgb),
            lab=mean,
        )

    @property
    def dominance_percent(self) -> float:
        return self.dominance * 100.0

    def to_dict(self) -> Dict[str, object]:
        """Plain mapping for JSON or any other host runtime."""
        return {
            "dominance": self.dominance,
            "hex": self.hex,
            "rgb": {"r": self.rgb.r, "g": self.rgb.g, "b": self.rgb.b},
            "hsl": {"h": self.hsl.h, "s": self.hsl.s, "l": self.hsl.l},
        }


def assemble_palette(entries: Iterable[Tuple[LAB, float]], sort: bool = True) -> List[PaletteColor]:
    """
    Turn (mean, dominance) pairs into PaletteColor objects.

    Args:
        entries: Pairs as returned by `pigments_pixels`.
        sort (bool): If True, order by dominance, most dominant first. Ties keep input order.

    Returns:
        List[PaletteColor]
    """
    palette = [PaletteColor.from_mean(mean, dominance) for mean, dominance in entries]
    if sort:
        palette.sort(key=lambda color: color.dominance, reverse=True)
    return palette
