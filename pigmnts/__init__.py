"""Perceptual color palette extraction with weighted k-means++ in CIE LAB."""

from pigmnts.color import HSL, LAB, RGB
from pigmnts.errors import ImageLoadError, InvalidConfigurationError, NaNDistanceError, PigmntsError
from pigmnts.image import extract_lab_pixels, palette_from_image, pigments
from pigmnts.kmeans import KMeansConfig, pigments_pixels
from pigmnts.palette import PaletteColor, assemble_palette
from pigmnts.weights import Mood, resolve_mood

__version__ = "0.1.0"

__all__ = [
    "HSL",
    "LAB",
    "RGB",
    "ImageLoadError",
    "InvalidConfigurationError",
    "NaNDistanceError",
    "PigmntsError",
    "extract_lab_pixels",
    "palette_from_image",
    "pigments",
    "KMeansConfig",
    "pigments_pixels",
    "PaletteColor",
    "assemble_palette",
    "Mood",
    "resolve_mood",
]
