import logging
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from pigmnts.color import rgb_to_lab
from pigmnts.errors import ImageLoadError
from pigmnts.kmeans import KMeansConfig, pigments_pixels
from pigmnts.palette import PaletteColor, assemble_palette
from pigmnts.weights import Mood

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = (800, 800)


def load_image(path: Union[str, Path], max_size: Optional[Tuple[int, int]] = DEFAULT_MAX_SIZE) -> Image.Image:
    """
    Open an image and prepare it for palette extraction.

    Args:
        path (str or Path): Image file to open.
        max_size (tuple, optional): Bounding box the image is shrunk to fit in,
            keeping its aspect ratio (bicubic filter). None keeps the full size.

    Returns:
        PIL.Image.Image: RGB image. Any alpha channel is dropped.

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded.
    """
    try:
        with Image.open(path) as opened:
            image = opened.convert("RGB")
    except FileNotFoundError as e:
        raise ImageLoadError(path, "file not found") from e
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(path, f"cannot decode image ({e})") from e

    if max_size:
        image.thumbnail(max_size, Image.Resampling.BICUBIC)
    logger.debug("Loaded %s as %dx%d", path, image.width, image.height)
    return image


def rgb_samples(pixels) -> np.ndarray:
    """
    Flatten pixel data into an (N, 3) uint8 array of RGB samples.

    Accepts a PIL image of any mode, an (H, W, 3|4) grid, an (N, 3|4) array of
    pixel rows, or a flat RGBA byte buffer such as canvas image data. Alpha is
    ignored. A 2-D array is always read as pixel rows; pass single-channel
    images as PIL images so they are converted to RGB first.
    """
    if isinstance(pixels, Image.Image) and pixels.mode not in ("RGB", "RGBA"):
        pixels = pixels.convert("RGB")
    data = np.asarray(pixels, dtype=np.uint8)
    if data.ndim == 1:
        if data.size % 4:
            raise ValueError(f"Flat pixel buffers must hold RGBA quadruples, got {data.size} bytes")
        data = data.reshape(-1, 4)
    elif data.ndim == 3:
        data = data.reshape(-1, data.shape[-1])

    if data.ndim != 2 or data.shape[1] not in (3, 4):
        raise ValueError(f"Unsupported pixel array shape: {np.shape(pixels)}")
    return data[:, :3]


def extract_lab_pixels(pixels) -> np.ndarray:
    """Flatten pixel data with `rgb_samples` and convert it to (N, 3) LAB samples."""
    return rgb_to_lab(rgb_samples(pixels))


def subsample(pixels: np.ndarray, batch_size: Optional[int], k: int, rng: np.random.Generator) -> np.ndarray:
    """Draw `batch_size` distinct samples when 0 < k < batch_size < len(pixels), else return `pixels`."""
    if batch_size and k < batch_size < len(pixels):
        logger.debug("Sampling %d of %d pixels", batch_size, len(pixels))
        return pixels[rng.choice(len(pixels), batch_size, replace=False)]
    return pixels


def pigments(
    pixels,
    k: int,
    mood: Union[Mood, str] = Mood.DOMINANT,
    batch_size: Optional[int] = None,
    config: Optional[KMeansConfig] = None,
    sort: bool = True,
) -> List[PaletteColor]:
    """
    Build a palette of up to `k` colors from raw RGB(A) pixel data.

    Args:
        pixels: Anything `rgb_samples` accepts.
        k (int): Palette size.
        mood (Mood or str): Weighting strategy.
        batch_size (int, optional): Cluster only this many randomly chosen pixels.
        config (KMeansConfig, optional): Clustering settings; its seed also drives sampling.
        sort (bool): Order the palette by dominance, most dominant first.

    Returns:
        List[PaletteColor]
    """
    config = config or KMeansConfig()
    samples = rgb_samples(pixels)
    samples = subsample(samples, batch_size, k, np.random.default_rng(config.seed))
    entries = pigments_pixels(extract_lab_pixels(samples), k, mood, config)
    return assemble_palette(entries, sort=sort)


def palette_from_image(
    path: Union[str, Path],
    count: int,
    mood: Union[Mood, str] = Mood.DOMINANT,
    batch_size: Optional[int] = None,
    config: Optional[KMeansConfig] = None,
    max_size: Optional[Tuple[int, int]] = DEFAULT_MAX_SIZE,
) -> Tuple[List[PaletteColor], int]:
    """
    Load an image and extract its palette, most dominant color first.

    Returns:
        Tuple[List[PaletteColor], int]: The palette and the clustering time in milliseconds.
    """
    image = load_image(path, max_size=max_size)

    start = time.perf_counter()
    palette = pigments(image, count, mood=mood, batch_size=batch_size, config=config)
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    logger.info("Built a %d-color palette from %s in %dms", len(palette), path, elapsed_ms)
    return palette, elapsed_ms
