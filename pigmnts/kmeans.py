"""
Weighted k-means++ clustering of LAB colors.

Seeding follows k-means++ (squared Delta-E weighted draws). The Lloyd loop
then alternates a parallel assignment phase, run on a thread pool that is
created and joined every iteration, with a single-threaded weighted centroid
update. numpy releases the GIL inside the distance kernels, so the workers
really do run side by side.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

import numpy as np

from pigmnts.color import LAB, delta_e_94
from pigmnts.errors import InvalidConfigurationError
from pigmnts.nearest import nearest_batch
from pigmnts.weights import Mood, WeightFn, resolve_mood

logger = logging.getLogger(__name__)

PaletteEntries = List[Tuple[LAB, float]]


@dataclass
class KMeansConfig:
    max_iterations: int = 300
    tolerance: float = 1e-4
    workers: int = 5
    seed: Optional[int] = None


def _validate(pixels: np.ndarray, k: int, config: KMeansConfig) -> None:
    if pixels.ndim != 2 or pixels.shape[1] != 3:
        raise InvalidConfigurationError(f"Expected LAB samples of shape (N, 3), got {pixels.shape}")
    if len(pixels) == 0:
        raise InvalidConfigurationError("Cannot build a palette from an empty sample set")
    if k < 1:
        raise InvalidConfigurationError(f"Palette size must be at least 1, got {k}")
    if k > len(pixels):
        raise InvalidConfigurationError(
            f"Palette size {k} exceeds the number of samples ({len(pixels)})"
        )
    if config.workers < 1:
        raise InvalidConfigurationError(f"workers must be at least 1, got {config.workers}")
    if config.max_iterations < 1:
        raise InvalidConfigurationError(f"max_iterations must be at least 1, got {config.max_iterations}")
    if config.tolerance < 0:
        raise InvalidConfigurationError(f"tolerance must not be negative, got {config.tolerance}")


def partition(n: int, workers: int) -> List[Tuple[int, int]]:
    """
    Split `n` samples into `workers` contiguous [start, stop) ranges.

    Every range has ceil(n / workers) samples except the tail, whose bounds
    are clamped to `n` (trailing ranges may be empty when n < workers).
    """
    chunk = -(-n // workers)
    return [(min(i * chunk, n), min((i + 1) * chunk, n)) for i in range(workers)]


def seed_means(pixels: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    """
    Pick up to `k` starting means with k-means++.

    Returns fewer than `k` rows when the squared-distance weights collapse
    (all zero or not finite), which happens when there are fewer distinct
    colors than requested means.
    """
    n = len(pixels)
    means = [pixels[rng.integers(n)]]

    for _ in range(k - 1):
        _, distances = nearest_batch(pixels, np.array(means))
        weights = distances ** 2
        total = weights.sum()
        if not np.isfinite(total) or total <= 0.0:
            break
        means.append(pixels[rng.choice(n, p=weights / total)])

    return np.array(means)


def dominance(pixels: np.ndarray, means: np.ndarray) -> PaletteEntries:
    """Pair each mean with the fraction of `pixels` whose nearest mean it is."""
    labels, _ = nearest_batch(pixels, means)
    counts = np.bincount(labels, minlength=len(means))
    return [(LAB.from_array(mean), float(count) / len(pixels)) for mean, count in zip(means, counts)]


def _assign_slice(pixels: np.ndarray, means: np.ndarray, start: int, stop: int) -> List[np.ndarray]:
    k = len(means)
    if start >= stop:
        return [np.empty(0, dtype=np.intp) for _ in range(k)]

    labels, _ = nearest_batch(pixels[start:stop], means)
    order = np.argsort(labels, kind="stable")
    counts = np.bincount(labels, minlength=k)
    return [bucket + start for bucket in np.split(order, np.cumsum(counts)[:-1])]


def assign(pixels: np.ndarray, means: np.ndarray, workers: int) -> List[np.ndarray]:
    """
    Map every sample to its nearest mean using a pool of `workers` threads.

    Each worker handles one contiguous slice and returns K buckets of sample
    indices; same-index buckets are concatenated in slice order, so the result
    does not depend on the number of workers.

    Returns:
        List[np.ndarray]: K arrays of sample indices, one per mean.
    """
    bounds = partition(len(pixels), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        partials = list(executor.map(lambda b: _assign_slice(pixels, means, b[0], b[1]), bounds))

    return [np.concatenate([partial[j] for partial in partials]) for j in range(len(means))]


def update(pixels: np.ndarray, buckets: List[np.ndarray], means: np.ndarray, weight: WeightFn) -> np.ndarray:
    """
    Recompute every mean as the weighted average of its bucket.

    An empty bucket keeps its previous mean. Weights must be strictly positive.
    """
    updated = means.copy()
    for j, bucket in enumerate(buckets):
        if len(bucket) == 0:
            logger.debug("Cluster %d is empty, keeping its previous mean", j)
            continue

        members = pixels[bucket]
        w = weight(members)
        if not np.all(w > 0.0):
            raise InvalidConfigurationError(
                f"Weight function returned non-positive or NaN weights for cluster {j}"
            )
        updated[j] = (w[:, None] * members).sum(axis=0) / w.sum()

    return updated


def pigments_pixels(
    pixels,
    k: int,
    weight: Union[Mood, str, Callable[[np.ndarray], np.ndarray]] = Mood.DOMINANT,
    config: Optional[KMeansConfig] = None,
) -> PaletteEntries:
    """
    Cluster LAB samples into a palette of `k` colors.

    Args:
        pixels (array-like): LAB samples of shape (N, 3). Not modified.
        k (int): Number of palette colors, 1 <= k <= N.
        weight (Mood, str or callable): Mood to resolve, or a weight function.
        config (KMeansConfig, optional): Iteration budget, tolerance, workers, seed.

    Returns:
        List[Tuple[LAB, float]]: (mean, dominance) pairs in cluster order.
            Fewer than `k` pairs are returned when seeding degenerates.

    Raises:
        InvalidConfigurationError: For an empty sample set, k out of range,
            an invalid config, or a weight function returning non-positive
            or NaN weights.
        NaNDistanceError: If a sample contains NaN.
    """
    config = config or KMeansConfig()
    pixels = np.asarray(pixels, dtype=np.float64)
    _validate(pixels, k, config)
    weight_fn = weight if callable(weight) else resolve_mood(weight)

    rng = np.random.default_rng(config.seed)
    means = seed_means(pixels, k, rng)
    if len(means) < k:
        logger.info("Seeding found only %d of %d distinct means, returning a smaller palette", len(means), k)
        return dominance(pixels, means)

    buckets: List[np.ndarray] = []
    for iteration in range(1, config.max_iterations + 1):
        buckets = assign(pixels, means, config.workers)
        updated = update(pixels, buckets, means, weight_fn)
        shift = delta_e_94(means, updated)
        means = updated
        if not np.any(shift > config.tolerance):
            logger.debug("Converged after %d iteration(s)", iteration)
            break
    else:
        logger.debug("Stopped at the %d-iteration budget without converging", config.max_iterations)

    n = len(pixels)
    return [(LAB.from_array(means[j]), len(buckets[j]) / n) for j in range(k)]
