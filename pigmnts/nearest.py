from typing import Sequence, Tuple, Union

import numpy as np

from pigmnts.color import LAB, delta_e_94
from pigmnts.errors import NaNDistanceError


def _as_lab_array(colors: Union[np.ndarray, Sequence[LAB]]) -> np.ndarray:
    if isinstance(colors, np.ndarray):
        return colors.astype(np.float64, copy=False).reshape(-1, 3)
    return np.array([c.to_array() for c in colors], dtype=np.float64).reshape(-1, 3)


def nearest_batch(samples: np.ndarray, means: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Find the closest mean for every sample.

    Each sample is the reference color of its Delta-E comparison. Ties go to
    the lowest mean index.

    Args:
        samples (np.ndarray): LAB samples, shape (N, 3).
        means (np.ndarray): Candidate means, shape (K, 3) with K >= 1.

    Returns:
        Tuple[np.ndarray, np.ndarray]: (indices of shape (N,), distances of shape (N,)).

    Raises:
        NaNDistanceError: If any distance is NaN.
    """
    if len(means) == 0:
        raise ValueError("nearest_batch() needs at least one mean")

    # One column per mean keeps temporaries at O(N) instead of O(N * K)
    distances = np.empty((len(samples), len(means)), dtype=np.float64)
    for j, mean in enumerate(means):
        distances[:, j] = delta_e_94(samples, mean)
    if np.isnan(distances).any():
        raise NaNDistanceError("NaN encountered while computing color distances")

    indices = np.argmin(distances, axis=1)
    return indices, distances[np.arange(len(samples)), indices]


def nearest(color: LAB, means: Union[np.ndarray, Sequence[LAB]]) -> Tuple[int, float]:
    """Index and distance of the mean closest to `color` (first minimum wins)."""
    sample = color.to_array().reshape(1, 3)
    indices, distances = nearest_batch(sample, _as_lab_array(means))
    return int(indices[0]), float(distances[0])
