"""
Weighting strategies ("moods") for the centroid update.

A mood resolves to a weight function that takes LAB colors as an array of
shape (..., 3) and returns a positive weight per color, shape (...). Adding a
mood means adding a member to `Mood` and an entry to `_WEIGHT_FUNCTIONS`; the
clustering engine only ever sees the resolved function.
"""
from enum import Enum
from typing import Callable, Dict, Union

import numpy as np

from pigmnts.errors import InvalidConfigurationError

WeightFn = Callable[[np.ndarray], np.ndarray]


class Mood(str, Enum):
    DOMINANT = "dominant"


def dominant(lab: np.ndarray) -> np.ndarray:
    # Every color counts the same
    return np.ones(np.shape(lab)[:-1], dtype=np.float64)


_WEIGHT_FUNCTIONS: Dict[Mood, WeightFn] = {
    Mood.DOMINANT: dominant,
}


def resolve_mood(mood: Union[Mood, str]) -> WeightFn:
    """
    Return the weight function for `mood`.

    Args:
        mood (Mood or str): A `Mood` member or its value (e.g. "dominant").

    Raises:
        InvalidConfigurationError: If the mood is unknown.
    """
    try:
        return _WEIGHT_FUNCTIONS[Mood(mood)]
    except (ValueError, KeyError) as e:
        raise InvalidConfigurationError(f"Unknown mood: {mood!r}") from e
