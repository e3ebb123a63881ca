"""
Human-readable names for palette colors.

The hex -> name table ships as JSON inside the package. It is read and
converted to LAB the first time a name is requested, exactly once per
process, under a lock.
"""
import json
import logging
import threading
from importlib import resources
from typing import List, Optional, Tuple

import numpy as np

from pigmnts.color import LAB, RGB, rgb_to_lab
from pigmnts.nearest import nearest

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_table: Optional[Tuple[List[str], np.ndarray]] = None


def _load_table() -> Tuple[List[str], np.ndarray]:
    raw = resources.files("pigmnts").joinpath("data/colornames.json").read_text(encoding="utf-8")
    mapping = json.loads(raw)

    names = list(mapping.values())
    rgb = np.array([RGB.from_hex(value).to_array() for value in mapping], dtype=np.uint8)
    logger.debug("Loaded %d color names", len(names))
    return names, rgb_to_lab(rgb)


def color_names() -> Tuple[List[str], np.ndarray]:
    """Return (names, LAB array) of the color-name table, loading it on first use."""
    global _table
    if _table is None:
        with _lock:
            if _table is None:
                _table = _load_table()
    return _table


def reset_color_names() -> None:
    """Forget the loaded table so the next lookup reloads it."""
    global _table
    with _lock:
        _table = None


def nearest_name(color: LAB) -> str:
    """Name of the table entry closest to `color` (Delta-E 1994, `color` as reference)."""
    names, values = color_names()
    index, _ = nearest(color, values)
    return names[index]
