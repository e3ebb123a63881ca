import json
import logging
import re
from pathlib import Path
from typing import Dict, Optional, Sequence

from PIL import Image, PngImagePlugin

from pigmnts.palette import PaletteColor

logger = logging.getLogger(__name__)

SOFTWARE_TAG = "pigmnts"


def _clean_key(key: str) -> str:
    key_clean = re.sub(r"\s+", "_", key)
    key_clean = re.sub(r"[^a-zA-Z0-9_.-]", "", key_clean)
    if not re.match(r"^[a-zA-Z_]", key_clean):
        key_clean = "pigmnts_" + key_clean
    # tEXt keywords are limited to 79 bytes, leave room for the prefix
    return key_clean[:70]


def save_palette_png(
    image_to_save: Image.Image,
    output_path: Path,
    command_line_invocation: Optional[str] = None,
    additional_metadata: Optional[Dict[str, str]] = None,
) -> Path:
    """
    Saves a PIL Image object as a PNG file, embedding metadata as tEXt chunks.

    Keys are written as `pigmnts:<key>`; the command line, when given, goes
    under `pigmnts:command_line`.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    png_info = PngImagePlugin.PngInfo()
    png_info.add_text("Software", SOFTWARE_TAG)
    if command_line_invocation:
        png_info.add_text("pigmnts:command_line", command_line_invocation)

    for key, value in (additional_metadata or {}).items():
        png_info.add_text(f"pigmnts:{_clean_key(key)}", str(value))

    image_to_save.save(output_path, "PNG", pnginfo=png_info)
    logger.debug("Wrote %s", output_path)
    return output_path


def save_palette_json(palette: Sequence[PaletteColor], output_path: Path, source: Optional[str] = None) -> Path:
    """Write the palette as JSON: {"source": ..., "colors": [PaletteColor.to_dict(), ...]}."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    document = {"source": source, "colors": [color.to_dict() for color in palette]}
    output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    logger.debug("Wrote %s", output_path)
    return output_path
