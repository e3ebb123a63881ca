import os
from typing import Optional, Sequence, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from pigmnts.palette import PaletteColor
from pigmnts.rgba import RGBA

ColorLike = Union[PaletteColor, Sequence[int]]

DARK_TEXT = (0, 0, 0)
LIGHT_TEXT = (255, 255, 255)


def _fill_color(color_data: ColorLike) -> Tuple[int, int, int]:
    if isinstance(color_data, PaletteColor):
        return color_data.rgb.r, color_data.rgb.g, color_data.rgb.b
    if hasattr(color_data, "tolist"):  # numpy rows
        color_data = color_data.tolist()
    r, g, b = (int(c) for c in color_data[:3])
    return r, g, b


def _load_font(font_path: Optional[str], font_size: int):
    if font_path and os.path.isfile(font_path):
        try:
            return ImageFont.truetype(font_path, font_size)
        except OSError:
            pass  # fall back to the default font below
    return ImageFont.load_default(size=font_size)


def create_legend_image(palette: Sequence[ColorLike], font_path=None, font_size=14, swatch_size=40, padding=10):
    """
    Creates a palette legend PIL Image object: one numbered swatch per color.

    Args:
        palette (list): PaletteColor objects or RGB tuples/arrays.
        font_path (str, optional): Path to a TTF font file.
        font_size (int): Font size for the index numbers.
        swatch_size (int): Width/height of each color swatch.
        padding (int): Space around elements and between swatches.

    Returns:
        PIL.Image.Image: The generated legend image, or None if the palette is empty.
    """
    num_colors = len(palette)
    if num_colors == 0:
        return None

    width = (swatch_size * num_colors) + (padding * (num_colors + 1))
    height = swatch_size + (2 * padding)

    image = Image.new("RGB", (width, height), color=(255, 255, 255))
    draw = ImageDraw.Draw(image)
    font = _load_font(font_path, font_size)

    for idx, color_data in enumerate(palette):
        x_start = padding + idx * (swatch_size + padding)
        y_start = padding
        fill_color = _fill_color(color_data)

        draw.rectangle(
            [x_start, y_start, x_start + swatch_size, y_start + swatch_size],
            fill=fill_color,
            outline=(0, 0, 0),
        )

        # Light digits on dark swatches
        text_fill = LIGHT_TEXT if RGBA(*fill_color).brightness() < 128 else DARK_TEXT

        text_content = str(idx)
        left, top, right, bottom = font.getbbox(text_content)
        text_x = x_start + (swatch_size - (right - left)) / 2.0 - left
        text_y = y_start + (swatch_size - (bottom - top)) / 2.0 - top
        draw.text((text_x, text_y), text_content, fill=text_fill, font=font)

    return image
