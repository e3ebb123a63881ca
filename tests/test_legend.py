# tests/test_legend.py
from PIL import Image
import numpy as np
from pigmnts import legend
from pigmnts.color import LAB, RGB
from pigmnts.palette import PaletteColor


def test_create_legend_image_returns_image(tmp_path):
    # Create a dummy palette: 3 RGB colors
    palette = [
        (255, 0, 0),    # red
        (0, 255, 0),    # green
        (0, 0, 255)     # blue
    ]

    legend_image = legend.create_legend_image(palette, font_size=12, swatch_size=20, padding=5)

    assert isinstance(legend_image, Image.Image)

    # Validate image size matches calculated expected size
    num_colors = len(palette)
    expected_width = (20 * num_colors) + (5 * (num_colors + 1))
    expected_height = 20 + (2 * 5)
    assert legend_image.size == (expected_width, expected_height)

    outpath = tmp_path / "legend_test_output.png"
    legend_image.save(outpath)
    assert outpath.exists()


def test_create_legend_image_with_empty_palette():
    assert legend.create_legend_image([]) is None


def test_create_legend_image_handles_numpy_palette():
    palette = np.array([
        [255, 255, 0],
        [0, 255, 255]
    ], dtype=np.uint8)

    img = legend.create_legend_image(palette, font_size=10, swatch_size=15, padding=2)
    assert isinstance(img, Image.Image)
    assert img.size[1] == 15 + (2 * 2)


def test_create_legend_image_from_palette_colors():
    palette = [
        PaletteColor.from_mean(LAB.from_rgb(RGB(20, 20, 20)), 0.7),
        PaletteColor.from_mean(LAB.from_rgb(RGB(240, 240, 240)), 0.3),
    ]

    img = legend.create_legend_image(palette, swatch_size=30, padding=4)

    # Swatch corner pixel carries the palette color
    assert img.getpixel((4 + 2, 4 + 2)) == (palette[0].rgb.r, palette[0].rgb.g, palette[0].rgb.b)
    x_second = 4 + 30 + 4
    assert img.getpixel((x_second + 2, 4 + 2)) == (palette[1].rgb.r, palette[1].rgb.g, palette[1].rgb.b)
