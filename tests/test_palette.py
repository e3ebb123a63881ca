import re

import pytest

from pigmnts.color import HSL, LAB, RGB
from pigmnts.palette import PaletteColor, assemble_palette


def test_palette_color_formats_a_mean():
    mean = LAB.from_rgb(RGB(30, 144, 255))

    color = PaletteColor.from_mean(mean, 0.25)

    assert re.fullmatch(r"#[0-9A-F]{6}", color.hex)
    assert color.rgb == RGB.from_lab(mean)
    assert color.hex == color.rgb.hex()
    assert color.hsl == HSL.from_rgb(color.rgb)
    assert color.lab == mean
    assert color.dominance_percent == pytest.approx(25.0)


def test_to_dict_shape():
    color = PaletteColor.from_mean(LAB.from_rgb(RGB(0, 0, 0)), 1.0)

    data = color.to_dict()

    assert data == {
        "dominance": 1.0,
        "hex": "#000000",
        "rgb": {"r": 0, "g": 0, "b": 0},
        "hsl": {"h": 0.0, "s": 0.0, "l": 0.0},
    }


def test_assemble_palette_orders_by_dominance():
    entries = [
        (LAB(10.0, 0.0, 0.0), 0.2),
        (LAB(50.0, 0.0, 0.0), 0.5),
        (LAB(90.0, 0.0, 0.0), 0.3),
    ]

    palette = assemble_palette(entries)

    assert [c.dominance for c in palette] == [0.5, 0.3, 0.2]
    assert [c.lab.l for c in palette] == [50.0, 90.0, 10.0]


def test_assemble_palette_keeps_ties_and_input_order_when_unsorted():
    entries = [(LAB(10.0, 0.0, 0.0), 0.5), (LAB(90.0, 0.0, 0.0), 0.5)]

    assert [c.lab.l for c in assemble_palette(entries)] == [10.0, 90.0]
    assert [c.lab.l for c in assemble_palette(list(reversed(entries)), sort=False)] == [90.0, 10.0]
