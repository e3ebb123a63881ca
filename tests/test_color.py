import itertools

import numpy as np
import pytest

from pigmnts.color import HSL, LAB, RGB, delta_e_94, lab_to_rgb, rgb_to_lab


def test_hex_is_uppercase_and_zero_padded():
    assert RGB(0, 10, 255).hex() == "#000AFF"
    assert RGB(1, 2, 3).hex() == "#010203"


def test_from_hex_accepts_either_case_and_optional_hash():
    assert RGB.from_hex("#ff8000") == RGB(255, 128, 0)
    assert RGB.from_hex("00FF7f") == RGB(0, 255, 127)
    with pytest.raises(ValueError):
        RGB.from_hex("#FFF")


def test_white_and_black_lab_values():
    white = LAB.from_rgb(RGB(255, 255, 255))
    black = LAB.from_rgb(RGB(0, 0, 0))

    assert white.l == pytest.approx(100.0, abs=1e-6)
    assert abs(white.a) < 0.05 and abs(white.b) < 0.05
    assert black.l == pytest.approx(0.0, abs=1e-9)
    assert black.a == pytest.approx(0.0, abs=1e-9)
    assert black.b == pytest.approx(0.0, abs=1e-9)


def test_rgb_lab_rgb_round_trip_within_one_level():
    levels = list(range(0, 256, 15)) + [255]
    grid = np.array(list(itertools.product(levels, repeat=3)), dtype=np.uint8)

    back = lab_to_rgb(rgb_to_lab(grid))

    diff = np.abs(back.astype(int) - grid.astype(int))
    assert diff.max() <= 1


@pytest.mark.parametrize("rgb", [
    RGB(255, 0, 0), RGB(0, 255, 0), RGB(0, 0, 255),
    RGB(255, 255, 0), RGB(0, 255, 255), RGB(255, 0, 255),
])
def test_saturated_colors_keep_their_zero_channels(rgb):
    back = RGB.from_lab(LAB.from_rgb(rgb))

    for original, channel in zip(rgb.to_array(), back.to_array()):
        if original == 0:
            assert channel == 0
        else:
            assert channel >= 254


def test_pure_red_round_trips_to_254():
    assert RGB.from_lab(LAB.from_rgb(RGB(255, 0, 0))) == RGB(254, 0, 0)


def test_scalar_conversions_match_array_kernels():
    rgb = RGB(12, 200, 77)
    lab = LAB.from_rgb(rgb)

    np.testing.assert_array_equal(lab.to_array(), rgb_to_lab(rgb.to_array()))
    assert RGB.from_lab(lab) == RGB.from_array(lab_to_rgb(lab.to_array()))


def test_lab_to_rgb_truncates_and_saturates():
    # Far outside the gamut on every side
    assert RGB.from_lab(LAB(150.0, 0.0, 0.0)) == RGB(255, 255, 255)
    assert RGB.from_lab(LAB(-20.0, 0.0, 0.0)) == RGB(0, 0, 0)


def test_rgb_hsl_rgb_round_trip_within_one_level():
    levels = list(range(0, 256, 17))
    for r, g, b in itertools.product(levels, repeat=3):
        back = RGB.from_hsl(HSL.from_rgb(RGB(r, g, b)))
        assert abs(back.r - r) <= 1
        assert abs(back.g - g) <= 1
        assert abs(back.b - b) <= 1


def test_hsl_known_values():
    red = HSL.from_rgb(RGB(255, 0, 0))
    assert (red.h, red.s, red.l) == pytest.approx((0.0, 1.0, 0.5))

    blue = HSL.from_rgb(RGB(0, 0, 255))
    assert blue.h == pytest.approx(2.0 / 3.0)

    grey = HSL.from_rgb(RGB(128, 128, 128))
    assert grey.h == 0.0 and grey.s == 0.0
    assert grey.l == pytest.approx(128 / 255)


def test_hsl_from_lab_goes_through_rgb():
    lab = LAB.from_rgb(RGB(40, 90, 160))
    assert HSL.from_lab(lab) == HSL.from_rgb(RGB.from_lab(lab))


def test_distance_to_self_is_zero():
    rng = np.random.default_rng(3)
    for l, a, b in rng.uniform([0, -80, -80], [100, 80, 80], size=(50, 3)):
        color = LAB(l, a, b)
        assert color.distance(color) == 0.0


def test_distance_is_non_negative():
    rng = np.random.default_rng(4)
    x = rng.uniform([0, -80, -80], [100, 80, 80], size=(200, 3))
    y = rng.uniform([0, -80, -80], [100, 80, 80], size=(200, 3))
    assert (delta_e_94(x, y) >= 0).all()


def test_distance_is_asymmetric():
    saturated = LAB(50.0, 60.0, 0.0)
    neutral = LAB(50.0, 0.0, 0.0)

    # Chroma scaling comes from the reference (caller) color only
    assert saturated.distance(neutral) == pytest.approx(60.0 / 3.7)
    assert neutral.distance(saturated) == pytest.approx(60.0)


def test_distance_pure_lightness_difference():
    assert LAB(20.0, 0.0, 0.0).distance(LAB(70.0, 0.0, 0.0)) == pytest.approx(50.0)


def test_chroma():
    assert LAB(50.0, 3.0, 4.0).chroma() == pytest.approx(5.0)


def test_lab_equality_is_structural():
    assert LAB(1.0, 2.0, 3.0) == LAB(1.0, 2.0, 3.0)
    assert LAB(1.0, 2.0, 3.0) != LAB(1.0, 2.0, 3.0000001)
