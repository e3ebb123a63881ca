import threading

import pytest

from pigmnts import names
from pigmnts.color import LAB, RGB


@pytest.fixture(autouse=True)
def fresh_table():
    names.reset_color_names()
    yield
    names.reset_color_names()


@pytest.mark.parametrize("rgb, expected", [
    (RGB(255, 0, 0), "Red"),
    (RGB(0, 0, 255), "Blue"),
    (RGB(255, 255, 255), "White"),
    (RGB(0, 0, 0), "Black"),
])
def test_exact_entries_are_named(rgb, expected):
    assert names.nearest_name(LAB.from_rgb(rgb)) == expected


def test_close_colors_get_the_nearest_name():
    assert names.nearest_name(LAB.from_rgb(RGB(250, 5, 3))) == "Red"


def test_table_is_loaded_once():
    first = names.color_names()
    assert names.color_names() is first

    labels, values = first
    assert len(labels) == len(values)
    assert values.shape[1] == 3


def test_concurrent_first_use_sees_a_single_table():
    seen = []

    def lookup():
        seen.append(names.color_names())

    threads = [threading.Thread(target=lookup) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 8
    assert all(table is seen[0] for table in seen)
