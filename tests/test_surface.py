from __future__ import annotations

import matplotlib.pyplot as plt
import pytest

from kinchart.config import StyleConfig
from kinchart.connectors import Segment
from kinchart.surface import ConnectorLines, Surface


@pytest.fixture()
def surface():
    surface = Surface(figsize=(4, 3), dpi=50)
    for key in ("a", "b", "c"):
        surface.add(key, ConnectorLines(surface.axes, (Segment(0, 0, 1, 1),), StyleConfig()))
    return surface


def _zorders(surface) -> list[float]:
    return [surface.get(key).lines[0].get_zorder() for key in surface.objects()]


def test_objects_stack_in_insertion_order(surface) -> None:
    assert surface.objects() == ["a", "b", "c"]
    assert _zorders(surface) == [1, 2, 3]


def test_bring_to_front(surface) -> None:
    surface.bring_to_front("a")

    assert surface.objects() == ["b", "c", "a"]
    assert surface.get("a").lines[0].get_zorder() == 3


def test_send_to_back(surface) -> None:
    surface.send_to_back("c")

    assert surface.objects() == ["c", "a", "b"]
    assert surface.get("c").lines[0].get_zorder() == 1


def test_remove_renumbers(surface) -> None:
    line = surface.get("a").lines[0]

    surface.remove("a")

    assert "a" not in surface
    assert line not in surface.axes.lines
    assert _zorders(surface) == [1, 2]


def test_reorder_needs_every_key(surface) -> None:
    with pytest.raises(ValueError):
        surface.reorder(["a", "b"])

    surface.reorder(["c", "b", "a"])
    assert surface.objects() == ["c", "b", "a"]


def test_bounds_and_center(surface) -> None:
    surface.add("d", ConnectorLines(surface.axes, (Segment(2, 4, 2, 10),), StyleConfig()))

    assert surface.center("d") == (2, 7)


def test_resize_and_close(surface) -> None:
    surface.resize(6, 5)
    assert tuple(surface.figure.get_size_inches()) == (6, 5)

    surface.close()
    assert not plt.fignum_exists(surface.figure.number)
