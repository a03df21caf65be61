"""Matplotlib-backed drawing surface with an explicit object stack."""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from pathlib import Path
from typing import Protocol

import matplotlib.pyplot as plt
from matplotlib.lines import Line2D

from kinchart.config import StyleConfig
from kinchart.connectors import Segment
from kinchart.layout import Box

logger = logging.getLogger(__name__)


class SurfaceObject(Protocol):
    @property
    def artists(self) -> list: ...

    def bounds(self) -> Box: ...

    def set_zorder(self, base: float) -> None: ...


class ConnectorLines:
    """The Line2D artists drawing one connector (one or two segments)."""

    def __init__(self, ax, segments: tuple[Segment, ...], style: StyleConfig):
        self.style = style
        self.lines: list[Line2D] = []
        for segment in segments:
            (line,) = ax.plot(segment.xs, segment.ys, solid_capstyle="butt")
            self.lines.append(line)
        self.segments = segments
        self.set_highlight(False)

    @property
    def artists(self) -> list:
        return list(self.lines)

    def update(self, segments: tuple[Segment, ...]) -> None:
        for line, segment in zip(self.lines, segments):
            line.set_data(segment.xs, segment.ys)
            line.set_linestyle((0, self.style.dash_pattern) if segment.dashed else "-")
        self.segments = segments

    def set_highlight(self, highlighted: bool) -> None:
        color = self.style.highlight_color if highlighted else self.style.line_color
        width = self.style.highlight_width if highlighted else self.style.line_width
        for line, segment in zip(self.lines, self.segments):
            line.set_color(color)
            line.set_linewidth(width)
            line.set_alpha(self.style.line_alpha)
            line.set_linestyle((0, self.style.dash_pattern) if segment.dashed else "-")
        self.highlighted = highlighted

    def bounds(self) -> Box:
        xs = [x for segment in self.segments for x in segment.xs]
        ys = [y for segment in self.segments for y in segment.ys]
        return Box(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def set_zorder(self, base: float) -> None:
        for line in self.lines:
            line.set_zorder(base)


class Surface:
    """
    A Figure/Axes pair plus a back-to-front stack of keyed objects.

    The stack order is the drawing order: ``bring_to_front`` and
    ``send_to_back`` move an object and renumber every z-order.
    """

    def __init__(self, figsize: tuple[float, float] = (20.0, 16.0), dpi: int = 100, title: str | None = None):
        self.figure, self.axes = plt.subplots(figsize=figsize, dpi=dpi)
        self.axes.axis("off")
        if title:
            self.axes.set_title(title)
        self._objects: dict[Hashable, SurfaceObject] = {}
        self._stack: list[Hashable] = []

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def add(self, key: Hashable, obj: SurfaceObject) -> None:
        if key in self._objects:
            self.remove(key)
        self._objects[key] = obj
        self._stack.append(key)
        obj.set_zorder(len(self._stack))

    def remove(self, key: Hashable) -> None:
        obj = self._objects.pop(key)
        self._stack.remove(key)
        for artist in obj.artists:
            artist.remove()
        self._renumber()

    def get(self, key: Hashable) -> SurfaceObject:
        return self._objects[key]

    def __contains__(self, key: object) -> bool:
        return key in self._objects

    def objects(self) -> list[Hashable]:
        """Keys from back to front."""
        return list(self._stack)

    def bounds(self, key: Hashable) -> Box:
        return self._objects[key].bounds()

    def center(self, key: Hashable) -> tuple[float, float]:
        return self.bounds(key).center

    # ------------------------------------------------------------------
    # Z-order
    # ------------------------------------------------------------------

    def bring_to_front(self, key: Hashable) -> None:
        self._stack.remove(key)
        self._stack.append(key)
        self._renumber()

    def send_to_back(self, key: Hashable) -> None:
        self._stack.remove(key)
        self._stack.insert(0, key)
        self._renumber()

    def reorder(self, keys: list[Hashable]) -> None:
        """Replace the whole stack at once; ``keys`` must hold every key."""
        if set(keys) != set(self._stack) or len(keys) != len(self._stack):
            raise ValueError("reorder() needs every object exactly once")
        self._stack = list(keys)
        self._renumber()

    def _renumber(self) -> None:
        for index, key in enumerate(self._stack, start=1):
            self._objects[key].set_zorder(index)

    # ------------------------------------------------------------------
    # Figure
    # ------------------------------------------------------------------

    def fit(self, extent: tuple[float, float, float, float], margin: float) -> None:
        """Show ``(left, top, right, bottom)`` with y growing downwards."""
        left, top, right, bottom = extent
        self.axes.set_xlim(left - margin, right + margin)
        self.axes.set_ylim(bottom + margin, top - margin)
        self.axes.set_aspect("equal", adjustable="datalim")

    def resize(self, width: float, height: float) -> None:
        self.figure.set_size_inches(width, height)
        self.redraw()

    def on(self, event_name: str, callback: Callable) -> int:
        return self.figure.canvas.mpl_connect(event_name, callback)

    def off(self, cid: int) -> None:
        self.figure.canvas.mpl_disconnect(cid)

    def redraw(self) -> None:
        self.figure.canvas.draw_idle()

    def save(self, output_path: Path, dpi: int | None = None) -> None:
        self.figure.savefig(output_path, dpi=dpi or self.figure.dpi, bbox_inches="tight")

    def close(self) -> None:
        plt.close(self.figure)
