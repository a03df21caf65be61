"""Person cards: rounded frame, circular portrait and name label."""

from __future__ import annotations

import matplotlib.patheffects as pe
import numpy as np
from matplotlib.axes import Axes
from matplotlib.patches import Circle, FancyBboxPatch

from kinchart.config import LayoutConfig, StyleConfig
from kinchart.layout import Box
from kinchart.models import Person, PersonId

PORTRAIT_SCALE = 0.9  # portrait radius relative to node radius


class Card:
    """The drawn card of one person. Created at the origin, moved with ``place``."""

    def __init__(
        self,
        ax: Axes,
        person: Person,
        image: np.ndarray,
        layout: LayoutConfig,
        style: StyleConfig,
    ):
        self.person_id: PersonId = person.id
        self.layout = layout
        self.style = style
        self.size = (layout.card_width, layout.card_height)
        self.box = Box(0.0, 0.0, *self.size)

        self._default_effects = [
            pe.withSimplePatchShadow(offset=(0, -2), shadow_rgbFace="black", alpha=0.3)
        ]
        self.frame = FancyBboxPatch(
            (0.0, 0.0),
            layout.card_width,
            layout.card_height,
            boxstyle=f"round,pad=0,rounding_size={style.card_corner}",
            facecolor=style.card_fill,
            edgecolor=style.female_stroke if person.gender == "female" else style.male_stroke,
            linewidth=2,
            path_effects=self._default_effects,
        )
        ax.add_patch(self.frame)

        radius = layout.node_radius * PORTRAIT_SCALE
        self.clip = Circle((0.0, 0.0), radius, transform=ax.transData)
        self.portrait = ax.imshow(image, extent=(-radius, radius, radius, -radius), aspect="auto")

        lifespan = person.lifespan
        self.label = ax.text(
            0.0,
            0.0,
            person.name,
            ha="center",
            va="center",
            fontsize=style.font_size,
            fontweight="bold",
            color=style.text_color,
        )
        self.sublabel = ax.text(
            0.0,
            0.0,
            lifespan,
            ha="center",
            va="center",
            fontsize=style.font_size * 0.6,
            color=style.text_color,
            visible=bool(lifespan),
        )
        self.highlighted = False

    @property
    def artists(self) -> list:
        return [self.frame, self.portrait, self.label, self.sublabel]

    def place(self, left: float, top: float) -> None:
        width, height = self.size
        self.box = Box(left, top, width, height)
        self.frame.set_bounds(left, top, width, height)

        cx = left + width / 2
        cy = top + self.layout.node_radius
        radius = self.layout.node_radius * PORTRAIT_SCALE
        self.portrait.set_extent((cx - radius, cx + radius, cy + radius, cy - radius))
        self.clip.set_center((cx, cy))
        self.portrait.set_clip_path(self.clip)

        label_center = self.box.bottom - self.layout.label_height / 2
        if self.sublabel.get_visible():
            self.label.set_position((cx, label_center - self.layout.label_height / 5))
            self.sublabel.set_position((cx, label_center + self.layout.label_height / 3))
        else:
            self.label.set_position((cx, label_center))

    def center(self) -> tuple[float, float]:
        return self.box.center

    def bounds(self) -> Box:
        return self.box

    def contains(self, event) -> bool:
        return bool(self.frame.contains(event)[0])

    def set_highlight(self, highlighted: bool) -> None:
        if highlighted:
            self.frame.set_path_effects(
                [pe.withStroke(linewidth=self.style.highlight_glow, foreground=self.style.highlight_color)]
            )
        else:
            self.frame.set_path_effects(self._default_effects)
        self.highlighted = highlighted

    def set_zorder(self, base: float) -> None:
        for offset, artist in enumerate(self.artists):
            artist.set_zorder(base + offset * 0.1)


class CardRenderer:
    """Creates cards for people; the core only relies on the Card interface."""

    def __init__(self, layout: LayoutConfig, style: StyleConfig):
        self.layout = layout
        self.style = style

    def render(self, ax: Axes, person: Person, image: np.ndarray) -> Card:
        return Card(ax, person, image, self.layout, self.style)
