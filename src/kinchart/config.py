"""Layout and style settings shared by the chart components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OrderingRule(str, Enum):
    """How a person's relationships are ordered and which ones become primary."""

    CHILDREN_FIRST = "children-first"
    MARRIED_FIRST = "married-first"


@dataclass(frozen=True)
class LayoutConfig:
    node_radius: float = 64.0
    label_height: float = 40.0  # room for the name below the portrait
    minimum_gap: float = 200.0  # horizontal gap between cards of a generation
    vertical_gap: float = 200.0  # vertical gap between generations
    center_x: float = 0.0
    ordering: OrderingRule = OrderingRule.CHILDREN_FIRST

    @property
    def card_width(self) -> float:
        return self.node_radius * 2

    @property
    def card_height(self) -> float:
        return self.node_radius * 2 + self.label_height


@dataclass(frozen=True)
class StyleConfig:
    font_size: float = 18.0
    text_color: str = "#333333"
    card_fill: str = "#FFFFFF"
    card_corner: float = 8.0
    female_stroke: str = "#FF9EAA"
    male_stroke: str = "#A0D2EB"
    line_color: str = "black"
    line_width: float = 3.0
    line_alpha: float = 0.8
    dash_pattern: tuple[float, float] = (5.0, 5.0)
    highlight_color: str = "#FF5722"
    highlight_width: float = 5.0
    highlight_glow: float = 10.0
    highlight_siblings: bool = False


@dataclass(frozen=True)
class ChartConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    style: StyleConfig = field(default_factory=StyleConfig)
    figsize: tuple[float, float] = (20.0, 16.0)
    dpi: int = 100
    margin: float = 100.0
    title: str | None = None
