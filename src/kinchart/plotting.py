"""Drawing a family tree and wiring pointer events to the highlighter."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

import matplotlib.pyplot as plt
from matplotlib.backend_bases import MouseButton

from kinchart.assets import AssetLoader
from kinchart.cards import Card, CardRenderer
from kinchart.config import ChartConfig
from kinchart.connectors import ConnectorId, Connectors, compute_connectors
from kinchart.graph import assign_generations, build_graph
from kinchart.highlight import HighlightController
from kinchart.layout import LayoutResult, compute_layout
from kinchart.models import PersonId, Tree
from kinchart.ordering import order_relationships
from kinchart.surface import ConnectorLines, Surface
from kinchart.validation import check_structure, validate_tree

logger = logging.getLogger(__name__)


class CardKey(NamedTuple):
    person_id: PersonId


class FamilyTreeChart:
    """
    Builds and draws a Tree, then keeps its highlight state in sync with
    pointer events.

    Construction runs in order: structural checks, generations, relationship
    ordering, cards (depth-first, one at a time), layout, connectors.
    """

    def __init__(
        self,
        tree: Tree,
        config: ChartConfig | None = None,
        assets: AssetLoader | None = None,
        surface: Surface | None = None,
    ):
        self.tree = tree
        self.config = config or ChartConfig()
        self.assets = assets or AssetLoader()
        self.surface = surface or Surface(self.config.figsize, self.config.dpi, self.config.title)
        self.renderer = CardRenderer(self.config.layout, self.config.style)
        self.cards: dict[PersonId, Card] = {}
        self.connector_lines: dict[ConnectorId, ConnectorLines] = {}
        self.layout_result = LayoutResult()
        self.connectors = Connectors()
        self.highlighter = HighlightController(
            tree, self.connectors, self, self.config.style.highlight_siblings
        )
        self.warnings: list[str] = []
        self._hovered: PersonId | None = None
        self._event_ids: list[int] = []

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def build(self) -> FamilyTreeChart:
        """Validate the tree and draw it. Raises StructuralError before drawing anything."""
        check_structure(self.tree)
        assign_generations(self.tree, build_graph(self.tree))
        order_relationships(self.tree, self.config.layout.ordering)

        self.warnings = validate_tree(self.tree)
        for warning in self.warnings:
            logger.warning(warning)

        self.assets.preload(person.image for person in self.tree.people.values())
        for person in self.tree.walk():
            card = self.renderer.render(self.surface.axes, person, self.assets.load(person.image))
            self.cards[person.id] = card
            self.surface.add(CardKey(person.id), card)

        self.relayout()
        logger.info(
            "Drew %d people and %d connectors", len(self.cards), len(self.connector_lines)
        )
        return self

    def relayout(self) -> None:
        """Place every card, recompute connectors and re-apply the current highlight."""
        self.layout_result = compute_layout(self.tree, self.config.layout, self._measure)
        for person_id, box in self.layout_result.boxes.items():
            self.cards[person_id].place(box.left, box.top)

        self.connectors = compute_connectors(
            self.tree, self.layout_result, self.config.layout, self.config.style.line_width
        )
        self._sync_connector_lines()
        self.surface.fit(self.layout_result.extent(), self.config.margin)
        self.highlighter.refresh(self.connectors)

    def _measure(self, person_id: PersonId) -> tuple[float, float] | None:
        card = self.cards.get(person_id)
        return card.size if card is not None else None

    def _sync_connector_lines(self) -> None:
        handles = set(self.connectors.handles())
        for handle in [h for h in self.connector_lines if h not in handles]:
            self.surface.remove(handle)
            del self.connector_lines[handle]

        for handle in self.connectors.handles():
            segments = self.connectors.segments(handle)
            lines = self.connector_lines.get(handle)
            if lines is None:
                lines = ConnectorLines(self.surface.axes, segments, self.config.style)
                self.connector_lines[handle] = lines
                self.surface.add(handle, lines)
            else:
                lines.update(segments)

    # ------------------------------------------------------------------
    # HighlightPainter
    # ------------------------------------------------------------------

    def set_person_highlight(self, person_id: PersonId, highlighted: bool) -> None:
        card = self.cards.get(person_id)
        if card is not None:
            card.set_highlight(highlighted)

    def set_connector_highlight(self, handle: ConnectorId, highlighted: bool) -> None:
        lines = self.connector_lines.get(handle)
        if lines is not None:
            lines.set_highlight(highlighted)

    def restack(self, highlighted: set[ConnectorId]) -> None:
        """Plain connectors at the back, highlighted connectors above them, cards on top."""
        keys = self.surface.objects()
        plain = [k for k in keys if isinstance(k, ConnectorId) and k not in highlighted]
        lit = [k for k in keys if isinstance(k, ConnectorId) and k in highlighted]
        others = [k for k in keys if not isinstance(k, ConnectorId)]
        self.surface.reorder(plain + lit + others)

    def redraw(self) -> None:
        self.surface.redraw()

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def connect(self) -> FamilyTreeChart:
        """Subscribe to hover and click events on the figure."""
        self._event_ids = [
            self.surface.on("motion_notify_event", self._on_motion),
            self.surface.on("button_press_event", self._on_press),
        ]
        return self

    def disconnect(self) -> None:
        for cid in self._event_ids:
            self.surface.off(cid)
        self._event_ids = []

    def person_at(self, event) -> PersonId | None:
        """The topmost card under the pointer, if any."""
        if event.inaxes is not self.surface.axes:
            return None
        for key in reversed(self.surface.objects()):
            if isinstance(key, CardKey) and self.cards[key.person_id].contains(event):
                return key.person_id
        return None

    def _on_motion(self, event) -> None:
        person_id = self.person_at(event)
        if person_id == self._hovered:
            return
        if self._hovered is not None:
            self.highlighter.mouse_leave(self._hovered)
        self._hovered = person_id
        if person_id is not None:
            self.highlighter.mouse_enter(person_id)

    def _on_press(self, event) -> None:
        if event.button != MouseButton.LEFT:
            return
        person_id = self.person_at(event)
        if person_id is None:
            self.highlighter.click_empty()
            return
        self.highlighter.click(person_id)
        person = self.tree.person(person_id)
        if person.on_click is not None:
            person.on_click(person)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def save(self, output_path: Path) -> None:
        self.surface.save(output_path)
        print(f"Graph saved to {output_path}")

    def show(self) -> None:
        self.connect()
        plt.show()


def plot_tree(tree: Tree, output_path: Path | None = None, config: ChartConfig | None = None) -> FamilyTreeChart:
    """
    Draw a family tree.

    Args:
        tree: The tree to draw
        output_path: Save the image here (png, svg or pdf). If None, displays interactively.
        config: Layout and style settings

    Returns:
        The built chart
    """
    chart = FamilyTreeChart(tree, config).build()
    if output_path:
        chart.save(output_path)
    else:
        chart.show()
    return chart
