"""Generation-by-generation placement of person cards."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from kinchart.config import LayoutConfig
from kinchart.models import PersonId, Tree


@dataclass(frozen=True)
class Box:
    """Axis-aligned card bounds in y-down surface coordinates."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)


@dataclass
class LayoutResult:
    boxes: dict[PersonId, Box] = field(default_factory=dict)
    generations: list[list[PersonId]] = field(default_factory=list)

    def __getitem__(self, person_id: PersonId) -> Box:
        return self.boxes[person_id]

    def __contains__(self, person_id: object) -> bool:
        return person_id in self.boxes

    def extent(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom) covering every placed card."""
        if not self.boxes:
            return (0.0, 0.0, 0.0, 0.0)
        return (
            min(b.left for b in self.boxes.values()),
            min(b.top for b in self.boxes.values()),
            max(b.right for b in self.boxes.values()),
            max(b.bottom for b in self.boxes.values()),
        )


def group_generations(tree: Tree) -> list[list[PersonId]]:
    """
    Group people by generation, preserving depth-first traversal order.

    Within a generation the order is: a person, then that person's partners,
    then (one generation down) each child's subtree in turn.
    """
    generations: list[list[PersonId]] = []
    for person in tree.walk():
        if person.generation is None:
            continue
        while len(generations) <= person.generation:
            generations.append([])
        generations[person.generation].append(person.id)
    return generations


def generation_top(generation: int, config: LayoutConfig) -> float:
    return generation * (config.card_height + config.vertical_gap)


def compute_layout(
    tree: Tree,
    config: LayoutConfig,
    measure: Callable[[PersonId], tuple[float, float] | None] | None = None,
) -> LayoutResult:
    """
    Compute a box for every person, centering each generation on ``center_x``.

    Args:
        tree: Tree with generations assigned
        config: Gap sizes and the horizontal center
        measure: Returns the (width, height) of a person's card, or None when
            the person has no card. Defaults to the configured card size.

    Returns:
        A LayoutResult; people without a card are left out and an empty
        generation takes no room.
    """
    if measure is None:
        def measure(_person_id: PersonId) -> tuple[float, float]:
            return (config.card_width, config.card_height)

    result = LayoutResult()
    for generation, person_ids in enumerate(group_generations(tree)):
        sized = [(pid, size) for pid in person_ids if (size := measure(pid)) is not None]
        result.generations.append([pid for pid, _ in sized])
        if not sized:
            continue

        total_width = sum(w for _, (w, _h) in sized) + (len(sized) - 1) * config.minimum_gap
        top = generation_top(generation, config)
        left = config.center_x - total_width / 2
        for person_id, (width, height) in sized:
            result.boxes[person_id] = Box(left, top, width, height)
            left += width + config.minimum_gap

    return result
