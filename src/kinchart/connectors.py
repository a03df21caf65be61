"""Geometry of partner, trunk and branch lines between placed cards.

All functions are pure: they take card boxes (and previously computed
segments) and return new segments. Coordinates are y-down, so "above" a
point means a smaller y.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple

from kinchart.config import LayoutConfig
from kinchart.layout import Box, LayoutResult
from kinchart.models import PersonId, RelationshipId, Tree

logger = logging.getLogger(__name__)

PARTNER = "partner"
TRUNK = "trunk"
BRANCH = "branch"


class ConnectorId(NamedTuple):
    """Handle of one drawn connector: a partner line, a trunk or a child's branch."""

    kind: str
    key: RelationshipId | PersonId

    @classmethod
    def partner(cls, relationship_id: RelationshipId) -> ConnectorId:
        return cls(PARTNER, relationship_id)

    @classmethod
    def trunk(cls, relationship_id: RelationshipId) -> ConnectorId:
        return cls(TRUNK, relationship_id)

    @classmethod
    def branch(cls, child_id: PersonId) -> ConnectorId:
        return cls(BRANCH, child_id)


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float
    dashed: bool = False

    @property
    def midpoint(self) -> tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def length(self) -> float:
        return ((self.x2 - self.x1) ** 2 + (self.y2 - self.y1) ** 2) ** 0.5

    @property
    def xs(self) -> tuple[float, float]:
        return (self.x1, self.x2)

    @property
    def ys(self) -> tuple[float, float]:
        return (self.y1, self.y2)


@dataclass(frozen=True)
class Branch:
    """L-shaped child connector: along the trunk's foot, then down to the card."""

    horizontal: Segment
    vertical: Segment

    @property
    def dashed(self) -> bool:
        return self.horizontal.dashed

    @property
    def segments(self) -> tuple[Segment, Segment]:
        return (self.horizontal, self.vertical)


def partner_line(
    anchor: Box, partner: Box, is_married: bool, is_primary: bool, node_radius: float
) -> Segment:
    """
    Horizontal line from the anchor card's right edge to the partner card's
    left edge, ``node_radius / 2`` above the anchor's center.

    Solid only for a married, primary relationship.
    """
    y = anchor.center[1] - node_radius / 2
    return Segment(anchor.right, y, partner.left, y, dashed=not (is_married and is_primary))


def parent_trunk_line(
    anchor: Box,
    partner_segment: Segment | None,
    is_primary: bool,
    node_radius: float,
    vertical_gap: float,
) -> Segment:
    """
    Vertical line from the partner line's midpoint (or the anchor's center
    for a single parent) down to halfway between the anchor's generation and
    the next one.

    A secondary partnered trunk starts ``length / 2 - node_radius`` to the
    right of the midpoint so it does not cover the primary trunk.
    """
    if partner_segment is not None:
        x, y = partner_segment.midpoint
        if not is_primary:
            x += partner_segment.length / 2 - node_radius
    else:
        x, y = anchor.center
    return Segment(x, y, x, anchor.bottom + vertical_gap / 2, dashed=not is_primary)


def child_branch_line(trunk: Segment, child: Box, is_primary: bool, stroke_width: float) -> Branch:
    """
    Horizontal segment from the trunk's foot to the child's center x, then a
    vertical one down to the top of the child's card.

    When the trunk lies right of the child the horizontal start is pushed
    right by the stroke width so the joint has neither gap nor overlap.
    """
    child_x = child.center[0]
    start_x = trunk.x2 + (stroke_width if trunk.x2 > child_x else 0.0)
    horizontal = Segment(start_x, trunk.y2, child_x, trunk.y2, dashed=not is_primary)
    vertical = Segment(child_x, trunk.y2, child_x, child.top, dashed=not is_primary)
    return Branch(horizontal, vertical)


@dataclass
class Connectors:
    """Connector geometry for one layout, keyed by relationship or child id."""

    partner_lines: dict[RelationshipId, Segment] = field(default_factory=dict)
    trunks: dict[RelationshipId, Segment] = field(default_factory=dict)
    branches: dict[PersonId, Branch] = field(default_factory=dict)

    def __contains__(self, handle: object) -> bool:
        return bool(self.segments(handle)) if isinstance(handle, ConnectorId) else False

    def __len__(self) -> int:
        return len(self.partner_lines) + len(self.trunks) + len(self.branches)

    def segments(self, handle: ConnectorId) -> tuple[Segment, ...]:
        kind, key = handle
        if kind == PARTNER and key in self.partner_lines:
            return (self.partner_lines[key],)
        if kind == TRUNK and key in self.trunks:
            return (self.trunks[key],)
        if kind == BRANCH and key in self.branches:
            return self.branches[key].segments
        return ()

    def handles(self) -> Iterator[ConnectorId]:
        yield from (ConnectorId.partner(rid) for rid in self.partner_lines)
        yield from (ConnectorId.trunk(rid) for rid in self.trunks)
        yield from (ConnectorId.branch(pid) for pid in self.branches)


def compute_connectors(
    tree: Tree, layout: LayoutResult, config: LayoutConfig, stroke_width: float
) -> Connectors:
    """
    Recompute every connector from the current card boxes.

    A relationship whose anchor has no box is skipped. A partner without a
    box is treated like a single-parent relationship and a child without a
    box gets no branch.
    """
    connectors = Connectors()

    for person in tree.walk():
        for relationship in tree.relationships_of(person.id):
            anchor = layout.boxes.get(relationship.anchor_id)
            if anchor is None:
                logger.debug("No box for anchor %r, skipping %s", relationship.anchor_id, relationship.id)
                continue

            partner_segment = None
            partner = layout.boxes.get(relationship.partner_id) if relationship.has_partner else None
            if partner is not None:
                partner_segment = partner_line(
                    anchor,
                    partner,
                    relationship.is_married,
                    relationship.is_primary,
                    config.node_radius,
                )
                connectors.partner_lines[relationship.id] = partner_segment

            if not relationship.child_ids:
                continue

            trunk = parent_trunk_line(
                anchor,
                partner_segment,
                relationship.is_primary,
                config.node_radius,
                config.vertical_gap,
            )
            connectors.trunks[relationship.id] = trunk

            for child_id in relationship.child_ids:
                child = layout.boxes.get(child_id)
                if child is not None:
                    connectors.branches[child_id] = child_branch_line(
                        trunk, child, relationship.is_primary, stroke_width
                    )

    return connectors
