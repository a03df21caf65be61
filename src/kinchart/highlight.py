"""Highlighting a person's family context on hover and click.

``collect_highlight`` derives which people and connectors belong to a
focused person's family context. ``HighlightController`` owns the focus
state (idle, previewing on hover, locked by click) and pushes each
highlight set to a painter, always reversing the previous set first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from kinchart.connectors import ConnectorId, Connectors
from kinchart.graph import iter_ancestry
from kinchart.models import PersonId, Relationship, Tree

logger = logging.getLogger(__name__)


class FocusState(Enum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    LOCKED = "locked"


@dataclass
class HighlightSet:
    people: set[PersonId] = field(default_factory=set)
    connectors: set[ConnectorId] = field(default_factory=set)
    focus: PersonId | None = None
    locked: bool = False

    def __bool__(self) -> bool:
        return bool(self.people or self.connectors)


class HighlightPainter(Protocol):
    """What the controller needs from whoever draws the tree."""

    def set_person_highlight(self, person_id: PersonId, highlighted: bool) -> None: ...

    def set_connector_highlight(self, handle: ConnectorId, highlighted: bool) -> None: ...

    def restack(self, highlighted: set[ConnectorId]) -> None: ...

    def redraw(self) -> None: ...


class _Collector:
    """Accumulates a HighlightSet, skipping anything that was never drawn."""

    def __init__(self, tree: Tree, connectors: Connectors, result: HighlightSet):
        self.tree = tree
        self.connectors = connectors
        self.result = result

    def person(self, person_id: PersonId | None) -> None:
        if person_id is None:
            return
        if person_id in self.tree:
            self.result.people.add(person_id)
        else:
            logger.debug("Nothing to highlight for unknown person %r", person_id)

    def connector(self, handle: ConnectorId) -> None:
        if handle in self.connectors:
            self.result.connectors.add(handle)

    def partner(self, relationship: Relationship) -> None:
        if relationship.partner_id is not None:
            self.person(relationship.partner_id)
            self.connector(ConnectorId.partner(relationship.id))

    def children(self, relationship: Relationship) -> None:
        if not relationship.child_ids:
            return
        for child_id in relationship.child_ids:
            self.person(child_id)
            self.connector(ConnectorId.branch(child_id))
        self.connector(ConnectorId.trunk(relationship.id))

    def own_family(self, person_id: PersonId) -> None:
        for relationship in self.tree.relationships_of(person_id):
            self.partner(relationship)
            self.children(relationship)


def collect_highlight(
    tree: Tree,
    person_id: PersonId,
    connectors: Connectors,
    highlight_siblings: bool = False,
) -> HighlightSet:
    """
    Compute the people and connectors to highlight for a focused person.

    * Root: the root, each relationship's partner and partner line, every
      child with its branch, and each trunk.
    * Married-in partner: the partner, the anchor, their partner line, and
      the relationship's children, branches and trunk.
    * Descendant: the person and the whole chain up to the root (at each
      step the parent, the parent's partner and partner line, the branch
      into the step and the trunk), plus the person's own partners and
      children. Siblings and their branches only with ``highlight_siblings``.

    Missing back references or connectors contribute nothing; the walk
    carries on with what is there.
    """
    result = HighlightSet(focus=person_id)
    collect = _Collector(tree, connectors, result)
    if person_id not in tree:
        logger.debug("Cannot highlight unknown person %r", person_id)
        return result

    person = tree.person(person_id)
    collect.person(person_id)

    if person.is_root:
        collect.own_family(person_id)
        return result

    if tree.is_partner(person_id):
        relationship = tree.parent_relationship(person_id)
        collect.person(relationship.anchor_id)
        collect.connector(ConnectorId.partner(relationship.id))
        collect.children(relationship)
        return result

    for step_person, parent, relationship in iter_ancestry(tree, person_id):
        collect.person(parent.id)
        collect.partner(relationship)
        collect.connector(ConnectorId.branch(step_person.id))
        collect.connector(ConnectorId.trunk(relationship.id))

    collect.own_family(person_id)

    if highlight_siblings:
        relationship = tree.parent_relationship(person_id)
        if relationship is not None:
            for sibling_id in relationship.child_ids:
                collect.person(sibling_id)
                collect.connector(ConnectorId.branch(sibling_id))

    return result


class HighlightController:
    """
    Focus state machine.

    ``mouse_enter`` previews a person unless a click has locked the focus,
    ``mouse_leave`` drops the preview, ``click`` locks onto a person from any
    state and ``click_empty`` returns to idle. Every change first restores
    whatever was highlighted before, then applies a freshly computed set.
    """

    def __init__(
        self,
        tree: Tree,
        connectors: Connectors,
        painter: HighlightPainter,
        highlight_siblings: bool = False,
    ):
        self.tree = tree
        self.connectors = connectors
        self.painter = painter
        self.highlight_siblings = highlight_siblings
        self.state = FocusState.IDLE
        self.current = HighlightSet()

    @property
    def focus(self) -> PersonId | None:
        return self.current.focus

    @property
    def locked(self) -> bool:
        return self.state is FocusState.LOCKED

    def mouse_enter(self, person_id: PersonId) -> None:
        if self.locked:
            return
        self._focus(person_id, FocusState.PREVIEWING)

    def mouse_leave(self, person_id: PersonId | None = None) -> None:
        if self.state is not FocusState.PREVIEWING:
            return
        if person_id is not None and person_id != self.current.focus:
            return
        self.reset_highlight()

    def click(self, person_id: PersonId) -> None:
        self._focus(person_id, FocusState.LOCKED)

    def click_empty(self) -> None:
        self.reset_highlight()

    def reset_highlight(self) -> None:
        """Restore every highlighted person and connector and go idle."""
        self._restore()
        self.state = FocusState.IDLE
        self.current = HighlightSet()
        self.painter.restack(set())
        self.painter.redraw()

    def refresh(self, connectors: Connectors) -> None:
        """Swap in recomputed connector geometry and re-apply the current focus."""
        state, focus = self.state, self.current.focus
        self._restore()
        self.current = HighlightSet()
        self.connectors = connectors
        if focus is None or state is FocusState.IDLE:
            self.state = FocusState.IDLE
            self.painter.restack(set())
            self.painter.redraw()
        else:
            self._focus(focus, state)

    def _focus(self, person_id: PersonId, state: FocusState) -> None:
        self._restore()
        highlight = collect_highlight(self.tree, person_id, self.connectors, self.highlight_siblings)
        highlight.locked = state is FocusState.LOCKED

        for pid in highlight.people:
            self.painter.set_person_highlight(pid, True)
        for handle in highlight.connectors:
            self.painter.set_connector_highlight(handle, True)

        self.state = state
        self.current = highlight
        self.painter.restack(highlight.connectors)
        self.painter.redraw()
        logger.debug(
            "%s %r: %d people, %d connectors",
            state.value,
            person_id,
            len(highlight.people),
            len(highlight.connectors),
        )

    def _restore(self) -> None:
        for pid in self.current.people:
            self.painter.set_person_highlight(pid, False)
        for handle in self.current.connectors:
            self.painter.set_connector_highlight(handle, False)
