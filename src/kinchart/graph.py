"""NetworkX graph building and traversal over a family Tree."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import networkx as nx

from kinchart.models import Person, PersonId, Relationship, StructuralError, Tree

logger = logging.getLogger(__name__)

PARENT_OF = "PARENT_OF"
SPOUSE_OF = "SPOUSE_OF"

# Generation offset implied by following an edge of each type
GENERATION_STEP = {PARENT_OF: 1, SPOUSE_OF: 0}


def build_graph(tree: Tree) -> nx.DiGraph:
    """
    Build a NetworkX directed graph from a Tree.

    Edges point from the anchor person to the partner (SPOUSE_OF) and to
    each child (PARENT_OF), and carry the id of the relationship they
    belong to.
    """
    G = nx.DiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for person in tree.people.values():
        G.add_node(
            person.id,
            person_name=person.name,
            gender=person.gender,
            birth_date=person.birth_date,
            death_date=person.death_date,
        )

    for relationship in tree.relationships.values():
        if relationship.partner_id is not None:
            G.add_edge(
                relationship.anchor_id,
                relationship.partner_id,
                relationship_type=SPOUSE_OF,
                relationship_id=relationship.id,
            )
        for child_id in relationship.child_ids:
            G.add_edge(
                relationship.anchor_id,
                child_id,
                relationship_type=PARENT_OF,
                relationship_id=relationship.id,
            )

    return G


def assign_generations(tree: Tree, G: nx.DiGraph | None = None) -> dict[PersonId, int]:
    """
    Assign every person its generation depth from the root.

    The root is generation 0, each child is one deeper than the anchor of
    the relationship that produced it and a partner shares the anchor's
    generation. Every edge reachable from the root is checked, so the
    result does not depend on traversal order.

    Raises:
        StructuralError: if a person is reached with two different
            generations, or someone is not reachable from the root.
    """
    if G is None:
        G = build_graph(tree)
    if tree.root_id not in G:
        raise StructuralError(f"Root {tree.root_id!r} is not part of the tree")

    generations: dict[PersonId, int] = {tree.root_id: 0}
    for u, v in nx.edge_bfs(G, tree.root_id):
        implied = generations[u] + GENERATION_STEP[G.edges[u, v]["relationship_type"]]
        known = generations.get(v)
        if known is None:
            generations[v] = implied
        elif known != implied:
            raise StructuralError(
                f"Person {v!r} is reachable as generation {known} and as generation {implied}"
            )

    unreachable = [pid for pid in tree.people if pid not in generations]
    if unreachable:
        raise StructuralError(f"People not reachable from root {tree.root_id!r}: {unreachable}")

    for person_id, generation in generations.items():
        tree.people[person_id].generation = generation

    logger.debug("Assigned generations to %d people (depth %d)", len(generations), max(generations.values()))
    return generations


def iter_ancestry(tree: Tree, person_id: PersonId) -> Iterator[tuple[Person, Person, Relationship]]:
    """
    Walk upward from a person along parent references.

    Yields (person, parent, parent_relationship) for each step, starting at
    ``person_id`` and ending with the step whose parent is the root. A step
    with a dangling back reference ends the walk.
    """
    current = tree.person(person_id)
    while current.parent_id is not None:
        parent = tree.people.get(current.parent_id)
        relationship = tree.parent_relationship(current.id)
        if parent is None or relationship is None:
            logger.debug("Ancestry walk from %r stopped at %r: missing parent", person_id, current.id)
            return
        yield current, parent, relationship
        current = parent


def build_union_layout_graph(tree: Tree) -> nx.DiGraph:
    """
    Build a layout graph using the union-node model.

    Creates one "family node" per relationship that connects the anchor and
    the partner to their children, so that:
    - Partners sit on the same generation
    - All children hang from the family node, so siblings align

    Args:
        tree: A Tree whose generations and primary flags have been computed

    Returns:
        A new graph with person and family nodes
    """
    H = nx.DiGraph()

    for person in tree.people.values():
        H.add_node(
            person.id,
            node_type="person",
            person_name=person.name,
            gender=person.gender,
            lifespan=person.lifespan,
            generation=person.generation,
        )

    for relationship in tree.relationships.values():
        fam_id = f"FAM_{relationship.id}"
        # Family node is a small connector point
        H.add_node(
            fam_id,
            node_type="family",
            spouses=tuple(p for p in (relationship.anchor_id, relationship.partner_id) if p is not None),
            is_married=relationship.is_married,
            is_primary=relationship.is_primary,
        )
        H.add_edge(relationship.anchor_id, fam_id, edge_type="spouse_to_family")
        if relationship.partner_id is not None:
            H.add_edge(relationship.partner_id, fam_id, edge_type="spouse_to_family")
        for child_id in relationship.child_ids:
            # Child hangs from family node
            H.add_edge(fam_id, child_id, edge_type="family_to_child")

    return H
