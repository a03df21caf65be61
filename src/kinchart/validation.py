"""Structural checks and plausibility warnings for family tree data."""

from __future__ import annotations

from collections import Counter

import networkx as nx

from kinchart.graph import PARENT_OF, build_graph
from kinchart.models import StructuralError, Tree


def check_structure(tree: Tree) -> None:
    """
    Reject input that is not a single-rooted tree of people.

    Checks that every referenced id exists, that nobody is a child of more
    than one relationship, that back references agree with the
    relationships and that partners do not anchor relationships.

    Raises:
        StructuralError: describing the first problem found.
    """
    if tree.root_id not in tree.people:
        raise StructuralError(f"Root {tree.root_id!r} is not part of the tree")
    if tree.root.parent_id is not None:
        raise StructuralError(f"Root {tree.root_id!r} has a parent")

    child_counts = Counter(
        child_id for relationship in tree.relationships.values() for child_id in relationship.child_ids
    )
    repeated = sorted((str(pid) for pid, count in child_counts.items() if count > 1))
    if repeated:
        raise StructuralError(f"Children listed under more than one relationship: {repeated}")

    for relationship in tree.relationships.values():
        anchor = tree.person(relationship.anchor_id)
        if relationship.id not in anchor.relationship_ids:
            raise StructuralError(
                f"Relationship {relationship.id!r} is not listed on its anchor {anchor.id!r}"
            )
        members = list(relationship.child_ids)
        if relationship.partner_id is not None:
            partner = tree.person(relationship.partner_id)
            if partner.relationship_ids:
                raise StructuralError(f"Partner {partner.id!r} cannot anchor relationships")
            members.append(partner.id)
        for member_id in members:
            member = tree.person(member_id)
            if member.parent_id != anchor.id or member.parent_relationship_id != relationship.id:
                raise StructuralError(
                    f"Person {member_id!r} does not point back to relationship {relationship.id!r}"
                )


def validate_tree(tree: Tree) -> list[str]:
    """
    Validate the family tree for:
    - Impossible ages (child born before parent)
    - Date ordering issues

    Returns a list of warning messages.
    """
    warnings: list[str] = []
    G = build_graph(tree)

    # birth_date is ISO format (YYYY-MM-DD) which can be compared as strings
    for parent, child, data in G.edges(data=True):
        if data.get("relationship_type") != PARENT_OF:
            continue

        parent_data = G.nodes[parent]
        child_data = G.nodes[child]
        parent_birth = parent_data.get("birth_date")
        child_birth = child_data.get("birth_date")

        if parent_birth and child_birth:
            if child_birth < parent_birth:
                warnings.append(
                    f"Impossible: {child_data.get('person_name')} born before parent "
                    f"{parent_data.get('person_name')}"
                )
            else:
                try:
                    parent_year = int(parent_birth[:4])
                    child_year = int(child_birth[:4])
                    if child_year - parent_year < 12:
                        warnings.append(
                            f"Suspicious: {parent_data.get('person_name')} was less than 12 years "
                            f"old when {child_data.get('person_name')} was born"
                        )
                except (ValueError, IndexError):
                    pass

    # Check death before birth
    for _, data in G.nodes(data=True):
        birth = data.get("birth_date")
        death = data.get("death_date")

        if birth and death and death < birth:
            warnings.append(f"Impossible: {data.get('person_name')} died before being born")

    if not nx.is_weakly_connected(G):
        warnings.append("Tree contains people that are not connected to the root")

    return warnings
