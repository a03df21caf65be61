"""Ordering a person's relationships and choosing the primary ones."""

from __future__ import annotations

import logging

from kinchart.config import OrderingRule
from kinchart.models import Relationship, Tree

logger = logging.getLogger(__name__)


def _children_first_key(relationship: Relationship) -> tuple[bool, bool]:
    # Partner-less (children only) first, then married before unmarried
    return (relationship.has_partner, not relationship.is_married)


def _married_first_key(relationship: Relationship) -> bool:
    return not relationship.is_married


def sort_relationships(
    relationships: list[Relationship], rule: OrderingRule = OrderingRule.CHILDREN_FIRST
) -> list[Relationship]:
    """Return the relationships in display order. The sort is stable."""
    key = _children_first_key if rule is OrderingRule.CHILDREN_FIRST else _married_first_key
    return sorted(relationships, key=key)


def mark_primary(
    relationships: list[Relationship], rule: OrderingRule = OrderingRule.CHILDREN_FIRST
) -> None:
    """
    Set ``is_primary`` on already sorted relationships.

    The first relationship with a partner is always the primary partnered
    one. Under CHILDREN_FIRST every partner-less relationship that has
    children is primary too, since it has no partner line to compete for.
    Under MARRIED_FIRST partner-less relationships are secondary unless no
    partnered relationship exists, in which case the first one is primary.
    """
    found_partner = False
    for relationship in relationships:
        if relationship.has_partner:
            relationship.is_primary = not found_partner
            found_partner = True
        elif rule is OrderingRule.CHILDREN_FIRST:
            relationship.is_primary = bool(relationship.child_ids)
        else:
            relationship.is_primary = False

    if rule is OrderingRule.MARRIED_FIRST and not found_partner and relationships:
        relationships[0].is_primary = True


def order_relationships(tree: Tree, rule: OrderingRule = OrderingRule.CHILDREN_FIRST) -> None:
    """Sort every anchor's relationships in place and mark the primary ones."""
    for person in tree.people.values():
        if not person.relationship_ids:
            continue
        ordered = sort_relationships(tree.relationships_of(person.id), rule)
        mark_primary(ordered, rule)
        person.relationship_ids = [relationship.id for relationship in ordered]

    logger.debug("Ordered relationships with rule %s", rule.value)
