"""Data classes for family tree entities."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

PersonId = str | int
RelationshipId = str


class StructuralError(ValueError):
    """The input is not a single-rooted tree of people."""


@dataclass
class Person:
    id: PersonId
    name: str
    image: str | None = None
    gender: str | None = None  # "male" | "female"
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    on_click: Callable[[Person], None] | None = field(default=None, repr=False)
    relationship_ids: list[RelationshipId] = field(default_factory=list)
    parent_id: PersonId | None = None
    parent_relationship_id: RelationshipId | None = None
    generation: int | None = None  # assigned, never user-supplied

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def lifespan(self) -> str:
        birth_year = self.birth_date[:4] if self.birth_date else ""
        death_year = self.death_date[:4] if self.death_date else ""
        if not birth_year and not death_year:
            return ""
        return f"{birth_year}-{death_year}"


@dataclass
class Relationship:
    id: RelationshipId
    anchor_id: PersonId
    partner_id: PersonId | None = None  # None: single parent
    is_married: bool = False
    child_ids: list[PersonId] = field(default_factory=list)
    is_primary: bool = False  # derived by the relationship orderer

    @property
    def has_partner(self) -> bool:
        return self.partner_id is not None


@dataclass
class Tree:
    """
    Arena of people and relationships reachable from a single root.

    People and relationships refer to each other by id only. Use
    ``add_person`` / ``add_relationship`` to wire the back references.
    """

    root_id: PersonId
    people: dict[PersonId, Person] = field(default_factory=dict)
    relationships: dict[RelationshipId, Relationship] = field(default_factory=dict)

    @property
    def root(self) -> Person:
        return self.people[self.root_id]

    def person(self, person_id: PersonId) -> Person:
        try:
            return self.people[person_id]
        except KeyError:
            raise StructuralError(f"Unknown person id: {person_id!r}") from None

    def relationship(self, relationship_id: RelationshipId) -> Relationship:
        try:
            return self.relationships[relationship_id]
        except KeyError:
            raise StructuralError(f"Unknown relationship id: {relationship_id!r}") from None

    def add_person(self, person: Person) -> Person:
        if person.id in self.people:
            raise StructuralError(f"Person {person.id!r} is listed more than once")
        self.people[person.id] = person
        return person

    def add_relationship(
        self,
        anchor_id: PersonId,
        partner_id: PersonId | None = None,
        is_married: bool = False,
        child_ids: list[PersonId] | None = None,
    ) -> Relationship:
        """Attach a relationship to its anchor and wire partner/child back references."""
        anchor = self.person(anchor_id)
        relationship_id = f"{anchor_id}/{len(anchor.relationship_ids)}"
        if relationship_id in self.relationships:
            raise StructuralError(
                f"Relationship id {relationship_id!r} of {anchor_id!r} is already used by "
                f"{self.relationships[relationship_id].anchor_id!r}"
            )
        relationship = Relationship(
            id=relationship_id,
            anchor_id=anchor_id,
            partner_id=partner_id,
            is_married=bool(is_married),
        )
        self.relationships[relationship.id] = relationship
        anchor.relationship_ids.append(relationship.id)

        if partner_id is not None:
            self._attach(partner_id, relationship, role="partner")
        for child_id in child_ids or []:
            self._attach(child_id, relationship, role="child")
            relationship.child_ids.append(child_id)
        return relationship

    def _attach(self, person_id: PersonId, relationship: Relationship, role: str) -> None:
        person = self.person(person_id)
        if person_id == self.root_id:
            raise StructuralError(f"Root {person_id!r} cannot be a {role} of {relationship.anchor_id!r}")
        if person.parent_id is not None:
            raise StructuralError(
                f"Person {person_id!r} is already attached to {person.parent_id!r}; "
                f"cannot also be a {role} of {relationship.anchor_id!r}"
            )
        person.parent_id = relationship.anchor_id
        person.parent_relationship_id = relationship.id

    # ------------------------------------------------------------------
    # Structural accessors
    # ------------------------------------------------------------------

    def relationships_of(self, person_id: PersonId) -> list[Relationship]:
        return [self.relationships[rid] for rid in self.person(person_id).relationship_ids]

    def parent_relationship(self, person_id: PersonId) -> Relationship | None:
        rid = self.person(person_id).parent_relationship_id
        return self.relationships.get(rid) if rid is not None else None

    def is_partner(self, person_id: PersonId) -> bool:
        """True for a married-in partner (reached as someone's partner, not as a child)."""
        relationship = self.parent_relationship(person_id)
        return relationship is not None and relationship.partner_id == person_id

    def is_child(self, person_id: PersonId) -> bool:
        relationship = self.parent_relationship(person_id)
        return relationship is not None and person_id in relationship.child_ids

    def walk(self, person_id: PersonId | None = None) -> Iterator[Person]:
        """Depth-first: person, each relationship's partner, then each child's subtree."""
        person = self.person(self.root_id if person_id is None else person_id)
        yield person
        relationships = self.relationships_of(person.id)
        for relationship in relationships:
            if relationship.partner_id is not None:
                yield self.person(relationship.partner_id)
        for relationship in relationships:
            for child_id in relationship.child_ids:
                yield from self.walk(child_id)

    def __len__(self) -> int:
        return len(self.people)

    def __contains__(self, person_id: object) -> bool:
        return person_id in self.people
