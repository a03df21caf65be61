"""Loading family trees from nested dictionaries, JSON files and GEDCOM files."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from ged4py import GedcomReader

from kinchart.models import Person, PersonId, StructuralError, Tree

logger = logging.getLogger(__name__)


# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1,
    "JANUARY": 1,
    "FEB": 2,
    "FEBRUARY": 2,
    "MAR": 3,
    "MARCH": 3,
    "APR": 4,
    "APRIL": 4,
    "MAY": 5,
    "JUN": 6,
    "JUNE": 6,
    "JUL": 7,
    "JULY": 7,
    "AUG": 8,
    "AUGUST": 8,
    "SEP": 9,
    "SEPT": 9,
    "SEPTEMBER": 9,
    "OCT": 10,
    "OCTOBER": 10,
    "NOV": 11,
    "NOVEMBER": 11,
    "DEC": 12,
    "DECEMBER": 12,
}

GENDER_MAP = {"M": "male", "F": "female"}


# ============================================================================
# Nested dictionaries / JSON
# ============================================================================


def _person_from_dict(data: dict[str, Any]) -> Person:
    if "id" not in data:
        raise StructuralError(f"Person entry without an id: {data!r}")
    return Person(
        id=data["id"],
        name=str(data.get("name") or "Unknown"),
        image=data.get("image") or None,
        gender=data.get("gender") or None,
        birth_date=parse_date_string(data.get("birth_date") or data.get("birthDate")),
        death_date=parse_date_string(data.get("death_date") or data.get("deathDate")),
        on_click=data.get("on_click") or data.get("onClick"),
    )


def _add_subtree(tree: Tree, data: dict[str, Any]) -> PersonId:
    person = tree.add_person(_person_from_dict(data))

    for rel_data in data.get("relationships") or []:
        partner_id = None
        partner_data = rel_data.get("partner")
        if partner_data:
            if partner_data.get("relationships"):
                raise StructuralError(
                    f"Partner {partner_data.get('id')!r} cannot anchor relationships; "
                    f"attach the children to the relationship with {person.id!r}"
                )
            partner_id = tree.add_person(_person_from_dict(partner_data)).id

        child_ids = [_add_subtree(tree, child) for child in rel_data.get("children") or []]

        is_married = rel_data.get("is_married", rel_data.get("isMarried", False))
        tree.add_relationship(person.id, partner_id, bool(is_married), child_ids)

    return person.id


def tree_from_dict(data: dict[str, Any]) -> Tree:
    """
    Build a Tree from a nested root description.

    Each person is a dict with ``id``, ``name`` and optional ``image``,
    ``gender``, ``birth_date``, ``death_date``, ``on_click`` and
    ``relationships``. Each relationship is a dict with an optional
    ``partner`` (a person dict), ``is_married`` and ``children``.
    camelCase keys (``isMarried``, ``onClick``) are accepted as well.

    Raises:
        StructuralError: if a person is listed twice or a partner anchors
            relationships of its own.
    """
    if not data:
        raise StructuralError("Empty tree description")
    tree = Tree(root_id=data.get("id"))
    _add_subtree(tree, data)
    return tree


def load_tree_json(path: Path) -> Tree:
    """Read a nested tree description from a JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return tree_from_dict(data)


# ============================================================================
# GEDCOM
# ============================================================================


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a date string into ISO format (YYYY-MM-DD).
    Returns None if the date cannot be parsed.

    Handles formats like "25 NOV 1954", "NOV 1954", "ABT 1905", "1698",
    "1839-08-29" and "April 17, 1850".
    """
    if not date_str:
        return None

    s = str(date_str).strip().strip("()").rstrip("?")
    s = re.sub(
        r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|CIRCA|CA\.?|AROUND):?\s*",
        "",
        s,
        flags=re.IGNORECASE,
    ).strip()
    if not s:
        return None

    # "1839-08-29" or "1746-00-00"
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        month, day = month or 1, day or 1
        if 1 <= month <= 12 and 1 <= day <= 31:
            return f"{year:04d}-{month:02d}-{day:02d}"
        return None

    # "25 NOV 1954" or "11 Aug. 1968"
    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(2).upper())
        if month:
            return f"{int(match.group(3)):04d}-{month:02d}-{int(match.group(1)):02d}"

    # "NOV 1954" or "May, 1837"
    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return f"{int(match.group(2)):04d}-{month:02d}-01"

    # "April 17, 1850"
    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$", s)
    if match:
        month = MONTH_MAP.get(match.group(1).upper())
        if month:
            return f"{int(match.group(3)):04d}-{month:02d}-{int(match.group(2)):02d}"

    # "1698"
    match = re.match(r"^(\d{4})$", s)
    if match:
        return f"{int(match.group(1)):04d}-01-01"

    return None


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name(indi) -> str:
    """Extract the display name from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        parts = [p for p in name_rec.value if p]
        return " ".join(parts) if parts else "Unknown"

    # Fallback: string format "Given /Surname/"
    return str(name_rec.value).replace("/", "").strip() or "Unknown"


def extract_event_date(indi, tag: str) -> str | None:
    """Extract the ISO date of an event tag (BIRT, DEAT, ...)."""
    event = indi.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    if date_rec is None or not date_rec.value:
        return None
    # ged4py may return DateValue objects
    return parse_date_string(str(date_rec.value))


def extract_image(indi) -> str | None:
    """Return the first multimedia file reference of an individual, if any."""
    obje = indi.sub_tag("OBJE")
    if obje is None:
        return None
    file_rec = obje.sub_tag("FILE")
    return str(file_rec.value) if file_rec is not None and file_rec.value else None


def _xref(rec) -> str:
    return rec.xref_id.strip("@")


def _person_from_record(indi) -> Person:
    sex_rec = indi.sub_tag("SEX")
    return Person(
        id=_xref(indi),
        name=extract_name(indi),
        image=extract_image(indi),
        gender=GENDER_MAP.get(sex_rec.value) if sex_rec is not None else None,
        birth_date=extract_event_date(indi, "BIRT"),
        death_date=extract_event_date(indi, "DEAT"),
    )


def tree_from_gedcom(
    reader: GedcomReader, root_xref: str, max_generations: int | None = None
) -> Tree:
    """
    Build a descendant Tree rooted at one individual of a GEDCOM file.

    Every family in which a descendant is a spouse becomes one relationship
    anchored on that descendant; the other spouse is the partner and the
    family's children are expanded recursively. Partners are not expanded.

    Args:
        reader: An open GedcomReader
        root_xref: Individual xref, with or without the surrounding "@"
        max_generations: Stop expanding children below this depth (None: no limit)

    Raises:
        StructuralError: if the root is missing or the descendants do not
            form a tree (e.g. a descendant married another descendant).
    """
    individuals = {_xref(rec): rec for rec in reader.records0("INDI") if rec.xref_id}
    root_id = root_xref.strip("@")
    if root_id not in individuals:
        raise StructuralError(f"Individual {root_xref!r} not found in GEDCOM file")

    tree = Tree(root_id=root_id)

    def expand(indi, depth: int) -> str:
        person = tree.add_person(_person_from_record(indi))
        if max_generations is not None and depth >= max_generations:
            return person.id

        for fam in indi.sub_tags("FAMS"):
            partner_id = None
            for tag in ("HUSB", "WIFE"):
                spouse = fam.sub_tag(tag)
                if spouse is not None and spouse.xref_id and _xref(spouse) != person.id:
                    partner_id = tree.add_person(_person_from_record(spouse)).id

            child_ids = [
                expand(child, depth + 1) for child in fam.sub_tags("CHIL") if child.xref_id
            ]
            is_married = fam.sub_tag("MARR") is not None
            tree.add_relationship(person.id, partner_id, is_married, child_ids)

        return person.id

    expand(individuals[root_id], 0)
    logger.info("Loaded %d people from GEDCOM rooted at %s", len(tree), root_id)
    return tree
