from __future__ import annotations

import json

import pytest

from kinchart.models import StructuralError
from kinchart.parsing import load_tree_json, parse_date_string, parse_gedcom, tree_from_dict, tree_from_gedcom

GEDCOM = """0 HEAD
1 GEDC
2 VERS 5.5.1
1 CHAR UTF-8
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
1 FAMS @F1@
0 @I2@ INDI
1 NAME Mary /Jones/
1 SEX F
1 FAMS @F1@
0 @I3@ INDI
1 NAME Ann /Smith/
1 SEX F
1 FAMC @F1@
0 @I4@ INDI
1 NAME Tom /Smith/
1 SEX M
1 FAMC @F1@
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
1 CHIL @I4@
1 MARR
0 TRLR
"""


def test_tree_from_dict_wires_back_references(couple_data) -> None:
    tree = tree_from_dict(couple_data)

    assert tree.root_id == "R"
    assert len(tree) == 4
    (relationship,) = tree.relationships_of("R")
    assert relationship.partner_id == "Q"
    assert relationship.is_married is True
    assert relationship.child_ids == ["A", "B"]

    for person_id in ("Q", "A", "B"):
        person = tree.person(person_id)
        assert person.parent_id == "R"
        assert person.parent_relationship_id == relationship.id

    assert tree.is_partner("Q")
    assert not tree.is_child("Q")
    assert tree.is_child("A")
    assert tree.root.is_root


def test_tree_from_dict_accepts_camel_case_keys() -> None:
    clicked = []
    tree = tree_from_dict(
        {
            "id": 1,
            "name": "Root",
            "onClick": clicked.append,
            "relationships": [{"partner": {"id": 2, "name": "P"}, "isMarried": True, "children": []}],
        }
    )

    assert tree.relationships_of(1)[0].is_married is True
    tree.person(1).on_click("x")
    assert clicked == ["x"]


def test_duplicate_person_is_a_structural_error(couple_data) -> None:
    couple_data["relationships"][0]["children"].append({"id": "A", "name": "Alice again"})

    with pytest.raises(StructuralError, match="more than once"):
        tree_from_dict(couple_data)


def test_partner_with_own_relationships_is_rejected(couple_data) -> None:
    couple_data["relationships"][0]["partner"]["relationships"] = [{"children": [{"id": "Z", "name": "Z"}]}]

    with pytest.raises(StructuralError, match="cannot anchor"):
        tree_from_dict(couple_data)


def test_empty_description_is_rejected() -> None:
    with pytest.raises(StructuralError):
        tree_from_dict({})


def test_load_tree_json(tmp_path, couple_data) -> None:
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(couple_data), encoding="utf-8")

    tree = load_tree_json(path)

    assert sorted(tree.people) == ["A", "B", "Q", "R"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("25 NOV 1954", "1954-11-25"),
        ("NOV 1954", "1954-11-01"),
        ("ABT 1905", "1905-01-01"),
        ("1839-08-29", "1839-08-29"),
        ("1746-00-00", "1746-01-01"),
        ("April 17, 1850", "1850-04-17"),
        ("(1789?)", "1789-01-01"),
        ("sometime", None),
        (None, None),
    ],
)
def test_parse_date_string(raw, expected) -> None:
    assert parse_date_string(raw) == expected


def test_lifespan_uses_parsed_years() -> None:
    tree = tree_from_dict({"id": "R", "name": "R", "birth_date": "3 MAR 1901", "death_date": "1980"})

    assert tree.root.lifespan == "1901-1980"


def test_tree_from_gedcom(tmp_path) -> None:
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")

    tree = tree_from_gedcom(parse_gedcom(path), "@I1@")

    assert tree.root_id == "I1"
    assert tree.root.name == "John Smith"
    assert tree.root.gender == "male"
    (relationship,) = tree.relationships_of("I1")
    assert relationship.partner_id == "I2"
    assert relationship.is_married is True
    assert relationship.child_ids == ["I3", "I4"]
    assert tree.person("I2").gender == "female"


def test_tree_from_gedcom_limits_depth(tmp_path) -> None:
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")

    tree = tree_from_gedcom(parse_gedcom(path), "I1", max_generations=0)

    assert list(tree.people) == ["I1"]


def test_tree_from_gedcom_unknown_root(tmp_path) -> None:
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")

    with pytest.raises(StructuralError, match="not found"):
        tree_from_gedcom(parse_gedcom(path), "@I99@")
