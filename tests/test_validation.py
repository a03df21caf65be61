from __future__ import annotations

import pytest

from kinchart.models import StructuralError
from kinchart.parsing import tree_from_dict
from kinchart.validation import check_structure, validate_tree


def test_valid_tree_passes(deep_data) -> None:
    check_structure(tree_from_dict(deep_data))


def test_child_under_two_relationships(deep_data) -> None:
    tree = tree_from_dict(deep_data)
    tree.relationships_of("R")[0].child_ids.append("C")

    with pytest.raises(StructuralError, match="more than one relationship"):
        check_structure(tree)


def test_back_reference_mismatch(couple_data) -> None:
    tree = tree_from_dict(couple_data)
    tree.person("B").parent_relationship_id = "R/9"

    with pytest.raises(StructuralError, match="does not point back"):
        check_structure(tree)


def test_partner_anchoring_relationships(couple_data) -> None:
    tree = tree_from_dict(couple_data)
    tree.person("Q").relationship_ids.append("Q/0")

    with pytest.raises(StructuralError, match="cannot anchor"):
        check_structure(tree)


def test_date_warnings() -> None:
    tree = tree_from_dict(
        {
            "id": "R",
            "name": "Old",
            "birth_date": "1900",
            "death_date": "1890",
            "relationships": [
                {
                    "children": [
                        {"id": "A", "name": "Early", "birth_date": "1899"},
                        {"id": "B", "name": "Young parent", "birth_date": "1905"},
                        {"id": "C", "name": "Fine", "birth_date": "1930"},
                    ]
                }
            ],
        }
    )

    warnings = validate_tree(tree)

    assert "Impossible: Early born before parent Old" in warnings
    assert any(w.startswith("Suspicious: Old") and "Young parent" in w for w in warnings)
    assert "Impossible: Old died before being born" in warnings
    assert not any("Fine" in w for w in warnings)


def test_no_warnings_without_dates(couple_data) -> None:
    assert validate_tree(tree_from_dict(couple_data)) == []


def test_unparsed_dates_do_not_abort_validation() -> None:
    tree = tree_from_dict({"id": "R", "name": "Old", "relationships": [{"children": [{"id": "A", "name": "Kid"}]}]})
    tree.person("R").birth_date = "1850-01-01"
    tree.person("A").birth_date = "c. 1900"

    assert validate_tree(tree) == []
