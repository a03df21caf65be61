from __future__ import annotations

from kinchart.config import LayoutConfig
from kinchart.export import POINTS_PER_UNIT, to_dot, write_dot
from kinchart.layout import compute_layout
from kinchart.parsing import tree_from_dict

from conftest import prepare


def _nodes_by_label(P) -> dict:
    return {n.get("label").strip('"'): n for n in P.get_nodes() if n.get("label") not in (None, '""', "")}


def test_to_dot_pins_people_at_card_centers(couple_tree) -> None:
    layout = compute_layout(couple_tree, LayoutConfig())

    P = to_dot(couple_tree, layout)

    nodes = _nodes_by_label(P)
    assert set(nodes) == {"Robert", "Queenie", "Alice", "Bob"}
    x, y = layout["A"].center
    assert nodes["Alice"].get("pos").strip('"') == f"{x * POINTS_PER_UNIT:.1f},{-y * POINTS_PER_UNIT:.1f}!"
    assert nodes["Alice"].get("fillcolor") == "lightpink"
    assert nodes["Bob"].get("fillcolor") == "lightblue"


def test_to_dot_uses_family_nodes(couple_tree) -> None:
    layout = compute_layout(couple_tree, LayoutConfig())

    P = to_dot(couple_tree, layout)

    points = [n for n in P.get_nodes() if n.get("shape") == "point"]
    assert len(points) == 1
    # Two partners into the family node, two children out of it
    assert len(P.get_edges()) == 4
    assert all(e.get("style") == "solid" for e in P.get_edges())


def test_secondary_relationship_edges_are_dashed(mixed_data) -> None:
    tree = prepare(tree_from_dict(mixed_data))
    tree.relationships["R/0"].is_primary = False
    layout = compute_layout(tree, LayoutConfig())

    P = to_dot(tree, layout)

    styles = [e.get("style") for e in P.get_edges()]
    # R and P into the secondary family node, C2 out of it
    assert styles.count("dashed") == 3


def test_write_dot_source(tmp_path, couple_tree, capsys) -> None:
    output = tmp_path / "tree.dot"

    write_dot(couple_tree, compute_layout(couple_tree, LayoutConfig()), output)

    text = output.read_text()
    assert text.startswith("digraph")
    assert "Alice" in text
    assert "Graph saved to" in capsys.readouterr().out
