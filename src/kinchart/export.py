"""Graphviz export of a laid-out tree through pydot."""

from __future__ import annotations

from pathlib import Path

import pydot

from kinchart.graph import build_union_layout_graph
from kinchart.layout import LayoutResult
from kinchart.models import Tree

POINTS_PER_UNIT = 0.5  # layout units are screen pixels; Graphviz positions are points


def _node_name(index: int) -> str:
    return f"n{index}"


def to_dot(tree: Tree, layout: LayoutResult) -> pydot.Dot:
    """
    Build a pydot graph with the union-node model and pinned positions.

    Person nodes sit at their card centers, family nodes at the midpoint of
    the partners (or under a single parent). Secondary relationships are
    drawn dashed, like on the chart.
    """
    H = build_union_layout_graph(tree)
    names = {node: _node_name(i) for i, node in enumerate(H.nodes())}

    P = pydot.Dot(graph_type="digraph")
    P.set("splines", "ortho")
    P.set("outputorder", "edgesfirst")

    positions: dict = {}
    for node, data in H.nodes(data=True):
        if data["node_type"] == "person" and node in layout:
            x, y = layout[node].center
            positions[node] = (x, y)

    for node, data in H.nodes(data=True):
        if data["node_type"] != "family":
            continue
        present = [s for s in data["spouses"] if s in positions]
        if present:
            x = sum(positions[s][0] for s in present) / len(present)
            y = positions[present[0]][1] + layout[present[0]].height / 2
            positions[node] = (x, y)

    for node, data in H.nodes(data=True):
        attrs = {}
        if node in positions:
            x, y = positions[node]
            # Graphviz y grows upwards
            attrs["pos"] = f"{x * POINTS_PER_UNIT:.1f},{-y * POINTS_PER_UNIT:.1f}!"

        if data["node_type"] == "family":
            # Family nodes are small invisible points
            P.add_node(pydot.Node(names[node], shape="point", width="0.1", height="0.1", label="", **attrs))
            continue

        label = data["person_name"]
        if data.get("lifespan"):
            label = f"{label}\n{data['lifespan']}"
        gender = data.get("gender")
        if gender == "male":
            fillcolor = "lightblue"
        elif gender == "female":
            fillcolor = "lightpink"
        else:
            fillcolor = "lightgray"
        P.add_node(
            pydot.Node(
                names[node],
                label=label,
                shape="box",
                style="rounded,filled",
                fillcolor=fillcolor,
                fontsize="10",
                **attrs,
            )
        )

    for u, v, data in H.edges(data=True):
        family = u if data["edge_type"] == "family_to_child" else v
        style = "solid" if H.nodes[family]["is_primary"] else "dashed"
        if data["edge_type"] == "spouse_to_family":
            P.add_edge(pydot.Edge(names[u], names[v], dir="none", color="darkgray", style=style))
        else:
            P.add_edge(pydot.Edge(names[u], names[v], color="darkgray", style=style))

    return P


def write_dot(tree: Tree, layout: LayoutResult, output_path: Path) -> None:
    """
    Write the tree as DOT source (.dot/.gv) or render it with Graphviz
    (any other extension, e.g. .svg or .png) keeping the computed positions.
    """
    output_path = Path(output_path)
    P = to_dot(tree, layout)
    ext = output_path.suffix.lower().lstrip(".")
    if ext in ("dot", "gv", ""):
        P.write(str(output_path), format="raw")
    else:
        P.write(str(output_path), prog=["neato", "-n2"], format=ext)
    print(f"Graph saved to {output_path}")
