"""
1) Load a family tree from a nested JSON description or a GEDCOM file.
2) Check its structure, assign generations and order relationships.
3) Lay it out generation by generation and compute connectors.
4) Save it as an image / DOT file, or show it with hover and click highlighting.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from kinchart.config import ChartConfig, LayoutConfig, OrderingRule, StyleConfig
from kinchart.export import write_dot
from kinchart.models import StructuralError, Tree
from kinchart.parsing import load_tree_json, parse_gedcom, tree_from_gedcom
from kinchart.plotting import FamilyTreeChart


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Draw a family tree with lineage highlighting.")
    parser.add_argument("input", type=Path, help="Tree as nested JSON (.json) or a GEDCOM file (.ged).")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file (.png, .svg, .pdf, or .dot). If omitted, opens an interactive window.",
    )
    parser.add_argument("--root", help="GEDCOM individual xref to root the tree at, e.g. @I1@.")
    parser.add_argument("--max-generations", type=int, default=None, help="GEDCOM: limit descendant depth.")
    parser.add_argument(
        "--ordering",
        choices=[rule.value for rule in OrderingRule],
        default=OrderingRule.CHILDREN_FIRST.value,
        help="How relationships are ordered and which become primary (default: children-first).",
    )
    parser.add_argument("--highlight", help="Lock the highlight on this person id before saving.")
    parser.add_argument("--siblings", action="store_true", help="Also highlight siblings of a focused child.")
    parser.add_argument("--minimum-gap", type=float, default=LayoutConfig.minimum_gap)
    parser.add_argument("--vertical-gap", type=float, default=LayoutConfig.vertical_gap)
    parser.add_argument("--title", default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    return parser


def load_tree(args: argparse.Namespace) -> Tree:
    if args.input.suffix.lower() in (".ged", ".gedcom"):
        if not args.root:
            raise SystemExit("--root is required for GEDCOM input")
        print(f"Parsing GEDCOM file: {args.input}")
        reader = parse_gedcom(args.input)
        return tree_from_gedcom(reader, args.root, args.max_generations)

    print(f"Loading tree: {args.input}")
    return load_tree_json(args.input)


def _highlight_id(tree: Tree, raw: str):
    if raw in tree:
        return raw
    if raw.isdigit() and int(raw) in tree:
        return int(raw)
    raise SystemExit(f"Unknown person id for --highlight: {raw}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = ChartConfig(
        layout=replace(
            LayoutConfig(),
            minimum_gap=args.minimum_gap,
            vertical_gap=args.vertical_gap,
            ordering=OrderingRule(args.ordering),
        ),
        style=replace(StyleConfig(), highlight_siblings=args.siblings),
        title=args.title,
    )

    try:
        tree = load_tree(args)
        print(f"  Found {len(tree.people)} people and {len(tree.relationships)} relationships")

        print("Laying out tree...")
        chart = FamilyTreeChart(tree, config)
        chart.build()
    except StructuralError as exc:
        print(f"  Invalid tree: {exc}")
        return 1

    if chart.warnings:
        print(f"  Found {len(chart.warnings)} validation warnings:")
        for w in chart.warnings[:10]:  # Show first 10 warnings
            print(f"    - {w}")
        if len(chart.warnings) > 10:
            print(f"    ... and {len(chart.warnings) - 10} more")
    else:
        print("  No validation issues found")

    if args.highlight:
        chart.highlighter.click(_highlight_id(tree, args.highlight))

    if args.output is None:
        chart.show()
    elif args.output.suffix.lower() in (".dot", ".gv"):
        write_dot(tree, chart.layout_result, args.output)
    else:
        chart.save(args.output)

    print("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
