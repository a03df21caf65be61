"""Family tree layout with interactive lineage highlighting."""

from kinchart.config import ChartConfig, LayoutConfig, OrderingRule, StyleConfig
from kinchart.highlight import FocusState, HighlightController, HighlightSet, collect_highlight
from kinchart.models import Person, Relationship, StructuralError, Tree
from kinchart.parsing import load_tree_json, tree_from_dict, tree_from_gedcom
from kinchart.plotting import FamilyTreeChart, plot_tree

__all__ = [
    "ChartConfig",
    "FamilyTreeChart",
    "FocusState",
    "HighlightController",
    "HighlightSet",
    "LayoutConfig",
    "OrderingRule",
    "Person",
    "Relationship",
    "StructuralError",
    "StyleConfig",
    "Tree",
    "collect_highlight",
    "load_tree_json",
    "plot_tree",
    "tree_from_dict",
    "tree_from_gedcom",
]
