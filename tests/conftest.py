from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from kinchart.graph import assign_generations  # noqa: E402
from kinchart.ordering import order_relationships  # noqa: E402
from kinchart.parsing import tree_from_dict  # noqa: E402


def prepare(tree):
    assign_generations(tree)
    order_relationships(tree)
    return tree


@pytest.fixture()
def couple_data() -> dict:
    # Root R married to Q with two children A and B.
    return {
        "id": "R",
        "name": "Robert",
        "gender": "male",
        "relationships": [
            {
                "partner": {"id": "Q", "name": "Queenie", "gender": "female"},
                "is_married": True,
                "children": [
                    {"id": "A", "name": "Alice", "gender": "female"},
                    {"id": "B", "name": "Bob", "gender": "male"},
                ],
            }
        ],
    }


@pytest.fixture()
def couple_tree(couple_data):
    return prepare(tree_from_dict(couple_data))


@pytest.fixture()
def deep_data() -> dict:
    # R-Q -> A, B ; A-S -> C ; C (single parent) -> D
    return {
        "id": "R",
        "name": "Robert",
        "relationships": [
            {
                "partner": {"id": "Q", "name": "Queenie"},
                "is_married": True,
                "children": [
                    {
                        "id": "A",
                        "name": "Alice",
                        "relationships": [
                            {
                                "partner": {"id": "S", "name": "Sam"},
                                "is_married": True,
                                "children": [
                                    {
                                        "id": "C",
                                        "name": "Carol",
                                        "relationships": [{"children": [{"id": "D", "name": "Dan"}]}],
                                    }
                                ],
                            }
                        ],
                    },
                    {"id": "B", "name": "Bob"},
                ],
            }
        ],
    }


@pytest.fixture()
def deep_tree(deep_data):
    return prepare(tree_from_dict(deep_data))


@pytest.fixture()
def mixed_data() -> dict:
    # Root R: one partner-less relationship (child C1) and one marriage with P (child C2).
    return {
        "id": "R",
        "name": "Robert",
        "relationships": [
            {"partner": {"id": "P", "name": "Pat"}, "is_married": True, "children": [{"id": "C2", "name": "Cleo"}]},
            {"children": [{"id": "C1", "name": "Cody"}]},
        ],
    }


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
