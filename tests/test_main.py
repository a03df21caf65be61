from __future__ import annotations

import json

import pytest

from kinchart.main import build_parser, main


@pytest.fixture()
def tree_file(tmp_path, couple_data):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(couple_data), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["tree.json"])

    assert args.ordering == "children-first"
    assert args.output is None
    assert args.siblings is False


def test_main_saves_png(tmp_path, tree_file, capsys) -> None:
    output = tmp_path / "tree.png"

    assert main([str(tree_file), "-o", str(output), "--highlight", "A"]) == 0

    assert output.exists()
    out = capsys.readouterr().out
    assert "Found 4 people and 1 relationships" in out
    assert "Done!" in out


def test_main_writes_dot(tmp_path, tree_file) -> None:
    output = tmp_path / "tree.dot"

    assert main([str(tree_file), "-o", str(output), "--ordering", "married-first"]) == 0

    assert output.read_text().startswith("digraph")


def test_main_reports_invalid_tree(tmp_path, couple_data, capsys) -> None:
    couple_data["relationships"][0]["children"].append({"id": "R", "name": "Loop"})
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(couple_data), encoding="utf-8")

    assert main([str(path), "-o", str(tmp_path / "bad.png")]) == 1

    assert "Invalid tree" in capsys.readouterr().out
    assert not (tmp_path / "bad.png").exists()


def test_main_rejects_unknown_highlight(tmp_path, tree_file) -> None:
    with pytest.raises(SystemExit):
        main([str(tree_file), "-o", str(tmp_path / "x.png"), "--highlight", "nobody"])


def test_gedcom_requires_root(tmp_path) -> None:
    path = tmp_path / "family.ged"
    path.write_text("0 HEAD\n0 TRLR\n", encoding="utf-8")

    with pytest.raises(SystemExit):
        main([str(path)])
