"""Tests for the ``nodeboundary-walk`` command-line helper."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from nodeboundary.scripts import walk_boundaries


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(walk_boundaries, "configure_from_settings", lambda settings: None)
    for name in ("NODEBOUNDARY_MAX_WALK_STEPS", "NODEBOUNDARY_TREE_FORMAT", "NODEBOUNDARY_ANCHOR_LEAVES_OUTSIDE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("NODEBOUNDARY_NORMALIZE_EXCLUSIVE", raising=False)


@pytest.fixture
def tree_file(tmp_path: Path) -> Path:
    target = tmp_path / "tree.json"
    target.write_text(json.dumps({"tag": "main", "children": [{"tag": "a"}, {"tag": "b"}]}), encoding="utf-8")
    return target


def _run(tmp_path: Path, capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, list[str], str]:
    code = walk_boundaries.main([*argv, "--settings", str(tmp_path / "settings.json")])
    captured = capsys.readouterr()
    return code, captured.out.splitlines(), captured.err


def test_walk_nodes_from_root(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file), "--nodes")

    assert code == 0
    assert lines == ["/0 BEFORE_OPEN <a>", "/1 BEFORE_OPEN <b>", "/ BEFORE_CLOSE <main>"]


def test_walk_every_boundary(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file))

    assert code == 0
    assert len(lines) == 11
    assert lines[0] == "/ AFTER_OPEN <main>"
    assert lines[-1] == "/ AFTER_CLOSE <main>"


def test_walk_backwards(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file), "--nodes", "--direction", "previous")

    assert code == 0
    assert lines == ["/1 AFTER_CLOSE <b>", "/0 AFTER_CLOSE <a>", "/ AFTER_OPEN <main>"]


def test_walk_respects_max_steps(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file), "--max-steps", "3")

    assert code == 0
    assert len(lines) == 3


def test_walk_from_explicit_start(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file), "--nodes", "--start", "0:after_close")

    assert code == 0
    assert lines == ["/1 BEFORE_OPEN <b>", "/ BEFORE_CLOSE <main>"]


def test_walk_with_anchors(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file), "--nodes", "--anchors")

    assert code == 0
    assert lines == [
        "/0 BEFORE_OPEN <a> -> /@0",
        "/1 BEFORE_OPEN <b> -> /@1",
        "/ BEFORE_CLOSE <main> -> /@2",
    ]


def test_root_outside_boundary_has_no_anchor(tree_file: Path, tmp_path: Path, capsys) -> None:
    _, lines, _ = _run(tmp_path, capsys, str(tree_file), "--anchors", "--start", ":AFTER_CLOSE")

    assert lines == ["/ AFTER_CLOSE <main> -> -"]


def test_select_uses_normalize_setting(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, _ = _run(tmp_path, capsys, str(tree_file), "--select", "1")

    assert code == 0
    assert lines == ["start: /0 AFTER_CLOSE <a>", "end: / BEFORE_CLOSE <main>", "static: /@1 /@2"]

    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"normalize_exclusive": False}), encoding="utf-8")
    _, lines, _ = _run(tmp_path, capsys, str(tree_file), "--select", "1")

    assert lines[:2] == ["start: /1 BEFORE_OPEN <b>", "end: /1 AFTER_CLOSE <b>"]


def test_bad_start_reports_error(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, lines, err = _run(tmp_path, capsys, str(tree_file), "--start", "5:BEFORE_OPEN")

    assert code == 1
    assert lines == []
    assert "Path segment '5'" in err


@pytest.mark.parametrize("flag", ["--start=-1:BEFORE_OPEN", "--select=-1"])
def test_negative_path_segment_is_rejected(tree_file: Path, tmp_path: Path, capsys, flag: str) -> None:
    code, lines, err = _run(tmp_path, capsys, str(tree_file), flag)

    assert code == 1
    assert lines == []
    assert "Path segment '-1'" in err


def test_unknown_side_reports_error(tree_file: Path, tmp_path: Path, capsys) -> None:
    code, _, err = _run(tmp_path, capsys, str(tree_file), "--start", "0:MIDDLE")

    assert code == 1
    assert "Unknown side" in err


def test_invalid_document_lists_issues(tmp_path: Path, capsys) -> None:
    target = tmp_path / "broken.json"
    target.write_text('{"tag": "main", "children": [1]}', encoding="utf-8")

    code, _, err = _run(tmp_path, capsys, str(target))

    assert code == 1
    assert err.startswith("error: [tree_load]")
    assert "  - children[0]" in err


def test_node_path_and_describe(tmp_path: Path) -> None:
    from nodeboundary.boundary import Boundary
    from nodeboundary.flags import Side
    from nodeboundary.tree.loader import load_tree

    root = load_tree('{"tag": "p", "children": ["A", {"tag": "span", "children": ["B C"]}]}')
    text = root.child_nodes[1].first_child

    assert walk_boundaries.node_path(text) == "/1/0"
    assert walk_boundaries.describe(Boundary(text, Side.AFTER_OPEN)) == "/1/0 AFTER_OPEN #text 'B C'"
    assert walk_boundaries.describe(Boundary()) == "null"
