"""Tests for the node-level generators ``next_nodes``/``previous_nodes``."""

from __future__ import annotations

from nodeboundary.boundary import Boundary
from nodeboundary.flags import Side
from nodeboundary.tree.nodes import Element


def _collect(iterator) -> list[tuple[object, Side]]:
    return [(step.node, step.side) for step in iterator]


def _article_tree() -> tuple[Element, Element]:
    article = Element("article")
    main = Element("main", children=[article])
    return main, article


def test_next_nodes_reports_each_node_once(siblings) -> None:
    main, a, b = siblings.main, siblings.a, siblings.b

    steps = _collect(Boundary(main, Side.AFTER_OPEN).next_nodes())

    assert steps == [(a, Side.BEFORE_OPEN), (b, Side.BEFORE_OPEN), (main, Side.BEFORE_CLOSE)]


def test_next_nodes_from_before_open_descends(nested) -> None:
    a = nested.first_child
    x, y = a.child_nodes
    b = nested.last_child

    steps = _collect(Boundary(a, Side.BEFORE_OPEN).next_nodes())

    assert steps == [
        (a, Side.BEFORE_OPEN),
        (x, Side.BEFORE_OPEN),
        (y, Side.BEFORE_OPEN),
        (b, Side.BEFORE_OPEN),
        (nested, Side.BEFORE_CLOSE),
    ]


def test_next_nodes_exclude_start_reports_closing_ancestor(nested) -> None:
    a = nested.first_child
    x, y = a.child_nodes
    b = nested.last_child

    steps = _collect(Boundary(a, Side.BEFORE_OPEN).next_nodes(include_start=False))

    assert steps == [
        (x, Side.BEFORE_OPEN),
        (y, Side.BEFORE_OPEN),
        (a, Side.BEFORE_CLOSE),
        (b, Side.BEFORE_OPEN),
        (nested, Side.BEFORE_CLOSE),
    ]


def test_next_nodes_from_sibling_gap() -> None:
    main, article = _article_tree()

    steps = _collect(Boundary(article, Side.BEFORE_OPEN).next_nodes())

    assert steps == [(article, Side.BEFORE_OPEN), (main, Side.BEFORE_CLOSE)]


def test_next_nodes_from_inside_empty_node() -> None:
    main, article = _article_tree()

    steps = _collect(Boundary(article, Side.AFTER_OPEN).next_nodes())

    assert steps == [(article, Side.BEFORE_CLOSE), (main, Side.BEFORE_CLOSE)]


def test_next_nodes_from_root_end_yields_nothing(siblings) -> None:
    boundary = Boundary(siblings.main, Side.AFTER_CLOSE)

    assert list(boundary.next_nodes()) == []
    assert boundary.is_null()


def test_next_nodes_yields_the_same_cursor(siblings) -> None:
    boundary = Boundary(siblings.main, Side.AFTER_OPEN)

    yielded = list(boundary.next_nodes())

    assert all(step is boundary for step in yielded)
    assert boundary == Boundary(siblings.main, Side.BEFORE_CLOSE)


def test_next_nodes_can_stop_early(siblings) -> None:
    boundary = Boundary(siblings.main, Side.AFTER_OPEN)

    first = next(boundary.next_nodes())

    assert first == Boundary(siblings.a, Side.BEFORE_OPEN)
    assert boundary == Boundary(siblings.a, Side.BEFORE_OPEN)


def test_yielded_sides_are_before_sides(nested) -> None:
    for step in Boundary(nested, Side.BEFORE_OPEN).next_nodes():
        assert step.side in (Side.BEFORE_OPEN, Side.BEFORE_CLOSE)


def test_previous_nodes_mirrors_next_nodes(siblings) -> None:
    main, a, b = siblings.main, siblings.a, siblings.b

    steps = _collect(Boundary(main, Side.BEFORE_CLOSE).previous_nodes())

    assert steps == [(b, Side.AFTER_CLOSE), (a, Side.AFTER_CLOSE), (main, Side.AFTER_OPEN)]


def test_previous_nodes_from_after_close_descends(nested) -> None:
    a = nested.first_child
    x, y = a.child_nodes

    steps = _collect(Boundary(a, Side.AFTER_CLOSE).previous_nodes())

    assert steps == [
        (a, Side.AFTER_CLOSE),
        (y, Side.AFTER_CLOSE),
        (x, Side.AFTER_CLOSE),
        (nested, Side.AFTER_OPEN),
    ]


def test_previous_nodes_exclude_start(nested) -> None:
    a = nested.first_child
    x, y = a.child_nodes

    steps = _collect(Boundary(a, Side.AFTER_CLOSE).previous_nodes(include_start=False))

    assert steps == [
        (y, Side.AFTER_CLOSE),
        (x, Side.AFTER_CLOSE),
        (a, Side.AFTER_OPEN),
        (nested, Side.AFTER_OPEN),
    ]


def test_previous_nodes_from_root_start_yields_nothing(siblings) -> None:
    assert list(Boundary(siblings.main, Side.BEFORE_OPEN).previous_nodes()) == []
