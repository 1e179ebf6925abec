"""Shared pytest fixtures."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from nodeboundary.boundary import Boundary
from nodeboundary.flags import Side
from nodeboundary.tree.nodes import Element, Text


@dataclass(slots=True)
class SiblingTree:
    """``<main><a/><b/></main>``"""

    main: Element
    a: Element
    b: Element


@dataclass(slots=True)
class SpanTree:
    """``<p>A<span>B C</span>D</p>`` with text leaves."""

    p: Element
    text_a: Text
    span: Element
    text_b: Text
    text_d: Text


@pytest.fixture
def siblings() -> SiblingTree:
    a = Element("a")
    b = Element("b")
    main = Element("main", children=[a, b])
    return SiblingTree(main=main, a=a, b=b)


@pytest.fixture
def span_tree() -> SpanTree:
    text_a = Text("A")
    text_b = Text("B C")
    text_d = Text("D")
    span = Element("span", children=[text_b])
    p = Element("p", children=[text_a, span, text_d])
    return SpanTree(p=p, text_a=text_a, span=span, text_b=text_b, text_d=text_d)


@pytest.fixture
def nested() -> Element:
    """``<main><a><x/><y/></a><b/></main>``"""

    return Element(
        "main",
        children=[Element("a", children=[Element("x"), Element("y")]), Element("b")],
    )


def walk_all(root: Element) -> list[Boundary]:
    """Return snapshots of every boundary from the root's opening bound to its closing one."""

    boundary = Boundary(root, Side.BEFORE_OPEN)
    steps: list[Boundary] = []
    while not boundary.is_null():
        steps.append(boundary.clone())
        boundary.next()
    return steps


@pytest.fixture
def walk():
    return walk_all
