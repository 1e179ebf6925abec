"""Offset-based native ranges over the reference tree.

These mirror the ``StaticRange`` and ``Range`` interfaces: endpoints are
``(container, offset)`` anchors, where the offset counts children for
containers and characters for leaf nodes. They hold no mutation tracking; the
offsets go stale when the tree changes, which is the problem
:class:`~nodeboundary.BoundaryRange` exists to solve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import IndexSizeError, InvalidArgumentError, InvalidOperationError
from .protocol import DocumentPosition, TreeNode

__all__ = ["StaticRange", "Range", "compare_boundary_points"]

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class StaticRange:
    """Immutable pair of anchors; ordering is not validated."""

    start_container: Any
    start_offset: int
    end_container: Any
    end_offset: int

    @property
    def collapsed(self) -> bool:
        """Return ``True`` when both anchors are identical."""

        return self.start_container is self.end_container and self.start_offset == self.end_offset

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_container": self.start_container,
            "start_offset": self.start_offset,
            "end_container": self.end_container,
            "end_offset": self.end_offset,
        }


def compare_boundary_points(a_node: Any, a_offset: int, b_node: Any, b_offset: int) -> int | None:
    """Order two anchors; ``-1``/``0``/``1``, or ``None`` across disconnected trees."""

    if a_node is b_node:
        return (a_offset > b_offset) - (a_offset < b_offset)
    relation = a_node.compare_position(b_node)
    if relation & DocumentPosition.DISCONNECTED:
        return None
    if relation & DocumentPosition.PRECEDING and not relation & DocumentPosition.CONTAINS:
        # b precedes a and is not its ancestor; flip the question around
        result = compare_boundary_points(b_node, b_offset, a_node, a_offset)
        return None if result is None else -result
    if relation & DocumentPosition.CONTAINED_BY:
        # a is an ancestor of b: compare a's offset with b's branch index
        child = b_node
        while child.parent is not a_node:
            child = child.parent
        return 1 if _child_index(child) < a_offset else -1
    if relation & DocumentPosition.CONTAINS:
        child = a_node
        while child.parent is not b_node:
            child = child.parent
        return -1 if _child_index(child) < b_offset else 1
    return -1


class Range:
    """Mutable anchor pair with ``Range``-style collapsing semantics.

    A freshly created range is unset. Setting a start that lands after the end,
    or in a different tree, moves the end onto the start; setting an end before
    the start moves the start onto the end.
    """

    __slots__ = ("_start_container", "_start_offset", "_end_container", "_end_offset")

    def __init__(self) -> None:
        self._start_container: Any = None
        self._start_offset = 0
        self._end_container: Any = None
        self._end_offset = 0

    @property
    def start_container(self) -> Any:
        return self._start_container

    @property
    def start_offset(self) -> int:
        return self._start_offset

    @property
    def end_container(self) -> Any:
        return self._end_container

    @property
    def end_offset(self) -> int:
        return self._end_offset

    @property
    def is_set(self) -> bool:
        return self._start_container is not None

    @property
    def collapsed(self) -> bool:
        return self._start_container is self._end_container and self._start_offset == self._end_offset

    @property
    def common_ancestor_container(self) -> Any:
        if not self.is_set:
            return None
        node = self._start_container
        while node is not None:
            if _is_inclusive_ancestor(node, self._end_container):
                return node
            node = node.parent
        return None

    def set_start(self, node: Any, offset: int) -> None:
        offset = _validate_anchor(node, offset)
        self._start_container, self._start_offset = node, offset
        if self._end_container is None or self._is_out_of_order():
            if self._end_container is not None:
                LOGGER.debug("Range start moved past end; collapsing onto start")
            self._end_container, self._end_offset = node, offset

    def set_end(self, node: Any, offset: int) -> None:
        offset = _validate_anchor(node, offset)
        self._end_container, self._end_offset = node, offset
        if self._start_container is None or self._is_out_of_order():
            if self._start_container is not None:
                LOGGER.debug("Range end moved before start; collapsing onto end")
            self._start_container, self._start_offset = node, offset

    def set_start_before(self, node: Any) -> None:
        parent = _require_parent(node)
        self.set_start(parent, _child_index(node))

    def set_start_after(self, node: Any) -> None:
        parent = _require_parent(node)
        self.set_start(parent, _child_index(node) + 1)

    def set_end_before(self, node: Any) -> None:
        parent = _require_parent(node)
        self.set_end(parent, _child_index(node))

    def set_end_after(self, node: Any) -> None:
        parent = _require_parent(node)
        self.set_end(parent, _child_index(node) + 1)

    def select_node(self, node: Any) -> None:
        parent = _require_parent(node)
        index = _child_index(node)
        self._start_container, self._start_offset = parent, index
        self._end_container, self._end_offset = parent, index + 1

    def select_node_contents(self, node: Any) -> None:
        _validate_anchor(node, 0)
        self._start_container, self._start_offset = node, 0
        self._end_container, self._end_offset = node, _node_length(node)

    def collapse(self, to_start: bool = False) -> None:
        if to_start:
            self._end_container, self._end_offset = self._start_container, self._start_offset
        else:
            self._start_container, self._start_offset = self._end_container, self._end_offset

    def compare_point(self, node: Any, offset: int) -> int:
        """Return ``-1``/``0``/``1`` for an anchor before, inside or after the range."""

        if not self.is_set:
            raise InvalidOperationError("cannot compare against an unset Range")
        offset = _validate_anchor(node, offset)
        before = compare_boundary_points(node, offset, self._start_container, self._start_offset)
        if before is None:
            raise InvalidOperationError("anchor is not in the same tree as the Range")
        if before == -1:
            return -1
        after = compare_boundary_points(node, offset, self._end_container, self._end_offset)
        if after == 1:
            return 1
        return 0

    def to_static_range(self) -> StaticRange:
        if not self.is_set:
            raise InvalidOperationError("cannot create StaticRange from an unset Range")
        return StaticRange(self._start_container, self._start_offset, self._end_container, self._end_offset)

    def _is_out_of_order(self) -> bool:
        order = compare_boundary_points(
            self._start_container, self._start_offset, self._end_container, self._end_offset
        )
        return order is None or order > 0

    def __repr__(self) -> str:
        return (
            f"Range(({self._start_container!r}, {self._start_offset}), "
            f"({self._end_container!r}, {self._end_offset}))"
        )


def _node_length(node: Any) -> int:
    length = getattr(node, "length", None)
    if isinstance(length, int):
        return length
    return len(node.child_nodes)


def _child_index(node: Any) -> int:
    index = 0
    sibling = node.previous_sibling
    while sibling is not None:
        index += 1
        sibling = sibling.previous_sibling
    return index


def _is_inclusive_ancestor(node: Any, other: Any) -> bool:
    while other is not None:
        if other is node:
            return True
        other = other.parent
    return False


def _require_parent(node: Any) -> Any:
    if not isinstance(node, TreeNode):
        raise InvalidArgumentError("expected a tree node", details={"type": type(node).__name__})
    parent = node.parent
    if parent is None:
        raise InvalidOperationError("node has no parent to anchor against")
    return parent


def _validate_anchor(node: Any, offset: Any) -> int:
    if not isinstance(node, TreeNode):
        raise InvalidArgumentError("expected a tree node", details={"type": type(node).__name__})
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise InvalidArgumentError("offset must be an integer", details={"offset": offset})
    length = _node_length(node)
    if offset < 0 or offset > length:
        raise IndexSizeError(
            "offset is outside the node",
            details={"offset": offset, "length": length},
        )
    return offset
