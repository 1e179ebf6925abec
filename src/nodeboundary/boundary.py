"""Mutation-resilient positions inside a node tree."""

from __future__ import annotations

import logging
from typing import Any, Iterator, NamedTuple

from .errors import InvalidArgumentError, InvalidOperationError
from .flags import Filter, Position, Side, coerce_side
from .tree.protocol import DocumentPosition, TreeNode

__all__ = ["Anchor", "Boundary"]

LOGGER = logging.getLogger(__name__)


class Anchor(NamedTuple):
    """``(node, offset)`` pair in the manner of ``Range``/``StaticRange`` endpoints."""

    node: Any
    offset: int


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class Boundary:
    """Encodes a position as a reference node plus one of its four :class:`Side` values.

    Every node has an opening and closing bound (think start and end tag), and
    each bound has an outer half facing the siblings and an inner half facing
    the children. Naming a position this way, rather than as an offset into a
    parent's children, keeps it valid when unrelated siblings are inserted or
    removed.

    A boundary whose node is ``None`` is a sentinel for "unset" or "end of
    traversal"; it never denotes a real position.

    Traversal methods mutate the boundary in place and return ``self`` so calls
    can be chained; use :meth:`clone` when a snapshot is needed.
    """

    __slots__ = ("_node", "_side")

    def __init__(self, *args: Any) -> None:
        self._node: Any = None
        self._side: Side = Side.BEFORE_OPEN
        self.set(*args)

    def set(self, *args: Any) -> Boundary:
        """Update the boundary in place.

        Accepts one of:

        1. nothing, giving a null boundary;
        2. another :class:`Boundary` to copy;
        3. ``(node, side)`` where ``side`` is a :class:`Side`;
        4. ``(node, offset, position)`` where ``position`` is ``Position.BEFORE``
           or ``Position.AFTER``, emulating a ``Range`` endpoint. ``BEFORE``
           picks the boundary on the preceding side of the anchor, ``AFTER`` the
           one on the following side. Offsets into leaf nodes are text offsets
           and are ignored: the boundary is placed just outside the leaf. Use
           form 3 to address a position inside a leaf.
        """

        if not args:
            self._node, self._side = None, Side.BEFORE_OPEN
        elif len(args) == 1:
            other = args[0]
            if not isinstance(other, Boundary):
                raise InvalidArgumentError("expected Boundary for first arg", details={"type": type(other).__name__})
            self._node, self._side = other._node, other._side
        elif len(args) == 2:
            node, side = args
            self._node, self._side = self._check_node(node), self._check_side(side)
        elif len(args) == 3:
            self._set_from_anchor(*args)
        else:
            raise InvalidArgumentError("Boundary takes at most three arguments", details={"count": len(args)})
        return self

    def _set_from_anchor(self, node: Any, offset: Any, position: Any) -> None:
        if not isinstance(node, TreeNode):
            raise InvalidArgumentError("expected a tree node for first arg", details={"type": type(node).__name__})
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidArgumentError("expected integer for second arg", details={"offset": offset})
        if isinstance(position, bool) or position not in (Position.BEFORE, Position.AFTER):
            raise InvalidArgumentError("expected Position.BEFORE or Position.AFTER for third arg")

        after = position == Position.AFTER
        if node.is_leaf:
            self._node = node
            self._side = Side.AFTER_CLOSE if after else Side.BEFORE_OPEN
            # clamp a second time so the result sits on the requested side of the leaf
            if after:
                self.next()
            else:
                self.previous()
            return

        children = node.child_nodes
        offset = min(max(offset, 0), len(children))
        if after:
            side = Side.BEFORE_CLOSE if offset >= len(children) else Side.BEFORE_OPEN
        else:
            side = Side.AFTER_OPEN if offset <= 0 else Side.AFTER_CLOSE
        if side.matches(Filter.OUTSIDE):
            # outside bounds are expressed relative to the neighbouring child
            node = children[offset if after else offset - 1]
        self._node, self._side = node, side

    @staticmethod
    def _check_node(node: Any) -> Any:
        if node is not None and not isinstance(node, TreeNode):
            raise InvalidArgumentError("node must be a tree node or None", details={"type": type(node).__name__})
        return node

    @staticmethod
    def _check_side(side: Any) -> Side:
        resolved = coerce_side(side)
        if resolved is None:
            raise InvalidArgumentError("expected a side bit flag", details={"side": side})
        return resolved

    # ------------------------------------------------------------------
    # Property access
    # ------------------------------------------------------------------
    @property
    def node(self) -> Any:
        """Node whose bound this boundary references; not owned."""

        return self._node

    @node.setter
    def node(self, node: Any) -> None:
        self._node = self._check_node(node)

    @property
    def side(self) -> Side:
        return self._side

    @side.setter
    def side(self, side: Any) -> None:
        self._side = self._check_side(side)

    def clone(self) -> Boundary:
        return Boundary(self)

    __copy__ = clone

    def is_null(self) -> bool:
        """Return ``True`` when no reference node is set."""

        return self._node is None

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to_anchor(self, prefer_outside_for_leaves: bool = True) -> Anchor:
        """Convert to a ``(node, offset)`` anchor as used by ``Range``.

        ``Range`` addresses leaf nodes by text offset, so a boundary inside a
        leaf cannot be expressed there. With ``prefer_outside_for_leaves`` such
        boundaries use the nearest outside position instead; disable it when the
        anchor is not headed for a ``Range``.
        """

        node = self._node
        if node is None:
            raise InvalidOperationError("cannot convert null Boundary to anchor")
        if self._side.matches(Filter.OUTSIDE) or (prefer_outside_for_leaves and node.is_leaf):
            parent = node.parent
            if parent is None:
                raise InvalidOperationError(
                    "cannot anchor an outside boundary of a parentless node",
                    details={"node": repr(node), "side": self._side.name},
                )
            # offsets index the gap before a child, so open bounds exclude the node itself
            child = node.previous_sibling if self._side.matches(Filter.OPEN) else node
            offset = 0
            while child is not None:
                child = child.previous_sibling
                offset += 1
            return Anchor(parent, offset)
        if self._side is Side.BEFORE_CLOSE:
            return Anchor(node, len(node.child_nodes))
        return Anchor(node, 0)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def compare(self, other: Boundary) -> int | None:
        """Compare tree order with ``other``.

        Returns ``-1`` when this boundary comes first, ``1`` when it comes
        after, ``0`` when both are identical, and ``None`` when either is null
        or the nodes live in disconnected trees. Adjacent boundaries (see
        :meth:`is_adjacent`) are not equal: they carry an implicit direction.
        """

        if self._node is None or other._node is None:
            return None
        if self._node is other._node:
            return _sign(self._side - other._side)
        relation = self._node.compare_position(other._node)
        if relation & DocumentPosition.DISCONNECTED:
            return None
        # containment first; ancestors are also reported as preceding
        if relation & DocumentPosition.CONTAINED_BY:
            return _sign(self._side - Position.INSIDE)
        if relation & DocumentPosition.CONTAINS:
            return _sign(Position.INSIDE - other._side)
        if relation & DocumentPosition.PRECEDING:
            return 1
        if relation & DocumentPosition.FOLLOWING:
            return -1
        return None

    def compare_node(self, node: Any) -> Position | None:
        """Return whether this boundary is before, inside or after ``node``.

        ``None`` when the boundary is null or ``node`` is in another tree.
        """

        if self._node is None or node is None:
            return None
        if node is self._node:
            if self._side.matches(Filter.INSIDE):
                return Position.INSIDE
            return Position.AFTER if self._side > Position.INSIDE else Position.BEFORE
        relation = self._node.compare_position(node)
        if relation & DocumentPosition.DISCONNECTED:
            return None
        if relation & DocumentPosition.CONTAINED_BY:
            return Position.AFTER if self._side.matches(Filter.CLOSE) else Position.BEFORE
        if relation & DocumentPosition.CONTAINS:
            return Position.INSIDE
        if relation & DocumentPosition.PRECEDING:
            return Position.AFTER
        if relation & DocumentPosition.FOLLOWING:
            return Position.BEFORE
        return None

    def is_equal(self, other: Boundary) -> bool:
        """Return ``True`` for an identical node and side; faster than :meth:`compare`."""

        return self._node is other._node and self._side is other._side

    def is_adjacent(self, other: Boundary) -> bool:
        """Return ``True`` when ``other`` is the same insertion point directly after this one.

        Given ``<main>A B<article>C D</article>E F</main>``, the pairs (A, B),
        (C, D) and (E, F) are adjacent: the first of each pair has an AFTER
        side, the second a BEFORE side. The relation is directional, and
        ``BEFORE_OPEN``/``AFTER_OPEN`` of one node are never adjacent since one
        is outside the node and the other inside.
        """

        if self._node is None or other._node is None:
            return False
        if self._side.matches(Filter.BEFORE) or other._side.matches(Filter.AFTER):
            return False
        return self.clone().next().is_equal(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Boundary):
            return NotImplemented
        return self.is_equal(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Boundary({self._node!r}, {self._side.name})"

    # ------------------------------------------------------------------
    # Positional traversal
    # ------------------------------------------------------------------
    def inside(self) -> Boundary:
        """Step from an outer bound to the inner bound on the same side.

        ``A<span>B C</span>D``: A becomes B and D becomes C.
        """

        if self._side is Side.BEFORE_OPEN:
            self._side = Side.AFTER_OPEN
        elif self._side is Side.AFTER_CLOSE:
            self._side = Side.BEFORE_CLOSE
        return self

    def outside(self) -> Boundary:
        """Inverse of :meth:`inside`."""

        if self._side is Side.AFTER_OPEN:
            self._side = Side.BEFORE_OPEN
        elif self._side is Side.BEFORE_CLOSE:
            self._side = Side.AFTER_CLOSE
        return self

    def next(self) -> Boundary:
        """Step to the next boundary in tree order.

        ``A<span>B C</span>D`` starting at A visits B, C, D, and then the null
        boundary once the root's closing bound has been passed.
        """

        node = self._node
        if node is None:
            return self
        side = self._side
        if side is Side.AFTER_OPEN:
            child = node.first_child
            if child is not None:
                self._node, self._side = child, Side.BEFORE_OPEN
            else:
                self._side = Side.BEFORE_CLOSE
        elif side is Side.AFTER_CLOSE:
            sibling = node.next_sibling
            if sibling is not None:
                self._node, self._side = sibling, Side.BEFORE_OPEN
            else:
                self._node, self._side = node.parent, Side.BEFORE_CLOSE
                if self._node is None:
                    self._side = Side.BEFORE_OPEN
        elif side is Side.BEFORE_OPEN:
            self._side = Side.AFTER_OPEN
        else:
            self._side = Side.AFTER_CLOSE
        return self

    def previous(self) -> Boundary:
        """Inverse of :meth:`next`."""

        node = self._node
        if node is None:
            return self
        side = self._side
        if side is Side.BEFORE_CLOSE:
            child = node.last_child
            if child is not None:
                self._node, self._side = child, Side.AFTER_CLOSE
            else:
                self._side = Side.AFTER_OPEN
        elif side is Side.BEFORE_OPEN:
            sibling = node.previous_sibling
            if sibling is not None:
                self._node, self._side = sibling, Side.AFTER_CLOSE
            else:
                self._node, self._side = node.parent, Side.AFTER_OPEN
                if self._node is None:
                    self._side = Side.BEFORE_OPEN
        elif side is Side.AFTER_OPEN:
            self._side = Side.BEFORE_OPEN
        else:
            self._side = Side.BEFORE_CLOSE
        return self

    # ------------------------------------------------------------------
    # Node-level traversal
    # ------------------------------------------------------------------
    def next_nodes(self, include_start: bool = True) -> Iterator[Boundary]:
        """Yield this boundary once for every node first encountered walking forward.

        Mimics the single-node traversal of a tree walker, but a node is
        reported as soon as any of its bounds is crossed: pre-order, except
        that an ancestor only reached on the way back up is reported post-order.
        Given ``A <main>B C<article>D E</article>F G</main>H``:

        - starting at C yields C, then G
        - starting at D yields E, then G

        The yielded side is always ``BEFORE_OPEN`` or ``BEFORE_CLOSE``. A start
        on one of those sides is yielded first unless ``include_start`` is
        false. Every step yields ``self``; clone it to keep a copy. The walk
        ends when there is neither a sibling nor a parent left.
        """

        if self._side.matches(Filter.AFTER):
            self.next()
        elif not include_start:
            self.next().next()
        if self._node is None:
            return
        yield self
        depth = 0
        while True:
            node = self._node
            # on BEFORE_CLOSE the children were already passed
            child = node.first_child if self._side is Side.BEFORE_OPEN else None
            if child is not None:
                self._node = child
                depth += 1
                yield self
                continue
            sibling = node.next_sibling
            if sibling is not None:
                self._node, self._side = sibling, Side.BEFORE_OPEN
                yield self
                continue
            parent = node.parent
            if parent is None:
                return
            self._node, self._side = parent, Side.BEFORE_CLOSE
            # while depth is non-zero we descended from this parent already
            if depth:
                depth -= 1
            else:
                yield self

    def previous_nodes(self, include_start: bool = True) -> Iterator[Boundary]:
        """Inverse of :meth:`next_nodes`.

        The yielded side is always ``AFTER_CLOSE`` or ``AFTER_OPEN``; a start on
        one of those sides is yielded first unless ``include_start`` is false.
        """

        if self._side.matches(Filter.BEFORE):
            self.previous()
        elif not include_start:
            self.previous().previous()
        if self._node is None:
            return
        yield self
        depth = 0
        while True:
            node = self._node
            # on AFTER_OPEN the children were already passed
            child = node.last_child if self._side is Side.AFTER_CLOSE else None
            if child is not None:
                self._node = child
                depth += 1
                yield self
                continue
            sibling = node.previous_sibling
            if sibling is not None:
                self._node, self._side = sibling, Side.AFTER_CLOSE
                yield self
                continue
            parent = node.parent
            if parent is None:
                return
            self._node, self._side = parent, Side.AFTER_OPEN
            if depth:
                depth -= 1
            else:
                yield self

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, *nodes: Any) -> None:
        """Insert ``nodes`` into the tree at this position."""

        node = self._node
        if node is None:
            raise InvalidOperationError("inserting at null Boundary")
        LOGGER.debug("Inserting %d node(s) at %r", len(nodes), self)
        if self._side is Side.BEFORE_OPEN:
            node.before(*nodes)
        elif self._side is Side.AFTER_OPEN:
            node.prepend(*nodes)
        elif self._side is Side.BEFORE_CLOSE:
            node.append(*nodes)
        else:
            node.after(*nodes)
