"""Spans of a node tree expressed as a pair of :class:`Boundary` objects."""

from __future__ import annotations

import logging
from typing import Any

from .boundary import Boundary
from .errors import InvalidArgumentError, InvalidOperationError
from .flags import Filter, Position, Side
from .tree.ranges import Range, StaticRange

__all__ = ["BoundaryRange"]

LOGGER = logging.getLogger(__name__)


class BoundaryRange:
    """Start/end pair of boundaries, similar to ``Range`` or ``StaticRange``.

    The ends are not offsets into a parent's children, so the range survives
    tree mutations: changes inside the range do not corrupt its bounds. No
    ordering is enforced between ``start`` and ``end``; operations that need an
    order rely on :meth:`Boundary.compare`.
    """

    __slots__ = ("_start", "_end")

    def __init__(self, *args: Any) -> None:
        """Create a range from nothing, a range-like object, or two boundaries.

        - no arguments: both ends null; set them before use
        - a :class:`BoundaryRange`: copy of its ends
        - any object with ``start_container``/``start_offset``/``end_container``
          /``end_offset`` (``Range``, ``StaticRange``): converted to an
          exclusive range, see :meth:`normalize`
        - ``(start, end)`` boundaries: copies of both
        """

        self._start = Boundary()
        self._end = Boundary()
        if len(args) == 1:
            source = args[0]
            if isinstance(source, BoundaryRange):
                self._start.set(source._start)
                self._end.set(source._end)
            elif _is_range_like(source):
                self._start.set(source.start_container, source.start_offset, Position.BEFORE)
                self._end.set(source.end_container, source.end_offset, Position.AFTER)
            else:
                raise InvalidArgumentError(
                    "expected BoundaryRange or a Range-like object",
                    details={"type": type(source).__name__},
                )
        elif len(args) == 2:
            start, end = args
            self._start.set(start)
            self._end.set(end)
        elif args:
            raise InvalidArgumentError("BoundaryRange takes at most two arguments", details={"count": len(args)})

    # ------------------------------------------------------------------
    # Property access
    # ------------------------------------------------------------------
    @property
    def start(self) -> Boundary:
        """Starting boundary; it may be mutated in place."""

        return self._start

    @start.setter
    def start(self, boundary: Boundary) -> None:
        if not isinstance(boundary, Boundary):
            raise InvalidArgumentError("expected Boundary for start", details={"type": type(boundary).__name__})
        self._start.set(boundary)

    @property
    def end(self) -> Boundary:
        """Ending boundary; it may be mutated in place."""

        return self._end

    @end.setter
    def end(self, boundary: Boundary) -> None:
        if not isinstance(boundary, Boundary):
            raise InvalidArgumentError("expected Boundary for end", details={"type": type(boundary).__name__})
        self._end.set(boundary)

    def set_start(self, *args: Any) -> BoundaryRange:
        """Update :attr:`start`; arguments are forwarded to :meth:`Boundary.set`."""

        self._start.set(*args)
        return self

    def set_end(self, *args: Any) -> BoundaryRange:
        """Update :attr:`end`; arguments are forwarded to :meth:`Boundary.set`."""

        self._end.set(*args)
        return self

    def clone_range(self) -> BoundaryRange:
        return BoundaryRange(self)

    clone = clone_range
    __copy__ = clone_range

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to_range(self) -> Range:
        """Convert to a native :class:`Range`.

        The end is set last, so an out-of-order pair collapses onto the end.
        Boundaries inside a leaf node are moved to the nearest outside bound.
        """

        if self.is_null():
            raise InvalidOperationError("cannot create Range from null BoundaryRange")
        native = Range()
        start_node, start_side = _native_endpoint(self._start)
        if start_side is Side.BEFORE_OPEN:
            native.set_start_before(start_node)
        elif start_side is Side.AFTER_OPEN:
            native.set_start(start_node, 0)
        elif start_side is Side.BEFORE_CLOSE:
            native.set_start(start_node, len(start_node.child_nodes))
        else:
            native.set_start_after(start_node)

        end_node, end_side = _native_endpoint(self._end)
        if end_side is Side.BEFORE_OPEN:
            native.set_end_before(end_node)
        elif end_side is Side.AFTER_OPEN:
            native.set_end(end_node, 0)
        elif end_side is Side.BEFORE_CLOSE:
            native.set_end(end_node, len(end_node.child_nodes))
        else:
            native.set_end_after(end_node)
        return native

    def to_static_range(self) -> StaticRange:
        """Convert to a :class:`StaticRange`; leaf-internal boundaries are moved outside."""

        if self.is_null():
            raise InvalidOperationError("cannot create StaticRange from null BoundaryRange")
        # built from anchors directly; Range would reorder an out-of-order pair
        start = self._start.to_anchor()
        end = self._end.to_anchor()
        return StaticRange(start.node, start.offset, end.node, end.offset)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def is_null(self) -> bool:
        """Return ``True`` when either end is unset."""

        return self._start.is_null() or self._end.is_null()

    def is_equal(self, other: BoundaryRange) -> bool:
        return self._start.is_equal(other._start) and self._end.is_equal(other._end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundaryRange):
            return NotImplemented
        return self.is_equal(other)

    __hash__ = None  # type: ignore[assignment]

    @property
    def collapsed(self) -> bool:
        """``True`` when start and end are equal or adjacent.

        Disconnected or out-of-order ends are never collapsed.
        """

        return self._start.is_equal(self._end) or self._start.is_adjacent(self._end)

    def collapse(self, to_start: bool = False) -> BoundaryRange:
        """Make both ends equal to :attr:`start` (``to_start``) or :attr:`end`.

        Follow with :meth:`normalize` to get adjacent rather than equal ends.
        """

        if to_start:
            self._end = self._start.clone()
        else:
            self._start = self._end.clone()
        return self

    # ------------------------------------------------------------------
    # Range operations
    # ------------------------------------------------------------------
    def extend(self, other: BoundaryRange) -> BoundaryRange:
        """Widen this range to also enclose ``other``.

        Unset ends copy the matching end of ``other``. Given
        ``<div id=a></div><div id=b></div>``, extending ``select_node(a)`` by
        ``select_node_contents(b)`` gives ``(a, BEFORE_OPEN)`` to
        ``(b, BEFORE_CLOSE)``.
        """

        if self._start.is_null():
            self._start = other._start.clone()
        elif self._start.compare(other._start) == 1:
            self._start.set(other._start)
        if self._end.is_null():
            self._end = other._end.clone()
        elif self._end.compare(other._end) == -1:
            self._end.set(other._end)
        return self

    def select_node(self, node: Any, exclusive: bool = False) -> BoundaryRange:
        """Surround ``node``; see :meth:`normalize` for ``exclusive``."""

        self._start.set(node, Side.BEFORE_OPEN)
        self._end.set(node, Side.AFTER_CLOSE)
        if exclusive:
            self._start.previous()
            self._end.next()
        return self

    def select_node_contents(self, node: Any, exclusive: bool = True) -> BoundaryRange:
        """Surround the children of ``node``; see :meth:`normalize` for ``exclusive``.

        For leaf nodes :meth:`select_node` is usually what you want, since they
        cannot have children.
        """

        self._start.set(node, Side.AFTER_OPEN)
        self._end.set(node, Side.BEFORE_CLOSE)
        if not exclusive:
            self._start.next()
            self._end.previous()
        return self

    def normalize(self, exclusive: bool = True) -> BoundaryRange:
        """Pick which of the two adjacent representations each end uses.

        Every position has an AFTER boundary of the preceding bound and an
        adjacent BEFORE boundary of the following one. Both describe the same
        place; they differ in which node they reference, which matters once the
        tree is mutated.

        - exclusive: ends sit outside the range (start AFTER, end BEFORE), so
          mutating nodes inside the range leaves the ends untouched
        - inclusive: ends sit inside the range (start BEFORE, end AFTER)
        """

        if exclusive:
            if self._start.side.matches(Filter.BEFORE):
                self._start.previous()
            if self._end.side.matches(Filter.AFTER):
                self._end.next()
        else:
            if self._start.side.matches(Filter.AFTER):
                self._start.next()
            if self._end.side.matches(Filter.BEFORE):
                self._end.previous()
        return self

    def intersects(self, other: BoundaryRange, inclusive: bool = False) -> bool:
        """Return ``True`` when the ranges overlap.

        With ``inclusive`` ranges that merely touch (an end of one equals an
        end of the other) also count.
        """

        start_vs_end = self._start.compare(other._end)
        end_vs_start = self._end.compare(other._start)
        if start_vs_end is None or end_vs_start is None:
            return False
        threshold = 0 if inclusive else 1
        return start_vs_end <= -threshold and end_vs_start >= threshold

    def contains(self, other: BoundaryRange, inclusive: bool = True) -> bool:
        """Return ``True`` when ``other`` lies within this range.

        With ``inclusive`` shared start or end boundaries still count as
        contained.
        """

        start_order = self._start.compare(other._start)
        end_order = self._end.compare(other._end)
        if start_order is None or end_order is None:
            return False
        threshold = 0 if inclusive else 1
        return start_order <= -threshold and end_order >= threshold

    def __repr__(self) -> str:
        return f"BoundaryRange({self._start!r}, {self._end!r})"


def _is_range_like(value: Any) -> bool:
    return all(
        hasattr(value, name) for name in ("start_container", "start_offset", "end_container", "end_offset")
    )


def _native_endpoint(boundary: Boundary) -> tuple[Any, Side]:
    node, side = boundary.node, boundary.side
    if node.is_leaf and side.matches(Filter.INSIDE):
        side = Side.BEFORE_OPEN if side is Side.AFTER_OPEN else Side.AFTER_CLOSE
        LOGGER.debug("Moved leaf-internal boundary outside %r for Range conversion", node)
    return node, side
