"""Bit flags describing which side of a node a boundary sits on."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

__all__ = ["Side", "Filter", "Position", "coerce_side"]


class Side(IntEnum):
    """One of the four boundary sides of a node.

    Values are disjoint single bits ordered by their position in the tree, so
    sides compare numerically (``Side.BEFORE_OPEN < Side.AFTER_OPEN``) and can be
    tested against the masks in :class:`Filter`. Given ``A<span>B C</span>D``
    and the ``<span>`` as reference node:

    - A: ``BEFORE_OPEN`` (outside the node)
    - B: ``AFTER_OPEN`` (inside the node)
    - C: ``BEFORE_CLOSE`` (inside the node)
    - D: ``AFTER_CLOSE`` (outside the node)
    """

    BEFORE_OPEN = 0b1
    AFTER_OPEN = 0b10
    BEFORE_CLOSE = 0b1000
    AFTER_CLOSE = 0b10000

    def matches(self, mask: int) -> bool:
        """Return ``True`` when this side is part of ``mask``."""

        return bool(self & mask)

    @property
    def is_open(self) -> bool:
        return self.matches(Filter.OPEN)

    @property
    def is_before(self) -> bool:
        return self.matches(Filter.BEFORE)

    @property
    def is_inside(self) -> bool:
        return self.matches(Filter.INSIDE)


class Filter:
    """Bitmasks grouping :class:`Side` values for membership tests.

    Masks are plain integers rather than ``Side`` members; APIs that take a side
    never accept one of these.
    """

    ALL = 0b11011
    OPEN = 0b11
    CLOSE = 0b11000
    BEFORE = 0b1001
    AFTER = 0b10010
    INSIDE = 0b1010
    OUTSIDE = 0b10001


class Position(IntEnum):
    """Coarse location of a boundary relative to a node.

    Interleaves numerically with :class:`Side`:
    ``BEFORE < BEFORE_OPEN``, ``AFTER_OPEN < INSIDE < BEFORE_CLOSE`` and
    ``AFTER_CLOSE < AFTER``.
    """

    BEFORE = 0b0
    INSIDE = 0b100
    AFTER = 0b100000


_SIDE_VALUES = frozenset(int(side) for side in Side)


def coerce_side(value: Any) -> Side | None:
    """Return ``value`` as a :class:`Side`, or ``None`` when it is not exactly one side."""

    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if isinstance(value, Position):
        return None
    if int(value) not in _SIDE_VALUES:
        return None
    return Side(int(value))
