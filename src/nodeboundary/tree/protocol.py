"""Structural interface a host tree must provide to be addressed by boundaries."""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Protocol, Sequence, runtime_checkable

__all__ = ["DocumentPosition", "TreeNode"]


class DocumentPosition(IntFlag):
    """Relation of another node to a reference node.

    Mirrors ``Node.compareDocumentPosition``: the flags describe where *other*
    sits relative to the node the query was made on. Ancestors are reported as
    ``CONTAINS | PRECEDING`` and descendants as ``CONTAINED_BY | FOLLOWING``.
    """

    NONE = 0
    DISCONNECTED = 0x01
    PRECEDING = 0x02
    FOLLOWING = 0x04
    CONTAINS = 0x08
    CONTAINED_BY = 0x10
    IMPLEMENTATION_SPECIFIC = 0x20


@runtime_checkable
class TreeNode(Protocol):
    """Read and insertion primitives consumed by :class:`~nodeboundary.Boundary`.

    ``is_leaf`` marks character-data style nodes that cannot hold children.
    """

    @property
    def parent(self) -> TreeNode | None: ...

    @property
    def first_child(self) -> TreeNode | None: ...

    @property
    def last_child(self) -> TreeNode | None: ...

    @property
    def next_sibling(self) -> TreeNode | None: ...

    @property
    def previous_sibling(self) -> TreeNode | None: ...

    @property
    def child_nodes(self) -> Sequence[TreeNode]: ...

    @property
    def is_leaf(self) -> bool: ...

    def compare_position(self, other: TreeNode) -> int: ...

    def before(self, *nodes: Any) -> None: ...

    def after(self, *nodes: Any) -> None: ...

    def prepend(self, *nodes: Any) -> None: ...

    def append(self, *nodes: Any) -> None: ...
