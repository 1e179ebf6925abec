"""In-memory reference tree implementing :class:`~nodeboundary.tree.protocol.TreeNode`."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping

from ..errors import HierarchyRequestError, InvalidArgumentError
from .protocol import DocumentPosition

__all__ = ["Node", "Element", "Text"]


class Node:
    """Base class for nodes of the reference tree.

    Children are held in an ordered list owned by the parent. Each child also
    caches its position in that list, refreshed by every mutation, so sibling
    navigation is constant time and never follows stale pointers.
    """

    __slots__ = ("_parent", "_children", "_index", "__weakref__")

    is_leaf: bool = False

    def __init__(self) -> None:
        self._parent: Node | None = None
        self._children: list[Node] = []
        self._index = 0

    # ------------------------------------------------------------------
    # Read-only navigation
    # ------------------------------------------------------------------
    @property
    def parent(self) -> Node | None:
        return self._parent

    @property
    def child_nodes(self) -> tuple[Node, ...]:
        return tuple(self._children)

    @property
    def first_child(self) -> Node | None:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> Node | None:
        return self._children[-1] if self._children else None

    @property
    def next_sibling(self) -> Node | None:
        parent = self._parent
        if parent is None:
            return None
        index = self._index + 1
        return parent._children[index] if index < len(parent._children) else None

    @property
    def previous_sibling(self) -> Node | None:
        parent = self._parent
        if parent is None:
            return None
        index = self._index - 1
        return parent._children[index] if index >= 0 else None

    @property
    def index(self) -> int:
        """Return the position of this node among its siblings (0 when detached)."""

        return self._index

    @property
    def root(self) -> Node:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def length(self) -> int:
        """Return the number of addressable offsets inside the node."""

        return len(self._children)

    @property
    def text_content(self) -> str:
        return "".join(child.text_content for child in self._children)

    def has_child_nodes(self) -> bool:
        return bool(self._children)

    def ancestors(self) -> Iterator[Node]:
        """Yield ancestors from the parent up to the root."""

        node = self._parent
        while node is not None:
            yield node
            node = node._parent

    def iter_descendants(self) -> Iterator[Node]:
        """Yield descendants in pre-order, excluding ``self``."""

        stack = list(reversed(self._children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def contains(self, other: Node | None) -> bool:
        """Return ``True`` when ``other`` is this node or one of its descendants."""

        node = other
        while node is not None:
            if node is self:
                return True
            node = node._parent
        return False

    def compare_position(self, other: Node) -> DocumentPosition:
        """Return where ``other`` sits relative to this node."""

        if other is self:
            return DocumentPosition.NONE
        if not isinstance(other, Node):
            raise InvalidArgumentError("compare_position expects a Node", details={"type": type(other).__name__})

        own_chain = [self, *self.ancestors()]
        other_chain = [other, *other.ancestors()]
        if own_chain[-1] is not other_chain[-1]:
            # arbitrary but stable ordering between separate trees
            direction = DocumentPosition.PRECEDING if id(other_chain[-1]) < id(own_chain[-1]) else DocumentPosition.FOLLOWING
            return DocumentPosition.DISCONNECTED | DocumentPosition.IMPLEMENTATION_SPECIFIC | direction
        if any(node is other for node in own_chain):
            return DocumentPosition.CONTAINS | DocumentPosition.PRECEDING
        if any(node is self for node in other_chain):
            return DocumentPosition.CONTAINED_BY | DocumentPosition.FOLLOWING

        # walk down from the shared root until the chains diverge
        own_chain.reverse()
        other_chain.reverse()
        depth = 0
        while own_chain[depth + 1] is other_chain[depth + 1]:
            depth += 1
        common = own_chain[depth]
        own_index = common._index_of(own_chain[depth + 1])
        other_index = common._index_of(other_chain[depth + 1])
        if other_index < own_index:
            return DocumentPosition.PRECEDING
        return DocumentPosition.FOLLOWING

    # ------------------------------------------------------------------
    # Mutation primitives
    # ------------------------------------------------------------------
    def append(self, *nodes: Node | str) -> None:
        """Insert ``nodes`` as the last children of this node."""

        prepared = self._prepare_insert(nodes)
        self._place(len(self._children), prepared)

    def prepend(self, *nodes: Node | str) -> None:
        """Insert ``nodes`` as the first children of this node."""

        prepared = self._prepare_insert(nodes)
        self._place(0, prepared)

    def before(self, *nodes: Node | str) -> None:
        """Insert ``nodes`` as siblings immediately before this node."""

        parent = self._require_parent("before")
        prepared = parent._prepare_insert(nodes, reference=self)
        parent._place(self._index, prepared)

    def after(self, *nodes: Node | str) -> None:
        """Insert ``nodes`` as siblings immediately after this node."""

        parent = self._require_parent("after")
        prepared = parent._prepare_insert(nodes, reference=self)
        parent._place(self._index + 1, prepared)

    def remove(self) -> None:
        """Detach this node from its parent; a no-op when already detached."""

        parent = self._parent
        if parent is None:
            return
        index = self._index
        del parent._children[index]
        self._parent = None
        self._index = 0
        parent._reindex(index)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _index_of(self, child: Node) -> int:
        if child._parent is not self:
            raise ValueError("node is not a child of this parent")
        return child._index

    def _require_parent(self, operation: str) -> Node:
        if self._parent is None:
            raise HierarchyRequestError(
                f"cannot insert {operation} a node without a parent",
                details={"operation": operation},
            )
        return self._parent

    def _validate_insert(self, nodes: list[Node]) -> None:
        if self.is_leaf:
            raise HierarchyRequestError(
                "leaf nodes cannot contain children",
                details={"parent": repr(self)},
            )
        for node in nodes:
            if node.contains(self):
                raise HierarchyRequestError(
                    "cannot insert a node into its own subtree",
                    details={"node": repr(node)},
                )

    def _prepare_insert(self, nodes: Iterable[Node | str], reference: Node | None = None) -> list[Node]:
        """Coerce, validate and detach ``nodes`` ahead of insertion into this node.

        A node listed more than once is inserted at its last position only, and
        the ``reference`` sibling is never inserted next to itself.
        """

        prepared = _unique_nodes(_coerce_nodes(nodes), exclude=reference)
        self._validate_insert(prepared)
        for node in prepared:
            node.remove()
        return prepared

    def _place(self, index: int, prepared: list[Node]) -> None:
        self._children[index:index] = prepared
        for node in prepared:
            node._parent = self
        self._reindex(index)

    def _reindex(self, start: int) -> None:
        children = self._children
        for position in range(start, len(children)):
            children[position]._index = position


class Element(Node):
    """Container node identified by a tag name."""

    __slots__ = ("tag", "attributes")

    def __init__(
        self,
        tag: str,
        attributes: Mapping[str, str] | None = None,
        children: Iterable[Node | str] = (),
    ) -> None:
        super().__init__()
        if not isinstance(tag, str) or not tag:
            raise InvalidArgumentError("Element tag must be a non-empty string", details={"tag": tag})
        self.tag = tag
        self.attributes: dict[str, str] = dict(attributes or {})
        if children:
            self.append(*children)

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    def __repr__(self) -> str:
        return f"<Element {self.tag} children={len(self._children)}>"


class Text(Node):
    """Leaf node holding character data; offsets inside it count characters."""

    __slots__ = ("data",)

    is_leaf = True

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = str(data)

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def text_content(self) -> str:
        return self.data

    def __repr__(self) -> str:
        preview = self.data if len(self.data) <= 20 else f"{self.data[:17]}..."
        return f"<Text {preview!r}>"


def _coerce_nodes(nodes: Iterable[Any]) -> list[Node]:
    prepared: list[Node] = []
    for node in nodes:
        if isinstance(node, str):
            prepared.append(Text(node))
        elif isinstance(node, Node):
            prepared.append(node)
        else:
            raise InvalidArgumentError(
                "expected Node or str for insertion",
                details={"type": type(node).__name__},
            )
    return prepared


def _unique_nodes(nodes: list[Node], exclude: Node | None = None) -> list[Node]:
    """Drop repeated nodes, keeping each one at its last position."""

    seen: set[int] = set()
    unique: list[Node] = []
    for node in reversed(nodes):
        if node is exclude or id(node) in seen:
            continue
        seen.add(id(node))
        unique.append(node)
    unique.reverse()
    return unique
