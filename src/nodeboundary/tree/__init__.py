"""Reference host tree, native ranges and tree loaders."""

from .loader import TREE_SCHEMA, load_tree, load_tree_file
from .nodes import Element, Node, Text
from .protocol import DocumentPosition, TreeNode
from .ranges import Range, StaticRange, compare_boundary_points

__all__ = [
    "DocumentPosition",
    "TreeNode",
    "Node",
    "Element",
    "Text",
    "Range",
    "StaticRange",
    "compare_boundary_points",
    "TREE_SCHEMA",
    "load_tree",
    "load_tree_file",
]
