"""Mutation-resilient positions and spans over ordered node trees."""

from .boundary import Anchor, Boundary
from .boundary_range import BoundaryRange
from .errors import (
    BoundaryError,
    ErrorCode,
    HierarchyRequestError,
    IndexSizeError,
    InvalidArgumentError,
    InvalidOperationError,
    TreeLoadError,
)
from .flags import Filter, Position, Side

__all__ = [
    "Anchor",
    "Boundary",
    "BoundaryRange",
    "Side",
    "Filter",
    "Position",
    "ErrorCode",
    "BoundaryError",
    "InvalidArgumentError",
    "InvalidOperationError",
    "IndexSizeError",
    "HierarchyRequestError",
    "TreeLoadError",
]

__version__ = "0.3.0"
