"""Standardized error types raised by boundaries, ranges and the reference tree.

Every error carries a machine-readable ``error_code`` alongside its message so
callers can serialize failures consistently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


class ErrorCode:
    """Constants for error codes carried by :class:`BoundaryError`."""

    INVALID_ARGUMENT = "invalid_argument"
    INVALID_OPERATION = "invalid_operation"
    INDEX_SIZE = "index_size"
    HIERARCHY_REQUEST = "hierarchy_request"
    TREE_LOAD = "tree_load"


@dataclass
class BoundaryError(Exception):
    """Base exception class for all nodeboundary errors.

    Attributes:
        message: Human-readable error description.
        details: Additional structured error information.
    """

    message: str
    details: dict[str, Any] = field(default_factory=dict)

    error_code: ClassVar[str] = ErrorCode.INVALID_OPERATION

    def __post_init__(self) -> None:
        Exception.__init__(self, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for JSON payloads."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class InvalidArgumentError(BoundaryError, TypeError):
    """Raised when a constructor or setter receives a malformed value."""

    error_code: ClassVar[str] = ErrorCode.INVALID_ARGUMENT


@dataclass
class InvalidOperationError(BoundaryError, RuntimeError):
    """Raised when an operation needs a concrete position but has none."""

    error_code: ClassVar[str] = ErrorCode.INVALID_OPERATION


@dataclass
class IndexSizeError(InvalidArgumentError):
    """Raised when a native range offset exceeds its container's length."""

    error_code: ClassVar[str] = ErrorCode.INDEX_SIZE


@dataclass
class HierarchyRequestError(InvalidOperationError):
    """Raised when an insertion would produce an invalid tree."""

    error_code: ClassVar[str] = ErrorCode.HIERARCHY_REQUEST


@dataclass(slots=True)
class ValidationIssue:
    """Single problem found while loading a serialized tree."""

    message: str
    line: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


@dataclass
class TreeLoadError(BoundaryError, ValueError):
    """Raised when a serialized tree cannot be parsed or fails validation."""

    issues: list[ValidationIssue] = field(default_factory=list)

    error_code: ClassVar[str] = ErrorCode.TREE_LOAD

    def to_dict(self) -> dict[str, Any]:
        result = BoundaryError.to_dict(self)
        if self.issues:
            result["issues"] = [{"message": issue.message, "line": issue.line} for issue in self.issues]
        return result


__all__ = [
    "ErrorCode",
    "BoundaryError",
    "InvalidArgumentError",
    "InvalidOperationError",
    "IndexSizeError",
    "HierarchyRequestError",
    "ValidationIssue",
    "TreeLoadError",
]
