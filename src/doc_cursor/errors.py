"""Exception hierarchy for doc-cursor.

All errors raised by the library derive from ``CursorError``.  The concrete
classes also inherit from the closest built-in exception so callers that
already catch ``LookupError`` / ``TypeError`` / ``ValueError`` keep working.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from doc_cursor.operators.ops import Operation

__all__ = [
    "CursorError",
    "FlushError",
    "InvalidOperatorError",
    "PathNotFoundError",
    "TypeMismatchError",
]


class CursorError(Exception):
    """Base class for every doc-cursor error."""


class PathNotFoundError(CursorError, LookupError):
    """A key, index or value-reference segment could not be located.

    Attributes:
        path: The path (as far as it could be resolved) that failed.
    """

    def __init__(self, message: str, path: tuple[Any, ...] = ()) -> None:
        super().__init__(message)
        self.path = path


class TypeMismatchError(CursorError, TypeError):
    """An operator was applied to a node of the wrong container kind.

    Attributes:
        path:     Absolute path of the offending node.
        expected: Human readable name of the required kind ("mapping", "sequence").
        actual:   The type actually found at ``path``.
    """

    def __init__(
        self,
        message: str,
        path: tuple[Any, ...] = (),
        expected: str = "",
        actual: type | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.expected = expected
        self.actual = actual


class InvalidOperatorError(CursorError, ValueError):
    """An update spec or operator payload is malformed."""


class FlushError(CursorError):
    """A queued batch could not be applied and was discarded.

    Attributes:
        operation: The operation whose application failed.
        batch:     Every operation of the aborted batch, in queue order.
    """

    def __init__(
        self,
        message: str,
        operation: Operation,
        batch: tuple[Operation, ...],
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.batch = batch
