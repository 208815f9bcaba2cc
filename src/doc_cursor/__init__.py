"""doc-cursor - path-addressable cursors over a shared, batch-updated document."""

from __future__ import annotations

from doc_cursor.api import get_in, update
from doc_cursor.config import CursorConfig, EqualityMode
from doc_cursor.cursor import Cursor
from doc_cursor.errors import (
    CursorError,
    FlushError,
    InvalidOperatorError,
    PathNotFoundError,
    TypeMismatchError,
)
from doc_cursor.operators.ops import Operation, OperatorTag
from doc_cursor.path.segments import Ref
from doc_cursor.scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__version__: str = "0.1.0"
__all__: list[str] = [
    "AsyncioScheduler",
    "Cursor",
    "CursorConfig",
    "CursorError",
    "EqualityMode",
    "FlushError",
    "InvalidOperatorError",
    "ManualScheduler",
    "Operation",
    "OperatorTag",
    "PathNotFoundError",
    "Ref",
    "Scheduler",
    "TypeMismatchError",
    "get_in",
    "update",
]
