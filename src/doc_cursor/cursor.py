"""Cursor: a path-addressable handle over a shared, batched document.

A cursor is an immutable ``(root state, path)`` pair.  Reads go straight to
the committed document.  Writes are queued on the shared root state and
applied together on the next flush, which calls the observer once with the
new document.

Every mutation method builds an update spec and goes through ``update``, so
all of them share the same resolution, queueing and ordering behaviour.

Example::

    from doc_cursor import Cursor, ManualScheduler

    scheduler = ManualScheduler()
    cursor = Cursor({"cells": [{"cell_id": 4}]}, print, scheduler=scheduler)
    cursor.refine("cells").push({"cell_id": 100}).push({"cell_id": 101})
    scheduler.tick()   # prints the document once, with both cells pushed
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from doc_cursor.config import CursorConfig
from doc_cursor.operators.ops import Operation, parse_update_spec
from doc_cursor.path.resolver import Path, format_path, get_in, resolve
from doc_cursor.scheduler import Scheduler
from doc_cursor.state import ErrorHandler, Observer, RootState

__all__ = ["Cursor"]


class Cursor:
    """Handle identifying one location inside a shared document.

    Constructing a ``Cursor`` creates a new root state at the empty path.
    ``refine`` derives further cursors that share that root state.

    Args:
        document:  Initial document (nested mappings / lists / tuples).
        observer:  One-argument callable invoked with the new document after
                   every flush.
        scheduler: Deferred-execution hook; defaults to ``AsyncioScheduler()``.
        on_error:  Receives ``FlushError`` for aborted batches; when None the
                   error is raised out of the flush.
        config:    Optional ``CursorConfig``.
    """

    __slots__ = ("_path", "_root")

    def __init__(
        self,
        document: Any,
        observer: Observer,
        *,
        scheduler: Scheduler | None = None,
        on_error: ErrorHandler | None = None,
        config: CursorConfig | None = None,
    ) -> None:
        self._root = RootState(
            document,
            observer,
            scheduler=scheduler,
            on_error=on_error,
            config=config,
        )
        self._path: Path = ()

    @classmethod
    def _derive(cls, root: RootState, path: Path) -> Cursor:
        cursor = cls.__new__(cls)
        cursor._root = root
        cursor._path = path
        return cursor

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        """Absolute, fully resolved path of this cursor."""
        return self._path

    @property
    def root(self) -> RootState:
        """The root state shared with every related cursor."""
        return self._root

    @property
    def pending(self) -> tuple[Operation, ...]:
        """Operations queued on the shared root and not yet flushed."""
        return self._root.pending

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, *segments: Any) -> Any:
        """Return the committed value at this cursor's path plus ``segments``.

        Raises:
            PathNotFoundError: If any segment cannot be located.
        """
        document = self._root.document
        path = resolve(document, self._path, segments, self._root.config)
        return get_in(document, path)

    def refine(self, *segments: Any) -> Cursor:
        """Return a cursor for this path extended by ``segments``.

        Value-reference segments are resolved now, against the committed
        document, and the found index is fixed in the new cursor's path.

        Raises:
            PathNotFoundError: If a value-reference cannot be located.
        """
        path = resolve(self._root.document, self._path, segments, self._root.config)
        return self._derive(self._root, path)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update(self, spec: Mapping[Any, Any]) -> Cursor:
        """Queue the operations described by an update spec.

        The whole spec is parsed and resolved before anything is queued, so a
        malformed spec or an unresolvable value-reference queues nothing.

        Args:
            spec: ``{"$set": v}``-style operator mapping, optionally nested
                  under path keys (``{"scaling": {"$set": "memory"}}``).

        Returns:
            This cursor, for chaining.

        Raises:
            InvalidOperatorError: If the spec is malformed.
            PathNotFoundError: If a value-reference in a nested spec key
                cannot be located.
        """
        document = self._root.document
        config = self._root.config
        operations = [
            Operation(resolve(document, self._path, segments, config), operator)
            for segments, operator in parse_update_spec(spec)
        ]
        self._root.enqueue(operations)
        return self

    def set(self, value: Any) -> Cursor:
        return self.update({"$set": value})

    def merge(self, values: Mapping[Any, Any]) -> Cursor:
        return self.update({"$merge": values})

    def splice(self, *splices: Any) -> Cursor:
        """Queue one splice per ``[start, deleteCount, *items]`` argument."""
        return self.update({"$splice": list(splices)})

    def push(self, *items: Any) -> Cursor:
        return self.update({"$push": list(items)})

    def unshift(self, *items: Any) -> Cursor:
        return self.update({"$unshift": list(items)})

    def apply(self, fn: Callable[[Any], Any]) -> Cursor:
        return self.update({"$apply": fn})

    def remove(self, value: Any) -> Cursor:
        return self.update({"$remove": value})

    def flush(self) -> bool:
        """Flush the shared queue now instead of waiting for the scheduler.

        Returns:
            True if a batch was committed and the observer called.
        """
        return self._root.flush()

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def is_equal(self, other: object) -> bool:
        """True iff ``other`` shares this root state and has an equal path."""
        if not isinstance(other, Cursor):
            return False
        return self._root is other._root and self._path == other._path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return self.is_equal(other)

    def __hash__(self) -> int:
        return hash((id(self._root), self._path))

    def __repr__(self) -> str:
        return f"Cursor(path={format_path(self._path)!r})"
