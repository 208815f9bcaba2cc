"""RootState: the shared record behind every cursor derived from one root.

Holds the current document, the observer, the pending operation queue and
the Idle/Scheduled flag.  ``flush`` is the only writer of the document and
the only consumer of the queue.

Scheduling:
- Idle --enqueue--> Scheduled: the operation is queued and exactly one
  deferred flush is handed to the scheduler.
- Scheduled --enqueue--> Scheduled: the operation is queued, nothing else.
- Scheduled --tick--> Idle: the queue is swapped out and the flag cleared
  *before* the batch is folded, so mutations issued by the observer start a
  fresh cycle instead of joining the batch in progress.

A generation counter makes a tick that was scheduled before a forced
``flush()`` a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from doc_cursor.config import DEFAULT_CONFIG, CursorConfig
from doc_cursor.errors import FlushError
from doc_cursor.operators.engine import apply_operation
from doc_cursor.operators.ops import Operation
from doc_cursor.scheduler import AsyncioScheduler, Scheduler

__all__ = ["ErrorHandler", "Observer", "RootState"]

logger = logging.getLogger(__name__)

Observer = Callable[[Any], None]
ErrorHandler = Callable[[FlushError], None]


class RootState:
    """Exclusively-owned state shared by reference among related cursors.

    Args:
        document:  The initial document.
        observer:  Called with the new document once per flush.
        scheduler: Deferred-execution hook.  Defaults to ``AsyncioScheduler()``.
        on_error:  Receives the ``FlushError`` of an aborted batch.  When None
                   the error is raised out of the flush instead.
        config:    Cursor configuration.  Defaults to ``CursorConfig()``.
    """

    __slots__ = (
        "_config",
        "_document",
        "_generation",
        "_observer",
        "_on_error",
        "_queue",
        "_scheduled",
        "_scheduler",
    )

    def __init__(
        self,
        document: Any,
        observer: Observer,
        scheduler: Scheduler | None = None,
        on_error: ErrorHandler | None = None,
        config: CursorConfig | None = None,
    ) -> None:
        if not callable(observer):
            raise TypeError(f"observer must be callable, got {type(observer)!r}")
        self._document = document
        self._observer = observer
        self._scheduler: Scheduler = (
            scheduler if scheduler is not None else AsyncioScheduler()
        )
        self._on_error = on_error
        self._config = config if config is not None else DEFAULT_CONFIG
        self._queue: list[Operation] = []
        self._scheduled = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def document(self) -> Any:
        """The committed document (pending operations are not visible)."""
        return self._document

    @property
    def config(self) -> CursorConfig:
        return self._config

    @property
    def scheduled(self) -> bool:
        """True while a deferred flush is outstanding."""
        return self._scheduled

    @property
    def pending(self) -> tuple[Operation, ...]:
        """Queued operations awaiting the next flush, in issuance order."""
        return tuple(self._queue)

    # ------------------------------------------------------------------
    # Queueing
    # ------------------------------------------------------------------

    def enqueue(self, operations: Iterable[Operation]) -> None:
        """Append ``operations`` to the queue and schedule a flush if idle."""
        committed = len(self._queue)
        self._queue.extend(operations)
        if self._scheduled or not self._queue:
            return

        self._scheduled = True
        generation = self._generation
        logger.debug("scheduling flush (generation %d)", generation)
        try:
            self._scheduler(lambda: self._on_tick(generation))
        except Exception:
            # Nothing from a failed call stays queued
            del self._queue[committed:]
            self._scheduled = False
            raise

    def _on_tick(self, generation: int) -> None:
        # A forced flush already drained the batch this tick was scheduled for
        if generation != self._generation:
            return
        self.flush()

    # ------------------------------------------------------------------
    # Flush
    # ------------------------------------------------------------------

    def flush(self) -> bool:
        """Apply every queued operation and notify the observer once.

        Returns:
            True if a batch was committed, False if the queue was empty.

        Raises:
            FlushError: If an operation (or an ``$apply`` callable) fails and
                no ``on_error`` handler was given.  The document is left
                unchanged and the batch is discarded.
        """
        batch = tuple(self._queue)
        self._queue = []
        self._scheduled = False
        self._generation += 1

        if not batch:
            return False

        document = self._document
        for operation in batch:
            try:
                document = apply_operation(document, operation, self._config)
            except Exception as exc:
                error = FlushError(
                    f"flush aborted, {len(batch)} operation(s) discarded: {exc}",
                    operation=operation,
                    batch=batch,
                )
                error.__cause__ = exc
                if self._on_error is None:
                    raise error from exc
                logger.warning("%s", error)
                self._on_error(error)
                return False

        self._document = document
        logger.debug("flushed %d operation(s)", len(batch))
        self._observer(document)
        return True
