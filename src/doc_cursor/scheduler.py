"""Scheduler protocol and the two bundled schedulers.

A scheduler is any callable that accepts a zero-argument callback and
arranges for it to run later, never synchronously inside the call.  Plain
functions satisfy the protocol.

Example::

    import asyncio
    from doc_cursor import Cursor

    async def main() -> None:
        cursor = Cursor({"n": 0}, print)   # AsyncioScheduler by default
        cursor.refine("n").set(1)
        await asyncio.sleep(0)              # flush runs here -> prints {'n': 1}
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from typing import Protocol, runtime_checkable

__all__ = ["AsyncioScheduler", "ManualScheduler", "Scheduler"]


@runtime_checkable
class Scheduler(Protocol):
    """Structural protocol for deferred-execution hooks.

    Calling the scheduler with ``callback`` must arrange a single later
    invocation of ``callback`` with no arguments, on the same thread.
    """

    def __call__(self, callback: Callable[[], None]) -> None: ...


class AsyncioScheduler:
    """Defers callbacks to the next iteration of an asyncio event loop.

    Args:
        loop: The loop to schedule on.  When None, the loop running at the
            time of scheduling is used (``asyncio.get_running_loop()``), so
            the cursor must then be mutated from inside a coroutine or
            callback on that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def __call__(self, callback: Callable[[], None]) -> None:
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        loop.call_soon(callback)


class ManualScheduler:
    """Collects callbacks and runs them only when told to.

    Makes batching deterministic in tests: nothing happens until ``tick()``
    or ``run_all()`` is called.

    Example::

        scheduler = ManualScheduler()
        cursor = Cursor({"n": 0}, observer, scheduler=scheduler)
        cursor.refine("n").set(1)
        assert scheduler.pending == 1
        scheduler.tick()                # observer called here
    """

    def __init__(self) -> None:
        self._callbacks: deque[Callable[[], None]] = deque()

    def __call__(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        return len(self._callbacks)

    def tick(self) -> int:
        """Run the callbacks scheduled before this call, in FIFO order.

        Callbacks scheduled while ticking wait for the next tick.

        Returns:
            The number of callbacks run.
        """
        count = len(self._callbacks)
        for _ in range(count):
            self._callbacks.popleft()()
        return count

    def run_all(self, max_ticks: int = 100) -> int:
        """Tick until no callbacks remain.

        Raises:
            RuntimeError: If callbacks are still pending after ``max_ticks``
                ticks (e.g. an observer that mutates on every flush).

        Returns:
            The total number of callbacks run.
        """
        total = 0
        for _ in range(max_ticks):
            if not self._callbacks:
                return total
            total += self.tick()
        if self._callbacks:
            msg = f"callbacks still pending after {max_ticks} ticks"
            raise RuntimeError(msg)
        return total
