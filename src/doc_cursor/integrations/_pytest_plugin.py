"""Fixtures for testing code that drives doc-cursor cursors.

``manual_scheduler`` gives a fresh ``ManualScheduler`` so a test decides when
queued mutations flush.  ``observer_spy`` gives an ``ObserverSpy`` that records
every document a cursor publishes.  Registered through the ``pytest11`` entry
point, so an installed package needs no conftest.py to use them.
"""

from __future__ import annotations

from typing import Any

import pytest

from doc_cursor import ManualScheduler


class ObserverSpy:
    """Recording observer: stores every document it is called with.

    Attributes:
        calls: Documents received, oldest first.
    """

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, document: Any) -> None:
        self.calls.append(document)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def last(self) -> Any:
        """The most recently observed document.

        Raises:
            AssertionError: If the observer has not been called yet.
        """
        if not self.calls:
            raise AssertionError("observer was never called")
        return self.calls[-1]


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    """A fresh ``ManualScheduler``: flushes run only on ``tick()``.

    Usage in tests::

        def test_batch(manual_scheduler, observer_spy):
            cursor = Cursor({"n": 0}, observer_spy, scheduler=manual_scheduler)
            cursor.refine("n").set(1)
            manual_scheduler.tick()
            assert observer_spy.last == {"n": 1}
    """
    return ManualScheduler()


@pytest.fixture
def observer_spy() -> ObserverSpy:
    """A fresh ``ObserverSpy`` to pass as a cursor's observer."""
    return ObserverSpy()
