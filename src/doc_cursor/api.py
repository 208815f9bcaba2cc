"""Public functional helpers for doc-cursor.

``update`` applies an update spec to a document immediately and returns the
new document, without any cursor, queue or observer.  ``get_in`` reads a
value through raw segments, value-references included.  Both are pure: the
input document is never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from doc_cursor.config import CursorConfig
from doc_cursor.operators.engine import apply_operations
from doc_cursor.operators.ops import Operation, parse_update_spec
from doc_cursor.path.resolver import get_in as _get_path
from doc_cursor.path.resolver import resolve

__all__ = ["get_in", "update"]


def update(
    document: Any,
    spec: Mapping[Any, Any],
    config: CursorConfig | None = None,
) -> Any:
    """Return a new document with ``spec`` applied to ``document``.

    Nested path keys are resolved against ``document`` once, before any
    operator runs, exactly as a cursor resolves them at enqueue time.

    Args:
        document: The document to update (not mutated).
        spec:     Update spec, e.g. ``{"cells": {"$push": [{"cell_id": 7}]}}``.
        config:   Optional ``CursorConfig``.

    Returns:
        The updated document.  Untouched subtrees are shared with ``document``.

    Raises:
        InvalidOperatorError: If the spec is malformed.
        PathNotFoundError: If a path cannot be located.
        TypeMismatchError: If an operator meets the wrong container kind.
    """
    operations = [
        Operation(resolve(document, (), segments, config), operator)
        for segments, operator in parse_update_spec(spec)
    ]
    return apply_operations(document, operations, config)


def get_in(document: Any, *segments: Any, config: CursorConfig | None = None) -> Any:
    """Return the value of ``document`` at ``segments``.

    Example::

        get_in({"cells": [{"cell_id": 4}]}, "cells", 0, "cell_id")   # 4

    Raises:
        PathNotFoundError: If any segment cannot be located.
    """
    return _get_path(document, resolve(document, (), segments, config))
