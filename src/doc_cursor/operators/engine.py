"""Operator engine: apply one operation to a document, producing a new one.

The engine never mutates its input.  Only the containers along the target
path are rebuilt; every untouched subtree is shared with the input document.
Rebuilt mappings are plain ``dict``; rebuilt sequences keep ``list``/``tuple``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from doc_cursor.config import DEFAULT_CONFIG, CursorConfig
from doc_cursor.errors import PathNotFoundError, TypeMismatchError
from doc_cursor.operators.ops import (
    ApplyOp,
    MergeOp,
    Operation,
    Operator,
    PushOp,
    RemoveOp,
    SetOp,
    SpliceOp,
    UnshiftOp,
)
from doc_cursor.path.equality import find_index
from doc_cursor.path.resolver import format_path, step
from doc_cursor.path.segments import is_sequence

__all__ = ["apply_operation", "apply_operations", "apply_operator"]


def _rebuild_sequence(original: Any, items: list[Any]) -> Any:
    """Return ``items`` as the same sequence type as ``original``."""
    return tuple(items) if isinstance(original, tuple) else items


def _require_mapping(target: Any, operator: Operator, path: tuple[Any, ...]) -> None:
    if not isinstance(target, Mapping):
        msg = (
            f"{operator.tag.spec_key} requires a mapping at {format_path(path)}, "
            f"got {type(target).__name__}"
        )
        raise TypeMismatchError(msg, path, "mapping", type(target))


def _require_sequence(target: Any, operator: Operator, path: tuple[Any, ...]) -> None:
    if not is_sequence(target):
        msg = (
            f"{operator.tag.spec_key} requires a sequence at {format_path(path)}, "
            f"got {type(target).__name__}"
        )
        raise TypeMismatchError(msg, path, "sequence", type(target))


def _splice(target: Any, op: SpliceOp) -> list[Any]:
    """Array.prototype.splice semantics on a copy of ``target``."""
    length = len(target)
    start = max(length + op.start, 0) if op.start < 0 else min(op.start, length)
    if op.delete_count is None:
        delete_count = length - start
    else:
        delete_count = min(max(op.delete_count, 0), length - start)
    items = list(target)
    items[start : start + delete_count] = op.items
    return items


def apply_operator(
    target: Any,
    operator: Operator,
    path: tuple[Any, ...] = (),
    config: CursorConfig | None = None,
) -> Any:
    """Apply ``operator`` to ``target`` itself and return the replacement value.

    Args:
        target:   The current value at the operation's path.
        operator: The operator to apply.
        path:     Absolute path of ``target``, used for error messages.
        config:   Supplies the equality mode for ``RemoveOp``.

    Raises:
        TypeMismatchError: If ``target`` is the wrong container kind.
    """
    config = config if config is not None else DEFAULT_CONFIG

    if isinstance(operator, SetOp):
        return operator.value

    if isinstance(operator, ApplyOp):
        return operator.fn(target)

    if isinstance(operator, MergeOp):
        _require_mapping(target, operator, path)
        return {**target, **operator.values}

    _require_sequence(target, operator, path)

    if isinstance(operator, PushOp):
        return _rebuild_sequence(target, [*target, *operator.items])

    if isinstance(operator, UnshiftOp):
        return _rebuild_sequence(target, [*operator.items, *target])

    if isinstance(operator, SpliceOp):
        return _rebuild_sequence(target, _splice(target, operator))

    if isinstance(operator, RemoveOp):
        idx = find_index(target, operator.value, config.equality)
        if idx < 0:
            return target
        return _rebuild_sequence(target, [*target[:idx], *target[idx + 1 :]])

    msg = f"Unsupported operator type: {type(operator)!r}"
    raise TypeError(msg)


def _apply_at(
    node: Any,
    path: tuple[Any, ...],
    depth: int,
    operator: Operator,
    config: CursorConfig,
) -> Any:
    if depth == len(path):
        return apply_operator(node, operator, path, config)

    segment = path[depth]
    parent_path = path[:depth]
    is_last = depth == len(path) - 1

    if (
        is_last
        and isinstance(operator, SetOp)
        and config.create_missing_keys
        and isinstance(node, Mapping)
        and segment not in node
    ):
        child = operator.value
    else:
        child = _apply_at(
            step(node, segment, parent_path), path, depth + 1, operator, config
        )

    if isinstance(node, Mapping):
        return {**node, segment: child}

    items = list(node)
    items[segment] = child
    return _rebuild_sequence(node, items)


def apply_operation(
    document: Any, operation: Operation, config: CursorConfig | None = None
) -> Any:
    """Return a new document with ``operation`` applied.

    Args:
        document:  The document to start from (not mutated).
        operation: Absolute path plus operator.
        config:    Cursor configuration.  Defaults to ``CursorConfig()``.

    Raises:
        PathNotFoundError: If an intermediate node or the target is missing.
        TypeMismatchError: If the target is the wrong container kind.
    """
    config = config if config is not None else DEFAULT_CONFIG
    return _apply_at(document, tuple(operation.path), 0, operation.operator, config)


def apply_operations(
    document: Any,
    operations: Iterable[Operation],
    config: CursorConfig | None = None,
) -> Any:
    """Fold ``operations`` left to right over ``document``."""
    for operation in operations:
        document = apply_operation(document, operation, config)
    return document
