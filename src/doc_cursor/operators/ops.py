"""Operator variants, the queued Operation record and the update-spec parser.

Operators form a closed set of frozen dataclasses, one per ``OperatorTag``.
Payloads are validated when the operator is constructed, so a malformed
update is rejected at the call site and never reaches the queue.

Update specs use the ``$``-prefixed grammar::

    {"$set": "memory"}
    {"$merge": {"foo": "bar"}}
    {"$push": [{"cell_id": 100}]}
    {"$splice": [[0, 1], [2, 0, "x"]]}
    {"cells": {0: {"cell_id": {"$set": 7}}}}   # nested: keys are path segments
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any, ClassVar

from doc_cursor.errors import InvalidOperatorError

__all__ = [
    "ApplyOp",
    "MergeOp",
    "Operation",
    "Operator",
    "OperatorTag",
    "PushOp",
    "RemoveOp",
    "SetOp",
    "SpliceOp",
    "UnshiftOp",
    "build_operators",
    "parse_update_spec",
]


class OperatorTag(StrEnum):
    """Enumeration of the seven mutation operators.

    The spec key of each operator is ``"$" + tag`` (e.g. ``"$merge"``).
    """

    SET = auto()
    MERGE = auto()
    PUSH = auto()
    UNSHIFT = auto()
    SPLICE = auto()
    APPLY = auto()
    REMOVE = auto()

    @property
    def spec_key(self) -> str:
        """Update-spec key for this operator, e.g. ``"$merge"``."""
        return f"${self.value}"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class SetOp:
    """Replace the target wholesale with ``value``."""

    tag: ClassVar[OperatorTag] = OperatorTag.SET
    value: Any


@dataclass(frozen=True, slots=True)
class MergeOp:
    """Overlay ``values`` onto the target mapping; payload wins on conflict."""

    tag: ClassVar[OperatorTag] = OperatorTag.MERGE
    values: Mapping[Any, Any]

    def __post_init__(self) -> None:
        if not isinstance(self.values, Mapping):
            msg = f"$merge payload must be a mapping, got {type(self.values).__name__}"
            raise InvalidOperatorError(msg)


@dataclass(frozen=True, slots=True)
class PushOp:
    """Append ``items`` in order to the end of the target sequence."""

    tag: ClassVar[OperatorTag] = OperatorTag.PUSH
    items: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            msg = f"$push items must be a tuple, got {type(self.items).__name__}"
            raise InvalidOperatorError(msg)


@dataclass(frozen=True, slots=True)
class UnshiftOp:
    """Prepend ``items`` in order to the start of the target sequence."""

    tag: ClassVar[OperatorTag] = OperatorTag.UNSHIFT
    items: tuple[Any, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            msg = f"$unshift items must be a tuple, got {type(self.items).__name__}"
            raise InvalidOperatorError(msg)


@dataclass(frozen=True, slots=True)
class SpliceOp:
    """Remove ``delete_count`` elements at ``start`` and insert ``items`` there.

    Attributes:
        start:        Start index; negative values count from the end.
        delete_count: Number of elements to delete.  None deletes to the end;
                      negative values delete nothing.
        items:        Values inserted at ``start``.
    """

    tag: ClassVar[OperatorTag] = OperatorTag.SPLICE
    start: int
    delete_count: int | None = None
    items: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if not _is_int(self.start):
            msg = f"$splice start must be an int, got {self.start!r}"
            raise InvalidOperatorError(msg)
        if self.delete_count is not None and not _is_int(self.delete_count):
            msg = f"$splice deleteCount must be an int, got {self.delete_count!r}"
            raise InvalidOperatorError(msg)
        if not isinstance(self.items, tuple):
            msg = f"$splice items must be a tuple, got {type(self.items).__name__}"
            raise InvalidOperatorError(msg)

    @classmethod
    def from_args(cls, args: Any) -> SpliceOp:
        """Build from a ``[start, deleteCount, *items]`` argument list."""
        if not isinstance(args, (list, tuple)) or not args:
            msg = f"$splice arguments must be a non-empty list, got {args!r}"
            raise InvalidOperatorError(msg)
        start, *rest = args
        delete_count = rest[0] if rest else None
        return cls(start=start, delete_count=delete_count, items=tuple(rest[1:]))


@dataclass(frozen=True, slots=True)
class ApplyOp:
    """Replace the target with ``fn(target)``."""

    tag: ClassVar[OperatorTag] = OperatorTag.APPLY
    fn: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not callable(self.fn):
            msg = f"$apply payload must be callable, got {type(self.fn).__name__}"
            raise InvalidOperatorError(msg)


@dataclass(frozen=True, slots=True)
class RemoveOp:
    """Remove the first element of the target sequence equal to ``value``."""

    tag: ClassVar[OperatorTag] = OperatorTag.REMOVE
    value: Any


Operator = SetOp | MergeOp | PushOp | UnshiftOp | SpliceOp | ApplyOp | RemoveOp

_SPEC_KEYS: dict[str, OperatorTag] = {tag.spec_key: tag for tag in OperatorTag}


@dataclass(frozen=True, slots=True)
class Operation:
    """One queued mutation: an absolute path plus the operator to apply there.

    Attributes:
        path:     Fully resolved absolute path (keys and indices only).
        operator: The operator variant carrying tag and payload.
    """

    path: tuple[Any, ...]
    operator: Operator

    @property
    def tag(self) -> OperatorTag:
        return self.operator.tag


def _items(tag: OperatorTag, payload: Any) -> tuple[Any, ...]:
    if not isinstance(payload, (list, tuple)):
        msg = f"{tag.spec_key} payload must be a list, got {type(payload).__name__}"
        raise InvalidOperatorError(msg)
    return tuple(payload)


def build_operators(key: str, payload: Any) -> list[Operator]:
    """Build the operator(s) for one ``$``-key of an update spec.

    ``$splice`` accepts either a single ``[start, deleteCount, *items]`` list
    or a list of such lists, yielding one ``SpliceOp`` per splice.  Every
    other key yields exactly one operator.

    Raises:
        InvalidOperatorError: For an unknown key or a malformed payload.
    """
    tag = _SPEC_KEYS.get(key)
    if tag is None:
        known = ", ".join(sorted(_SPEC_KEYS))
        msg = f"unknown update operator {key!r} (expected one of: {known})"
        raise InvalidOperatorError(msg)

    if tag is OperatorTag.SET:
        return [SetOp(payload)]
    if tag is OperatorTag.MERGE:
        return [MergeOp(payload)]
    if tag is OperatorTag.PUSH:
        return [PushOp(_items(tag, payload))]
    if tag is OperatorTag.UNSHIFT:
        return [UnshiftOp(_items(tag, payload))]
    if tag is OperatorTag.APPLY:
        return [ApplyOp(payload)]
    if tag is OperatorTag.REMOVE:
        return [RemoveOp(payload)]

    # OperatorTag.SPLICE
    splices = _items(tag, payload)
    if not splices:
        msg = "$splice payload must not be empty"
        raise InvalidOperatorError(msg)
    if isinstance(splices[0], (list, tuple)):
        return [SpliceOp.from_args(args) for args in splices]
    return [SpliceOp.from_args(splices)]


def parse_update_spec(spec: Any) -> list[tuple[tuple[Any, ...], Operator]]:
    """Parse an update spec into ``(relative_segments, operator)`` pairs.

    A mapping whose keys start with ``$`` must hold exactly one operator.  Any
    other mapping descends: each key is a path segment and its value a
    nested spec.  Pairs are returned in mapping order.

    Raises:
        InvalidOperatorError: If the spec is not a non-empty mapping, mixes
            operator and path keys, holds several operators at one level, or
            names an unknown operator.
    """
    return list(_walk(spec, ()))


def _walk(
    spec: Any, prefix: tuple[Any, ...]
) -> Iterator[tuple[tuple[Any, ...], Operator]]:
    if not isinstance(spec, Mapping) or not spec:
        where = "/".join(str(p) for p in prefix) or "<root>"
        msg = f"update spec at {where} must be a non-empty mapping, got {spec!r}"
        raise InvalidOperatorError(msg)

    op_keys = [k for k in spec if isinstance(k, str) and k.startswith("$")]
    if op_keys:
        if len(spec) != 1:
            msg = f"update spec must hold exactly one operator, got keys {list(spec)!r}"
            raise InvalidOperatorError(msg)
        key = op_keys[0]
        for operator in build_operators(key, spec[key]):
            yield prefix, operator
        return

    for key, sub_spec in spec.items():
        yield from _walk(sub_spec, (*prefix, key))
