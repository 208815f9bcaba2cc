"""Path resolution: turn raw segments into a concrete, stable path.

``resolve`` appends keys and indices as-is and replaces every value-reference
with the index of the first matching element in the sequence at the parent
position.  Resolution is done once, against the document snapshot passed in;
the resulting path never changes afterwards.

``get_in`` walks a resolved path and returns the value it addresses.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from doc_cursor.config import DEFAULT_CONFIG, CursorConfig
from doc_cursor.errors import PathNotFoundError
from doc_cursor.path.equality import find_index
from doc_cursor.path.segments import SegmentKind, classify_segment, is_sequence

__all__ = ["Path", "format_path", "get_in", "resolve", "step"]

# A resolved path: mapping keys and non-negative sequence indices only
Path = tuple[Any, ...]


def format_path(path: Iterable[Any]) -> str:
    """Render a path in JSON Pointer style for messages, e.g. ``/cells/0``."""
    return "".join(f"/{segment}" for segment in path) or "/"


def step(node: Any, segment: Any, path: Path) -> Any:
    """Descend one level from ``node`` into ``segment``.

    Args:
        node:    The container at ``path``.
        segment: A resolved key or index.
        path:    Path of ``node``, used for error messages.

    Returns:
        The child value.

    Raises:
        PathNotFoundError: If the child does not exist or ``node`` is not a
            container that ``segment`` can index.
    """
    if isinstance(node, Mapping):
        try:
            return node[segment]
        except (KeyError, TypeError):
            child_path = (*path, segment)
            msg = f"key {segment!r} not found at {format_path(path)}"
            raise PathNotFoundError(msg, child_path) from None

    if is_sequence(node):
        # bool MUST be rejected: True would silently address index 1
        if (
            isinstance(segment, int)
            and not isinstance(segment, bool)
            and 0 <= segment < len(node)
        ):
            return node[segment]
        child_path = (*path, segment)
        msg = (
            f"index {segment!r} out of range for sequence of length "
            f"{len(node)} at {format_path(path)}"
        )
        raise PathNotFoundError(msg, child_path)

    child_path = (*path, segment)
    msg = (
        f"cannot descend into {type(node).__name__} at {format_path(path)} "
        f"with segment {segment!r}"
    )
    raise PathNotFoundError(msg, child_path)


def get_in(document: Any, path: Iterable[Any] = ()) -> Any:
    """Return the value at ``path`` inside ``document``.

    An empty path returns the whole document.

    Raises:
        PathNotFoundError: If any segment cannot be followed.
    """
    node = document
    walked: Path = ()
    for segment in path:
        node = step(node, segment, walked)
        walked = (*walked, segment)
    return node


def resolve(
    document: Any,
    base_path: Path,
    segments: Iterable[Any],
    config: CursorConfig | None = None,
) -> Path:
    """Resolve ``segments`` relative to ``base_path`` into an absolute path.

    Key and index segments are appended without an existence check: a
    missing target is discovered when the path is read or an operator is
    applied.  Value-reference segments are located by a linear equality scan
    over the sequence at the accumulated path.

    Args:
        document:  Document snapshot used for value-reference lookups.
        base_path: Absolute path the new segments are relative to.
        segments:  Raw segments (keys, indices, ``Ref`` or container values).
        config:    Supplies the equality mode.  Defaults to ``CursorConfig()``.

    Returns:
        The resolved absolute path as a tuple.

    Raises:
        PathNotFoundError: If a value-reference cannot be located, or its
            parent position is missing or not a sequence.
    """
    config = config if config is not None else DEFAULT_CONFIG
    path: Path = tuple(base_path)

    for segment in segments:
        kind, payload = classify_segment(segment)
        if kind is not SegmentKind.REF:
            path = (*path, payload)
            continue

        target = get_in(document, path)
        if not is_sequence(target):
            msg = (
                f"cannot locate {payload!r}: {format_path(path)} is a "
                f"{type(target).__name__}, not a sequence"
            )
            raise PathNotFoundError(msg, path)

        idx = find_index(target, payload, config.equality)
        if idx < 0:
            msg = f"no element equal to {payload!r} at {format_path(path)}"
            raise PathNotFoundError(msg, path)
        path = (*path, idx)

    return path
