"""Path segment kinds and the Ref value-reference wrapper.

Provides the primitive types the resolver uses to tell keys, indices and
value-references apart when a cursor is refined or read.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

__all__ = ["Ref", "SegmentKind", "classify_segment", "is_sequence"]


class SegmentKind(StrEnum):
    """Enumeration of the three path segment kinds.

    - KEY   -> "key"   : A mapping key, appended as-is
    - INDEX -> "index" : A non-negative sequence index, appended as-is
    - REF   -> "ref"   : A value located inside a sequence by equality search
    """

    KEY = auto()
    INDEX = auto()
    REF = auto()


@dataclass(frozen=True, slots=True)
class Ref:
    """Explicit value-reference segment.

    Containers passed as segments are already treated as value-references;
    ``Ref`` is needed to search for a scalar, e.g. ``Ref("containers")`` or
    ``Ref(4)`` (a bare ``4`` would be read as an index).

    Attributes:
        value: The value to look for in the sequence at the parent position.
    """

    value: Any


def is_sequence(value: Any) -> bool:
    """Return True if ``value`` is a document sequence (``list`` or ``tuple``)."""
    return isinstance(value, (list, tuple))


def classify_segment(segment: Any) -> tuple[SegmentKind, Any]:
    """Classify a raw path segment.

    Args:
        segment: Anything passed to ``get`` / ``refine``.

    Returns:
        ``(kind, payload)`` where payload is the key, the index, or the value
        to search for.
    """
    if isinstance(segment, Ref):
        return SegmentKind.REF, segment.value

    # bool MUST be checked before int: bool subclasses int, and True is not index 1
    if isinstance(segment, bool):
        return SegmentKind.REF, segment

    if isinstance(segment, int):
        return SegmentKind.INDEX, segment

    if isinstance(segment, str):
        return SegmentKind.KEY, segment

    if isinstance(segment, Mapping) or is_sequence(segment):
        return SegmentKind.REF, segment

    # Other hashable values (enums, frozensets, floats...) can be mapping keys
    try:
        hash(segment)
    except TypeError:
        return SegmentKind.REF, segment
    return SegmentKind.KEY, segment
