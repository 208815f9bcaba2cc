"""Equality rule used to locate sequence elements by value.

Structural equality is the primary rule: mappings compare by keys and values,
sequences element-wise, numpy arrays via ``np.array_equal``.  Values whose
``==`` raises or yields something without a truth value are only equal to
themselves (identity fallback).  A ``bool`` never equals a non-``bool``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np

from doc_cursor.config import EqualityMode
from doc_cursor.path.segments import is_sequence

__all__ = ["find_index", "values_equal"]


def values_equal(
    left: Any, right: Any, mode: EqualityMode = EqualityMode.STRUCTURAL
) -> bool:
    """Return True if ``left`` and ``right`` match under ``mode``.

    Args:
        left:  First value.
        right: Second value.
        mode:  STRUCTURAL (deep equality) or IDENTITY (``is`` only).

    Returns:
        Whether the two values are considered the same element.
    """
    if left is right:
        return True
    if mode is EqualityMode.IDENTITY:
        return False

    if isinstance(left, np.ndarray) or isinstance(right, np.ndarray):
        try:
            return bool(np.array_equal(left, right))
        except (TypeError, ValueError):
            return False

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[k], right[k], mode) for k in left)

    if is_sequence(left) or is_sequence(right):
        if not (is_sequence(left) and is_sequence(right)):
            return False
        if len(left) != len(right):
            return False
        return all(values_equal(a, b, mode) for a, b in zip(left, right, strict=True))

    if isinstance(left, bool) != isinstance(right, bool):
        return False

    try:
        return bool(left == right)
    except (TypeError, ValueError):
        return False


def find_index(
    sequence: Any, value: Any, mode: EqualityMode = EqualityMode.STRUCTURAL
) -> int:
    """Return the index of the first element of ``sequence`` equal to ``value``.

    Returns ``-1`` when no element matches.
    """
    for idx, item in enumerate(sequence):
        if values_equal(item, value, mode):
            return idx
    return -1
