"""Path subpackage: segment classification, equality and resolution.

Re-exports the public API for the path module:
- Ref: explicit value-reference segment
- SegmentKind: StrEnum of the three segment kinds (KEY, INDEX, REF)
- resolve: turn raw segments into a concrete absolute path
- get_in: read the value at a resolved path
- values_equal: the matching rule for value-references and ``remove``
"""

from doc_cursor.path.equality import values_equal
from doc_cursor.path.resolver import Path, get_in, resolve
from doc_cursor.path.segments import Ref, SegmentKind

__all__ = ["Path", "Ref", "SegmentKind", "get_in", "resolve", "values_equal"]
