"""Operators subpackage: mutation operators and the engine that applies them.

Re-exports the public API for the operators module:
- OperatorTag: StrEnum of the seven operator kinds
- SetOp / MergeOp / PushOp / UnshiftOp / SpliceOp / ApplyOp / RemoveOp
- Operation: a queued (path, operator) record
- parse_update_spec: parse ``$``-operator specs into operators
- apply_operation / apply_operations: the pure engine
"""

from doc_cursor.operators.engine import (
    apply_operation,
    apply_operations,
    apply_operator,
)
from doc_cursor.operators.ops import (
    ApplyOp,
    MergeOp,
    Operation,
    Operator,
    OperatorTag,
    PushOp,
    RemoveOp,
    SetOp,
    SpliceOp,
    UnshiftOp,
    parse_update_spec,
)

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
    "apply_operation",
    "apply_operations",
    "apply_operator",
    "parse_update_spec",
]
