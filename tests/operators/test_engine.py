"""Tests for the operator engine: apply_operator, apply_operation, apply_operations.

Covers every operator's semantics, purity (inputs never mutated), structural
sharing of untouched subtrees, TypeMismatchError / PathNotFoundError, JS-style
splice edge cases, and the create_missing_keys switch.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from doc_cursor.config import CursorConfig, EqualityMode
from doc_cursor.errors import PathNotFoundError, TypeMismatchError
from doc_cursor.operators.engine import (
    apply_operation,
    apply_operations,
    apply_operator,
)
from doc_cursor.operators.ops import (
    ApplyOp,
    MergeOp,
    Operation,
    PushOp,
    RemoveOp,
    SetOp,
    SpliceOp,
    UnshiftOp,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def document() -> dict[str, Any]:
    return {
        "scaling": "containers",
        "cells": [{"cell_id": 4}, {"cell_id": 32}, {"cell_id": 44}],
        "meta": {"owner": "ops", "tags": ("a", "b")},
    }


def _ids(doc: dict[str, Any]) -> list[Any]:
    return [cell["cell_id"] for cell in doc["cells"]]


# ---------------------------------------------------------------------------
# Operator semantics at the target
# ---------------------------------------------------------------------------


class TestSet:
    def test_replaces_target(self, document: dict[str, Any]) -> None:
        result = apply_operation(document, Operation(("scaling",), SetOp("memory")))
        assert result["scaling"] == "memory"

    def test_root_set_replaces_document(self, document: dict[str, Any]) -> None:
        assert apply_operation(document, Operation((), SetOp({"x": 1}))) == {"x": 1}

    def test_set_inside_sequence(self, document: dict[str, Any]) -> None:
        result = apply_operation(
            document, Operation(("cells", 0, "cell_id"), SetOp("something"))
        )
        assert result["cells"][0]["cell_id"] == "something"

    def test_set_creates_missing_final_key(self, document: dict[str, Any]) -> None:
        result = apply_operation(document, Operation(("foo",), SetOp("bar")))
        assert result["foo"] == "bar"

    def test_set_missing_key_strict(self, document: dict[str, Any]) -> None:
        config = CursorConfig(create_missing_keys=False)
        with pytest.raises(PathNotFoundError):
            apply_operation(document, Operation(("foo",), SetOp("bar")), config)

    def test_set_missing_intermediate_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(PathNotFoundError):
            apply_operation(document, Operation(("foo", "bar"), SetOp(1)))

    def test_set_index_out_of_range_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(PathNotFoundError):
            apply_operation(document, Operation(("cells", 3), SetOp({})))


class TestMerge:
    def test_overlays_and_preserves_siblings(self, document: dict[str, Any]) -> None:
        result = apply_operation(document, Operation((), MergeOp({"foo": "bar"})))
        assert result["foo"] == "bar"
        assert result["scaling"] == "containers"
        assert result["cells"] is document["cells"]

    def test_payload_wins(self, document: dict[str, Any]) -> None:
        result = apply_operation(
            document, Operation(("meta",), MergeOp({"owner": "dev"}))
        )
        assert result["meta"] == {"owner": "dev", "tags": ("a", "b")}

    def test_non_mapping_target_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(TypeMismatchError) as exc_info:
            apply_operation(document, Operation(("cells",), MergeOp({"a": 1})))
        assert exc_info.value.expected == "mapping"
        assert exc_info.value.actual is list
        assert exc_info.value.path == ("cells",)

    def test_type_mismatch_is_type_error(self, document: dict[str, Any]) -> None:
        with pytest.raises(TypeError):
            apply_operation(document, Operation(("scaling",), MergeOp({})))


class TestPushUnshift:
    def test_push_appends_in_order(self, document: dict[str, Any]) -> None:
        op = PushOp(({"cell_id": 100}, {"cell_id": 101}))
        result = apply_operation(document, Operation(("cells",), op))
        assert _ids(result) == [4, 32, 44, 100, 101]

    def test_unshift_prepends_in_order(self, document: dict[str, Any]) -> None:
        op = UnshiftOp(({"cell_id": 1}, {"cell_id": 2}))
        result = apply_operation(document, Operation(("cells",), op))
        assert _ids(result) == [1, 2, 4, 32, 44]

    def test_push_keeps_tuple_type(self, document: dict[str, Any]) -> None:
        result = apply_operation(document, Operation(("meta", "tags"), PushOp(("c",))))
        assert result["meta"]["tags"] == ("a", "b", "c")

    def test_push_on_mapping_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(TypeMismatchError, match=r"\$push requires a sequence"):
            apply_operation(document, Operation(("meta",), PushOp((1,))))

    def test_unshift_on_string_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(TypeMismatchError):
            apply_operation(document, Operation(("scaling",), UnshiftOp(("x",))))


class TestSplice:
    @pytest.mark.parametrize(
        ("op", "expected"),
        [
            (SpliceOp(0, 1), [2, 3, 4, 5]),
            (SpliceOp(1, 2), [1, 4, 5]),
            (SpliceOp(1, 0, ("x",)), [1, "x", 2, 3, 4, 5]),
            (SpliceOp(1, 1, ("x", "y")), [1, "x", "y", 3, 4, 5]),
            (SpliceOp(-2, 1), [1, 2, 3, 5]),
            (SpliceOp(-10, 1), [2, 3, 4, 5]),
            (SpliceOp(10, 1, ("x",)), [1, 2, 3, 4, 5, "x"]),
            (SpliceOp(2), [1, 2]),
            (SpliceOp(2, -1), [1, 2, 3, 4, 5]),
            (SpliceOp(3, 99), [1, 2, 3]),
        ],
    )
    def test_splice_semantics(self, op: SpliceOp, expected: list[Any]) -> None:
        assert apply_operator([1, 2, 3, 4, 5], op) == expected

    def test_splice_removes_first_cell(self, document: dict[str, Any]) -> None:
        result = apply_operation(document, Operation(("cells",), SpliceOp(0, 1)))
        assert document["cells"][0] not in result["cells"]

    def test_splice_on_mapping_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(TypeMismatchError):
            apply_operation(document, Operation(("meta",), SpliceOp(0, 1)))


class TestApply:
    def test_replaces_with_function_result(self, document: dict[str, Any]) -> None:
        result = apply_operation(document, Operation(("scaling",), ApplyOp(str.upper)))
        assert result["scaling"] == "CONTAINERS"

    def test_function_receives_current_value(self, document: dict[str, Any]) -> None:
        seen: list[Any] = []

        def fn(value: Any) -> Any:
            seen.append(value)
            return len(value)

        result = apply_operation(document, Operation(("cells",), ApplyOp(fn)))
        assert seen == [document["cells"]]
        assert result["cells"] == 3

    def test_missing_target_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(PathNotFoundError):
            apply_operation(document, Operation(("nope",), ApplyOp(lambda v: v)))


class TestRemove:
    def test_removes_first_equal_element(self, document: dict[str, Any]) -> None:
        result = apply_operation(
            document, Operation(("cells",), RemoveOp({"cell_id": 32}))
        )
        assert _ids(result) == [4, 44]

    def test_removes_only_first_duplicate(self) -> None:
        assert apply_operator([1, 2, 1], RemoveOp(1)) == [2, 1]

    def test_bool_does_not_match_int(self) -> None:
        assert apply_operator([0, False], RemoveOp(False)) == [0]
        assert apply_operator([1, True], RemoveOp(1)) == [True]

    def test_unknown_operator_type_raises(self) -> None:
        with pytest.raises(TypeError, match="Unsupported operator type"):
            apply_operator([1], object())  # type: ignore[arg-type]

    def test_absent_is_noop(self, document: dict[str, Any]) -> None:
        result = apply_operation(
            document, Operation(("cells",), RemoveOp({"cell_id": 999}))
        )
        assert result["cells"] is document["cells"]

    def test_identity_mode(self, document: dict[str, Any]) -> None:
        config = CursorConfig(equality=EqualityMode.IDENTITY)
        copy_op = Operation(("cells",), RemoveOp({"cell_id": 4}))
        assert _ids(apply_operation(document, copy_op, config)) == [4, 32, 44]
        same_op = Operation(("cells",), RemoveOp(document["cells"][0]))
        assert _ids(apply_operation(document, same_op, config)) == [32, 44]

    def test_remove_on_mapping_raises(self, document: dict[str, Any]) -> None:
        with pytest.raises(TypeMismatchError):
            apply_operation(document, Operation(("meta",), RemoveOp("owner")))


# ---------------------------------------------------------------------------
# Purity and structural sharing
# ---------------------------------------------------------------------------


class TestPurity:
    def test_input_not_mutated(self, document: dict[str, Any]) -> None:
        snapshot = copy.deepcopy(document)
        apply_operations(
            document,
            [
                Operation(("cells", 0, "cell_id"), SetOp(0)),
                Operation(("cells",), PushOp(({"cell_id": 1},))),
                Operation(("meta",), MergeOp({"x": 1})),
                Operation((), MergeOp({"y": 2})),
            ],
        )
        assert document == snapshot

    def test_untouched_subtrees_are_shared(self, document: dict[str, Any]) -> None:
        result = apply_operation(
            document, Operation(("cells", 1, "cell_id"), SetOp(33))
        )
        assert result is not document
        assert result["cells"] is not document["cells"]
        assert result["cells"][0] is document["cells"][0]
        assert result["cells"][2] is document["cells"][2]
        assert result["meta"] is document["meta"]

    def test_tuple_parent_rebuilt_as_tuple(self) -> None:
        doc = {"rows": ({"v": 1}, {"v": 2})}
        result = apply_operation(doc, Operation(("rows", 1, "v"), SetOp(3)))
        assert isinstance(result["rows"], tuple)
        assert result["rows"][1] == {"v": 3}


class TestApplyOperations:
    def test_folds_left_to_right(self, document: dict[str, Any]) -> None:
        result = apply_operations(
            document,
            [
                Operation(("cells",), PushOp(({"cell_id": 100},))),
                Operation(("cells",), PushOp(({"cell_id": 101},))),
                Operation(("cells",), SpliceOp(0, 1)),
            ],
        )
        assert _ids(result) == [32, 44, 100, 101]

    def test_later_operation_sees_earlier_result(
        self, document: dict[str, Any]
    ) -> None:
        result = apply_operations(
            document,
            [
                Operation(("counter",), SetOp(1)),
                Operation(("counter",), ApplyOp(lambda n: n + 1)),
            ],
        )
        assert result["counter"] == 2

    def test_empty_batch_returns_same_document(
        self, document: dict[str, Any]
    ) -> None:
        assert apply_operations(document, []) is document

    def test_failure_in_batch_propagates(self, document: dict[str, Any]) -> None:
        with pytest.raises(PathNotFoundError):
            apply_operations(
                document,
                [
                    Operation(("cells",), SpliceOp(0)),
                    Operation(("cells", 0, "cell_id"), SetOp(1)),
                ],
            )
