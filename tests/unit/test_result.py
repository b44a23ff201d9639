"""
Unit tests for the DiffResult model.
"""

import pytest

from querydiff.cells import Cell
from querydiff.result import DiffResult, MatchMode, MatchOutcome, MismatchedRow, MissingRow

ROW_A = (Cell.of(1), Cell.of("a"))
ROW_B = (Cell.of(2), Cell.of("b"))


def mismatch(left_number=1, right_number=1, columns=(1,), drift=()):
    return MismatchedRow(
        left_row_number=left_number,
        right_row_number=right_number,
        left_row=ROW_A,
        right_row=ROW_B,
        columns=frozenset(columns),
        type_drift_columns=frozenset(drift),
    )


class TestDiffResultBuild:
    """Test freezing an outcome into a result."""

    def test_empty_outcome_is_equal(self):
        result = DiffResult.build(MatchMode.KEYED, MatchOutcome(), 3, 3)

        assert result.equal is True
        assert result.missing_left == ()

    def test_missing_rows_make_unequal(self):
        outcome = MatchOutcome(missing_left=[MissingRow(3, ROW_A)])

        assert DiffResult.build(MatchMode.KEYED, outcome, 3, 2).equal is False

    def test_mismatch_makes_unequal(self):
        outcome = MatchOutcome(mismatched=[mismatch()])

        assert DiffResult.build(MatchMode.KEYED, outcome, 1, 1).equal is False

    def test_entries_sorted_by_row_number(self):
        outcome = MatchOutcome(
            missing_left=[MissingRow(5, ROW_A), MissingRow(2, ROW_B)],
            missing_right=[MissingRow(9, ROW_A), MissingRow(1, ROW_B)],
            mismatched=[mismatch(4, 1), mismatch(3, 2)],
        )

        result = DiffResult.build(MatchMode.KEYED, outcome, 10, 10)

        assert [m.row_number for m in result.missing_left] == [2, 5]
        assert [m.row_number for m in result.missing_right] == [1, 9]
        assert [m.left_row_number for m in result.mismatched] == [3, 4]

    def test_fingerprint_mode_rejects_mismatches(self):
        with pytest.raises(ValueError):
            DiffResult.build(MatchMode.FINGERPRINT, MatchOutcome(mismatched=[mismatch()]), 1, 1)

    def test_result_is_immutable(self):
        result = DiffResult.build(MatchMode.KEYED, MatchOutcome(), 0, 0)

        with pytest.raises(AttributeError):
            result.equal = False

    def test_row_count_mismatch_alone_keeps_equal(self):
        result = DiffResult.build(MatchMode.KEYED, MatchOutcome(), 3, 2)

        assert result.equal is True
        assert result.row_count_mismatch is True


class TestDiffResultUnion:
    """Test merging partition outcomes."""

    def test_union_merges_and_sorts(self):
        first = MatchOutcome(missing_left=[MissingRow(4, ROW_A)])
        second = MatchOutcome(missing_left=[MissingRow(1, ROW_B)], mismatched=[mismatch(2, 2)])

        result = DiffResult.union(MatchMode.KEYED, [first, second], 5, 5)

        assert [m.row_number for m in result.missing_left] == [1, 4]
        assert len(result.mismatched) == 1
        assert result.equal is False

    def test_union_of_nothing_is_equal(self):
        assert DiffResult.union(MatchMode.FINGERPRINT, [], 0, 0).equal is True


class TestDiffResultColumns:
    """Test aggregate helpers."""

    def test_column_indices(self):
        outcome = MatchOutcome(mismatched=[mismatch(1, 1, (1, 2), (2,)), mismatch(2, 2, (3,))])
        result = DiffResult.build(MatchMode.KEYED, outcome, 2, 2)

        assert result.mismatched_column_indices() == {1, 2, 3}
        assert result.type_drift_column_indices() == {2}
        assert result.type_drift_count == 1


class TestDiffResultDict:
    """Test dict serialization."""

    def test_round_trip(self):
        outcome = MatchOutcome(
            missing_left=[MissingRow(1, ROW_A)],
            missing_right=[MissingRow(2, ROW_B)],
            mismatched=[mismatch(3, 4, (1,), (1,))],
        )
        result = DiffResult.build(MatchMode.KEYED, outcome, 4, 5)

        assert DiffResult.from_dict(result.to_dict()) == result

    def test_dict_shape(self):
        data = DiffResult.build(MatchMode.FINGERPRINT, MatchOutcome(), 1, 1).to_dict()

        assert data["mode"] == "fingerprint"
        assert data["equal"] is True
        assert data["missing_left"] == []
