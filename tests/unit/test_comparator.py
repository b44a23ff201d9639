"""
Unit tests for cell and row comparison.
"""

from decimal import Decimal

from querydiff.cells import Cell
from querydiff.comparator import cells_equal, compare_rows


class TestCellsEqual:
    """Test strict per-tag equality."""

    def test_null_equals_null(self):
        assert cells_equal(Cell.null(), Cell.null())

    def test_null_differs_from_value(self):
        assert not cells_equal(Cell.null(), Cell.of(0))
        assert not cells_equal(Cell.of(""), Cell.null())

    def test_no_numeric_widening(self):
        assert not cells_equal(Cell.of(1), Cell.of(1.0))
        assert not cells_equal(Cell.of(Decimal("1")), Cell.of(1))

    def test_no_string_coercion(self):
        assert not cells_equal(Cell.of(5), Cell.of("5"))

    def test_same_tag_values(self):
        assert cells_equal(Cell.of("a"), Cell.of("a"))
        assert not cells_equal(Cell.of("a"), Cell.of("b"))

    def test_nan_equals_nan_of_same_tag(self):
        assert cells_equal(Cell.of(float("nan")), Cell.of(float("nan")))
        assert cells_equal(Cell.of(Decimal("NaN")), Cell.of(Decimal("NaN")))
        assert cells_equal(Cell.of(Decimal("sNaN")), Cell.of(Decimal("NaN")))

    def test_nan_differs_from_numbers_and_other_tag(self):
        assert not cells_equal(Cell.of(float("nan")), Cell.of(1.0))
        assert not cells_equal(Cell.of(0.0), Cell.of(float("nan")))
        assert not cells_equal(Cell.of(float("nan")), Cell.of(Decimal("NaN")))

    def test_row_with_nan_equals_itself(self):
        row = (Cell.of(1), Cell.of(float("nan")), Cell.of(Decimal("NaN")))

        assert compare_rows(row, tuple(Cell.of(c.value) for c in row)).equal


class TestCompareRows:
    """Test positional row comparison."""

    def test_equal_rows(self):
        row = (Cell.of(1), Cell.of("a"))
        result = compare_rows(row, row)

        assert result.equal
        assert result.mismatched_columns == frozenset()

    def test_mismatched_columns(self):
        left = (Cell.of(1), Cell.of("a"), Cell.of(True))
        right = (Cell.of(1), Cell.of("b"), Cell.of(False))

        result = compare_rows(left, right)

        assert result.mismatched_columns == {1, 2}
        assert result.type_drift_columns == frozenset()
        assert not result.equal

    def test_type_drift(self):
        left = (Cell.of(1), Cell.of(5))
        right = (Cell.of(1), Cell.of("5"))

        result = compare_rows(left, right)

        assert result.mismatched_columns == {1}
        assert result.type_drift_columns == {1}

    def test_null_against_value_is_not_drift(self):
        result = compare_rows((Cell.null(),), (Cell.of(3),))

        assert result.mismatched_columns == {0}
        assert result.type_drift_columns == frozenset()

    def test_only_common_positions_compared(self):
        left = (Cell.of(1), Cell.of("a"))
        right = (Cell.of(1), Cell.of("a"), Cell.of("extra"))

        assert compare_rows(left, right).equal
