import pytest
from hypothesis import given, strategies as st

import numpy as np

from sparsematrix import (
    CoordinateOutOfBounds,
    MajorOrder,
    check_coordinates,
    to_coordinates,
    to_linear_index,
    transpose_coordinates,
    transpose_linear_index,
)
from sparsematrix.tests._utils import gen_coordinates


@pytest.mark.parametrize(
    "mode, expected",
    [
        (MajorOrder.ROW, [1, 7, 13, 19, 20]),
        (MajorOrder.COLUMN, [5, 11, 17, 23, 4]),
    ],
)
def test_linear_index(mode, expected):
    coords = [(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)]
    assert [to_linear_index((5, 5), r, c, mode) for r, c in coords] == expected


@given(gen_coordinates())
def test_linear_index_bijection(args):
    shape, row, column, mode = args
    index = to_linear_index(shape, row, column, mode)

    assert 0 <= index < shape[0] * shape[1]
    assert to_coordinates(shape, index, mode) == (row, column)


def test_vectorized():
    rows, columns = np.array([0, 1, 2]), np.array([2, 0, 1])
    index = to_linear_index((3, 4), rows, columns, MajorOrder.COLUMN)

    np.testing.assert_array_equal(index, [6, 1, 5])

    r, c = to_coordinates((3, 4), index, MajorOrder.COLUMN)
    np.testing.assert_array_equal(r, rows)
    np.testing.assert_array_equal(c, columns)


def test_mode_strings():
    assert to_linear_index((2, 3), 1, 2, "column") == 5
    with pytest.raises(ValueError, match="mode"):
        MajorOrder.parse("diagonal")


def test_transpose_coordinates():
    assert transpose_coordinates(3, 8) == (8, 3)


@given(gen_coordinates())
def test_transpose_linear_index(args):
    shape, row, column, mode = args
    index = to_linear_index(shape, row, column, mode)

    new_shape, new_index = transpose_linear_index(shape, index, mode)

    assert new_shape == shape[::-1]
    assert to_coordinates(new_shape, new_index, mode) == (column, row)
    assert transpose_linear_index(new_shape, new_index, mode) == (shape, index)


@given(gen_coordinates(), st.integers(min_value=-3, max_value=10), st.integers(min_value=-3, max_value=10))
def test_check_coordinates(args, row, column):
    shape = args[0]
    inside = 0 <= row < shape[0] and 0 <= column < shape[1]

    assert check_coordinates(shape, row, column, suppress=True) == inside
    if inside:
        assert check_coordinates(shape, row, column)
    else:
        with pytest.raises(CoordinateOutOfBounds):
            check_coordinates(shape, row, column)


@pytest.mark.parametrize(
    "row, column, axis",
    [(-1, 0, "row"), (2, 0, "row"), (2, 9, "row"), (0, 3, "column"), (1, -1, "column")],
)
def test_out_of_bounds_axis(row, column, axis):
    with pytest.raises(CoordinateOutOfBounds) as excinfo:
        check_coordinates((2, 3), row, column)

    assert excinfo.value.axis == axis
    assert isinstance(excinfo.value, IndexError)
