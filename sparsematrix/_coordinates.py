from enum import Enum

from ._exceptions import CoordinateOutOfBounds


class MajorOrder(Enum):
    """
    The convention used to flatten ``(row, column)`` coordinates to a linear index.

    Examples
    --------
    >>> MajorOrder.parse("column")
    <MajorOrder.COLUMN: 'column'>
    """

    ROW = "row"
    COLUMN = "column"

    @classmethod
    def parse(cls, mode):
        if isinstance(mode, cls):
            return mode
        try:
            return cls(mode)
        except ValueError:
            raise ValueError(f"mode must be 'row' or 'column', got {mode!r}") from None


def to_linear_index(shape, row, column, mode=MajorOrder.ROW):
    """
    Flatten coordinates to a linear index.

    ``row`` and ``column`` may be integers or integer arrays of the same shape.

    Parameters
    ----------
    shape : tuple[int, int]
        The ``(rows, columns)`` of the matrix.
    row, column : int or numpy.ndarray
        The coordinates.
    mode : MajorOrder, optional
        Row-major (``column + row * columns``) or column-major
        (``row + column * rows``).

    Returns
    -------
    int or numpy.ndarray

    Examples
    --------
    >>> to_linear_index((5, 5), 1, 2)
    7
    >>> to_linear_index((5, 5), 1, 2, MajorOrder.COLUMN)
    11
    """
    rows, columns = shape
    if MajorOrder.parse(mode) is MajorOrder.ROW:
        return column + row * columns
    return row + column * rows


def to_coordinates(shape, index, mode=MajorOrder.ROW):
    """
    The inverse of :obj:`to_linear_index`.

    Examples
    --------
    >>> to_coordinates((5, 5), 7)
    (1, 2)
    >>> to_coordinates((2, 3), 5, MajorOrder.COLUMN)
    (1, 2)
    """
    rows, columns = shape
    if MajorOrder.parse(mode) is MajorOrder.ROW:
        row, column = divmod(index, columns)
    else:
        column, row = divmod(index, rows)
    return row, column


def transpose_coordinates(row, column):
    return column, row


def transpose_linear_index(shape, index, mode=MajorOrder.ROW):
    """
    Transpose a linear index.

    The index is decoded under ``mode`` against ``shape`` and re-encoded under
    the same ``mode`` against the swapped shape.

    Returns
    -------
    tuple
        ``(new_shape, new_index)``.

    Examples
    --------
    >>> transpose_linear_index((2, 3), 1)
    ((3, 2), 2)
    """
    rows, columns = shape
    new_shape = (columns, rows)
    row, column = transpose_coordinates(*to_coordinates(shape, index, mode))
    return new_shape, to_linear_index(new_shape, row, column, mode)


def check_coordinates(shape, row, column, suppress=False):
    """
    Check coordinates against a matrix size.

    Parameters
    ----------
    shape : tuple[int, int]
        The ``(rows, columns)`` of the matrix.
    row, column : int
        The coordinates to check. The row is checked first.
    suppress : bool, optional
        Return ``False`` instead of raising.

    Returns
    -------
    bool
        Whether the coordinates are in bounds.

    Raises
    ------
    CoordinateOutOfBounds
        If ``suppress`` is false and a coordinate is out of bounds.

    Examples
    --------
    >>> check_coordinates((2, 2), 1, 5, suppress=True)
    False
    """
    rows, columns = shape
    if not 0 <= row < rows:
        if suppress:
            return False
        raise CoordinateOutOfBounds("row", row, rows)
    if not 0 <= column < columns:
        if suppress:
            return False
        raise CoordinateOutOfBounds("column", column, columns)
    return True
