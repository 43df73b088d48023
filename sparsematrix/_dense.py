import numpy as np


def create_dense_buffer(shape, fill_value=0, diagonal=None, dtype=None):
    """
    Create a dense 2-D array initialized to ``fill_value`` with ``diagonal``
    on the main diagonal.

    Examples
    --------
    >>> create_dense_buffer((2, 3), 0, 1, dtype=np.int64).tolist()
    [[1, 0, 0], [0, 1, 0]]
    """
    buffer = np.full(shape, fill_value, dtype=dtype)
    if diagonal is not None:
        np.fill_diagonal(buffer, diagonal)
    return buffer


def iterate_dense_buffer(buffer):
    """Yield ``(row, column, value)`` for every cell of a dense 2-D array."""
    for (row, column), value in np.ndenumerate(buffer):
        yield row, column, value
