"""
Key strategies for :obj:`DOK` stores.

A strategy validates a key against a matrix size, returning the normalized
key and its ``(row, column)`` coordinates, and converts between keys and
coordinates. Stores are parameterized by a strategy instead of being
subclassed per key type.
"""

import operator

import numpy as np

from ._coordinates import check_coordinates, to_coordinates, to_linear_index


def _as_index(value):
    try:
        return operator.index(value)
    except TypeError:
        raise IndexError(f"matrix keys must be integers, got {value!r}") from None


def _coordinates_from_pair(shape, key):
    if not isinstance(key, tuple) or len(key) != 2:
        raise IndexError(f"expected a (row, column) key, got {key!r}")

    row, column = _as_index(key[0]), _as_index(key[1])
    check_coordinates(shape, row, column)
    return row, column


class CoordinatesKeys:
    """Keys are ``(row, column)`` tuples."""

    name = "coordinates"
    is_linear = False

    def validate(self, shape, key, mode):
        coordinates = _coordinates_from_pair(shape, key)
        return coordinates, coordinates

    def to_coordinates(self, shape, key, mode):
        return key

    def from_coordinates(self, shape, row, column, mode):
        return (row, column)

    def unravel(self, shape, keys, mode):
        coords = np.array(keys, dtype=np.intp).reshape(-1, 2)
        return coords[:, 0], coords[:, 1]

    def __repr__(self):
        return f"{type(self).__name__}()"


class LinearIndexKeys:
    """
    Keys are integer linear indices under the store's major order.

    A ``(row, column)`` tuple is also accepted and converted on the way in.
    """

    name = "linear"
    is_linear = True

    def validate(self, shape, key, mode):
        if isinstance(key, tuple):
            row, column = _coordinates_from_pair(shape, key)
            return to_linear_index(shape, row, column, mode), (row, column)

        key = _as_index(key)
        rows, columns = shape
        if rows == 0 or columns == 0:
            check_coordinates(shape, 0, 0)
        row, column = to_coordinates(shape, key, mode)
        check_coordinates(shape, row, column)
        return key, (row, column)

    def to_coordinates(self, shape, key, mode):
        return to_coordinates(shape, key, mode)

    def from_coordinates(self, shape, row, column, mode):
        return to_linear_index(shape, row, column, mode)

    def unravel(self, shape, keys, mode):
        keys = np.array(keys, dtype=np.intp)
        if keys.size == 0:
            return keys, keys.copy()
        return to_coordinates(shape, keys, mode)

    def __repr__(self):
        return f"{type(self).__name__}()"


_STRATEGIES = {
    CoordinatesKeys.name: CoordinatesKeys,
    LinearIndexKeys.name: LinearIndexKeys,
}


def resolve_keys(keys):
    """Return a strategy instance from a strategy or its name."""
    if isinstance(keys, (CoordinatesKeys, LinearIndexKeys)):
        return keys
    try:
        return _STRATEGIES[keys]()
    except (KeyError, TypeError):
        raise ValueError(f"keys must be one of {sorted(_STRATEGIES)}, got {keys!r}") from None
