import functools
import warnings
from numbers import Integral

import numpy as np

from ._coordinates import MajorOrder, to_coordinates
from ._exceptions import SizeMismatch


def assert_eq(x, y, check_nnz=True, compare_dtype=True, **kwargs):
    """
    Assert that two matrices (sparse or dense) hold the same values.

    Sparse operands are compared through their dense form. When both operands
    are sparse and ``check_nnz`` is set, their stored-entry counts must match.
    """
    assert x.shape == y.shape

    if compare_dtype:
        assert x.dtype == y.dtype

    check_equal = (
        np.array_equal
        if (np.issubdtype(x.dtype, np.integer) and np.issubdtype(y.dtype, np.integer))
        or (np.issubdtype(x.dtype, np.flexible) and np.issubdtype(y.dtype, np.flexible))
        else functools.partial(np.allclose, equal_nan=True)
    )

    if check_nnz and hasattr(x, "nnz") and hasattr(y, "nnz"):
        assert x.nnz == y.nnz

    xx = x.todense() if hasattr(x, "todense") else np.asarray(x)
    yy = y.todense() if hasattr(y, "todense") else np.asarray(y)
    assert check_equal(xx, yy, **kwargs)


def _zero_of_dtype(dtype):
    """
    Creates a ()-shaped 0-dimensional zero array of a given dtype.

    Parameters
    ----------
    dtype : numpy.dtype
        The dtype for the array.

    Returns
    -------
    np.ndarray
        The zero array.
    """
    return np.zeros((), dtype=dtype)[()]


def is_zero(value):
    """
    Whether ``value`` equals the zero of its own type. ``-0.0`` counts as zero.

    Examples
    --------
    >>> is_zero(0), is_zero(-0.0), is_zero(np.nan)
    (True, True, False)
    """
    value = np.asarray(value)
    return bool(value == _zero_of_dtype(value.dtype))


def equivalent(x, y, /):
    """
    Checks the equivalence of two scalars or arrays with broadcasting. Assumes
    a consistent dtype.

    Parameters
    ----------
    x : scalar or numpy.ndarray
    y : scalar or numpy.ndarray

    Returns
    -------
    equivalent : scalar or numpy.ndarray
        The element-wise comparison of where two arrays are equivalent.

    Examples
    --------
    >>> bool(equivalent(1, 1))
    True
    >>> bool(equivalent(np.nan, np.nan + 1))
    True
    >>> bool(equivalent(1, 2))
    False
    >>> bool(equivalent(np.float64(0.0), np.float64(-0.0)))
    False
    """
    x = np.asarray(x)
    y = np.asarray(y)
    # Can't contain NaNs
    dt = np.result_type(x.dtype, y.dtype)
    if not any(np.issubdtype(dt, t) for t in [np.floating, np.complexfloating]):
        return x == y

    if x.size == 0 or y.size == 0:
        shape = np.broadcast_shapes(x.shape, y.shape)
        return np.empty(shape, dtype=np.bool_)
    x, y = np.broadcast_arrays(x[..., None], y[..., None])
    return (x.astype(dt).view(np.uint8) == y.astype(dt).view(np.uint8)).all(axis=-1)


def check_shape(shape):
    """
    Validate and normalize a ``(rows, columns)`` pair.

    Raises
    ------
    ValueError
        If ``shape`` is not a pair of non-negative integers.
    """
    if not isinstance(shape, (tuple, list)) or len(shape) != 2:
        raise ValueError(f"shape must be a (rows, columns) pair, got {shape!r}")

    if not all(isinstance(l, Integral) and int(l) >= 0 for l in shape):
        raise ValueError("shape must be a pair of non-negative integers.")

    return tuple(int(l) for l in shape)


def check_size(expected, actual):
    """Raise :obj:`SizeMismatch` unless the two sizes agree."""
    if tuple(expected) != tuple(actual):
        raise SizeMismatch(tuple(expected), tuple(actual))


def check_vector(shape, vector):
    """
    Coerce ``vector`` to an array and check it against the column count of ``shape``.
    """
    vector = np.asarray(vector)
    check_size((shape[1],), vector.shape)

    if vector.dtype.kind in "fc" and np.isnan(vector).any():
        warnings.warn(
            "Nan will not be propagated in matrix-vector product",
            RuntimeWarning,
            stacklevel=3,
        )

    return vector


def warn_if_too_dense(nbytes, shape, dtype):
    from . import _settings

    if _settings.WARN_ON_TOO_DENSE and nbytes >= shape[0] * shape[1] * dtype.itemsize:
        warnings.warn(
            "Attempting to create a sparse matrix that takes no less "
            "memory than an equivalent dense array. You may want to "
            "use a dense array here instead.",
            RuntimeWarning,
            stacklevel=3,
        )


def convert_format(format):
    """Normalize a format name, accepting the scipy spellings."""
    aliases = {"csr": "crs", "csc": "ccs"}
    format = format.lower()
    format = aliases.get(format, format)
    if format not in {"dok", "crs", "ccs", "cvs"}:
        raise NotImplementedError(f"The given format ({format!r}) is not supported.")
    return format


def random(
    shape,
    density=None,
    nnz=None,
    random_state=None,
    data_rvs=None,
    format="dok",
    keys="coordinates",
    mode=MajorOrder.ROW,
    dtype=None,
    fill_value=None,
    diagonal=None,
):
    """Generate a random sparse matrix

    Parameters
    ----------
    shape : tuple[int, int]
        Shape of the matrix.
    density : float, optional
        Density of the generated matrix; default is 0.01.
        Mutually exclusive with `nnz`.
    nnz : int, optional
        Number of stored entries in the generated matrix.
        Mutually exclusive with `density`.
    random_state : Union[`numpy.random.Generator, int`], optional
        Random number generator or random seed.
    data_rvs : Callable
        Data generation callback. Must accept one single parameter: number of
        `nnz` elements, and return one single NumPy array of exactly
        that length.
    format : str
        The format to return the output matrix in.
    keys : str or key strategy
        The key strategy of the underlying :obj:`DOK`.
    mode : MajorOrder
        The major order of the underlying :obj:`DOK`.

    Returns
    -------
    DOK or CRS or CCS or CVS
        The generated random matrix.

    Examples
    --------
    >>> s = random((4, 5), density=0.25, random_state=42)
    >>> s.nnz
    5
    """
    from ._dok import DOK

    shape = check_shape(shape)

    if density is not None and nnz is not None:
        raise ValueError("'density' and 'nnz' are mutually exclusive")

    if density is None:
        density = 0.01
    if not (0 <= density <= 1):
        raise ValueError(f"density {density} is not in the unit interval")

    elements = shape[0] * shape[1]

    if nnz is None:
        nnz = int(elements * density)
    if not (0 <= nnz <= elements):
        raise ValueError(f"cannot generate {nnz} nonzero elements for a matrix with {elements} total elements")

    if random_state is None or isinstance(random_state, Integral):
        random_state = np.random.default_rng(random_state)
    if data_rvs is None:
        data_rvs = random_state.random

    ind = random_state.choice(elements, nnz, replace=False)
    data = np.asarray(data_rvs(nnz))
    rows, columns = to_coordinates(shape, ind, MajorOrder.ROW)

    ar = DOK(
        shape,
        dtype=data.dtype if dtype is None else dtype,
        fill_value=fill_value,
        diagonal=diagonal,
        keys=keys,
        mode=mode,
    )
    for row, column, value in zip(rows.tolist(), columns.tolist(), data):
        ar.set(ar.coordinates_to_key(row, column), value)

    return ar.asformat(format)
