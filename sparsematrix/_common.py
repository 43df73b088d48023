import operator
from collections import defaultdict

import numpy as np

from ._compressed import CCS, CRS
from ._coordinates import transpose_linear_index
from ._cvs import CVS
from ._dok import DOK
from ._parallel import parallel_for_each
from ._utils import check_size, check_vector, is_zero


def _check_not_aliased(target, *sources):
    if any(target is s for s in sources):
        raise ValueError("target must be a different store from the operands.")


def _check_no_target(x, target):
    if target is not None:
        raise TypeError(f"{type(x).__name__} operations return a new instance; a target cannot be given.")


def _key_converter(source, target):
    """Return a function mapping keys of ``source`` to keys of ``target``."""
    if (
        source.shape == target.shape
        and source.key_strategy.name == target.key_strategy.name
        and (not source.is_linear_indexed or source.mode is target.mode)
    ):
        return lambda key: key

    def convert(key):
        return target.coordinates_to_key(*source.key_to_coordinates(key))

    return convert


def _replace(current, value):
    return value


def transpose(source, target=None):
    """
    Transpose a matrix.

    For a :obj:`DOK`, every entry ``(r, c)`` is written to ``(c, r)`` of
    ``target``, which must already have the transposed shape. If no target is
    given, one is created with the source's key strategy, major order, fill
    and diagonal values. Compressed matrices return a new instance.

    Raises
    ------
    SizeMismatch
        If ``target.shape`` is not ``source.shape`` swapped.
    ValueError
        If ``target`` is ``source``.

    Examples
    --------
    >>> s = DOK((2, 3), {(0, 2): 4})
    >>> print(transpose(s)[2, 0])
    4
    """
    if isinstance(source, (CRS, CCS, CVS)):
        _check_no_target(source, target)
        return source.transpose()

    if target is None:
        target = source.empty_like(
            shape=source.shape[::-1],
            fill_value=source.fill_value,
            diagonal=source.diagonal,
        )
    _check_not_aliased(target, source)
    check_size(source.shape[::-1], target.shape)

    if source.is_linear_indexed and target.is_linear_indexed and source.mode is target.mode:

        def _transpose_entry(item):
            key, value = item
            _, new_key = transpose_linear_index(source.shape, key, source.mode)
            target.set(new_key, value)

    else:

        def _transpose_entry(item):
            key, value = item
            row, column = source.key_to_coordinates(key)
            target.set(target.coordinates_to_key(column, row), value)

    parallel_for_each(_transpose_entry, source.items())
    return target


def _elementwise(a, b, target, func):
    check_size(a.shape, b.shape)
    if target is None:
        target = a.empty_like(dtype=np.result_type(a.dtype, b.dtype))
    elif target is b and b is not a:
        raise ValueError("target may alias the first operand only.")
    check_size(a.shape, target.shape)

    a_items, b_items = a.items(), b.items()
    from_a, from_b = _key_converter(a, target), _key_converter(b, target)

    def _copy_entry(item):
        key, value = item
        target.set(from_a(key), value)

    def _fold_entry(item):
        key, value = item
        target.fold(from_b(key), value, func)

    if target is not a:
        parallel_for_each(_copy_entry, a_items)
    parallel_for_each(_fold_entry, b_items)
    return target


def matrix_sum(a, b, target=None):
    """
    Add two matrices of the same shape.

    Entries of ``a`` are copied into ``target``, then every entry of ``b``
    is added to the value ``target`` holds for its key, or stored as is when
    ``target`` has none. Sums equal to zero are removed.

    Parameters
    ----------
    a, b : DOK or CVS
    target : DOK, optional
        Where to write the result. It may be ``a`` itself. Created from
        ``a`` if not given. Not allowed for :obj:`CVS` operands, which return a
        new instance.

    Raises
    ------
    SizeMismatch
        If the shapes of ``a``, ``b`` and ``target`` differ.

    Examples
    --------
    >>> a = DOK((2, 2), {(0, 0): 1, (0, 1): 2})
    >>> b = DOK((2, 2), {(0, 1): -2, (1, 1): 3})
    >>> matrix_sum(a, b).todense().tolist()
    [[1, 0], [0, 3]]
    """
    if isinstance(a, CVS):
        _check_no_target(a, target)
        return a.matrix_sum(b)
    return _elementwise(a, b, target, operator.add)


def matrix_difference(a, b, target=None):
    """
    Subtract ``b`` from ``a``.

    Entries of ``b`` are subtracted from the values ``target`` holds. Keys
    of ``b`` that ``target`` does not hold store the value of ``b`` unchanged,
    not its negation. Differences equal to zero are removed. See
    :obj:`matrix_sum` for the parameters.

    Examples
    --------
    >>> a = DOK((2, 2), {(0, 1): 2})
    >>> b = DOK((2, 2), {(0, 1): 2, (1, 0): 5})
    >>> matrix_difference(a, b).todense().tolist()
    [[0, 0], [5, 0]]
    """
    if isinstance(a, CVS):
        _check_no_target(a, target)
        return a.matrix_difference(b)
    return _elementwise(a, b, target, operator.sub)


def matrix_scalar_product(source, scalar, target=None):
    """
    Multiply every stored entry by ``scalar``.

    A zero ``scalar`` clears ``target`` instead. Passing ``source`` as
    ``target`` scales in place, keeping the source's dtype. Products that
    are zero in the target's dtype are removed. A new target has zero fill and
    diagonal values.

    Raises
    ------
    SizeMismatch
        If ``target`` has a different shape.
    """
    if isinstance(source, (CRS, CCS, CVS)):
        _check_no_target(source, target)
        return source.matrix_scalar_product(scalar)

    if target is None:
        target = source.empty_like(dtype=np.result_type(source.dtype, scalar))
    check_size(source.shape, target.shape)

    if is_zero(scalar):
        target.clear()
        return target

    items = source.items()
    convert = _key_converter(source, target)

    def _scale_entry(item):
        key, value = item
        target.combine(convert(key), value * scalar, _replace)

    parallel_for_each(_scale_entry, items)
    return target


def matrix_vector_product(source, vector):
    """
    Multiply a matrix by a dense vector.

    Only stored entries contribute, so rows without entries are zero in
    the result.

    Raises
    ------
    SizeMismatch
        If ``vector`` does not have one entry per column.

    Examples
    --------
    >>> s = DOK((2, 3), {(0, 1): 2, (1, 2): 3})
    >>> matrix_vector_product(s, [1, 1, 2]).tolist()
    [2, 6]
    """
    if not isinstance(source, DOK):
        return source.matrix_vector_product(vector)

    vector = check_vector(source.shape, vector)
    rows, columns, data = source.entries()
    out = np.zeros(source.shape[0], dtype=np.result_type(source.dtype, vector.dtype))
    np.add.at(out, rows, data * vector[columns])
    return out


def matrix_product(a, b, target=None):
    """
    Multiply two matrices.

    Every entry ``a[r, k]`` is paired with the entries of row ``k`` of ``b``
    and their products are added into ``target[r, c]``. Totals reaching zero
    are removed. Entries already in ``target`` are added onto.

    Raises
    ------
    SizeMismatch
        If the columns of ``a`` differ from the rows of ``b``, or ``target``
        is not ``(a.rows, b.columns)``.
    ValueError
        If ``target`` is one of the operands.

    Examples
    --------
    >>> a = DOK((2, 2), {(0, 0): 1, (0, 1): 2})
    >>> b = DOK((2, 1), {(0, 0): 3, (1, 0): 4})
    >>> matrix_product(a, b).todense().tolist()
    [[11], [0]]
    """
    if isinstance(a, CVS):
        _check_no_target(a, target)
        return a.matrix_product(b)

    check_size((a.shape[1], b.shape[1]), b.shape)
    shape = (a.shape[0], b.shape[1])
    if target is None:
        target = a.empty_like(shape=shape, dtype=np.result_type(a.dtype, b.dtype))
    _check_not_aliased(target, a, b)
    check_size(shape, target.shape)

    rows_of_b = defaultdict(list)
    for key, value in b.items():
        row, column = b.key_to_coordinates(key)
        rows_of_b[row].append((column, value))

    def _multiply_entry(item):
        key, value = item
        row, inner = a.key_to_coordinates(key)
        for column, other in rows_of_b.get(inner, ()):
            target.combine(target.coordinates_to_key(row, column), value * other, operator.add)

    parallel_for_each(_multiply_entry, a.items())
    return target


def compress_to_crs(dok):
    return CRS.from_dok(dok)


def compress_to_ccs(dok):
    return CCS.from_dok(dok)


def compress_to_cvs(dok, mode=None):
    return CVS.from_dok(dok, mode)


def decompress(compressed, target=None, fill_value=None, diagonal=None):
    """
    Decompress a :obj:`CRS`, :obj:`CCS` or :obj:`CVS` matrix.

    Parameters
    ----------
    compressed : CRS or CCS or CVS
    target : DOK or numpy.ndarray, optional
        A store to write the stored entries into, or a dense buffer to
        overwrite. If not given, a new dense array is returned.
    fill_value, diagonal : scalar, optional
        The values of unstored cells in a dense result. Default to the
        compressed matrix's own.

    Raises
    ------
    SizeMismatch
        If ``target`` has a different shape.
    ModeMismatch
        If a :obj:`CVS` is written into a linear-indexed store of another
        major order.
    """
    if target is None:
        return compressed.todense(fill_value, diagonal)

    if isinstance(target, np.ndarray):
        check_size(compressed.shape, target.shape)
        target[...] = compressed.todense(fill_value, diagonal)
        return target

    return compressed.decompress(target)
