import threading

import numpy as np
import scipy.sparse

from ._coordinates import MajorOrder, to_linear_index
from ._dense import create_dense_buffer
from ._keys import resolve_keys
from ._utils import _zero_of_dtype, check_shape, convert_format, equivalent, is_zero


class DOK:
    """
    A mutable, thread-safe dictionary-of-keys sparse matrix.

    Parameters
    ----------
    shape : tuple[int, int]
        The ``(rows, columns)`` of the matrix.
    data : dict, optional
        Initial key-value pairs.
    dtype : np.dtype, optional
        The data type of this matrix. If left empty, it is inferred from
        ``data``, defaulting to ``float64``.
    fill_value : scalar, optional
        The value read back for absent off-diagonal entries. Defaults to
        the zero of ``dtype``.
    diagonal : scalar, optional
        The value read back for absent diagonal entries. Defaults to
        ``fill_value``.
    keys : str or key strategy, optional
        ``"coordinates"`` (keys are ``(row, column)`` tuples) or ``"linear"``
        (keys are linear indices under ``mode``).
    mode : MajorOrder, optional
        The major order used to translate linear indices.

    Attributes
    ----------
    data : dict
        The stored entries, keyed by the store's key representation.
    key_strategy : CoordinatesKeys or LinearIndexKeys
        The strategy validating and converting keys.

    See Also
    --------
    CRS : Compressed row storage.
    CCS : Compressed column storage.
    CVS : Compressed value storage.

    Examples
    --------
    Absent entries read as the fill value, or as the diagonal value on the
    main diagonal.

    >>> s = DOK((3, 3), dtype=np.int64, diagonal=1)
    >>> s[0, 2] = 5
    >>> s
    <DOK: shape=(3, 3), dtype=int64, nnz=1, fill_value=0, diagonal=1, keys=coordinates>
    >>> s.todense().tolist()
    [[1, 0, 5], [0, 1, 0], [0, 0, 1]]

    Linear-index stores accept both linear indices and coordinates.

    >>> t = DOK((3, 3), dtype=np.int64, keys="linear", mode="column")
    >>> t[7] = 4
    >>> print(t[1, 2])
    4
    """

    def __init__(
        self,
        shape,
        data=None,
        dtype=None,
        fill_value=None,
        diagonal=None,
        keys="coordinates",
        mode=MajorOrder.ROW,
    ):
        if isinstance(shape, np.ndarray):
            ar = DOK.from_numpy(shape, fill_value=fill_value, diagonal=diagonal, keys=keys, mode=mode)
            self._make_shallow_copy_of(ar)
            return

        if scipy.sparse.issparse(shape):
            ar = DOK.from_scipy_sparse(shape, keys=keys, mode=mode)
            self._make_shallow_copy_of(ar)
            return

        self.shape = check_shape(shape)
        self.key_strategy = resolve_keys(keys)
        self.mode = MajorOrder.parse(mode)

        if not data:
            data = dict()

        if not isinstance(data, dict):
            raise ValueError("data must be a dict.")

        if dtype is None and len(data):
            dtype = np.result_type(*(np.asarray(x).dtype for x in data.values()))
        self.dtype = np.dtype(dtype)

        self._zero = _zero_of_dtype(self.dtype)
        self.fill_value = self._zero if fill_value is None else self.dtype.type(fill_value)
        self.diagonal = self.fill_value if diagonal is None else self.dtype.type(diagonal)

        self._lock = threading.RLock()
        self.data = dict()

        for c, d in data.items():
            self.set(c, d)

    def _make_shallow_copy_of(self, other):
        self.__dict__.update(other.__dict__)

    @classmethod
    def from_numpy(cls, x, fill_value=None, diagonal=None, keys="coordinates", mode=MajorOrder.ROW):
        """
        Get a :obj:`DOK` matrix from a 2-D Numpy array.

        Only the cells that differ from the fill value (or, on the main
        diagonal, from the diagonal value) are stored.

        Examples
        --------
        >>> s = DOK.from_numpy(np.eye(4))
        >>> s
        <DOK: shape=(4, 4), dtype=float64, nnz=4, fill_value=0.0, diagonal=0.0, keys=coordinates>
        >>> DOK.from_numpy(np.eye(4), diagonal=1).nnz
        0
        """
        x = np.asarray(x)
        if x.ndim != 2:
            raise ValueError(f"expected a 2-d array, got a {x.ndim}-d array")

        ar = cls(x.shape, dtype=x.dtype, fill_value=fill_value, diagonal=diagonal, keys=keys, mode=mode)
        expected = create_dense_buffer(x.shape, ar.fill_value, ar.diagonal, dtype=ar.dtype)

        for row, column in zip(*np.nonzero(~equivalent(x, expected))):
            row, column = int(row), int(column)
            ar.data[ar.coordinates_to_key(row, column)] = x[row, column]

        return ar

    @classmethod
    def from_scipy_sparse(cls, x, keys="coordinates", mode=MajorOrder.ROW):
        """
        Create a :obj:`DOK` matrix from a :obj:`scipy.sparse` matrix or array.

        Examples
        --------
        >>> x = scipy.sparse.random(6, 3, density=0.5, format="csr", random_state=0)
        >>> s = DOK.from_scipy_sparse(x)
        >>> np.array_equal(x.toarray(), s.todense())
        True
        """
        x = scipy.sparse.coo_matrix(x)
        x.sum_duplicates()

        ar = cls(x.shape, dtype=x.dtype, keys=keys, mode=mode)
        for row, column, value in zip(x.row.tolist(), x.col.tolist(), x.data):
            ar.data[ar.coordinates_to_key(row, column)] = value

        return ar

    @property
    def nnz(self):
        """
        The number of explicitly stored entries.

        Examples
        --------
        >>> s = DOK((5, 5), {(1, 2): 4, (3, 2): 0})
        >>> s.nnz
        2
        """
        return len(self.data)

    @property
    def format(self):
        return "dok"

    @property
    def is_linear_indexed(self):
        return self.key_strategy.is_linear

    @property
    def ndim(self):
        return 2

    @property
    def size(self):
        return self.shape[0] * self.shape[1]

    def __len__(self):
        return len(self.data)

    def __contains__(self, key):
        try:
            key, _ = self.key_strategy.validate(self.shape, key, self.mode)
        except IndexError:
            return False
        return key in self.data

    def _cast(self, value):
        value = np.asarray(value, dtype=self.dtype)
        if value.ndim != 0:
            raise ValueError("setting an array element with a sequence.")
        return value[()]

    def get(self, key):
        """
        Read an entry, falling back to the diagonal or fill value when absent.

        Raises
        ------
        CoordinateOutOfBounds
            If ``key`` lies outside the matrix.
        """
        key, (row, column) = self.key_strategy.validate(self.shape, key, self.mode)
        try:
            return self.data[key]
        except KeyError:
            return self.diagonal if row == column else self.fill_value

    __getitem__ = get

    def set(self, key, value):
        """
        Insert or overwrite an entry.

        Validation and the write happen under the store's lock, so a key is
        never written unless it was in bounds when checked.
        """
        value = self._cast(value)
        with self._lock:
            key, _ = self.key_strategy.validate(self.shape, key, self.mode)
            self.data[key] = value

    upsert = set
    __setitem__ = set

    def try_add(self, key, value):
        """Insert an entry only if the key is absent. Returns whether it was inserted."""
        value = self._cast(value)
        with self._lock:
            key, _ = self.key_strategy.validate(self.shape, key, self.mode)
            if key in self.data:
                return False
            self.data[key] = value
            return True

    def remove(self, key):
        """Delete an entry if present. Returns whether anything was deleted."""
        with self._lock:
            key, _ = self.key_strategy.validate(self.shape, key, self.mode)
            if key not in self.data:
                return False
            del self.data[key]
            return True

    def combine(self, key, value, func):
        """
        Atomically replace the stored value ``v`` with ``func(v, value)``.

        An absent key starts from the zero of the store's dtype. A result equal
        to zero removes the key instead of storing it.

        Examples
        --------
        >>> import operator
        >>> s = DOK((2, 2), dtype=np.int64)
        >>> print(s.combine((0, 1), 3, operator.sub))
        -3
        >>> print(s.combine((0, 1), -3, operator.sub))
        0
        >>> (0, 1) in s
        False
        """
        with self._lock:
            key, _ = self.key_strategy.validate(self.shape, key, self.mode)
            result = self._cast(func(self.data.get(key, self._zero), value))
            if is_zero(result):
                self.data.pop(key, None)
            else:
                self.data[key] = result
            return result

    def fold(self, key, value, func):
        """
        Atomically merge ``value`` into the entry at ``key``.

        A stored value ``v`` is replaced with ``func(v, value)``, and the key
        is removed if that equals zero. An absent key stores ``value`` as is,
        unless it is zero in the store's dtype.

        Examples
        --------
        >>> import operator
        >>> s = DOK((2, 2), {(0, 0): 3})
        >>> print(s.fold((0, 1), 5, operator.sub))
        5
        >>> print(s.fold((0, 0), 3, operator.sub))
        0
        >>> s.nnz
        1
        """
        with self._lock:
            key, _ = self.key_strategy.validate(self.shape, key, self.mode)
            result = self._cast(func(self.data[key], value) if key in self.data else value)
            if is_zero(result):
                self.data.pop(key, None)
            else:
                self.data[key] = result
            return result

    def clear(self):
        with self._lock:
            self.data.clear()

    def items(self):
        """A snapshot list of the stored ``(key, value)`` pairs."""
        with self._lock:
            return list(self.data.items())

    def keys(self):
        with self._lock:
            return list(self.data)

    def values(self):
        with self._lock:
            return list(self.data.values())

    def entries(self):
        """
        The stored entries as parallel arrays.

        Returns
        -------
        rows, columns : numpy.ndarray
            Coordinates of every stored entry.
        data : numpy.ndarray
            The stored values, in the same order.
        """
        items = self.items()
        rows, columns = self.key_strategy.unravel(self.shape, [k for k, _ in items], self.mode)
        data = np.fromiter((v for _, v in items), dtype=self.dtype, count=len(items))
        return rows, columns, data

    def key_to_coordinates(self, key):
        return self.key_strategy.to_coordinates(self.shape, key, self.mode)

    def key_to_linear_index(self, key, mode=None):
        if self.key_strategy.is_linear and (mode is None or MajorOrder.parse(mode) is self.mode):
            return key
        row, column = self.key_to_coordinates(key)
        return to_linear_index(self.shape, row, column, self.mode if mode is None else mode)

    def coordinates_to_key(self, row, column):
        return self.key_strategy.from_coordinates(self.shape, row, column, self.mode)

    def empty_like(self, shape=None, dtype=None, fill_value=None, diagonal=None):
        """An empty store with this store's key strategy and major order."""
        return DOK(
            self.shape if shape is None else shape,
            dtype=self.dtype if dtype is None else dtype,
            fill_value=fill_value,
            diagonal=diagonal,
            keys=self.key_strategy,
            mode=self.mode,
        )

    def copy(self):
        ar = self.empty_like(fill_value=self.fill_value, diagonal=self.diagonal)
        ar.data.update(self.items())
        return ar

    def __str__(self):
        return "<DOK: shape={!s}, dtype={!s}, nnz={:d}, fill_value={!s}, diagonal={!s}, keys={}>".format(
            self.shape,
            self.dtype,
            self.nnz,
            self.fill_value,
            self.diagonal,
            self.key_strategy.name,
        )

    __repr__ = __str__

    def todense(self):
        """
        Convert this :obj:`DOK` matrix into a Numpy array.

        Examples
        --------
        >>> s = DOK((2, 3), {(0, 1): 4, (1, 2): 7})
        >>> s.todense().tolist()
        [[0, 4, 0], [0, 0, 7]]
        """
        result = create_dense_buffer(self.shape, self.fill_value, self.diagonal, dtype=self.dtype)
        rows, columns, data = self.entries()
        result[rows, columns] = data
        return result

    def asformat(self, format, mode=None):
        """
        Convert this matrix to a given format.

        Parameters
        ----------
        format : str
            One of ``"dok"``, ``"crs"`` (``"csr"``), ``"ccs"`` (``"csc"``) or ``"cvs"``.
        mode : MajorOrder, optional
            The major order of a CVS result.

        Raises
        ------
        NotImplementedError
            If the format isn't supported.
        """
        format = convert_format(format)

        if format == "dok":
            return self

        if format == "crs":
            from ._compressed import CRS

            return CRS.from_dok(self)

        if format == "ccs":
            from ._compressed import CCS

            return CCS.from_dok(self)

        from ._cvs import CVS

        return CVS.from_dok(self, mode)

    def transpose(self, target=None):
        """
        Write the transpose of this matrix into ``target``. See :obj:`sparsematrix.transpose`.
        """
        from ._common import transpose

        return transpose(self, target)

    @property
    def T(self):
        return self.transpose()

    def matrix_sum(self, other, target=None):
        from ._common import matrix_sum

        return matrix_sum(self, other, target)

    def matrix_difference(self, other, target=None):
        from ._common import matrix_difference

        return matrix_difference(self, other, target)

    def matrix_scalar_product(self, scalar, target=None):
        from ._common import matrix_scalar_product

        return matrix_scalar_product(self, scalar, target)

    def matrix_scalar_product_inplace(self, scalar):
        from ._common import matrix_scalar_product

        return matrix_scalar_product(self, scalar, self)

    def matrix_vector_product(self, vector):
        from ._common import matrix_vector_product

        return matrix_vector_product(self, vector)

    def matrix_product(self, other, target=None):
        from ._common import matrix_product

        return matrix_product(self, other, target)
