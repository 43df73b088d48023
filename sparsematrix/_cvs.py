import numpy as np

from ._coordinates import MajorOrder, to_coordinates, to_linear_index, transpose_linear_index
from ._dense import create_dense_buffer
from ._exceptions import ModeMismatch
from ._parallel import parallel_for_each
from ._utils import _zero_of_dtype, check_shape, check_size, check_vector, is_zero


class CVS:
    """
    Compressed Value Storage.

    Every distinct stored value is kept once, paired with the sorted linear
    indices of the cells holding it. Linear indices are interpreted under the
    matrix's major order, which can be changed in place.

    Parameters
    ----------
    values : array_like
        The distinct values.
    linear_indices : list[array_like]
        For each value, the linear indices where it occurs. The lists must
        be pairwise disjoint.
    shape : tuple[int, int]
        The ``(rows, columns)`` of the matrix.
    mode : MajorOrder, optional
        The major order of the linear indices.
    dtype : np.dtype, optional
        The dtype of ``values``.
    fill_value, diagonal : scalar, optional
        The values unstored cells stand for.

    Examples
    --------
    >>> from sparsematrix import DOK
    >>> s = DOK((3, 3), {(0, 1): 2, (1, 2): 5, (2, 0): 2})
    >>> x = CVS.from_dok(s)
    >>> x.values.tolist(), [ix.tolist() for ix in x.linear_indices]
    ([2, 5], [[1, 6], [5]])
    >>> x.set_mode("column")
    >>> [ix.tolist() for ix in x.linear_indices]
    [[2, 3], [7]]
    """

    def __init__(
        self,
        values,
        linear_indices,
        shape,
        mode=MajorOrder.ROW,
        dtype=None,
        fill_value=None,
        diagonal=None,
    ):
        self.shape = check_shape(shape)
        self.mode = MajorOrder.parse(mode)
        self.values = np.asarray(values, dtype=dtype)

        if self.values.ndim != 1:
            raise ValueError("values must be 1-dimensional.")

        if len(linear_indices) != len(self.values):
            raise ValueError(
                f"expected one index list per value, got {len(linear_indices)} lists for {len(self.values)} values"
            )

        self.linear_indices = [np.sort(np.asarray(ix, dtype=np.intp)) for ix in linear_indices]

        flat = self._flat_indices()
        if flat.size:
            if flat.min() < 0 or flat.max() >= self.shape[0] * self.shape[1]:
                raise ValueError(f"linear indices must lie in [0, {self.shape[0] * self.shape[1]}).")
            if len(np.unique(flat)) != len(flat):
                raise ValueError("linear index lists must be pairwise disjoint.")

        self.fill_value = _zero_of_dtype(self.dtype) if fill_value is None else self.dtype.type(fill_value)
        self.diagonal = self.fill_value if diagonal is None else self.dtype.type(diagonal)

    @classmethod
    def from_dok(cls, x, mode=None):
        """
        Compress a :obj:`DOK` matrix.

        Values are kept in the order they first occur in the store.

        Parameters
        ----------
        x : DOK
        mode : MajorOrder, optional
            The major order of the result. Defaults to the store's own for a
            linear-indexed store, else row-major.
        """
        if mode is None:
            mode = x.mode if x.is_linear_indexed else MajorOrder.ROW
        mode = MajorOrder.parse(mode)

        rows, columns, data = x.entries()
        if len(data) == 0:
            return cls([], [], x.shape, mode, dtype=x.dtype, fill_value=x.fill_value, diagonal=x.diagonal)

        linear = to_linear_index(x.shape, rows, columns, mode)

        _, first, inverse = np.unique(data, return_index=True, return_inverse=True)
        inverse = inverse.reshape(-1)
        # rank the distinct values by first occurrence
        rank = np.empty(len(first), dtype=np.intp)
        rank[np.argsort(first, kind="stable")] = np.arange(len(first))
        group = rank[inverse]

        order = np.lexsort((linear, group))
        counts = np.bincount(group, minlength=len(first))
        linear_indices = np.split(linear[order], np.cumsum(counts)[:-1])

        return cls(
            data[np.sort(first)],
            linear_indices,
            x.shape,
            mode,
            dtype=x.dtype,
            fill_value=x.fill_value,
            diagonal=x.diagonal,
        )

    @property
    def dtype(self):
        return self.values.dtype

    @property
    def nnz(self):
        return sum(len(ix) for ix in self.linear_indices)

    @property
    def ndim(self):
        return 2

    @property
    def format(self):
        return "cvs"

    def __str__(self):
        return "<CVS: shape={!s}, dtype={!s}, nnz={:d}, values={:d}, mode={}>".format(
            self.shape, self.dtype, self.nnz, len(self.values), self.mode.value
        )

    __repr__ = __str__

    def _flat_indices(self):
        if not self.linear_indices:
            return np.empty(0, dtype=np.intp)
        return np.concatenate(self.linear_indices)

    def _entries(self):
        counts = [len(ix) for ix in self.linear_indices]
        data = np.repeat(self.values, counts)
        rows, columns = to_coordinates(self.shape, self._flat_indices(), self.mode)
        return rows, columns, data

    def copy(self):
        return CVS(
            self.values.copy(),
            [ix.copy() for ix in self.linear_indices],
            self.shape,
            self.mode,
            fill_value=self.fill_value,
            diagonal=self.diagonal,
        )

    def set_mode(self, mode):
        """
        Re-encode every linear index under ``mode``, in place.

        Does nothing if the matrix is already in ``mode``.
        """
        mode = MajorOrder.parse(mode)
        if mode is self.mode:
            return

        old, shape, indices = self.mode, self.shape, self.linear_indices

        def _reindex(i):
            rows, columns = to_coordinates(shape, indices[i], old)
            indices[i] = np.sort(to_linear_index(shape, rows, columns, mode))

        parallel_for_each(_reindex, range(len(indices)))
        self.mode = mode

    def transpose_inplace(self):
        """Transpose this matrix in place, swapping its shape."""
        shape, mode, indices = self.shape, self.mode, self.linear_indices

        def _transpose_list(i):
            _, transposed = transpose_linear_index(shape, indices[i], mode)
            indices[i] = np.sort(transposed)

        parallel_for_each(_transpose_list, range(len(indices)))
        self.shape = shape[::-1]

    def transpose(self):
        """
        A transposed copy of this matrix.

        Examples
        --------
        >>> x = CVS([3], [[1]], (2, 3))
        >>> x.transpose().todense().tolist()
        [[0, 0], [3, 0], [0, 0]]
        """
        ar = self.copy()
        ar.transpose_inplace()
        return ar

    @property
    def T(self):
        return self.transpose()

    def _to_dok(self):
        from ._dok import DOK

        ar = DOK(
            self.shape,
            dtype=self.dtype,
            fill_value=self.fill_value,
            diagonal=self.diagonal,
            keys="linear",
            mode=self.mode,
        )
        for value, ix in zip(self.values, self.linear_indices):
            for i in ix.tolist():
                ar.data[i] = value
        return ar

    def todok(self, keys="linear", mode=None):
        from ._dok import DOK

        target = DOK(
            self.shape,
            dtype=self.dtype,
            fill_value=self.fill_value,
            diagonal=self.diagonal,
            keys=keys,
            mode=self.mode if mode is None else mode,
        )
        return self.decompress(target)

    def decompress(self, target):
        """
        Write every stored value into a :obj:`DOK` store of the same shape.

        Raises
        ------
        SizeMismatch
            If ``target`` has a different shape.
        ModeMismatch
            If ``target`` is linear-indexed under a different major order.
        """
        check_size(self.shape, target.shape)
        if target.is_linear_indexed and target.mode is not self.mode:
            raise ModeMismatch(self.mode, target.mode)

        shape, mode = self.shape, self.mode

        def _decompress_slot(slot):
            value, ix = slot
            if target.is_linear_indexed:
                keys = ix.tolist()
            else:
                rows, columns = to_coordinates(shape, ix, mode)
                keys = list(zip(rows.tolist(), columns.tolist()))
            for key in keys:
                target.set(key, value)

        parallel_for_each(_decompress_slot, list(zip(self.values, self.linear_indices)))
        return target

    def todense(self, fill_value=None, diagonal=None):
        fill_value = self.fill_value if fill_value is None else fill_value
        diagonal = self.diagonal if diagonal is None else diagonal
        result = create_dense_buffer(self.shape, fill_value, diagonal, dtype=self.dtype)

        rows, columns, data = self._entries()
        result[rows, columns] = data
        return result

    def matrix_sum(self, other):
        """
        A new matrix holding ``self + other``, in this matrix's major order.

        Raises
        ------
        SizeMismatch
            If the shapes differ.
        """
        from ._common import matrix_sum

        check_size(self.shape, other.shape)
        return CVS.from_dok(matrix_sum(self._to_dok(), other._to_dok()), self.mode)

    def matrix_difference(self, other):
        """A new matrix holding ``self - other``. See :obj:`CVS.matrix_sum`."""
        from ._common import matrix_difference

        check_size(self.shape, other.shape)
        return CVS.from_dok(matrix_difference(self._to_dok(), other._to_dok()), self.mode)

    def _keep_nonzero(self, values, linear_indices):
        keep = ~(values == _zero_of_dtype(values.dtype))
        return values[keep], [ix for ix, k in zip(linear_indices, keep.tolist()) if k]

    def matrix_scalar_product(self, scalar):
        """
        A new matrix with every value multiplied by ``scalar``.

        Equal products are not merged into one value. Values whose product is
        zero are dropped, so a zero ``scalar`` gives a matrix with no stored
        values. Like every arithmetic result, the new matrix has zero fill and
        diagonal values.
        """
        if is_zero(scalar):
            return CVS([], [], self.shape, self.mode, dtype=np.result_type(self.dtype, scalar))

        values, linear_indices = self._keep_nonzero(
            np.asarray(self.values * scalar), [ix.copy() for ix in self.linear_indices]
        )
        return CVS(values, linear_indices, self.shape, self.mode, dtype=values.dtype)

    def matrix_scalar_product_inplace(self, scalar):
        """
        Multiply every value by ``scalar`` in place, keeping the dtype.

        Values that become zero in this dtype are dropped with their indices.
        """
        if is_zero(scalar):
            self.values = np.empty(0, dtype=self.dtype)
            self.linear_indices = []
            return

        values = np.asarray(self.values * scalar).astype(self.dtype)
        self.values, self.linear_indices = self._keep_nonzero(values, self.linear_indices)

    def matrix_vector_product(self, vector):
        """
        Multiply this matrix by a dense vector.

        Raises
        ------
        SizeMismatch
            If ``vector`` does not have one entry per column.
        """
        vector = check_vector(self.shape, vector)
        out = np.zeros(self.shape[0], dtype=np.result_type(self.dtype, vector.dtype))
        for value, ix in zip(self.values, self.linear_indices):
            rows, columns = to_coordinates(self.shape, ix, self.mode)
            np.add.at(out, rows, value * vector[columns])
        return out

    def matrix_product(self, other):
        """
        A new matrix holding ``self @ other``, in this matrix's major order.

        Raises
        ------
        SizeMismatch
            If the columns of ``self`` differ from the rows of ``other``.
        """
        from ._common import matrix_product

        return CVS.from_dok(matrix_product(self._to_dok(), other._to_dok()), self.mode)
