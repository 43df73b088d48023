import numpy as np
import scipy.sparse

from .._coordinates import MajorOrder, to_linear_index
from .._dense import create_dense_buffer
from .._exceptions import CompressionInvariantViolation
from .._parallel import parallel_for_each
from .._utils import _zero_of_dtype, check_shape, check_size, check_vector, is_zero, warn_if_too_dense
from .convert import ccs_matvec, crs_matvec, fill_pointer, select_kernel, uncompress_dimension


class _Compressed:
    """
    Shared machinery for the pointer-array formats.

    A compressed matrix consists of 3 arrays: ``data`` holds the stored
    values, ``indices`` the minor-axis coordinate of every value, and
    ``indptr`` the cumulative count of values per major-axis line, so that
    line ``i`` occupies ``data[indptr[i]:indptr[i + 1]]``. Lines without
    values have equal adjacent pointers.

    Subclasses pick the major axis through ``mode``.
    """

    mode = None

    def __init__(self, arg, shape, fill_value=None, diagonal=None):
        shape = check_shape(shape)
        data, indices, indptr = arg
        self.data = np.asarray(data)
        self.indices = np.asarray(indices, dtype=np.intp)
        self.indptr = np.asarray(indptr, dtype=np.intp)

        if self.data.ndim != 1:
            raise ValueError("data must be 1-dimensional.")

        if len(self.indptr) != shape[self._major_axis] + 1:
            raise ValueError(
                f"indptr must have {shape[self._major_axis] + 1} entries for shape {shape}, got {len(self.indptr)}"
            )

        if not (len(self.data) == len(self.indices) == self.indptr[-1]):
            raise ValueError("data, indices and indptr[-1] must all equal the number of stored values.")

        self.shape = shape
        self.fill_value = _zero_of_dtype(self.dtype) if fill_value is None else self.dtype.type(fill_value)
        self.diagonal = self.fill_value if diagonal is None else self.dtype.type(diagonal)

    @property
    def _major_axis(self):
        return 0 if self.mode is MajorOrder.ROW else 1

    @property
    def dtype(self):
        return self.data.dtype

    @property
    def nnz(self):
        return len(self.data)

    @property
    def nbytes(self):
        return self.data.nbytes + self.indices.nbytes + self.indptr.nbytes

    @property
    def ndim(self):
        return 2

    @property
    def format(self):
        return type(self).__name__.lower()

    def __str__(self):
        return "<{}: shape={!s}, dtype={!s}, nnz={:d}, fill_value={!s}>".format(
            type(self).__name__, self.shape, self.dtype, self.nnz, self.fill_value
        )

    __repr__ = __str__

    @classmethod
    def from_dok(cls, x):
        """
        Compress a :obj:`DOK` matrix.

        Entries are ordered by their linear index in this format's major
        order, then scanned once to emit values, minor indices and pointer
        fill-in for empty lines.

        Raises
        ------
        CompressionInvariantViolation
            If the pointer array does not account for every stored value.
        """
        rows, columns, data = x.entries()
        order = np.argsort(to_linear_index(x.shape, rows, columns, cls.mode), kind="stable")
        rows, columns, data = rows[order], columns[order], data[order]
        if cls.mode is MajorOrder.ROW:
            major, minor = rows, columns
            nlines = x.shape[0]
        else:
            major, minor = columns, rows
            nlines = x.shape[1]

        indptr, filled = fill_pointer(np.ascontiguousarray(major, dtype=np.intp), nlines)
        if filled != nlines + 1 or indptr[-1] != len(data):
            raise CompressionInvariantViolation(
                f"pointer total {indptr[-1]} over {filled} slots does not match "
                f"{len(data)} stored values in {nlines} lines"
            )

        ar = cls((data, minor, indptr), shape=x.shape, fill_value=x.fill_value, diagonal=x.diagonal)
        warn_if_too_dense(ar.nbytes, ar.shape, ar.dtype)
        return ar

    def _line_coordinates(self, line, minor):
        if self.mode is MajorOrder.ROW:
            return line, minor
        return minor, line

    def decompress(self, target):
        """
        Write every stored value into a :obj:`DOK` store of the same shape.

        Lines are written in parallel; distinct lines never share a key.

        Raises
        ------
        SizeMismatch
            If ``target`` has a different shape.
        """
        check_size(self.shape, target.shape)

        data, indices, indptr = self.data, self.indices, self.indptr

        def _decompress_line(line):
            for i in range(indptr[line], indptr[line + 1]):
                row, column = self._line_coordinates(line, int(indices[i]))
                target.set(target.coordinates_to_key(row, column), data[i])

        parallel_for_each(_decompress_line, range(len(indptr) - 1))
        return target

    def todense(self, fill_value=None, diagonal=None):
        """
        Decompress into a dense Numpy array initialized with ``fill_value``
        and ``diagonal``, which default to this matrix's own.
        """
        fill_value = self.fill_value if fill_value is None else fill_value
        diagonal = self.diagonal if diagonal is None else diagonal
        result = create_dense_buffer(self.shape, fill_value, diagonal, dtype=self.dtype)

        major = uncompress_dimension(self.indptr)
        row, column = self._line_coordinates(major, self.indices)
        result[row, column] = self.data
        return result

    def todok(self, keys="coordinates", mode=MajorOrder.ROW):
        from .._dok import DOK

        target = DOK(self.shape, dtype=self.dtype, fill_value=self.fill_value, diagonal=self.diagonal, keys=keys, mode=mode)
        return self.decompress(target)

    def matrix_vector_product(self, vector):
        """
        Multiply this matrix by a dense vector.

        Only stored values contribute; the result has one entry per row.

        Raises
        ------
        SizeMismatch
            If ``vector`` does not have one entry per column.
        """
        vector = check_vector(self.shape, vector)
        out = np.zeros(self.shape[0], dtype=np.result_type(self.dtype, vector.dtype))
        kernel = select_kernel(self._matvec_kernel, self.data, vector, out)
        return kernel(self.data, self.indptr, self.indices, vector, out)

    def matrix_scalar_product(self, scalar):
        """
        A new matrix with every stored value multiplied by ``scalar``. A zero
        ``scalar`` gives a matrix with no stored values. Like every arithmetic
        result, the new matrix has zero fill and diagonal values.
        """
        if is_zero(scalar):
            data = np.empty(0, dtype=np.result_type(self.dtype, scalar))
            indptr = np.zeros_like(self.indptr)
            return type(self)((data, data.astype(np.intp), indptr), shape=self.shape)

        return type(self)(
            (self.data * scalar, self.indices.copy(), self.indptr.copy()),
            shape=self.shape,
        )

    def _transposed(self, cls):
        return cls(
            (self.data.copy(), self.indices.copy(), self.indptr.copy()),
            shape=self.shape[::-1],
            fill_value=self.fill_value,
            diagonal=self.diagonal,
        )


class CRS(_Compressed):
    """
    Compressed Row Storage.

    Rows are the major axis: ``indptr`` has ``rows + 1`` entries and
    ``indices`` holds column coordinates, increasing within each row.

    Parameters
    ----------
    arg : tuple (data, indices, indptr)
        The stored values, their column indices and the row pointer.
    shape : tuple[int, int]
        The ``(rows, columns)`` of the matrix.
    fill_value, diagonal : scalar, optional
        The values absent entries stand for.

    Examples
    --------
    >>> from sparsematrix import DOK
    >>> s = DOK((3, 4), {(0, 1): 5, (2, 0): 7, (2, 3): 1})
    >>> x = CRS.from_dok(s)
    >>> x.data.tolist(), x.indptr.tolist(), x.indices.tolist()
    ([5, 7, 1], [0, 1, 1, 3], [1, 0, 3])
    """

    mode = MajorOrder.ROW

    @property
    def row_pointer(self):
        return self.indptr

    @property
    def column_index(self):
        return self.indices

    _matvec_kernel = staticmethod(crs_matvec)

    @classmethod
    def from_scipy_sparse(cls, x):
        """Create a :obj:`CRS` matrix from any :obj:`scipy.sparse` matrix or array."""
        x = scipy.sparse.csr_matrix(x, copy=True)
        x.sum_duplicates()
        return cls((x.data, x.indices, x.indptr), shape=x.shape)

    def to_scipy_sparse(self):
        return scipy.sparse.csr_matrix((self.data, self.indices, self.indptr), shape=self.shape)

    def transpose(self):
        """
        The transpose, as a :obj:`CCS` sharing this matrix's layout.

        Row ``i`` of this matrix is column ``i`` of its transpose, so the
        arrays are reused unchanged.
        """
        return self._transposed(CCS)

    @property
    def T(self):
        return self.transpose()


class CCS(_Compressed):
    """
    Compressed Column Storage.

    Columns are the major axis: ``indptr`` has ``columns + 1`` entries and
    ``indices`` holds row coordinates, increasing within each column.

    Parameters
    ----------
    arg : tuple (data, indices, indptr)
        The stored values, their row indices and the column pointer.
    shape : tuple[int, int]
        The ``(rows, columns)`` of the matrix.
    fill_value, diagonal : scalar, optional
        The values absent entries stand for.

    Examples
    --------
    >>> from sparsematrix import DOK
    >>> s = DOK((3, 4), {(0, 1): 5, (2, 0): 7, (2, 3): 1})
    >>> x = CCS.from_dok(s)
    >>> x.data.tolist(), x.indptr.tolist(), x.indices.tolist()
    ([7, 5, 1], [0, 1, 2, 2, 3], [2, 0, 2])
    """

    mode = MajorOrder.COLUMN

    @property
    def column_pointer(self):
        return self.indptr

    @property
    def row_index(self):
        return self.indices

    _matvec_kernel = staticmethod(ccs_matvec)

    @classmethod
    def from_scipy_sparse(cls, x):
        """Create a :obj:`CCS` matrix from any :obj:`scipy.sparse` matrix or array."""
        x = scipy.sparse.csc_matrix(x, copy=True)
        x.sum_duplicates()
        return cls((x.data, x.indices, x.indptr), shape=x.shape)

    def to_scipy_sparse(self):
        return scipy.sparse.csc_matrix((self.data, self.indices, self.indptr), shape=self.shape)

    def transpose(self):
        """The transpose, as a :obj:`CRS` sharing this matrix's layout."""
        return self._transposed(CRS)

    @property
    def T(self):
        return self.transpose()
