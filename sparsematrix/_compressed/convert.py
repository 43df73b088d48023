import numba

import numpy as np


@numba.jit(nopython=True, nogil=True)
def fill_pointer(major, nlines):  # pragma: no cover
    """
    Scan sorted major indices and build the pointer array, emitting a fill-in
    entry for every line that holds no values.

    Returns the pointer array and the number of pointer slots the scan
    produced; for in-range input that number is ``nlines + 1``.
    """
    indptr = np.zeros(nlines + 1, dtype=np.intp)
    pos = 0
    line = -1
    count = 0
    for k in range(major.shape[0]):
        m = major[k]
        while line < m:
            if pos < indptr.shape[0]:
                indptr[pos] = count
            pos += 1
            line += 1
        count += 1
    while line < nlines:
        if pos < indptr.shape[0]:
            indptr[pos] = count
        pos += 1
        line += 1
    return indptr, pos


@numba.jit(nopython=True, nogil=True)
def uncompress_dimension(indptr):  # pragma: no cover
    """converts an index pointer array into an array of coordinates"""
    uncompressed = np.empty(indptr[-1], dtype=np.intp)
    for i in range(len(indptr) - 1):
        uncompressed[indptr[i] : indptr[i + 1]] = i
    return uncompressed


@numba.jit(nopython=True, nogil=True)
def crs_matvec(data, indptr, indices, vector, out):  # pragma: no cover
    for j in range(indptr.shape[0] - 1):
        for i in range(indptr[j], indptr[j + 1]):
            out[j] += data[i] * vector[indices[i]]
    return out


@numba.jit(nopython=True, nogil=True)
def ccs_matvec(data, indptr, indices, vector, out):  # pragma: no cover
    for j in range(indptr.shape[0] - 1):
        v = vector[j]
        for i in range(indptr[j], indptr[j + 1]):
            out[indices[i]] += data[i] * v
    return out


def select_kernel(kernel, *arrays):
    """
    Return the compiled kernel, or its pure-Python body when an operand's
    dtype is one numba cannot compile (object and boolean arrays).
    """
    if any(a.dtype.kind in "Ob" for a in arrays):
        return kernel.py_func
    return kernel
