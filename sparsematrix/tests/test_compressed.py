import pytest
from hypothesis import given

import numpy as np
import scipy.sparse

import sparsematrix
from sparsematrix import (
    CCS,
    CRS,
    DOK,
    CompressionInvariantViolation,
    SizeMismatch,
    compress_to_ccs,
    compress_to_crs,
    decompress,
)
from sparsematrix._compressed import convert
from sparsematrix._utils import assert_eq
from sparsematrix.tests._utils import gen_dok


@pytest.fixture(scope="module", params=[CRS, CCS])
def cls(request):
    return request.param


@pytest.fixture(scope="module", params=["f8", "f4", "i8", "i4"])
def dtype(request):
    return request.param


@pytest.fixture(scope="module")
def random_sparse(cls, dtype, rng):
    if np.issubdtype(dtype, np.integer):

        def data_rvs(n):
            return rng.integers(1, 1000, n)

    else:
        data_rvs = None
    s = sparsematrix.random((20, 30), density=0.25, data_rvs=data_rvs, dtype=dtype, random_state=rng)
    return cls.from_dok(s)


def test_permutation_crs(permutation):
    x = compress_to_crs(permutation)

    assert x.data.tolist() == [1, 1, 1, 1, 1]
    assert x.row_pointer.tolist() == [0, 1, 2, 3, 4, 5]
    assert x.column_index.tolist() == [1, 2, 3, 4, 0]


def test_permutation_ccs(permutation):
    x = compress_to_ccs(permutation)

    assert x.data.tolist() == [1, 1, 1, 1, 1]
    assert x.column_pointer.tolist() == [0, 1, 2, 3, 4, 5]
    assert x.row_index.tolist() == [4, 0, 1, 2, 3]


@pytest.mark.parametrize("cls", [CRS, CCS])
def test_permutation_vector_product(permutation, cls):
    x = cls.from_dok(permutation)

    assert x.matrix_vector_product([2, 0, 5, 0, 1]).tolist() == [0, 5, 0, 1, 2]


def test_empty_lines_fill_in():
    s = DOK((6, 4), {(2, 1): 3.0, (2, 3): 4.0, (4, 0): 5.0})

    x = CRS.from_dok(s)
    assert x.indptr.tolist() == [0, 0, 0, 2, 2, 3, 3]
    assert x.indices.tolist() == [1, 3, 0]

    y = CCS.from_dok(s)
    assert y.indptr.tolist() == [0, 1, 2, 2, 3]
    assert y.indices.tolist() == [4, 2, 2]


@pytest.mark.parametrize("shape", [(0, 0), (0, 3), (3, 0), (4, 5)])
def test_empty(cls, shape):
    x = cls.from_dok(DOK(shape))

    assert x.nnz == 0
    assert x.indptr.tolist() == [0] * (shape[x._major_axis] + 1)
    assert x.todense().shape == shape


@given(gen_dok())
def test_round_trip(s):
    for cls in (CRS, CCS):
        x = cls.from_dok(s)

        assert x.indptr[-1] == x.nnz == s.nnz
        assert np.all(np.diff(x.indptr) >= 0)

        target = s.empty_like()
        decompress(x, target)
        assert sorted(target.items()) == sorted(s.items())


@given(gen_dok())
def test_sorted_within_lines(s):
    for cls in (CRS, CCS):
        x = cls.from_dok(s)
        for i in range(len(x.indptr) - 1):
            line = x.indices[x.indptr[i] : x.indptr[i + 1]]
            assert np.all(np.diff(line) > 0)


def test_todense(random_sparse):
    s = random_sparse.todok()

    assert_eq(random_sparse, s)
    assert_eq(random_sparse.todense(), s.todense())


def test_todense_defaults():
    s = DOK((2, 3), {(0, 2): 4}, fill_value=-1, diagonal=1)
    x = CRS.from_dok(s)

    assert x.todense().tolist() == [[1, -1, 4], [-1, 1, -1]]
    assert decompress(x, fill_value=0, diagonal=0).tolist() == [[0, 0, 4], [0, 0, 0]]


def test_decompress_into_dense(cls):
    x = cls.from_dok(DOK((2, 2), {(1, 0): 3}))
    buffer = np.ones((2, 2), dtype=np.int64)

    result = decompress(x, buffer)

    assert result is buffer
    assert buffer.tolist() == [[0, 0], [3, 0]]


def test_decompress_size_mismatch(cls):
    x = cls.from_dok(DOK((2, 3)))

    with pytest.raises(SizeMismatch):
        x.decompress(DOK((3, 2)))

    with pytest.raises(SizeMismatch):
        decompress(x, np.zeros((3, 2)))


def test_decompress_into_linear_store(cls, permutation):
    x = cls.from_dok(permutation)
    target = DOK((5, 5), dtype=x.dtype, keys="linear", mode="column")

    x.decompress(target)

    assert sorted(target.keys()) == [4, 5, 11, 17, 23]


def test_vector_product(random_sparse, rng):
    vector = rng.random(random_sparse.shape[1])

    np.testing.assert_allclose(random_sparse.matrix_vector_product(vector), random_sparse.todense() @ vector)


def test_vector_product_size_mismatch(cls):
    x = cls.from_dok(DOK((2, 3)))

    with pytest.raises(SizeMismatch):
        x.matrix_vector_product([1, 2])


def test_vector_product_object_dtype(cls):
    from fractions import Fraction

    s = DOK((2, 2), {(0, 1): Fraction(1, 2), (1, 0): Fraction(1, 3)}, dtype=object)
    x = cls.from_dok(s)

    assert x.matrix_vector_product(np.array([Fraction(3), Fraction(2)], dtype=object)).tolist() == [1, 1]


@pytest.mark.parametrize("scalar", [0, 3])
def test_scalar_product(random_sparse, scalar):
    result = random_sparse.matrix_scalar_product(scalar)

    assert type(result) is type(random_sparse)
    assert_eq(result, random_sparse.todense() * scalar, check_nnz=False, compare_dtype=False)
    if scalar == 0:
        assert result.nnz == 0


def test_scalar_product_result_defaults(cls):
    x = cls.from_dok(DOK((2, 2), {(0, 1): 3}, fill_value=1, diagonal=2))

    result = x.matrix_scalar_product(2)

    assert result.fill_value == 0
    assert result.diagonal == 0
    assert result.todense().tolist() == [[0, 6], [0, 0]]


def test_transpose(random_sparse):
    t = random_sparse.T

    assert type(t) is {CRS: CCS, CCS: CRS}[type(random_sparse)]
    assert_eq(t, random_sparse.todense().T)
    assert_eq(t.T, random_sparse)


@given(gen_dok())
def test_transpose_involution(s):
    x = CRS.from_dok(s)
    y = CRS.from_dok(x.transpose().todok().transpose())

    assert_eq(x, y)
    np.testing.assert_array_equal(x.indptr, y.indptr)
    np.testing.assert_array_equal(x.indices, y.indices)


def test_invariant_violation(monkeypatch):
    def bad_fill_pointer(major, nlines):
        indptr, pos = convert.fill_pointer(major, nlines)
        indptr[-1] += 1
        return indptr, pos

    monkeypatch.setattr("sparsematrix._compressed.compressed.fill_pointer", bad_fill_pointer)

    with pytest.raises(CompressionInvariantViolation):
        CRS.from_dok(DOK((2, 2), {(0, 0): 1}))


def test_fill_pointer_reports_slots():
    indptr, pos = convert.fill_pointer(np.array([0, 2, 2], dtype=np.intp), 3)

    assert indptr.tolist() == [0, 1, 1, 3]
    assert pos == 4


def test_uncompress_dimension():
    result = convert.uncompress_dimension(np.array([0, 1, 1, 3], dtype=np.intp))

    assert result.tolist() == [0, 2, 2]


@pytest.mark.parametrize("bad", [([1, 2], [0], [0, 2]), ([1], [0], [0, 0]), ([1], [0], [0, 1, 1])])
def test_bad_constructor_input(bad):
    with pytest.raises(ValueError):
        CRS(bad, shape=(1, 2))


@pytest.mark.parametrize("scipy_type", ["coo", "csr", "csc", "lil"])
def test_from_scipy_sparse(cls, scipy_type, dtype):
    orig = scipy.sparse.random(20, 30, density=0.2, format=scipy_type, dtype=dtype, random_state=0)
    result = cls.from_scipy_sparse(orig)

    assert_eq(result, orig.toarray())
    assert result.nnz == orig.nnz


def test_to_scipy_sparse(random_sparse):
    x = random_sparse.to_scipy_sparse()

    assert x.format == {CRS: "csr", CCS: "csc"}[type(random_sparse)]
    assert_eq(random_sparse, x.toarray())
    assert x.nnz == random_sparse.nnz


def test_repr(random_sparse):
    cls = type(random_sparse).__name__

    str_repr = repr(random_sparse)
    assert cls in str_repr
    assert f"nnz={random_sparse.nnz}" in str_repr


def test_warn_on_too_dense(monkeypatch):
    from sparsematrix import _settings

    monkeypatch.setattr(_settings, "WARN_ON_TOO_DENSE", True)
    s = DOK(np.ones((3, 3)))

    with pytest.warns(RuntimeWarning, match="dense"):
        CRS.from_dok(s)


def test_parallel_decompress(parallel, cls):
    s = sparsematrix.random((30, 30), density=0.3, random_state=5)
    target = s.empty_like()

    cls.from_dok(s).decompress(target)

    assert sorted(target.items()) == sorted(s.items())
