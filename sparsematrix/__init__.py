from ._version import __version__, __version_tuple__  # noqa: F401

from ._common import (
    compress_to_ccs,
    compress_to_crs,
    compress_to_cvs,
    decompress,
    matrix_difference,
    matrix_product,
    matrix_scalar_product,
    matrix_sum,
    matrix_vector_product,
    transpose,
)
from ._compressed import CCS, CRS
from ._coordinates import (
    MajorOrder,
    check_coordinates,
    to_coordinates,
    to_linear_index,
    transpose_coordinates,
    transpose_linear_index,
)
from ._cvs import CVS
from ._dense import create_dense_buffer, iterate_dense_buffer
from ._dok import DOK
from ._exceptions import CompressionInvariantViolation, CoordinateOutOfBounds, ModeMismatch, SizeMismatch
from ._keys import CoordinatesKeys, LinearIndexKeys
from ._utils import random

__all__ = [
    "CCS",
    "CRS",
    "CVS",
    "DOK",
    "CompressionInvariantViolation",
    "CoordinateOutOfBounds",
    "CoordinatesKeys",
    "LinearIndexKeys",
    "MajorOrder",
    "ModeMismatch",
    "SizeMismatch",
    "check_coordinates",
    "compress_to_ccs",
    "compress_to_crs",
    "compress_to_cvs",
    "create_dense_buffer",
    "decompress",
    "iterate_dense_buffer",
    "matrix_difference",
    "matrix_product",
    "matrix_scalar_product",
    "matrix_sum",
    "matrix_vector_product",
    "random",
    "to_coordinates",
    "to_linear_index",
    "transpose",
    "transpose_coordinates",
    "transpose_linear_index",
]
