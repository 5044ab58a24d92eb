# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import math

import numpy as np


def rtol(dtype=np.float64):
    """Default relative tolerance for a floating point type, i.e., the
    square root of its machine epsilon.
    """
    if not np.issubdtype(dtype, np.inexact):
        dtype = np.float64
    return np.sqrt(np.finfo(dtype).eps)


def is_square(mat):
    return mat.ndim == 2 and mat.shape[0] == mat.shape[1]


def is_hermitian(mat):
    """Checks whether ``mat`` is a symmetric (real) or Hermitian (complex)
    matrix, up to the default relative tolerance of its dtype.
    """
    if not is_square(mat):
        return False
    tol = rtol(mat.dtype)
    return np.allclose(mat, mat.conj().T, rtol=tol, atol=tol)


def equal_sizes(x):
    """Infers the dimensions ``[d, d]`` of a bipartite vector or matrix
    ``x`` whose leading dimension is ``d*d``.
    """
    n = x.shape[0]
    d = math.isqrt(n)
    if d * d != n:
        raise ValueError(
            "Subsystems are not equally-sized, please specify sizes."
        )
    return [d, d]


def check_dims(dims, dim):
    """Checks that ``dims`` is a bipartition ``[dA, dB]`` of a space of
    dimension ``dim``.
    """
    if len(dims) != 2:
        raise ValueError("Two subsystem sizes must be specified.")
    if any(d < 1 for d in dims):
        raise ValueError("Subsystem sizes must be positive.")
    if dims[0] * dims[1] != dim:
        raise ValueError(
            f"Subsystem sizes {list(dims)} do not match dimension {dim}."
        )
    return [int(d) for d in dims]
