# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import numpy as np
import qics.vectorize
from qics.vectorize import eye, get_full_to_compact_op, lin_to_mat  # noqa
from qics.vectorize import mat_dim, vec_dim  # noqa

from qsep._utils.linalg import rtol


def mat_to_vec(mat, iscomplex=None, compact=False):
    r"""Reshapes a symmetric or Hermitian matrix into a real column vector
    using :func:`qics.vectorize.mat_to_vec`.

    The compact representation scales off-diagonal entries by
    :math:`\sqrt{2}` so that :math:`\langle \text{vec}(X), \text{vec}(Y)
    \rangle = \text{tr}[XY]`. The full representation is the layout the
    cones of :mod:`qics` act on.

    Parameters
    ----------
    mat : :class:`~numpy.ndarray`
        Symmetric or Hermitian matrix to vectorize. Scalars are treated as
        ``(1, 1)`` matrices.
    iscomplex : :obj:`bool`, optional
        Whether to vectorize as a Hermitian (``True``) or symmetric
        (``False``) matrix. The default is ``None``, which infers this from
        the dtype of ``mat``.
    compact : :obj:`bool`, optional
        Whether to convert to a compact vector representation or not. The
        default is ``False``.

    Returns
    -------
    :class:`~numpy.ndarray`
        Column vector of type :obj:`~numpy.float64`.

    Raises
    ------
    ValueError
        If ``iscomplex=False`` but ``mat`` has a nonzero imaginary part.
    """
    mat = np.atleast_2d(mat)
    if iscomplex is None:
        iscomplex = np.iscomplexobj(mat)

    if iscomplex:
        mat = mat.astype(np.complex128)
    else:
        if np.iscomplexobj(mat):
            if not np.allclose(mat.imag, 0.0, atol=rtol(mat.dtype)):
                raise ValueError(
                    "Matrix has a nonzero imaginary part but is vectorized as "
                    "a real symmetric matrix."
                )
            mat = mat.real
        mat = mat.astype(np.float64)

    return qics.vectorize.mat_to_vec(np.ascontiguousarray(mat), compact=compact)


def vec_to_mat(vec, iscomplex=False, compact=False):
    """Inverse of :func:`mat_to_vec`, accepting flat or column vectors."""
    vec = np.asarray(vec, dtype=np.float64).reshape(-1, 1)
    return qics.vectorize.vec_to_mat(vec, iscomplex=iscomplex, compact=compact)
