# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import numpy as np
import qics.quantum


def _as_list(sys):
    if isinstance(sys, (int, np.integer)):
        return [int(sys)]
    return sorted(set(int(k) for k in sys))


def p_tr(mat, dims, sys):
    """Partial trace of ``mat``, defined on subsystems of dimensions
    ``dims``, over one or several subsystems ``sys`` using
    :func:`qics.quantum.p_tr`. The remaining subsystems keep their order.
    An empty ``sys`` returns ``mat`` unchanged.
    """
    sys = _as_list(sys)
    if len(sys) == 0:
        return mat
    return qics.quantum.p_tr(mat, [int(d) for d in dims], sys)


def partial_transpose(mat, dims, sys):
    """Partial transpose of ``mat`` on one or several subsystems ``sys``.
    Transposing every subsystem is the full transpose.
    """
    dims = [int(d) for d in dims]
    for k in _as_list(sys):
        mat = qics.quantum.partial_transpose(mat, dims, k)
    return mat


def ketbra(psi):
    """Returns the outer product :math:`|\\psi\\rangle\\langle\\psi|` of a
    ket given as a 1D array.
    """
    psi = np.asarray(psi).ravel()
    return np.outer(psi, psi.conj())


def max_entangled(d, normalized=True, dtype=np.float64):
    r"""Returns the maximally entangled ket

    .. math::

        | \psi^+ \rangle = \frac{1}{\sqrt{d}} \sum_{i=0}^{d-1} | ii \rangle

    of two systems of dimension ``d``. With ``normalized=False`` the
    :math:`1/\sqrt{d}` factor is omitted.
    """
    psi = np.zeros(d * d, dtype=dtype)
    psi[:: d + 1] = 1.0
    if normalized:
        psi /= np.sqrt(d)
    return psi
