# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import numpy as np

from qsep._utils.linalg import check_dims, equal_sizes
from qsep.quantum.entropy import entropy
from qsep.quantum.operator import ketbra, p_tr


def _bipartite_dims(psi, dims):
    if dims is None:
        dims = equal_sizes(psi)
    return check_dims(dims, psi.size)


def schmidt_decomposition(psi, dims=None):
    r"""Computes the Schmidt decomposition

    .. math::

        |\psi\rangle = \sum_i \lambda_i |u_i\rangle \otimes |v_i\rangle

    of a bipartite pure state.

    Parameters
    ----------
    psi : :class:`~numpy.ndarray`
        Ket of size ``(dA*dB,)``, where the first subsystem is the slowest
        varying index.
    dims : :obj:`tuple` of :obj:`int`, optional
        The dimensions ``(dA, dB)`` of the two subsystems. The default is
        ``None``, which assumes equally-sized subsystems.

    Returns
    -------
    :class:`~numpy.ndarray`
        Schmidt coefficients :math:`\lambda_i`, sorted in descending order.
    :class:`~numpy.ndarray`
        Isometry :math:`U` of size ``(dA, r)`` whose columns are the
        :math:`|u_i\rangle`.
    :class:`~numpy.ndarray`
        Isometry :math:`V` of size ``(dB, r)`` whose columns are the
        :math:`|v_i\rangle`, so that ``kron(U, V).conj().T @ psi`` is of
        Schmidt form.
    """
    psi = np.asarray(psi).ravel()
    dims = _bipartite_dims(psi, dims)

    U, coeffs, Vh = np.linalg.svd(psi.reshape(dims[0], dims[1]),
                                  full_matrices=False)
    # Conjugate, not adjoint, of the right singular vectors
    return coeffs, U, Vh.T


def pure_entanglement_entropy(psi, dims=None):
    """Computes the entanglement entropy (in bits) of a bipartite pure state
    ``psi``, i.e., the entropy of its reduced state. The larger subsystem
    is the one traced out.
    """
    psi = np.asarray(psi).ravel()
    dims = _bipartite_dims(psi, dims)

    max_sys = int(np.argmax(dims))
    rho = p_tr(ketbra(psi), dims, max_sys)
    return entropy(rho)
