# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import itertools

import numpy as np
import scipy as sp


def sym_dim(d, n):
    """Dimension ``binomial(n + d - 1, n)`` of the symmetric subspace of
    ``n`` copies of a ``d``-dimensional space.
    """
    return int(sp.special.comb(n + d - 1, n, exact=True))


def symmetric_projection(d, n, partial=True):
    r"""Builds the isometry from the symmetric subspace of
    :math:`(\mathbb{C}^d)^{\otimes n}` into the full tensor power space.

    Each column corresponds to a multiset :math:`\{i_1, \ldots, i_n\}` of
    basis labels (in lexicographic order) and is the normalized sum of
    :math:`|j_1 \ldots j_n\rangle` over all distinct orderings
    :math:`(j_1, \ldots, j_n)` of the multiset.

    Parameters
    ----------
    d : :obj:`int`
        Local dimension.
    n : :obj:`int`
        Number of copies.
    partial : :obj:`bool`, optional
        Whether to return the ``(d**n, sym_dim(d, n))`` isometry
        (``True``) or the ``(d**n, d**n)`` orthogonal projector onto the
        symmetric subspace (``False``). The default is ``True``.

    Returns
    -------
    :class:`~numpy.ndarray`
        The isometry :math:`P` satisfying :math:`P^\top P = \mathbb{I}`, or
        the projector :math:`PP^\top`.
    """
    if d < 1 or n < 1:
        raise ValueError("Dimension and number of copies must be positive.")

    multisets = itertools.combinations_with_replacement(range(d), n)
    col = {labels: k for (k, labels) in enumerate(multisets)}

    P = np.zeros((d**n, len(col)))
    for row, labels in enumerate(itertools.product(range(d), repeat=n)):
        P[row, col[tuple(sorted(labels))]] = 1.0
    P /= np.sqrt(P.sum(axis=0))

    return P if partial else P @ P.T


def permute_systems(psi, dims, perm):
    """Reorders the tensor factors of a ket ``psi`` defined on subsystems
    of dimensions ``dims``, so that factor ``perm[k]`` of the input becomes
    factor ``k`` of the output.
    """
    psi = np.asarray(psi)
    return psi.reshape(*dims).transpose(perm).ravel()
