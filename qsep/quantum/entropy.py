# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import numpy as np

from qsep._utils.linalg import is_square, rtol
from qsep.quantum.operator import p_tr


def _log(x, base):
    # 0 log 0 = 0 convention, applied elementwise
    x = np.asarray(x, dtype=np.float64)
    out = np.zeros_like(x)
    np.log(x, out=out, where=x > 0)
    return out / np.log(base)


def _check_square(x, name):
    if not is_square(x):
        raise ValueError(f"{name} must be square.")


def entropy(x, base=2):
    r"""Computes either the classical (Shannon) entropy

    .. math::

        H(x) = -\sum_{i=1}^n x_i \log(x_i),

    for nonnegative vector :math:`x`, or the quantum (von Neumann) entropy

    .. math::

        S(X) = -\text{tr}[X \log(X)],

    for positive semidefinite matrix :math:`X`.

    Parameters
    ----------
    x : :class:`~numpy.ndarray`
        If this is a nonnegative array of size ``(n,)``, we compute the
        classical entropy of :math:`x`. If this is a symmetric or Hermitian
        positive semidefinite array of size ``(n, n)``, then we compute the
        quantum entropy of :math:`X`.
    base : :obj:`float`, optional
        Base of the logarithm. The default is ``2``.

    Returns
    -------
    :obj:`float`
        Classical entropy of :math:`x` or quantum entropy of :math:`X`.
    """
    x = np.asarray(x)
    if x.ndim == 1:
        if np.any(x < 0):
            raise ValueError("p must be non-negative.")
        return -float(np.sum(x * _log(x, base)))

    _check_square(x, "rho")
    eig = np.linalg.eigvalsh(x)
    if np.any(eig < -rtol(x.dtype)):
        raise ValueError("rho must be positive semidefinite.")
    return -float(np.sum(eig * _log(eig, base)))


def binary_entropy(p, base=2):
    """Computes the Shannon entropy :math:`-p\\log(p)-(1-p)\\log(1-p)` of
    a probability ``p``.
    """
    if p == 0 or p == 1:
        return 0.0
    return float(-p * np.log(p) - (1 - p) * np.log(1 - p)) / np.log(base)


def relative_entropy(x, y, base=2):
    r"""Computes either the classical relative entropy

    .. math::

        D(x \| y) = \sum_{i=1}^n x_i (\log(x_i) - \log(y_i)),

    between nonnegative vectors, or the quantum relative entropy

    .. math::

        S(X \| Y) = \text{tr}[X (\log(X) - \log(Y))],

    between positive semidefinite matrices. In the quantum case, with
    spectral decompositions :math:`X = \sum_i \lambda_i |u_i\rangle\langle
    u_i|` and :math:`Y = \sum_j \mu_j |v_j\rangle\langle v_j|`, this is
    evaluated as

    .. math::

        \sum_{i,j} \lambda_i (\log(\lambda_i) - \log(\mu_j))
        |\langle u_i | v_j \rangle|^2.

    Parameters
    ----------
    x : :class:`~numpy.ndarray`
        Nonnegative vector of size ``(n,)`` or symmetric or Hermitian
        positive semidefinite matrix of size ``(n, n)``.
    y : :class:`~numpy.ndarray`
        Array of the same kind and size as ``x``.
    base : :obj:`float`, optional
        Base of the logarithm. The default is ``2``.

    Returns
    -------
    :obj:`float`
        The relative entropy of ``x`` with respect to ``y``.

    Notes
    -----
    The support of ``x`` must be contained in the support of ``y``. This
    is not checked, and the result is meaningless otherwise.
    """
    x, y = np.asarray(x), np.asarray(y)
    if x.ndim == 1:
        if x.shape != y.shape:
            raise ValueError("p and q must have the same length.")
        if np.any(x < 0) or np.any(y < 0):
            raise ValueError("p and q must be non-negative.")
        return float(np.sum(x * (_log(x, base) - _log(y, base))))

    if x.shape != y.shape:
        raise ValueError("rho and sigma must have the same size.")
    _check_square(x, "rho and sigma")

    x_eig, x_vecs = np.linalg.eigh(x)
    y_eig, y_vecs = np.linalg.eigh(y)
    tol = rtol(np.result_type(x.dtype, y.dtype))
    if np.any(x_eig < -tol) or np.any(y_eig < -tol):
        raise ValueError("rho and sigma must be positive semidefinite.")

    overlap = np.abs(x_vecs.conj().T @ y_vecs) ** 2
    log_diff = _log(x_eig, base).reshape(-1, 1) - _log(y_eig, base)
    return float(np.sum(x_eig.reshape(-1, 1) * log_diff * overlap))


def binary_relative_entropy(p, q, base=2):
    """Computes the binary relative entropy :math:`D(p\\|q) = p\\log(p/q) +
    (1-p)\\log((1-p)/(1-q))` between two probabilities ``p`` and ``q``.
    """
    return relative_entropy(np.array([p, 1 - p]), np.array([q, 1 - q]), base)


def conditional_entropy(x, csys=None, dims=None, base=2):
    r"""Computes either the classical conditional entropy :math:`H(A|B)`
    of a joint probability distribution ``x[a, b]``, or the quantum
    conditional entropy

    .. math::

        S(X) - S(\text{tr}_{\bar{C}}[X])

    of a multipartite state, conditioned on the subsystems :math:`C`
    given by ``csys``.

    Parameters
    ----------
    x : :class:`~numpy.ndarray`
        Nonnegative joint distribution of size ``(nA, nB)`` if ``csys``
        and ``dims`` are not given, otherwise a positive semidefinite
        matrix defined on subsystems of dimensions ``dims``.
    csys : :obj:`int` or :obj:`tuple` of :obj:`int`, optional
        Subsystems to condition on. Every other subsystem is traced out.
    dims : :obj:`tuple` of :obj:`int`, optional
        The dimensions of the subsystems of ``x``.
    base : :obj:`float`, optional
        Base of the logarithm. The default is ``2``.

    Returns
    -------
    :obj:`float`
        The conditional entropy.
    """
    x = np.asarray(x)

    if csys is None and dims is None:
        if np.any(x < 0):
            raise ValueError("pAB must be non-negative.")
        pB = np.sum(x, axis=0, keepdims=True)
        ratio = np.divide(x, pB, out=np.zeros(x.shape), where=pB > 0)
        return -float(np.sum(x * _log(ratio, base)))

    if csys is None or dims is None:
        raise ValueError("csys and dims must be given together.")

    csys = [csys] if isinstance(csys, (int, np.integer)) else list(csys)
    if len(csys) == 0:
        return entropy(x, base)
    if len(csys) == len(dims):
        return 0.0

    # To condition on csys we trace out the rest
    remove = [k for k in range(len(dims)) if k not in csys]
    x_cond = p_tr(x, dims, remove)
    return entropy(x, base) - entropy(x_cond, base)
