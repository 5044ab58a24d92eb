# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import collections

import numpy as np

from qsep._utils.linalg import is_hermitian, rtol
from qsep.model import Affine, Variable
from qsep.quantum.operator import p_tr, partial_transpose
from qsep.quantum.symmetric import sym_dim, symmetric_projection

DPSExtension = collections.namedtuple("DPSExtension", ["ext", "reduced", "dims"])
DPSExtension.__doc__ = """Handles to the pieces of a DPS relaxation added to a
:class:`~qsep.model.Program`: the extension variable ``ext``, the
expression ``reduced`` of its marginal on the first copy of each party,
and the subsystem dimensions ``dims`` of the lifted extension."""


def _linear_map(projection, side_in):
    # Returns the map X -> projection(X) and the side of its output
    if projection is None:
        return (None, side_in)
    if callable(projection):
        side_out = np.atleast_2d(projection(np.zeros((side_in, side_in)))).shape[0]
        return (projection, side_out)

    Pi = np.asarray(projection)
    if Pi.ndim != 2 or Pi.shape[1] != side_in:
        raise ValueError(
            f"Projection must have {side_in} columns, got shape {Pi.shape}."
        )
    return (lambda X: Pi @ X @ Pi.conj().T, Pi.shape[0])


def dps_constraints(
    program,
    rho,
    dims,
    n,
    ppt=True,
    iscomplex=True,
    projection=None,
    name="witness",
):
    r"""Constrains the bipartite state ``rho`` in ``program`` to respect the
    level ``n`` constraints of the DPS hierarchy.

    A positive semidefinite variable :math:`S` is declared on
    :math:`A \otimes \text{Sym}^n(B)` and lifted to
    :math:`\Omega = VSV^\dagger` on :math:`A B_1 \cdots B_n`, where
    :math:`V = \mathbb{I}_A \otimes P_{\text{sym}}` embeds the symmetric
    subspace, which enforces bosonic symmetry of the extension. The
    marginal on :math:`A B_1` is then equated to ``rho``, i.e.,

    .. math::

        \Pi \, \text{tr}_{B_2 \cdots B_n}[\Omega] \, \Pi^\dagger = \rho,

    and, if ``ppt=True``, the partial transposes of :math:`\Omega` on
    :math:`B_1 \cdots B_i` are constrained to be positive semidefinite for
    :math:`i = 1, \ldots, n`.

    Parameters
    ----------
    program : :class:`~qsep.model.Program`
        Program to add the variable and constraints to.
    rho : :class:`~numpy.ndarray` or :class:`~qsep.model.Affine`
        Symmetric or Hermitian matrix, or matrix-valued affine expression
        (e.g., :math:`\lambda \rho + (1 - \lambda) \mathbb{I} / d`), that
        must be the marginal of the extension.
    dims : :obj:`tuple` of :obj:`int`
        The dimensions ``(dA, dB)`` of the two parties of the extension.
    n : :obj:`int`
        Level of the hierarchy, i.e., number of copies of ``B``.
    ppt : :obj:`bool`, optional
        Whether to add the partial transposition constraints. The default
        is ``True``.
    iscomplex : :obj:`bool`, optional
        Whether to use Hermitian (``True``) or real symmetric (``False``)
        matrices. The default is ``True``.
    projection : :class:`~numpy.ndarray` or :obj:`callable`, optional
        Linear map applied to the marginal before it is equated to
        ``rho``. Either a matrix :math:`\Pi`, applied as
        :math:`X \mapsto \Pi X \Pi^\dagger`, or any callable linear map.
        The default is ``None``, i.e., the identity.
    name : :obj:`str`, optional
        Name of the equality constraint, whose dual is an entanglement
        witness. Names of the other constraints are derived from it. The
        default is ``"witness"``.

    Returns
    -------
    :class:`DPSExtension`
        The extension variable, the expression of its reduced marginal,
        and the dimensions of the lifted extension.

    Notes
    -----
    See [1]_ for additional details.

    .. [1] Doherty, A. C., Parrilo, P. A. and Spedalieri, F. M. (2004)
           "Complete family of separability criteria".
           https://arxiv.org/abs/quant-ph/0308032
    """
    if len(dims) != 2:
        raise ValueError("Two subsystem sizes must be specified.")
    (dA, dB) = (int(dims[0]), int(dims[1]))
    if dA < 1 or dB < 1:
        raise ValueError("Subsystem sizes must be positive.")
    if int(n) != n or n < 1:
        raise ValueError("Hierarchy level must be a positive integer.")
    n = int(n)

    if isinstance(rho, Variable):
        rho = Affine.of(rho)
    if isinstance(rho, Affine):
        target = rho
        if target.side is None or target.iscomplex != iscomplex:
            raise ValueError("State expression has the wrong matrix type.")
    else:
        rho = np.asarray(rho)
        if not is_hermitian(rho):
            raise ValueError("State must be Hermitian.")
        if not iscomplex and np.iscomplexobj(rho):
            if not np.allclose(rho.imag, 0.0, atol=rtol(rho.dtype)):
                raise ValueError("Complex state requires iscomplex=True.")
            rho = rho.real
        target = Affine.constant(rho, iscomplex=iscomplex)

    (project, side_out) = _linear_map(projection, dA * dB)
    if side_out != target.side:
        raise ValueError(
            f"Marginal of dimension {side_out} does not match state of "
            f"dimension {target.side}."
        )

    ext_dims = [dA] + [dB] * n

    # Dimension of the extension space w/ bosonic symmetries
    side = dA * sym_dim(dB, n)
    V = np.kron(np.eye(dA), symmetric_projection(dB, n))

    def lift(S):
        return V @ S @ V.T

    ext = program.add_matrix(name + "_ext", side, iscomplex)
    program.add_psd(name + "_ext_psd", ext)

    copies = list(range(2, n + 1))
    reduced = ext.apply(lambda S: p_tr(lift(S), ext_dims, copies), dA * dB)
    marginal = reduced if project is None else reduced.apply(project, side_out)
    program.add_equality(name, marginal, target)

    if ppt:
        for i in range(1, n + 1):
            pt_sys = list(range(1, i + 1))
            pt = ext.apply(
                lambda S, pt_sys=pt_sys: partial_transpose(lift(S), ext_dims, pt_sys),
                dA * dB**n,
            )
            program.add_psd(f"{name}_ppt_{i}", pt)

    return DPSExtension(ext, reduced, ext_dims)
