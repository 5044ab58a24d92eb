# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import numpy as np

from qsep._utils.linalg import check_dims, equal_sizes, is_hermitian
from qsep.entanglement.dps import dps_constraints
from qsep.model import Affine, Program
from qsep.quantum.operator import max_entangled
from qsep.quantum.schmidt import pure_entanglement_entropy


def _check_state(rho, dims):
    rho = np.asarray(rho)
    if not is_hermitian(rho):
        raise ValueError("State must be Hermitian.")
    if dims is None:
        dims = equal_sizes(rho)
    return rho, check_dims(dims, rho.shape[0])


def entanglement_entropy(x, dims=None, n=1, verbose=0, **solver_opts):
    r"""Computes the entanglement entropy of a bipartite pure state, or
    lower bounds the relative entropy of entanglement

    .. math::

        \min_{\sigma} \quad S(\rho \| \sigma) / \log(2) \quad
        \text{s.t.} \quad \text{tr}[\sigma] = 1, \quad
        \sigma \in \text{DPS}_n,

    of a bipartite mixed state, where :math:`\text{DPS}_n` is level ``n``
    of the DPS hierarchy of relaxations of the separable states.

    Parameters
    ----------
    x : :class:`~numpy.ndarray`
        Ket of size ``(dA*dB,)``, or symmetric or Hermitian density matrix
        of size ``(dA*dB, dA*dB)``.
    dims : :obj:`tuple` of :obj:`int`, optional
        The dimensions ``(dA, dB)`` of the two subsystems. The default is
        ``None``, which assumes equally-sized subsystems.
    n : :obj:`int`, optional
        Level of the DPS hierarchy. Only used for mixed states. The
        default is ``1``.
    verbose : :obj:`int`, optional
        Verbosity level passed to :meth:`~qsep.model.Program.solve`. The
        default is ``0``.
    **solver_opts
        Further keyword arguments of :class:`qics.Solver`.

    Returns
    -------
    :obj:`float`
        For a pure state, its entanglement entropy in bits.
    :obj:`tuple` or :class:`~qsep.model.SolveFailure`
        For a mixed state, the lower bound in bits together with the
        minimizing :math:`\sigma`, or the failure reported by the solver.
    """
    x = np.asarray(x)
    if x.ndim == 1:
        return pure_entanglement_entropy(x, dims)

    (rho, dims) = _check_state(x, dims)
    d = rho.shape[0]
    iscomplex = np.iscomplexobj(rho)

    prog = Program()
    sigma = prog.add_matrix("sigma", d, iscomplex)
    dps_constraints(prog, sigma, dims, n, iscomplex=iscomplex)
    prog.add_equality("normalization", sigma.trace(), 1.0)

    h = prog.add_scalar("h")
    prog.minimize(h / np.log(2.0))
    prog.add_quant_rel_entr(
        "relative_entropy", h, Affine.constant(rho, iscomplex), sigma
    )

    sol = prog.solve(verbose=verbose, **solver_opts)
    if not sol:
        return sol
    return sol.objective, sol.value(sigma)


def random_robustness(rho, dims=None, n=1, ppt=True, verbose=0, **solver_opts):
    r"""Lower bounds the random robustness of the bipartite state ``rho``,
    i.e., the smallest :math:`\lambda` such that :math:`\rho +
    \lambda\mathbb{I}` lies in level ``n`` of the DPS hierarchy.

    Parameters
    ----------
    rho : :class:`~numpy.ndarray`
        Symmetric or Hermitian density matrix of size ``(dA*dB, dA*dB)``.
    dims : :obj:`tuple` of :obj:`int`, optional
        The dimensions ``(dA, dB)`` of the two subsystems. The default is
        ``None``, which assumes equally-sized subsystems.
    n : :obj:`int`, optional
        Level of the DPS hierarchy. The default is ``1``.
    ppt : :obj:`bool`, optional
        Whether to include the partial transposition constraints. The
        default is ``True``.
    verbose : :obj:`int`, optional
        Verbosity level passed to :meth:`~qsep.model.Program.solve`. The
        default is ``0``.
    **solver_opts
        Further keyword arguments of :class:`qics.Solver`.

    Returns
    -------
    :obj:`tuple` or :class:`~qsep.model.SolveFailure`
        The robustness :math:`\lambda^*` and an entanglement witness
        :math:`W` with :math:`\text{tr}[W] = 1`, :math:`\text{tr}[W\sigma]
        \geq 0` for every :math:`\sigma` in the relaxation and
        :math:`\text{tr}[W\rho] = -\lambda^*`, or the failure reported by
        the solver.
    """
    (rho, dims) = _check_state(rho, dims)
    d = rho.shape[0]
    iscomplex = np.iscomplexobj(rho)

    prog = Program()
    lam = prog.add_scalar("lambda")
    noisy_state = Affine.constant(rho, iscomplex) + lam.times(np.eye(d), iscomplex)
    dps_constraints(prog, noisy_state, dims, n, ppt=ppt, iscomplex=iscomplex)
    prog.minimize(lam)

    sol = prog.solve(verbose=verbose, **solver_opts)
    if not sol:
        return sol

    W = sol.dual("witness")
    W = (W + W.conj().T) * 0.5
    return sol.objective, W


def schmidt_number(
    rho, s=2, dims=None, n=1, ppt=True, verbose=0, **solver_opts
):
    r"""Upper bounds the white noise robustness of ``rho`` such that it has
    Schmidt number ``s``.

    If a state :math:`\rho` on :math:`AB` has Schmidt number :math:`s`,
    then there is a positive semidefinite :math:`\omega` on the extended
    space :math:`AA'B'B`, where :math:`A'` and :math:`B'` have dimension
    :math:`s`, such that :math:`\omega / s` is separable against
    :math:`AA'|B'B` and :math:`\Pi \omega \Pi^\dagger = \rho`, where
    :math:`\Pi^\dagger = \mathbb{I}_A \otimes \sum_i |ii\rangle \otimes
    \mathbb{I}_B`. Separability is relaxed with level ``n`` of the DPS
    hierarchy, and we maximize the visibility :math:`\lambda` of
    :math:`\lambda\rho + (1 - \lambda)\mathbb{I}/d` subject to this.

    If the returned value :math:`\lambda < 1`, then ``rho`` has a Schmidt
    number larger than ``s`` for any visibility above :math:`\lambda`.
    Otherwise the result is only an upper bound on the visibility with
    which ``rho`` becomes Schmidt number ``s``.

    Parameters
    ----------
    rho : :class:`~numpy.ndarray`
        Symmetric or Hermitian density matrix of size ``(dA*dB, dA*dB)``.
    s : :obj:`int`, optional
        Target Schmidt number. ``s=1`` is :func:`random_robustness`. The
        default is ``2``.
    dims : :obj:`tuple` of :obj:`int`, optional
        The dimensions ``(dA, dB)`` of the two subsystems. The default is
        ``None``, which assumes equally-sized subsystems.
    n : :obj:`int`, optional
        Level of the DPS hierarchy. The default is ``1``.
    ppt : :obj:`bool`, optional
        Whether to include the partial transposition constraints. The
        default is ``True``.
    verbose : :obj:`int`, optional
        Verbosity level passed to :meth:`~qsep.model.Program.solve`. The
        default is ``0``.
    **solver_opts
        Further keyword arguments of :class:`qics.Solver`.

    Returns
    -------
    :obj:`float` or :class:`~qsep.model.SolveFailure`
        The visibility :math:`\lambda`, or the failure reported by the
        solver.

    Notes
    -----
    See [1]_ and [2]_ for additional details.

    .. [1] Hulpke, F., Bruss, D., Lewenstein, M. and Sanpera, A. (2004)
           "Simplifying Schmidt number witnesses via higher-dimensional
           embeddings". https://arxiv.org/abs/quant-ph/0401118
    .. [2] Weilenmann, M., Dive, B., Trillo, D., Aguilar, E. A. and
           Navascués, M. (2020) "Entanglement detection beyond measuring
           fidelities". https://arxiv.org/abs/1912.10056
    """
    rho = np.asarray(rho)
    if not is_hermitian(rho):
        raise ValueError("State must be Hermitian.")
    if s < 1:
        raise ValueError("Schmidt number must be >= 1.")
    if s == 1:
        return random_robustness(rho, dims, n, ppt=ppt, verbose=verbose,
                                 **solver_opts)

    (rho, (dA, dB)) = _check_state(rho, dims)
    d = rho.shape[0]
    iscomplex = np.iscomplexobj(rho)

    ket = max_entangled(s, normalized=False).reshape(-1, 1)
    Pi = np.kron(np.kron(np.eye(dA), ket), np.eye(dB)).T
    lifted_dims = [dA * s, dB * s]  # with the ancilla spaces A'B'

    prog = Program()
    lam = prog.add_scalar("lambda")
    prog.add_nonneg("lambda_lower", lam)
    prog.add_nonneg("lambda_upper", 1.0 - lam)

    noise = np.eye(d) / d
    noisy_state = lam.times(rho, iscomplex) + (1.0 - lam).times(noise, iscomplex)
    prog.maximize(lam)

    ext = dps_constraints(prog, noisy_state, lifted_dims, n, ppt=ppt,
                          iscomplex=iscomplex, projection=Pi)
    prog.add_equality("schmidt_trace", ext.reduced.trace(), float(s))

    sol = prog.solve(verbose=verbose, **solver_opts)
    if not sol:
        return sol
    return sol.objective
