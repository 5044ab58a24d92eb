# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

import numpy as np
import scipy as sp

import qics
import qics.cones
from qsep.vectorize import get_full_to_compact_op, lin_to_mat, mat_to_vec
from qsep.vectorize import vec_dim, vec_to_mat


class Variable:
    """A real scalar, or a symmetric or Hermitian matrix, variable of a
    :class:`Program`. Matrix variables are stored in the compact
    vectorization of :func:`~qsep.vectorize.mat_to_vec`.
    """

    __array_ufunc__ = None

    def __init__(self, name, side=None, iscomplex=False):
        self.name = name
        self.side = side
        self.iscomplex = iscomplex
        if side is None:
            self.size = 1
        else:
            self.size = vec_dim(side, iscomplex=iscomplex, compact=True)
        self.offset = None

    def __repr__(self):
        if self.side is None:
            return f"Variable({self.name!r})"
        kind = "Hermitian" if self.iscomplex else "symmetric"
        return f"Variable({self.name!r}, {kind} {self.side}x{self.side})"

    # Arithmetic is delegated to the affine expression of the variable
    def __add__(self, other):
        return Affine.of(self) + other

    def __radd__(self, other):
        return Affine.of(self) + other

    def __sub__(self, other):
        return Affine.of(self) - other

    def __rsub__(self, other):
        return other - Affine.of(self)

    def __mul__(self, other):
        return Affine.of(self) * other

    def __rmul__(self, other):
        return Affine.of(self) * other

    def __truediv__(self, other):
        return Affine.of(self) / other

    def __neg__(self):
        return -Affine.of(self)

    def apply(self, lin, side_out):
        return Affine.of(self).apply(lin, side_out)

    def inner(self, mat):
        return Affine.of(self).inner(mat)

    def trace(self):
        return Affine.of(self).trace()

    def times(self, mat, iscomplex=None):
        return Affine.of(self).times(mat, iscomplex)


class Affine:
    r"""An affine expression :math:`x \mapsto \sum_k M_k x_k + c` in the
    variables :math:`x_k` of a :class:`Program`.

    The expression is either scalar/vector valued (``side=None``), or
    matrix valued, in which case its rows are the compact vectorization of
    a ``(side, side)`` symmetric or Hermitian matrix.

    Parameters
    ----------
    terms : :obj:`dict`
        Maps each :class:`Variable` to its coefficient matrix :math:`M_k`,
        a :mod:`scipy.sparse` matrix of size ``(dim, var.size)``.
    const : :class:`~numpy.ndarray`
        Constant term :math:`c` of size ``(dim, 1)``.
    side : :obj:`int`, optional
        Side length of the matrix this expression represents, if any.
    iscomplex : :obj:`bool`, optional
        Whether the matrix is Hermitian (``True``) or symmetric
        (``False``).
    """

    __array_ufunc__ = None

    def __init__(self, terms, const, side=None, iscomplex=False):
        self.terms = terms
        self.const = const
        self.side = side
        self.iscomplex = iscomplex

    @property
    def dim(self):
        return self.const.shape[0]

    @classmethod
    def of(cls, var):
        """The expression consisting of the variable ``var`` alone."""
        return cls({var: sp.sparse.identity(var.size, format="csr")},
                   np.zeros((var.size, 1)),
                   var.side, var.iscomplex)

    @classmethod
    def constant(cls, value, iscomplex=None):
        """A constant scalar, vector or symmetric/Hermitian matrix."""
        value = np.asarray(value)
        if value.ndim == 2:
            if iscomplex is None:
                iscomplex = np.iscomplexobj(value)
            const = mat_to_vec(value, iscomplex=iscomplex, compact=True)
            return cls({}, const, value.shape[0], iscomplex)
        return cls({}, value.astype(np.float64).reshape(-1, 1))

    def _coerce(self, other):
        if isinstance(other, Affine):
            return other
        if isinstance(other, Variable):
            return Affine.of(other)
        if np.isscalar(other) and self.side is not None:
            raise TypeError("Cannot add a scalar to a matrix expression.")
        return Affine.constant(other, iscomplex=self.iscomplex)

    def __add__(self, other):
        other = self._coerce(other)
        assert self.dim == other.dim, "Expression dimensions do not match."

        terms = dict(self.terms)
        for var, M in other.terms.items():
            terms[var] = terms[var] + M if var in terms else M
        return Affine(terms, self.const + other.const, self.side,
                      self.iscomplex)

    def __radd__(self, other):
        return self + other

    def __neg__(self):
        return self * -1.0

    def __sub__(self, other):
        return self + (-self._coerce(other))

    def __rsub__(self, other):
        return self._coerce(other) + (-self)

    def __mul__(self, alpha):
        if not np.isscalar(alpha):
            return NotImplemented
        terms = {var: alpha * M for (var, M) in self.terms.items()}
        return Affine(terms, alpha * self.const, self.side, self.iscomplex)

    def __rmul__(self, alpha):
        return self.__mul__(alpha)

    def __truediv__(self, alpha):
        return self * (1.0 / alpha)

    def linear(self, L, side=None, iscomplex=None):
        """Left-multiplies the expression by the matrix ``L``."""
        if iscomplex is None:
            iscomplex = self.iscomplex
        L = sp.sparse.csr_matrix(L)
        terms = {var: L @ M for (var, M) in self.terms.items()}
        return Affine(terms, L @ self.const, side, iscomplex)

    def apply(self, lin, side_out):
        """Composes a matrix-valued expression with a linear map ``lin``
        sending ``(side, side)`` matrices to ``(side_out, side_out)``
        matrices.
        """
        assert self.side is not None, "Expression is not matrix valued."
        L = lin_to_mat(lin, (self.side, side_out), iscomplex=self.iscomplex,
                       compact=(True, True))
        return self.linear(L, side_out)

    def inner(self, mat):
        """Inner product :math:`\\text{tr}[CX]` of a matrix-valued expression
        :math:`X` with a constant symmetric or Hermitian matrix :math:`C`.
        """
        assert self.side is not None, "Expression is not matrix valued."
        row = mat_to_vec(mat, iscomplex=self.iscomplex, compact=True).T
        return self.linear(row, None, False)

    def trace(self):
        """Trace of a matrix-valued expression, as a scalar expression."""
        return self.inner(np.eye(self.side))

    def times(self, mat, iscomplex=None):
        """Product of a scalar expression with a constant symmetric or
        Hermitian matrix ``mat``.
        """
        assert self.dim == 1, "Expression is not scalar valued."
        mat = np.asarray(mat)
        if iscomplex is None:
            iscomplex = np.iscomplexobj(mat)
        col = mat_to_vec(mat, iscomplex=iscomplex, compact=True)
        return self.linear(col, mat.shape[0], iscomplex)

    def evaluate(self, x):
        """Value of the expression at the stacked variable vector ``x``."""
        val = self.const[:, 0].copy()
        for var, M in self.terms.items():
            val += M @ x[var.offset : var.offset + var.size]
        if self.side is None:
            return float(val[0]) if val.size == 1 else val
        return vec_to_mat(val, iscomplex=self.iscomplex, compact=True)


class Program:
    r"""Builder for conic programs of the form

    .. math::

        \min_{x} \quad c^\top x \quad \text{s.t.} \quad Ax = b, \quad
        h - Gx \in \mathcal{K},

    where the variables, equalities and cone memberships are declared
    through affine expressions and later lowered to :class:`qics.Model`.

    Examples
    --------
    >>> C = np.diag([1.0, 2.0])
    >>> prog = Program()
    >>> X = prog.add_matrix("X", 2)
    >>> prog.add_equality("trace", X.trace(), 1.0)
    >>> prog.add_psd("X_psd", X)
    >>> prog.minimize(X.inner(C))
    >>> sol = prog.solve()
    """

    def __init__(self):
        self.variables = []
        self.n = 0
        self.equalities = []
        self.cone_constraints = []
        self.objective = None
        self.sense = 1
        self._names = set()

    def _register_name(self, name):
        if name in self._names:
            raise ValueError(f"Name {name!r} is already used in this program.")
        self._names.add(name)

    def _add_variable(self, var):
        self._register_name(var.name)
        var.offset = self.n
        self.variables.append(var)
        self.n += var.size
        return var

    def add_scalar(self, name):
        """Declares a free real scalar variable."""
        return self._add_variable(Variable(name))

    def add_matrix(self, name, side, iscomplex=False):
        """Declares a free ``(side, side)`` symmetric (``iscomplex=False``)
        or Hermitian (``iscomplex=True``) matrix variable.
        """
        return self._add_variable(Variable(name, side, iscomplex))

    def add_equality(self, name, lhs, rhs=0.0):
        """Adds the constraint ``lhs == rhs`` under the given name. The
        dual of a named equality is available from :meth:`Solution.dual`.
        """
        self._register_name(name)
        lhs = _as_affine(lhs)
        if np.isscalar(rhs) and lhs.side is not None:
            if rhs != 0:
                raise TypeError("Cannot equate a matrix to a scalar.")
            expr = lhs
        else:
            expr = lhs - rhs
        self.equalities.append((name, expr))

    def add_psd(self, name, expr):
        """Constrains a matrix expression to be positive semidefinite."""
        self._register_name(name)
        expr = _as_affine(expr)
        assert expr.side is not None, "Expression is not matrix valued."
        cone = qics.cones.PosSemidefinite(expr.side, iscomplex=expr.iscomplex)
        self.cone_constraints.append((name, cone, _unpack(expr)))

    def add_nonneg(self, name, expr):
        """Constrains every entry of a vector expression to be nonnegative."""
        self._register_name(name)
        expr = _as_affine(expr)
        cone = qics.cones.NonNegOrthant(expr.dim)
        self.cone_constraints.append((name, cone, expr))

    def add_quant_rel_entr(self, name, t, X, Y):
        r"""Constrains :math:`t \geq \text{tr}[X(\log(X) - \log(Y))]`, i.e.,
        :math:`(t, X, Y)` lies in the quantum relative entropy cone of
        dimension ``1 + 2 * vec_dim``. Logarithms are natural.
        """
        self._register_name(name)
        t = _as_affine(t)
        X = _as_affine(X)
        Y = _as_affine(Y)
        assert t.dim == 1, "Epigraph variable must be scalar."
        assert X.side == Y.side and X.iscomplex == Y.iscomplex

        cone = qics.cones.QuantRelEntr(X.side, iscomplex=X.iscomplex)
        expr = _vstack([t, _unpack(X), _unpack(Y)])
        self.cone_constraints.append((name, cone, expr))

    def minimize(self, expr):
        self.objective = _as_affine(expr)
        self.sense = 1
        assert self.objective.dim == 1, "Objective must be scalar."

    def maximize(self, expr):
        self.objective = _as_affine(expr)
        self.sense = -1
        assert self.objective.dim == 1, "Objective must be scalar."

    def build(self):
        """Lowers the program to a :class:`qics.Model`."""
        assert self.cone_constraints, "Program needs a cone constraint."

        c = np.zeros((self.n, 1))
        offset = 0.0
        if self.objective is not None:
            (c_row, c0) = self._stack([self.objective])
            c = self.sense * _dense(c_row).T
            offset = self.sense * c0[0, 0]

        (A, b) = (None, None)
        if self.equalities:
            (A, const) = self._stack([expr for (_, expr) in self.equalities])
            b = -const

        # h - Gx = const + Mx
        (M, h) = self._stack([expr for (_, _, expr) in self.cone_constraints])
        G = -M
        cones = [cone for (_, cone, _) in self.cone_constraints]

        return qics.Model(c=c, A=A, b=b, G=G, h=h, cones=cones, offset=offset)

    def solve(self, verbose=0, **solver_opts):
        """Solves the program with :class:`qics.Solver`.

        Parameters
        ----------
        verbose : :obj:`int`, optional
            Verbosity level. ``0`` is silent, ``1`` prints a summary of the
            program and the solver summary, higher levels are forwarded to
            :class:`qics.Solver`. The default is ``0``.
        **solver_opts
            Further keyword arguments of :class:`qics.Solver`, e.g.,
            ``max_iter``, ``max_time``, ``tol_gap`` or ``tol_feas``.

        Returns
        -------
        :class:`Solution` or :class:`SolveFailure`
            A :class:`Solution` if the solver reports an optimal solution,
            otherwise a :class:`SolveFailure` carrying the solver status.
        """
        model = self.build()
        if verbose:
            self.print_summary()

        solver = qics.Solver(model, verbose=verbose, **solver_opts)
        info = solver.solve()

        if info["sol_status"] != "optimal":
            return SolveFailure(info["sol_status"], info["exit_status"], info)
        return Solution(self, info)

    def print_summary(self):
        eq_rows = sum(expr.dim for (_, expr) in self.equalities)
        cone_dim = sum(expr.dim for (_, _, expr) in self.cone_constraints)
        print("Program summary:")
        print(f"\tno. vars:     {self.n:<10}", end="")
        print(f"\t\tvar. blocks:  {len(self.variables):<10}")
        print(f"\tno. constr:   {eq_rows:<10}", end="")
        print(f"\t\teq. blocks:   {len(self.equalities):<10}")
        print(f"\tcone dim:     {cone_dim:<10}", end="")
        print(f"\t\tno. cones:    {len(self.cone_constraints):<10}")
        print()

    def _stack(self, exprs):
        # Stack expressions into a (rows, n) coefficient matrix and constant
        blocks = []
        for expr in exprs:
            row = []
            for var in self.variables:
                if var in expr.terms:
                    row.append(sp.sparse.csr_matrix(expr.terms[var]))
                else:
                    row.append(sp.sparse.csr_matrix((expr.dim, var.size)))
            blocks.append(sp.sparse.hstack(row))

        M = _sparsify(sp.sparse.vstack(blocks).tocsr())
        const = np.vstack([expr.const for expr in exprs])
        return (M, const)


class Solution:
    """Optimal solution of a :class:`Program`.

    Attributes
    ----------
    status : :obj:`str`
        Solution status reported by :class:`qics.Solver`.
    objective : :obj:`float`
        Optimal value of the objective, in the sense (min or max) it was
        declared.
    info : :obj:`dict`
        The raw dictionary returned by :meth:`qics.Solver.solve`.
    """

    def __init__(self, program, info):
        self.program = program
        self.info = info
        self.status = info["sol_status"]
        self.x = np.asarray(info["x_opt"]).ravel()
        self.y = np.asarray(info["y_opt"]).ravel()

        if program.objective is None:
            self.objective = 0.0
        else:
            self.objective = program.objective.evaluate(self.x)

    def __bool__(self):
        return True

    def value(self, expr):
        """Optimal value of a variable or expression, as a float, vector or
        symmetric/Hermitian matrix.
        """
        return _as_affine(expr).evaluate(self.x)

    def dual(self, name):
        r"""Dual variable :math:`y` of the named equality ``lhs == rhs``,
        with the sign convention :math:`c + A^\top y + G^\top z = 0` of
        :class:`qics.Model`. Matrix-valued equalities return a matrix
        :math:`Y` with :math:`\langle Y, \cdot \rangle = y^\top A`.
        """
        start = 0
        for eq_name, expr in self.program.equalities:
            if eq_name == name:
                y = self.y[start : start + expr.dim]
                if expr.side is None:
                    return float(y[0]) if y.size == 1 else y
                return vec_to_mat(y, iscomplex=expr.iscomplex, compact=True)
            start += expr.dim
        raise KeyError(f"No equality constraint named {name!r}.")


class SolveFailure:
    """Outcome of a solve which did not reach an optimal solution.

    Instances are falsy, so results can be checked with ``if not result``.
    The string form is the message ``Something went wrong: <status>``.

    Attributes
    ----------
    status : :obj:`str`
        Raw solution status reported by :class:`qics.Solver`, e.g.,
        ``pinfeas``, ``near_optimal`` or ``unknown``.
    exit_status : :obj:`str`
        Raw exit status reported by :class:`qics.Solver`, e.g.,
        ``max_iter`` or ``max_time``.
    info : :obj:`dict`
        The raw dictionary returned by :meth:`qics.Solver.solve`.
    """

    def __init__(self, status, exit_status=None, info=None):
        self.status = status
        self.exit_status = exit_status
        self.info = info

    def __bool__(self):
        return False

    def __str__(self):
        return f"Something went wrong: {self.status}"

    def __repr__(self):
        return f"SolveFailure({self.status!r}, {self.exit_status!r})"


def _as_affine(expr):
    if isinstance(expr, Affine):
        return expr
    if isinstance(expr, Variable):
        return Affine.of(expr)
    return Affine.constant(expr)


def _unpack_op(side, iscomplex):
    # Sparse map from the compact to the full vectorization
    return get_full_to_compact_op(side, iscomplex).T.tocsr()


def _unpack(expr):
    # Cones act on the full (non-compact) vectorization
    L = _unpack_op(expr.side, expr.iscomplex)
    return expr.linear(L, None, expr.iscomplex)


def _vstack(exprs):
    terms = {}
    for k, expr in enumerate(exprs):
        for var in expr.terms:
            if var not in terms:
                terms[var] = [sp.sparse.csr_matrix((e.dim, var.size)) for e in exprs]
            terms[var][k] = expr.terms[var]
    terms = {var: sp.sparse.vstack(Ms, format="csr") for (var, Ms) in terms.items()}
    const = np.vstack([expr.const for expr in exprs])
    return Affine(terms, const)


def _dense(A):
    return A.toarray() if sp.sparse.issparse(A) else A


def _sparsify(A, threshold=0.01):
    if A.shape[0] * A.shape[1] == 0:
        return A.toarray()
    if A.nnz / (A.shape[0] * A.shape[1]) > threshold:
        return A.toarray()
    return A
