# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory


def test_ptr_product():
    # Tests that the partial trace of X (x) Y (x) Z traces out the right
    # factors and keeps the remaining ones in order
    import numpy as np

    from qsep.quantum import p_tr

    np.random.seed(1)

    dims = [2, 3, 4]
    Xs = [np.random.randn(d, d) + np.random.randn(d, d) * 1j for d in dims]
    M = np.kron(np.kron(Xs[0], Xs[1]), Xs[2])
    tr = [np.trace(X) for X in Xs]

    assert np.allclose(p_tr(M, dims, 0), tr[0] * np.kron(Xs[1], Xs[2]))
    assert np.allclose(p_tr(M, dims, 1), tr[1] * np.kron(Xs[0], Xs[2]))
    assert np.allclose(p_tr(M, dims, (2, 0)), tr[0] * tr[2] * Xs[1])
    assert np.allclose(p_tr(M, dims, [0, 1, 2]), np.prod(tr))
    assert p_tr(M, dims, []) is M, "qsep.quantum.p_tr does not skip empty sys"


def test_ptr_adjoint():
    # Tests that p_tr is adjoint to tensoring with the identity
    #     <p_tr(X), Y> = <X, I (x) Y>
    import numpy as np

    from qsep.quantum import p_tr

    np.random.seed(1)

    dims = [3, 2]
    X = np.random.randn(6, 6) + np.random.randn(6, 6) * 1j
    X = X + X.conj().T
    Y = np.random.randn(2, 2) + np.random.randn(2, 2) * 1j
    Y = Y + Y.conj().T

    assert np.allclose(
        np.trace(p_tr(X, dims, 0) @ Y), np.trace(X @ np.kron(np.eye(3), Y))
    ), "qsep.quantum.p_tr is not adjoint to the identity tensor product"


def test_partial_transpose():
    import numpy as np

    from qsep.quantum import partial_transpose

    np.random.seed(1)

    dims = [2, 3, 2]
    Xs = [np.random.randn(d, d) + np.random.randn(d, d) * 1j for d in dims]
    M = np.kron(np.kron(Xs[0], Xs[1]), Xs[2])

    assert np.allclose(
        partial_transpose(M, dims, 1), np.kron(np.kron(Xs[0], Xs[1].T), Xs[2])
    ), "qsep.quantum.partial_transpose does not transpose the right factor"
    assert np.allclose(
        partial_transpose(M, dims, [0, 2]), np.kron(np.kron(Xs[0].T, Xs[1]), Xs[2].T)
    )
    assert np.allclose(partial_transpose(M, dims, [0, 1, 2]), M.T)
    assert np.allclose(
        partial_transpose(partial_transpose(M, dims, 2), dims, 2), M
    ), "qsep.quantum.partial_transpose is not an involution"


def test_max_entangled():
    import numpy as np

    from qsep.quantum import ketbra, max_entangled, p_tr

    for d in [2, 3]:
        psi = max_entangled(d)
        assert np.isclose(np.linalg.norm(psi), 1.0)
        assert np.allclose(p_tr(ketbra(psi), [d, d], 1), np.eye(d) / d)
        assert np.allclose(max_entangled(d, normalized=False), psi * np.sqrt(d))


def test_symmetric_projection():
    # Tests that P_sym is an isometry onto states invariant under permuting
    # the tensor factors
    import itertools

    import numpy as np

    from qsep.quantum import permute_systems, sym_dim, symmetric_projection

    for d, n in [(2, 1), (2, 2), (3, 2), (2, 3)]:
        P = symmetric_projection(d, n)

        assert P.shape == (d**n, sym_dim(d, n))
        assert np.allclose(
            P.T @ P, np.eye(sym_dim(d, n))
        ), "qsep.quantum.symmetric_projection is not an isometry"

        for perm in itertools.permutations(range(n)):
            for k in range(P.shape[1]):
                assert np.allclose(
                    permute_systems(P[:, k], [d] * n, perm), P[:, k]
                ), "Columns of qsep.quantum.symmetric_projection are not symmetric"

        Q = symmetric_projection(d, n, partial=False)
        assert np.allclose(Q @ Q, Q)
        assert np.isclose(np.trace(Q), sym_dim(d, n))

    assert sym_dim(2, 3) == 4
    assert sym_dim(3, 2) == 6


def test_schmidt_decomposition():
    # Tests that Schmidt coefficients are nonnegative, sorted, normalized,
    # and that the decomposition reconstructs the state
    import numpy as np

    from qsep.quantum import schmidt_decomposition

    np.random.seed(1)

    for dims in [(2, 2), (2, 3), (4, 3)]:
        d = dims[0] * dims[1]
        psi = np.random.randn(d) + np.random.randn(d) * 1j
        psi /= np.linalg.norm(psi)

        (coeffs, U, V) = schmidt_decomposition(psi, dims)

        assert np.all(coeffs >= 0)
        assert np.all(np.diff(coeffs) <= 0), "Schmidt coefficients are not sorted"
        assert np.isclose(np.sum(coeffs**2), 1.0)
        assert np.allclose(U.conj().T @ U, np.eye(len(coeffs)))
        assert np.allclose(V.conj().T @ V, np.eye(len(coeffs)))

        recon = sum(c * np.kron(U[:, i], V[:, i]) for (i, c) in enumerate(coeffs))
        assert np.allclose(
            recon, psi
        ), "qsep.quantum.schmidt_decomposition does not reconstruct the state"

        schmidt_form = np.kron(U, V).conj().T @ psi
        expected = np.zeros(len(coeffs) ** 2)
        expected[:: len(coeffs) + 1] = coeffs
        assert np.allclose(schmidt_form, expected)


def test_schmidt_errors():
    import numpy as np
    import pytest

    from qsep.quantum import schmidt_decomposition

    with pytest.raises(ValueError):
        schmidt_decomposition(np.ones(6))
    with pytest.raises(ValueError):
        schmidt_decomposition(np.ones(6), (2, 2))
    with pytest.raises(ValueError):
        schmidt_decomposition(np.ones(6), (1, 2, 3))
    with pytest.raises(ValueError):
        schmidt_decomposition(np.ones(6), (-2, -3))


def test_pure_entanglement_entropy():
    import numpy as np

    from qsep.quantum import max_entangled, pure_entanglement_entropy

    assert np.isclose(pure_entanglement_entropy(max_entangled(2)), 1.0)
    assert np.isclose(pure_entanglement_entropy(max_entangled(3)), np.log2(3))

    product = np.kron([1.0, 0.0], [0.0, 0.6, 0.8])
    assert np.isclose(pure_entanglement_entropy(product, (2, 3)), 0.0)

    # Unequal subsystems: a qubit maximally entangled with a qutrit
    psi = np.zeros(6)
    psi[0] = psi[4] = 1 / np.sqrt(2)
    assert np.isclose(pure_entanglement_entropy(psi, (2, 3)), 1.0)
    assert np.isclose(pure_entanglement_entropy(psi.reshape(2, 3).T.ravel(), (3, 2)), 1.0)
