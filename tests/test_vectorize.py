# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory


def _rand_herm(n, iscomplex):
    import numpy as np

    X = np.random.randn(n, n)
    if iscomplex:
        X = X + np.random.randn(n, n) * 1j
    return X + X.conj().T


def test_compact_inner_product():
    # Tests that the compact vectorization preserves inner products
    #     <vec(X), vec(Y)> = tr[XY]
    import numpy as np

    from qsep.vectorize import mat_to_vec

    np.random.seed(1)

    for iscomplex in [False, True]:
        for n in [1, 2, 5]:
            X = _rand_herm(n, iscomplex)
            Y = _rand_herm(n, iscomplex)
            x = mat_to_vec(X, compact=True)
            y = mat_to_vec(Y, compact=True)

            assert np.isclose(
                (x.T @ y)[0, 0], np.trace(X @ Y).real
            ), "qsep.vectorize.mat_to_vec does not preserve inner products"


def test_vec_dims():
    # Tests that vectors have the expected lengths and that vec_to_mat
    # inverts mat_to_vec
    import numpy as np

    from qsep.vectorize import mat_dim, mat_to_vec, vec_dim, vec_to_mat

    np.random.seed(1)

    for iscomplex in [False, True]:
        for compact in [False, True]:
            X = _rand_herm(4, iscomplex)
            x = mat_to_vec(X, iscomplex=iscomplex, compact=compact)

            assert x.shape == (vec_dim(4, iscomplex, compact), 1)
            assert mat_dim(x.size, iscomplex, compact) == 4
            assert np.allclose(
                vec_to_mat(x, iscomplex=iscomplex, compact=compact), X
            ), "qsep.vectorize.vec_to_mat does not invert mat_to_vec"

    assert vec_dim(3, iscomplex=True, compact=True) == 9
    assert vec_dim(3, iscomplex=False, compact=True) == 6
    assert vec_dim(3, iscomplex=True, compact=False) == 18


def test_compact_layout():
    # Tests the ordering and scaling of the compact vectorization
    import numpy as np

    from qsep.vectorize import mat_to_vec

    X = np.array([[1.0, 2 + 3j], [2 - 3j, 4.0]])
    rt2 = np.sqrt(2.0)

    assert np.allclose(
        mat_to_vec(X, compact=True).ravel(), [1.0, 2 * rt2, 3 * rt2, 4.0]
    )
    assert np.allclose(
        mat_to_vec(X.real, compact=True).ravel(), [1.0, 2 * rt2, 4.0]
    )
    assert np.allclose(mat_to_vec(2.5, compact=True).ravel(), [2.5])


def test_lin_to_mat():
    # Tests that the matrix representation of a linear map acts as the map
    import numpy as np

    from qsep.quantum import p_tr, partial_transpose
    from qsep.vectorize import lin_to_mat, mat_to_vec

    np.random.seed(1)

    dims = [2, 3]
    for iscomplex in [False, True]:
        X = _rand_herm(6, iscomplex)
        x = mat_to_vec(X, iscomplex=iscomplex, compact=True)

        L = lin_to_mat(lambda M: p_tr(M, dims, 0), (6, 3), iscomplex,
                       compact=(True, True))
        assert np.allclose(
            L @ x, mat_to_vec(p_tr(X, dims, 0), iscomplex=iscomplex, compact=True)
        ), "qsep.vectorize.lin_to_mat does not represent the partial trace"

        L = lin_to_mat(lambda M: partial_transpose(M, dims, 1), (6, 6),
                       iscomplex, compact=(True, False))
        assert np.allclose(
            L @ x,
            mat_to_vec(partial_transpose(X, dims, 1), iscomplex=iscomplex),
        ), "qsep.vectorize.lin_to_mat does not represent the partial transpose"


def test_eye_unpacks():
    # Tests that eye(compact=(True, False)) maps compact to full vectors
    import numpy as np

    from qsep.vectorize import eye, mat_to_vec

    np.random.seed(1)

    for iscomplex in [False, True]:
        X = _rand_herm(3, iscomplex)
        E = eye(3, iscomplex=iscomplex, compact=(True, False))
        assert np.allclose(
            E @ mat_to_vec(X, iscomplex=iscomplex, compact=True),
            mat_to_vec(X, iscomplex=iscomplex, compact=False),
        )


def test_real_vectorization_of_complex():
    # A complex matrix can only be vectorized as real symmetric if its
    # imaginary part vanishes
    import numpy as np
    import pytest

    from qsep.vectorize import mat_to_vec

    X = np.array([[0.5, 0.5j], [-0.5j, 0.5]])
    with pytest.raises(ValueError):
        mat_to_vec(X, iscomplex=False, compact=True)

    Y = np.array([[0.5, 0.25], [0.25, 0.5]], dtype=np.complex128)
    assert np.allclose(
        mat_to_vec(Y, iscomplex=False, compact=True),
        mat_to_vec(Y.real, compact=True),
    )


def test_full_to_compact_op():
    # Tests that the transpose of the sparse full-to-compact operator
    # unpacks compact vectors into the full layout
    import numpy as np
    import scipy as sp

    from qsep.vectorize import eye, get_full_to_compact_op, mat_to_vec

    np.random.seed(1)

    for iscomplex in [False, True]:
        for n in [1, 3, 4]:
            unpack = get_full_to_compact_op(n, iscomplex).T
            assert sp.sparse.issparse(unpack)
            assert np.allclose(
                unpack.toarray(), eye(n, iscomplex=iscomplex, compact=(True, False))
            ), "Sparse unpacking does not match the identity map"

            X = _rand_herm(n, iscomplex)
            assert np.allclose(
                unpack @ mat_to_vec(X, iscomplex=iscomplex, compact=True),
                mat_to_vec(X, iscomplex=iscomplex),
            )
