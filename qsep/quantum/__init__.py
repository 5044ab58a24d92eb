# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

# __init__.py
from qsep.quantum.entropy import entropy, binary_entropy  # noqa
from qsep.quantum.entropy import relative_entropy, binary_relative_entropy  # noqa
from qsep.quantum.entropy import conditional_entropy  # noqa
from qsep.quantum.operator import p_tr, partial_transpose  # noqa
from qsep.quantum.operator import ketbra, max_entangled  # noqa
from qsep.quantum.schmidt import schmidt_decomposition  # noqa
from qsep.quantum.schmidt import pure_entanglement_entropy  # noqa
from qsep.quantum.symmetric import sym_dim, symmetric_projection  # noqa
from qsep.quantum.symmetric import permute_systems  # noqa
