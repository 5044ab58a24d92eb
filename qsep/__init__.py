# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

# __init__.py
from qsep._version import __version__  # noqa

import qsep.quantum  # noqa
import qsep.vectorize  # noqa
from qsep.model import Affine, Program, Solution, SolveFailure, Variable  # noqa
from qsep.entanglement import dps_constraints, DPSExtension  # noqa
from qsep.entanglement import entanglement_entropy, random_robustness  # noqa
from qsep.entanglement import schmidt_number  # noqa
