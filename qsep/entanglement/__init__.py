# Copyright (c) 2024, the QSEP developers

# This Python package QSEP is licensed under the MIT license; see LICENSE.md
# file in the root directory

# __init__.py
from qsep.entanglement.dps import dps_constraints, DPSExtension  # noqa
from qsep.entanglement.estimators import entanglement_entropy  # noqa
from qsep.entanglement.estimators import random_robustness, schmidt_number  # noqa
