"""
Distributions subpackage

Empirical probability models and their building blocks:

- immutable samples (:mod:`.sampling`);
- supports (:mod:`.support`);
- discrete/continuous classification (:mod:`.classification`);
- Gaussian kernel density estimate (:mod:`.kde`);
- model base and protocol (:mod:`.distribution`);
- discrete and continuous models (:mod:`.discrete`, :mod:`.continuous`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .classification import Classification, classify, fits_lattice
from .computation import AnalyticalComputation
from .continuous import ContinuousEmpiricalModel
from .discrete import DiscreteEmpiricalModel, FrequencyTable
from .distribution import Distribution, EmpiricalModel
from .kde import GaussianKDE, select_bandwidth
from .sampling import EmpiricalSample, Sample
from .support import ContinuousSupport, DiscreteSupport, LatticeDiscreteSupport, Support

__all__ = [
    # samples
    "Sample",
    "EmpiricalSample",
    # supports
    "Support",
    "ContinuousSupport",
    "DiscreteSupport",
    "LatticeDiscreteSupport",
    # classification
    "Classification",
    "classify",
    "fits_lattice",
    # computation primitives
    "AnalyticalComputation",
    # models
    "Distribution",
    "EmpiricalModel",
    "FrequencyTable",
    "DiscreteEmpiricalModel",
    "GaussianKDE",
    "select_bandwidth",
    "ContinuousEmpiricalModel",
]
