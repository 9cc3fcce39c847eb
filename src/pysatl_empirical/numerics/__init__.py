"""
Numerics subpackage

Thin adapters over :mod:`scipy` used by the estimators:

- quadrature with convergence diagnostics (:mod:`.integration`);
- special functions (:mod:`.special`).
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from .integration import IntegrationResult, integrate, integrate_or_raise
from .special import digamma, log_gamma

__all__ = [
    "IntegrationResult",
    "integrate",
    "integrate_or_raise",
    "digamma",
    "log_gamma",
]
