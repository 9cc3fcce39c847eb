from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from scipy import special as _sp_special


def digamma(x: float) -> float:
    """Digamma function ``psi(x) = d/dx ln Gamma(x)``."""
    return float(_sp_special.digamma(x))


def log_gamma(x: float) -> float:
    """Natural logarithm of the absolute value of the Gamma function."""
    return float(_sp_special.gammaln(x))


__all__ = [
    "digamma",
    "log_gamma",
]
