"""
Core Type Definitions
=====================

Fundamental types and enumerations used throughout pysatl-empirical.
"""

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, cast, overload

import numpy as np
from numpy.typing import NDArray


class Kind(StrEnum):
    """
    Enumeration of distribution kinds.

    Attributes
    ----------
    DISCRETE : str
        Lattice-valued empirical distribution.
    CONTINUOUS : str
        Kernel-smoothed empirical distribution.
    """

    DISCRETE = "discrete"
    CONTINUOUS = "continuous"


class BandwidthRule(StrEnum):
    """
    Bandwidth selection rules for the Gaussian KDE.

    Attributes
    ----------
    SILVERMAN : str
        Rule of thumb ``h = 1.06 * sigma * n^(-1/5)``.
    LIKELIHOOD : str
        Multiplier of the rule of thumb maximising the leave-one-out
        log-likelihood.
    """

    SILVERMAN = "silverman"
    LIKELIHOOD = "likelihood"


class IntegrationRule(StrEnum):
    """Quadrature rules accepted by :func:`pysatl_empirical.numerics.integrate`."""

    QUAD = "quad"
    SIMPSON = "simpson"


class BootstrapMethod(StrEnum):
    """
    Bootstrap confidence interval construction.

    Attributes
    ----------
    PERCENTILE : str
        Plain percentile interval.
    BCA : str
        Bias-corrected and accelerated interval (jackknife acceleration).
    """

    PERCENTILE = "percentile"
    BCA = "bca"


NumPyNumber = np.floating[Any] | np.integer[Any]
"""Type alias for NumPy numeric types."""

Number = NumPyNumber | int | float
"""Type alias for all numeric types."""

NumericArray = NDArray[NumPyNumber]
"""Type alias for numeric arrays."""

FloatArray = NDArray[np.float64]
"""Type alias for canonical float arrays."""

BoolArray = NDArray[np.bool_]
"""Type alias for boolean arrays."""

ScalarFunc = Callable[[float], float]
"""Type alias for scalar functions (float -> float)."""

type GenericCharacteristicName = str
"""Type alias for characteristic names (e.g., 'pdf', 'cdf')."""


@dataclass(frozen=True, slots=True)
class Interval1D:
    """
    Closed interval ``[left, right]`` on the real line.

    Used for the effective support of a kernel density estimate, the span of
    a lattice support and integration bounds. Endpoints may be infinite.

    Raises
    ------
    ValueError
        If an endpoint is NaN or ``left > right``.
    """

    left: float
    right: float

    def __post_init__(self) -> None:
        if not self.left <= self.right:
            raise ValueError(f"Invalid interval: [{self.left}, {self.right}]")

    @overload
    def contains(self, x: Number) -> bool: ...
    @overload
    def contains(self, x: NumericArray) -> BoolArray: ...

    def contains(self, x: Number | NumericArray) -> bool | BoolArray:
        """Membership test; infinite endpoints are never members."""
        arr = np.asarray(x, dtype=np.float64)
        result = np.isfinite(arr) & (arr >= self.left) & (arr <= self.right)

        if np.ndim(arr) == 0:
            return bool(result)
        return cast(BoolArray, result)

    def __contains__(self, x: object) -> bool:
        return bool(self.contains(cast(Number, x)))

    @property
    def width(self) -> float:
        return float(self.right - self.left)


class CharacteristicName(StrEnum):
    """
    Enumeration of characteristics exposed by empirical models.

    Notes
    -----
    ``PPF`` and ``ISF`` are the lower- and upper-tail quantile functions
    (``quantile`` and ``quantile_complement`` on the facade).
    """

    PDF = "pdf"
    PMF = "pmf"
    CDF = "cdf"
    SF = "sf"
    PPF = "ppf"
    ISF = "isf"
    HAZARD = "hazard"
    CHF = "chf"


__all__ = [
    "Kind",
    "BandwidthRule",
    "IntegrationRule",
    "BootstrapMethod",
    "GenericCharacteristicName",
    "ScalarFunc",
    "Interval1D",
    "BoolArray",
    "FloatArray",
    "NumPyNumber",
    "Number",
    "NumericArray",
    "CharacteristicName",
]
