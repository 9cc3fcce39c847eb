"""
Gaussian Kernel Density Estimate
================================

This module provides the kernel density evaluator behind continuous empirical
models and the bandwidth selection rules:

- ``"silverman"``: ``h = 1.06 * sigma * n^(-1/5)`` with the unbiased sample
  standard deviation;
- ``"likelihood"``: the multiplier of the Silverman bandwidth among
  ``0.5, 0.75, 1, 1.25, 1.5, 2`` with the largest leave-one-out
  log-likelihood;
- an explicit positive bandwidth.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from math import isfinite, log, pi, sqrt
from typing import TYPE_CHECKING, cast

import numpy as np
from scipy import special as _sp_special

from pysatl_empirical.types import BandwidthRule, Interval1D

if TYPE_CHECKING:
    from collections.abc import Callable

    import numpy.typing as npt

    from pysatl_empirical.types import FloatArray

logger = logging.getLogger(__name__)

LIKELIHOOD_MULTIPLIERS: tuple[float, ...] = (0.5, 0.75, 1.0, 1.25, 1.5, 2.0)
_TINY = np.finfo(np.float64).tiny
_LOG_SQRT_2PI = 0.5 * log(2.0 * pi)
BLOCK_ELEMENTS = 1 << 22
"""Largest number of (point, observation) pairs evaluated in one block."""


class GaussianKDE:
    """
    Gaussian kernel density estimate of a one-dimensional sample.

    Parameters
    ----------
    data : array_like
        Observations (kernel centres).
    bandwidth : float
        Kernel standard deviation ``h > 0``.

    Notes
    -----
    ``pdf(x) = (1 / (n h)) sum phi((x - x_i) / h)`` and
    ``cdf(x) = (1 / n) sum Phi((x - x_i) / h)``; the CDF is evaluated in closed
    form and is non-decreasing with values in ``[0, 1]``.
    Evaluation runs in blocks of at most ``BLOCK_ELEMENTS`` point-observation
    pairs, so memory stays bounded for large samples and query grids.
    """

    __slots__ = ("_data", "_bandwidth")

    def __init__(self, data: npt.ArrayLike, bandwidth: float) -> None:
        if not (isfinite(bandwidth) and bandwidth > 0):
            raise ValueError(f"bandwidth must be positive and finite, got {bandwidth!r}")
        self._data = np.asarray(data, dtype=np.float64)
        self._bandwidth = float(bandwidth)

    @property
    def bandwidth(self) -> float:
        return self._bandwidth

    @property
    def data(self) -> FloatArray:
        return self._data

    @property
    def n(self) -> int:
        return int(self._data.size)

    def _reduce(
        self, x: npt.ArrayLike, kernel_sum: Callable[[FloatArray], FloatArray]
    ) -> FloatArray:
        # Standardized distances are materialised for at most BLOCK_ELEMENTS pairs at once.
        arr = np.asarray(x, dtype=np.float64)
        flat = arr.ravel()
        out = np.empty(flat.size, dtype=np.float64)
        rows = max(1, BLOCK_ELEMENTS // max(self.n, 1))
        for start in range(0, flat.size, rows):
            z = (flat[start : start + rows, np.newaxis] - self._data) / self._bandwidth
            out[start : start + rows] = kernel_sum(z)
        return cast("FloatArray", out.reshape(arr.shape)[()])

    def pdf(self, x: npt.ArrayLike) -> FloatArray:
        total = self._reduce(x, lambda z: np.exp(-0.5 * z * z).sum(axis=-1))
        return total / (self.n * self._bandwidth * sqrt(2.0 * pi))

    def logpdf(self, x: npt.ArrayLike) -> FloatArray:
        log_total = self._reduce(x, lambda z: _sp_special.logsumexp(-0.5 * z * z, axis=-1))
        return log_total - log(self.n * self._bandwidth) - _LOG_SQRT_2PI

    def cdf(self, x: npt.ArrayLike) -> FloatArray:
        return self._reduce(x, lambda z: _sp_special.ndtr(z).mean(axis=-1))

    def sf(self, x: npt.ArrayLike) -> FloatArray:
        return self._reduce(x, lambda z: _sp_special.ndtr(-z).mean(axis=-1))

    def loo_pdf(self) -> FloatArray:
        """
        Leave-one-out densities at the observations.

        Returns
        -------
        numpy.ndarray
            ``f_{-i}(x_i)`` for every observation; requires ``n >= 2``.
        """
        n = self.n
        if n < 2:
            raise ValueError("Leave-one-out density requires at least two observations.")
        totals = np.empty(n, dtype=np.float64)
        rows = max(1, BLOCK_ELEMENTS // n)
        for start in range(0, n, rows):
            stop = min(start + rows, n)
            z = (self._data[start:stop, np.newaxis] - self._data) / self._bandwidth
            kernel = np.exp(-0.5 * z * z)
            kernel[np.arange(stop - start), np.arange(start, stop)] = 0.0
            totals[start:stop] = kernel.sum(axis=1)
        return totals / ((n - 1) * self._bandwidth * sqrt(2.0 * pi))

    def loo_log_likelihood(self) -> float:
        """Leave-one-out log-likelihood ``sum ln f_{-i}(x_i)`` (densities floored at ``tiny``)."""
        return float(np.sum(np.log(np.maximum(self.loo_pdf(), _TINY))))

    def effective_support(self, extension: float) -> Interval1D:
        """Observed range widened by ``extension`` bandwidths on each side."""
        pad = extension * self._bandwidth
        return Interval1D(float(self._data.min() - pad), float(self._data.max() + pad))

    def resample(self, size: int, rng: np.random.Generator) -> FloatArray:
        """Draw from the kernel mixture."""
        centres = rng.choice(self._data, size=size, replace=True)
        return centres + rng.normal(0.0, self._bandwidth, size=size)


def silverman_bandwidth(data: npt.ArrayLike) -> float:
    """
    Silverman's rule of thumb ``1.06 * sigma * n^(-1/5)``.

    Returns ``1.0`` for fewer than two observations or a degenerate spread.
    """
    arr = np.asarray(data, dtype=np.float64)
    if arr.size < 2:
        return 1.0
    sigma = float(arr.std(ddof=1))
    h = 1.06 * sigma * arr.size ** (-0.2)
    if not (isfinite(h) and h > 0):
        return 1.0
    return h


def likelihood_bandwidth(data: npt.ArrayLike) -> float:
    """Multiple of the Silverman bandwidth maximising the leave-one-out log-likelihood."""
    arr = np.asarray(data, dtype=np.float64)
    base = silverman_bandwidth(arr)
    if arr.size < 2:
        return base

    scores = [
        GaussianKDE(arr, m * base).loo_log_likelihood() for m in LIKELIHOOD_MULTIPLIERS
    ]
    best = int(np.argmax(scores))
    logger.debug(
        "Likelihood bandwidth: multiplier %g of %g (scores %s)",
        LIKELIHOOD_MULTIPLIERS[best],
        base,
        scores,
    )
    return LIKELIHOOD_MULTIPLIERS[best] * base


def select_bandwidth(data: npt.ArrayLike, rule: BandwidthRule | str | float) -> float:
    """
    Resolve a bandwidth rule or an explicit value.

    Parameters
    ----------
    data : array_like
        Observations.
    rule : BandwidthRule, str or float
        Rule name or explicit positive bandwidth.

    Returns
    -------
    float
        Positive bandwidth.

    Raises
    ------
    ValueError
        If an explicit bandwidth is not positive and finite or the rule is
        unknown.
    """
    if isinstance(rule, int | float) and not isinstance(rule, bool):
        h = float(rule)
        if not (isfinite(h) and h > 0):
            raise ValueError(f"bandwidth must be positive and finite, got {rule!r}")
        return h

    match BandwidthRule(rule):
        case BandwidthRule.SILVERMAN:
            return silverman_bandwidth(data)
        case BandwidthRule.LIKELIHOOD:
            return likelihood_bandwidth(data)


__all__ = [
    "GaussianKDE",
    "LIKELIHOOD_MULTIPLIERS",
    "silverman_bandwidth",
    "likelihood_bandwidth",
    "select_bandwidth",
]
