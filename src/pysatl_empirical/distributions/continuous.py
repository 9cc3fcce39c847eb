"""
Continuous Empirical Model
==========================

Kernel-smoothed model of a continuous sample built on :class:`GaussianKDE`.

Notes
-----
- The effective support is the observed range widened by
  ``config.support_extension`` bandwidths on each side; quantiles are searched
  on it and ``ppf(0)``/``ppf(1)`` return its endpoints.
- Moments are those of the kernel mixture: the variance is
  ``m2 + h^2`` and the fourth central moment ``m4 + 6 h^2 m2 + 3 h^4``, where
  ``m_k`` are the central sample moments.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from functools import cached_property
from typing import TYPE_CHECKING

import numpy as np
from scipy import optimize as _sp_optimize

from pysatl_empirical.distributions.classification import Classification
from pysatl_empirical.distributions.distribution import EmpiricalModel
from pysatl_empirical.distributions.inversion import invert_monotone
from pysatl_empirical.distributions.kde import GaussianKDE, select_bandwidth
from pysatl_empirical.distributions.sampling import EmpiricalSample
from pysatl_empirical.distributions.support import ContinuousSupport
from pysatl_empirical.types import Interval1D, Kind

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_empirical.config import EstimationConfig
    from pysatl_empirical.types import BandwidthRule, FloatArray

logger = logging.getLogger(__name__)


class ContinuousEmpiricalModel(EmpiricalModel):
    """
    Empirical model of a continuous sample.

    Parameters
    ----------
    sample : EmpiricalSample
        Observations.
    classification : Classification, optional
        Continuous classification of ``sample``.
    bandwidth : BandwidthRule, str or float, optional
        Bandwidth rule or explicit value; defaults to ``config.bandwidth_rule``.
    config : EstimationConfig, optional
        Defaults; the active configuration when omitted.
    """

    kind = Kind.CONTINUOUS

    def __init__(
        self,
        sample: EmpiricalSample,
        classification: Classification | None = None,
        *,
        bandwidth: BandwidthRule | str | float | None = None,
        config: EstimationConfig | None = None,
    ) -> None:
        classification = classification or Classification.continuous()
        if classification.is_discrete:
            raise ValueError("ContinuousEmpiricalModel requires a continuous classification.")
        super().__init__(sample, classification, config)

        self._bandwidth_setting = self.config.bandwidth_rule if bandwidth is None else bandwidth
        h = select_bandwidth(sample.sorted, self._bandwidth_setting)
        self._kde = GaussianKDE(sample.sorted, h)

        bounds = self._kde.effective_support(self.config.support_extension)
        self._support = ContinuousSupport(bounds.left, bounds.right)
        logger.debug("Continuous model: n=%d, bandwidth=%g, support=%s", sample.n, h, bounds)

    @property
    def kde(self) -> GaussianKDE:
        return self._kde

    @property
    def bandwidth(self) -> float:
        return self._kde.bandwidth

    def kde_with(self, bandwidth: BandwidthRule | str | float | None = None) -> GaussianKDE:
        """KDE of the sample with another bandwidth; the model's own KDE when omitted."""
        if bandwidth is None:
            return self._kde
        data = self._sample.sorted
        return GaussianKDE(data, select_bandwidth(data, bandwidth))

    @property
    def support(self) -> ContinuousSupport:
        return self._support

    @property
    def support_bounds(self) -> Interval1D:
        return Interval1D(self._support.left, self._support.right)

    # --- kernels ------------------------------------------------------------

    def _pdf(self, x: FloatArray) -> FloatArray:
        return self._kde.pdf(x)

    def _cdf(self, x: FloatArray) -> FloatArray:
        return self._kde.cdf(x)

    def _sf(self, x: FloatArray) -> FloatArray:
        return self._kde.sf(x)

    def _scalar_cdf(self, x: float) -> float:
        return float(self._kde.cdf(x))

    def _scalar_sf(self, x: float) -> float:
        return float(self._kde.sf(x))

    def _ppf(self, p: FloatArray) -> FloatArray:
        bounds = self.support_bounds

        def _one(level: float) -> float:
            return invert_monotone(self._scalar_cdf, level, bounds, increasing=True)

        return np.vectorize(_one, otypes=[np.float64])(p)

    def _isf(self, q: FloatArray) -> FloatArray:
        bounds = self.support_bounds

        def _one(level: float) -> float:
            return invert_monotone(self._scalar_sf, level, bounds, increasing=False)

        return np.vectorize(_one, otypes=[np.float64])(q)

    # --- summaries ------------------------------------------------------------

    def _sample_central_moment(self, order: int) -> float:
        data = self._sample.array
        return float(np.mean((data - data.mean()) ** order))

    @property
    def mean(self) -> float:
        return self._sample.mean()

    @cached_property
    def variance(self) -> float:
        return self._sample_central_moment(2) + self.bandwidth**2

    @property
    def skewness(self) -> float | None:
        var = self.variance
        if var <= 0.0:
            return None
        return self._sample_central_moment(3) / var**1.5

    @property
    def kurtosis(self) -> float | None:
        var = self.variance
        if var <= 0.0:
            return None
        h2 = self.bandwidth**2
        m2 = self._sample_central_moment(2)
        m4 = self._sample_central_moment(4)
        return (m4 + 6.0 * h2 * m2 + 3.0 * h2 * h2) / var**2

    @cached_property
    def mode(self) -> float:
        """
        Location of the highest density.

        A coarse grid over the effective support is refined with a bounded
        scalar search between the neighbours of the best grid node.
        """
        bounds = self.support_bounds
        grid = np.linspace(bounds.left, bounds.right, self.config.mode_grid_size)
        density = self._kde.pdf(grid)
        best = int(np.argmax(density))

        lo = grid[max(best - 1, 0)]
        hi = grid[min(best + 1, grid.size - 1)]
        refined = _sp_optimize.minimize_scalar(
            lambda x: -float(self._kde.pdf(x)), bounds=(lo, hi), method="bounded"
        )
        if refined.success and -refined.fun >= density[best]:
            return float(refined.x)
        return float(grid[best])

    @cached_property
    def entropy(self) -> float:
        """
        Differential entropy estimate.

        Kozachenko–Leonenko with ``config.knn_k`` neighbours when the sample
        has more than ``k`` observations, KDE plug-in otherwise.
        """
        from pysatl_empirical.estimators.entropy import kde_entropy, knn_entropy

        k = self.config.knn_k
        if self._sample.n > k:
            return knn_entropy(self._sample, k)
        return kde_entropy(self)

    # --- resampling -----------------------------------------------------------

    def refit(self, data: npt.ArrayLike) -> ContinuousEmpiricalModel:
        """Rebuild the model from other observations with the same bandwidth setting."""
        sample = data if isinstance(data, EmpiricalSample) else EmpiricalSample(data)
        return ContinuousEmpiricalModel(
            sample, self._classification, bandwidth=self._bandwidth_setting, config=self.config
        )

    def draw(self, n: int, rng: np.random.Generator) -> FloatArray:
        return self._kde.resample(n, rng)


__all__ = [
    "ContinuousEmpiricalModel",
]
