"""
Discrete Empirical Model
========================

Laplace-smoothed frequency model of a lattice-valued sample.

- :class:`FrequencyTable` — observed lattice values with additive smoothing.
- :class:`DiscreteEmpiricalModel` — probability model built on the table.

Notes
-----
With ``U`` distinct values among ``n`` observations and pseudo-count ``alpha``,
an observed value with count ``c`` has probability
``(c + alpha) / (n + alpha * U)``; the probabilities of observed values sum to
one. Values never observed have zero mass in the model, while
:meth:`FrequencyTable.probability_of` assigns them ``alpha / (n + alpha * U)``
for divergence computations, which must never see an exact zero.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

import numpy as np

from pysatl_empirical.distributions.classification import Classification, fits_lattice
from pysatl_empirical.distributions.distribution import EmpiricalModel
from pysatl_empirical.distributions.sampling import EmpiricalSample
from pysatl_empirical.distributions.support import LatticeDiscreteSupport
from pysatl_empirical.types import CharacteristicName, Interval1D, Kind

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    import numpy.typing as npt

    from pysatl_empirical.config import EstimationConfig
    from pysatl_empirical.types import FloatArray


@dataclass(frozen=True, slots=True, eq=False)
class FrequencyTable:
    """
    Smoothed frequencies of observed lattice values.

    Parameters
    ----------
    values : numpy.ndarray
        Distinct observed values in ascending order.
    counts : numpy.ndarray
        Multiplicities of ``values``.
    alpha : float
        Additive pseudo-count.
    """

    values: FloatArray
    counts: npt.NDArray[np.intp]
    alpha: float

    @classmethod
    def from_sample(cls, sample: EmpiricalSample, alpha: float) -> FrequencyTable:
        return cls(values=sample.unique, counts=sample.counts, alpha=float(alpha))

    @property
    def n(self) -> int:
        return int(self.counts.sum())

    @property
    def unique_count(self) -> int:
        return int(self.values.size)

    @property
    def denominator(self) -> float:
        """Normalising constant ``n + alpha * U``."""
        return self.n + self.alpha * self.unique_count

    @property
    def probabilities(self) -> FloatArray:
        """Smoothed probabilities of :attr:`values`."""
        return (self.counts + self.alpha) / self.denominator

    def probability_of(self, x: float, tolerance: float = 0.0) -> float:
        """
        Smoothed probability of ``x``; unseen values get ``alpha / denominator``.

        Parameters
        ----------
        x : float
            Query value.
        tolerance : float, default 0.0
            Absolute distance within which ``x`` matches an observed value.
        """
        idx = int(np.searchsorted(self.values, x - tolerance, side="left"))
        if idx < self.values.size and abs(self.values[idx] - x) <= tolerance:
            return float((self.counts[idx] + self.alpha) / self.denominator)
        return self.alpha / self.denominator


class DiscreteEmpiricalModel(EmpiricalModel):
    """
    Empirical model of a lattice-valued sample.

    Parameters
    ----------
    sample : EmpiricalSample
        Observations.
    classification : Classification
        Discrete classification of ``sample``.
    alpha : float, optional
        Pseudo-count; defaults to ``config.smoothing_alpha``.
    config : EstimationConfig, optional
        Defaults; the active configuration when omitted.

    Notes
    -----
    ``ppf(p)`` is the smallest support point with ``cdf >= p`` and ``isf(q)``
    the largest support point with ``sf >= q``; ``isf(0)`` is the maximum.
    """

    kind = Kind.DISCRETE

    def __init__(
        self,
        sample: EmpiricalSample,
        classification: Classification,
        *,
        alpha: float | None = None,
        config: EstimationConfig | None = None,
    ) -> None:
        if not classification.is_discrete:
            raise ValueError("DiscreteEmpiricalModel requires a discrete classification.")
        super().__init__(sample, classification, config)

        self._alpha = self.config.smoothing_alpha if alpha is None else float(alpha)
        if self._alpha <= 0:
            raise ValueError("alpha must be positive.")

        self._table = FrequencyTable.from_sample(sample, self._alpha)
        self._support = LatticeDiscreteSupport(
            self._table.values,
            step=float(classification.lattice_step),  # type: ignore[arg-type]
            origin=float(classification.lattice_origin),  # type: ignore[arg-type]
            tolerance=classification.tolerance,
            assume_sorted=True,
        )

        probs = self._table.probabilities
        cum = np.cumsum(probs)
        cum[-1] = 1.0
        self._probs = probs
        self._cum = cum

    @property
    def table(self) -> FrequencyTable:
        return self._table

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def support(self) -> LatticeDiscreteSupport:
        return self._support

    @property
    def support_bounds(self) -> Interval1D:
        return self._support.bounds

    @property
    def lattice_step(self) -> float:
        return self._support.step

    @property
    def lattice_origin(self) -> float:
        return self._support.origin

    # --- kernels ------------------------------------------------------------

    def _pdf(self, x: FloatArray) -> FloatArray:
        idx = self._support.index_of(x)
        return np.where(idx >= 0, self._probs[np.maximum(idx, 0)], 0.0)

    def _cdf(self, x: FloatArray) -> FloatArray:
        k = self._support.count_leq(x)
        return np.where(k > 0, self._cum[np.maximum(k - 1, 0)], 0.0)

    def _ppf(self, p: FloatArray) -> FloatArray:
        tol = self.config.probability_tolerance
        idx = np.searchsorted(self._cum, p - tol, side="left")
        return self._table.values[np.minimum(idx, self._cum.size - 1)]

    def _isf(self, q: FloatArray) -> FloatArray:
        tol = self.config.probability_tolerance
        count = np.searchsorted(self._cum, 1.0 - q + tol, side="right")
        return self._table.values[np.maximum(count - 1, 0)]

    def pmf(self, x: float | npt.ArrayLike) -> float | FloatArray:
        """Probability mass at ``x`` (alias of :meth:`pdf`)."""
        return self.pdf(x)

    # --- summaries ------------------------------------------------------------

    def _central_moment(self, order: int) -> float:
        return float(np.sum((self._table.values - self.mean) ** order * self._probs))

    @cached_property
    def mean(self) -> float:
        return float(np.sum(self._table.values * self._probs))

    @cached_property
    def variance(self) -> float:
        return self._central_moment(2)

    @property
    def skewness(self) -> float | None:
        var = self.variance
        if var <= 0.0:
            return None
        return self._central_moment(3) / var**1.5

    @property
    def kurtosis(self) -> float | None:
        var = self.variance
        if var <= 0.0:
            return None
        return self._central_moment(4) / var**2

    @property
    def mode(self) -> float:
        return float(self._table.values[int(np.argmax(self._probs))])

    @cached_property
    def entropy(self) -> float:
        """Smoothed Shannon entropy with the Miller–Madow correction ``(U - 1) / (2n)``."""
        from pysatl_empirical.estimators.entropy import discrete_entropy

        return discrete_entropy(self._table)

    # --- resampling -----------------------------------------------------------

    def refit(self, data: npt.ArrayLike) -> DiscreteEmpiricalModel:
        """
        Rebuild the model from other observations on the same lattice.

        Off-lattice observations make the result inconsistent, so they are
        rejected.
        """
        sample = data if isinstance(data, EmpiricalSample) else EmpiricalSample(data)
        cls = self._classification
        if not fits_lattice(
            sample.unique,
            float(cls.lattice_step),  # type: ignore[arg-type]
            float(cls.lattice_origin),  # type: ignore[arg-type]
            max(cls.tolerance, np.finfo(np.float64).eps),
        ):
            raise ValueError("Observations do not lie on the model lattice.")
        return DiscreteEmpiricalModel(sample, cls, alpha=self._alpha, config=self.config)

    def draw(self, n: int, rng: np.random.Generator) -> FloatArray:
        return rng.choice(self._table.values, size=n, replace=True, p=self._probs)

    def _computations(self) -> dict[str, Callable[[Any], Any]]:
        return {**super()._computations(), CharacteristicName.PMF: self.pmf}


__all__ = [
    "FrequencyTable",
    "DiscreteEmpiricalModel",
]
