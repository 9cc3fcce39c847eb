"""
Empirical Distribution
======================

Single entry point that turns a sample into a fitted empirical model.

:class:`Empirical` classifies the sample, builds the matching model
(:class:`~pysatl_empirical.distributions.DiscreteEmpiricalModel` or
:class:`~pysatl_empirical.distributions.ContinuousEmpiricalModel`) and exposes
its characteristics together with the entropy, divergence and multimodality
estimators.

Examples
--------
>>> dist = Empirical([1, 2, 2, 4])
>>> dist.is_discrete
True
>>> dist.quantile(0.5)
2.0
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from functools import cached_property
from typing import TYPE_CHECKING, Any

import numpy as np

from pysatl_empirical.config import get_config
from pysatl_empirical.distributions.classification import classify
from pysatl_empirical.distributions.continuous import ContinuousEmpiricalModel
from pysatl_empirical.distributions.discrete import DiscreteEmpiricalModel
from pysatl_empirical.distributions.distribution import Distribution
from pysatl_empirical.distributions.sampling import EmpiricalSample, as_sample
from pysatl_empirical.estimators.divergence import (
    kl_divergence,
    kl_divergence_estimate,
    kl_divergence_to_reference,
)
from pysatl_empirical.estimators.entropy import estimate_entropy
from pysatl_empirical.estimators.multimodality import is_likely_multimodal

if TYPE_CHECKING:
    from collections.abc import Mapping

    import numpy.typing as npt

    from pysatl_empirical.config import EstimationConfig
    from pysatl_empirical.distributions.classification import Classification
    from pysatl_empirical.distributions.computation import AnalyticalComputation
    from pysatl_empirical.distributions.distribution import EmpiricalModel, Points
    from pysatl_empirical.distributions.support import Support
    from pysatl_empirical.estimators.bootstrap import BootstrapResult, EntropyEstimate
    from pysatl_empirical.estimators.options import Estimator
    from pysatl_empirical.types import BandwidthRule, FloatArray, GenericCharacteristicName, Interval1D, Kind

logger = logging.getLogger(__name__)


def fit_model(
    samples: npt.ArrayLike,
    *,
    tolerance: float | None = None,
    bandwidth: BandwidthRule | str | float | None = None,
    config: EstimationConfig | None = None,
) -> EmpiricalModel:
    """
    Classify a sample and build the matching empirical model.

    Parameters
    ----------
    samples : array_like
        One-dimensional finite observations.
    tolerance : float, optional
        Absolute lattice tolerance of the classifier.
    bandwidth : BandwidthRule, str or float, optional
        KDE bandwidth rule or value; ignored for discrete samples.
    config : EstimationConfig, optional
        Defaults; the active configuration when omitted.

    Returns
    -------
    EmpiricalModel
        Discrete or continuous model of ``samples``.

    Raises
    ------
    EmptySampleError
        If ``samples`` is empty.
    NonFiniteValueError
        If ``samples`` contains NaN or infinity.
    """
    config = config or get_config()
    sample = as_sample(samples)
    classification = classify(sample, tolerance, config=config)
    if classification.is_discrete:
        return DiscreteEmpiricalModel(sample, classification, config=config)
    return ContinuousEmpiricalModel(sample, classification, bandwidth=bandwidth, config=config)


class Empirical(Distribution):
    """
    Empirical distribution of a finite real sample.

    Parameters
    ----------
    samples : array_like
        One-dimensional finite observations (any real dtype).
    tolerance : float, optional
        Absolute lattice tolerance of the discrete/continuous classifier.
    bandwidth : BandwidthRule, str or float, optional
        KDE bandwidth rule (``"silverman"``, ``"likelihood"``) or explicit
        positive value for continuous samples.
    config : EstimationConfig, optional
        Defaults; the active configuration when omitted.

    Notes
    -----
    Characteristics accept scalars or arrays and return a float for scalar
    input. Discrete models report probability masses through :meth:`pdf`.
    """

    def __init__(
        self,
        samples: npt.ArrayLike,
        *,
        tolerance: float | None = None,
        bandwidth: BandwidthRule | str | float | None = None,
        config: EstimationConfig | None = None,
    ) -> None:
        self._model = fit_model(samples, tolerance=tolerance, bandwidth=bandwidth, config=config)
        logger.debug("Fitted %r", self._model)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind}, n={self.samples.n})"

    # --- structure ------------------------------------------------------------

    @property
    def model(self) -> EmpiricalModel:
        return self._model

    @property
    def samples(self) -> EmpiricalSample:
        return self._model.sample

    @property
    def classification(self) -> Classification:
        return self._model.classification

    @property
    def kind(self) -> Kind:
        return self._model.kind

    @property
    def is_discrete(self) -> bool:
        return self._model.is_discrete

    @property
    def lattice_step(self) -> float | None:
        return self.classification.lattice_step

    @property
    def lattice_origin(self) -> float | None:
        return self.classification.lattice_origin

    @property
    def support(self) -> Support:
        return self._model.support

    @property
    def support_bounds(self) -> Interval1D:
        return self._model.support_bounds

    @property
    def analytical_computations(
        self,
    ) -> Mapping[GenericCharacteristicName, AnalyticalComputation[Any, Any]]:
        return self._model.analytical_computations

    # --- characteristics ------------------------------------------------------

    def pdf(self, x: Points) -> float | FloatArray:
        return self._model.pdf(x)

    def log_pdf(self, x: Points) -> float | FloatArray:
        return self._model.log_pdf(x)

    def cdf(self, x: Points) -> float | FloatArray:
        return self._model.cdf(x)

    def sf(self, x: Points) -> float | FloatArray:
        return self._model.sf(x)

    def hazard(self, x: Points) -> float | FloatArray:
        return self._model.hazard(x)

    def chf(self, x: Points) -> float | FloatArray:
        return self._model.chf(x)

    def ppf(self, p: Points) -> float | FloatArray:
        return self._model.ppf(p)

    def isf(self, q: Points) -> float | FloatArray:
        return self._model.isf(q)

    quantile = ppf
    quantile_complement = isf

    @property
    def mean(self) -> float:
        return self._model.mean

    @property
    def variance(self) -> float:
        return self._model.variance

    @property
    def skewness(self) -> float | None:
        return self._model.skewness

    @property
    def kurtosis(self) -> float | None:
        return self._model.kurtosis

    @property
    def kurtosis_excess(self) -> float | None:
        return self._model.kurtosis_excess

    @property
    def mode(self) -> float:
        return self._model.mode

    @property
    def median(self) -> float:
        return self._model.median

    @property
    def entropy(self) -> float:
        return self._model.entropy

    @cached_property
    def is_likely_multimodal(self) -> bool:
        return is_likely_multimodal(self.samples, self.classification)

    # --- estimators -----------------------------------------------------------

    def entropy_estimate(
        self,
        estimator: Estimator | str | None = None,
        bootstrap_samples: int = 0,
        confidence_level: float | None = None,
        *,
        method: str | None = None,
        seed: int | None = None,
        workers: int | None = None,
    ) -> EntropyEstimate:
        """
        Entropy with an optional bootstrap confidence interval.

        See :func:`~pysatl_empirical.estimators.estimate_entropy`.
        """
        return estimate_entropy(
            self._model,
            estimator,
            bootstrap_samples,
            confidence_level,
            method=method,
            seed=seed,
            workers=workers,
        )

    def kl_divergence(
        self,
        other: Empirical | EmpiricalModel,
        estimator: Estimator | str | None = None,
        strict: bool = False,
    ) -> float | None:
        """
        Kullback–Leibler divergence ``KL(self || other)``.

        Returns ``None`` when one distribution is discrete and the other
        continuous, unless ``strict`` is set, in which case
        :class:`~pysatl_empirical.errors.MismatchedSupportError` is raised.
        """
        return kl_divergence(self._model, _model_of(other), estimator, strict=strict)

    def kl_divergence_estimate(
        self,
        other: Empirical | EmpiricalModel,
        estimator: Estimator | str | None = None,
        bootstrap_samples: int = 0,
        confidence_level: float | None = None,
        *,
        strict: bool = False,
        method: str | None = None,
        seed: int | None = None,
        workers: int | None = None,
    ) -> BootstrapResult[float] | None:
        """KL divergence with a bootstrap interval over resamples of ``self``."""
        return kl_divergence_estimate(
            self._model,
            _model_of(other),
            estimator,
            bootstrap_samples,
            confidence_level,
            strict=strict,
            method=method,
            seed=seed,
            workers=workers,
        )

    def kl_divergence_to_reference(self, reference: Any) -> float | None:
        """KL divergence to a distribution exposing ``pdf`` or ``pmf``."""
        return kl_divergence_to_reference(self._model, reference)

    # --- sampling -------------------------------------------------------------

    def sample(self, n: int, rng: np.random.Generator | None = None) -> EmpiricalSample:
        """
        Draw observations from the fitted model.

        Parameters
        ----------
        n : int
            Number of draws, at least one.
        rng : numpy.random.Generator, optional
            Random generator; a fresh default generator when omitted.

        Returns
        -------
        EmpiricalSample
            Draws from the smoothed pmf (discrete) or the KDE mixture
            (continuous).
        """
        if n < 1:
            raise ValueError(f"n must be positive, got {n}")
        rng = rng if rng is not None else np.random.default_rng()
        return EmpiricalSample(self._model.draw(int(n), rng))


def _model_of(other: Empirical | EmpiricalModel) -> EmpiricalModel:
    return other.model if isinstance(other, Empirical) else other


__all__ = [
    "Empirical",
    "fit_model",
]
