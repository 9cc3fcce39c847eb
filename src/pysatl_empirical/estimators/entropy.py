"""
Entropy Estimation
==================

Entropy estimators for empirical models.

- :func:`discrete_entropy` — smoothed Shannon entropy with the Miller–Madow
  bias correction ``(U - 1) / (2n)``.
- :func:`knn_entropy` — Kozachenko–Leonenko estimator
  ``ln(n - 1) - psi(k) + ln 2 + mean(ln eps_i)``, where ``eps_i`` is the
  distance from observation ``i`` to its k-th nearest neighbour.
- :func:`kde_entropy` — plug-in ``-integral f ln f`` of the Gaussian KDE over
  its effective support.
- :func:`kde_loo_entropy` — resubstitution ``-mean(ln f_{-i}(x_i))`` with
  leave-one-out densities.
- :func:`estimate_entropy` — dispatch by model kind and estimator variant,
  optionally with a bootstrap confidence interval.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from math import log
from typing import TYPE_CHECKING

import numpy as np
from scipy import special as _sp_special
from scipy.spatial import KDTree

from pysatl_empirical.config import get_config
from pysatl_empirical.errors import InsufficientSamplesError, NumericDivergenceError
from pysatl_empirical.estimators.bootstrap import bootstrap
from pysatl_empirical.estimators.options import (
    AutomaticEstimator,
    KDEEstimator,
    KNNEstimator,
    resolve_estimator,
)
from pysatl_empirical.numerics import digamma, integrate
from pysatl_empirical.types import Kind

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_empirical.distributions.continuous import ContinuousEmpiricalModel
    from pysatl_empirical.distributions.discrete import FrequencyTable
    from pysatl_empirical.distributions.distribution import EmpiricalModel
    from pysatl_empirical.estimators.bootstrap import EntropyEstimate
    from pysatl_empirical.estimators.options import Estimator
    from pysatl_empirical.types import BandwidthRule, FloatArray

logger = logging.getLogger(__name__)

_TINY = np.finfo(np.float64).tiny


def discrete_entropy(table: FrequencyTable) -> float:
    """
    Smoothed Shannon entropy of a frequency table.

    Parameters
    ----------
    table : FrequencyTable
        Smoothed frequencies.

    Returns
    -------
    float
        ``-sum p ln p + (U - 1) / (2n)`` in nats.
    """
    probs = table.probabilities
    plug_in = -float(np.sum(probs * np.log(probs)))
    return plug_in + (table.unique_count - 1) / (2.0 * table.n)


def knn_distances(data: npt.ArrayLike, k: int, reference: npt.ArrayLike | None = None) -> FloatArray:
    """
    Distances to the k-th nearest neighbour.

    Parameters
    ----------
    data : array_like
        Query points.
    k : int
        Neighbour order.
    reference : array_like, optional
        Points searched for neighbours. When omitted, neighbours are searched
        in ``data`` itself, excluding each query point.

    Returns
    -------
    numpy.ndarray
        Distance of each query point to its k-th neighbour.
    """
    points = np.asarray(data, dtype=np.float64).reshape(-1, 1)
    if reference is None:
        dist, _ = KDTree(points).query(points, k=k + 1)
        return np.asarray(dist, dtype=np.float64).reshape(points.shape[0], -1)[:, k]

    ref = np.asarray(reference, dtype=np.float64).reshape(-1, 1)
    dist, _ = KDTree(ref).query(points, k=k)
    return np.asarray(dist, dtype=np.float64).reshape(points.shape[0], -1)[:, k - 1]


def knn_distance_floor(*arrays: FloatArray) -> float:
    joined = np.concatenate([np.ravel(a) for a in arrays])
    return max(1e-12 * float(np.ptp(joined)), _TINY)


def knn_entropy(samples: npt.ArrayLike, k: int | None = None) -> float:
    """
    Kozachenko–Leonenko entropy estimate of a scalar sample.

    Parameters
    ----------
    samples : array_like
        Observations.
    k : int, optional
        Neighbour order; defaults to ``config.knn_k``.

    Returns
    -------
    float
        Differential entropy in nats.

    Raises
    ------
    InsufficientSamplesError
        If ``n <= k``.

    Notes
    -----
    Zero distances (tied observations) are floored at ``1e-12`` times the
    sample range.
    """
    data = np.asarray(samples, dtype=np.float64).ravel()
    k = get_config().knn_k if k is None else int(k)
    n = data.size
    if n <= k:
        raise InsufficientSamplesError(k + 1, n, f"k-NN entropy with k={k}")

    eps = np.maximum(knn_distances(data, k), knn_distance_floor(data))
    return log(n - 1) - digamma(k) + log(2.0) + float(np.mean(np.log(eps)))


def kde_entropy(
    model: ContinuousEmpiricalModel,
    bandwidth: BandwidthRule | str | float | None = None,
) -> float:
    """
    Plug-in entropy ``-integral f ln f`` of the kernel density estimate.

    Parameters
    ----------
    model : ContinuousEmpiricalModel
        Model whose sample defines the density.
    bandwidth : BandwidthRule, str or float, optional
        Bandwidth override; the model's own KDE when omitted.

    Returns
    -------
    float
        Differential entropy in nats.

    Raises
    ------
    NumericDivergenceError
        If the integral does not converge.
    """
    kde = model.kde_with(bandwidth)
    config = model.config
    support = kde.effective_support(config.support_extension)

    def integrand(x: float) -> float:
        return float(_sp_special.entr(kde.pdf(x)))

    result = integrate(
        integrand, support, rule=config.integration_rule, limit=config.integration_limit
    )
    if not result.converged:
        raise NumericDivergenceError(
            "KDE entropy integral did not converge",
            diagnostics={"abserr": result.abserr, **result.diagnostics},
        )
    return result.value


def kde_loo_entropy(
    model: ContinuousEmpiricalModel,
    bandwidth: BandwidthRule | str | float | None = None,
) -> float:
    """
    Resubstitution entropy ``-mean(ln f_{-i}(x_i))`` with leave-one-out densities.

    Returns ``0`` for a single observation.
    """
    kde = model.kde_with(bandwidth)
    if kde.n < 2:
        return 0.0
    return -float(np.mean(np.log(np.maximum(kde.loo_pdf(), _TINY))))


def entropy_of(model: EmpiricalModel, estimator: Estimator) -> float:
    """
    Entropy of a model with the given estimator variant.

    Discrete models always use :func:`discrete_entropy`; the variant only
    affects continuous models.
    """
    if model.kind is Kind.DISCRETE:
        return model.entropy

    continuous: ContinuousEmpiricalModel = model  # type: ignore[assignment]
    match estimator:
        case KNNEstimator(k=k):
            return knn_entropy(continuous.sample, k)
        case KDEEstimator(bandwidth=bandwidth):
            return kde_entropy(continuous, bandwidth)
        case AutomaticEstimator():
            return continuous.entropy
    raise TypeError(f"Unsupported estimator {estimator!r}")


def estimate_entropy(
    model: EmpiricalModel,
    estimator: Estimator | str | None = None,
    bootstrap_samples: int = 0,
    confidence_level: float | None = None,
    *,
    method: str | None = None,
    seed: int | None = None,
    workers: int | None = None,
) -> EntropyEstimate:
    """
    Estimate the entropy of a model, optionally with a bootstrap interval.

    Parameters
    ----------
    model : EmpiricalModel
        Discrete or continuous empirical model.
    estimator : Estimator or str, optional
        Estimator variant or alias; automatic selection when omitted.
    bootstrap_samples : int, default 0
        Number of bootstrap trials; ``0`` returns the point estimate only.
    confidence_level : float, optional
        Interval coverage; defaults to ``config.confidence_level``.
    method : str, optional
        ``"percentile"`` or ``"bca"``.
    seed : int, optional
        Root seed for the trials.
    workers : int, optional
        Threads running the trials.

    Returns
    -------
    EntropyEstimate
        Point estimate (on the original sample) and optional interval.
    """
    variant = resolve_estimator(estimator)
    original = model.sample.array

    def statistic(data: FloatArray) -> float:
        if data is original:
            return entropy_of(model, variant)
        return entropy_of(model.refit(data), variant)

    logger.debug("Bootstrapping entropy (%s) with %d trials", variant, bootstrap_samples)
    return bootstrap(
        statistic,
        original,
        resamples=bootstrap_samples,
        confidence_level=confidence_level,
        method=method,
        seed=seed,
        workers=workers,
    )


__all__ = [
    "discrete_entropy",
    "knn_distances",
    "knn_entropy",
    "kde_entropy",
    "kde_loo_entropy",
    "entropy_of",
    "estimate_entropy",
]
