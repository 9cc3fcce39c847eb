"""
Divergence Estimation
=====================

Kullback–Leibler divergence ``KL(P || Q)`` between empirical models and from an
empirical model to a reference distribution.

- Discrete/discrete: ``sum p(x) ln(p(x) / q(x))`` over the union of both
  supports with each model's smoothed probabilities (never exactly zero).
- Continuous/continuous: the k-NN estimator of Wang, Kulkarni and Verdú
  ``(1/n) sum ln(nu_k(x_i) / rho_k(x_i)) + ln(m / (n - 1))``, or the KDE form
  ``mean ln(p_{-i}(x_i) / q(x_i))``.
- Mixed kinds: no estimate (``None``), or
  :class:`~pysatl_empirical.errors.MismatchedSupportError` in strict mode.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from math import log
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy import special as _sp_special
from scipy.spatial import KDTree

from pysatl_empirical.config import get_config
from pysatl_empirical.errors import InsufficientSamplesError, MismatchedSupportError
from pysatl_empirical.estimators.bootstrap import bootstrap
from pysatl_empirical.estimators.entropy import knn_distance_floor, knn_distances
from pysatl_empirical.estimators.options import (
    AutomaticEstimator,
    KDEEstimator,
    KNNEstimator,
    resolve_estimator,
)
from pysatl_empirical.numerics import integrate_or_raise
from pysatl_empirical.types import Kind

if TYPE_CHECKING:
    import numpy.typing as npt

    from pysatl_empirical.distributions.continuous import ContinuousEmpiricalModel
    from pysatl_empirical.distributions.discrete import DiscreteEmpiricalModel
    from pysatl_empirical.distributions.distribution import EmpiricalModel
    from pysatl_empirical.estimators.bootstrap import BootstrapResult
    from pysatl_empirical.estimators.options import Estimator
    from pysatl_empirical.types import BandwidthRule, FloatArray

logger = logging.getLogger(__name__)

_TINY = np.finfo(np.float64).tiny


def discrete_kl(p: DiscreteEmpiricalModel, q: DiscreteEmpiricalModel) -> float:
    """KL divergence between two discrete models over the union of their supports."""
    tolerance = max(p.classification.tolerance, q.classification.tolerance)
    union = np.union1d(p.table.values, q.table.values)
    total = 0.0
    for x in union:
        px = p.table.probability_of(float(x), tolerance)
        qx = q.table.probability_of(float(x), tolerance)
        total += px * log(px / qx)
    return total


def _cross_knn_distances(p_data: FloatArray, q_data: FloatArray, k: int) -> FloatArray:
    """k-th neighbour distance in Q, skipping one Q point that coincides with the query."""
    size = min(k + 1, q_data.size)
    dist, _ = KDTree(q_data.reshape(-1, 1)).query(p_data.reshape(-1, 1), k=size)
    dist = np.asarray(dist, dtype=np.float64).reshape(p_data.size, -1)
    kth = dist[:, k - 1]
    if size == k:
        return kth
    return np.where(dist[:, 0] == 0.0, dist[:, k], kth)


def knn_kl(p_samples: npt.ArrayLike, q_samples: npt.ArrayLike, k: int | None = None) -> float:
    """
    Wang–Kulkarni–Verdú k-NN estimate of ``KL(P || Q)``.

    Parameters
    ----------
    p_samples, q_samples : array_like
        Observations from ``P`` (size ``n``) and ``Q`` (size ``m``).
    k : int, optional
        Neighbour order; defaults to ``config.knn_k``.

    Notes
    -----
    A ``Q`` observation equal to the query point is skipped when measuring
    ``nu_k``, the same way the query itself is skipped in ``rho_k``. Passing
    the same sample twice therefore gives ``ln(n / (n - 1))``, not a
    negative value.

    Raises
    ------
    InsufficientSamplesError
        If ``n <= k`` or ``m < k``.
    """
    p_data = np.asarray(p_samples, dtype=np.float64).ravel()
    q_data = np.asarray(q_samples, dtype=np.float64).ravel()
    k = get_config().knn_k if k is None else int(k)
    n, m = p_data.size, q_data.size
    if n <= k:
        raise InsufficientSamplesError(k + 1, n, f"k-NN divergence (P side, k={k})")
    if m < k:
        raise InsufficientSamplesError(k, m, f"k-NN divergence (Q side, k={k})")

    floor = knn_distance_floor(p_data, q_data)
    rho = np.maximum(knn_distances(p_data, k), floor)
    nu = np.maximum(_cross_knn_distances(p_data, q_data, k), floor)
    return float(np.mean(np.log(nu / rho))) + log(m / (n - 1))


def kde_kl(
    p: ContinuousEmpiricalModel,
    q: ContinuousEmpiricalModel,
    bandwidth: BandwidthRule | str | float | None = None,
) -> float:
    """
    KDE estimate ``mean ln(p_{-i}(x_i) / q(x_i))`` over the observations of ``P``.

    Raises
    ------
    InsufficientSamplesError
        If ``P`` has fewer than two observations.
    """
    p_kde = p.kde_with(bandwidth)
    q_kde = q.kde_with(bandwidth)
    if p_kde.n < 2:
        raise InsufficientSamplesError(2, p_kde.n, "KDE divergence")
    p_loo = np.maximum(p_kde.loo_pdf(), _TINY)
    q_at_p = np.maximum(q_kde.pdf(p_kde.data), _TINY)
    return float(np.mean(np.log(p_loo / q_at_p)))


def _automatic_k(n: int) -> int:
    return min(get_config().knn_k, max(1, n // 4))


def _continuous_kl(p: ContinuousEmpiricalModel, q: ContinuousEmpiricalModel, estimator: Estimator) -> float:
    match estimator:
        case KNNEstimator(k=k):
            return knn_kl(p.sample, q.sample, k)
        case KDEEstimator(bandwidth=bandwidth):
            return kde_kl(p, q, bandwidth)
        case AutomaticEstimator():
            return knn_kl(p.sample, q.sample, _automatic_k(p.sample.n))
    raise TypeError(f"Unsupported estimator {estimator!r}")


def kl_divergence(
    p: EmpiricalModel,
    q: EmpiricalModel,
    estimator: Estimator | str | None = None,
    *,
    strict: bool = False,
) -> float | None:
    """
    Estimate ``KL(P || Q)`` between two empirical models.

    Parameters
    ----------
    p, q : EmpiricalModel
        Models of the same kind.
    estimator : Estimator or str, optional
        Estimator for continuous models; automatic when omitted.
    strict : bool, default False
        Raise on mixed kinds instead of returning ``None``.

    Returns
    -------
    float or None
        Divergence in nats; ``None`` for mixed discrete/continuous inputs.

    Raises
    ------
    MismatchedSupportError
        If the kinds differ and ``strict`` is set.
    """
    variant = resolve_estimator(estimator)
    if p.kind is not q.kind:
        if strict:
            raise MismatchedSupportError(
                f"Cannot compare a {p.kind} model with a {q.kind} model."
            )
        logger.debug("KL divergence undefined for %s vs %s models", p.kind, q.kind)
        return None

    if p.kind is Kind.DISCRETE:
        return discrete_kl(p, q)  # type: ignore[arg-type]
    return _continuous_kl(p, q, variant)  # type: ignore[arg-type]


def kl_divergence_estimate(
    p: EmpiricalModel,
    q: EmpiricalModel,
    estimator: Estimator | str | None = None,
    bootstrap_samples: int = 0,
    confidence_level: float | None = None,
    *,
    strict: bool = False,
    method: str | None = None,
    seed: int | None = None,
    workers: int | None = None,
) -> BootstrapResult[float] | None:
    """
    KL divergence with a bootstrap interval obtained by resampling ``P``.

    ``Q`` is held fixed in every trial.

    Returns
    -------
    BootstrapResult[float] or None
        ``None`` when the divergence itself is undefined.
    """
    variant = resolve_estimator(estimator)
    point = kl_divergence(p, q, variant, strict=strict)
    if point is None:
        return None

    p_data = p.sample.array
    q_data = q.sample.array

    def statistic(p_drawn: FloatArray, q_drawn: FloatArray) -> float:
        if p_drawn is p_data:
            return point
        return kl_divergence(p.refit(p_drawn), q, variant)  # type: ignore[return-value]

    logger.debug("Bootstrapping KL divergence (%s) with %d trials", variant, bootstrap_samples)
    return bootstrap(
        statistic,
        p_data,
        q_data,
        resamples=bootstrap_samples,
        confidence_level=confidence_level,
        method=method,
        resample=(True, False),
        seed=seed,
        workers=workers,
    )


def _reference_density(reference: Any, discrete: bool) -> Any:
    names = ("pmf", "pdf") if discrete else ("pdf",)
    for name in names:
        func = getattr(reference, name, None)
        if callable(func):
            return func
    raise TypeError(f"Reference {reference!r} exposes none of {', '.join(names)}")


def kl_divergence_to_reference(model: EmpiricalModel, reference: Any) -> float | None:
    """
    KL divergence from an empirical model to a reference distribution.

    Parameters
    ----------
    model : EmpiricalModel
        Empirical model ``P``.
    reference : object
        Distribution ``Q`` exposing ``pmf`` (discrete models) or ``pdf``, e.g.
        a frozen :mod:`scipy.stats` distribution.

    Returns
    -------
    float or None
        Divergence in nats; ``None`` when the reference has no mass where the
        model has.

    Raises
    ------
    NumericDivergenceError
        If the integral over a continuous model does not converge.
    """
    density = _reference_density(reference, model.kind is Kind.DISCRETE)

    if model.kind is Kind.DISCRETE:
        discrete: DiscreteEmpiricalModel = model  # type: ignore[assignment]
        points = discrete.table.values
        probs = discrete.table.probabilities
        ref = np.asarray(density(points), dtype=np.float64)
        if np.any(ref <= 0.0):
            return None
        return float(np.sum(_sp_special.rel_entr(probs, ref)))

    bounds = model.support_bounds
    grid = np.linspace(bounds.left, bounds.right, get_config().mode_grid_size)
    if np.any((np.asarray(density(grid)) <= 0.0) & (np.asarray(model.pdf(grid)) > _TINY)):
        return None

    def integrand(x: float) -> float:
        return float(_sp_special.rel_entr(model.pdf(x), float(density(x))))

    return integrate_or_raise(integrand, bounds)


__all__ = [
    "discrete_kl",
    "knn_kl",
    "kde_kl",
    "kl_divergence",
    "kl_divergence_estimate",
    "kl_divergence_to_reference",
]
