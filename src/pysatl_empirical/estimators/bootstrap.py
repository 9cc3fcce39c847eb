"""
Bootstrap Confidence Intervals
==============================

Nonparametric bootstrap around an arbitrary statistic of one or more samples.

Each trial resamples every flagged sample with replacement, recomputes the
statistic and records the replicate. Trials are independent: each one owns a
generator spawned from ``numpy.random.SeedSequence(seed)``, so the replicates
are identical whatever the number of worker threads.

Intervals
---------
- ``percentile``: the ``(1 - c) / 2`` and ``1 - (1 - c) / 2`` quantiles of the
  replicates (linear interpolation).
- ``bca``: bias-corrected and accelerated percentiles. The bias correction
  comes from the share of replicates below the point estimate, the
  acceleration from a jackknife over the first resampled sample. Degenerate
  corrections fall back to the percentile interval.

The reported interval always contains the point estimate. ``resamples`` has no
enforced minimum; few replicates give wide, unreliable intervals.
"""

from __future__ import annotations

__author__ = "Leonid Elkin, Mikhail Mikhailov"
__copyright__ = "Copyright (c) 2025 PySATL project"
__license__ = "SPDX-License-Identifier: MIT"

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from scipy.stats import norm

from pysatl_empirical.config import get_config
from pysatl_empirical.errors import InsufficientSamplesError, InvalidProbabilityError
from pysatl_empirical.types import BootstrapMethod

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    import numpy.typing as npt

    from pysatl_empirical.types import FloatArray

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BootstrapResult[T]:
    """
    Point estimate with an optional bootstrap confidence interval.

    Parameters
    ----------
    point_estimate : T
        Statistic evaluated on the original data.
    confidence_interval : tuple[T, T], optional
        ``(lower, upper)``; ``None`` when no resampling was performed.
    resamples : int
        Number of bootstrap trials.
    method : BootstrapMethod
        Interval construction actually used.
    confidence_level : float
        Nominal coverage of the interval.
    replicates : numpy.ndarray
        Finite replicate values.
    """

    point_estimate: T
    confidence_interval: tuple[T, T] | None
    resamples: int
    method: BootstrapMethod
    confidence_level: float
    replicates: FloatArray = field(default_factory=lambda: np.empty(0), repr=False, compare=False)

    @property
    def value(self) -> T:
        """Alias of :attr:`point_estimate`."""
        return self.point_estimate


type EntropyEstimate = BootstrapResult[float]
"""Entropy point estimate with its bootstrap interval."""


def percentile_interval(replicates: FloatArray, confidence_level: float) -> tuple[float, float]:
    """Equal-tailed percentile interval of the replicates."""
    tail = (1.0 - confidence_level) / 2.0
    lower, upper = np.quantile(replicates, [tail, 1.0 - tail])
    return float(lower), float(upper)


def _jackknife_acceleration(
    statistic: Callable[..., float], arrays: Sequence[FloatArray], index: int
) -> float | None:
    data = arrays[index]
    n = data.size
    if n < 3:
        return None

    values = np.empty(n)
    for i in range(n):
        args = list(arrays)
        args[index] = np.delete(data, i)
        values[i] = statistic(*args)

    if not np.all(np.isfinite(values)):
        return None
    diff = values.mean() - values
    denominator = 6.0 * float(np.sum(diff**2)) ** 1.5
    if denominator < 1e-300:
        return 0.0
    return float(np.clip(np.sum(diff**3) / denominator, -0.5, 0.5))


def bca_interval(
    replicates: FloatArray,
    point_estimate: float,
    confidence_level: float,
    acceleration: float | None,
) -> tuple[float, float] | None:
    """
    Bias-corrected and accelerated interval.

    Returns
    -------
    tuple[float, float] or None
        ``None`` when the correction is degenerate (no jackknife acceleration,
        extreme bias or collapsed percentiles).
    """
    if acceleration is None:
        return None

    count = replicates.size
    share_below = float(np.mean(replicates < point_estimate))
    share_below = min(max(share_below, 1.0 / (2 * count)), 1.0 - 1.0 / (2 * count))
    z0 = float(norm.ppf(share_below))
    if not np.isfinite(z0) or abs(z0) > 3.0:
        return None

    tail = (1.0 - confidence_level) / 2.0
    levels = []
    for z_alpha in (norm.ppf(tail), norm.ppf(1.0 - tail)):
        shifted = z0 + z_alpha
        denominator = 1.0 - acceleration * shifted
        if abs(denominator) < 1e-10:
            return None
        levels.append(float(norm.cdf(z0 + shifted / denominator)))

    low_level, high_level = np.clip(levels, 0.0, 1.0)
    if low_level >= high_level:
        return None
    lower, upper = np.quantile(replicates, [low_level, high_level])
    return float(lower), float(upper)


def bootstrap(
    statistic: Callable[..., float],
    *samples: npt.ArrayLike,
    resamples: int | None = None,
    confidence_level: float | None = None,
    method: BootstrapMethod | str | None = None,
    resample: bool | Sequence[bool] = True,
    seed: int | np.random.SeedSequence | None = None,
    workers: int | None = None,
) -> BootstrapResult[float]:
    """
    Bootstrap a statistic of one or more samples.

    Parameters
    ----------
    statistic : Callable[..., float]
        Function of the samples (one positional array per sample).
    *samples : array_like
        Original observations.
    resamples : int, optional
        Number of trials; ``<= 0`` skips resampling. Defaults to
        ``config.bootstrap_resamples``.
    confidence_level : float, optional
        Coverage in ``(0, 1)``; defaults to ``config.confidence_level``.
    method : BootstrapMethod or str, optional
        ``"percentile"`` or ``"bca"``; defaults to ``config.bootstrap_method``.
    resample : bool or Sequence[bool], default True
        Which samples are resampled in each trial; the others are passed
        unchanged.
    seed : int or numpy.random.SeedSequence, optional
        Root seed of the per-trial generators.
    workers : int, optional
        Threads running the trials; defaults to ``config.workers``.

    Returns
    -------
    BootstrapResult[float]
        Point estimate on the original samples and the interval.

    Raises
    ------
    InvalidProbabilityError
        If ``confidence_level`` is not in ``(0, 1)``.
    InsufficientSamplesError
        If a resampled sample has fewer than two observations.
    """
    config = get_config()
    resamples = config.bootstrap_resamples if resamples is None else int(resamples)
    level = config.confidence_level if confidence_level is None else float(confidence_level)
    method = BootstrapMethod(method or config.bootstrap_method)
    workers = config.workers if workers is None else int(workers)

    if not 0.0 < level < 1.0:
        raise InvalidProbabilityError("confidence_level", level, "(0, 1)")
    if not samples:
        raise TypeError("bootstrap() requires at least one sample")

    arrays = [np.asarray(s, dtype=np.float64) for s in samples]
    flags = [resample] * len(arrays) if isinstance(resample, bool) else list(resample)
    if len(flags) != len(arrays):
        raise ValueError("resample flags must match the number of samples")

    point = float(statistic(*arrays))
    if resamples <= 0:
        return BootstrapResult(point, None, 0, method, level)

    for data, flag in zip(arrays, flags, strict=True):
        if flag and data.size < 2:
            raise InsufficientSamplesError(2, int(data.size), "Bootstrap resampling")

    def _trial(seq: np.random.SeedSequence) -> float:
        rng = np.random.default_rng(seq)
        drawn = [
            rng.choice(data, size=data.size, replace=True) if flag else data
            for data, flag in zip(arrays, flags, strict=True)
        ]
        return float(statistic(*drawn))

    root = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    sequences = root.spawn(resamples)
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            values = list(executor.map(_trial, sequences))
    else:
        values = [_trial(seq) for seq in sequences]

    replicates = np.asarray(values, dtype=np.float64)
    finite = replicates[np.isfinite(replicates)]
    if finite.size < replicates.size:
        logger.debug("Discarded %d non-finite bootstrap replicates", replicates.size - finite.size)

    if finite.size == 0:
        lower, upper = point, point
    else:
        interval = None
        if method is BootstrapMethod.BCA:
            first = flags.index(True) if True in flags else 0
            acceleration = _jackknife_acceleration(statistic, arrays, first)
            interval = bca_interval(finite, point, level, acceleration)
            if interval is None:
                logger.debug("BCa correction degenerate; using percentile interval")
                method = BootstrapMethod.PERCENTILE
        lower, upper = interval or percentile_interval(finite, level)

    logger.debug(
        "Bootstrap (%s, %d trials, level %g): point=%g interval=[%g, %g]",
        method,
        resamples,
        level,
        point,
        lower,
        upper,
    )
    return BootstrapResult(
        point_estimate=point,
        confidence_interval=(min(lower, point), max(upper, point)),
        resamples=resamples,
        method=method,
        confidence_level=level,
        replicates=finite,
    )


__all__ = [
    "BootstrapResult",
    "EntropyEstimate",
    "bootstrap",
    "percentile_interval",
    "bca_interval",
]
